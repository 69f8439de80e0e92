from draftkit.model.content_state import ContentState
from draftkit.model.entity import EntityMap

from test_draftkit.unit_utils import block


class DescribeContentState:
    """Unit-test suite for `draftkit.model.content_state.ContentState`."""

    def it_can_be_created_from_an_array_of_blocks(self):
        entity_map, _ = EntityMap().create("LINK", "MUTABLE")
        blocks = [block("a", "one"), block("b", "two")]

        content_state = ContentState.create_from_block_array(blocks, entity_map)

        assert content_state.blocks_as_array() == blocks
        assert content_state.entity_map is entity_map
        assert content_state.selection_after is not None
        assert content_state.selection_after.anchor_key == "a"

    def it_can_be_created_from_text(self):
        content_state = ContentState.create_from_text("one\ntwo")

        assert [b.text for b in content_state.blocks_as_array()] == ["one", "two"]
        assert content_state.get_plain_text() == "one\ntwo"

    def it_finds_blocks_by_key_and_position(self):
        content_state = ContentState.create_from_block_array([block("a", "1"), block("b", "2")])

        assert content_state.get_block_index("b") == 1
        assert content_state.get_block_index("zz") == -1
        assert content_state.get_block_for_key("zz") is None
        assert content_state.get_first_block() == block("a", "1")
        assert content_state.get_last_block() == block("b", "2")

    def it_knows_whether_it_has_text(self):
        assert not ContentState.create_from_text("").has_text()
        assert ContentState.create_from_text("x").has_text()
        assert ContentState.create_from_text("\n").has_text()

    def it_has_a_read_only_block_map(self):
        content_state = ContentState.create_from_text("x")

        try:
            content_state.block_map["new"] = block("new", "")  # type: ignore
        except TypeError:
            pass
        else:
            raise AssertionError("block_map accepted assignment")
