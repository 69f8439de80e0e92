from __future__ import annotations

import logging
from typing import Any

import pytest

from draftkit.constants import ENTITY_PLACEHOLDER
from draftkit.convert.block_type import build_block_type_map, disambiguate
from draftkit.convert.builder import (
    BlockConfig,
    ContentBlocksBuilder,
    ConvertedBlocks,
    _leading_trim_length,
    _WalkContext,
)
from draftkit.convert.dom import TextNode
from draftkit.model.block_render_map import DEFAULT_BLOCK_RENDER_MAP
from draftkit.model.character_metadata import CharacterMetadata
from draftkit.model.content_block import ContentBlockNode

from test_draftkit.unit_utils import LogCaptureFixture, MockerFixture, body

LINK = CharacterMetadata.create(entity="1")
EMPTY = CharacterMetadata.EMPTY


def new_builder(**kwargs: Any) -> ContentBlocksBuilder:
    return ContentBlocksBuilder(
        build_block_type_map(DEFAULT_BLOCK_RENDER_MAP), disambiguate, **kwargs
    )


def convert(html: str, **kwargs: Any) -> ConvertedBlocks:
    return new_builder(**kwargs).add_dom_node(body(html)).get_content_blocks()


class DescribeContentBlocksBuilder:
    """Unit-test suite for `draftkit.convert.builder.ContentBlocksBuilder`."""

    # -- text --

    @pytest.mark.parametrize(
        ("text", "expected_value"),
        [
            ("\n   \n", " "),
            ("   ", " "),
            ("\nfoo\nbar", "foo bar"),
            ("foo\n\nbar", "foo  bar"),
            ("  foo  ", "  foo  "),
        ],
    )
    def it_normalizes_the_newlines_of_text_outside_code(self, text: str, expected_value: str):
        builder = new_builder()

        builder._add_text_node(TextNode(text), _WalkContext())

        assert builder._current_text == expected_value
        assert builder._character_list == [EMPTY] * len(expected_value)

    @pytest.mark.parametrize(
        "context", [_WalkContext(wrapper="pre"), _WalkContext(is_code_block=True)]
    )
    def but_it_keeps_text_in_code_as_is(self, context: _WalkContext):
        builder = new_builder()

        builder._add_text_node(TextNode("\n  a\n   \n"), context)

        assert builder._current_text == "\n  a\n   \n"

    def it_applies_the_style_and_entity_in_context_to_appended_text(self):
        builder = new_builder()

        builder._append_text("ab", _WalkContext(style=("BOLD",), entity="2"))

        assert builder._character_list == [CharacterMetadata.create(["BOLD"], "2")] * 2

    # -- trimming --

    @pytest.mark.parametrize(
        ("context", "text", "expected_value"),
        [
            (_WalkContext(), "  a b  ", "a b"),
            (_WalkContext(), " \n ", ""),
            (_WalkContext(wrapper="pre"), "  a b \n", "  a b"),
            (_WalkContext(is_code_block=True), "\n a", "\n a"),
        ],
    )
    def it_trims_the_text_buffer(self, context: _WalkContext, text: str, expected_value: str):
        builder = new_builder()
        builder._append_text(text, context)

        builder._trim_current_text(context)

        assert builder._current_text == expected_value
        assert len(builder._character_list) == len(expected_value)

    def and_trimming_is_idempotent(self):
        builder = new_builder()
        builder._append_text("  a  ", _WalkContext())
        builder._append_text(" ", _WalkContext(entity="1"))
        builder._append_text("  ", _WalkContext())

        builder._trim_current_text(_WalkContext())
        once = (builder._current_text, list(builder._character_list))
        builder._trim_current_text(_WalkContext())

        assert (builder._current_text, builder._character_list) == once

    def but_it_never_trims_a_character_carrying_an_entity(self):
        builder = new_builder()
        builder._append_text(" ", _WalkContext())
        builder._append_text(" ", _WalkContext(entity="1"))
        builder._append_text(" ", _WalkContext())

        builder._trim_current_text(_WalkContext())

        assert builder._current_text == " "
        assert builder._character_list == [LINK]

    @pytest.mark.parametrize(
        ("text", "character_list", "expected_value"),
        [
            ("abc", [EMPTY] * 3, 0),
            ("  abc", [EMPTY] * 5, 2),
            (f" {ENTITY_PLACEHOLDER} x", [EMPTY] * 4, 3),
            (f"{ENTITY_PLACEHOLDER} x", [EMPTY] * 3, 0),
            (f" {ENTITY_PLACEHOLDER}", [EMPTY, LINK], 1),
            (" x", [LINK, EMPTY], 0),
            ("", [], 0),
        ],
    )
    def it_computes_the_leading_trim_of_a_block(
        self, text: str, character_list: list[CharacterMetadata], expected_value: int
    ):
        assert _leading_trim_length(text, character_list) == expected_value

    def it_trims_leading_whitespace_from_blocks_other_than_code_blocks(self):
        child = BlockConfig(key="c", text="  child", character_list=[EMPTY] * 7)
        code = BlockConfig(key="d", type="code-block", text="  code", character_list=[EMPTY] * 6)
        parent = BlockConfig(
            key="p", text=" parent", character_list=[EMPTY] * 7, child_configs=[child, code]
        )

        (trimmed,) = new_builder()._trim_block_configs([parent], is_code_block=False)

        trimmed_child, trimmed_code = trimmed.child_configs
        assert trimmed.text == "parent"
        assert [trimmed_child.text, trimmed_code.text] == ["child", "  code"]
        assert len(trimmed_child.character_list) == 5
        assert parent.text == " parent"

    def but_it_leaves_every_block_alone_inside_a_code_block(self):
        block_config = BlockConfig(key="c", text="  x", character_list=[EMPTY] * 3)

        assert new_builder()._trim_block_configs([block_config], is_code_block=True) == [
            block_config
        ]

    # -- blocks --

    def it_splits_a_flushed_buffer_into_a_block_per_line(self):
        builder = new_builder()
        builder._append_text("a\n\nb", _WalkContext(depth=2))

        block_configs = builder._make_block_list_from_current_text(
            _WalkContext(depth=2), "unstyled"
        )

        assert [c.text for c in block_configs] == ["a", "", "b"]
        assert all(c.depth == 2 for c in block_configs)
        assert builder._current_text == ""
        assert builder._character_list == []

    def it_keeps_inline_text_and_styles(self):
        blocks = convert("<p>Hello <b>world</b></p>").content_blocks

        assert len(blocks) == 1
        assert blocks[0].type == "unstyled"
        assert blocks[0].text == "Hello world"
        assert list(blocks[0].find_style_ranges("BOLD")) == [(6, 11)]

    def it_turns_list_items_into_sibling_blocks(self):
        blocks = convert("<ul><li>A</li><li>B</li></ul>").content_blocks

        assert [(b.type, b.text, b.depth) for b in blocks] == [
            ("multi-ul", "A", 0),
            ("multi-ul", "B", 0),
        ]

    @pytest.mark.parametrize(
        ("classes", "expected_value"), [("depth2", 2), ("public-DraftStyleDefault-depth3", 3)]
    )
    def it_reads_the_depth_of_a_list_item_from_its_classes(self, classes: str, expected_value: int):
        blocks = convert(f'<ul><li class="{classes}">x</li></ul>').content_blocks

        assert blocks[0].depth == expected_value

    def it_splits_inline_text_before_a_block_into_blocks_per_line(self):
        blocks = convert("<div>a<br>b<p>c</p></div>").content_blocks

        assert [b.text for b in blocks] == ["a", "b", "c"]

    def it_keeps_a_line_break_inside_a_block_as_a_soft_newline(self):
        blocks = convert("<p>a<br>b</p>").content_blocks

        assert [b.text for b in blocks] == ["a\nb"]

    def it_skips_editor_chrome(self, caplog: LogCaptureFixture):
        with caplog.at_level(logging.DEBUG, logger="draftkit"):
            blocks = convert(
                '<div><div class="brick-code-block-toolbar">Copy</div><p>x</p></div>'
            ).content_blocks

        assert [b.text for b in blocks] == ["x"]
        assert "skipping <div> node" in caplog.text

    # -- code --

    def it_splits_a_pre_into_code_lines(self):
        blocks = convert("<pre>line1\n  line2</pre>").content_blocks

        assert [(b.type, b.text) for b in blocks] == [("code-block", "line1\n  line2")]

    @pytest.mark.parametrize(
        ("attrs", "expected_value"), [("", "unstyled"), (' yne-bulb-block="code"', "code-block")]
    )
    def it_types_the_lines_of_a_pre_wrap_block(self, attrs: str, expected_value: str):
        blocks = convert(f'<div style="white-space: pre-wrap"{attrs}>a\nb</div>').content_blocks

        assert [(b.type, b.text) for b in blocks] == [(expected_value, "a"), (expected_value, "b")]

    def it_turns_monospace_blocks_into_code_blocks(self):
        blocks = convert(
            '<div style="font-family: Consolas, monospace"><div>a</div><div>  b</div></div>'
        ).content_blocks

        assert [(b.type, b.text) for b in blocks] == [("code-block", "a"), ("code-block", "  b")]

    def it_marks_monospace_inline_text_as_code(self):
        blocks = convert('<p>a <span style="font-family: monospace">b</span></p>').content_blocks

        assert list(blocks[0].find_style_ranges("CODE")) == [(2, 3)]

    def it_keeps_the_newlines_of_a_monospace_pre_that_is_not_a_block_type(self):
        builder = ContentBlocksBuilder(
            build_block_type_map({"unstyled": {"element": "div"}}), disambiguate
        )

        blocks = (
            builder.add_dom_node(body('<div><pre style="font-family: monospace">a\nb</pre></div>'))
            .get_content_blocks()
            .content_blocks
        )

        assert [b.text for b in blocks] == ["a\nb"]
        assert list(blocks[0].find_style_ranges("CODE")) == [(0, 3)]

    # -- entities --

    def it_creates_a_link_entity_for_the_text_of_an_anchor(self, caplog: LogCaptureFixture):
        with caplog.at_level(logging.DEBUG, logger="draftkit"):
            converted = convert('<p>go <a href="HTTPS://Example.com">here</a></p>')

        block = converted.content_blocks[0]
        assert block.text == "go here"
        assert [block.get_entity_at(i) for i in range(len(block.text))] == [None] * 3 + ["1"] * 4
        entity = converted.entity_map["1"]
        assert (entity.type, entity.mutability) == ("LINK", "MUTABLE")
        assert entity.data["url"] == "https://example.com/"
        assert "created LINK entity 1" in caplog.text

    def it_keeps_the_link_entity_around_an_image_inside_the_anchor(self):
        converted = convert('<p><a href="https://a.com">x<img src="i.png">y</a></p>')

        block = converted.content_blocks[0]
        assert block.text == f"x{ENTITY_PLACEHOLDER}y"
        assert [block.get_entity_at(i) for i in range(3)] == ["1", "2", "1"]
        assert converted.entity_map["2"].type == "IMAGE"

    def it_treats_an_anchor_without_a_usable_href_as_inline_text(self):
        converted = convert('<p><a href="javascript:alert(1)">x</a></p>')

        assert converted.content_blocks[0].text == "x"
        assert len(converted.entity_map) == 0

    def it_anchors_a_file_attachment_with_a_placeholder(self):
        converted = convert(
            '<p><span title="file-entity" data-bucketname="b" data-objectkey="k"'
            ' data-name="a.pdf">a.pdf</span></p>'
        )

        block = converted.content_blocks[0]
        assert block.text == ENTITY_PLACEHOLDER
        assert block.get_entity_at(0) == "1"
        assert converted.entity_map["1"].type == "FILE"
        assert converted.entity_map["1"].mutability == "IMMUTABLE"

    def it_pads_atomic_blocks_at_the_edges_of_the_document(self):
        converted = convert('<figure><img src="a.png"></figure>')

        assert [(b.type, b.text) for b in converted.content_blocks] == [
            ("unstyled", ""),
            ("atomic", ENTITY_PLACEHOLDER),
            ("unstyled", ""),
        ]
        assert converted.content_blocks[1].get_entity_at(0) == "1"

    def it_creates_one_entity_per_recognized_node(self):
        converted = convert(
            '<p><a href="https://a.com">a</a><img src="1.png"><img src="2.png"><img></p>'
        )

        assert list(converted.entity_map) == ["1", "2", "3"]

    # -- flat and tree modes --

    def it_merges_descendants_into_their_root_block_in_flat_mode(self):
        blocks = convert("<blockquote><h2>one</h2><p>two</p></blockquote>").content_blocks

        assert [(b.type, b.text) for b in blocks] == [("blockquote", "one\ntwo")]
        assert all(len(b.text) == len(b.character_list) for b in blocks)

    def it_hoists_the_children_of_empty_unstyled_containers_in_flat_mode(self):
        blocks = convert("<div><div><h1>a</h1></div><p>b</p></div>").content_blocks

        assert [(b.type, b.text) for b in blocks] == [("header-one", "a"), ("unstyled", "b")]

    def it_links_blocks_into_a_tree_in_tree_mode(self):
        blocks = convert(
            "<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>", tree_data_support=True
        ).content_blocks

        assert all(isinstance(b, ContentBlockNode) for b in blocks)
        li_a, text_a, li_b, li_c = blocks
        assert isinstance(li_a, ContentBlockNode)
        assert isinstance(li_b, ContentBlockNode)
        assert isinstance(li_c, ContentBlockNode)
        assert (text_a.text, li_b.text, li_c.text) == ("a", "b", "c")
        assert li_a.children == (text_a.key, li_b.key)
        assert li_b.parent == li_a.key
        assert li_b.depth == 1
        assert li_a.next_sibling == li_c.key
        assert li_c.prev_sibling == li_a.key
        assert li_c.parent is None

    def it_caches_the_content_blocks_until_another_node_is_added(self):
        builder = new_builder().add_dom_node(body("<p>a</p>"))

        first = builder.get_content_blocks()
        second = builder.get_content_blocks()
        builder.add_dom_node(body("<p>b</p>"))
        third = builder.get_content_blocks()

        assert first.content_blocks == second.content_blocks
        assert [b.text for b in third.content_blocks] == ["a", "b"]

    def it_can_be_cleared_for_reuse(self):
        builder = new_builder().add_dom_node(body('<p><img src="a.png"></p>'))

        builder.clear()

        assert builder.get_content_blocks() == ConvertedBlocks([], builder._entity_map)
        assert len(builder._entity_map) == 0

    def it_keeps_block_keys_unique_within_one_conversion(self):
        builder = new_builder().add_dom_node(body("<p>a</p><p>b</p><ul><li>c</li></ul>"))

        keys = [b.key for b in builder.get_content_blocks().content_blocks]

        assert len(set(keys)) == len(keys) == 3
        assert set(keys) <= builder._seen_keys

    def and_it_forgets_the_keys_it_handed_out_when_cleared(self):
        builder = new_builder().add_dom_node(body("<p>a</p>"))

        builder.clear()

        assert builder._seen_keys == set()

    # -- table cells --

    def it_converts_the_editor_root_of_a_table_cell_with_its_own_settings(
        self, mocker: MockerFixture
    ):
        convert_from_html = mocker.patch(
            "draftkit.convert.convert.convert_from_html_to_content_blocks", return_value=None
        )
        cell = body(
            '<table><tr><td class="brick-table-td">'
            '<div class="DraftEditor-root">x</div></td></tr></table>'
        ).find_by_class("brick-table-td")[0]
        builder = new_builder(custom_style_map={"color-red"}, tree_data_support=True)

        editor_state = builder._cell_editor_state(cell)

        convert_from_html.assert_called_once_with(
            '<div class="DraftEditor-root">x</div>',
            block_render_map=DEFAULT_BLOCK_RENDER_MAP,
            custom_style_map={"color-red"},
            tree_data_support=True,
        )
        assert [b["text"] for b in editor_state["blocks"]] == [""]

    def and_it_converts_the_cell_markup_itself_when_there_is_no_editor_root(
        self, mocker: MockerFixture
    ):
        convert_from_html = mocker.patch(
            "draftkit.convert.convert.convert_from_html_to_content_blocks", return_value=None
        )
        cell = body('<table><tr><td class="brick-table-td">a<b>b</b></td></tr></table>')
        builder = new_builder()

        builder._cell_editor_state(cell.find_by_class("brick-table-td")[0])

        assert convert_from_html.call_args.args == ("a<b>b</b>",)

    def but_it_skips_conversion_for_a_missing_cell(self, mocker: MockerFixture):
        convert_from_html = mocker.patch(
            "draftkit.convert.convert.convert_from_html_to_content_blocks"
        )

        editor_state = new_builder()._cell_editor_state(None)

        convert_from_html.assert_not_called()
        assert [b["text"] for b in editor_state["blocks"]] == [""]
