import pytest

from draftkit.convert.block_type import build_block_type_map
from draftkit.convert.dom import TextNode
from draftkit.convert.nodes import (
    NodeKind,
    classify_node,
    is_list_node,
    is_valid_file,
    is_valid_table,
)
from draftkit.model.block_render_map import DEFAULT_BLOCK_RENDER_MAP

from test_draftkit.unit_utils import body

BLOCK_TYPE_MAP = build_block_type_map(DEFAULT_BLOCK_RENDER_MAP)

FILE_HTML = '<span title="file-entity" data-bucketname="b" data-objectkey="k">f</span>'
TABLE_HTML = '<table><tr><td class="brick-table-td">c</td></tr></table>'


def test_is_list_node_recognizes_ul_and_ol():
    assert is_list_node("ul")
    assert is_list_node("ol")
    assert not is_list_node("li")
    assert not is_list_node(None)  # type: ignore


@pytest.mark.parametrize(
    ("html", "expected_value"),
    [
        (FILE_HTML, True),
        ('<span title="file-entity" data-bucketname="b">f</span>', False),
        ('<span data-bucketname="b" data-objectkey="k">f</span>', False),
    ],
)
def test_is_valid_file_requires_the_title_and_storage_location(html: str, expected_value: bool):
    assert is_valid_file(body(f"<p>{html}</p>")[0][0]) is expected_value


def test_is_valid_table_requires_an_editor_cell():
    assert is_valid_table(body(TABLE_HTML)[0])
    assert not is_valid_table(body("<table><tr><td>c</td></tr></table>")[0])


class DescribeClassifyNode:
    """Unit-test suite for `draftkit.convert.nodes.classify_node()`."""

    def it_classifies_a_text_node(self):
        assert classify_node(TextNode("x"), BLOCK_TYPE_MAP) is NodeKind.TEXT

    def it_classifies_the_body_as_a_container(self):
        assert classify_node(body("<p>x</p>"), BLOCK_TYPE_MAP) is NodeKind.CONTAINER

    @pytest.mark.parametrize(
        ("html", "expected_value"),
        [
            ("<ul><li>x</li></ul>", NodeKind.CONTAINER),
            ("<ol><li>x</li></ol>", NodeKind.CONTAINER),
            ('<div class="brick-code-block-toolbar">copy</div>', NodeKind.SKIPPED),
            ('<p class="not-display-enter">x</p>', NodeKind.SKIPPED),
            ("<p>x</p>", NodeKind.BLOCK),
            ("<h2>x</h2>", NodeKind.BLOCK),
            ("<blockquote>x</blockquote>", NodeKind.BLOCK),
            ("<br>", NodeKind.BREAK),
            (FILE_HTML, NodeKind.FILE),
            (TABLE_HTML, NodeKind.TABLE),
            ("<table><tr><td>c</td></tr></table>", NodeKind.INLINE),
            ('<img src="a.png">', NodeKind.IMAGE),
            ("<img>", NodeKind.INLINE),
            ('<a href="https://example.com">x</a>', NodeKind.ANCHOR),
            ('<a href="javascript:void(0)">x</a>', NodeKind.INLINE),
            ("<span>x</span>", NodeKind.INLINE),
            ("<b>x</b>", NodeKind.INLINE),
        ],
    )
    def it_classifies_an_element(self, html: str, expected_value: NodeKind):
        assert classify_node(body(html)[0], BLOCK_TYPE_MAP) is expected_value

    def it_skips_editor_chrome_even_when_its_tag_is_a_block_type(self):
        assert (
            classify_node(body('<pre class="brick-code-block-toolbar">x</pre>')[0], BLOCK_TYPE_MAP)
            is NodeKind.SKIPPED
        )
