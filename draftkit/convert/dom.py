# pyright: reportPrivateUsage=false

"""Provides the HTML parser and DOM-like element classes used by the HTML converter.

The converter was designed against the browser DOM, where a node has a list of child nodes that
interleaves element nodes and text nodes. `lxml` models text differently:

- An element can have _text_, the text before its first child element.
- An element can have a _tail_, the text after its closing tag and before its next sibling.

Consider:
  ```html
  <p>Text <b>bold child</b> tail of child</p>
  ```
  - `p.text` is "Text ".
  - `b.text` is "bold child" and `b.tail` is " tail of child".

`HtmlElement.child_nodes` restores the DOM view, producing `TextNode("Text ")`, the `<b>` element
and `TextNode(" tail of child")` for the `<p>` above.

Like the browser DOM, a few elements get their own element class (`<a>`, `<img>`, `<table>`,
`<td>`). The `lxml` parser is told to instantiate those classes for those tags and `HtmlElement`
for any other tag, so the capability of a node ("is this a usable link?") can be asked of the node
itself.
"""

from __future__ import annotations

from html import escape
from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple, Optional, Union, cast
from urllib.parse import urlsplit, urlunsplit

from lxml import etree
from typing_extensions import TypeAlias

from draftkit.constants import LINK_SCHEMES
from draftkit.logger import logger

# ------------------------------------------------------------------------------------------------
# DOMAIN MODEL
# ------------------------------------------------------------------------------------------------


class TextNode(NamedTuple):
    """A run of text between element tags, the text or tail of an `lxml` element."""

    text: str

    @property
    def node_name(self) -> str:
        return "#text"


def _camel_case(name: str) -> str:
    """`"bucket-name"` -> `"bucketName"`, the way the DOM forms `dataset` keys."""
    head, *rest = name.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_inline_style(style_attribute: str) -> Mapping[str, str]:
    """Map of CSS property-name to value for the declarations in a `style` attribute.

    Property names are lower-cased. Values are stripped of whitespace and any `!important`.
    Declarations without a colon or without a value are skipped and a later declaration of the
    same property replaces an earlier one, like a browser does. No other validation is attempted.
    """
    declarations: dict[str, str] = {}
    for declaration in style_attribute.split(";"):
        name, sep, value = declaration.partition(":")
        name = name.strip().lower()
        value = value.replace("!important", "").strip()
        if not sep or not name or not value:
            continue
        declarations[name] = value
    return MappingProxyType(declarations)


# ------------------------------------------------------------------------------------------------
# CUSTOM ELEMENT-CLASSES
# ------------------------------------------------------------------------------------------------


class HtmlElement(etree.ElementBase):
    """Base and default class for all elements, provides the DOM-like surface of an element."""

    @property
    def node_name(self) -> str:
        return self.tag.lower() if isinstance(self.tag, str) else ""

    @property
    def child_nodes(self) -> list[Node]:
        """Text nodes and child elements in document order.

        Comments and processing instructions are not nodes here, but their tails are.
        """
        return list(self._iter_child_nodes())

    def _iter_child_nodes(self) -> Iterator[Node]:
        if self.text:
            yield TextNode(self.text)
        for child in self:
            if isinstance(child, HtmlElement):
                yield child
            if child.tail:
                yield TextNode(child.tail)

    @property
    def class_list(self) -> tuple[str, ...]:
        return tuple(self.get("class", "").split())

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    @property
    def dataset(self) -> Mapping[str, str]:
        """Values of `data-*` attributes keyed like the DOM `dataset` (`data-row-id` -> rowId)."""
        return MappingProxyType(
            {
                _camel_case(name[5:].lower()): value
                for name, value in self.attrib.items()
                if isinstance(name, str) and name.lower().startswith("data-")
            }
        )

    @property
    def style_attribute(self) -> str:
        """The raw, unparsed value of the `style` attribute."""
        return self.get("style", "")

    @property
    def style(self) -> Mapping[str, str]:
        return parse_inline_style(self.style_attribute)

    @property
    def title(self) -> str:
        return self.get("title", "")

    @property
    def outer_html(self) -> str:
        """This element serialized as HTML, without its tail."""
        return etree.tostring(self, encoding=str, method="html", with_tail=False)

    @property
    def inner_html(self) -> str:
        """The markup of this element's content, everything between its start and end tags."""
        text = escape(self.text, quote=False) if self.text else ""
        return text + "".join(
            etree.tostring(child, encoding=str, method="html", with_tail=True) for child in self
        )

    def find_by_class(self, class_name: str) -> list[HtmlElement]:
        """Descendant elements having `class_name` among their classes, in document order."""
        return cast(
            "list[HtmlElement]",
            self.xpath(
                ".//*[contains(concat(' ', normalize-space(@class), ' '), $needle)]",
                needle=f" {class_name} ",
            ),
        )


class Anchor(HtmlElement):
    """Custom element-class for `<a>` element."""

    @property
    def href(self) -> str:
        return self.get("href", "").strip()

    @property
    def absolute_url(self) -> Optional[str]:
        """The normalized absolute form of `href`, None when it can't be used as a link.

        Only http, https, mailto and tel links qualify. Scheme and host are lower-cased; an http(s)
        URL must name a host.
        """
        if not self.href:
            return None

        try:
            parts = urlsplit(self.href)
            # -- accessing `.port` validates it, raising ValueError when it isn't a number --
            _ = parts.port
        except ValueError:
            return None

        scheme = parts.scheme.lower()
        if scheme not in LINK_SCHEMES:
            return None
        if scheme in ("http", "https") and not parts.hostname:
            return None

        userinfo, at, hostport = parts.netloc.rpartition("@")
        netloc = f"{userinfo}{at}{hostport.lower()}"
        path = parts.path or ("/" if scheme in ("http", "https") else "")
        return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


class Image(HtmlElement):
    """Custom element-class for `<img>` element."""

    @property
    def src(self) -> str:
        return self.get("src", "").strip()


class LineBreak(HtmlElement):
    """A `<br/>` line-break element."""


class Table(HtmlElement):
    """Custom element-class for `<table>` element."""

    @property
    def rows(self) -> list[HtmlElement]:
        """The `<tr>` elements of this table (including those of nested tables)."""
        return cast("list[HtmlElement]", self.xpath(".//tr"))

    @property
    def cols(self) -> list[HtmlElement]:
        return cast("list[HtmlElement]", self.xpath(".//col"))


class TableCell(HtmlElement):
    """Custom element-class for `<td>` and `<th>` elements.

    Span values follow the DOM: a missing or unparseable span is 1, `rowspan="0"` is 0 (meaning
    "to the end of the table section") and `colspan="0"` is 1.
    """

    @property
    def row_span(self) -> int:
        return _parse_span(self.get("rowspan"), minimum=0, maximum=65534)

    @property
    def col_span(self) -> int:
        return _parse_span(self.get("colspan"), minimum=1, maximum=1000)


def _parse_span(value: Optional[str], minimum: int, maximum: int) -> int:
    try:
        span = int((value or "").strip())
    except ValueError:
        return 1
    if span < 0:
        return 1
    return min(max(span, minimum), maximum)


Node: TypeAlias = Union[HtmlElement, TextNode]
"""A child node of an element; an element or a run of text."""


# ------------------------------------------------------------------------------------------------
# HTML PARSER
# ------------------------------------------------------------------------------------------------


html_parser = etree.HTMLParser(remove_comments=True)
# -- elements that don't have a registered class get HtmlElement --
fallback = etree.ElementDefaultClassLookup(element=HtmlElement)
# -- elements that do have a registered class are assigned that class via lookup --
element_class_lookup = etree.ElementNamespaceClassLookup(fallback)
html_parser.set_element_class_lookup(element_class_lookup)

# -- register classes --
element_class_lookup.get_namespace(None).update(
    {
        "a": Anchor,
        "br": LineBreak,
        "img": Image,
        "table": Table,
        "td": TableCell,
        "th": TableCell,
    }
)


def get_safe_body_from_html(html: str) -> Optional[HtmlElement]:
    """The `<body>` element of `html` parsed with `html_parser`, None when it can't be parsed.

    Script-like elements are removed before the body is returned so their text can never become
    document text.
    """
    if not html.strip():
        return None

    # NOTE - `lxml` will not parse a `str` that includes an XML encoding declaration. Chrome
    # accepts it so we work around it by UTF-8 encoding the str and parsing those bytes.
    try:
        try:
            root = etree.fromstring(html, html_parser)
        except ValueError:
            root = etree.fromstring(html.encode("utf-8"), html_parser)
    except (etree.ParserError, etree.XMLSyntaxError) as e:
        logger.debug("HTML could not be parsed: %s", e)
        return None

    if root is None:
        return None

    etree.strip_elements(
        root, ["link", "meta", "noscript", "script", "style", "template"], with_tail=False
    )

    if (body := root.find(".//body")) is not None:
        return cast(HtmlElement, body)
    return cast(HtmlElement, root)
