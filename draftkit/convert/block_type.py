"""Resolve HTML tag names to block types."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from typing_extensions import TypeAlias

from draftkit.convert.dom import HtmlElement
from draftkit.model.block_render_map import BlockRenderMap

BlockTypeMap: TypeAlias = Mapping[str, Union[str, "list[str]"]]
"""Lower-case tag name to its block type, or to the candidate block types when several share it."""

Disambiguator: TypeAlias = Callable[[str, Optional[str], Optional[HtmlElement]], Optional[str]]
"""`(tag, wrapper, node) -> block-type | None`, picks one block type for an ambiguous tag."""


def build_block_type_map(block_render_map: BlockRenderMap) -> BlockTypeMap:
    """Build a mapping from HTML tags to block types out of `block_render_map`.

    The block-type-map for the default block-render-map looks like this:

        {
            "h1": "header-one",
            "h2": "header-two",
            ...
            "h6": "header-six",
            "section": "section",
            "article": "article",
            "li": ["unordered-list-item", "ordered-list-item"],
            "blockquote": "blockquote",
            "figure": "atomic",
            "pre": "code-block",
            "div": "unstyled",
            "p": "unstyled",
        }
    """
    block_type_map: dict[str, Union[str, list[str]]] = {}

    for block_type, desc in block_render_map.items():
        aliased_elements = desc.get("aliasedElements", desc.get("aliased_elements", ()))
        for element in (desc["element"], *aliased_elements):
            element = element.lower()
            existing = block_type_map.get(element)
            if existing is None:
                block_type_map[element] = block_type
            elif isinstance(existing, str):
                block_type_map[element] = [existing, block_type]
            else:
                existing.append(block_type)

    return MappingProxyType(block_type_map)


_LIST_ITEM_HEADING_CLASSES = ("h1", "h2", "h3", "h4", "h5")


def disambiguate(tag: str, wrapper: Optional[str], node: Optional[HtmlElement]) -> Optional[str]:
    """Select the block type for `tag` when the block-render-map gives it more than one.

    A list item gets a composite type like "multi-qu-h2-ol", formed from its classes:

    - "qu" when it has the `qu` class (a quoted list item),
    - the heading level of the first `h1`..`h5` class it has,
    - "ol" for an `ol-item`, "ck" for a `ck-item` (checklist) and "ul" otherwise.

    `<blockquote>` is "multi-qu" and `<h1>`..`<h4>` are "multi-h1".."multi-h4". Any other tag
    produces None and the caller falls back to the first candidate type.
    """
    if tag == "li" and node is not None:
        parts = ["multi"]

        if node.has_class("qu"):
            parts.append("qu")

        heading = next((c for c in _LIST_ITEM_HEADING_CLASSES if node.has_class(c)), None)
        if heading is not None:
            parts.append(heading)

        if node.has_class("ol-item"):
            parts.append("ol")
        elif node.has_class("ck-item"):
            parts.append("ck")
        else:
            parts.append("ul")

        return "-".join(parts)

    if tag == "blockquote":
        return "multi-qu"

    if tag in ("h1", "h2", "h3", "h4"):
        return f"multi-{tag}"

    return None
