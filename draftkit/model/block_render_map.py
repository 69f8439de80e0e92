"""The default association of block types with the HTML elements that render them."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

from typing_extensions import NotRequired, TypeAlias, TypedDict


class BlockRenderConfig(TypedDict):
    """How one block type is rendered; `aliasedElements` are other tags that parse to it."""

    element: str
    aliasedElements: NotRequired[Sequence[str]]


BlockRenderMap: TypeAlias = Mapping[str, BlockRenderConfig]

DEFAULT_BLOCK_RENDER_MAP: BlockRenderMap = MappingProxyType(
    {
        "header-one": {"element": "h1"},
        "header-two": {"element": "h2"},
        "header-three": {"element": "h3"},
        "header-four": {"element": "h4"},
        "header-five": {"element": "h5"},
        "header-six": {"element": "h6"},
        "section": {"element": "section"},
        "article": {"element": "article"},
        "unordered-list-item": {"element": "li"},
        "ordered-list-item": {"element": "li"},
        "blockquote": {"element": "blockquote"},
        "atomic": {"element": "figure"},
        "code-block": {"element": "pre"},
        "unstyled": {"element": "div", "aliasedElements": ["p"]},
    }
)
