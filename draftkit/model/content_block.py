"""Finalized, immutable content blocks."""

from __future__ import annotations

import dataclasses as dc
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence

from draftkit.model.character_metadata import CharacterMetadata, InlineStyle
from draftkit.utils import find_ranges


def _has_entity(metadata: CharacterMetadata) -> bool:
    return metadata.entity is not None


@dc.dataclass(frozen=True)
class ContentBlock:
    """One paragraph-like unit of a document, like a heading, a list item or a code block.

    `character_list` holds one `CharacterMetadata` per character of `text`.
    """

    key: str
    type: str = "unstyled"
    text: str = ""
    character_list: Sequence[CharacterMetadata] = ()
    depth: int = 0
    data: Mapping[str, Any] = dc.field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # -- normalize to a tuple so a block can never share a mutable list with its creator --
        if not isinstance(self.character_list, tuple):
            object.__setattr__(self, "character_list", tuple(self.character_list))
        if len(self.character_list) != len(self.text):
            raise ValueError(
                f"block {self.key!r} has {len(self.text)} characters of text but"
                f" {len(self.character_list)} character-metadata records"
            )

    @property
    def length(self) -> int:
        return len(self.text)

    def get_inline_style_at(self, offset: int) -> InlineStyle:
        return self.character_list[offset].style if 0 <= offset < self.length else ()

    def get_entity_at(self, offset: int) -> Optional[str]:
        return self.character_list[offset].entity if 0 <= offset < self.length else None

    def find_style_ranges(self, style: str) -> Iterator[tuple[int, int]]:
        """Generate `(start, end)` of each run of characters having `style`."""
        yield from find_ranges(
            self.character_list,
            lambda a, b: a.has_style(style) == b.has_style(style),
            lambda c: c.has_style(style),
        )

    def find_entity_ranges(self) -> Iterator[tuple[int, int]]:
        """Generate `(start, end)` of each run of characters sharing the same entity."""
        yield from find_ranges(
            self.character_list, lambda a, b: a.entity == b.entity, _has_entity
        )

    def replace(self, **changes: Any) -> ContentBlock:
        """A copy of this block with `changes` applied."""
        return dc.replace(self, **changes)


@dc.dataclass(frozen=True)
class ContentBlockNode(ContentBlock):
    """A content block that knows its place in a block tree.

    `parent`, `prev_sibling` and `next_sibling` are block keys (None at the boundaries) and
    `children` is the tuple of child block keys in document order.
    """

    parent: Optional[str] = None
    children: Sequence[str] = ()
    prev_sibling: Optional[str] = None
    next_sibling: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
