"""The immutable document: an ordered block map, its entities, and the selection around an edit."""

from __future__ import annotations

import dataclasses as dc
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

from draftkit.model.character_metadata import CharacterMetadata
from draftkit.model.content_block import ContentBlock
from draftkit.model.entity import EntityMap
from draftkit.model.selection_state import SelectionState
from draftkit.utils import generate_random_key, lazyproperty


@dc.dataclass(frozen=True)
class ContentState:
    """Blocks in document order keyed by block key, plus entity map and edit bookkeeping.

    `op` holds the operational-transform ops describing the edit that produced this state, when
    that edit computes them.
    """

    block_map: Mapping[str, ContentBlock]
    entity_map: EntityMap = dc.field(default_factory=EntityMap)
    selection_before: Optional[SelectionState] = None
    selection_after: Optional[SelectionState] = None
    op: Optional[Sequence[Mapping[str, Any]]] = None

    def __post_init__(self):
        if not isinstance(self.block_map, MappingProxyType):
            object.__setattr__(self, "block_map", MappingProxyType(dict(self.block_map)))

    @classmethod
    def create_from_block_array(
        cls, blocks: Iterable[ContentBlock], entity_map: Optional[EntityMap] = None
    ) -> ContentState:
        block_map = {block.key: block for block in blocks}
        selection = (
            SelectionState.create_empty(next(iter(block_map))) if block_map else None
        )
        return cls(
            block_map=block_map,
            entity_map=entity_map if entity_map is not None else EntityMap(),
            selection_before=selection,
            selection_after=selection,
        )

    @classmethod
    def create_from_text(cls, text: str, delimiter: str = "\n") -> ContentState:
        """A content state with one unstyled block per `delimiter`-separated line of `text`."""
        keys: set[str] = set()
        blocks = [
            ContentBlock(
                key=generate_random_key(keys),
                text=line,
                character_list=(CharacterMetadata.EMPTY,) * len(line),
            )
            for line in text.split(delimiter)
        ]
        return cls.create_from_block_array(blocks)

    @lazyproperty
    def _block_keys(self) -> tuple[str, ...]:
        return tuple(self.block_map)

    def blocks_as_array(self) -> list[ContentBlock]:
        return list(self.block_map.values())

    def get_block_for_key(self, key: str) -> Optional[ContentBlock]:
        return self.block_map.get(key)

    def get_block_index(self, key: str) -> int:
        """Position of block `key` in document order, -1 when there is no such block."""
        try:
            return self._block_keys.index(key)
        except ValueError:
            return -1

    def get_first_block(self) -> Optional[ContentBlock]:
        return self.block_map[self._block_keys[0]] if self._block_keys else None

    def get_last_block(self) -> Optional[ContentBlock]:
        return self.block_map[self._block_keys[-1]] if self._block_keys else None

    def get_plain_text(self, delimiter: str = "\n") -> str:
        return delimiter.join(block.text for block in self.block_map.values())

    def has_text(self) -> bool:
        blocks = self.blocks_as_array()
        return len(blocks) > 1 or (bool(blocks) and blocks[0].length > 0)

    def replace(self, **changes: Any) -> ContentState:
        """A new content state with `changes` applied; unchanged fields are shared."""
        return dc.replace(self, **changes)
