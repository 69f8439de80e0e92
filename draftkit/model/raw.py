"""Serialize a content state to the raw (JSON-ready) form used for storage and transport."""

from __future__ import annotations

from typing import Any, Mapping

from typing_extensions import TypedDict

from draftkit.model.content_block import ContentBlock
from draftkit.model.content_state import ContentState


class InlineStyleRange(TypedDict):
    offset: int
    length: int
    style: str


class EntityRange(TypedDict):
    offset: int
    length: int
    key: int


def encode_inline_style_ranges(block: ContentBlock) -> list[InlineStyleRange]:
    """Ranges of `block` text carrying each style, grouped by style.

    Styles appear in the order they are first encountered in the text and ranges of the same style
    are in document order.
    """
    styles = dict.fromkeys(style for c in block.character_list for style in c.style)
    return [
        {"offset": start, "length": end - start, "style": style}
        for style in styles
        for start, end in block.find_style_ranges(style)
    ]


def encode_entity_ranges(block: ContentBlock, key_map: Mapping[str, int]) -> list[EntityRange]:
    """Ranges of `block` text attached to an entity, keyed by the entity's renumbered key."""
    return [
        {"offset": start, "length": end - start, "key": key_map[block.character_list[start].entity]}
        for start, end in block.find_entity_ranges()
    ]


def convert_to_raw(content_state: ContentState) -> dict[str, Any]:
    """`{"blocks": [...], "entityMap": {...}}` for `content_state`.

    Entity keys are renumbered from 0 in order of first use, so only entities that are actually
    referenced by some character appear in the result.
    """
    key_map: dict[str, int] = {}
    for block in content_state.block_map.values():
        for start, _ in block.find_entity_ranges():
            entity_key = block.character_list[start].entity
            if entity_key not in key_map:
                key_map[entity_key] = len(key_map)

    blocks = [
        {
            "key": block.key,
            "text": block.text,
            "type": block.type,
            "depth": block.depth,
            "inlineStyleRanges": encode_inline_style_ranges(block),
            "entityRanges": encode_entity_ranges(block, key_map),
            "data": dict(block.data),
        }
        for block in content_state.block_map.values()
    ]

    entity_map = {
        str(raw_key): content_state.entity_map[entity_key].to_dict()
        for entity_key, raw_key in key_map.items()
    }

    return {"blocks": blocks, "entityMap": entity_map}
