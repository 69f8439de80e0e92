"""Insert text at a collapsed selection and describe the edit as operational-transform ops.

The ops use the JSON0 vocabulary against the raw form of the document (see `convert_to_raw()`):
`si` inserts into a string, `li` inserts into a list and `od`/`oi` replace an object value. Each
op's `p` is the path of what it changes, like `["blocks", 0, "inlineStyleRanges", 1, "offset"]`.
"""

from __future__ import annotations

from typing import Any, Optional

from draftkit.logger import logger
from draftkit.model.character_metadata import CharacterMetadata
from draftkit.model.content_block import ContentBlock
from draftkit.model.content_state import ContentState
from draftkit.model.raw import encode_inline_style_ranges
from draftkit.model.selection_state import SelectionState
from draftkit.utils import invariant

Op = dict[str, Any]


def insert_text_into_content_state(
    content_state: ContentState,
    selection_state: SelectionState,
    text: Optional[str],
    character_metadata: CharacterMetadata,
) -> ContentState:
    """A new content state with `text` inserted at the collapsed `selection_state`.

    Every inserted character gets `character_metadata`. The selection-after of the new state is
    the collapsed selection just past the inserted text and its `op` describes the insertion.
    `content_state` itself is returned when there is no text to insert.
    """
    invariant(
        selection_state.is_collapsed, "`insert_text` should only be called with a collapsed range."
    )

    if not text:
        return content_state

    key = selection_state.start_key
    offset = selection_state.start_offset
    block = content_state.get_block_for_key(key)
    invariant(block is not None, f"no block with key {key!r} to insert text into")
    assert block is not None

    length = len(text)
    block_index = content_state.get_block_index(key)
    logger.debug(
        "inserting %r into block %s (index %d) at offset %d with style %r",
        text,
        key,
        block_index,
        offset,
        character_metadata.style,
    )

    new_block = block.replace(
        text=block.text[:offset] + text + block.text[offset:],
        character_list=(
            *block.character_list[:offset],
            *(character_metadata,) * length,
            *block.character_list[offset:],
        ),
    )
    new_offset = offset + length

    return content_state.replace(
        block_map={**content_state.block_map, key: new_block},
        selection_after=selection_state.replace(anchor_offset=new_offset, focus_offset=new_offset),
        op=get_op(block_index, block, character_metadata, text, offset),
    )


def _style_insert_ops(
    character_metadata: CharacterMetadata, block_index: int, offset: int, length: int
) -> list[Op]:
    """One list-insert per style of the inserted text, at the head of the style ranges."""
    return [
        {
            "p": ["blocks", block_index, "inlineStyleRanges", i],
            "li": {"offset": offset, "length": length, "style": style},
        }
        for i, style in enumerate(character_metadata.style)
    ]


def get_op(
    block_index: int,
    block: ContentBlock,
    character_metadata: CharacterMetadata,
    text: str,
    offset: int,
) -> list[Op]:
    """Ops transforming the raw form of `block` (before insertion) into its raw form after.

    `block` is the block as it was before `text` was inserted at `offset`. Inserting at the end
    of the block only adds the new text's styles. Inserting inside the block also shifts style
    ranges starting at or after `offset`, and splits a range straddling `offset` in two, the second
    part placed after the inserted text. Each split is followed by the styles of the new text, so
    text inserted where no range is split gets no style ops. Entity ranges are not described.
    """
    length = len(text)
    ops: list[Op] = [{"p": ["blocks", block_index, "text", offset], "si": text}]

    # -- inserting at the end of the block --
    if offset == block.length:
        ops.extend(_style_insert_ops(character_metadata, block_index, offset, length))
        return ops

    for i, style_range in enumerate(encode_inline_style_ranges(block)):
        path = ["blocks", block_index, "inlineStyleRanges", i]
        range_start = style_range["offset"]
        range_end = range_start + style_range["length"]

        if range_start >= offset:
            ops.append(
                {"p": [*path, "offset"], "od": range_start, "oi": range_start + length}
            )
        elif range_end > offset:
            head_length = offset - range_start
            ops.append({"p": [*path, "length"], "od": style_range["length"], "oi": head_length})
            ops.append(
                {
                    "p": path,
                    "li": {
                        "offset": offset + length,
                        "length": range_end - offset,
                        "style": style_range["style"],
                    },
                }
            )
            ops.extend(_style_insert_ops(character_metadata, block_index, offset, length))

    return ops
