from draftkit.model.block_render_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderMap
from draftkit.model.character_metadata import CharacterMetadata
from draftkit.model.content_block import ContentBlock, ContentBlockNode
from draftkit.model.content_state import ContentState
from draftkit.model.entity import DraftEntity, EntityMap
from draftkit.model.raw import convert_to_raw, encode_inline_style_ranges
from draftkit.model.selection_state import SelectionState

__all__ = [
    "DEFAULT_BLOCK_RENDER_MAP",
    "BlockRenderMap",
    "CharacterMetadata",
    "ContentBlock",
    "ContentBlockNode",
    "ContentState",
    "DraftEntity",
    "EntityMap",
    "SelectionState",
    "convert_to_raw",
    "encode_inline_style_ranges",
]
