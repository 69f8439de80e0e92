"""Builds content blocks out of a parsed HTML tree.

The walk happens in two phases. `add_dom_node()` visits the DOM depth-first and produces a tree of
`BlockConfig`, an immutable, not-yet-final description of each block. `get_content_blocks()` then
turns those configs into immutable `ContentBlock` objects, either keeping the nesting
(tree mode) or merging each root block's descendants into it (flat mode).

Inline text between block elements is accumulated in a buffer (`_current_text` and the parallel
`_character_list`) and flushed into a block whenever a block boundary is reached.
"""

from __future__ import annotations

import dataclasses as dc
from typing import Any, Container, NamedTuple, Optional, Sequence

from draftkit.constants import (
    ATOMIC,
    CELL_EDITOR_ROOT_CLASS,
    CODE_BLOCK,
    ENTITY_PLACEHOLDER,
    FILE,
    IMAGE,
    IMMUTABLE,
    LINK,
    LIST_ITEM_DEPTH_CLASSES,
    MULTI_BLOCK_RE,
    MUTABLE,
    REGEX_LEADING_LF,
    REGEX_LF,
    SPACE,
    TABLE,
    UNSTYLED,
)
from draftkit.convert.block_type import BlockTypeMap, Disambiguator
from draftkit.convert.dom import Anchor, HtmlElement, Image, Node, Table, TextNode
from draftkit.convert.entities import (
    anchor_entity_data,
    file_entity_data,
    image_entity_data,
    table_entity_data,
)
from draftkit.convert.nodes import NodeKind, classify_node, is_list_node
from draftkit.convert.styles import detect_inline_style, style_for_tag, style_from_node_attributes
from draftkit.logger import logger
from draftkit.model.block_render_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderMap
from draftkit.model.character_metadata import CharacterMetadata, InlineStyle, with_style
from draftkit.model.content_block import ContentBlock, ContentBlockNode
from draftkit.model.content_state import ContentState
from draftkit.model.entity import EntityMap
from draftkit.model.raw import convert_to_raw
from draftkit.utils import generate_random_key

# ------------------------------------------------------------------------------------------------
# DOMAIN MODEL
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class BlockConfig:
    """A block under construction, not yet finalized into a `ContentBlock`.

    Configs are never modified once made; trimming and retyping produce new ones.
    """

    key: str
    type: str = UNSTYLED
    text: str = ""
    character_list: list[CharacterMetadata] = dc.field(default_factory=list)
    depth: int = 0
    child_configs: list[BlockConfig] = dc.field(default_factory=list)


class ConvertedBlocks(NamedTuple):
    """Result of a conversion; the blocks in document order and the entities they reference."""

    content_blocks: list[ContentBlock]
    entity_map: EntityMap


class _WalkContext(NamedTuple):
    """State scoped to the subtree being walked.

    A node passes a derived copy to its children, so nothing a node sets is seen by its siblings.
    """

    style: InlineStyle = ()
    entity: Optional[str] = None
    depth: int = 0
    wrapper: Optional[str] = None
    """Tag of the nearest enclosing list or `pre` element."""
    is_code_block: bool = False

    @property
    def in_code(self) -> bool:
        """True when whitespace is significant, inside `<pre>` or marked as code."""
        return self.wrapper == "pre" or self.is_code_block

    @property
    def fallback_block_type(self) -> str:
        return CODE_BLOCK if self.wrapper == "pre" else UNSTYLED


def _get_list_item_depth(node: HtmlElement, depth: int) -> int:
    """Depth recorded in a `depth0`..`depth4` class of `node`, `depth` when it has none."""
    for class_name, class_depth in LIST_ITEM_DEPTH_CLASSES.items():
        if node.has_class(class_name):
            depth = class_depth
    return depth


def _leading_trim_length(text: str, character_list: Sequence[CharacterMetadata]) -> int:
    """Count of leading whitespace and dangling placeholder characters to remove from a block.

    Nothing is removed when the text doesn't start with whitespace, and a character carrying an
    entity is never removed.
    """
    if not text or not text[0].isspace():
        return 0
    length = 0
    for char, metadata in zip(text, character_list):
        if metadata.entity is not None:
            break
        if not char.isspace() and char != ENTITY_PLACEHOLDER:
            break
        length += 1
    return length


# ------------------------------------------------------------------------------------------------
# BUILDER
# ------------------------------------------------------------------------------------------------


class ContentBlocksBuilder:
    """Converts DOM nodes into content blocks and the entities they reference.

    Typical use is `builder.add_dom_node(body).get_content_blocks()`. More than one node can be
    added before the blocks are retrieved; their blocks are concatenated. `clear()` resets the
    builder for reuse.
    """

    def __init__(
        self,
        block_type_map: BlockTypeMap,
        disambiguate: Disambiguator,
        *,
        block_render_map: BlockRenderMap = DEFAULT_BLOCK_RENDER_MAP,
        custom_style_map: Optional[Container[str]] = None,
        tree_data_support: bool = False,
    ):
        self._block_type_map = block_type_map
        self._disambiguate = disambiguate
        self._block_render_map = block_render_map
        self._custom_style_map = custom_style_map
        self._tree_data_support = tree_data_support
        self.clear()

    def clear(self) -> None:
        """Drop all state accumulated so far."""
        self._current_text = ""
        self._character_list: list[CharacterMetadata] = []
        self._block_configs: list[BlockConfig] = []
        self._content_blocks: list[ContentBlock] = []
        self._entity_map = EntityMap()
        self._seen_keys: set[str] = set()

    def add_dom_node(
        self, node: HtmlElement, *, is_code_block: bool = False
    ) -> ContentBlocksBuilder:
        """Walk `node` and its descendants, adding the blocks they produce.

        When `is_code_block` is True, whitespace is preserved throughout the subtree. Returns the
        builder so a call to `get_content_blocks()` can be chained.
        """
        self._content_blocks = []
        context = _WalkContext(is_code_block=is_code_block)
        self._block_configs.extend(self._to_block_configs([node], context))
        # -- text left in the buffer after the walk becomes blocks of its own --
        self._block_configs.extend(
            self._make_block_list_from_current_text(context, context.fallback_block_type)
        )
        self._block_configs = self._trim_block_configs(self._block_configs, is_code_block)
        return self

    def get_content_blocks(self) -> ConvertedBlocks:
        """The blocks produced by the nodes added so far, along with their entities."""
        if not self._content_blocks:
            self._content_blocks = (
                list(self._to_content_blocks(self._block_configs))
                if self._tree_data_support
                else self._to_flat_content_blocks(self._block_configs)
            )
        return ConvertedBlocks(list(self._content_blocks), self._entity_map)

    # -- walk ------------------------------------------------------------------------------------

    def _to_block_configs(self, nodes: Sequence[Node], context: _WalkContext) -> list[BlockConfig]:
        """Visit each of `nodes` in order, returning the block configs they complete."""
        block_configs: list[BlockConfig] = []

        for node in nodes:
            if isinstance(node, TextNode):
                self._add_text_node(node, context)
                continue

            kind = classify_node(node, self._block_type_map)

            if kind is NodeKind.CONTAINER:
                block_configs.extend(self._add_container_node(node, context))
            elif kind is NodeKind.SKIPPED:
                logger.debug("skipping <%s> node with class %r", node.node_name, node.get("class"))
            elif kind is NodeKind.BLOCK:
                block_configs.extend(self._add_block_node(node, context))
            elif kind is NodeKind.BREAK:
                self._append_text("\n", context)
            elif kind is NodeKind.FILE:
                self._add_entity_placeholder(FILE, file_entity_data(node), context)
            elif kind is NodeKind.TABLE:
                assert isinstance(node, Table)
                data = table_entity_data(node, self._cell_editor_state)
                self._add_entity_placeholder(TABLE, data, context)
            elif kind is NodeKind.IMAGE:
                assert isinstance(node, Image)
                self._add_entity_placeholder(IMAGE, image_entity_data(node), context)
            elif kind is NodeKind.ANCHOR:
                assert isinstance(node, Anchor)
                block_configs.extend(self._add_anchor_node(node, context))
            else:
                block_configs.extend(self._add_inline_node(node, context))

        return block_configs

    def _add_container_node(self, node: HtmlElement, context: _WalkContext) -> list[BlockConfig]:
        """`<body>`, `<ul>` or `<ol>`; children are walked at the current level."""
        block_configs = self._make_block_list_from_current_text(context, UNSTYLED)

        node_name = node.node_name
        if is_list_node(node_name):
            depth = context.depth + 1 if is_list_node(context.wrapper) else context.depth
            context = context._replace(wrapper=node_name, depth=depth)

        block_configs.extend(self._to_block_configs(node.child_nodes, context))

        if node_name == "body":
            block_configs.extend(
                self._make_block_list_from_current_text(context, context.fallback_block_type)
            )

        return block_configs

    def _add_block_node(self, node: HtmlElement, context: _WalkContext) -> list[BlockConfig]:
        """An element in the block-type-map, producing one block plus the blocks before it."""
        block_configs = self._make_block_list_from_current_text(context, UNSTYLED)

        node_name = node.node_name
        is_pre = node_name == "pre" or node.style.get("white-space", "").lower() == "pre-wrap"
        wrapper = "pre" if is_pre else context.wrapper
        block_type = self._resolve_block_type(node_name, wrapper, node)

        depth = context.depth
        if not self._tree_data_support and MULTI_BLOCK_RE.search(block_type):
            depth = _get_list_item_depth(node, depth)

        # -- code pasted from an editor like VSCode arrives as styled divs, not `<pre>` --
        is_monospace = "monospace" in node.style_attribute
        inner = context._replace(
            wrapper=wrapper, depth=depth, is_code_block=context.is_code_block or is_monospace
        )

        child_configs = self._to_block_configs(node.child_nodes, inner)
        self._trim_current_text(inner)

        if wrapper == "pre":
            child_type = CODE_BLOCK if node.get("yne-bulb-block") == "code" else block_type
            child_configs.extend(self._make_block_list_from_current_text(inner, child_type))

        if is_monospace:
            child_configs = [dc.replace(c, type=CODE_BLOCK) for c in child_configs]

        block_configs.append(self._make_block_config(block_type, inner.depth, child_configs))
        return block_configs

    def _add_text_node(self, node: TextNode, context: _WalkContext) -> None:
        text = node.text
        if not context.in_code:
            if not text.strip():
                text = SPACE
            text = REGEX_LEADING_LF.sub("", text)
            text = REGEX_LF.sub(SPACE, text)
        self._append_text(text, context)

    def _add_entity_placeholder(
        self, entity_type: str, data: dict[str, Any], context: _WalkContext
    ) -> None:
        """Create an immutable entity and anchor it in the text with a single placeholder glyph."""
        self._entity_map, key = self._entity_map.create(entity_type, IMMUTABLE, data)
        logger.detail("created %s entity %s", entity_type, key)  # type: ignore
        self._append_text(ENTITY_PLACEHOLDER, context._replace(entity=key))

    def _add_anchor_node(self, node: Anchor, context: _WalkContext) -> list[BlockConfig]:
        self._entity_map, key = self._entity_map.create(LINK, MUTABLE, anchor_entity_data(node))
        logger.detail("created %s entity %s", LINK, key)  # type: ignore
        return self._to_block_configs(node.child_nodes, context._replace(entity=key))

    def _add_inline_node(self, node: HtmlElement, context: _WalkContext) -> list[BlockConfig]:
        """Any other element, contributing the inline styles implied by its tag and CSS."""
        node_name = node.node_name
        style = style_for_tag(node_name, context.style)
        style = style_from_node_attributes(node, style, self._custom_style_map)
        if (inline_style := detect_inline_style(node)) is not None:
            style = with_style(style, inline_style)

        inner = context._replace(style=style)
        # -- a `<pre>` that isn't a block type still preserves whitespace when it's monospace --
        if node_name == "pre" and inline_style is not None:
            inner = inner._replace(wrapper="pre")

        return self._to_block_configs(node.child_nodes, inner)

    def _cell_editor_state(self, cell: Optional[HtmlElement]) -> dict[str, Any]:
        """Raw content state of the document held in a table cell, an empty one when no cell."""
        # -- local import, `convert` depends on this module --
        from draftkit.convert.convert import convert_from_html_to_content_blocks

        if cell is None:
            return convert_to_raw(ContentState.create_from_text(""))

        editor_roots = cell.find_by_class(CELL_EDITOR_ROOT_CLASS)
        markup = editor_roots[0].outer_html if editor_roots else cell.inner_html

        converted = convert_from_html_to_content_blocks(
            markup,
            block_render_map=self._block_render_map,
            custom_style_map=self._custom_style_map,
            tree_data_support=self._tree_data_support,
        )
        if converted is None or not converted.content_blocks:
            return convert_to_raw(ContentState.create_from_text(""))

        return convert_to_raw(
            ContentState.create_from_block_array(converted.content_blocks, converted.entity_map)
        )

    def _resolve_block_type(self, tag: str, wrapper: Optional[str], node: HtmlElement) -> str:
        block_type = self._block_type_map[tag]
        if isinstance(block_type, str):
            return block_type
        return self._disambiguate(tag, wrapper, node) or next(iter(block_type), UNSTYLED)

    # -- buffer ----------------------------------------------------------------------------------

    def _append_text(self, text: str, context: _WalkContext) -> None:
        metadata = CharacterMetadata.create(context.style, context.entity)
        self._current_text += text
        self._character_list.extend([metadata] * len(text))

    def _reset_buffer(self) -> None:
        self._current_text = ""
        self._character_list = []

    def _trim_current_text(self, context: _WalkContext) -> None:
        """Remove surrounding whitespace from the buffer.

        Leading whitespace is kept in code context. Characters carrying an entity are never removed,
        so a link whose text is only a space still has its anchor in the document.
        """
        text = self._current_text
        begin = len(text) - len(text.lstrip()) if not context.in_code else 0
        end = len(text.rstrip())

        entity_offsets = [
            i for i, metadata in enumerate(self._character_list) if metadata.entity is not None
        ]
        if entity_offsets:
            begin = min(begin, entity_offsets[0])
            end = max(end, entity_offsets[-1] + 1)

        if begin >= end:
            self._reset_buffer()
            return

        self._current_text = text[begin:end]
        self._character_list = self._character_list[begin:end]

    def _make_block_config(
        self, block_type: str, depth: int, child_configs: Optional[list[BlockConfig]] = None
    ) -> BlockConfig:
        """A config holding the current buffer as its text; the buffer is emptied."""
        block_config = BlockConfig(
            key=generate_random_key(self._seen_keys),
            type=block_type,
            text=self._current_text,
            character_list=self._character_list,
            depth=depth,
            child_configs=child_configs or [],
        )
        self._reset_buffer()
        return block_config

    def _make_block_list_from_current_text(
        self, context: _WalkContext, block_type: str
    ) -> list[BlockConfig]:
        """One block of `block_type` per line of the trimmed buffer, none when it's empty."""
        self._trim_current_text(context)
        if not self._current_text:
            return []

        text, character_list = self._current_text, self._character_list
        block_configs: list[BlockConfig] = []
        offset = 0
        for line in text.split("\n"):
            end = offset + len(line)
            block_configs.append(
                BlockConfig(
                    key=generate_random_key(self._seen_keys),
                    type=block_type,
                    text=line,
                    character_list=character_list[offset:end],
                    depth=context.depth,
                )
            )
            offset = end + 1

        self._reset_buffer()
        return block_configs

    def _trim_block_configs(
        self, block_configs: list[BlockConfig], is_code_block: bool
    ) -> list[BlockConfig]:
        """`block_configs` with leading whitespace removed from each non-code block, recursively."""
        if is_code_block:
            return block_configs

        trimmed: list[BlockConfig] = []
        for block_config in block_configs:
            if block_config.type == CODE_BLOCK:
                trimmed.append(block_config)
                continue
            cut = _leading_trim_length(block_config.text, block_config.character_list)
            trimmed.append(
                dc.replace(
                    block_config,
                    text=block_config.text[cut:],
                    character_list=block_config.character_list[cut:],
                    child_configs=self._trim_block_configs(
                        block_config.child_configs, is_code_block
                    ),
                )
            )
        return trimmed

    # -- finalization ----------------------------------------------------------------------------

    def _to_content_blocks(
        self, block_configs: Sequence[BlockConfig], parent: Optional[str] = None
    ) -> list[ContentBlockNode]:
        """Tree mode; every config becomes a block node linked to its parent and siblings."""
        content_blocks: list[ContentBlockNode] = []
        last = len(block_configs) - 1

        for i, block_config in enumerate(block_configs):
            content_blocks.append(
                ContentBlockNode(
                    key=block_config.key,
                    type=block_config.type,
                    text=block_config.text,
                    character_list=tuple(block_config.character_list),
                    depth=block_config.depth,
                    parent=parent,
                    children=tuple(c.key for c in block_config.child_configs),
                    prev_sibling=block_configs[i - 1].key if i > 0 else None,
                    next_sibling=block_configs[i + 1].key if i < last else None,
                )
            )
            content_blocks.extend(
                self._to_content_blocks(block_config.child_configs, block_config.key)
            )

        return content_blocks

    def _hoist_containers(self, block_configs: Sequence[BlockConfig]) -> list[BlockConfig]:
        """Replace each text-less unstyled config by its children, recursively."""
        hoisted: list[BlockConfig] = []
        for block_config in block_configs:
            if block_config.type != UNSTYLED or block_config.text:
                hoisted.append(block_config)
            else:
                hoisted.extend(self._hoist_containers(block_config.child_configs))
        return hoisted

    def _to_flat_content_blocks(self, block_configs: Sequence[BlockConfig]) -> list[ContentBlock]:
        """Flat mode; each root block absorbs the text of all its descendants."""
        root_configs = self._hoist_containers(block_configs)

        # -- an atomic block can't be the first or last block, the cursor couldn't reach past it --
        if root_configs and root_configs[0].type == ATOMIC:
            root_configs.insert(0, BlockConfig(key=generate_random_key(self._seen_keys)))
        if root_configs and root_configs[-1].type == ATOMIC:
            root_configs.append(BlockConfig(key=generate_random_key(self._seen_keys)))

        content_blocks: list[ContentBlock] = []
        for block_config in root_configs:
            text, character_list = self._extract_text(block_config.child_configs)
            if text.endswith("\n"):
                text, character_list = text[:-1], character_list[:-1]
            content_blocks.append(
                ContentBlock(
                    key=block_config.key,
                    type=block_config.type,
                    text=block_config.text + text,
                    character_list=(*block_config.character_list, *character_list),
                    depth=block_config.depth,
                )
            )
        return content_blocks

    def _extract_text(
        self, block_configs: Sequence[BlockConfig]
    ) -> tuple[str, list[CharacterMetadata]]:
        """Text and metadata of `block_configs` and their descendants, concatenated in order.

        A descendant that is not unstyled and has text is followed by a newline, carrying the
        metadata of the character before it.
        """
        text = ""
        character_list: list[CharacterMetadata] = []

        for block_config in block_configs:
            text += block_config.text
            character_list.extend(block_config.character_list)

            if block_config.text and block_config.type != UNSTYLED:
                text += "\n"
                character_list.append(character_list[-1])

            child_text, child_characters = self._extract_text(block_config.child_configs)
            text += child_text
            character_list.extend(child_characters)

        return text, character_list
