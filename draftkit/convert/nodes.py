"""Classify each DOM node into the category that decides how the converter treats it."""

from __future__ import annotations

import enum

from draftkit.constants import (
    FILE_ENTITY_TITLE,
    SKIPPED_NODE_CLASSES,
    TABLE_CELL_CLASS,
)
from draftkit.convert.block_type import BlockTypeMap
from draftkit.convert.dom import Anchor, HtmlElement, Image, LineBreak, Node, Table, TextNode


class NodeKind(enum.Enum):
    """What a node contributes to the content blocks under construction."""

    CONTAINER = "container"
    """`<body>`, `<ul>` and `<ol>`; no block of their own, their children join the current level."""
    SKIPPED = "skipped"
    """Editor chrome like a code-block toolbar; ignored along with everything inside."""
    BLOCK = "block"
    """An element in the block-type-map, like `<p>`, `<h1>` or `<li>`."""
    TEXT = "text"
    BREAK = "break"
    FILE = "file"
    TABLE = "table"
    IMAGE = "image"
    ANCHOR = "anchor"
    INLINE = "inline"
    """Anything else; contributes inline styles to the text inside it."""


def is_list_node(node_name: str) -> bool:
    return node_name in ("ul", "ol")


def is_valid_anchor(node: Node) -> bool:
    """True when `node` can be used to build a link entity."""
    return isinstance(node, Anchor) and node.absolute_url is not None


def is_valid_image(node: Node) -> bool:
    """True when `node` can be used to build an image entity."""
    return isinstance(node, Image) and bool(node.src)


def is_valid_file(node: Node) -> bool:
    """True when `node` is a file attachment naming both its storage bucket and object key."""
    if not isinstance(node, HtmlElement) or node.title != FILE_ENTITY_TITLE:
        return False
    dataset = node.dataset
    return bool(dataset.get("bucketname") and dataset.get("objectkey"))


def is_valid_table(node: Node) -> bool:
    """True when `node` is a `<table>` made of editor cells, each holding its own document."""
    return isinstance(node, Table) and bool(node.find_by_class(TABLE_CELL_CLASS))


def is_skipped(node: Node) -> bool:
    return isinstance(node, HtmlElement) and any(
        node.has_class(class_name) for class_name in SKIPPED_NODE_CLASSES
    )


def classify_node(node: Node, block_type_map: BlockTypeMap) -> NodeKind:
    """The category of `node`, decided in a fixed order of precedence.

    A node failing the capability check of a category (an `<a>` without a usable href, an `<img>`
    without a src, ...) falls through to the next one and finally to INLINE.
    """
    if isinstance(node, TextNode):
        return NodeKind.TEXT

    node_name = node.node_name

    if node_name == "body" or is_list_node(node_name):
        return NodeKind.CONTAINER
    if is_skipped(node):
        return NodeKind.SKIPPED
    if node_name in block_type_map:
        return NodeKind.BLOCK
    if isinstance(node, LineBreak):
        return NodeKind.BREAK
    if is_valid_file(node):
        return NodeKind.FILE
    if is_valid_table(node):
        return NodeKind.TABLE
    if is_valid_image(node):
        return NodeKind.IMAGE
    if is_valid_anchor(node):
        return NodeKind.ANCHOR
    return NodeKind.INLINE
