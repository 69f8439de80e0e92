"""Convert an HTML string into content blocks."""

from __future__ import annotations

from typing import Callable, Container, Optional

from draftkit.config import env_config
from draftkit.constants import REGEX_CARRIAGE, REGEX_CR, REGEX_NBSP, REGEX_ZWS, SPACE
from draftkit.convert.block_type import build_block_type_map, disambiguate
from draftkit.convert.builder import ContentBlocksBuilder, ConvertedBlocks
from draftkit.convert.dom import HtmlElement, get_safe_body_from_html
from draftkit.model.block_render_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderMap


def clean_html(html: str) -> str:
    """Remove the carriage returns, non-breaking-space entities and zero-width spaces of pasted
    HTML."""
    html = REGEX_CR.sub("", html.strip())
    html = REGEX_NBSP.sub(SPACE, html)
    html = REGEX_CARRIAGE.sub("", html)
    return REGEX_ZWS.sub("", html)


def convert_from_html_to_content_blocks(
    html: str,
    dom_builder: Callable[[str], Optional[HtmlElement]] = get_safe_body_from_html,
    block_render_map: BlockRenderMap = DEFAULT_BLOCK_RENDER_MAP,
    *,
    custom_style_map: Optional[Container[str]] = None,
    tree_data_support: Optional[bool] = None,
) -> Optional[ConvertedBlocks]:
    """Convert `html` into content blocks and the entity-map they reference.

    Returns None when `dom_builder` can't produce a body element from `html`.

    Be ABSOLUTELY SURE that a `dom_builder` you provide won't execute scripts or fetch resources
    referenced by `html`; the default one parses with `lxml` and removes script-like elements.

    `custom_style_map` lists the "color-<value>" and "bgcolor-<value>" styles to keep. When
    `tree_data_support` is None it is read from the DRAFTKIT_TREE_DATA_SUPPORT environment
    variable.
    """
    safe_body = dom_builder(clean_html(html))
    if safe_body is None:
        return None

    if tree_data_support is None:
        tree_data_support = env_config.DRAFTKIT_TREE_DATA_SUPPORT

    builder = ContentBlocksBuilder(
        build_block_type_map(block_render_map),
        disambiguate,
        block_render_map=block_render_map,
        custom_style_map=custom_style_map,
        tree_data_support=tree_data_support,
    )
    return builder.add_dom_node(safe_body).get_content_blocks()
