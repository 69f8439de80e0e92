"""Inline styles implied by an element's tag name and its inline CSS."""

from __future__ import annotations

import re
from typing import Container, Optional

from draftkit.constants import (
    BOLD,
    BOLD_VALUES,
    CODE,
    HTML_TAG_TO_INLINE_STYLE,
    ITALIC,
    NOT_BOLD_VALUES,
    STRIKETHROUGH,
    UNDERLINE,
)
from draftkit.convert.dom import HtmlElement
from draftkit.model.character_metadata import InlineStyle, with_style, without_style

_WHITESPACE_RE = re.compile(r"\s")


def style_for_tag(tag: str, style: InlineStyle) -> InlineStyle:
    """`style` plus the inline style a tag like `<b>` or `<em>` stands for, if any."""
    if (tag_style := HTML_TAG_TO_INLINE_STYLE.get(tag)) is not None:
        return with_style(style, tag_style)
    return style


def style_from_node_attributes(
    node: HtmlElement, style: InlineStyle, custom_style_map: Optional[Container[str]] = None
) -> InlineStyle:
    """Guess the inline style of `node` from its CSS (font-weight, font-style, text-decoration).

    Color and background-color become "color-<value>" and "bgcolor-<value>" styles (whitespace
    removed from the value) but only when that style is in `custom_style_map`. Arbitrary pasted
    colors would otherwise each add a distinct style.
    """
    css = node.style
    font_weight = css.get("font-weight", "").lower()
    font_style = css.get("font-style", "").lower()
    text_decoration = css.get("text-decoration", "").lower()
    color = css.get("color", "")
    bgcolor = css.get("background-color", "")

    if font_weight in BOLD_VALUES:
        style = with_style(style, BOLD)
    elif font_weight in NOT_BOLD_VALUES:
        style = without_style(style, BOLD)

    if font_style == "italic":
        style = with_style(style, ITALIC)
    elif font_style == "normal":
        style = without_style(style, ITALIC)

    if text_decoration == "underline":
        style = with_style(style, UNDERLINE)

    if text_decoration == "line-through":
        style = with_style(style, STRIKETHROUGH)

    if text_decoration == "none":
        style = without_style(without_style(style, UNDERLINE), STRIKETHROUGH)

    if custom_style_map is None:
        return style

    # -- only colors in the custom-style-map are kept, to keep the inline-style-map small --
    if color:
        color_style = f"color-{_WHITESPACE_RE.sub('', color)}"
        if color_style in custom_style_map:
            style = with_style(style, color_style)

    if bgcolor:
        bgcolor_style = f"bgcolor-{_WHITESPACE_RE.sub('', bgcolor)}"
        if bgcolor_style in custom_style_map:
            style = with_style(style, bgcolor_style)

    return style


def detect_inline_style(node: HtmlElement) -> Optional[str]:
    """CODE when `node` is set in a monospace font, None otherwise.

    Currently only used to detect preformatted inline code.
    """
    if "monospace" in node.style.get("font-family", ""):
        return CODE
    return None
