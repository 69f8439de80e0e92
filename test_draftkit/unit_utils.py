"""Utilities that ease unit-testing."""

from __future__ import annotations

from typing import Iterable, Optional
from unittest.mock import ANY

from pytest import LogCaptureFixture, MonkeyPatch  # noqa: PT013
from pytest_mock import MockerFixture

from draftkit.convert.dom import HtmlElement, get_safe_body_from_html
from draftkit.model.character_metadata import CharacterMetadata
from draftkit.model.content_block import ContentBlock

__all__ = (
    "ANY",
    "LogCaptureFixture",
    "MockerFixture",
    "MonkeyPatch",
    "block",
    "body",
)


def body(html: str) -> HtmlElement:
    """The `<body>` element of `html` parsed the way the converter parses it."""
    element = get_safe_body_from_html(html)
    assert element is not None, f"no body could be parsed from {html!r}"
    return element


def block(
    key: str,
    text: str,
    styles: Optional[Iterable[tuple[int, int, str]]] = None,
    block_type: str = "unstyled",
) -> ContentBlock:
    """A content block with `text`; each `(start, end, style)` in `styles` styles that range."""
    style_sets: list[tuple[str, ...]] = [() for _ in text]
    for start, end, style in styles or ():
        for i in range(start, end):
            style_sets[i] = (*style_sets[i], style)
    return ContentBlock(
        key=key,
        type=block_type,
        text=text,
        character_list=tuple(CharacterMetadata.create(s) for s in style_sets),
    )

