"""`draftkit` console command."""

from __future__ import annotations

import json
import logging
from typing import IO, Optional

import click

from draftkit.convert import convert_from_html_to_content_blocks
from draftkit.logger import get_logger
from draftkit.model.content_state import ContentState
from draftkit.model.raw import convert_to_raw


@click.group(name="draftkit")
def main():
    pass


@main.command()
@click.argument("path", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--tree/--flat",
    default=None,
    help="Keep nested blocks as a tree. Defaults to the DRAFTKIT_TREE_DATA_SUPPORT env var.",
)
@click.option(
    "--custom-style",
    "custom_styles",
    multiple=True,
    help='A "color-<value>" or "bgcolor-<value>" style to keep. Can be repeated.',
)
@click.option("--indent", type=int, default=None, help="Indent the JSON output by N spaces.")
@click.option("--verbose", is_flag=True, default=False, help="Log conversion details to stderr.")
def convert(
    path: IO[str],
    tree: Optional[bool],
    custom_styles: tuple[str, ...],
    indent: Optional[int],
    verbose: bool,
):
    """Convert the HTML in PATH (stdin when "-" or omitted) and print its raw JSON."""
    logger = get_logger()
    if verbose:
        logger.setLevel(logging.DEBUG)
        if not logger.handlers:
            logger.addHandler(logging.StreamHandler())

    html = path.read()
    converted = convert_from_html_to_content_blocks(
        html,
        custom_style_map=set(custom_styles) if custom_styles else None,
        tree_data_support=tree,
    )

    if converted is None:
        raw = {"blocks": [], "entityMap": {}}
    else:
        raw = convert_to_raw(
            ContentState.create_from_block_array(converted.content_blocks, converted.entity_map)
        )

    click.echo(json.dumps(raw, indent=indent, ensure_ascii=False))


if __name__ == "__main__":
    main()
