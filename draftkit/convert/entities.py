"""Entity data for the links, images, file attachments and tables found in HTML."""

from __future__ import annotations

import uuid
from typing import Any, Callable, Optional, Sequence, Union, cast

from typing_extensions import TypeAlias

from draftkit.constants import (
    ANCHOR_ATTRIBUTES,
    DEFAULT_COLUMN_WIDTH,
    FILE_ATTRIBUTES,
    IMAGE_ATTRIBUTES,
    TABLE_CELL_CLASS,
)
from draftkit.convert.dom import Anchor, HtmlElement, Image, Table, TableCell

CellEditorState: TypeAlias = "dict[str, Any]"
"""The raw content state of the document held in one table cell."""

CellRow: TypeAlias = "list[Optional[HtmlElement]]"
"""The cells of one table row; None marks a position covered by a cell spanning into it."""


def _attribute(node: HtmlElement, name: str) -> Optional[str]:
    """Attribute `name` of `node`, reading "className" from the `class` attribute like the DOM."""
    return node.get("class" if name == "className" else name)


def anchor_entity_data(anchor: Anchor) -> dict[str, Any]:
    """LINK entity data; the whitelisted attributes present plus the normalized absolute url."""
    data: dict[str, Any] = {}
    for attr in ANCHOR_ATTRIBUTES:
        if value := _attribute(anchor, attr):
            data[attr] = value
    data["url"] = anchor.absolute_url
    return data


def image_entity_data(image: Image) -> dict[str, Any]:
    """IMAGE entity data; `src` is stored as "url".

    A width or height missing as an attribute is read from the inline style instead, with any
    "px" unit removed.
    """
    data: dict[str, Any] = {}
    attribute_keys = {"src": "url"}
    for attr in IMAGE_ATTRIBUTES:
        if value := _attribute(image, attr):
            data[attribute_keys.get(attr, attr)] = value
        elif attr in ("width", "height"):
            if style_value := image.style.get(attr, "").replace("px", "").strip():
                data[attr] = style_value
    return data


def file_entity_data(node: HtmlElement) -> dict[str, Any]:
    """FILE entity data from the `data-*` attributes of a file attachment."""
    attribute_keys = {"bucketname": "bucketName", "objectkey": "objectKey"}
    dataset = node.dataset
    return {
        attribute_keys.get(attr, attr): dataset[attr]
        for attr in FILE_ATTRIBUTES
        if dataset.get(attr)
    }


# ------------------------------------------------------------------------------------------------
# TABLES
# ------------------------------------------------------------------------------------------------


def _generate_uuid() -> str:
    return uuid.uuid4().hex[:16]


def _to_number(value: Optional[str]) -> Union[int, float, None]:
    """`value` as a number like JavaScript `Number()` would read it, None when it is not one."""
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if number != number:
        return None
    return int(number) if number.is_integer() else number


def _spans(cell: Optional[HtmlElement]) -> tuple[Optional[int], Optional[int]]:
    """`(rowspan, colspan)` of `cell`; `(0, 0)` when there is no cell.

    A span of 0, or a cell element that is not a `<td>` or `<th>`, has no span (None).
    """
    if cell is None:
        return 0, 0
    if not isinstance(cell, TableCell):
        return None, None
    return cell.row_span or None, cell.col_span or None


def backfill_spanned_cells(
    rows: Sequence[CellRow], row_index: int, col_index: int, row_span: int, col_span: int
) -> None:
    """Insert None placeholders into `rows` for the positions covered by a merged cell.

    On the merged cell's own row the positions after it are backfilled; on each following row the
    merged cell spans, every covered position is. A position holding a cell gets the placeholder
    inserted before that cell, shifting it right. A position that is empty or already a placeholder
    gets the placeholder appended to the end of the row instead. Rows past the end of the table
    are ignored.
    """
    for i in range(row_span):
        if row_index + i >= len(rows):
            break
        row = rows[row_index + i]
        for j in range(1 if i == 0 else 0, col_span):
            position = col_index + j
            if position < len(row) and row[position] is not None:
                row.insert(position, None)
            else:
                row.append(None)


def table_entity_data(
    table: Table, cell_editor_state: Callable[[Optional[HtmlElement]], CellEditorState]
) -> dict[str, Any]:
    """TABLE entity data for an editor table.

    The row count is the `data-rows` attribute, or the number of `<tr>` elements, and the column
    count is `data-cols`, or the number of `<col>` elements. Each cell records its spans and the
    content of the document it holds, produced by `cell_editor_state()`. Merged cells are also
    listed in "combine" with the row/column extents they cover.
    """
    rows: list[CellRow] = [
        cast("CellRow", list(tr.find_by_class(TABLE_CELL_CLASS))) for tr in table.rows
    ]
    cols = table.cols
    row_count = int(_to_number(table.dataset.get("rows")) or len(rows))
    column_count = int(_to_number(table.dataset.get("cols")) or len(cols))

    rows_id: list[str] = []
    cols_id: list[str] = []
    combine: list[dict[str, Any]] = []
    column_width: dict[str, Union[int, float]] = {}
    cell: dict[str, dict[str, Any]] = {}

    for index in range(row_count):
        row_id = f"rowId-{_generate_uuid()}"
        rows_id.append(row_id)
        cell[row_id] = {}
        row = rows[index] if index < len(rows) else []

        for index_col in range(column_count):
            if index == 0:
                col_id = f"colId-{_generate_uuid()}"
                width = _to_number(cols[index_col].get("width")) if index_col < len(cols) else None
                column_width[col_id] = width or DEFAULT_COLUMN_WIDTH
                cols_id.append(col_id)

            td = row[index_col] if index_col < len(row) else None
            rowspan, colspan = _spans(td)

            if rowspan and colspan and (rowspan > 1 or colspan > 1):
                backfill_spanned_cells(rows, index, index_col, rowspan, colspan)
                combine.append(
                    {
                        "key": f"cbId-{_generate_uuid()}",
                        "firstRowId": row_id,
                        "firstColId": cols_id[index_col],
                        "minRow": index,
                        "minCol": index_col,
                        "maxRow": rowspan - 1 + index,
                        "maxCol": colspan - 1 + index_col,
                    }
                )

            cell[row_id][cols_id[index_col]] = {
                "cellId": f"cellId-{_generate_uuid()}",
                "rowspan": rowspan,
                "colspan": colspan,
                "editorState": cell_editor_state(td),
            }

    return {
        "row": row_count,
        "column": column_count,
        "rowsId": rows_id,
        "colsId": cols_id,
        "cell": cell,
        "combine": combine,
        "columnWidth": column_width,
    }
