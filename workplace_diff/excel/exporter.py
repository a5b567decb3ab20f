from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..models.catalogue import FieldCatalogue
from ..models.display_row import DisplayRow
from ..models.filter_state import StatusLabel
from ..services.classifier import ClassifiedRows, status_label
from ..services.render import build_table

"""Styled xlsx export of the visible rows.

Cell contents come from services.render.build_table (same status and change
texts as the terminal view); this module only adds the styling.
"""

__all__ = [
    "SHEET_TITLE",
    "EXPORT_SUFFIX",
    "default_export_name",
    "export_rows",
]

logger = logging.getLogger(__name__)

SHEET_TITLE = "Сравнение данных"
EXPORT_SUFFIX = ".xlsx"
MIN_WIDTH = 10
MAX_WIDTH = 50

_HEADER_FONT = Font(bold=True, color="FFFFFFFF")
_HEADER_FILL = PatternFill(fill_type="solid", fgColor="FF555555")
_HEADER_ALIGNMENT = Alignment(vertical="center", horizontal="left")

_ROW_FILLS = {
    StatusLabel.WAS: PatternFill(fill_type="solid", fgColor="FFFFF0F0"),
    StatusLabel.BECAME: PatternFill(fill_type="solid", fgColor="FFF0FFF0"),
    StatusLabel.NEW: PatternFill(fill_type="solid", fgColor="FFF0F0FF"),
    StatusLabel.DELETED: PatternFill(fill_type="solid", fgColor="FFFFF0D0"),
}
_STRIKE_FONT = Font(strike=True)
# changed cells of a СТАЛО row: fill normally, bold when filtering by change
_CHANGED_FILL = PatternFill(fill_type="solid", fgColor="FFFEF08A")
_CHANGED_FONT = Font(bold=True, color="FF1D4ED8")


def default_export_name(today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"сравнение_РМ_{stamp}.xlsx"


def _autosize(ws: Worksheet, frame: pd.DataFrame) -> None:
    for i, header in enumerate(frame.columns, start=1):
        lengths = [len(str(header)), MIN_WIDTH]
        lengths.extend(len(str(v)) for v in frame.iloc[:, i - 1])
        ws.column_dimensions[get_column_letter(i)].width = min(max(lengths) + 2, MAX_WIDTH)


def _style(ws: Worksheet, statuses: Sequence[StatusLabel], width: int) -> None:
    ws.row_dimensions[1].height = 20
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGNMENT
    for offset, status in enumerate(statuses, start=2):
        fill = _ROW_FILLS[status]
        for cell in ws[offset][:width]:
            cell.fill = fill
            if status is StatusLabel.DELETED:
                cell.font = _STRIKE_FONT


def _highlight(
    ws: Worksheet,
    rows: Sequence[DisplayRow],
    classified: ClassifiedRows,
    catalogue: FieldCatalogue,
    bold: bool,
) -> None:
    """Mark changed field cells on the СТАЛО row of each pair."""
    # column 1 is the status, catalogue fields follow in order
    columns = {spec.key: index for index, spec in enumerate(catalogue.fields, start=2)}
    for offset, row in enumerate(rows, start=2):
        pair = classified.pair_for(row) if row.is_after_half else None
        if pair is None:
            continue
        for key in pair.changed_fields:
            cell = ws.cell(row=offset, column=columns[key])
            if bold:
                cell.font = _CHANGED_FONT
            else:
                cell.fill = _CHANGED_FILL


def export_rows(
    path: Path,
    rows: Sequence[DisplayRow],
    classified: ClassifiedRows,
    catalogue: FieldCatalogue,
    *,
    highlight_bold: bool = False,
) -> Path:
    """Write rows to ``path`` as a single styled worksheet. Returns the path written.

    A path without suffix gets ``.xlsx``; any other suffix raises ValueError.
    ``highlight_bold`` switches changed cells from a fill to bold text (used
    while a change-type or transition filter is active).
    """
    if not path.suffix:
        path = path.with_suffix(EXPORT_SUFFIX)
    elif path.suffix.lower() != EXPORT_SUFFIX:
        raise ValueError(f"export target must be an {EXPORT_SUFFIX} file: {path}")
    frame = build_table(rows, classified, catalogue)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=SHEET_TITLE, index=False)
        ws = writer.sheets[SHEET_TITLE]
        ws.freeze_panes = "A2"
        _style(ws, [status_label(row) for row in rows], len(frame.columns))
        _highlight(ws, rows, classified, catalogue, highlight_bold)
        _autosize(ws, frame)
    logger.info(f"exported {len(rows)} rows -> {path}")
    return path
