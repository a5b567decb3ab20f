from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from openpyxl import load_workbook

from workplace_diff.excel.exporter import SHEET_TITLE, default_export_name, export_rows
from workplace_diff.services.pipeline import ComparisonSession
from workplace_diff.services.render import CHANGE_TYPE_HEADER, STATUS_HEADER

"""Unit tests for the styled xlsx export."""


def _session(make_record, compare_config) -> ComparisonSession:
    before = [
        make_record(workplace_id="R1", attribute="Сотрудник", quantity=1),
        make_record(workplace_id="R0", address="г Казань, ул Баумана", quantity=1),
    ]
    after = [
        make_record(workplace_id="R1", attribute="Резерв", quantity=1),
        make_record(workplace_id="R2", quantity=3),
    ]
    return ComparisonSession(before, after, compare_config)


def test_default_export_name():
    assert default_export_name(date(2024, 5, 17)) == "сравнение_РМ_2024-05-17.xlsx"


def test_export_rows_writes_styled_sheet(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)
    target = temp_workdir / "out" / "diff.xlsx"

    written = export_rows(target, session.rows, session.classified, compare_config.catalogue)

    assert written == target and target.exists()
    wb = load_workbook(target)
    assert wb.sheetnames == [SHEET_TITLE]
    ws = wb[SHEET_TITLE]
    assert ws.freeze_panes == "A2"

    header = [c.value for c in ws[1]]
    assert header[0] == STATUS_HEADER
    assert header[-1] == CHANGE_TYPE_HEADER
    assert ws["A1"].font.bold

    statuses = [ws.cell(row=r, column=1).value for r in range(2, ws.max_row + 1)]
    assert statuses == ["БЫЛО", "СТАЛО", "НОВАЯ", "УДАЛЕНА"]
    assert ws.cell(row=3, column=len(header)).value == 'Признак: "Сотрудник" → "Резерв"'

    fills = [ws.cell(row=r, column=2).fill.fgColor.rgb for r in range(2, 6)]
    assert fills == ["FFFFF0F0", "FFF0FFF0", "FFF0F0FF", "FFFFF0D0"]
    # deleted rows are struck through, others are not
    assert ws.cell(row=5, column=2).font.strike
    assert not ws.cell(row=4, column=2).font.strike


def test_export_empty_selection_writes_header_only(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)
    target = temp_workdir / "empty.xlsx"

    export_rows(target, [], session.classified, compare_config.catalogue)

    ws = load_workbook(target)[SHEET_TITLE]
    assert ws.max_row == 1
    assert ws["A1"].value == STATUS_HEADER


def test_column_widths_are_clamped(temp_workdir: Path, make_record, compare_config):
    before = [make_record(workplace_id="R1", address="г Москва, " + "очень длинный адрес " * 10)]
    after = [make_record(workplace_id="R1", address="г Москва, короткий")]
    session = ComparisonSession(before, after, compare_config)
    target = temp_workdir / "wide.xlsx"

    export_rows(target, session.rows, session.classified, compare_config.catalogue)

    ws = load_workbook(target)[SHEET_TITLE]
    widths = [ws.column_dimensions[letter].width for letter in ("A", "B", "C")]
    assert all(10 <= w <= 50 for w in widths)
    assert ws.column_dimensions["B"].width == 50  # Адрес


def test_changed_cells_filled_on_after_row(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)
    target = temp_workdir / "changes.xlsx"

    export_rows(target, session.rows, session.classified, compare_config.catalogue)

    ws = load_workbook(target)[SHEET_TITLE]
    header = [c.value for c in ws[1]]
    attribute_col = header.index("Признак") + 1
    address_col = header.index("Адрес") + 1
    # row 3 is СТАЛО of R1 (attribute changed)
    assert ws.cell(row=3, column=attribute_col).fill.fgColor.rgb == "FFFEF08A"
    assert ws.cell(row=3, column=address_col).fill.fgColor.rgb == "FFF0FFF0"
    # БЫЛО row keeps its row fill
    assert ws.cell(row=2, column=attribute_col).fill.fgColor.rgb == "FFFFF0F0"
    assert not ws.cell(row=3, column=attribute_col).font.bold


def test_changed_cells_bold_while_change_filter_active(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)
    target = temp_workdir / "changes.xlsx"

    export_rows(target, session.rows, session.classified, compare_config.catalogue, highlight_bold=True)

    ws = load_workbook(target)[SHEET_TITLE]
    header = [c.value for c in ws[1]]
    attribute_col = header.index("Признак") + 1
    cell = ws.cell(row=3, column=attribute_col)
    assert cell.font.bold
    assert cell.fill.fgColor.rgb == "FFF0FFF0"


def test_export_adds_missing_suffix(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)

    written = export_rows(temp_workdir / "report", session.rows, session.classified, compare_config.catalogue)

    assert written == temp_workdir / "report.xlsx"
    assert written.exists()


def test_export_rejects_other_suffix(temp_workdir: Path, make_record, compare_config):
    session = _session(make_record, compare_config)
    target = temp_workdir / "out.csv"

    with pytest.raises(ValueError, match=r"\.xlsx"):
        export_rows(target, session.rows, session.classified, compare_config.catalogue)
    assert not target.exists()
