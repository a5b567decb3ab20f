from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd

from ..config.loader import ReaderSettings
from ..models.catalogue import FieldCatalogue
from ..models.record import Record

"""Snapshot reader.

Layout of a register workbook (defaults, see config):
- worksheet #3 holds the register
- row 1 is the header, data rows follow
- the last non-empty data row is a footer and is discarded

Columns are picked by 1-based position, not by header text (header captions
vary between exports). Values keep the types pandas produced; only NaN/NaT
becomes None.
"""

__all__ = [
    "SnapshotReadError",
    "Snapshot",
    "read_workbook_sheet",
    "normalize_snapshot",
    "read_snapshot",
]

logger = logging.getLogger(__name__)

Source = Union[Path, str, bytes, IO[bytes]]


class SnapshotReadError(Exception):
    """Raised when a payload is not a readable workbook / sheet."""


@dataclass(frozen=True)
class Snapshot:
    name: str  # file name (or "<bytes>") for messages
    records: list[Record]


def _source_name(source: Source) -> str:
    if isinstance(source, (str, Path)):
        return Path(source).name
    return "<bytes>"


def read_workbook_sheet(source: Source, sheet_index: int) -> pd.DataFrame:
    """Read one worksheet raw (no header) as a DataFrame.

    Only truly empty cells become NaN; strings such as "NA" or "null" are kept
    as written in the sheet.
    """
    payload = io.BytesIO(source) if isinstance(source, bytes) else source
    with pd.ExcelFile(payload) as xls:
        if sheet_index >= len(xls.sheet_names):
            raise SnapshotReadError(
                f"workbook has {len(xls.sheet_names)} sheets, sheet #{sheet_index + 1} required"
            )
        # keep_default_na=False: 既定の NA 文字列変換を無効化 (空セルのみ NaN)
        return xls.parse(xls.sheet_names[sheet_index], header=None, keep_default_na=False, na_values=[""])


def _cell(raw: list[Any], column: int) -> Any:
    index = column - 1
    if index >= len(raw):
        return None
    value = raw[index]
    if pd.isna(value):
        return None
    return value


def normalize_snapshot(df: pd.DataFrame, catalogue: FieldCatalogue, settings: ReaderSettings) -> list[Record]:
    """Cut catalogue columns out of a raw sheet.

    Steps:
    1. Drop ``header_rows`` leading rows
    2. Keep only catalogue columns (missing columns read as None)
    3. Skip rows whose selected cells are all empty
    4. Drop the trailing footer row when ``drop_footer`` is set
    """
    records: list[Record] = []
    for _, raw in df.iloc[settings.header_rows:].iterrows():
        values = raw.tolist()
        record = {spec.key: _cell(values, spec.column) for spec in catalogue.fields}
        if all(v is None for v in record.values()):
            continue
        records.append(record)
    if settings.drop_footer and records:
        records.pop()
    return records


def read_snapshot(source: Source, catalogue: FieldCatalogue, settings: ReaderSettings) -> Snapshot:
    """Read a register workbook into an ordered record list.

    Raises:
        SnapshotReadError: for any failure to open or parse the workbook
    """
    name = _source_name(source)
    try:
        df = read_workbook_sheet(source, settings.sheet_index)
        records = normalize_snapshot(df, catalogue, settings)
    except Exception as e:
        raise SnapshotReadError(f"cannot read {name}: {e}") from e
    logger.debug("read %s: %d records", name, len(records))
    return Snapshot(name=name, records=records)
