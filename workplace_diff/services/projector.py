from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any

from ..models.catalogue import FieldCatalogue
from ..models.display_row import DisplayRow, Lineage
from ..models.record import Classification, DiffEntry, Record

"""Row projection: DiffEntry -> one or two DisplayRows.

A CHANGED entry always becomes an OLD row immediately followed by a NEW row
with the same key; classifier and filter rely on this adjacency.
"""

__all__ = [
    "extract_city",
    "project_rows",
]


@lru_cache(maxsize=8)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def extract_city(address: Any, pattern: str) -> str | None:
    """Return the city name following the city marker, or None."""
    if address is None:
        return None
    text = str(address)
    if not text.strip():
        return None
    match = _compile(pattern).search(text)
    if match is None:
        return None
    return match.group(1).strip() or None


def _row(lineage: Lineage, record: Record, entry: DiffEntry, catalogue: FieldCatalogue) -> DisplayRow:
    return DisplayRow(
        lineage=lineage,
        record=record,
        key=entry.key,
        city=extract_city(record.get(catalogue.address_field), catalogue.city_pattern),
        quantity=record.get(catalogue.quantity_field),
        origin=entry.classification,
    )


def project_rows(entries: Iterable[DiffEntry], catalogue: FieldCatalogue) -> list[DisplayRow]:
    rows: list[DisplayRow] = []
    for entry in entries:
        if entry.classification is Classification.CHANGED:
            assert entry.before is not None and entry.after is not None
            rows.append(_row(Lineage.OLD, entry.before, entry, catalogue))
            rows.append(_row(Lineage.NEW, entry.after, entry, catalogue))
        elif entry.classification is Classification.NEW:
            assert entry.after is not None
            rows.append(_row(Lineage.NEW, entry.after, entry, catalogue))
        else:
            assert entry.before is not None
            rows.append(_row(Lineage.DELETED, entry.before, entry, catalogue))
    return rows
