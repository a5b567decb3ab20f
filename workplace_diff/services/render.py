from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.catalogue import FieldCatalogue
from ..models.display_row import DisplayRow
from ..models.values import display_value
from .classifier import ClassifiedRows, change_type_text, status_label
from .filters import FilterOptions

"""Tabular rendering of visible rows.

build_table() is the single source of the grid contents; the terminal output
and the xlsx exporter both go through it.
"""

__all__ = [
    "STATUS_HEADER",
    "CHANGE_TYPE_HEADER",
    "EMPTY_MESSAGE",
    "build_table",
    "render_text",
    "render_options",
]

STATUS_HEADER = "Статус строки"  # field 62 is already labelled "Статус"
CHANGE_TYPE_HEADER = "Тип изменения"
EMPTY_MESSAGE = "Нет данных по выбранным фильтрам."


def build_table(rows: Sequence[DisplayRow], classified: ClassifiedRows, catalogue: FieldCatalogue) -> pd.DataFrame:
    """One line per row: status text, catalogue fields (blank -> "—"), change text."""
    columns = [STATUS_HEADER, *(spec.label for spec in catalogue.fields), CHANGE_TYPE_HEADER]
    data = [
        [
            status_label(row).text,
            *(display_value(row.record.get(spec.key)) for spec in catalogue.fields),
            change_type_text(row, classified, catalogue),
        ]
        for row in rows
    ]
    return pd.DataFrame(data, columns=columns)


def render_text(frame: pd.DataFrame) -> str:
    if frame.empty:
        return EMPTY_MESSAGE
    return frame.to_string(index=False)


def render_options(options: FilterOptions) -> str:
    """Human-readable listing of filter values (CLI --list-options)."""
    lines = [
        f"status: {', '.join(s.text for s in options.statuses)}",
        f"change_type: {', '.join(options.change_types) or '—'}",
        f"transition: {', '.join(f'{name} ({label})' for name, label in options.transitions.items()) or '—'}",
        f"city: {', '.join(options.cities) or '—'}",
        f"floor: {', '.join(options.floors) or '—'}",
        f"quantity: {', '.join(options.quantities) or '—'}",
        "address:",
    ]
    lines.extend(f"  {address}" for address in options.addresses)
    return "\n".join(lines)
