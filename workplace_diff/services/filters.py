from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..models.catalogue import FieldCatalogue
from ..models.display_row import DisplayRow
from ..models.filter_state import FilterState, StatusLabel
from ..models.record import Classification
from ..models.values import is_blank, numeric_sort_key, value_text
from .classifier import ClassifiedRows, status_label
from .transitions import TransitionRegistry

"""Filter engine: FilterState x ClassifiedRows -> visible rows.

Axes combine with AND, values within one axis with OR. An empty axis set means
"no restriction". Row order of the survivors is the projector order.
"""

__all__ = [
    "FilterError",
    "FilterOptions",
    "row_matches",
    "apply_filters",
    "build_filter_options",
]

logger = logging.getLogger(__name__)


class FilterError(Exception):
    """Raised for filter states referring to unknown transition rules."""


@dataclass(frozen=True)
class FilterOptions:
    """Values a user can pick per axis (derived from the unfiltered rows)."""
    statuses: tuple[StatusLabel, ...]
    addresses: tuple[str, ...]
    floors: tuple[str, ...]
    cities: tuple[str, ...]
    quantities: tuple[str, ...]  # numeric-aware order
    change_types: tuple[str, ...]
    transitions: dict[str, str]  # rule name -> label


def _rejects(selected: set[str], value: Any) -> bool:
    """Value axis check: blank values are never filtered out."""
    if not selected or is_blank(value):
        return False
    return value_text(value) not in selected


def _matches_change_type(row: DisplayRow, selected: set[str], classified: ClassifiedRows, catalogue: FieldCatalogue) -> bool:
    if row.origin is Classification.NEW:
        return catalogue.new_record_label in selected
    if row.origin is Classification.DELETED:
        return catalogue.removed_record_label in selected
    if not row.is_after_half:
        return False
    pair = classified.pair_for(row)
    return pair is not None and not selected.isdisjoint(pair.labels)


def row_matches(
    row: DisplayRow, filters: FilterState, classified: ClassifiedRows, catalogue: FieldCatalogue
) -> bool:
    if status_label(row) not in filters.status:
        return False

    record = row.record
    if _rejects(filters.address, record.get(catalogue.address_field)):
        return False
    if _rejects(filters.floor, record.get(catalogue.floor_field)):
        return False
    if _rejects(filters.quantity, row.quantity):
        return False
    if filters.city and row.city and row.city not in filters.city:
        return False

    if filters.change_type and not _matches_change_type(row, filters.change_type, classified, catalogue):
        return False

    if filters.transitions:
        # 遷移フィルタは変更ペアの「СТАЛО」行のみ対象
        pair = classified.pair_for(row) if row.is_after_half else None
        if pair is None or not filters.transitions <= pair.transitions:
            return False
    return True


def apply_filters(
    classified: ClassifiedRows,
    filters: FilterState,
    catalogue: FieldCatalogue,
    registry: TransitionRegistry,
) -> list[DisplayRow]:
    unknown = sorted(name for name in filters.transitions if name not in registry)
    if unknown:
        raise FilterError(f"unknown transition filter: {', '.join(unknown)}")
    visible = [row for row in classified.rows if row_matches(row, filters, classified, catalogue)]
    logger.debug("filter: %d of %d rows visible", len(visible), len(classified.rows))
    return visible


def _unique_texts(values: Iterable[Any]) -> set[str]:
    return {value_text(v) for v in values if not is_blank(v)}


def build_filter_options(
    classified: ClassifiedRows, catalogue: FieldCatalogue, registry: TransitionRegistry
) -> FilterOptions:
    rows = classified.rows
    return FilterOptions(
        statuses=tuple(StatusLabel),
        addresses=tuple(sorted(_unique_texts(r.record.get(catalogue.address_field) for r in rows))),
        floors=tuple(sorted(_unique_texts(r.record.get(catalogue.floor_field) for r in rows))),
        cities=tuple(sorted({r.city for r in rows if r.city})),
        quantities=tuple(sorted(_unique_texts(r.quantity for r in rows), key=numeric_sort_key)),
        change_types=classified.change_types,
        transitions={rule.name: rule.label for rule in registry},
    )
