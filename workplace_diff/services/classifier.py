from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..models.catalogue import FieldCatalogue
from ..models.display_row import DisplayRow, Lineage
from ..models.filter_state import StatusLabel
from ..models.record import Classification, Record, WorkplaceId
from ..models.values import PLACEHOLDER, display_value
from .transitions import TransitionRegistry

"""Change classification over projected rows.

Builds the key -> ChangedPair index once per run (pairs are adjacent OLD/NEW
rows), computes changed fields and labels per pair, evaluates transition
rules, and derives the per-row texts shared by the renderer and exporter.
"""

__all__ = [
    "PairingError",
    "ChangedPair",
    "ClassifiedRows",
    "changed_fields",
    "order_labels",
    "classify",
    "status_label",
    "change_type_text",
]


class PairingError(Exception):
    """Raised when an OLD row is not immediately followed by its NEW row."""


@dataclass(frozen=True)
class ChangedPair:
    old: DisplayRow
    new: DisplayRow
    changed_fields: tuple[str, ...]  # catalogue order
    labels: tuple[str, ...]  # attribute label first, rest alphabetical
    transitions: frozenset[str]  # names of transition rules that hold


@dataclass(frozen=True)
class ClassifiedRows:
    """Projected rows plus everything derived from them once per run."""
    rows: tuple[DisplayRow, ...]
    pairs: dict[WorkplaceId, ChangedPair]
    change_types: tuple[str, ...]  # available change-type labels (filter options)

    def pair_for(self, row: DisplayRow) -> ChangedPair | None:
        """Pair a row belongs to; None for wholly new / deleted rows."""
        if row.origin is not Classification.CHANGED:
            return None
        return self.pairs.get(row.key)


def changed_fields(before: Record, after: Record, catalogue: FieldCatalogue) -> tuple[str, ...]:
    return tuple(key for key in catalogue.keys if before.get(key) != after.get(key))


def order_labels(labels: Iterable[str], first: str) -> tuple[str, ...]:
    """Deduplicate; ``first`` (attribute label) leads, others sorted case-insensitively."""
    unique = set(labels)
    rest = sorted((label for label in unique if label != first), key=lambda s: (s.casefold(), s))
    if first in unique:
        return (first, *rest)
    return tuple(rest)


def classify(
    rows: Sequence[DisplayRow], catalogue: FieldCatalogue, registry: TransitionRegistry
) -> ClassifiedRows:
    pairs: dict[WorkplaceId, ChangedPair] = {}
    all_labels: set[str] = set()
    index = 0
    while index < len(rows):
        row = rows[index]
        if row.lineage is Lineage.OLD:
            partner = rows[index + 1] if index + 1 < len(rows) else None
            if partner is None or partner.lineage is not Lineage.NEW or partner.key != row.key:
                raise PairingError(f"old row for key {row.key!r} is not followed by its new row")
            fields = changed_fields(row.record, partner.record, catalogue)
            labels = order_labels((catalogue.label(f) for f in fields), catalogue.attribute_label)
            pairs[row.key] = ChangedPair(
                old=row,
                new=partner,
                changed_fields=fields,
                labels=labels,
                transitions=registry.evaluate(row.record, partner.record),
            )
            all_labels.update(labels)
            index += 2
            continue
        if row.origin is Classification.NEW:
            all_labels.add(catalogue.new_record_label)
        elif row.origin is Classification.DELETED:
            all_labels.add(catalogue.removed_record_label)
        index += 1

    return ClassifiedRows(
        rows=tuple(rows),
        pairs=pairs,
        change_types=order_labels(all_labels, catalogue.attribute_label),
    )


def status_label(row: DisplayRow) -> StatusLabel:
    """Effective status: origin decides for whole records, lineage for pair halves."""
    if row.origin is Classification.NEW:
        return StatusLabel.NEW
    if row.origin is Classification.DELETED:
        return StatusLabel.DELETED
    if row.lineage is Lineage.OLD:
        return StatusLabel.WAS
    return StatusLabel.BECAME


def change_type_text(row: DisplayRow, classified: ClassifiedRows, catalogue: FieldCatalogue) -> str:
    """Change description for the "Тип изменения" column (screen and export).

    The attribute field is listed first as ``Label: "old" → "new"``; other fields
    show only their new value.
    """
    if row.origin is Classification.NEW:
        return catalogue.new_record_label
    if row.origin is Classification.DELETED:
        return catalogue.removed_record_label
    if row.lineage is not Lineage.NEW:
        return PLACEHOLDER
    pair = classified.pair_for(row)
    if pair is None or not pair.changed_fields:
        return PLACEHOLDER

    ordered = sorted(pair.changed_fields, key=lambda f: f != catalogue.attribute_field)
    parts: list[str] = []
    for key in ordered:
        label = catalogue.label(key)
        new_text = display_value(pair.new.record.get(key))
        if key == catalogue.attribute_field:
            old_text = display_value(pair.old.record.get(key))
            parts.append(f'{label}: "{old_text}" → "{new_text}"')
        else:
            parts.append(f"{label}: {new_text}")
    return ", ".join(parts)
