from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models.catalogue import FieldCatalogue
from ..models.record import Classification, DiffEntry, Record, WorkplaceId

"""Keyed reconciliation of two snapshots.

Entries come out in a fixed order: NEW/CHANGED in after-snapshot order, then
DELETED in before-snapshot order. Duplicate keys inside one snapshot are not
rejected; the later row shadows the earlier one (logged as WARN).
"""

__all__ = [
    "index_by_key",
    "records_differ",
    "diff_snapshots",
]

logger = logging.getLogger(__name__)


def index_by_key(records: Iterable[Record], catalogue: FieldCatalogue, *, side: str = "") -> dict[WorkplaceId, Record]:
    """Build key -> record lookup, dropping null-key rows. Last write wins.

    The dict keeps first-insertion order for a key even when a later duplicate
    replaces its value.
    """
    lookup: dict[WorkplaceId, Record] = {}
    duplicates = 0
    dropped = 0
    for record in records:
        key = record.get(catalogue.key_field)
        if key is None:
            dropped += 1
            continue
        if key in lookup:
            duplicates += 1
        lookup[key] = record
    if dropped:
        logger.debug("%s snapshot: dropped %d rows without key", side or "?", dropped)
    if duplicates:
        # 仕様未確定: 重複キーはエラーにせず後勝ち
        logger.warning("%s snapshot: %d duplicate keys, later rows win", side or "?", duplicates)
    return lookup


def records_differ(before: Record, after: Record, catalogue: FieldCatalogue) -> bool:
    return any(before.get(key) != after.get(key) for key in catalogue.keys)


def diff_snapshots(
    before: Sequence[Record], after: Sequence[Record], catalogue: FieldCatalogue
) -> list[DiffEntry]:
    """Reconcile two snapshots into NEW / CHANGED / DELETED entries.

    Identical records produce no entry, so diffing a snapshot against a copy of
    itself returns an empty list.
    """
    before_lookup = index_by_key(before, catalogue, side="before")
    after_lookup = index_by_key(after, catalogue, side="after")

    entries: list[DiffEntry] = []
    for key, after_record in after_lookup.items():
        before_record = before_lookup.get(key)
        if before_record is None:
            entries.append(DiffEntry(Classification.NEW, key, None, after_record))
        elif records_differ(before_record, after_record, catalogue):
            entries.append(DiffEntry(Classification.CHANGED, key, before_record, after_record))

    for key, before_record in before_lookup.items():
        if key not in after_lookup:
            entries.append(DiffEntry(Classification.DELETED, key, before_record, None))

    logger.debug(
        "diff: before_keys=%d after_keys=%d entries=%d", len(before_lookup), len(after_lookup), len(entries)
    )
    return entries
