from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from .record import Classification, DiffEntry

"""Aggregated counts for one comparison run (SUMMARY line source)."""

__all__ = [
    "ComparisonSummary",
]


@dataclass(frozen=True)
class ComparisonSummary:
    before_rows: int  # records read from the before snapshot
    after_rows: int  # records read from the after snapshot
    new: int
    changed: int
    deleted: int
    projected_rows: int  # display rows before filtering
    visible_rows: int  # display rows after filtering

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[DiffEntry],
        *,
        before_rows: int,
        after_rows: int,
        projected_rows: int,
        visible_rows: int,
    ) -> ComparisonSummary:
        counts = Counter(e.classification for e in entries)
        return cls(
            before_rows=before_rows,
            after_rows=after_rows,
            new=counts[Classification.NEW],
            changed=counts[Classification.CHANGED],
            deleted=counts[Classification.DELETED],
            projected_rows=projected_rows,
            visible_rows=visible_rows,
        )
