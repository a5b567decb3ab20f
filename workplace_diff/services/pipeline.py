from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..config.loader import CompareConfig
from ..excel.reader import SnapshotReadError, read_snapshot
from ..models.comparison_result import ComparisonSummary
from ..models.display_row import DisplayRow
from ..models.filter_state import FilterState
from ..models.record import DiffEntry, Record
from .classifier import ClassifiedRows, classify
from .diff_engine import diff_snapshots
from .filters import FilterOptions, apply_filters, build_filter_options
from .progress import ProgressTracker
from .projector import project_rows
from .transitions import TransitionRegistry

"""Comparison pipeline orchestration.

Read (x2) -> diff -> project -> classify are computed once per snapshot pair
and kept on a ComparisonSession; only the filter stage re-runs when the
FilterState changes. Every stage returns a new sequence, nothing is patched
in place.
"""

__all__ = [
    "CompareError",
    "ComparisonSession",
    "read_snapshots",
    "open_session",
    "run_pipeline",
]

logger = logging.getLogger(__name__)


class CompareError(Exception):
    """Raised when a snapshot cannot be read; no diff is produced."""

    def __init__(self, side: str, message: str) -> None:
        super().__init__(f"{side}: {message}")
        self.side = side  # "before" / "after"


class ComparisonSession:
    """Memoised comparison of one snapshot pair."""

    def __init__(self, before: Sequence[Record], after: Sequence[Record], config: CompareConfig) -> None:
        self.config = config
        self.catalogue = config.catalogue
        self.registry = TransitionRegistry(config.transitions)
        self.before_count = len(before)
        self.after_count = len(after)
        self.entries: list[DiffEntry] = diff_snapshots(before, after, self.catalogue)
        rows = project_rows(self.entries, self.catalogue)
        self.classified: ClassifiedRows = classify(rows, self.catalogue, self.registry)

    @property
    def rows(self) -> tuple[DisplayRow, ...]:
        return self.classified.rows

    def apply(self, filters: FilterState) -> list[DisplayRow]:
        return apply_filters(self.classified, filters, self.catalogue, self.registry)

    def options(self) -> FilterOptions:
        return build_filter_options(self.classified, self.catalogue, self.registry)

    def summarize(self, visible: Sequence[DisplayRow]) -> ComparisonSummary:
        return ComparisonSummary.from_entries(
            self.entries,
            before_rows=self.before_count,
            after_rows=self.after_count,
            projected_rows=len(self.rows),
            visible_rows=len(visible),
        )


def read_snapshots(before_path: Path, after_path: Path, config: CompareConfig) -> tuple[list[Record], list[Record]]:
    """Read both workbooks; fail as a whole if either one is unreadable."""
    result: dict[str, list[Record]] = {}
    with ProgressTracker(2, description="Reading snapshots") as progress:
        for side, path in (("before", before_path), ("after", after_path)):
            progress.start(Path(path).name)
            try:
                snapshot = read_snapshot(path, config.catalogue, config.reader)
            except SnapshotReadError as e:
                raise CompareError(side, str(e)) from e
            result[side] = snapshot.records
            progress.finish(records=len(snapshot.records))
            logger.info(f"{side}: {snapshot.name} records={len(snapshot.records)}")
    return result["before"], result["after"]


def open_session(before_path: Path, after_path: Path, config: CompareConfig) -> ComparisonSession:
    before, after = read_snapshots(before_path, after_path, config)
    return ComparisonSession(before, after, config)


def run_pipeline(
    before: Sequence[Record], after: Sequence[Record], filters: FilterState, config: CompareConfig
) -> list[DisplayRow]:
    """Stateless one-shot run: same inputs, same output."""
    return ComparisonSession(before, after, config).apply(filters)
