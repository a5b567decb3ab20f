from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .record import Classification, Record, WorkplaceId

"""DisplayRow model: one visible line of the changelog grid."""

__all__ = [
    "Lineage",
    "DisplayRow",
]


class Lineage(Enum):
    """Which half of the change a row shows.

    OLD/NEW are the two halves of a changed pair; a wholly new record is also
    NEW (distinguished by origin), a removed record is DELETED.
    """
    OLD = "old"
    NEW = "new"
    DELETED = "deleted"


@dataclass(frozen=True)
class DisplayRow:
    """Projected row. Created once by the projector, never mutated."""
    lineage: Lineage
    record: Record  # field key -> raw value
    key: WorkplaceId
    city: str | None  # extracted from address
    quantity: Any  # raw quantity value (numeric-aware sorting happens downstream)
    origin: Classification  # NEW / DELETED / CHANGED (one half of a pair)

    @property
    def is_after_half(self) -> bool:
        """True for the "СТАЛО" row of a changed pair."""
        return self.origin is Classification.CHANGED and self.lineage is Lineage.NEW
