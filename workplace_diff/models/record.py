from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

"""Record and DiffEntry models.

A Record is one worksheet row restricted to the catalogue fields
(field key -> raw cell value). A DiffEntry is one reconciliation outcome for a
single workplace key.
"""

__all__ = [
    "Record",
    "WorkplaceId",
    "Classification",
    "DiffEntry",
]

Record: TypeAlias = dict[str, Any]
WorkplaceId: TypeAlias = Any  # key column value as stored (str or number)


class Classification(Enum):
    """Why a key appears in the diff.

    - NEW: key only in the after snapshot
    - CHANGED: key in both, at least one field differs
    - DELETED: key only in the before snapshot
    """
    NEW = "new"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class DiffEntry:
    """Typed reconciliation result for one key.

    before is None  <=> NEW
    after is None   <=> DELETED
    """
    classification: Classification
    key: WorkplaceId
    before: Record | None
    after: Record | None

    def __post_init__(self) -> None:
        expected_before = self.classification is not Classification.NEW
        expected_after = self.classification is not Classification.DELETED
        if (self.before is not None) != expected_before or (self.after is not None) != expected_after:
            raise ValueError(
                f"inconsistent {self.classification.value} entry for key {self.key!r}: "
                f"before={'set' if self.before is not None else 'None'} "
                f"after={'set' if self.after is not None else 'None'}"
            )
