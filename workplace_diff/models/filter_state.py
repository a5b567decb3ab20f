from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

"""Filter state model.

FilterState is a plain value object: the CLI (or any UI) builds one, toggles
values axis by axis, and replaces it wholesale on reset. Evaluation lives in
services.filters.
"""

__all__ = [
    "StatusLabel",
    "FilterState",
]


class StatusLabel(Enum):
    """Effective status shown in the first grid column."""
    WAS = "WAS"
    BECAME = "BECAME"
    NEW = "NEW"
    DELETED = "DELETED"

    @property
    def text(self) -> str:
        return _STATUS_TEXT[self]

    @classmethod
    def parse(cls, value: str) -> StatusLabel:
        """Accept either the enum name (``was``) or the display text (``БЫЛО``)."""
        raw = value.strip()
        for label in cls:
            if raw.upper() == label.value or raw.upper() == label.text:
                return label
        raise ValueError(f"unknown status label: {value!r}")


_STATUS_TEXT = {
    StatusLabel.WAS: "БЫЛО",
    StatusLabel.BECAME: "СТАЛО",
    StatusLabel.NEW: "НОВАЯ",
    StatusLabel.DELETED: "УДАЛЕНА",
}


def _all_statuses() -> set[StatusLabel]:
    return set(StatusLabel)


@dataclass
class FilterState:
    status: set[StatusLabel] = field(default_factory=_all_statuses)
    address: set[str] = field(default_factory=set)
    floor: set[str] = field(default_factory=set)
    city: set[str] = field(default_factory=set)
    quantity: set[str] = field(default_factory=set)
    change_type: set[str] = field(default_factory=set)
    transitions: set[str] = field(default_factory=set)  # enabled TransitionRule names

    @classmethod
    def default(cls) -> FilterState:
        return cls()

    @property
    def is_default(self) -> bool:
        return self == FilterState.default()

    @property
    def is_change_filter_active(self) -> bool:
        """Change-type or transition filtering is on (the exporter switches from fill to bold highlighting)."""
        return bool(self.change_type or self.transitions)

    def toggle(self, axis: str, value: object, enabled: bool = True) -> None:
        """Add (enabled=True) or remove a value on one axis."""
        if axis not in {f.name for f in fields(self)}:
            raise ValueError(f"unknown filter axis: {axis}")
        target: set = getattr(self, axis)
        if enabled:
            target.add(value)
        else:
            target.discard(value)
