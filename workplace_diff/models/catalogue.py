from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .values import value_text

"""Field catalogue and transition rule models.

The catalogue is the explicit description of the dataset shape: which columns
are read from the workbook, which field is the workplace key, and the labels
shown for each field. Every pipeline stage receives it as an argument instead
of reading module-level constants, so a differently shaped sheet only needs a
different config file.
"""

__all__ = [
    "DEFAULT_CITY_PATTERN",
    "FieldSpec",
    "FieldCatalogue",
    "TransitionRule",
]

# "г Москва", "г. Санкт-Петербург", "г Нижний Новгород" -> trailing capitalised words
DEFAULT_CITY_PATTERN = r"(?<![А-Яа-яЁё])г\.?\s+([А-ЯЁ][А-Яа-яЁё-]*(?:\s+[А-ЯЁ][А-Яа-яЁё-]*)*)"


@dataclass(frozen=True)
class FieldSpec:
    """One column of interest in the source workbook."""
    key: str  # stable field identifier (record key)
    column: int  # 1-based column number in the worksheet
    label: str  # human-readable label, presentation only


@dataclass(frozen=True)
class FieldCatalogue:
    """Closed set of fields plus the role each special field plays.

    Role fields (key/address/floor/attribute/quantity) must name a key present
    in ``fields``; the config loader checks this before building the object.
    """
    fields: tuple[FieldSpec, ...]
    key_field: str  # workplace identifier (РМ)
    address_field: str
    floor_field: str
    attribute_field: str  # "Признак"
    quantity_field: str
    new_record_label: str = "Новая запись"
    removed_record_label: str = "Запись удалена"
    city_pattern: str = DEFAULT_CITY_PATTERN
    _labels: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_labels", {f.key: f.label for f in self.fields})

    @property
    def keys(self) -> tuple[str, ...]:
        """Field keys in catalogue (column) order."""
        return tuple(f.key for f in self.fields)

    @property
    def attribute_label(self) -> str:
        return self.label(self.attribute_field)

    def label(self, key: str) -> str:
        return self._labels.get(key, key)

    def restrict(self, values: dict[str, Any]) -> dict[str, Any]:
        """Return a record holding exactly the catalogue keys (missing -> None)."""
        return {key: values.get(key) for key in self.keys}


@dataclass(frozen=True)
class TransitionRule:
    """Named attribute transition: value moved from outside ``targets`` into it.

    Values are compared by their display text after ``strip()``. ``None`` is never inside the
    target set, so "absent before" counts as outside.
    """
    name: str  # filter identifier, e.g. "to_reserve"
    label: str  # UI caption
    field: str  # catalogue key the rule inspects
    targets: frozenset[str]

    @classmethod
    def create(cls, name: str, label: str, field: str, values: Iterable[str]) -> TransitionRule:
        return cls(name=name, label=label, field=field, targets=frozenset(str(v).strip() for v in values))

    def inside(self, value: Any) -> bool:
        if value is None:
            return False
        return value_text(value).strip() in self.targets

    def matches(self, before: dict[str, Any], after: dict[str, Any]) -> bool:
        # 方向あり: target から外れる遷移はマッチしない
        return self.inside(after.get(self.field)) and not self.inside(before.get(self.field))
