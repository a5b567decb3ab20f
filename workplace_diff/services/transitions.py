from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models.catalogue import TransitionRule
from ..models.record import Record

"""Registry of curated attribute-transition rules.

Each rule is a pure (before, after) -> bool predicate. Filters refer to rules
by name, so adding a transition means adding a config entry, not a new
FilterState flag.
"""

__all__ = [
    "TransitionRegistry",
]


class TransitionRegistry:
    """Ordered, name-unique collection of TransitionRule."""

    def __init__(self, rules: Iterable[TransitionRule] = ()) -> None:
        self._rules: dict[str, TransitionRule] = {}
        for rule in rules:
            if rule.name in self._rules:
                raise ValueError(f"duplicate transition rule: {rule.name}")
            self._rules[rule.name] = rule

    def __iter__(self) -> Iterator[TransitionRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def get(self, name: str) -> TransitionRule | None:
        return self._rules.get(name)

    def evaluate(self, before: Record, after: Record) -> frozenset[str]:
        """Names of all rules that hold for the before/after pair."""
        return frozenset(rule.name for rule in self if rule.matches(before, after))
