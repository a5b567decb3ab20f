from __future__ import annotations

import pytest

from workplace_diff.models.catalogue import TransitionRule
from workplace_diff.services.transitions import TransitionRegistry


@pytest.fixture()
def registry() -> TransitionRegistry:
    return TransitionRegistry(
        [
            TransitionRule.create("to_reserve", "Признак → Резерв", "attribute", ["Резерв"]),
            TransitionRule.create("to_upper", "Этаж → верхний", "floor", ["20", "21"]),
        ]
    )


def test_registry_lookup(registry):
    assert len(registry) == 2
    assert registry.names == ("to_reserve", "to_upper")
    assert "to_upper" in registry and "to_partner" not in registry
    assert registry.get("to_reserve").field == "attribute"
    assert registry.get("to_partner") is None


def test_evaluate_collects_every_matching_rule(registry):
    before = {"attribute": "Сотрудник", "floor": 3}
    after = {"attribute": "Резерв", "floor": 20.0}
    # numeric cell values are compared through their text
    assert registry.evaluate(before, after) == {"to_reserve", "to_upper"}
    assert registry.evaluate(after, before) == frozenset()
