# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from workplace_diff.config.loader import CompareConfig, load_default_config
from workplace_diff.models.catalogue import FieldCatalogue


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("WORKPLACE_DIFF_CONFIG", raising=False)
        yield p


@pytest.fixture(scope="session")
def compare_config() -> CompareConfig:
    return load_default_config()


@pytest.fixture(scope="session")
def catalogue(compare_config: CompareConfig) -> FieldCatalogue:
    return compare_config.catalogue


@pytest.fixture()
def make_record(catalogue: FieldCatalogue) -> Callable[..., dict[str, Any]]:
    """Build a full catalogue record; unspecified fields are None."""
    def _make(**values: Any) -> dict[str, Any]:
        return catalogue.restrict(values)
    return _make


@pytest.fixture()
def sample_config_yaml() -> str:
    return """sheet_index: 0
header_rows: 1
drop_footer: false
key_field: id
address_field: addr
floor_field: floor
attribute_field: flag
quantity_field: qty
fields:
  - {key: id, column: 1, label: ID}
  - {key: addr, column: 2, label: Address}
  - {key: floor, column: 3, label: Floor}
  - {key: flag, column: 4, label: Flag}
  - {key: qty, column: 5, label: Qty}
transitions:
  - name: to_closed
    label: Flag -> closed
    field: flag
    values: [closed]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def register_rows(records: list[dict[str, Any]], catalogue: FieldCatalogue, footer: bool = True) -> list[list[Any]]:
    """Lay records out at their 1-based column positions: header, data, footer."""
    width = max(spec.column for spec in catalogue.fields)
    header: list[Any] = [None] * width
    for spec in catalogue.fields:
        header[spec.column - 1] = spec.label
    lines = [header]
    for record in records:
        line: list[Any] = [None] * width
        for spec in catalogue.fields:
            line[spec.column - 1] = record.get(spec.key)
        lines.append(line)
    if footer:
        total: list[Any] = [None] * width
        total[0] = "Итого"
        qty_col = next(s.column for s in catalogue.fields if s.key == catalogue.quantity_field)
        total[qty_col - 1] = len(records)
        lines.append(total)
    return lines


@pytest.fixture()
def register_workbook(catalogue: FieldCatalogue) -> Callable[..., Path]:
    """Write a register workbook (2 filler sheets + register on sheet #3)."""
    def _write(path: Path, records: list[dict[str, Any]], *, footer: bool = True) -> Path:
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame([["filler"]]).to_excel(writer, sheet_name="Лист1", header=False, index=False)
            pd.DataFrame([["filler"]]).to_excel(writer, sheet_name="Лист2", header=False, index=False)
            pd.DataFrame(register_rows(records, catalogue, footer)).to_excel(
                writer, sheet_name="РМ", header=False, index=False
            )
        return path
    return _write
