#!/usr/bin/env python3
"""Generate a synthetic before/after pair of workplace register workbooks.

The generated files follow the register layout expected by workplace-diff:
- Sheets 1-2: filler sheets (ignored)
- Sheet 3: header row, data rows, trailing footer row
- Catalogue columns at their configured 1-based positions

The "after" file is derived from "before" by deleting, adding and editing a
share of the rows, including attribute moves into "Резерв" / partner values,
so every filter axis has something to show.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from workplace_diff.config.loader import load_config, load_default_config
from workplace_diff.models.catalogue import FieldCatalogue

CITIES = ["Москва", "Санкт-Петербург", "Нижний Новгород", "Казань", "Екатеринбург"]
STREETS = ["ул Ленина", "пр-т Мира", "ул Гагарина", "наб Обводного канала"]
ATTRIBUTES = ["Сотрудник", "Резерв", "Партнер", "Размещение партнера", "Свободно", None]
DEPARTMENTS = ["ДИТ", "Розница", "Риски", "HR", "Казначейство"]


def generate_records(rows: int, catalogue: FieldCatalogue, seed: int = 42) -> list[dict[str, Any]]:
    """Generate ``rows`` register records keyed RM-000001..."""
    rng = np.random.default_rng(seed)
    records: list[dict[str, Any]] = []
    for i in range(1, rows + 1):
        city = CITIES[rng.integers(len(CITIES))]
        values = {
            catalogue.key_field: f"RM-{i:06d}",
            catalogue.address_field: f"г {city}, {STREETS[rng.integers(len(STREETS))]}, д {rng.integers(1, 120)}",
            catalogue.floor_field: str(rng.integers(1, 25)),
            catalogue.attribute_field: ATTRIBUTES[rng.integers(len(ATTRIBUTES))],
            catalogue.quantity_field: int(rng.integers(1, 6)),
            "department": DEPARTMENTS[rng.integers(len(DEPARTMENTS))],
            "name": f"Сотрудник {i}",
        }
        records.append(catalogue.restrict(values))
    return records


def mutate_records(
    records: list[dict[str, Any]], catalogue: FieldCatalogue, share: float = 0.1, seed: int = 7
) -> list[dict[str, Any]]:
    """Derive the "after" snapshot: drop/edit ``share`` of rows each, append new ones."""
    rng = np.random.default_rng(seed)
    after: list[dict[str, Any]] = []
    for record in records:
        roll = rng.random()
        if roll < share:
            continue  # deleted
        updated = dict(record)
        if roll < share * 2:
            updated[catalogue.attribute_field] = "Резерв" if rng.random() < 0.5 else "Партнер"
        elif roll < share * 3:
            updated[catalogue.floor_field] = str(rng.integers(1, 25))
        after.append(updated)
    extra = generate_records(max(1, int(len(records) * share)), catalogue, seed=seed + 1)
    for offset, record in enumerate(extra, start=1):
        record[catalogue.key_field] = f"RM-N{offset:05d}"
        after.append(record)
    return after


def register_frame(records: list[dict[str, Any]], catalogue: FieldCatalogue) -> pd.DataFrame:
    """Lay records out at their column positions: header, data rows, footer."""
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
    # footer carries the quantity total, so the reader sees it as a data row and drops it
    footer: list[Any] = [None] * width
    footer[0] = "Итого"
    quantity_column = next(s.column for s in catalogue.fields if s.key == catalogue.quantity_field)
    footer[quantity_column - 1] = sum(r.get(catalogue.quantity_field) or 0 for r in records)
    lines.append(footer)
    return pd.DataFrame(lines)


def write_register(path: Path, records: list[dict[str, Any]], catalogue: FieldCatalogue, sheet_index: int = 2) -> None:
    with pd.ExcelWriter(path) as writer:
        for filler in range(sheet_index):
            pd.DataFrame([["—"]]).to_excel(writer, sheet_name=f"Лист{filler + 1}", header=False, index=False)
        register_frame(records, catalogue).to_excel(writer, sheet_name="РМ", header=False, index=False)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic before/after register workbooks")
    parser.add_argument("--rows", type=int, default=2000, help="Rows in the before snapshot")
    parser.add_argument("--share", type=float, default=0.1, help="Share of rows deleted / edited / added")
    parser.add_argument("--config", type=Path, help="Comparison config (default: bundled)")
    parser.add_argument("--output-dir", type=Path, default=Path("data"))
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 < args.share < 0.3:
        print("Error: --share must be in (0, 0.3)", file=sys.stderr)
        return 1

    cfg = load_config(args.config) if args.config else load_default_config()
    catalogue = cfg.catalogue
    before = generate_records(args.rows, catalogue, seed=args.seed)
    after = mutate_records(before, catalogue, share=args.share, seed=args.seed + 1)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    before_path = args.output_dir / "before.xlsx"
    after_path = args.output_dir / "after.xlsx"
    write_register(before_path, before, catalogue, cfg.reader.sheet_index)
    write_register(after_path, after, catalogue, cfg.reader.sheet_index)
    print(f"before: {before_path} ({len(before):,} rows)")
    print(f"after:  {after_path} ({len(after):,} rows)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
