from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.catalogue import DEFAULT_CITY_PATTERN, FieldCatalogue, FieldSpec, TransitionRule

"""Config loader.

Responsibilities:
- Load a YAML comparison config (bundled default.yml or a user file)
- Validate it against config_schema.json
- Cross-check role fields / rule fields against the field catalogue
- Build the immutable CompareConfig consumed by the pipeline
"""

_CONFIG_DIR = Path(__file__).parent
SCHEMA_PATH = _CONFIG_DIR / "config_schema.json"
DEFAULT_CONFIG_PATH = _CONFIG_DIR / "default.yml"

_ROLE_KEYS = ("key_field", "address_field", "floor_field", "attribute_field", "quantity_field")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ReaderSettings:
    """How snapshot rows are cut out of the workbook."""
    sheet_index: int = 2  # 0-based; the register lives on the third sheet
    header_rows: int = 1
    drop_footer: bool = True  # last data row is a totals/footer line


@dataclass(frozen=True)
class CompareConfig:
    catalogue: FieldCatalogue
    reader: ReaderSettings
    transitions: tuple[TransitionRule, ...]
    source: Path | None = None  # file the config was loaded from


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or data violates the schema
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _check_city_pattern(pattern: str) -> None:
    """The city regex must compile and capture the city name in group 1."""
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"config validation failed: invalid city_pattern: {e}") from e
    if compiled.groups < 1:
        raise ConfigError("config validation failed: invalid city_pattern: no capture group for the city name")


def _check_references(data: dict[str, Any]) -> None:
    _check_city_pattern(data.get("city_pattern", DEFAULT_CITY_PATTERN))
    keys = [f["key"] for f in data["fields"]]
    duplicated = sorted({k for k in keys if keys.count(k) > 1})
    if duplicated:
        raise ConfigError(f"config validation failed: duplicate field keys {duplicated}")
    for role in _ROLE_KEYS:
        if data[role] not in keys:
            raise ConfigError(f"config validation failed: {role} '{data[role]}' is not a declared field")
    names: set[str] = set()
    for rule in data.get("transitions", []):
        if rule["name"] in names:
            raise ConfigError(f"config validation failed: duplicate transition '{rule['name']}'")
        names.add(rule["name"])
        if rule["field"] not in keys:
            raise ConfigError(
                f"config validation failed: transition '{rule['name']}' uses unknown field '{rule['field']}'"
            )


def build_config(data: dict[str, Any], source: Path | None = None) -> CompareConfig:
    """Validate a raw mapping and turn it into CompareConfig."""
    _validate_config_schema(data)
    _check_references(data)

    catalogue = FieldCatalogue(
        fields=tuple(FieldSpec(key=f["key"], column=f["column"], label=f["label"]) for f in data["fields"]),
        key_field=data["key_field"],
        address_field=data["address_field"],
        floor_field=data["floor_field"],
        attribute_field=data["attribute_field"],
        quantity_field=data["quantity_field"],
        new_record_label=data.get("new_record_label", "Новая запись"),
        removed_record_label=data.get("removed_record_label", "Запись удалена"),
        city_pattern=data.get("city_pattern", DEFAULT_CITY_PATTERN),
    )
    reader = ReaderSettings(
        sheet_index=data.get("sheet_index", 2),
        header_rows=data.get("header_rows", 1),
        drop_footer=data.get("drop_footer", True),
    )
    transitions = tuple(
        TransitionRule.create(r["name"], r["label"], r["field"], r["values"]) for r in data.get("transitions", [])
    )
    return CompareConfig(catalogue=catalogue, reader=reader, transitions=transitions, source=source)


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")
    return build_config(data, source=path)


def load_default_config() -> CompareConfig:
    """Bundled register layout (third sheet, 14 columns, reserve/partner rules)."""
    return load_config(DEFAULT_CONFIG_PATH)
