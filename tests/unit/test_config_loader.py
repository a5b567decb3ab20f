from __future__ import annotations

from pathlib import Path

import pytest

from workplace_diff.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ReaderSettings,
    load_config,
    load_default_config,
)


def test_load_default_config():
    cfg = load_default_config()

    assert cfg.source == DEFAULT_CONFIG_PATH
    assert cfg.reader == ReaderSettings(sheet_index=2, header_rows=1, drop_footer=True)
    catalogue = cfg.catalogue
    assert len(catalogue.fields) == 14
    assert catalogue.key_field == "workplace_id"
    assert catalogue.label("attribute") == "Признак"
    assert catalogue.attribute_label == "Признак"
    assert [f.column for f in catalogue.fields] == sorted(f.column for f in catalogue.fields)
    assert [r.name for r in cfg.transitions] == ["to_reserve", "to_partner"]
    partner = cfg.transitions[1]
    assert partner.targets == {"Размещение делового партнера", "Размещение партнера", "Партнер"}


def test_load_custom_config(write_config: Path):
    cfg = load_config(write_config)

    assert cfg.reader == ReaderSettings(sheet_index=0, header_rows=1, drop_footer=False)
    assert cfg.catalogue.keys == ("id", "addr", "floor", "flag", "qty")
    assert cfg.catalogue.new_record_label == "Новая запись"
    assert cfg.transitions[0].targets == {"closed"}


def test_missing_config_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "absent.yml")


def test_invalid_yaml(temp_workdir: Path):
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text("fields: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(cfg)


def test_top_level_must_be_mapping(temp_workdir: Path):
    cfg = temp_workdir / "config" / "compare.yml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="top level must be a mapping"):
        load_config(cfg)


def test_role_field_must_be_declared(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("quantity_field: qty", "quantity_field: amount")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="quantity_field 'amount' is not a declared field"):
        load_config(write_config)


def test_duplicate_field_keys(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("{key: qty,", "{key: floor,")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="duplicate field keys"):
        load_config(write_config)


def test_transition_field_must_exist(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("field: flag", "field: status")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="uses unknown field 'status'"):
        load_config(write_config)


def test_duplicate_transition_names(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + (
        "  - name: to_closed\n    label: again\n    field: flag\n    values: [x]\n"
    )
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="duplicate transition 'to_closed'"):
        load_config(write_config)


@pytest.mark.parametrize(
    "pattern, reason",
    [
        ("г (unclosed", "missing )"),
        ("г", "no capture group"),
    ],
)
def test_city_pattern_must_compile_with_group(write_config: Path, pattern, reason):
    text = write_config.read_text(encoding="utf-8") + f"city_pattern: '{pattern}'\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid city_pattern") as excinfo:
        load_config(write_config)
    assert reason in str(excinfo.value)
