from __future__ import annotations

import io
from pathlib import Path

import pytest

from sensorsctl.core import config_loader
from sensorsctl.core.config_loader import default_config_path, load_config
from sensorsctl.core.errors import ConfigValidationError
from sensorsctl.core.model import BusKind, ChipName

IT87 = ChipName(prefix="it87", bus_kind=BusKind.ISA, address=0x290)
LM78 = ChipName(prefix="lm78", bus_kind=BusKind.I2C, bus_number=0, address=0x2D)


def _load(text: str):
    return load_config(io.StringIO(text), source="test.yaml")


def test_load_sections() -> None:
    loaded = _load(
        """
chips:
  - chip: "it87-isa-*"
    label:
      temp1: "CPU Temp"
    ignore: [in8]
    set:
      in0_min: 1.5
      temp1_max: 60
  - chip: ["lm78-*", "lm75-*"]
    label:
      fan1: "Case Fan"
"""
    )
    assert len(loaded.sections) == 2
    first = loaded.sections[0]
    assert first.labels == {"temp1": "CPU Temp"}
    assert first.ignore == frozenset({"in8"})
    assert first.sets == (("in0_min", 1.5), ("temp1_max", 60.0))
    assert loaded.warnings == ()

    assert [s.labels for s in loaded.sections_for(IT87)] == [{"temp1": "CPU Temp"}]
    assert [s.labels for s in loaded.sections_for(LM78)] == [{"fan1": "Case Fan"}]


def test_none_and_empty_streams_give_empty_config() -> None:
    assert load_config(None).sections == ()
    assert _load("").sections == ()


def test_empty_section_produces_warning() -> None:
    loaded = _load('chips:\n  - chip: "lm78-*"\n')
    assert len(loaded.sections) == 1
    assert any("no label, ignore, or set" in warning for warning in loaded.warnings)


def test_duplicate_yaml_keys_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="Duplicate key"):
        _load(
            """
chips:
  - chip: "lm78-*"
    set:
      in0_min: 1.0
      in0_min: 2.0
"""
        )


def test_schema_violation_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="Schema validation failed"):
        _load('chips:\n  - chip: "lm78-*"\n    set:\n      in0_min: "high"\n')


def test_unknown_top_level_key_rejected() -> None:
    with pytest.raises(ConfigValidationError):
        _load("bus: {}\n")


def test_yaml_booleans_are_not_resolved() -> None:
    with pytest.raises(ConfigValidationError):
        _load('chips:\n  - chip: "lm78-*"\n    label:\n      temp1: yes\n    set:\n      in0_min: on\n')


def test_bad_chip_pattern_names_section() -> None:
    with pytest.raises(ConfigValidationError) as exc:
        _load('chips:\n  - chip: "lm78-2d"\n    ignore: [in1]\n')
    assert "chips[0]" in str(exc.value)
    assert "lm78-2d" in str(exc.value)


def test_invalid_yaml_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="Invalid YAML"):
        _load("chips: [\n")


def test_root_must_be_mapping() -> None:
    with pytest.raises(ConfigValidationError, match="mapping at root"):
        _load("- a\n- b\n")


def test_default_config_path_prefers_user_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setattr(config_loader, "SYSTEM_CONFIG_DIR", tmp_path / "etc")
    assert default_config_path() is None

    system = tmp_path / "etc" / "sensors.yaml"
    system.parent.mkdir(parents=True)
    system.write_text("chips: []\n", encoding="utf-8")
    assert default_config_path() == system

    user = tmp_path / "cfg" / "sensorsctl" / "sensors.yaml"
    user.parent.mkdir(parents=True)
    user.write_text("chips: []\n", encoding="utf-8")
    assert default_config_path() == user
