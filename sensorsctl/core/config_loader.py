"""Configuration loading and validation for YAML-based sensorsctl config files."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, TextIO

import yaml
from jsonschema import ValidationError, validators

from sensorsctl.core.chip_match import matches, parse_chip_pattern
from sensorsctl.core.errors import ChipPatternError, ConfigLoadError, ConfigValidationError
from sensorsctl.core.model import ChipName, ChipPattern

CONFIG_FILE_NAME = "sensors.yaml"
SYSTEM_CONFIG_DIR = Path("/etc/sensorsctl")
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class ChipSection:
    patterns: tuple[ChipPattern, ...]
    labels: dict[str, str] = field(default_factory=dict)
    ignore: frozenset[str] = frozenset()
    sets: tuple[tuple[str, float], ...] = ()

    def applies_to(self, chip: ChipName) -> bool:
        return any(matches(chip, pattern) for pattern in self.patterns)


@dataclass(frozen=True)
class LoadedConfig:
    sections: tuple[ChipSection, ...]
    warnings: tuple[str, ...]

    def sections_for(self, chip: ChipName) -> list[ChipSection]:
        return [section for section in self.sections if section.applies_to(chip)]


EMPTY_CONFIG = LoadedConfig(sections=(), warnings=())


def _load_schema_validator() -> Any:
    schema_text = resources.files("sensorsctl.schemas").joinpath("sensors.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _config_candidates() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "sensorsctl" / CONFIG_FILE_NAME, SYSTEM_CONFIG_DIR / CONFIG_FILE_NAME


def default_config_path() -> Path | None:
    for path in _config_candidates():
        if path.is_file():
            return path
    return None


def _read_yaml(stream: TextIO, source: str) -> dict[str, Any]:
    try:
        content = stream.read()
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {source}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {source}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {source} must contain a mapping at root")
    return loaded


def _build_section(doc: dict[str, Any], index: int, source: str) -> ChipSection:
    raw_patterns = doc["chip"] if isinstance(doc["chip"], list) else [doc["chip"]]
    try:
        patterns = tuple(parse_chip_pattern(p) for p in raw_patterns)
    except ChipPatternError as exc:
        raise ConfigValidationError(f"{source}: chips[{index}]: {exc}") from exc

    return ChipSection(
        patterns=patterns,
        labels=dict(doc.get("label", {})),
        ignore=frozenset(doc.get("ignore", [])),
        sets=tuple((attr, float(value)) for attr, value in doc.get("set", {}).items()),
    )


def load_config(stream: TextIO | None, source: str = "<config>") -> LoadedConfig:
    if stream is None:
        return EMPTY_CONFIG

    doc = _read_yaml(stream, source)
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    sections: list[ChipSection] = []
    warnings: list[str] = []
    for index, section_doc in enumerate(doc.get("chips", [])):
        section = _build_section(section_doc, index, source)
        if not (section.labels or section.ignore or section.sets):
            warning = f"Chip section {index} in {source} has no label, ignore, or set entries"
            LOGGER.warning(warning)
            warnings.append(warning)
        sections.append(section)

    LOGGER.debug("Loaded %d chip section(s) from %s", len(sections), source)
    return LoadedConfig(sections=tuple(sections), warnings=tuple(warnings))
