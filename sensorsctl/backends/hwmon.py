"""Linux hwmon sysfs backend."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from sensorsctl.core.config_loader import EMPTY_CONFIG, LoadedConfig, load_config
from sensorsctl.core.errors import (
    BackendError,
    BackendInitError,
    PartialSetError,
    SetAccessDeniedError,
)
from sensorsctl.core.model import BusKind, ChipName, Feature

HWMON_ROOT = "/sys/class/hwmon"
I2C_ADAPTER_ROOT = "/sys/class/i2c-adapter"
LOGGER = logging.getLogger(__name__)

_HWMON_RE = re.compile(r"^hwmon(\d+)$")
_I2C_DEVICE_RE = re.compile(r"^(\d+)-([0-9a-f]{4})$", re.IGNORECASE)
_PCI_DEVICE_RE = re.compile(r"^[0-9a-f]{4}:([0-9a-f]{2}):([0-9a-f]{2})\.([0-7])$", re.IGNORECASE)
_PLATFORM_DEVICE_RE = re.compile(r"^.+\.(\d+)$")
_ATTR_RE = re.compile(r"^(in|fan|temp|curr|power|energy|humidity|intrusion)(\d+)_([a-z_]+)$")

_KIND_ORDER = ("in", "fan", "temp", "curr", "power", "energy", "humidity", "intrusion")
_SCALE = {
    "in": 1000.0,
    "temp": 1000.0,
    "curr": 1000.0,
    "humidity": 1000.0,
    "power": 1_000_000.0,
    "energy": 1_000_000.0,
}
_UNSCALED_SUBS = frozenset({"alarm", "beep", "type", "enable", "fault", "div", "pulses"})

_BUS_KEYWORDS = frozenset({"isa", "pci", "i2c", "smbus"})

_DUMMY_ADAPTERS = {
    "virtual": "Virtual device",
    "acpi": "ACPI interface",
    "hid": "HID adapter",
    "spi": "SPI adapter",
    "scsi": "SCSI adapter",
    "mdio": "MDIO adapter",
}


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError:
        return None


def _scale_for(kind: str, sub: str) -> float:
    if sub in _UNSCALED_SUBS:
        return 1.0
    return _SCALE.get(kind, 1.0)


class HwmonBackend:
    name = "hwmon"

    def __init__(self, root: str | Path = HWMON_ROOT, i2c_root: str | Path = I2C_ADAPTER_ROOT) -> None:
        self.root = Path(root)
        self.i2c_root = Path(i2c_root)
        self.config: LoadedConfig = EMPTY_CONFIG
        self.load_warnings: tuple[str, ...] = ()
        self.runtime_warnings = _runtime_warnings(self.root)
        self._initialized = False

    def init(self, config: TextIO | None) -> None:
        if self._initialized:
            raise BackendInitError("hwmon backend is already initialized")
        source = str(getattr(config, "name", "<config>"))
        self.config = load_config(config, source=source)
        self.load_warnings = self.config.warnings
        self._initialized = True

    def iter_detected_chips(self) -> Iterator[ChipName]:
        if not self._initialized:
            raise BackendInitError("hwmon backend used before init()")
        if not self.root.is_dir():
            return

        numbered: list[tuple[int, Path]] = []
        for entry in self.root.iterdir():
            match = _HWMON_RE.match(entry.name)
            if match:
                numbered.append((int(match.group(1)), entry))

        for _, hwmon_dir in sorted(numbered):
            chip = self._chip_for(hwmon_dir)
            if chip is not None:
                yield chip

    def _chip_for(self, hwmon_dir: Path) -> ChipName | None:
        device = hwmon_dir / "device"
        prefix = _read_text(hwmon_dir / "name")
        if not prefix and device.is_dir():
            prefix = _read_text(device / "name")
        if not prefix:
            LOGGER.debug("Skipping %s: no chip name", hwmon_dir)
            return None

        attr_dir = hwmon_dir
        if device.is_dir() and not any(hwmon_dir.glob("*_input")) and any(device.glob("*_input")):
            attr_dir = device
        path = str(attr_dir)

        if not device.exists():
            return ChipName(prefix=prefix, bus_kind=BusKind.DUMMY, bus_name="virtual", path=path)

        dev_path = device.resolve()
        subsystem_link = dev_path / "subsystem"
        subsystem = subsystem_link.resolve().name if subsystem_link.exists() else ""

        if subsystem == "i2c":
            match = _I2C_DEVICE_RE.match(dev_path.name)
            if match:
                return ChipName(
                    prefix=prefix,
                    bus_kind=BusKind.I2C,
                    bus_number=int(match.group(1)),
                    address=int(match.group(2), 16),
                    path=path,
                )
        elif subsystem == "pci":
            match = _PCI_DEVICE_RE.match(dev_path.name)
            if match:
                bus, slot, fn = (int(group, 16) for group in match.groups())
                return ChipName(
                    prefix=prefix,
                    bus_kind=BusKind.PCI,
                    address=(bus << 8) | (slot << 3) | fn,
                    path=path,
                )
        elif subsystem in ("platform", "isa"):
            match = _PLATFORM_DEVICE_RE.match(dev_path.name)
            address = int(match.group(1)) if match else 0
            return ChipName(prefix=prefix, bus_kind=BusKind.ISA, address=address, path=path)

        # A dummy bus name must never be a bus keyword.
        bus_name = subsystem if subsystem and subsystem not in _BUS_KEYWORDS else "virtual"
        return ChipName(prefix=prefix, bus_kind=BusKind.DUMMY, bus_name=bus_name, path=path)

    def get_adapter_name(self, chip: ChipName) -> str | None:
        if chip.bus_kind is BusKind.ISA:
            return "ISA adapter"
        if chip.bus_kind is BusKind.PCI:
            return "PCI adapter"
        if chip.bus_kind is BusKind.DUMMY:
            return _DUMMY_ADAPTERS.get(chip.bus_name or "")
        return _read_text(self.i2c_root / f"i2c-{chip.bus_number}" / "name") or None

    def _attr_dir(self, chip: ChipName) -> Path:
        if chip.path is None:
            raise BackendError(f"Chip {chip.prefix} has no sysfs path")
        return Path(chip.path)

    def features(self, chip: ChipName) -> list[Feature]:
        attr_dir = self._attr_dir(chip)
        labels: dict[str, str] = {}
        ignore: set[str] = set()
        for section in self.config.sections_for(chip):
            labels.update(section.labels)
            ignore.update(section.ignore)

        sysfs_labels: dict[str, str] = {}
        grouped: dict[tuple[int, int], tuple[str, str, dict[str, float]]] = {}
        try:
            entries = sorted(attr_dir.iterdir())
        except OSError as exc:
            raise BackendError(f"Can't read {attr_dir}: {exc.strerror or exc}") from exc

        for entry in entries:
            match = _ATTR_RE.match(entry.name)
            if not match:
                continue
            kind, index, sub = match.group(1), int(match.group(2)), match.group(3)
            name = f"{kind}{index}"
            if name in ignore:
                continue

            raw = _read_text(entry)
            if sub == "label":
                if raw:
                    sysfs_labels[name] = raw
                continue
            try:
                value = float(raw) if raw is not None else None
            except ValueError:
                value = None
            if value is None:
                LOGGER.debug("Skipping unreadable attribute %s", entry)
                continue

            key = (_KIND_ORDER.index(kind), index)
            grouped.setdefault(key, (name, kind, {}))[2][sub] = value / _scale_for(kind, sub)

        features: list[Feature] = []
        for _, (name, kind, values) in sorted(grouped.items()):
            label = labels.get(name) or sysfs_labels.get(name) or name
            features.append(Feature(name=name, label=label, kind=kind, values=values))
        return features

    def do_chip_sets(self, chip: ChipName) -> None:
        attr_dir = self._attr_dir(chip)
        statements: dict[str, float] = {}
        for section in self.config.sections_for(chip):
            statements.update(section.sets)

        failed: list[str] = []
        for attr, value in statements.items():
            target = attr_dir / attr
            match = _ATTR_RE.match(attr)
            scale = _scale_for(match.group(1), match.group(3)) if match else 1.0
            if not target.exists():
                LOGGER.warning("Cannot set %s: no such attribute", target)
                failed.append(attr)
                continue
            try:
                target.write_text(str(round(value * scale)), encoding="utf-8")
            except PermissionError as exc:
                raise SetAccessDeniedError(f"Can't access {target}") from exc
            except OSError as exc:
                LOGGER.warning("Cannot set %s: %s", target, exc)
                failed.append(attr)

        if failed:
            raise PartialSetError(f"Could not apply: {', '.join(failed)}")


def _runtime_warnings(root: Path) -> tuple[str, ...]:
    warnings: list[str] = []
    if not root.is_dir():
        warnings.append(f"hwmon sysfs class not found at {root}; no chips will be detected.")
    return tuple(warnings)
