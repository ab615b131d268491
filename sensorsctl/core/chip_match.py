"""Chip name parsing, formatting, and pattern matching."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from sensorsctl.core.errors import ChipPatternError, TooManyChipsError
from sensorsctl.core.model import ANY, CHIPS_MAX, BusKind, ChipName, ChipPattern

_DEC_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^(?:0x)?([0-9a-f]+)$", re.IGNORECASE)

_NAMED_BUSES = {"isa": BusKind.ISA, "pci": BusKind.PCI}
_NUMBERED_BUSES = {"i2c": BusKind.I2C, "smbus": BusKind.SMBUS}


def _wild(part: str) -> bool:
    return part == "*"


def _parse_address(part: str, text: str) -> int:
    match = _HEX_RE.match(part)
    if not match:
        raise ChipPatternError(text)
    return int(match.group(1), 16)


def _parse_bus_number(part: str, text: str) -> int:
    if not _DEC_RE.match(part):
        raise ChipPatternError(text)
    return int(part)


def parse_chip_pattern(text: str) -> ChipPattern:
    """Parse one command-line chip token into a ChipPattern.

    Accepted forms are ``*``, ``prefix-*``, ``prefix-isa-ADDR``,
    ``prefix-pci-ADDR``, ``prefix-BUSNAME-ADDR``, ``prefix-*-ADDR`` and
    ``prefix-i2c-BUS-ADDR`` (``smbus`` likewise). Any field may be ``*``.
    Addresses are hexadecimal, bus numbers decimal.
    """
    if text == "*":
        return ChipPattern.any()

    parts = text.split("-")
    if len(parts) < 2 or any(not p for p in parts):
        raise ChipPatternError(text)
    # Driver prefixes may contain dashes themselves.
    width = 4 if len(parts) >= 4 and parts[-3] in _NUMBERED_BUSES else min(len(parts), 3)
    parts = ["-".join(parts[: len(parts) - width + 1]), *parts[len(parts) - width + 1 :]]
    if "*" in parts[0] and not _wild(parts[0]):
        raise ChipPatternError(text)

    prefix = ANY if _wild(parts[0]) else parts[0]

    if len(parts) == 2:
        if not _wild(parts[1]):
            raise ChipPatternError(text)
        return ChipPattern(prefix=prefix, bus_kind=ANY, bus_number=ANY, address=ANY, bus_name=ANY)

    if len(parts) == 3:
        bus, addr = parts[1], parts[2]
        address = ANY if _wild(addr) else _parse_address(addr, text)
        if _wild(bus):
            return ChipPattern(prefix=prefix, bus_kind=ANY, bus_number=ANY, address=address, bus_name=ANY)
        if bus in _NUMBERED_BUSES:
            raise ChipPatternError(text)
        if bus in _NAMED_BUSES:
            return ChipPattern(prefix=prefix, bus_kind=_NAMED_BUSES[bus], address=address)
        return ChipPattern(prefix=prefix, bus_kind=BusKind.DUMMY, address=address, bus_name=bus)

    bus, number, addr = parts[1], parts[2], parts[3]
    return ChipPattern(
        prefix=prefix,
        bus_kind=_NUMBERED_BUSES[bus],
        bus_number=ANY if _wild(number) else _parse_bus_number(number, text),
        address=ANY if _wild(addr) else _parse_address(addr, text),
    )


def parse_chip_patterns(tokens: Sequence[str]) -> list[ChipPattern]:
    if not tokens:
        return [ChipPattern.any()]
    if len(tokens) > CHIPS_MAX:
        raise TooManyChipsError("Too many chips on command line!")
    return [parse_chip_pattern(token) for token in tokens]


def format_chip_name(name: ChipName) -> str:
    if name.bus_kind is BusKind.ISA:
        return f"{name.prefix}-isa-{name.address:04x}"
    if name.bus_kind is BusKind.PCI:
        return f"{name.prefix}-pci-{name.address:04x}"
    if name.bus_kind is BusKind.DUMMY:
        return f"{name.prefix}-{name.bus_name}-{name.address:04x}"
    bus = "smbus" if name.bus_kind is BusKind.SMBUS else "i2c"
    return f"{name.prefix}-{bus}-{name.bus_number}-{name.address:02x}"


def matches(name: ChipName, pattern: ChipPattern) -> bool:
    if pattern.prefix is not ANY and pattern.prefix.lower() != name.prefix.lower():
        return False
    if pattern.bus_kind is not ANY:
        if pattern.bus_kind is not name.bus_kind:
            return False
        if name.bus_kind in (BusKind.I2C, BusKind.SMBUS):
            if pattern.bus_number is not ANY and pattern.bus_number != name.bus_number:
                return False
        elif name.bus_kind is BusKind.DUMMY:
            if pattern.bus_name is not ANY and pattern.bus_name != name.bus_name:
                return False
    if pattern.address is not ANY and pattern.address != name.address:
        return False
    return True


def first_match(name: ChipName, patterns: Iterable[ChipPattern]) -> int | None:
    for index, pattern in enumerate(patterns):
        if matches(name, pattern):
            return index
    return None
