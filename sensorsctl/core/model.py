"""Core data models used across matcher, dispatch, backends, and CLI."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field

CHIPS_MAX = 20


class _AnyType:
    """Wildcard sentinel; compares equal only to itself."""

    _instance: _AnyType | None = None

    def __new__(cls) -> _AnyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ANY"

    def __reduce__(self) -> str:
        return "ANY"


ANY = _AnyType()


class BusKind(enum.Enum):
    ISA = "isa"
    PCI = "pci"
    I2C = "i2c"
    SMBUS = "smbus"
    DUMMY = "dummy"


@dataclass(frozen=True)
class ChipPattern:
    prefix: str | _AnyType
    bus_kind: BusKind | _AnyType
    bus_number: int | _AnyType = ANY
    address: int | _AnyType = ANY
    bus_name: str | _AnyType | None = None

    @classmethod
    def any(cls) -> ChipPattern:
        return cls(prefix=ANY, bus_kind=ANY, bus_number=ANY, address=ANY, bus_name=ANY)

    @property
    def is_any(self) -> bool:
        return self.prefix is ANY and self.bus_kind is ANY and self.address is ANY


@dataclass(frozen=True)
class ChipName:
    prefix: str
    bus_kind: BusKind
    bus_number: int = 0
    address: int = 0
    bus_name: str | None = None
    path: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Feature:
    name: str
    label: str
    kind: str
    values: dict[str, float]

    @property
    def input(self) -> float | None:
        return self.values.get("input")


class ActionOutcome(enum.Enum):
    OK = "ok"
    ACCESS_DENIED = "access-denied"
    PARTIAL = "partial"
    ERROR = "error"


@dataclass(frozen=True)
class DispatchReport:
    dispatched: int
    failed: bool


@dataclass(frozen=True)
class RunOptions:
    patterns: Sequence[ChipPattern]
    do_sets: bool = False
    fahrenheit: bool = False
    hide_adapter: bool = False
    hide_unknown: bool = False
    force_unknown: bool = False
    degree: str = " C"
