"""Stable public API for building tooling on top of sensorsctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TextIO

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.backends.hwmon import HwmonBackend
from sensorsctl.core.chip_match import (
    first_match,
    format_chip_name,
    matches,
    parse_chip_pattern,
    parse_chip_patterns,
)
from sensorsctl.core.dispatch import dispatch
from sensorsctl.core.errors import (
    BackendError,
    BackendInitError,
    ChipPatternError,
    ConfigLoadError,
    ConfigValidationError,
    PartialSetError,
    SensorsctlError,
    SetAccessDeniedError,
    SetError,
    TooManyChipsError,
)
from sensorsctl.core.model import (
    ANY,
    ActionOutcome,
    BusKind,
    ChipName,
    ChipPattern,
    DispatchReport,
    Feature,
)

__all__ = [
    "SensorsctlError",
    "ChipPatternError",
    "TooManyChipsError",
    "ConfigLoadError",
    "ConfigValidationError",
    "BackendError",
    "BackendInitError",
    "SetError",
    "SetAccessDeniedError",
    "PartialSetError",
    "ANY",
    "ActionOutcome",
    "BusKind",
    "ChipName",
    "ChipPattern",
    "DispatchReport",
    "Feature",
    "HwmonBackend",
    "SensorsBackend",
    "format_chip_name",
    "matches",
    "parse_chip_pattern",
    "Client",
]

LOGGER = logging.getLogger(__name__)


class Client:
    """Public client for reading and configuring hardware monitoring chips.

    A `Client` initializes a backend once (the hwmon sysfs backend unless
    another one is given) and offers chip selection by pattern, feature
    reading, and `set` application without any console output.
    """

    def __init__(
        self,
        *,
        backend: SensorsBackend | None = None,
        config: TextIO | None = None,
    ) -> None:
        self._backend = backend or HwmonBackend()
        self._backend.init(config)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._backend.load_warnings

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        return self._backend.runtime_warnings

    def list_chips(self, patterns: Sequence[str] = ()) -> list[ChipName]:
        parsed = parse_chip_patterns(list(patterns))
        return [
            chip
            for chip in self._backend.iter_detected_chips()
            if first_match(chip, parsed) is not None
        ]

    def features(self, chip: ChipName) -> list[Feature]:
        return self._backend.features(chip)

    def adapter_name(self, chip: ChipName) -> str | None:
        return self._backend.get_adapter_name(chip)

    def apply_sets(self, patterns: Sequence[str] = ()) -> DispatchReport:
        parsed = parse_chip_patterns(list(patterns))

        def _apply(chip: ChipName) -> ActionOutcome:
            try:
                self._backend.do_chip_sets(chip)
            except SetAccessDeniedError as exc:
                LOGGER.error("%s: %s", format_chip_name(chip), exc)
                return ActionOutcome.ACCESS_DENIED
            except PartialSetError as exc:
                LOGGER.warning("%s: %s", format_chip_name(chip), exc)
                return ActionOutcome.PARTIAL
            except BackendError as exc:
                LOGGER.warning("%s: %s", format_chip_name(chip), exc)
                return ActionOutcome.ERROR
            return ActionOutcome.OK

        return dispatch(self._backend.iter_detected_chips(), parsed, _apply)
