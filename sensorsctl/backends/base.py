"""Backend interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, TextIO

from sensorsctl.core.model import ChipName, Feature


class SensorsBackend(Protocol):
    name: str
    load_warnings: tuple[str, ...]
    runtime_warnings: tuple[str, ...]

    def init(self, config: TextIO | None) -> None:
        """Load configuration; must be called once before anything else."""

    def iter_detected_chips(self) -> Iterator[ChipName]:
        """Yield every chip currently present."""

    def get_adapter_name(self, chip: ChipName) -> str | None:
        """Return a description of the bus the chip sits on, if known."""

    def features(self, chip: ChipName) -> list[Feature]:
        """Return the chip's readings, scaled and labelled."""

    def do_chip_sets(self, chip: ChipName) -> None:
        """Apply configured `set` statements to the chip."""
