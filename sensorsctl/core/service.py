"""Service layer: per-chip print and set actions over a backend."""

from __future__ import annotations

import typer

from sensorsctl.backends.base import SensorsBackend
from sensorsctl.core.chip_match import format_chip_name
from sensorsctl.core.dispatch import dispatch
from sensorsctl.core.errors import BackendError, PartialSetError, SetAccessDeniedError
from sensorsctl.core.model import ActionOutcome, BusKind, ChipName, DispatchReport, RunOptions
from sensorsctl.core.printer import generic_lines, is_known_chip, unknown_lines


def _bus_label(chip: ChipName) -> str:
    if chip.bus_kind in (BusKind.I2C, BusKind.SMBUS):
        return str(chip.bus_number)
    return chip.bus_name or chip.bus_kind.value


class SensorsService:
    def __init__(self, backend: SensorsBackend, options: RunOptions) -> None:
        self.backend = backend
        self.options = options

    def run(self) -> DispatchReport:
        action = self.set_chip if self.options.do_sets else self.print_chip
        return dispatch(self.backend.iter_detected_chips(), self.options.patterns, action)

    def print_chip(self, chip: ChipName) -> ActionOutcome:
        name = format_chip_name(chip)
        try:
            features = self.backend.features(chip)
        except BackendError as exc:
            typer.echo(f"{name}: {exc}", err=True)
            return ActionOutcome.ERROR
        if self.options.hide_unknown and not is_known_chip(features):
            return ActionOutcome.OK

        typer.echo(name)
        if not self.options.hide_adapter:
            adapter = self.backend.get_adapter_name(chip)
            if adapter:
                typer.echo(f"Adapter: {adapter}")
            else:
                typer.echo(f"Can't get adapter name for bus {_bus_label(chip)}", err=True)

        if self.options.force_unknown:
            lines = unknown_lines(features)
        else:
            lines = generic_lines(features, self.options.degree, self.options.fahrenheit)
        for line in lines:
            typer.echo(line)
        typer.echo("")
        return ActionOutcome.OK

    def set_chip(self, chip: ChipName) -> ActionOutcome:
        name = format_chip_name(chip)
        try:
            self.backend.do_chip_sets(chip)
        except SetAccessDeniedError as exc:
            typer.echo(f"{name}: {exc} for writing;", err=True)
            typer.echo("Run as root?", err=True)
            return ActionOutcome.ACCESS_DENIED
        except PartialSetError:
            typer.echo(f'{name}: At least one "set" statement failed', err=True)
            return ActionOutcome.PARTIAL
        except BackendError as exc:
            typer.echo(f"{name}: {exc}", err=True)
            return ActionOutcome.ERROR
        return ActionOutcome.OK
