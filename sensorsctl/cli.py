"""Typer CLI entrypoint."""

from __future__ import annotations

import contextlib
import locale
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

import click
import typer
from typer.core import TyperCommand

from sensorsctl.backends.hwmon import HwmonBackend
from sensorsctl.core.chip_match import parse_chip_patterns
from sensorsctl.core.config_loader import default_config_path
from sensorsctl.core.degree import resolve_degree_string
from sensorsctl.core.dispatch import exit_status
from sensorsctl.core.errors import ChipPatternError, ConfigLoadError, SensorsctlError
from sensorsctl.core.model import RunOptions
from sensorsctl.core.service import SensorsService

PROGRAM = "sensorsctl"
VERSION = "0.1.0"
LOGGER = logging.getLogger(__name__)

_EPILOG = """\b
Use `-' after `-c' to read the config file from stdin.
If no chips are specified, all chip info will be printed.
Example chip names:
    lm78-i2c-0-2d    *-i2c-0-2d
    lm78-i2c-0-*     *-i2c-0-*
    lm78-i2c-*-2d    *-i2c-*-2d
    lm78-i2c-*-*     *-i2c-*-*
    lm78-isa-0290    *-isa-0290
    lm78-isa-*       *-isa-*
    lm78-*
"""


class _SensorsCommand(TyperCommand):
    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


app = typer.Typer(
    help="Print sensor readings of all or the given hardware monitoring chips",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PROGRAM} version {VERSION} with {HwmonBackend.name} backend")
        raise typer.Exit()


def _set_locale() -> None:
    try:
        locale.setlocale(locale.LC_CTYPE, "")
    except locale.Error as exc:
        LOGGER.debug("Could not set LC_CTYPE from environment: %s", exc)


@contextlib.contextmanager
def _open_config(config_file: str | None) -> Iterator[TextIO | None]:
    if config_file == "-":
        yield sys.stdin
        return

    path = Path(config_file) if config_file else default_config_path()
    if path is None:
        yield None
        return

    try:
        stream = path.open(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not open config file {path}: {exc.strerror}") from exc
    with stream:
        yield stream


def _build_backend(config_file: str | None) -> HwmonBackend:
    backend = HwmonBackend()
    with _open_config(config_file) as stream:
        backend.init(stream)
    for warning in getattr(backend, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    for warning in getattr(backend, "runtime_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return backend


@app.command(cls=_SensorsCommand, epilog=_EPILOG)
def main(
    chips: list[str] | None = typer.Argument(None, metavar="[CHIP]...", show_default=False),
    config_file: str | None = typer.Option(
        None,
        "-c",
        "--config-file",
        help="Specify a config file (default: ~/.config/sensorsctl/sensors.yaml or /etc/sensorsctl/sensors.yaml)",
    ),
    do_sets: bool = typer.Option(False, "-s", "--set", help="Execute `set' statements instead of printing (root only)"),
    fahrenheit: bool = typer.Option(False, "-f", "--fahrenheit", help="Show temperatures in degrees fahrenheit"),
    hide_adapter: bool = typer.Option(False, "-A", "--no-adapter", help="Do not show adapter for each chip"),
    hide_unknown: bool = typer.Option(False, "-U", "--no-unknown", help="Do not show unknown chips"),
    force_unknown: bool = typer.Option(False, "-u", "--unknown", help="Treat chips as unknown ones (testing only)"),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Display the program version",
    ),
) -> None:
    """Report readings of hardware monitoring chips, or apply their `set' statements."""
    try:
        patterns = parse_chip_patterns(chips or [])
    except ChipPatternError as exc:
        typer.echo(f"Error: {exc}", err=True)
        typer.echo(f"Try `{PROGRAM} -h' for more information", err=True)
        raise typer.Exit(code=1) from None
    except SensorsctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    _set_locale()
    try:
        backend = _build_backend(config_file)
        options = RunOptions(
            patterns=patterns,
            do_sets=do_sets,
            fahrenheit=fahrenheit,
            hide_adapter=hide_adapter,
            hide_unknown=hide_unknown,
            force_unknown=force_unknown,
            degree=resolve_degree_string(fahrenheit),
        )
        report = SensorsService(backend, options).run()
    except SensorsctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    code, message = exit_status(report, patterns)
    if message:
        typer.echo(message, err=True)
    if code:
        raise typer.Exit(code=code)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
