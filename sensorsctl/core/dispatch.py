"""Chip dispatch loop and exit status policy."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from sensorsctl.core.chip_match import first_match
from sensorsctl.core.model import ActionOutcome, ChipName, ChipPattern, DispatchReport

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

NO_SENSORS_MESSAGE = (
    "No sensors found!\n"
    "Make sure you loaded all the kernel drivers you need.\n"
    "Try sensors-detect to find out which these are."
)
NOT_FOUND_MESSAGE = "Specified sensor(s) not found!"


def dispatch(
    chips: Iterable[ChipName],
    patterns: Sequence[ChipPattern],
    action: Callable[[ChipName], ActionOutcome],
) -> DispatchReport:
    """Run ``action`` once for every chip that matches at least one pattern.

    Only the first matching pattern counts, so a chip is never acted on
    twice. Only ``ACCESS_DENIED`` marks the run as failed.
    """
    dispatched = 0
    failed = False
    for chip in chips:
        if first_match(chip, patterns) is None:
            continue
        outcome = action(chip)
        dispatched += 1
        if outcome is ActionOutcome.ACCESS_DENIED:
            failed = True
    return DispatchReport(dispatched=dispatched, failed=failed)


def exit_status(report: DispatchReport, patterns: Sequence[ChipPattern]) -> tuple[int, str | None]:
    if report.dispatched == 0:
        if len(patterns) == 1 and patterns[0].is_any:
            return EXIT_FAILURE, NO_SENSORS_MESSAGE
        return EXIT_FAILURE, NOT_FOUND_MESSAGE
    if report.failed:
        return EXIT_FAILURE, None
    return EXIT_SUCCESS, None
