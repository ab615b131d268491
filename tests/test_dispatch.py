from __future__ import annotations

from sensorsctl.core.chip_match import parse_chip_patterns
from sensorsctl.core.dispatch import NO_SENSORS_MESSAGE, NOT_FOUND_MESSAGE, dispatch, exit_status
from sensorsctl.core.model import ActionOutcome, BusKind, ChipName, DispatchReport

LM78 = ChipName(prefix="lm78", bus_kind=BusKind.I2C, bus_number=0, address=0x2D)
IT87 = ChipName(prefix="it87", bus_kind=BusKind.ISA, address=0x290)
ACPI = ChipName(prefix="acpitz", bus_kind=BusKind.DUMMY, bus_name="virtual")


class RecordingAction:
    def __init__(self, outcomes: dict[str, ActionOutcome] | None = None) -> None:
        self.calls: list[ChipName] = []
        self.outcomes = outcomes or {}

    def __call__(self, chip: ChipName) -> ActionOutcome:
        self.calls.append(chip)
        return self.outcomes.get(chip.prefix, ActionOutcome.OK)


def test_single_pattern_single_chip() -> None:
    action = RecordingAction()
    report = dispatch([LM78], parse_chip_patterns(["lm78-i2c-0-2d"]), action)
    assert report == DispatchReport(dispatched=1, failed=False)
    assert action.calls == [LM78]


def test_chip_matching_several_patterns_is_dispatched_once() -> None:
    action = RecordingAction()
    patterns = parse_chip_patterns(["lm78-*", "*-i2c-0-*", "lm78-i2c-0-2d"])
    report = dispatch([LM78, IT87], patterns, action)
    assert report.dispatched == 1
    assert action.calls == [LM78]


def test_unmatched_chips_are_skipped_in_enumeration_order() -> None:
    action = RecordingAction()
    report = dispatch([IT87, LM78, ACPI], parse_chip_patterns(["acpitz-*", "it87-isa-*"]), action)
    assert report.dispatched == 2
    assert action.calls == [IT87, ACPI]


def test_enumeration_is_consumed_once() -> None:
    consumed: list[ChipName] = []

    def chips():
        for chip in (LM78, IT87):
            consumed.append(chip)
            yield chip

    dispatch(chips(), parse_chip_patterns([]), RecordingAction())
    assert consumed == [LM78, IT87]


def test_access_denied_marks_run_failed_even_if_others_succeed() -> None:
    action = RecordingAction({"it87": ActionOutcome.ACCESS_DENIED})
    report = dispatch([LM78, IT87, ACPI], parse_chip_patterns([]), action)
    assert report == DispatchReport(dispatched=3, failed=True)


def test_partial_and_other_errors_do_not_fail_run() -> None:
    action = RecordingAction({"lm78": ActionOutcome.PARTIAL, "it87": ActionOutcome.ERROR})
    report = dispatch([LM78, IT87], parse_chip_patterns([]), action)
    assert report == DispatchReport(dispatched=2, failed=False)


def test_exit_status_no_sensors_with_default_pattern() -> None:
    code, message = exit_status(DispatchReport(0, False), parse_chip_patterns([]))
    assert code == 1
    assert message == NO_SENSORS_MESSAGE
    assert message.startswith("No sensors found!")


def test_exit_status_specified_not_found() -> None:
    code, message = exit_status(DispatchReport(0, False), parse_chip_patterns(["lm78-*"]))
    assert code == 1
    assert message == NOT_FOUND_MESSAGE


def test_exit_status_wildcard_beside_explicit_pattern_is_not_found() -> None:
    for tokens in (["*", "lm78-*"], ["lm78-*", "*"]):
        assert exit_status(DispatchReport(0, False), parse_chip_patterns(tokens)) == (1, NOT_FOUND_MESSAGE)
    assert exit_status(DispatchReport(0, False), parse_chip_patterns(["*"])) == (1, NO_SENSORS_MESSAGE)


def test_exit_status_success_and_failure() -> None:
    patterns = parse_chip_patterns(["lm78-*"])
    assert exit_status(DispatchReport(2, False), patterns) == (0, None)
    assert exit_status(DispatchReport(2, True), patterns) == (1, None)
