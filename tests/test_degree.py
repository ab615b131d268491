from __future__ import annotations

import locale

import pytest

from sensorsctl.core import degree
from sensorsctl.core.degree import resolve_degree_string


def test_utf8_codeset_gets_degree_sign() -> None:
    assert resolve_degree_string(False, "UTF-8") == "°C"
    assert resolve_degree_string(True, "UTF-8") == "°F"


def test_latin1_codeset_gets_degree_sign() -> None:
    assert resolve_degree_string(False, "ISO-8859-1") == "°C"


def test_ascii_codeset_falls_back() -> None:
    assert resolve_degree_string(False, "ANSI_X3.4-1968") == " C"
    assert resolve_degree_string(True, "ascii") == " F"


def test_unknown_codeset_falls_back() -> None:
    assert resolve_degree_string(False, "NO-SUCH-CODESET") == " C"


@pytest.mark.parametrize(("fahrenheit", "expected"), [(False, " C"), (True, " F")])
def test_missing_codeset_support_falls_back(
    monkeypatch: pytest.MonkeyPatch, fahrenheit: bool, expected: str
) -> None:
    monkeypatch.delattr(locale, "nl_langinfo", raising=False)
    assert degree.active_codeset() is None
    assert resolve_degree_string(fahrenheit) == expected


def test_detection_can_be_disabled() -> None:
    assert resolve_degree_string(True, detect=False) == " F"
