"""Degree suffix selection for temperature values."""

from __future__ import annotations

import codecs
import locale
import logging

LOGGER = logging.getLogger(__name__)

_DEG_LATIN1 = (b"\xb0C", b"\xb0F")
_DEG_DEFAULT = (" C", " F")


def active_codeset() -> str | None:
    """Return the character encoding of the current LC_CTYPE, if the platform reports one."""
    langinfo = getattr(locale, "nl_langinfo", None)
    codeset_key = getattr(locale, "CODESET", None)
    if langinfo is None or codeset_key is None:
        return None
    codeset = langinfo(codeset_key)
    return codeset or None


def resolve_degree_string(fahrenheit: bool, codeset: str | None = None, *, detect: bool = True) -> str:
    """Return the unit suffix used after every temperature value.

    The Latin-1 degree sign is converted into ``codeset`` (by default the
    active locale's codeset). When there is no codeset support, or the
    conversion fails, the ASCII form " C" or " F" is returned instead.
    """
    index = 1 if fahrenheit else 0
    if codeset is None and detect:
        codeset = active_codeset()
    if codeset is None:
        LOGGER.debug("No locale codeset available; using ASCII degree string")
        return _DEG_DEFAULT[index]

    text = _DEG_LATIN1[index].decode("iso-8859-1")
    try:
        codecs.lookup(codeset)
        text.encode(codeset)
    except (LookupError, UnicodeError) as exc:
        LOGGER.debug("Cannot convert degree sign to %s: %s", codeset, exc)
        return _DEG_DEFAULT[index]
    return text
