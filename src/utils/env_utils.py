"""Environment variable resolution utilities for build-setting style values."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

_LOGGER = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"yes", "1", "true", "y"})
_FALSE_VALUES = frozenset({"no", "0", "false", "n", ""})


def _source(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


# -----------------------------------------------------------------------------
# Required Settings
# -----------------------------------------------------------------------------


def env_required(
    names: Sequence[str],
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str] | None:
    """Return raw values for every name, or None when any name is missing.

    Empty strings count as present: build settings are frequently defined
    but blank (for example ``OTHER_CODE_SIGN_FLAGS``).

    Parameters
    ----------
    names
        Variable names that must all be present.
    environ
        Mapping to read from. Defaults to ``os.environ``.

    Returns
    -------
    dict[str, str] | None
        Values keyed by name, or None when at least one is missing.
    """
    source = _source(environ)
    missing = [name for name in names if name not in source]
    if missing:
        _LOGGER.debug("Missing build settings: %s", ", ".join(missing))
        return None
    return {name: source[name] for name in names}


# -----------------------------------------------------------------------------
# List Parsing
# -----------------------------------------------------------------------------


def split_words(raw: str) -> tuple[str, ...]:
    """Split a whitespace separated value into an ordered, de-duplicated tuple.

    Returns
    -------
    tuple[str, ...]
        Words in first-seen order.
    """
    return tuple(dict.fromkeys(raw.split()))


# -----------------------------------------------------------------------------
# Boolean Parsing
# -----------------------------------------------------------------------------


def parse_yes_no(raw: str | None, *, default: bool = False, name: str | None = None) -> bool:
    """Interpret a toolchain-style ``YES``/``NO`` flag.

    Parameters
    ----------
    raw
        Raw flag value.
    default
        Value returned for missing or unrecognized input.
    name
        Optional variable name used when logging invalid values.

    Returns
    -------
    bool
        Parsed flag.
    """
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    _LOGGER.warning("Invalid YES/NO flag for %s: %r", name or "<value>", raw)
    return default


__all__ = [
    "env_required",
    "parse_yes_no",
    "split_words",
]
