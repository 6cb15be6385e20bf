"""Xcode build actions.

Reference: Xcode Build Setting Reference, ``ACTION``.
"""

from __future__ import annotations

import logging
from enum import StrEnum

_LOGGER = logging.getLogger(__name__)


class BuildAction(StrEnum):
    """Toolchain action currently executing (the ``ACTION`` build setting)."""

    ARCHIVE = "archive"
    INSTALL = "install"
    BUILD = "build"
    CLEAN = "clean"
    INSTALL_HEADERS = "installhdrs"
    INSTALL_SOURCES = "installsrc"

    @classmethod
    def parse(cls, raw: str) -> BuildAction:
        """Map a raw ``ACTION`` value to a build action.

        Surrounding whitespace and case are ignored, so hand-written values
        such as ``" Build "`` parse like the exact spellings Xcode exports.
        Unrecognized values resolve to ``INSTALL``.

        Parameters
        ----------
        raw
            Raw action string from the build environment.

        Returns
        -------
        BuildAction
            Matching action, or ``BuildAction.INSTALL`` when unrecognized.
        """
        value = raw.strip().lower()
        action = _ALIASES.get(value)
        if action is not None:
            return action
        try:
            return cls(value)
        except ValueError:
            _LOGGER.debug("Unrecognized build action %r; defaulting to install.", raw)
            return cls.INSTALL


_ALIASES: dict[str, BuildAction] = {
    "install-headers": BuildAction.INSTALL_HEADERS,
    "install-sources": BuildAction.INSTALL_SOURCES,
}


__all__ = ["BuildAction"]
