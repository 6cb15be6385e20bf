"""Framework path resolution for CLI commands."""

from __future__ import annotations

import os
from pathlib import Path


def resolve_framework_path(base: Path, value: str | None) -> Path | None:
    """Resolve a framework argument the way a run-script phase passes it.

    ``~`` is expanded, relative paths are anchored to ``base`` and ``..``
    segments are collapsed lexically, so a symlinked framework keeps its own
    name instead of the name of its target.

    Parameters
    ----------
    base
        Directory relative paths are anchored to.
    value
        Raw path argument.

    Returns
    -------
    Path | None
        Absolute, normalized path, or None when no path was given.
    """
    if value is None or not value.strip():
        return None
    path = Path(value.strip()).expanduser()
    if not path.is_absolute():
        path = base / path
    return Path(os.path.normpath(path))


__all__ = ["resolve_framework_path"]
