"""Run context for CLI command injection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RunContext:
    """Injected run context for CLI commands.

    Parameters
    ----------
    log_level
        Logging level applied to the invocation.
    working_directory
        Directory relative command arguments are resolved against.
    environ
        Optional build-setting mapping; ``os.environ`` is used when None.
    """

    log_level: str
    working_directory: Path | None = None
    environ: Mapping[str, str] | None = field(default=None, repr=False)


__all__ = ["RunContext"]
