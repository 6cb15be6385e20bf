"""Toolchain capabilities: architecture inspection and code signing."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

_LOGGER = logging.getLogger(__name__)

_PRESERVE_METADATA = "--preserve-metadata=identifier,entitlements"


class CommandError(RuntimeError):
    """Raised when a toolchain command returns a non-zero exit code."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"{command[0]} failed rc={returncode}"
        if stderr:
            msg = f"{msg}\n{stderr}"
        super().__init__(msg)


class ArchitectureInspecting(Protocol):
    """Report the architectures a binary was built for."""

    def architectures(self, binary: Path) -> tuple[str, ...] | None:
        """Return the binary's architectures, or None when undeterminable."""
        ...


class CodeSigning(Protocol):
    """Sign a bundle in place."""

    def sign(self, bundle: Path, *, identity: str, flags: Sequence[str] = ()) -> None:
        """Sign ``bundle`` with ``identity``."""
        ...


def parse_lipo_info(output: str) -> tuple[str, ...] | None:
    """Parse ``lipo -info`` output.

    Handles both ``Architectures in the fat file: X are: x86_64 arm64`` and
    ``Non-fat file: X is architecture: arm64``.

    Parameters
    ----------
    output
        Raw stdout from ``lipo -info``.

    Returns
    -------
    tuple[str, ...] | None
        Architectures, or None when the output is not recognized.
    """
    text = output.strip()
    if "are:" in text:
        archs = text.rsplit("are:", 1)[-1].split()
    elif "is architecture:" in text:
        archs = text.rsplit("is architecture:", 1)[-1].split()
    else:
        return None
    return tuple(archs) or None


class LipoArchitectureInspector:
    """``ArchitectureInspecting`` backed by ``lipo -info``."""

    def __init__(self, lipo: str = "lipo") -> None:
        self._lipo = lipo

    def architectures(self, binary: Path) -> tuple[str, ...] | None:
        """Return the architectures of ``binary``.

        Returns
        -------
        tuple[str, ...] | None
            Architectures, or None when lipo is unavailable or fails.
        """
        cmd = [self._lipo, "-info", str(binary)]
        try:
            result = subprocess.run(cmd, check=False, capture_output=True, text=True)
        except OSError as exc:
            _LOGGER.debug("lipo -info failed: %s", exc)
            return None
        if result.returncode != 0:
            _LOGGER.debug("lipo -info returned %s: %s", result.returncode, result.stderr.strip())
            return None
        return parse_lipo_info(result.stdout)


class CodesignTool:
    """``CodeSigning`` backed by ``codesign``."""

    def __init__(self, codesign: str = "codesign") -> None:
        self._codesign = codesign

    def command(self, bundle: Path, *, identity: str, flags: Sequence[str] = ()) -> list[str]:
        """Return the argv used to sign ``bundle``.

        Returns
        -------
        list[str]
            ``codesign`` invocation.
        """
        return [
            self._codesign,
            "--force",
            "--sign",
            identity,
            *flags,
            _PRESERVE_METADATA,
            str(bundle),
        ]

    def sign(self, bundle: Path, *, identity: str, flags: Sequence[str] = ()) -> None:
        """Sign ``bundle`` in place.

        Raises
        ------
        CommandError
            Raised when ``codesign`` exits with a non-zero status.
        """
        cmd = self.command(bundle, identity=identity, flags=flags)
        _LOGGER.debug("Running %s", " ".join(cmd))
        result = subprocess.run(cmd, check=False, capture_output=True, text=True)
        if result.returncode != 0:
            raise CommandError(cmd, result.returncode, result.stderr.strip())


__all__ = [
    "ArchitectureInspecting",
    "CodeSigning",
    "CodesignTool",
    "CommandError",
    "LipoArchitectureInspector",
    "parse_lipo_info",
]
