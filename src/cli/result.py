"""Command results for embedkit: what was embedded, or why it was not."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cli.exit_codes import ExitCode

if TYPE_CHECKING:
    from collections.abc import Mapping

    from embedding.actions import BuildAction
    from embedding.embedder import EmbedReport
    from embedding.errors import EmbedError


@dataclass(frozen=True)
class CliResult:
    """Outcome of a command, rendered by ``cli_result_action``.

    Parameters
    ----------
    exit_code
        Process exit code.
    summary
        One-line message; printed to stderr with an ``error:`` prefix on failure.
    artifacts
        Paths written into the build product, keyed by role
        (``framework``, ``dsym``).
    """

    exit_code: int
    summary: str | None = None
    artifacts: Mapping[str, Path] = field(default_factory=dict)

    @classmethod
    def embedded(cls, report: EmbedReport, action: BuildAction) -> CliResult:
        """Summarize a successful embed.

        Returns
        -------
        CliResult
            Success result listing the framework and, when copied, its dSYM.
        """
        artifacts: dict[str, Path] = {"framework": report.framework}
        if report.dsym is not None:
            artifacts["dsym"] = report.dsym
        signed = "signed" if report.signed else "unsigned"
        return cls(
            exit_code=ExitCode.SUCCESS,
            summary=f"Embedded {report.framework.name} ({action}, {signed})",
            artifacts=artifacts,
        )

    @classmethod
    def failure(cls, error: EmbedError) -> CliResult:
        """Report an embedding error without raising it.

        Returns
        -------
        CliResult
            Result carrying the error's exit code and message.
        """
        return cls(exit_code=int(error.exit_code), summary=str(error))

    @property
    def ok(self) -> bool:
        """Check if the result indicates success."""
        return self.exit_code == ExitCode.SUCCESS


__all__ = ["CliResult"]
