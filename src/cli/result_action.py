"""Render command return values and convert them to exit codes."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from cli.exit_codes import ExitCode
from cli.result import CliResult


def cli_result_action(result: Any, *, console: Console | None = None) -> int:
    """Normalize a command return value to an integer exit code.

    Successful summaries go to stdout, failures to stderr.

    Parameters
    ----------
    result
        The return value from the command function.
    console
        Optional console used for successful output.

    Returns
    -------
    int
        Exit code for the process.
    """
    if result is None:
        return ExitCode.SUCCESS

    if isinstance(result, bool):
        return ExitCode.SUCCESS if result else ExitCode.GENERAL_ERROR

    if isinstance(result, int):
        return result

    if isinstance(result, CliResult):
        out = console or Console(soft_wrap=True)
        if not result.ok:
            out = Console(stderr=True, soft_wrap=True)
        if result.summary:
            prefix = "" if result.ok else "error: "
            out.print(f"{prefix}{result.summary}", markup=False, highlight=False)
        for name, path in sorted(result.artifacts.items()):
            out.print(f"  {name}: {path}", markup=False, highlight=False)
        return int(result.exit_code)

    Console(stderr=True, soft_wrap=True).print(
        f"Unexpected command return type: {type(result).__name__} (value: {result!r})",
        markup=False,
    )
    return ExitCode.GENERAL_ERROR


__all__ = ["cli_result_action"]
