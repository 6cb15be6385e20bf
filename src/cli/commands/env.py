"""Build environment inspection commands."""

from __future__ import annotations

import sys
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.result import CliResult
from embedding.environment import XcodeBuildEnvironment, missing_build_settings
from embedding.errors import IncompleteEnvironmentError
from serde_msgspec import dumps_json


def show_env(
    *,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> int | CliResult:
    """Show the build settings snapshot and the paths derived from it.

    Returns
    -------
    int | CliResult
        Exit status code, or an error result when the environment is incomplete.
    """
    environ = run_context.environ if run_context else None
    environment = XcodeBuildEnvironment.from_environ(environ)
    if environment is None:
        return CliResult.failure(IncompleteEnvironmentError(missing_build_settings(environ)))
    payload = dumps_json(environment.describe(), pretty=True)
    sys.stdout.write(payload.decode("utf-8") + "\n")
    return 0


__all__ = ["show_env"]
