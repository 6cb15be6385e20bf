"""Main application setup for the embedkit CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Literal

from cyclopts import App, Parameter
from cyclopts.config import Toml

from cli.commands.version import get_version
from cli.context import RunContext
from cli.groups import admin_group, session_group
from cli.telemetry import invoke_with_telemetry

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_HELP_EPILOGUE = """
Examples:
  embedkit embed Carthage/Build/iOS/Foo.framework   Embed a framework from a run-script phase
  embedkit env show                                  Show the build settings snapshot

Environment Variables:
  EMBEDKIT_LOG_LEVEL   Default log level (DEBUG, INFO, WARNING, ERROR)
  EMBEDKIT_LIPO        lipo executable
  EMBEDKIT_CODESIGN    codesign executable

The embed command expects the build settings Xcode exports to run-script
phases (ACTION, TARGET_BUILD_DIR, FRAMEWORKS_FOLDER_PATH, ...).
"""

app = App(
    name="embedkit",
    help="embedkit - embed frameworks into Xcode build products.",
    help_format="rich",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(
        show_default=True,
        show_env_var=True,
    ),
    config=[
        Toml("embedkit.toml", must_exist=False, search_parents=True),
        Toml(
            "pyproject.toml",
            root_keys=("tool", "embedkit"),
            must_exist=False,
            search_parents=True,
        ),
    ],
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)

app.meta.group_parameters = session_group


@dataclass(frozen=True)
class SessionOptions:
    """Session-level configuration parameters."""

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="EMBEDKIT_LOG_LEVEL",
            group=session_group,
        ),
    ] = "INFO"


_DEFAULT_SESSION_OPTIONS = SessionOptions()


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    session: Annotated[SessionOptions, Parameter(name="*")] = _DEFAULT_SESSION_OPTIONS,
) -> int:
    """Meta launcher for logging setup and context injection.

    Returns
    -------
    int
        Exit status code from command execution.

    Raises
    ------
    ValueError
        Raised when the log level is invalid.
    """
    if session.log_level not in LOG_LEVELS:
        msg = f"Unsupported log level {session.log_level!r}."
        raise ValueError(msg)
    logging.basicConfig(level=session.log_level.upper())

    run_context = RunContext(log_level=session.log_level)
    exit_code, _event = invoke_with_telemetry(
        app,
        list(tokens),
        run_context=run_context,
    )
    return exit_code


app.command("cli.commands.embed:embed_command", name="embed")

_env_app = App(name="env", help="Inspect the Xcode build settings snapshot.")
_env_app.command("cli.commands.env:show_env", name="show")
app.command(_env_app)

app.command("cli.commands.version:version_command", name="version", group=admin_group)


def main() -> None:
    """Run the embedkit CLI."""
    raise SystemExit(app.meta())


__all__ = ["app", "main"]
