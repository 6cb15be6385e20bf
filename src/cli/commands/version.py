"""Version and toolchain reporting for the embedkit CLI."""

from __future__ import annotations

import platform
import shutil
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Annotated

from cyclopts import Parameter

from cli.commands.embed import ToolchainOptions
from serde_msgspec import dumps_json

_DEPENDENCIES = ("cyclopts", "msgspec", "opentelemetry-api", "rich")
_DEFAULT_TOOLCHAIN_OPTIONS = ToolchainOptions()


def get_version() -> str:
    """Get the embedkit package version string.

    Returns
    -------
    str
        Version string, or "0.0.0-dev" if not installed.
    """
    return _package_version("embedkit") or "0.0.0-dev"


def get_version_info(options: ToolchainOptions | None = None) -> dict[str, object]:
    """Describe this install and the tools an embed would run.

    Tool entries are the resolved executable path, or None when the
    configured name is not on ``PATH``; embeds then skip the architecture
    check and fail when signing is required.

    Returns
    -------
    dict[str, object]
        Structured version payload.
    """
    toolchain = options or ToolchainOptions()
    return {
        "embedkit": get_version(),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "dependencies": {name: _package_version(name) for name in _DEPENDENCIES},
        "toolchain": {
            "lipo": shutil.which(toolchain.lipo),
            "codesign": shutil.which(toolchain.codesign),
        },
    }


def version_command(
    options: Annotated[ToolchainOptions, Parameter(name="*")] = _DEFAULT_TOOLCHAIN_OPTIONS,
) -> int:
    """Show version information and the resolved lipo/codesign tools.

    Returns
    -------
    int
        Exit status code.
    """
    payload = dumps_json(get_version_info(options), pretty=True)
    sys.stdout.write(payload.decode("utf-8") + "\n")
    return 0


def _package_version(name: str) -> str | None:
    try:
        return pkg_version(name)
    except PackageNotFoundError:
        return None


__all__ = ["get_version", "get_version_info", "version_command"]
