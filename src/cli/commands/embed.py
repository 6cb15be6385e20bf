"""Embed command implementation for embedkit CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from cyclopts import Parameter

from cli.context import RunContext
from cli.groups import toolchain_group
from cli.path_utils import resolve_framework_path
from cli.result import CliResult
from embedding.embedder import FrameworkEmbedder, FrameworkEmbedding
from embedding.environment import XcodeBuildEnvironment, missing_build_settings
from embedding.errors import IncompleteEnvironmentError, MissingFrameworkPathError
from embedding.file_handler import FileHandler, FileHandling
from embedding.tools import CodesignTool, LipoArchitectureInspector


@dataclass(frozen=True)
class ToolchainOptions:
    """Toolchain binaries used while embedding."""

    lipo: Annotated[
        str,
        Parameter(
            name="--lipo",
            help="lipo executable used to read framework architectures.",
            env_var="EMBEDKIT_LIPO",
            group=toolchain_group,
        ),
    ] = "lipo"
    codesign: Annotated[
        str,
        Parameter(
            name="--codesign",
            help="codesign executable used to re-sign embedded frameworks.",
            env_var="EMBEDKIT_CODESIGN",
            group=toolchain_group,
        ),
    ] = "codesign"


_DEFAULT_TOOLCHAIN_OPTIONS = ToolchainOptions()


def build_embedder(
    options: ToolchainOptions,
    *,
    file_handler: FileHandling | None = None,
) -> FrameworkEmbedding:
    """Return the embedder configured for ``options``.

    Returns
    -------
    FrameworkEmbedding
        Embedder wired to the configured toolchain.
    """
    return FrameworkEmbedder(
        file_handler=file_handler or FileHandler(),
        inspector=LipoArchitectureInspector(options.lipo),
        signer=CodesignTool(options.codesign),
    )


def embed_command(
    path: Annotated[
        str | None,
        Parameter(help="Path to the framework to embed, relative to the working directory."),
    ] = None,
    options: Annotated[ToolchainOptions, Parameter(name="*")] = _DEFAULT_TOOLCHAIN_OPTIONS,
    *,
    run_context: Annotated[RunContext | None, Parameter(parse=False)] = None,
) -> CliResult:
    """Embed a framework into the product of the current Xcode build.

    Reads the build settings Xcode exports to run-script phases, copies the
    framework and its dSYM, and re-signs it when code signing is required.

    Returns
    -------
    CliResult
        Summary of the embedded artifacts.

    Raises
    ------
    MissingFrameworkPathError
        Raised when no path is given.
    IncompleteEnvironmentError
        Raised when the build settings are incomplete.
    """
    if not path:
        raise MissingFrameworkPathError
    file_handler = FileHandler()
    environ = run_context.environ if run_context else None
    base = (run_context.working_directory if run_context else None) or file_handler.current_path
    framework = resolve_framework_path(base, path)
    if framework is None:
        raise MissingFrameworkPathError

    environment = XcodeBuildEnvironment.from_environ(environ)
    if environment is None:
        raise IncompleteEnvironmentError(missing_build_settings(environ))

    embedder = build_embedder(options, file_handler=file_handler)
    report = embedder.embed(framework, environment)
    return CliResult.embedded(report, environment.action)


__all__ = ["ToolchainOptions", "build_embedder", "embed_command"]
