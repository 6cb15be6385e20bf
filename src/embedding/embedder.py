"""Embed a framework into the product being built.

Steps run strictly in order and the first failure aborts the rest. Nothing
is rolled back, so every step replaces what a previous run left behind and
can simply be re-run. Concurrent invocations against the same destination
are not coordinated.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from opentelemetry import trace

from embedding.environment import XcodeBuildEnvironment, missing_build_settings
from embedding.errors import (
    CopyFailedError,
    FrameworksFolderCreationError,
    IncompleteEnvironmentError,
    MissingDependencyError,
    SigningFailedError,
    UnsupportedArchitectureError,
)
from embedding.file_handler import FileHandler
from embedding.tools import CodesignTool, CommandError, LipoArchitectureInspector
from serde_msgspec import StructBaseStrict

if TYPE_CHECKING:
    from embedding.file_handler import FileHandling
    from embedding.tools import ArchitectureInspecting, CodeSigning

_LOGGER = logging.getLogger(__name__)
tracer = trace.get_tracer("embedkit.embedding")

DSYM_EXTENSION = ".dSYM"


class EmbedReport(StructBaseStrict):
    """Outcome of a successful embedding."""

    framework: Path
    dsym: Path | None = None
    signed: bool = False
    architectures: tuple[str, ...] | None = None


class FrameworkEmbedding(Protocol):
    """Public contract of a framework embedder."""

    def embed(
        self,
        path: Path,
        environment: XcodeBuildEnvironment | None = None,
    ) -> EmbedReport:
        """Embed the framework at ``path``."""
        ...


class FrameworkEmbedder:
    """Copy, collect debug symbols for, and sign an embedded framework.

    Parameters
    ----------
    file_handler
        File-system capability; every mutation goes through it.
    inspector
        Reports the architectures of the framework binary.
    signer
        Signs the copied framework.
    """

    def __init__(
        self,
        *,
        file_handler: FileHandling | None = None,
        inspector: ArchitectureInspecting | None = None,
        signer: CodeSigning | None = None,
    ) -> None:
        self.file_handler = file_handler or FileHandler()
        self.inspector = inspector or LipoArchitectureInspector()
        self.signer = signer or CodesignTool()

    def embed(
        self,
        path: Path,
        environment: XcodeBuildEnvironment | None = None,
    ) -> EmbedReport:
        """Embed the framework at ``path`` into the product being built.

        Parameters
        ----------
        path
            Absolute path to the framework bundle.
        environment
            Build-setting snapshot. Read from ``os.environ`` when omitted.

        Returns
        -------
        EmbedReport
            Paths written and whether the framework was signed.

        Raises
        ------
        IncompleteEnvironmentError
            Raised when no environment is given and the ambient one is incomplete.
        """
        if environment is None:
            environment = XcodeBuildEnvironment.from_environ()
            if environment is None:
                raise IncompleteEnvironmentError(missing_build_settings())
        with tracer.start_as_current_span("embed.framework") as span:
            span.set_attribute("embed.framework", str(path))
            span.set_attribute("embed.action", str(environment.action))
            report = self._embed(path, environment)
            span.set_attribute("embed.signed", report.signed)
            return report

    def _embed(self, path: Path, environment: XcodeBuildEnvironment) -> EmbedReport:
        if not self.file_handler.is_folder(path):
            raise MissingDependencyError(path)
        architectures = self._check_architectures(path, environment)

        frameworks_path = environment.frameworks_path()
        self._ensure_folder(frameworks_path)
        destination = frameworks_path / path.name
        self._replace(path, destination)
        _LOGGER.info("Embedded %s into %s", path.name, frameworks_path)

        dsym = self._copy_dsym(path, environment)

        signed = False
        if environment.should_sign():
            self._sign(destination, environment)
            signed = True
        else:
            _LOGGER.debug("Code signing not required/allowed; skipping %s", destination)

        return EmbedReport(
            framework=destination,
            dsym=dsym,
            signed=signed,
            architectures=architectures,
        )

    def binary_path(self, path: Path) -> Path:
        """Return the framework binary, ``Foo.framework/Foo``."""
        return path / path.stem

    def _check_architectures(
        self,
        path: Path,
        environment: XcodeBuildEnvironment,
    ) -> tuple[str, ...] | None:
        binary = self.binary_path(path)
        if not self.file_handler.exists(binary):
            _LOGGER.warning("No binary found at %s; skipping architecture check.", binary)
            return None
        architectures = self.inspector.architectures(binary)
        if architectures is None:
            _LOGGER.warning("Couldn't determine architectures of %s; skipping check.", binary)
            return None
        valid = environment.valid_architectures
        if valid and not set(architectures) & set(valid):
            raise UnsupportedArchitectureError(
                path,
                architectures=architectures,
                valid_architectures=valid,
            )
        return architectures

    def _ensure_folder(self, folder: Path) -> None:
        if self.file_handler.exists(folder):
            return
        try:
            self.file_handler.create_folder(folder)
        except OSError as exc:
            raise FrameworksFolderCreationError(folder, str(exc)) from exc

    def _replace(self, source: Path, destination: Path) -> None:
        try:
            if self.file_handler.exists(destination):
                self.file_handler.delete(destination)
            self.file_handler.copy(source, destination)
        except OSError as exc:
            raise CopyFailedError(source, destination, str(exc)) from exc

    def _copy_dsym(self, path: Path, environment: XcodeBuildEnvironment) -> Path | None:
        folder = environment.dsym_folder()
        if folder is None:
            return None
        dsym = path.with_name(path.name + DSYM_EXTENSION)
        if not self.file_handler.is_folder(dsym):
            _LOGGER.debug("No dSYM found at %s", dsym)
            return None
        destination = folder / dsym.name
        try:
            if not self.file_handler.exists(folder):
                self.file_handler.create_folder(folder)
        except OSError as exc:
            raise CopyFailedError(dsym, destination, str(exc)) from exc
        self._replace(dsym, destination)
        _LOGGER.info("Copied %s into %s", dsym.name, folder)
        return destination

    def _sign(self, bundle: Path, environment: XcodeBuildEnvironment) -> None:
        identity = environment.signing_identity()
        if identity is None:
            raise SigningFailedError(bundle, "no code signing identity is set")
        try:
            self.signer.sign(bundle, identity=identity, flags=environment.codesign_flags())
        except (CommandError, OSError) as exc:
            raise SigningFailedError(bundle, str(exc)) from exc
        _LOGGER.info("Signed %s with %s", bundle.name, identity)


__all__ = [
    "DSYM_EXTENSION",
    "EmbedReport",
    "FrameworkEmbedder",
    "FrameworkEmbedding",
]
