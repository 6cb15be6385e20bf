"""Embedding error taxonomy."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Literal

ErrorCategory = Literal["usage", "environment", "precondition", "operational"]


class EmbedError(RuntimeError):
    """Base error for framework embedding failures."""

    exit_code: ClassVar[int] = 1
    category: ClassVar[ErrorCategory] = "operational"


class MissingFrameworkPathError(EmbedError):
    """The command was invoked without a framework path."""

    exit_code: ClassVar[int] = 5
    category: ClassVar[ErrorCategory] = "usage"

    def __init__(self) -> None:
        super().__init__("The path to the framework is missing.")


class IncompleteEnvironmentError(EmbedError):
    """The ambient build settings do not describe a complete build environment."""

    exit_code: ClassVar[int] = 4
    category: ClassVar[ErrorCategory] = "environment"

    def __init__(self, missing: tuple[str, ...] = ()) -> None:
        self.missing = missing
        msg = "The build environment is incomplete; run this command from an Xcode build phase."
        if missing:
            msg = f"{msg} Missing: {', '.join(missing)}."
        super().__init__(msg)


class MissingDependencyError(EmbedError):
    """The dependency path does not resolve to an existing bundle."""

    exit_code: ClassVar[int] = 10
    category: ClassVar[ErrorCategory] = "precondition"

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Couldn't find the framework at path {path}.")


class UnsupportedArchitectureError(EmbedError):
    """The dependency supports none of the valid architectures."""

    exit_code: ClassVar[int] = 11
    category: ClassVar[ErrorCategory] = "precondition"

    def __init__(
        self,
        path: Path,
        *,
        architectures: tuple[str, ...],
        valid_architectures: tuple[str, ...],
    ) -> None:
        self.path = path
        self.architectures = architectures
        self.valid_architectures = valid_architectures
        msg = (
            f"The framework {path.name} supports {' '.join(architectures) or 'no architectures'}, "
            f"none of which are valid ({' '.join(valid_architectures)})."
        )
        super().__init__(msg)


class FrameworksFolderCreationError(EmbedError):
    """The destination frameworks folder could not be created."""

    exit_code: ClassVar[int] = 20

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Couldn't create the frameworks folder at {path}: {reason}")


class CopyFailedError(EmbedError):
    """A bundle or its debug symbols could not be copied."""

    exit_code: ClassVar[int] = 21

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"Couldn't copy {source} to {destination}: {reason}")


class SigningFailedError(EmbedError):
    """The signing tool reported a failure."""

    exit_code: ClassVar[int] = 22

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Couldn't sign {path}: {reason}")


__all__ = [
    "CopyFailedError",
    "EmbedError",
    "ErrorCategory",
    "FrameworksFolderCreationError",
    "IncompleteEnvironmentError",
    "MissingDependencyError",
    "MissingFrameworkPathError",
    "SigningFailedError",
    "UnsupportedArchitectureError",
]
