"""Framework embedding for Xcode build phases."""

from embedding.actions import BuildAction
from embedding.embedder import EmbedReport, FrameworkEmbedder, FrameworkEmbedding
from embedding.environment import XcodeBuildEnvironment
from embedding.errors import (
    CopyFailedError,
    EmbedError,
    FrameworksFolderCreationError,
    IncompleteEnvironmentError,
    MissingDependencyError,
    MissingFrameworkPathError,
    SigningFailedError,
    UnsupportedArchitectureError,
)
from embedding.file_handler import FileHandler, FileHandling

__all__ = [
    "BuildAction",
    "CopyFailedError",
    "EmbedError",
    "EmbedReport",
    "FileHandler",
    "FileHandling",
    "FrameworkEmbedder",
    "FrameworkEmbedding",
    "FrameworksFolderCreationError",
    "IncompleteEnvironmentError",
    "MissingDependencyError",
    "MissingFrameworkPathError",
    "SigningFailedError",
    "UnsupportedArchitectureError",
    "XcodeBuildEnvironment",
]
