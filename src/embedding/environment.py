"""Snapshot of the Xcode build settings that drive framework embedding.

The snapshot is either fully populated or not constructed at all. Derived
values (destination and frameworks paths, signing decisions) are computed
from the stored settings on every call.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from pathlib import Path

from embedding.actions import BuildAction
from serde_msgspec import StructBaseStrict, to_builtins
from utils.env_utils import env_required, parse_yes_no, split_words

CONFIGURATION = "CONFIGURATION"
CONFIGURATION_BUILD_DIR = "CONFIGURATION_BUILD_DIR"
FRAMEWORKS_FOLDER_PATH = "FRAMEWORKS_FOLDER_PATH"
BUILT_PRODUCTS_DIR = "BUILT_PRODUCTS_DIR"
TARGET_BUILD_DIR = "TARGET_BUILD_DIR"
DWARF_DSYM_FOLDER_PATH = "DWARF_DSYM_FOLDER_PATH"
EXPANDED_CODE_SIGN_IDENTITY = "EXPANDED_CODE_SIGN_IDENTITY"
CODE_SIGNING_REQUIRED = "CODE_SIGNING_REQUIRED"
CODE_SIGNING_ALLOWED = "CODE_SIGNING_ALLOWED"
EXPANDED_CODE_SIGN_IDENTITY_NAME = "EXPANDED_CODE_SIGN_IDENTITY_NAME"
OTHER_CODE_SIGN_FLAGS = "OTHER_CODE_SIGN_FLAGS"
VALID_ARCHS = "VALID_ARCHS"
SRCROOT = "SRCROOT"
ACTION = "ACTION"

BUILD_SETTING_KEYS: tuple[str, ...] = (
    CONFIGURATION,
    CONFIGURATION_BUILD_DIR,
    FRAMEWORKS_FOLDER_PATH,
    BUILT_PRODUCTS_DIR,
    TARGET_BUILD_DIR,
    DWARF_DSYM_FOLDER_PATH,
    EXPANDED_CODE_SIGN_IDENTITY,
    CODE_SIGNING_REQUIRED,
    CODE_SIGNING_ALLOWED,
    EXPANDED_CODE_SIGN_IDENTITY_NAME,
    OTHER_CODE_SIGN_FLAGS,
    VALID_ARCHS,
    SRCROOT,
    ACTION,
)


class XcodeBuildEnvironment(StructBaseStrict):
    """Immutable build-setting snapshot for one embedding invocation.

    Parameters
    ----------
    configuration
        Active build configuration name (``Debug``, ``Release``...).
    configuration_build_dir
        ``CONFIGURATION_BUILD_DIR``.
    frameworks_folder_path
        Path, relative to the destination, where frameworks are embedded.
    built_products_dir
        ``BUILT_PRODUCTS_DIR``; destination root for ``install``.
    target_build_dir
        ``TARGET_BUILD_DIR``; destination root for every other action.
    dwarf_dsym_folder_path
        Folder collecting debug-symbol bundles. Empty disables dSYM copies.
    expanded_code_sign_identity
        Signing identity (usually a certificate hash).
    code_signing_required
        ``YES``/``NO`` toolchain flag.
    code_signing_allowed
        ``YES``/``NO`` toolchain flag.
    expanded_code_sign_identity_name
        Human readable identity, used when the identity itself is empty.
    other_code_sign_flags
        Extra ``codesign`` arguments, shell quoted.
    valid_architectures
        Ordered architectures the product must support.
    source_root
        ``SRCROOT`` of the project being built.
    action
        Build action in effect.
    """

    configuration: str
    configuration_build_dir: str
    frameworks_folder_path: str
    built_products_dir: str
    target_build_dir: str
    dwarf_dsym_folder_path: str
    expanded_code_sign_identity: str
    code_signing_required: str
    code_signing_allowed: str
    expanded_code_sign_identity_name: str
    other_code_sign_flags: str
    valid_architectures: tuple[str, ...]
    source_root: str
    action: BuildAction

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
    ) -> XcodeBuildEnvironment | None:
        """Build a snapshot from ambient build settings.

        Parameters
        ----------
        environ
            Mapping of build settings. Defaults to ``os.environ``.

        Returns
        -------
        XcodeBuildEnvironment | None
            Snapshot, or None when any required build setting is missing.
        """
        values = env_required(BUILD_SETTING_KEYS, environ=environ)
        if values is None:
            return None
        return cls(
            configuration=values[CONFIGURATION],
            configuration_build_dir=values[CONFIGURATION_BUILD_DIR],
            frameworks_folder_path=values[FRAMEWORKS_FOLDER_PATH],
            built_products_dir=values[BUILT_PRODUCTS_DIR],
            target_build_dir=values[TARGET_BUILD_DIR],
            dwarf_dsym_folder_path=values[DWARF_DSYM_FOLDER_PATH],
            expanded_code_sign_identity=values[EXPANDED_CODE_SIGN_IDENTITY],
            code_signing_required=values[CODE_SIGNING_REQUIRED],
            code_signing_allowed=values[CODE_SIGNING_ALLOWED],
            expanded_code_sign_identity_name=values[EXPANDED_CODE_SIGN_IDENTITY_NAME],
            other_code_sign_flags=values[OTHER_CODE_SIGN_FLAGS],
            valid_architectures=split_words(values[VALID_ARCHS]),
            source_root=values[SRCROOT],
            action=BuildAction.parse(values[ACTION]),
        )

    # -------------------------------------------------------------------------
    # Destinations
    # -------------------------------------------------------------------------

    def destination_path(self) -> Path:
        """Return the root the framework is embedded under.

        Only ``install`` stages products under ``BUILT_PRODUCTS_DIR``; every
        other action works against ``TARGET_BUILD_DIR``.

        Returns
        -------
        Path
            Destination root.
        """
        if self.action is BuildAction.INSTALL:
            return Path(self.built_products_dir)
        return Path(self.target_build_dir)

    def frameworks_path(self) -> Path:
        """Return the folder frameworks are copied into.

        Returns
        -------
        Path
            ``destination_path() / frameworks_folder_path``.
        """
        return self.destination_path() / self.frameworks_folder_path

    def dsym_folder(self) -> Path | None:
        """Return the dSYM collection folder, or None when unset."""
        if not self.dwarf_dsym_folder_path.strip():
            return None
        return Path(self.dwarf_dsym_folder_path)

    # -------------------------------------------------------------------------
    # Signing
    # -------------------------------------------------------------------------

    @property
    def signing_required(self) -> bool:
        """Whether ``CODE_SIGNING_REQUIRED`` is set."""
        return parse_yes_no(self.code_signing_required, name=CODE_SIGNING_REQUIRED)

    @property
    def signing_allowed(self) -> bool:
        """Whether ``CODE_SIGNING_ALLOWED`` is set."""
        return parse_yes_no(self.code_signing_allowed, name=CODE_SIGNING_ALLOWED)

    def should_sign(self) -> bool:
        """Return True when embedded frameworks must be re-signed."""
        return self.signing_required and self.signing_allowed

    def signing_identity(self) -> str | None:
        """Return the identity to sign with.

        Returns
        -------
        str | None
            Expanded identity, falling back to its name; None when both are empty.
        """
        identity = self.expanded_code_sign_identity.strip()
        if identity:
            return identity
        name = self.expanded_code_sign_identity_name.strip()
        return name or None

    def codesign_flags(self) -> tuple[str, ...]:
        """Split ``OTHER_CODE_SIGN_FLAGS`` using shell quoting rules."""
        return tuple(shlex.split(self.other_code_sign_flags))

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def describe(self) -> dict[str, object]:
        """Return the snapshot and its derived decisions as builtins.

        Returns
        -------
        dict[str, object]
            JSON-friendly payload.
        """
        payload = to_builtins(self)
        if not isinstance(payload, dict):
            msg = f"Expected mapping payload, got {type(payload).__name__}."
            raise TypeError(msg)
        payload["derived"] = {
            "destination_path": str(self.destination_path()),
            "frameworks_path": str(self.frameworks_path()),
            "should_sign": self.should_sign(),
            "signing_identity": self.signing_identity(),
        }
        return payload


def missing_build_settings(environ: Mapping[str, str] | None = None) -> tuple[str, ...]:
    """Return the required build settings absent from ``environ``."""
    source = os.environ if environ is None else environ
    return tuple(key for key in BUILD_SETTING_KEYS if key not in source)


__all__ = [
    "BUILD_SETTING_KEYS",
    "XcodeBuildEnvironment",
    "missing_build_settings",
]
