"""Shared help-panel groups for the embedkit CLI."""

from __future__ import annotations

from cyclopts import Group

session_group = Group(
    "Session",
    help="Session and run context options.",
    sort_key=0,
)

toolchain_group = Group(
    "Toolchain",
    help="Locations of the lipo and codesign tools.",
    sort_key=1,
)

admin_group = Group(
    "Admin",
    help="Administrative commands and help.",
    sort_key=99,
)

__all__ = [
    "admin_group",
    "session_group",
    "toolchain_group",
]
