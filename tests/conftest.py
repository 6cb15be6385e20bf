"""Pytest configuration shared by the embedkit test suite."""

from __future__ import annotations

import os

import pytest

from embedding.environment import BUILD_SETTING_KEYS

_TOOL_ENV_PREFIX = "EMBEDKIT_"


@pytest.fixture(autouse=True)
def _hermetic_build_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Xcode build settings and embedkit overrides from leaking into tests.

    Tests that exercise ambient construction set the variables they need.
    """
    for key in BUILD_SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    for key in [name for name in os.environ if name.startswith(_TOOL_ENV_PREFIX)]:
        monkeypatch.delenv(key, raising=False)
