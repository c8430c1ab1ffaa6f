"""Shared fixtures for termx tests."""
from __future__ import annotations

import pytest

from termx.config import Settings

from mock_terminal import MockTerminal, keys


@pytest.fixture
def settings() -> Settings:
    return Settings(no_color=True)


@pytest.fixture
def terminal() -> MockTerminal:
    return MockTerminal()


@pytest.fixture
def script():
    """Return the ``keys`` helper for building scripted input."""
    return keys
