"""
Root conftest.py — registers custom markers.

Markers:
  @pytest.mark.pty — opens a pseudo-terminal; skipped where pty is unavailable
                     or when run with --no-pty
"""
from __future__ import annotations

import os

import pytest


def _pty_available() -> bool:
    if os.name != "posix":
        return False
    try:
        import pty
        master, slave = pty.openpty()
    except (ImportError, OSError):
        return False
    os.close(master)
    os.close(slave)
    return True


# ---------------------------------------------------------------------------
# Custom markers
# ---------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "pty: mark test as needing a pseudo-terminal (skipped with --no-pty or where unsupported)",
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--no-pty",
        action="store_true",
        default=False,
        help="Skip tests marked with @pytest.mark.pty",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip @pytest.mark.pty tests when pseudo-terminals can't be used."""
    if not any("pty" in item.keywords for item in items):
        return
    if config.getoption("--no-pty"):
        reason = "pseudo-terminal tests disabled with --no-pty"
    elif not _pty_available():
        reason = "pseudo-terminals are not available on this platform"
    else:
        return
    skip_pty = pytest.mark.skip(reason=reason)
    for item in items:
        if "pty" in item.keywords:
            item.add_marker(skip_pty)
