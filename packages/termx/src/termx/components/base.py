"""
Widget base class and the shared run loop.

A widget draws itself as a list of lines (``render``) and reacts to one key
event at a time (``handle_key``). ``run()`` owns the terminal session for the
widget's lifetime: it enters raw mode, repaints, blocks for the next key and
dispatches it until the widget is done, and restores the terminal on every
exit path.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from ..config import Settings
from ..errors import CancellationError
from ..keybindings import Keybindings
from ..keys import KeyEvent
from ..terminal import Terminal, TerminalSession
from ..theme import Theme, theme_for

logger = logging.getLogger(__name__)

HELP_SEPARATOR = " • "


@runtime_checkable
class Component(Protocol):
    """Anything that can draw itself and take key input."""

    def render(self, width: int) -> list[str]:
        ...

    def handle_key(self, event: KeyEvent) -> None:
        ...


class Widget(ABC):
    """
    Base class for interactive widgets.

    Subclasses implement ``render``, ``handle_key``, ``done``, ``cancelled``
    and ``value``. ``run()`` returns ``value`` once the widget is done, or
    raises CancellationError if the user aborted.
    """

    def __init__(
        self,
        *,
        terminal: Terminal | None = None,
        theme: Theme | None = None,
        settings: Settings | None = None,
        keybindings: Keybindings | None = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        self._terminal = terminal or TerminalSession(settings=self._settings)
        self._theme = theme_for(self._settings, theme)
        self._keybindings = keybindings or Keybindings()

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def terminal(self) -> Terminal:
        return self._terminal

    @abstractmethod
    def render(self, width: int) -> list[str]:
        """Return the lines to display, each at most ``width`` columns wide."""

    @abstractmethod
    def handle_key(self, event: KeyEvent) -> None:
        ...

    @property
    @abstractmethod
    def done(self) -> bool:
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...

    @property
    @abstractmethod
    def value(self) -> Any:
        """Committed result; only meaningful once ``done`` and not cancelled."""

    def result(self) -> Any:
        if not self.done:
            raise RuntimeError(f"{type(self).__name__} has not finished")
        if self.cancelled:
            raise CancellationError()
        return self.value

    def paint(self) -> None:
        term = self._terminal
        lines = self.render(term.width)
        term.clear_screen()
        for y, line in enumerate(lines[: term.height]):
            term.print_at(0, y, line)

    def run(self) -> Any:
        """Run the widget until it is confirmed or cancelled."""
        logger.debug("Running %s", type(self).__name__)
        with self._terminal:
            while not self.done:
                self.paint()
                self.handle_key(self._terminal.read_key())
            self._terminal.clear_screen()
        return self.result()

    # ── Rendering helpers ─────────────────────────────────────────────────

    def _help(self, *hints: str) -> str:
        return self._theme.style("muted", "  " + HELP_SEPARATOR.join(hints))

    def _error_line(self, message: str | None) -> list[str]:
        if not message:
            return []
        return [self._theme.style("error", f"  ✗ {message}")]
