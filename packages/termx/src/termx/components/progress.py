"""ProgressBar component: determinate progress with an optional spinner."""
from __future__ import annotations

import threading

from ..animation import AnimationScheduler, frames_for
from ..config import Settings
from ..terminal import CLEAR_LINE, Terminal, TerminalSession
from ..theme import Theme, theme_for


class ProgressBar:
    """
    Progress bar drawn on the current line:

        Copying [████████░░░░░░░░]  50%

    While idle, ``update()``/``increment()`` repaint the line directly. After
    ``start()`` an animation thread owns the line and draws a spinner glyph in
    front of the bar; updates only change the state it draws on the next tick.
    """

    def __init__(
        self,
        total: int,
        *,
        label: str = "",
        width: int = 40,
        fill: str = "█",
        empty: str = "░",
        show_percent: bool = True,
        style: str = "dots",
        interval: float | None = None,
        terminal: Terminal | None = None,
        theme: Theme | None = None,
        settings: Settings | None = None,
    ) -> None:
        if total <= 0:
            raise ValueError("total must be positive")
        if width <= 0:
            raise ValueError("width must be positive")
        self._settings = settings or Settings.from_env()
        self._terminal = terminal or TerminalSession(settings=self._settings)
        self._theme = theme_for(self._settings, theme)
        self._total = total
        self._label = label
        self._width = width
        self._fill = fill
        self._empty = empty
        self._show_percent = show_percent
        self._current = 0
        self._lock = threading.Lock()
        self._scheduler = AnimationScheduler(
            self._terminal,
            frames_for(style),
            interval=interval or self._settings.spinner_interval,
            render=self.render_line,
            name="progress",
        )

    @property
    def total(self) -> int:
        return self._total

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    @property
    def percent(self) -> float:
        """Completed fraction in ``[0, 1]``."""
        with self._lock:
            return self._current / self._total

    @property
    def is_active(self) -> bool:
        return self._scheduler.is_running

    def render_line(self, frame: str = "") -> str:
        percent = self.percent
        filled = int(percent * self._width)
        parts: list[str] = []
        if frame:
            parts.append(self._theme.style("primary", frame) + " ")
        if self._label:
            parts.append(self._label + " ")
        parts.append("[")
        parts.append(self._theme.style("success", self._fill * filled))
        parts.append(self._empty * (self._width - filled))
        parts.append("]")
        if self._show_percent:
            parts.append(f" {percent * 100:3.0f}%")
        return "".join(parts)

    def _paint(self) -> None:
        self._terminal.write("\r" + CLEAR_LINE + self.render_line())

    def update(self, current: int) -> None:
        with self._lock:
            self._current = max(0, min(current, self._total))
        if not self._scheduler.is_running:
            self._paint()

    def increment(self, step: int = 1) -> None:
        with self._lock:
            current = self._current
        self.update(current + step)

    def start(self) -> None:
        self._scheduler.start()

    def stop(self) -> None:
        self._scheduler.stop()

    def finish(self) -> None:
        """Stop any animation, draw the final state and move to the next line."""
        self.stop()
        self._paint()
        self._terminal.new_line()

    def __enter__(self) -> "ProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
