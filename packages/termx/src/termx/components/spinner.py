"""Spinner component: animated activity indicator."""
from __future__ import annotations

import threading

from ..animation import AnimationScheduler, frames_for
from ..config import Settings
from ..terminal import RESET, Terminal, TerminalSession
from ..theme import Theme, theme_for


class Spinner:
    """
    Animated spinner with a label, drawn on the current line.

        with Spinner("Downloading...", style="growing"):
            download()

    The label can be changed while the spinner runs; the next frame picks
    it up.
    """

    def __init__(
        self,
        label: str = "Loading...",
        *,
        style: str = "dots",
        color: str | None = None,
        interval: float | None = None,
        terminal: Terminal | None = None,
        theme: Theme | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        self._terminal = terminal or TerminalSession(settings=self._settings)
        self._theme = theme_for(self._settings, theme)
        self._color = self._theme.primary if color is None else color
        if self._settings.no_color:
            self._color = ""
        self._style = style
        self._label = label
        self._label_lock = threading.Lock()
        self._scheduler = AnimationScheduler(
            self._terminal,
            frames_for(style),
            interval=interval or self._settings.spinner_interval,
            render=self.render_frame,
            name=f"spinner-{style}",
        )

    # Presets

    @classmethod
    def loading(cls, **kwargs) -> "Spinner":
        return cls("Loading...", style="dots", **kwargs)

    @classmethod
    def processing(cls, **kwargs) -> "Spinner":
        return cls("Processing...", style="line", **kwargs)

    @classmethod
    def downloading(cls, **kwargs) -> "Spinner":
        return cls("Downloading...", style="growing", **kwargs)

    @classmethod
    def installing(cls, **kwargs) -> "Spinner":
        return cls("Installing...", style="circle", **kwargs)

    @classmethod
    def connecting(cls, **kwargs) -> "Spinner":
        return cls("Connecting...", style="pulse", **kwargs)

    @property
    def label(self) -> str:
        with self._label_lock:
            return self._label

    def set_label(self, label: str) -> None:
        with self._label_lock:
            self._label = label

    @property
    def style(self) -> str:
        return self._style

    @property
    def is_active(self) -> bool:
        return self._scheduler.is_running

    @property
    def scheduler(self) -> AnimationScheduler:
        return self._scheduler

    def render_frame(self, frame: str) -> str:
        glyph = f"{self._color}{frame}{RESET}" if self._color else frame
        label = self.label
        return f"{glyph} {label}" if label else glyph

    def start(self) -> None:
        self._scheduler.start()

    def stop(self) -> None:
        self._scheduler.stop()

    def _finish(self, symbol: str, role: str, message: str) -> None:
        self.stop()
        self._terminal.write(f"{self._theme.style(role, symbol)} {message}")
        self._terminal.new_line()

    def stop_with_message(self, message: str) -> None:
        self._finish("✓", "success", message)

    def stop_with_error(self, message: str) -> None:
        self._finish("✗", "error", message)

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
