"""
Background animation for spinners and progress indicators.

An AnimationScheduler runs a daemon thread that overwrites the current line
with the next frame on every tick. The thread owns the terminal's output
token for as long as it runs, so foreground code cannot interleave writes
with the animation; it hands new state to the scheduler's render callback
instead.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Sequence

from .errors import OutputBusyError
from .terminal import CLEAR_LINE, Terminal

logger = logging.getLogger(__name__)

# Extra time allowed for the animation thread to exit after stop()
_JOIN_GRACE = 0.5

SPINNER_STYLES: dict[str, tuple[str, ...]] = {
    "dots":    ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"),
    "line":    ("|", "/", "-", "\\"),
    "circle":  ("◐", "◓", "◑", "◒"),
    "arrow":   ("←", "↖", "↑", "↗", "→", "↘", "↓", "↙"),
    "clock":   ("🕐", "🕑", "🕒", "🕓", "🕔", "🕕", "🕖", "🕗", "🕘", "🕙", "🕚", "🕛"),
    "bounce":  ("⠁", "⠂", "⠄", "⠂"),
    "pulse":   ("●", "○", "●", "○"),
    "growing": ("▁", "▃", "▄", "▅", "▆", "▇", "█", "▇", "▆", "▅", "▄", "▃"),
    "box":     ("▖", "▘", "▝", "▗"),
    "bar":     ("[    ]", "[=   ]", "[==  ]", "[=== ]", "[ ===]", "[  ==]", "[   =]"),
}


def frames_for(style: str) -> tuple[str, ...]:
    try:
        return SPINNER_STYLES[style]
    except KeyError:
        raise ValueError(
            f"unknown spinner style {style!r}; expected one of {', '.join(SPINNER_STYLES)}"
        ) from None


class AnimationScheduler:
    """
    Emits ``render(frame)`` on a fixed interval until stopped.

    Frames are emitted in strictly increasing order starting from frame 0 on
    the first tick. ``start()`` and ``stop()`` are idempotent; ``stop()``
    waits for the thread to exit and then clears the line.
    """

    def __init__(
        self,
        terminal: Terminal,
        frames: Sequence[str],
        interval: float = 0.1,
        render: Callable[[str], str] | None = None,
        name: str = "termx-animation",
    ) -> None:
        if not frames:
            raise ValueError("an animation needs at least one frame")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._terminal = terminal
        self._frames = tuple(frames)
        self._interval = interval
        self._render = render or (lambda frame: frame)
        self._name = name

        self._lock = threading.Lock()
        self._running = False
        self._stop_event = threading.Event()
        self._claimed = threading.Event()
        self._thread: threading.Thread | None = None
        self._frame_index = 0
        self._error: BaseException | None = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def frame_index(self) -> int:
        """Number of frames emitted since the last start()."""
        with self._lock:
            return self._frame_index

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def frames(self) -> tuple[str, ...]:
        return self._frames

    def start(self) -> None:
        """Start the animation thread; returns once it owns the output."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._frame_index = 0
            self._error = None
            self._stop_event.clear()
            self._claimed.clear()
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        self._claimed.wait()
        if self._error is not None:
            with self._lock:
                self._running = False
            error, self._error = self._error, None
            raise error
        logger.debug("Animation %s started (interval %.3fs)", self._name, self._interval)

    def stop(self, clear: bool = True) -> None:
        """Stop the animation, wait for the thread, then clear the line."""
        with self._lock:
            if not self._running:
                return
            self._running = False
        self._stop_event.set()

        thread = self._thread
        if thread is not None:
            thread.join(self._interval + _JOIN_GRACE)
            if thread.is_alive():
                logger.warning("Animation %s did not stop within %.2fs", self._name, self._interval + _JOIN_GRACE)
                return
            self._thread = None

        if clear:
            self._terminal.clear_line()
        logger.debug("Animation %s stopped after %d frames", self._name, self._frame_index)

        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def _emit(self, frame: str) -> None:
        self._terminal.write("\r" + CLEAR_LINE + self._render(frame))

    def _run(self) -> None:
        output = self._terminal.output
        try:
            output.claim()
        except OutputBusyError as exc:
            self._error = exc
            self._claimed.set()
            return
        self._claimed.set()
        try:
            while not self._stop_event.wait(self._interval):
                with self._lock:
                    if not self._running:
                        break
                    frame = self._frames[self._frame_index % len(self._frames)]
                # Outside the lock: stop() and the properties never wait on a write
                self._emit(frame)
                with self._lock:
                    self._frame_index += 1
        except Exception as exc:
            logger.exception("Animation %s failed", self._name)
            self._error = exc
        finally:
            output.release()

    def __enter__(self) -> "AnimationScheduler":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
