"""
Terminal abstraction.

Provides:
- Terminal: abstract base class (interface) used by widgets and schedulers
- TerminalSession: real terminal on a file descriptor pair, with raw mode

A session is created per widget invocation. ``init()`` saves the terminal
mode and enters raw mode; ``restore()`` puts the saved mode back and is safe
to call any number of times. Use the session as a context manager so restore
runs on every exit path.
"""
from __future__ import annotations

import logging
import os
import sys
import termios
import tty
from abc import ABC, abstractmethod
from typing import TextIO

from .config import Settings
from .errors import NotATerminalError
from .keys import KeyEvent, read_key
from .output import OutputToken

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_LINE = "\x1b[2K"
CLEAR_SCREEN = "\x1b[2J\x1b[H"
RESET = "\x1b[0m"

_DEFAULT_COLUMNS = 80
_DEFAULT_ROWS = 24

# ─────────────────────────────────────────────────────────────────────────────
# Terminal ABC
# ─────────────────────────────────────────────────────────────────────────────

class Terminal(ABC):
    """
    Minimal terminal interface for widgets.

    Coordinates are 0-based columns (x) and rows (y). All drawing methods
    write through immediately; there is no frame buffer.
    """

    @property
    @abstractmethod
    def output(self) -> OutputToken:
        """Ownership token guarding writes to this terminal."""

    @abstractmethod
    def init(self) -> None:
        """Enter raw mode, hide the cursor and clear the screen."""

    @abstractmethod
    def restore(self) -> None:
        """Show the cursor and restore the saved terminal mode. Idempotent."""

    @abstractmethod
    def write(self, data: str) -> None:
        """Write output to the terminal."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Terminal width in columns, queried on every access."""

    @property
    @abstractmethod
    def height(self) -> int:
        """Terminal height in rows, queried on every access."""

    @abstractmethod
    def read_key(self) -> KeyEvent:
        """Block until the next key event."""

    def write_styled(self, text: str, style: str) -> None:
        if style:
            self.write(f"{style}{text}{RESET}")
        else:
            self.write(text)

    def move_cursor(self, x: int, y: int) -> None:
        self.write(f"\x1b[{y + 1};{x + 1}H")

    def move_cursor_up(self, lines: int = 1) -> None:
        if lines > 0:
            self.write(f"\x1b[{lines}A")

    def print_at(self, x: int, y: int, text: str) -> None:
        self.move_cursor(x, y)
        self.write(text)

    def new_line(self) -> None:
        # Raw mode disables output post-processing, so "\n" alone won't return
        self.write("\r\n")

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def clear_line(self) -> None:
        self.write("\r" + CLEAR_LINE)

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN)

    def __enter__(self) -> "Terminal":
        self.init()
        return self

    def __exit__(self, *exc: object) -> None:
        self.restore()


# ─────────────────────────────────────────────────────────────────────────────
# TerminalSession
# ─────────────────────────────────────────────────────────────────────────────

class TerminalSession(Terminal):
    """
    Real terminal using a stdin descriptor and a stdout text stream.
    Defaults to the process's sys.stdin / sys.stdout.
    """

    def __init__(
        self,
        stdin_fd: int | None = None,
        stdout: TextIO | None = None,
        settings: Settings | None = None,
        output: OutputToken | None = None,
    ) -> None:
        self._stdin_fd = stdin_fd
        self._stdout = stdout
        self._settings = settings or Settings.from_env()
        self._output = output or OutputToken()
        self._saved_mode: list | None = None
        self._write_log_path = self._settings.write_log

    @property
    def output(self) -> OutputToken:
        return self._output

    @property
    def stdin_fd(self) -> int:
        if self._stdin_fd is None:
            return sys.stdin.fileno()
        return self._stdin_fd

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def is_raw(self) -> bool:
        return self._saved_mode is not None

    def init(self) -> None:
        try:
            fd = self.stdin_fd
        except (OSError, ValueError) as exc:
            # Replaced or closed sys.stdin without a usable descriptor
            raise NotATerminalError(-1, "stdin has no file descriptor") from exc
        if not os.isatty(fd):
            raise NotATerminalError(fd)
        if self._saved_mode is None:
            self._saved_mode = termios.tcgetattr(fd)
            tty.setraw(fd)
            logger.debug("Entered raw mode on fd %d", fd)
        try:
            self.hide_cursor()
            self.clear_screen()
        except BaseException:
            self.restore()
            raise

    def restore(self) -> None:
        if self._saved_mode is None:
            return
        mode, self._saved_mode = self._saved_mode, None
        try:
            self.show_cursor()
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSADRAIN, mode)
        logger.debug("Restored terminal mode on fd %d", self.stdin_fd)

    def close(self) -> None:
        self.restore()

    def write(self, data: str) -> None:
        with self._output.writing():
            out = self.stdout
            out.write(data)
            out.flush()
        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError as exc:
                logger.debug("Could not append to write log %s: %s", self._write_log_path, exc)

    def _size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self.stdout.fileno())
        except (OSError, ValueError, AttributeError):
            try:
                return os.get_terminal_size()
            except OSError:
                return os.terminal_size((
                    int(os.environ.get("COLUMNS", _DEFAULT_COLUMNS)),
                    int(os.environ.get("LINES", _DEFAULT_ROWS)),
                ))

    @property
    def width(self) -> int:
        return self._size().columns

    @property
    def height(self) -> int:
        return self._size().lines

    def read_key(self) -> KeyEvent:
        return read_key(self.stdin_fd)
