"""
Keyboard input decoding.

Every read from a raw-mode terminal produces exactly one KeyEvent. Decoding
is stateless: a read is interpreted on its own, without buffering bytes
across reads, so an escape sequence that arrives split over two reads decodes
as two separate events instead of one control key.

API:
- Key — control key kinds, plus RUNE and UNKNOWN
- KeyEvent — one decoded key press
- decode(data) — turn the bytes of one read into a KeyEvent
- read_key(fd) — block for one read on fd and decode it
"""
from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass

from .errors import TerminalReadError

logger = logging.getLogger(__name__)

READ_SIZE = 256


# ─────────────────────────────────────────────────────────────────────────────
# Key kinds
# ─────────────────────────────────────────────────────────────────────────────

class Key(enum.Enum):
    UNKNOWN = "unknown"
    RUNE = "rune"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESCAPE = "escape"
    TAB = "tab"
    SPACE = "space"
    BACKSPACE = "backspace"
    DELETE = "delete"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    CTRL_C = "ctrl+c"
    CTRL_D = "ctrl+d"


_KEY_LABELS: dict[Key, str] = {
    Key.UP: "↑",
    Key.DOWN: "↓",
    Key.LEFT: "←",
    Key.RIGHT: "→",
    Key.ENTER: "Enter",
    Key.ESCAPE: "Esc",
    Key.TAB: "Tab",
    Key.SPACE: "Space",
    Key.BACKSPACE: "Backspace",
    Key.DELETE: "Delete",
    Key.HOME: "Home",
    Key.END: "End",
    Key.PAGE_UP: "PgUp",
    Key.PAGE_DOWN: "PgDn",
    Key.CTRL_C: "Ctrl+C",
    Key.CTRL_D: "Ctrl+D",
}


@dataclass(frozen=True)
class KeyEvent:
    """
    One decoded key press.

    ``rune`` is set only for Key.RUNE; ``raw`` always holds the bytes that
    were read, which is mostly useful for UNKNOWN events.
    """
    key: Key
    rune: str = ""
    raw: bytes = b""

    @property
    def is_rune(self) -> bool:
        return self.key is Key.RUNE

    @property
    def is_unknown(self) -> bool:
        return self.key is Key.UNKNOWN

    @property
    def is_control(self) -> bool:
        return self.key not in (Key.RUNE, Key.UNKNOWN)

    @property
    def id(self) -> str:
        """Key identifier used by keybindings: the rune itself, or the key name."""
        if self.key is Key.RUNE:
            return self.rune
        return self.key.value

    def __str__(self) -> str:
        if self.key is Key.RUNE:
            return self.rune
        if self.key is Key.UNKNOWN:
            return "Unknown"
        return _KEY_LABELS[self.key]

    @classmethod
    def char(cls, rune: str) -> "KeyEvent":
        return cls(Key.RUNE, rune, rune.encode())


# ─────────────────────────────────────────────────────────────────────────────
# Decoding
# ─────────────────────────────────────────────────────────────────────────────

_SINGLE_BYTE: dict[int, Key] = {
    0x0D: Key.ENTER,
    0x0A: Key.ENTER,
    0x09: Key.TAB,
    0x7F: Key.BACKSPACE,
    0x08: Key.BACKSPACE,
    0x1B: Key.ESCAPE,
    0x03: Key.CTRL_C,
    0x04: Key.CTRL_D,
    0x20: Key.SPACE,
}

_CSI_FINAL: dict[int, Key] = {
    ord("A"): Key.UP,
    ord("B"): Key.DOWN,
    ord("C"): Key.RIGHT,
    ord("D"): Key.LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

_CSI_TILDE: dict[int, Key] = {
    ord("3"): Key.DELETE,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
}


def decode(data: bytes) -> KeyEvent:
    """Decode the bytes of a single read into one KeyEvent."""
    raw = bytes(data)
    if len(raw) == 1:
        b = raw[0]
        key = _SINGLE_BYTE.get(b)
        if key is not None:
            return KeyEvent(key, raw=raw)
        if 33 <= b <= 126:
            return KeyEvent(Key.RUNE, chr(b), raw)
        return KeyEvent(Key.UNKNOWN, raw=raw)

    if len(raw) > 2 and raw[0] == 0x1B and raw[1] == ord("["):
        key = _CSI_FINAL.get(raw[2])
        if key is not None:
            return KeyEvent(key, raw=raw)
        if len(raw) > 3 and raw[3] == ord("~"):
            key = _CSI_TILDE.get(raw[2])
            if key is not None:
                return KeyEvent(key, raw=raw)

    logger.debug("Unrecognized input sequence: %r", raw)
    return KeyEvent(Key.UNKNOWN, raw=raw)


def read_key(fd: int) -> KeyEvent:
    """
    Block for one read of up to READ_SIZE bytes and decode it.

    Raises TerminalReadError when the stream is closed (zero-byte read) or the
    read fails. There is no retry.
    """
    try:
        data = os.read(fd, READ_SIZE)
    except OSError as exc:
        raise TerminalReadError(exc.errno, f"failed to read terminal input: {exc.strerror}") from exc
    if not data:
        raise TerminalReadError("terminal input closed")
    return decode(data)
