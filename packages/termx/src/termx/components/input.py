"""Input component: single-line text entry with validation."""
from __future__ import annotations

from typing import Callable

from ..errors import ValidationError
from ..keys import Key, KeyEvent
from ..utils import truncate_to_width, visible_width
from .base import Widget

_PROMPT = "> "


class Input(Widget):
    """
    Single-line text input with horizontal scrolling.

    Left/right/home/end move the cursor, backspace/delete edit around it.
    ``mask`` replaces every character on screen (password entry) and
    ``max_length`` caps the number of characters. Enter runs the validator;
    a failure is shown under the field and cleared by the next edit.
    """

    def __init__(
        self,
        label: str,
        *,
        default: str = "",
        placeholder: str = "",
        mask: str | None = None,
        max_length: int | None = None,
        validator: Callable[[str], None] | None = None,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if max_length is not None and max_length < 1:
            raise ValueError("max_length must be at least 1")
        self._label = label
        self._placeholder = placeholder
        self._mask = mask
        self._max_length = max_length
        self._validator = validator
        self._show_help = show_help

        self._value = default[:max_length] if max_length else default
        self._cursor = len(self._value)
        self._error: str | None = None
        self._finished = False
        self._cancelled = False

    @property
    def text(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def done(self) -> bool:
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def value(self) -> str:
        return self._value

    def _insert(self, text: str) -> None:
        if self._max_length is not None and len(self._value) + len(text) > self._max_length:
            return
        self._value = self._value[:self._cursor] + text + self._value[self._cursor:]
        self._cursor += len(text)
        self._error = None

    def _submit(self) -> None:
        if self._validator is not None:
            try:
                self._validator(self._value)
            except ValidationError as exc:
                self._error = exc.message
                return
        self._finished = True

    def handle_key(self, event: KeyEvent) -> None:
        if self._finished:
            return
        kb = self._keybindings

        if kb.matches(event, "abort") or kb.matches(event, "cancel"):
            self._cancelled = self._finished = True
        elif kb.matches(event, "confirm"):
            self._submit()
        elif kb.matches(event, "cursorLeft"):
            self._cursor = max(0, self._cursor - 1)
        elif kb.matches(event, "cursorRight"):
            self._cursor = min(len(self._value), self._cursor + 1)
        elif kb.matches(event, "first"):
            self._cursor = 0
        elif kb.matches(event, "last"):
            self._cursor = len(self._value)
        elif kb.matches(event, "deleteCharBackward"):
            if self._cursor > 0:
                self._value = self._value[:self._cursor - 1] + self._value[self._cursor:]
                self._cursor -= 1
                self._error = None
        elif kb.matches(event, "deleteCharForward"):
            if self._cursor < len(self._value):
                self._value = self._value[:self._cursor] + self._value[self._cursor + 1:]
                self._error = None
        elif event.key is Key.SPACE:
            self._insert(" ")
        elif event.is_rune:
            self._insert(event.rune)

    def _field(self, available: int) -> str:
        shown = self._mask * len(self._value) if self._mask else self._value
        cursor = self._cursor

        if len(shown) >= available:
            # Keep the cursor inside the visible slice
            scroll_width = available - 1 if cursor == len(shown) else available
            start = max(0, min(cursor - scroll_width // 2, len(shown) - scroll_width))
            shown = shown[start:start + scroll_width]
            cursor -= start

        at_cursor = shown[cursor] if cursor < len(shown) else " "
        return shown[:cursor] + f"\x1b[7m{at_cursor}\x1b[27m" + shown[cursor + 1:]

    def render(self, width: int) -> list[str]:
        theme = self._theme
        lines = [theme.style("title", truncate_to_width(self._label, width))]

        available = width - len(_PROMPT)
        if not self._value and self._placeholder:
            field = "\x1b[7m \x1b[27m" + theme.style("placeholder", self._placeholder)
            field = truncate_to_width(field, available)
        else:
            field = self._field(max(available, 1))
        line = theme.style("primary", _PROMPT) + field
        if self._max_length is not None:
            counter = f" {len(self._value)}/{self._max_length}"
            if visible_width(line) + len(counter) <= width:
                line += theme.style("muted", counter)
        lines.append(line)

        lines.extend(self._error_line(self._error))
        if self._show_help:
            lines.append(self._help("Enter submit", "Esc cancel"))
        return lines


class Password(Input):
    """Input that masks what is typed."""

    def __init__(self, label: str, *, mask: str = "*", **kwargs) -> None:
        super().__init__(label, mask=mask, **kwargs)
