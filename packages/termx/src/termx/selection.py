"""
Selection state machine shared by every list widget.

A SelectionController owns the filtered view of a list of labels, the cursor
into that view, the selected set (original indices) and the query buffer. It
turns key events into state transitions:

    BROWSING ──rune──▶ SEARCHING ──escape/backspace to empty──▶ BROWSING
        │                  │
        ├──enter (valid)───┴──▶ CONFIRMED
        └──escape / ctrl+c─────▶ CANCELLED

Widgets choose their behaviour through Capabilities and supply rendering and
validation on top; they never re-implement navigation.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .errors import ValidationError
from .filtering import Dedupe, Option, filter_options
from .keybindings import Keybindings
from .keys import Key, KeyEvent

logger = logging.getLogger(__name__)

Validator = Callable[[list[str]], None]


class SelectionState(enum.Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Capabilities:
    """
    Behaviour switches for a SelectionController.

    supports_search: printable keys edit a query that filters the list.
    supports_multiple: space toggles entries, enter commits the selected set.
    supports_submenus: confirmed entries may open a nested list; the widget
        calls ``reopen()`` when the user comes back.
    wrap: up/down wrap around at the ends instead of stopping.
    vi_keys: ``k``/``j`` move the cursor (only when search is off).
    escape_clears_query: escape clears an active query before it cancels.
    """
    supports_search: bool = False
    supports_multiple: bool = False
    supports_submenus: bool = False
    wrap: bool = False
    vi_keys: bool = False
    escape_clears_query: bool = True


def visible_window(cursor: int, total: int, visible_count: int) -> tuple[int, int]:
    """
    Return the ``[start, end)`` slice of a list of ``total`` rows to display
    so that ``cursor`` is on screen, keeping it on the bottom row once it
    moves past the first page.
    """
    if total <= 0 or visible_count <= 0:
        return 0, 0
    cursor = min(max(cursor, 0), total - 1)
    start = max(0, cursor - visible_count + 1)
    end = min(start + visible_count, total)
    return start, end


# ─────────────────────────────────────────────────────────────────────────────
# SelectionController
# ─────────────────────────────────────────────────────────────────────────────

class SelectionController:
    def __init__(
        self,
        labels: Sequence[str],
        capabilities: Capabilities = Capabilities(),
        *,
        case_sensitive: bool = False,
        visible_count: int = 7,
        min_select: int = 0,
        max_select: int | None = None,
        validator: Validator | None = None,
        selectable: Callable[[int], bool] | None = None,
        initial_index: int | None = None,
        initial_selected: Iterable[int] = (),
        dedupe: Dedupe | None = None,
        keybindings: Keybindings | None = None,
    ) -> None:
        if visible_count < 1:
            raise ValueError("visible_count must be at least 1")
        if min_select < 0:
            raise ValueError("min_select must not be negative")
        if max_select is not None and max_select < max(min_select, 1):
            raise ValueError("max_select must be at least 1 and not below min_select")

        self._labels = list(labels)
        self._caps = capabilities
        self._case_sensitive = case_sensitive
        self._visible_count = visible_count
        self._min_select = min_select
        self._max_select = max_select
        self._validator = validator
        self._selectable = selectable
        if dedupe is None:
            dedupe = Dedupe.INDEX if capabilities.supports_multiple else Dedupe.VALUE
        self._dedupe = dedupe
        self._keybindings = keybindings or Keybindings()

        self._state = SelectionState.BROWSING
        self._query = ""
        self._error: str | None = None
        self._committed: tuple[int, ...] = ()

        self._selected: set[int] = set()
        for index in initial_selected:
            if not 0 <= index < len(self._labels):
                raise ValueError(f"selected index {index} out of range")
            self._selected.add(index)
        if max_select is not None and len(self._selected) > max_select:
            raise ValueError(f"{len(self._selected)} options preselected, at most {max_select} allowed")

        self._filtered: tuple[int, ...] = tuple(range(len(self._labels)))
        self._cursor = 0
        self._reset_cursor()
        if initial_index is not None and initial_index in self._filtered:
            pos = self._filtered.index(initial_index)
            if self._is_selectable(pos):
                self._cursor = pos

    # ── Read-only state ────────────────────────────────────────────────────

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state in (SelectionState.CONFIRMED, SelectionState.CANCELLED)

    @property
    def capabilities(self) -> Capabilities:
        return self._caps

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    @property
    def options(self) -> list[Option]:
        """Options in the current filtered view, in display order."""
        return [Option(self._labels[i], i) for i in self._filtered]

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def query(self) -> str:
        return self._query

    @property
    def filtered(self) -> tuple[int, ...]:
        return self._filtered

    @property
    def selected(self) -> frozenset[int]:
        return frozenset(self._selected)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def committed(self) -> tuple[int, ...]:
        """Original indices committed by the last confirm, in list order."""
        return self._committed

    @property
    def visible_count(self) -> int:
        return self._visible_count

    @property
    def min_select(self) -> int:
        return self._min_select

    @property
    def max_select(self) -> int | None:
        return self._max_select

    @property
    def current(self) -> int | None:
        """Original index under the cursor, or None when the view is empty."""
        if not self._filtered:
            return None
        return self._filtered[self._cursor]

    def is_selected(self, index: int) -> bool:
        return index in self._selected

    def window(self) -> tuple[int, int]:
        return visible_window(self._cursor, len(self._filtered), self._visible_count)

    # ── Key handling ──────────────────────────────────────────────────────

    def handle_key(self, event: KeyEvent) -> SelectionState:
        """Apply one key event and return the resulting state."""
        if self.done:
            return self._state

        kb = self._keybindings
        caps = self._caps

        if kb.matches(event, "abort"):
            return self.cancel()
        if kb.matches(event, "cancel"):
            if caps.supports_search and caps.escape_clears_query and self._query:
                self.clear_query()
                return self._state
            return self.cancel()
        if kb.matches(event, "confirm"):
            return self.confirm()

        if kb.matches(event, "cursorUp"):
            self.move(-1)
        elif kb.matches(event, "cursorDown"):
            self.move(1)
        elif kb.matches(event, "first"):
            self.move_first()
        elif kb.matches(event, "last"):
            self.move_last()
        elif kb.matches(event, "pageUp"):
            self.move(-self._visible_count, wrap=False)
        elif kb.matches(event, "pageDown"):
            self.move(self._visible_count, wrap=False)
        elif caps.supports_multiple and kb.matches(event, "toggle"):
            self.toggle()
        elif caps.supports_multiple and kb.matches(event, "toggleAll"):
            self.toggle_all()
        elif caps.supports_search and kb.matches(event, "deleteCharBackward"):
            self.backspace()
        elif caps.supports_search and event.key is Key.SPACE:
            self.append_query(" ")
        elif event.is_rune:
            if caps.supports_search:
                self.append_query(event.rune)
            elif caps.vi_keys and kb.matches(event, "cursorUpVi"):
                self.move(-1)
            elif caps.vi_keys and kb.matches(event, "cursorDownVi"):
                self.move(1)
        return self._state

    # ── Cursor ────────────────────────────────────────────────────────────

    def _is_selectable(self, pos: int) -> bool:
        if self._selectable is None:
            return True
        return self._selectable(self._filtered[pos])

    def _step(self, pos: int, step: int, wrap: bool) -> int | None:
        n = len(self._filtered)
        for _ in range(n):
            pos += step
            if wrap:
                pos %= n
            elif pos < 0 or pos >= n:
                return None
            if self._is_selectable(pos):
                return pos
        return None

    def _reset_cursor(self) -> None:
        self._cursor = 0
        if self._filtered and not self._is_selectable(0):
            first = self._step(0, 1, wrap=False)
            if first is not None:
                self._cursor = first

    def move(self, delta: int, wrap: bool | None = None) -> None:
        """Move the cursor ``delta`` selectable rows, clamping or wrapping."""
        if not self._filtered or delta == 0:
            return
        wrap = self._caps.wrap if wrap is None else wrap
        step = 1 if delta > 0 else -1
        for _ in range(abs(delta)):
            nxt = self._step(self._cursor, step, wrap)
            if nxt is None:
                break
            self._cursor = nxt

    def move_first(self) -> None:
        if self._filtered:
            first = self._step(-1, 1, wrap=False)
            if first is not None:
                self._cursor = first

    def move_last(self) -> None:
        if self._filtered:
            last = self._step(len(self._filtered), -1, wrap=False)
            if last is not None:
                self._cursor = last

    # ── Query ─────────────────────────────────────────────────────────────

    def set_query(self, query: str) -> None:
        self._query = query
        self._error = None
        self._filtered = filter_options(self._labels, query, self._case_sensitive, self._dedupe)
        self._reset_cursor()
        if not self.done:
            self._state = SelectionState.SEARCHING if query else SelectionState.BROWSING

    def append_query(self, text: str) -> None:
        self.set_query(self._query + text)

    def backspace(self) -> None:
        if self._query:
            self.set_query(self._query[:-1])

    def clear_query(self) -> None:
        self.set_query("")

    def set_filtered(self, indices: Sequence[int]) -> None:
        """
        Replace the filtered view with indices computed by the caller.
        Used by widgets that keep their own text buffer (the combo box).
        """
        self._filtered = tuple(indices)
        self._reset_cursor()

    # ── Selection ─────────────────────────────────────────────────────────

    def toggle(self) -> bool:
        """Toggle the entry under the cursor. Returns False if rejected."""
        index = self.current
        if index is None or not self._is_selectable(self._cursor):
            return False
        if index in self._selected:
            self._selected.discard(index)
            self._error = None
            return True
        if self._max_select is not None and len(self._selected) >= self._max_select:
            self._error = f"You can select at most {self._max_select} option(s)"
            return False
        self._selected.add(index)
        self._error = None
        return True

    def toggle_all(self) -> None:
        """Select every filtered entry, or clear them if all are selected."""
        self._error = None
        candidates = [
            idx for pos, idx in enumerate(self._filtered) if self._is_selectable(pos)
        ]
        if candidates and all(idx in self._selected for idx in candidates):
            self._selected.difference_update(candidates)
            return
        for idx in candidates:
            if self._max_select is not None and len(self._selected) >= self._max_select:
                break
            self._selected.add(idx)

    # ── Terminal transitions ──────────────────────────────────────────────

    def _validate(self, indices: list[int]) -> bool:
        if self._caps.supports_multiple:
            count = len(indices)
            if count < self._min_select:
                self._error = f"Please select at least {self._min_select} option(s)"
                return False
            if self._max_select is not None and count > self._max_select:
                self._error = f"You can select at most {self._max_select} option(s)"
                return False
        if self._validator is not None:
            try:
                self._validator([self._labels[i] for i in indices])
            except ValidationError as exc:
                self._error = exc.message
                return False
        return True

    def confirm(self) -> SelectionState:
        if self.done:
            return self._state
        if self._caps.supports_multiple:
            indices = sorted(self._selected)
        else:
            if self.current is None or not self._is_selectable(self._cursor):
                return self._state
            indices = [self.current]
        if not self._validate(indices):
            logger.debug("Selection rejected: %s", self._error)
            return self._state
        self._error = None
        self._committed = tuple(indices)
        self._state = SelectionState.CONFIRMED
        return self._state

    def cancel(self) -> SelectionState:
        if not self.done:
            self._committed = ()
            self._state = SelectionState.CANCELLED
        return self._state

    def reopen(self, error: str | None = None) -> None:
        """Return to browsing after a confirm or cancel, e.g. back from a submenu."""
        self._committed = ()
        self._error = error
        self._state = SelectionState.SEARCHING if self._query else SelectionState.BROWSING
