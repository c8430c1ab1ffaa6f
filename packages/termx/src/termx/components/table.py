"""Table component: static table rendering and an interactive row picker."""
from __future__ import annotations

from typing import Sequence

from ..keys import KeyEvent
from ..selection import Capabilities, SelectionController, SelectionState
from ..utils import pad_to_width, truncate_to_width, visible_width
from .base import Widget

_BORDERS = {
    "top":    ("┌", "┬", "┐", "─"),
    "middle": ("├", "┼", "┤", "─"),
    "bottom": ("└", "┴", "┘", "─"),
}


class Table(Widget):
    """
    A table of string cells.

    ``render_table()`` draws the whole table; ``run()`` shows it as a picker
    (up/down or k/j, Enter to choose, Escape to cancel) and returns the chosen
    row's index.
    """

    def __init__(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]] = (),
        *,
        title: str = "",
        border: bool = True,
        compact: bool = False,
        max_visible: int | None = None,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if not headers:
            raise ValueError("Table needs at least one column")
        self._headers = list(headers)
        self._rows: list[list[str]] = []
        self._title = title
        self._border = border
        self._compact = compact
        self._max_visible = max_visible
        self._show_help = show_help
        self._controller: SelectionController | None = None
        for row in rows:
            self.add_row(*row)

    def add_row(self, *cells: str) -> "Table":
        if len(cells) != len(self._headers):
            raise ValueError(f"row has {len(cells)} cells, table has {len(self._headers)} columns")
        self._rows.append([str(c) for c in cells])
        self._controller = None
        return self

    @property
    def headers(self) -> list[str]:
        return list(self._headers)

    @property
    def rows(self) -> list[list[str]]:
        return [list(r) for r in self._rows]

    def column_widths(self) -> list[int]:
        widths = [visible_width(h) for h in self._headers]
        for row in self._rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], visible_width(cell))
        return widths

    @property
    def controller(self) -> SelectionController:
        if self._controller is None:
            self._controller = SelectionController(
                [" ".join(row) for row in self._rows],
                Capabilities(vi_keys=True),
                visible_count=self._max_visible or self._settings.max_visible,
                keybindings=self._keybindings,
            )
        return self._controller

    @property
    def done(self) -> bool:
        return self.controller.done

    @property
    def cancelled(self) -> bool:
        return self.controller.state is SelectionState.CANCELLED

    @property
    def value(self) -> int | None:
        committed = self.controller.committed
        return committed[0] if committed else None

    def handle_key(self, event: KeyEvent) -> None:
        self.controller.handle_key(event)

    # ── Drawing ───────────────────────────────────────────────────────────

    def _border_line(self, position: str, widths: list[int]) -> str:
        left, mid, right, fill = _BORDERS[position]
        return self._theme.style("border", left + mid.join(fill * (w + 2) for w in widths) + right)

    def _row_line(self, cells: Sequence[str], widths: list[int], style: str = "") -> str:
        padded = [pad_to_width(cell, w) for cell, w in zip(cells, widths)]
        if style:
            padded = [self._theme.style(style, p) for p in padded]
        body = " │ ".join(padded)
        if self._border:
            return "│ " + body + " │"
        return body

    def _rule(self, widths: list[int]) -> str:
        return self._theme.style("muted", "─" * (sum(w + 3 for w in widths) - 1))

    def render_table(self, highlight: int | None = None, start: int = 0, end: int | None = None) -> list[str]:
        """Draw the header and rows ``start:end``, highlighting row ``highlight``."""
        widths = self.column_widths()
        lines: list[str] = []
        if self._border:
            lines.append(self._border_line("top", widths))
        lines.append(self._row_line(self._headers, widths, "primary"))
        if self._border:
            lines.append(self._border_line("middle", widths))
        elif not self._compact:
            lines.append(self._rule(widths))
        stop = len(self._rows) if end is None else end
        for index in range(start, stop):
            style = "success" if index == highlight else ""
            lines.append(self._row_line(self._rows[index], widths, style))
        if self._border:
            lines.append(self._border_line("bottom", widths))
        return lines

    def render(self, width: int) -> list[str]:
        ctl = self.controller
        lines: list[str] = []
        if self._title:
            lines.append(self._theme.style("title", truncate_to_width(self._title, width)))
        if not self._rows:
            lines.extend(truncate_to_width(line, width) for line in self.render_table())
            lines.append(self._theme.style("muted", "  (no rows)"))
        else:
            start, end = ctl.window()
            table = self.render_table(highlight=ctl.current, start=start, end=end)
            lines.extend(truncate_to_width(line, width) for line in table)
            if start > 0 or end < len(self._rows):
                lines.append(self._theme.style("muted", f"  ({ctl.cursor + 1}/{len(self._rows)})"))
        if self._show_help:
            lines.append(self._help("↑/↓ navigate", "Enter select", "Esc cancel"))
        return lines

    def print(self) -> None:
        """Write the full table to the terminal without taking over the screen."""
        term = self._terminal
        for line in self.render_table():
            term.write(line)
            term.new_line()
