"""Select component: filterable single-choice list."""
from __future__ import annotations

from typing import Callable, Sequence

from ..selection import Capabilities, SelectionController, SelectionState
from ..utils import truncate_to_width
from .base import Widget


class Select(Widget):
    """
    Single-choice list. Typing filters the options (exact, then prefix, then
    substring matches); Escape clears the filter, or cancels when there is
    none.
    """

    def __init__(
        self,
        label: str,
        options: Sequence[str],
        *,
        default: str | None = None,
        max_visible: int | None = None,
        case_sensitive: bool = False,
        validator: Callable[[str], None] | None = None,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if not options:
            raise ValueError("Select needs at least one option")
        self._label = label
        self._options = list(options)
        self._show_help = show_help
        initial = self._options.index(default) if default in self._options else None
        self._controller = SelectionController(
            self._options,
            Capabilities(supports_search=True),
            case_sensitive=case_sensitive,
            visible_count=max_visible or self._settings.max_visible,
            validator=(lambda values: validator(values[0])) if validator else None,
            initial_index=initial,
            keybindings=self._keybindings,
        )

    @property
    def controller(self) -> SelectionController:
        return self._controller

    @property
    def done(self) -> bool:
        return self._controller.done

    @property
    def cancelled(self) -> bool:
        return self._controller.state is SelectionState.CANCELLED

    @property
    def selected_index(self) -> int | None:
        committed = self._controller.committed
        return committed[0] if committed else None

    @property
    def value(self) -> str | None:
        index = self.selected_index
        return None if index is None else self._options[index]

    def handle_key(self, event) -> None:
        self._controller.handle_key(event)

    def render(self, width: int) -> list[str]:
        theme = self._theme
        ctl = self._controller
        lines = [theme.style("title", truncate_to_width(self._label, width))]

        if ctl.query:
            lines.append("  " + theme.style("muted", "Filter: ") + ctl.query)

        filtered = ctl.filtered
        if not filtered:
            lines.append(theme.style("muted", "  No matching options"))
        start, end = ctl.window()
        for pos in range(start, end):
            text = truncate_to_width(self._options[filtered[pos]], width - 4)
            if pos == ctl.cursor:
                lines.append(theme.style("selected", f"❯ {text}"))
            else:
                lines.append(f"  {text}")

        if start > 0 or end < len(filtered):
            lines.append(theme.style("muted", f"  ({ctl.cursor + 1}/{len(filtered)})"))
        lines.append(theme.style("muted", f"  {len(filtered)}/{len(self._options)} items"))
        lines.extend(self._error_line(ctl.error))

        if self._show_help:
            lines.append(self._help("↑/↓ navigate", "Enter select", "Esc cancel", "type to filter"))
        return lines
