"""MultiSelect component: filterable checklist with selection limits."""
from __future__ import annotations

from typing import Callable, Iterable, Sequence

from ..selection import Capabilities, SelectionController, SelectionState
from ..utils import truncate_to_width
from .base import Widget

CHECKED = "◉"
UNCHECKED = "○"


class MultiSelect(Widget):
    """
    Checklist widget. Space toggles the highlighted option, Tab toggles every
    visible option, typing filters. Enter commits once the selection satisfies
    ``min_select``/``max_select`` and the optional validator.
    """

    def __init__(
        self,
        label: str,
        options: Sequence[str],
        *,
        min_select: int = 0,
        max_select: int | None = None,
        defaults: Iterable[str] = (),
        validator: Callable[[list[str]], None] | None = None,
        placeholder: str = "",
        max_visible: int = 10,
        case_sensitive: bool = False,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if not options:
            raise ValueError("MultiSelect needs at least one option")
        self._label = label
        self._options = list(options)
        self._placeholder = placeholder
        self._show_help = show_help
        wanted = set(defaults)
        self._controller = SelectionController(
            self._options,
            Capabilities(supports_search=True, supports_multiple=True),
            case_sensitive=case_sensitive,
            visible_count=max_visible,
            min_select=min_select,
            max_select=max_select,
            validator=validator,
            initial_selected=[i for i, opt in enumerate(self._options) if opt in wanted],
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
    def selected_indices(self) -> list[int]:
        return list(self._controller.committed)

    @property
    def value(self) -> list[str]:
        return [self._options[i] for i in self._controller.committed]

    def handle_key(self, event) -> None:
        self._controller.handle_key(event)

    def _limits_hint(self) -> str:
        ctl = self._controller
        if ctl.max_select is not None and ctl.min_select:
            return f"select {ctl.min_select}-{ctl.max_select}"
        if ctl.max_select is not None:
            return f"select up to {ctl.max_select}"
        if ctl.min_select:
            return f"select at least {ctl.min_select}"
        return ""

    def render(self, width: int) -> list[str]:
        theme = self._theme
        ctl = self._controller
        title = self._label
        hint = self._limits_hint()
        if hint:
            title = f"{title} ({hint})"
        lines = [theme.style("title", truncate_to_width(title, width))]

        if ctl.query:
            lines.append("  " + theme.style("muted", "Filter: ") + ctl.query)

        count = len(ctl.selected)
        lines.append(theme.style("secondary", f"  Selected: {count}/{len(self._options)}"))
        if count == 0 and self._placeholder:
            lines.append(theme.style("placeholder", f"  {self._placeholder}"))

        filtered = ctl.filtered
        if not filtered:
            lines.append(theme.style("error", "  No matching options"))
        start, end = ctl.window()
        for pos in range(start, end):
            index = filtered[pos]
            checked = ctl.is_selected(index)
            box = theme.style("success", CHECKED) if checked else UNCHECKED
            text = truncate_to_width(self._options[index], width - 6)
            if pos == ctl.cursor:
                lines.append(theme.style("cursor", "❯ ") + box + " " + theme.style("primary", text))
            else:
                lines.append(f"  {box} {text}")

        remaining = len(filtered) - end
        if remaining > 0:
            lines.append(theme.style("muted", f"  ... and {remaining} more"))
        lines.extend(self._error_line(ctl.error))

        if self._show_help:
            lines.append(self._help(
                "↑/↓ navigate", "Space toggle", "Tab all/none", "Enter confirm", "Esc cancel",
            ))
        return lines
