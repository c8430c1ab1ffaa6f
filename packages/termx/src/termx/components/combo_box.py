"""ComboBox component: free-text entry with a filtered suggestion dropdown."""
from __future__ import annotations

from typing import Callable, Sequence

from ..errors import ValidationError
from ..filtering import Dedupe, filter_options
from ..keys import Key, KeyEvent
from ..selection import Capabilities, SelectionController
from ..utils import truncate_to_width
from .base import Widget


class ComboBox(Widget):
    """
    Text field with suggestions. The dropdown is re-filtered on every edit;
    Tab copies the highlighted suggestion into the field, Enter accepts it
    (or the typed text when the dropdown is hidden or empty).

    With ``allow_custom=False`` only values from ``options`` are accepted.
    """

    def __init__(
        self,
        label: str,
        options: Sequence[str],
        *,
        default: str = "",
        placeholder: str = "",
        allow_custom: bool = True,
        case_sensitive: bool = False,
        validator: Callable[[str], None] | None = None,
        max_visible: int = 8,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._label = label
        self._options = list(options)
        self._placeholder = placeholder
        self._allow_custom = allow_custom
        self._case_sensitive = case_sensitive
        self._validator = validator
        self._show_help = show_help

        self._text = default
        self._show_dropdown = True
        self._error: str | None = None
        self._finished = False
        self._cancelled = False
        self._value: str | None = None
        self._dropdown = SelectionController(
            self._options,
            Capabilities(),
            visible_count=max_visible,
            dedupe=Dedupe.VALUE,
            keybindings=self._keybindings,
        )
        self._refilter()

    @property
    def text(self) -> str:
        return self._text

    @property
    def dropdown_visible(self) -> bool:
        return self._show_dropdown

    @property
    def suggestions(self) -> list[str]:
        return [self._options[i] for i in self._dropdown.filtered]

    @property
    def highlighted(self) -> str | None:
        index = self._dropdown.current
        return None if index is None else self._options[index]

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
    def value(self) -> str | None:
        return self._value

    def _refilter(self) -> None:
        self._dropdown.set_filtered(
            filter_options(self._options, self._text, self._case_sensitive, Dedupe.VALUE)
        )

    def _edit(self, text: str) -> None:
        self._text = text
        self._error = None
        self._refilter()
        self._show_dropdown = bool(self._dropdown.filtered)

    def _canonical(self, text: str) -> str | None:
        """Return the option equal to ``text`` under the case rules, if any."""
        if self._case_sensitive:
            return text if text in self._options else None
        folded = text.casefold()
        for option in self._options:
            if option.casefold() == folded:
                return option
        return None

    def _submit(self) -> None:
        if self._show_dropdown and self.highlighted is not None:
            self._text = self.highlighted
            self._show_dropdown = False
            self._refilter()

        candidate = self._text
        if not self._allow_custom and candidate:
            match = self._canonical(candidate)
            if match is None:
                self._error = "Value must be one of the available options"
                return
            candidate = match
        if self._validator is not None:
            try:
                self._validator(candidate)
            except ValidationError as exc:
                self._error = exc.message
                return
        self._value = candidate
        self._finished = True

    def handle_key(self, event: KeyEvent) -> None:
        if self._finished:
            return
        kb = self._keybindings

        if kb.matches(event, "abort"):
            self._cancelled = self._finished = True
        elif kb.matches(event, "cancel"):
            self._show_dropdown = False
            if not self._text:
                self._cancelled = self._finished = True
        elif kb.matches(event, "confirm"):
            self._submit()
        elif kb.matches(event, "cursorUp") or kb.matches(event, "cursorDown"):
            if not self._show_dropdown:
                self._show_dropdown = True
                self._refilter()
            else:
                self._dropdown.move(-1 if kb.matches(event, "cursorUp") else 1)
        elif kb.matches(event, "pageUp"):
            self._dropdown.move(-self._dropdown.visible_count)
        elif kb.matches(event, "pageDown"):
            self._dropdown.move(self._dropdown.visible_count)
        elif kb.matches(event, "complete"):
            if self.highlighted is not None:
                self._text = self.highlighted
                self._show_dropdown = False
                self._error = None
                self._refilter()
        elif kb.matches(event, "deleteCharBackward"):
            if self._text:
                self._edit(self._text[:-1])
        elif event.key is Key.SPACE:
            self._edit(self._text + " ")
        elif event.is_rune:
            self._edit(self._text + event.rune)

    def render(self, width: int) -> list[str]:
        theme = self._theme
        lines = [theme.style("title", truncate_to_width(self._label, width))]

        if self._text:
            field = self._text + "\x1b[7m \x1b[27m"
        elif self._placeholder:
            field = theme.style("placeholder", self._placeholder)
        else:
            field = "\x1b[7m \x1b[27m"
        lines.append(theme.style("primary", "> ") + truncate_to_width(field, width - 2))

        if self._show_dropdown:
            ctl = self._dropdown
            filtered = ctl.filtered
            start, end = ctl.window()
            for pos in range(start, end):
                text = truncate_to_width(self._options[filtered[pos]], width - 4)
                if pos == ctl.cursor:
                    lines.append(theme.style("selected", f"❯ {text}"))
                else:
                    lines.append(f"  {text}")
            if end < len(filtered):
                lines.append(theme.style("muted", f"  ... and {len(filtered) - end} more"))
        if self._text and not self._dropdown.filtered:
            if self._allow_custom:
                lines.append(theme.style("muted", "  No matches, press Enter to use this value"))
            else:
                lines.append(theme.style("warning", "  No matching options"))

        lines.extend(self._error_line(self._error))
        if self._show_help:
            lines.append(self._help("↑/↓ navigate", "Tab complete", "Enter accept", "Esc close"))
        return lines
