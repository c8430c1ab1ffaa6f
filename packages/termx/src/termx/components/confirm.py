"""Confirm component: yes/no question."""
from __future__ import annotations

from ..keys import KeyEvent
from ..utils import truncate_to_width
from .base import Widget


class Confirm(Widget):
    """
    Yes/no prompt. Left/right/Tab switch the highlighted answer and Enter
    accepts it; ``y``/``n`` answer immediately.
    """

    def __init__(
        self,
        question: str,
        *,
        default: bool = False,
        yes_label: str = "Yes",
        no_label: str = "No",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._question = question
        self._yes_label = yes_label
        self._no_label = no_label
        self._choice = default
        self._finished = False
        self._cancelled = False

    @property
    def choice(self) -> bool:
        """Currently highlighted answer."""
        return self._choice

    @property
    def done(self) -> bool:
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def value(self) -> bool:
        return self._choice

    def handle_key(self, event: KeyEvent) -> None:
        if self._finished:
            return
        kb = self._keybindings
        if kb.matches(event, "abort") or kb.matches(event, "cancel"):
            self._cancelled = self._finished = True
        elif kb.matches(event, "confirm"):
            self._finished = True
        elif kb.matches(event, "toggleChoice"):
            self._choice = not self._choice
        elif kb.matches(event, "answerYes"):
            self._choice = True
            self._finished = True
        elif kb.matches(event, "answerNo"):
            self._choice = False
            self._finished = True

    def _button(self, label: str, active: bool) -> str:
        if active:
            return self._theme.style("selected", f" {label} ")
        return self._theme.style("muted", f" {label} ")

    def render(self, width: int) -> list[str]:
        hint = "(Y/n)" if self._choice else "(y/N)"
        question = f"{self._question} {hint}"
        buttons = (
            "  " + self._button(self._yes_label, self._choice)
            + "  " + self._button(self._no_label, not self._choice)
        )
        return [
            self._theme.style("title", truncate_to_width(question, width)),
            buttons,
            self._help("←/→ switch", "y/n answer", "Enter confirm", "Esc cancel"),
        ]
