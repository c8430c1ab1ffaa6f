"""
Widget keybindings.

Provides the ListAction type, DEFAULT_KEYBINDINGS, and the Keybindings class.
A Keybindings instance is passed to each widget; there is no process-wide
current keymap.
"""
from __future__ import annotations

from typing import Literal

from .keys import KeyEvent

KeyId = str

# ─────────────────────────────────────────────────────────────────────────────
# ListAction type
# ─────────────────────────────────────────────────────────────────────────────

ListAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorUpVi",
    "cursorDownVi",
    "cursorLeft",
    "cursorRight",
    "first",
    "last",
    "pageUp",
    "pageDown",
    # Selection
    "toggle",
    "toggleAll",
    "confirm",
    "cancel",
    "abort",
    # Text input
    "deleteCharBackward",
    "deleteCharForward",
    "complete",
    # Confirm prompt
    "toggleChoice",
    "answerYes",
    "answerNo",
]

KeybindingsConfig = dict[str, "KeyId | list[KeyId] | None"]

DEFAULT_KEYBINDINGS: dict[str, list[KeyId]] = {
    # Cursor movement
    "cursorUp":     ["up"],
    "cursorDown":   ["down"],
    "cursorUpVi":   ["k"],
    "cursorDownVi": ["j"],
    "cursorLeft":   ["left"],
    "cursorRight":  ["right"],
    "first":        ["home"],
    "last":         ["end"],
    "pageUp":       ["pageUp"],
    "pageDown":     ["pageDown"],
    # Selection
    "toggle":    ["space"],
    "toggleAll": ["tab"],
    "confirm":   ["enter"],
    "cancel":    ["escape"],
    "abort":     ["ctrl+c"],
    # Text input
    "deleteCharBackward": ["backspace"],
    "deleteCharForward":  ["delete"],
    "complete":           ["tab"],
    # Confirm prompt
    "toggleChoice": ["left", "right", "tab"],
    "answerYes":    ["y", "Y"],
    "answerNo":     ["n", "N"],
}


class Keybindings:
    """Maps actions to the key ids that trigger them."""

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[str, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        self._action_to_keys.clear()
        for action, keys in DEFAULT_KEYBINDINGS.items():
            self._action_to_keys[action] = list(keys)
        # Override with user config
        for action, keys in config.items():
            if keys is None:
                continue
            self._action_to_keys[action] = list(keys) if isinstance(keys, list) else [keys]

    def matches(self, event: KeyEvent, action: str) -> bool:
        """Check if a key event triggers an action."""
        keys = self._action_to_keys.get(action)
        if not keys or event.is_unknown:
            return False
        return event.id in keys

    def get_keys(self, action: str) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: KeybindingsConfig) -> None:
        self._build_maps(config)
