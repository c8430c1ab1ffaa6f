"""
termx — interactive terminal widgets.

A small runtime (raw-mode terminal session, key decoding, list filtering and
selection, background animation) and the widgets built on it: select,
multi-select, combo box, menu, table, text input, confirm, spinner and
progress bar.
"""
import logging

from .animation import SPINNER_STYLES, AnimationScheduler, frames_for
from .components import (
    ComboBox,
    Component,
    Confirm,
    Input,
    Menu,
    MenuItem,
    MultiSelect,
    Password,
    ProgressBar,
    Select,
    Spinner,
    Table,
    Widget,
    separator,
)
from .config import Settings
from .errors import (
    CancellationError,
    NotATerminalError,
    OutputBusyError,
    TerminalReadError,
    TermxError,
    ValidationError,
)
from .filtering import Dedupe, MatchTier, Option, filter_items, filter_options, match_tier
from .keybindings import DEFAULT_KEYBINDINGS, Keybindings, ListAction
from .keys import Key, KeyEvent, decode, read_key
from .output import OutputToken
from .selection import Capabilities, SelectionController, SelectionState, visible_window
from .terminal import Terminal, TerminalSession
from .theme import DEFAULT_THEME, PLAIN_THEME, Theme
from .utils import truncate_to_width, visible_width

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Runtime
    "Terminal",
    "TerminalSession",
    "OutputToken",
    "Key",
    "KeyEvent",
    "decode",
    "read_key",
    "Keybindings",
    "ListAction",
    "DEFAULT_KEYBINDINGS",
    "Option",
    "MatchTier",
    "Dedupe",
    "match_tier",
    "filter_options",
    "filter_items",
    "Capabilities",
    "SelectionController",
    "SelectionState",
    "visible_window",
    "AnimationScheduler",
    "SPINNER_STYLES",
    "frames_for",
    # Configuration
    "Settings",
    "Theme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    # Errors
    "TermxError",
    "NotATerminalError",
    "TerminalReadError",
    "ValidationError",
    "CancellationError",
    "OutputBusyError",
    # Widgets
    "Component",
    "Widget",
    "Select",
    "MultiSelect",
    "ComboBox",
    "Menu",
    "MenuItem",
    "separator",
    "Table",
    "Input",
    "Password",
    "Confirm",
    "Spinner",
    "ProgressBar",
    # Utils
    "visible_width",
    "truncate_to_width",
]
