"""
Colour theme passed to widgets.

A Theme is an immutable set of SGR prefixes, one per role. Widgets receive
the theme they should use as a constructor argument; use ``PLAIN_THEME``
(or ``theme_for(settings)`` with NO_COLOR set) to disable styling.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace

from .config import Settings

RESET = "\x1b[0m"


@dataclass(frozen=True)
class Theme:
    primary: str = "\x1b[36m"          # cyan
    secondary: str = "\x1b[35m"        # magenta
    success: str = "\x1b[32m"          # green
    error: str = "\x1b[31m"            # red
    warning: str = "\x1b[33m"          # yellow
    info: str = "\x1b[34m"             # blue
    text: str = "\x1b[37m"             # white
    muted: str = "\x1b[90m"            # gray
    border: str = "\x1b[90m"
    cursor: str = "\x1b[36m"
    selected: str = "\x1b[30m\x1b[46m"  # black on cyan
    placeholder: str = "\x1b[90m"
    title: str = "\x1b[1m\x1b[36m"

    def style(self, role: str, text: str) -> str:
        """Wrap ``text`` in the SGR prefix for ``role``."""
        prefix = getattr(self, role)
        if not prefix or not text:
            return text
        return f"{prefix}{text}{RESET}"

    def with_colors(self, **roles: str) -> "Theme":
        return replace(self, **roles)


DEFAULT_THEME = Theme()

PLAIN_THEME = Theme(**{f.name: "" for f in fields(Theme)})


def theme_for(settings: Settings, theme: Theme | None = None) -> Theme:
    """Pick the theme a widget should draw with under ``settings``."""
    if settings.no_color:
        return PLAIN_THEME
    return theme or DEFAULT_THEME
