"""Menu component: navigable menu with shortcuts, actions and submenus."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..errors import ValidationError
from ..keys import KeyEvent
from ..selection import Capabilities, SelectionController, SelectionState
from ..utils import truncate_to_width
from .base import Widget

BREADCRUMB_SEPARATOR = " › "


@dataclass
class MenuItem:
    id: str = ""
    label: str = ""
    description: str = ""
    icon: str = ""
    shortcut: str = ""
    # Runs when the item is chosen. Raising ValidationError keeps the menu
    # open and shows the message.
    action: Callable[[], None] | None = None
    submenu: list["MenuItem"] | None = None
    disabled: bool = False
    separator: bool = False

    @property
    def selectable(self) -> bool:
        return not (self.disabled or self.separator)


def separator() -> MenuItem:
    return MenuItem(separator=True)


@dataclass
class _Level:
    title: str
    items: list[MenuItem]
    controller: SelectionController = field(repr=False)


class Menu(Widget):
    """
    Vertical menu. Up/down (or k/j) wrap around and skip separators and
    disabled items; an item's shortcut key chooses it directly. Choosing an
    item with a submenu descends into it, and Escape goes back up one level
    (or cancels at the top). ``run()`` returns the chosen leaf MenuItem.
    """

    def __init__(
        self,
        title: str,
        items: Sequence[MenuItem],
        *,
        show_icons: bool = True,
        show_descriptions: bool = True,
        show_shortcuts: bool = True,
        show_help: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._show_icons = show_icons
        self._show_descriptions = show_descriptions
        self._show_shortcuts = show_shortcuts
        self._show_help = show_help
        self._stack: list[_Level] = [self._level(title, list(items))]
        self._chosen: MenuItem | None = None
        self._cancelled = False

    def _level(self, title: str, items: list[MenuItem]) -> _Level:
        if not any(item.selectable for item in items):
            raise ValueError(f"menu {title!r} has no selectable items")
        controller = SelectionController(
            [item.label for item in items],
            Capabilities(supports_submenus=True, wrap=True, vi_keys=True),
            visible_count=max(len(items), 1),
            selectable=lambda i: items[i].selectable,
            keybindings=self._keybindings,
        )
        return _Level(title, items, controller)

    @property
    def _current(self) -> _Level:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def breadcrumb(self) -> list[str]:
        return [level.title for level in self._stack]

    @property
    def highlighted(self) -> MenuItem | None:
        level = self._current
        index = level.controller.current
        return None if index is None else level.items[index]

    @property
    def done(self) -> bool:
        return self._chosen is not None or self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def value(self) -> MenuItem | None:
        return self._chosen

    def _activate(self, item: MenuItem) -> None:
        level = self._current
        if item.submenu is not None:
            level.controller.reopen()
            self._stack.append(self._level(item.label, list(item.submenu)))
            return
        if item.action is not None:
            try:
                item.action()
            except ValidationError as exc:
                level.controller.reopen(error=exc.message)
                return
        self._chosen = item

    def _shortcut_item(self, event: KeyEvent) -> int | None:
        if not event.is_rune:
            return None
        key = event.rune.casefold()
        for index, item in enumerate(self._current.items):
            if item.selectable and item.shortcut and item.shortcut.casefold() == key:
                return index
        return None

    def handle_key(self, event: KeyEvent) -> None:
        if self.done:
            return
        level = self._current
        ctl = level.controller

        if self._keybindings.matches(event, "abort"):
            self._cancelled = True
            return

        shortcut = self._shortcut_item(event)
        if shortcut is not None:
            self._activate(level.items[shortcut])
            return

        state = ctl.handle_key(event)
        if state is SelectionState.CONFIRMED:
            self._activate(level.items[ctl.committed[0]])
        elif state is SelectionState.CANCELLED:
            if len(self._stack) > 1:
                self._stack.pop()
            else:
                self._cancelled = True

    def render(self, width: int) -> list[str]:
        theme = self._theme
        level = self._current
        ctl = level.controller
        lines: list[str] = []

        if len(self._stack) > 1:
            trail = BREADCRUMB_SEPARATOR.join(self.breadcrumb[:-1])
            lines.append(theme.style("muted", truncate_to_width(trail, width)))
        lines.append(theme.style("title", truncate_to_width(level.title, width)))
        lines.append(theme.style("secondary", "═" * min(len(level.title), width)))

        for pos, index in enumerate(ctl.filtered):
            item = level.items[index]
            if item.separator:
                lines.append(theme.style("muted", "─" * max(0, min(width, 40) // 2)))
                continue
            is_cursor = pos == ctl.cursor and item.selectable
            cursor = theme.style("cursor", "❯ ") if is_cursor else "  "

            icon = ""
            if self._show_icons:
                icon = (item.icon or ("📁" if item.submenu is not None else "•")) + " "
            label = item.label
            if item.disabled:
                label = theme.style("muted", label)
            elif is_cursor:
                label = theme.style("primary", label)
            shortcut = ""
            if self._show_shortcuts and item.shortcut:
                shortcut = " " + theme.style("muted", f"[{item.shortcut}]")
            arrow = " " + theme.style("secondary", "▶") if item.submenu is not None else ""
            lines.append(truncate_to_width(cursor + icon + label + shortcut + arrow, width))

            if self._show_descriptions and item.description and not item.disabled:
                lines.append(theme.style("muted", "    " + truncate_to_width(item.description, width - 4)))

        lines.extend(self._error_line(ctl.error))
        if self._show_help:
            back = "Esc back" if len(self._stack) > 1 else "Esc exit"
            lines.append(self._help("↑/↓ navigate", "Enter select", back))
        return lines
