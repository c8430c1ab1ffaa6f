"""Tests for termx.selection — the shared list state machine"""
import random

import pytest

from termx.errors import ValidationError
from termx.keybindings import Keybindings
from termx.keys import Key, KeyEvent
from termx.selection import Capabilities, SelectionController, SelectionState, visible_window

SEARCH = Capabilities(supports_search=True)
MULTI = Capabilities(supports_search=True, supports_multiple=True)

UP = KeyEvent(Key.UP)
DOWN = KeyEvent(Key.DOWN)
ENTER = KeyEvent(Key.ENTER)
ESC = KeyEvent(Key.ESCAPE)
SPACE = KeyEvent(Key.SPACE)
TAB = KeyEvent(Key.TAB)
BACKSPACE = KeyEvent(Key.BACKSPACE)
CTRL_C = KeyEvent(Key.CTRL_C)


def press(ctl, *events):
    state = ctl.state
    for event in events:
        state = ctl.handle_key(event)
    return state


def type_text(ctl, text):
    return press(ctl, *(KeyEvent.char(c) for c in text))


class TestVisibleWindow:
    def test_cursor_kept_on_bottom_row(self):
        assert visible_window(17, 20, 5) == (13, 18)

    def test_first_page(self):
        assert visible_window(2, 20, 5) == (0, 5)

    def test_last_row(self):
        assert visible_window(19, 20, 5) == (15, 20)

    def test_short_list(self):
        assert visible_window(1, 3, 5) == (0, 3)

    def test_empty(self):
        assert visible_window(0, 0, 5) == (0, 0)

    def test_out_of_range_cursor_is_clamped(self):
        assert visible_window(50, 20, 5) == (15, 20)


class TestNavigation:
    def test_clamped_at_top_and_bottom(self):
        ctl = SelectionController(["a", "b", "c"])
        press(ctl, UP)
        assert ctl.cursor == 0
        press(ctl, DOWN, DOWN, DOWN, DOWN)
        assert ctl.cursor == 2

    def test_wrap(self):
        ctl = SelectionController(["a", "b", "c"], Capabilities(wrap=True))
        press(ctl, UP)
        assert ctl.cursor == 2
        press(ctl, DOWN)
        assert ctl.cursor == 0

    def test_vi_keys(self):
        ctl = SelectionController(["a", "b", "c"], Capabilities(vi_keys=True))
        press(ctl, KeyEvent.char("j"), KeyEvent.char("j"), KeyEvent.char("k"))
        assert ctl.cursor == 1

    def test_vi_keys_ignored_when_searching(self):
        ctl = SelectionController(["jam", "kiwi"], Capabilities(supports_search=True, vi_keys=True))
        press(ctl, KeyEvent.char("j"))
        assert ctl.query == "j"
        assert ctl.cursor == 0

    def test_home_end_and_paging(self):
        ctl = SelectionController([str(i) for i in range(20)], visible_count=5)
        press(ctl, KeyEvent(Key.END))
        assert ctl.cursor == 19
        press(ctl, KeyEvent(Key.PAGE_UP))
        assert ctl.cursor == 14
        press(ctl, KeyEvent(Key.HOME))
        assert ctl.cursor == 0
        press(ctl, KeyEvent(Key.PAGE_DOWN))
        assert ctl.cursor == 5

    def test_paging_does_not_wrap(self):
        ctl = SelectionController(["a", "b", "c"], Capabilities(wrap=True), visible_count=5)
        press(ctl, KeyEvent(Key.PAGE_DOWN))
        assert ctl.cursor == 2

    def test_skips_unselectable(self):
        labels = ["a", "-", "b", "off", "c"]
        ctl = SelectionController(
            labels, Capabilities(wrap=True), selectable=lambda i: labels[i] not in ("-", "off"),
        )
        press(ctl, DOWN)
        assert ctl.current == 2
        press(ctl, DOWN)
        assert ctl.current == 4
        press(ctl, DOWN)
        assert ctl.current == 0
        press(ctl, UP)
        assert ctl.current == 4

    def test_initial_cursor_skips_unselectable(self):
        ctl = SelectionController(["-", "a"], selectable=lambda i: i != 0)
        assert ctl.current == 1

    def test_initial_index(self):
        ctl = SelectionController(["a", "b", "c"], initial_index=2)
        assert ctl.cursor == 2

    def test_window_follows_cursor(self):
        ctl = SelectionController([str(i) for i in range(20)], visible_count=5)
        press(ctl, *([DOWN] * 17))
        assert ctl.window() == (13, 18)

    def test_empty_list_moves_are_noops(self):
        ctl = SelectionController([])
        press(ctl, DOWN, UP, KeyEvent(Key.END))
        assert ctl.cursor == 0
        assert ctl.current is None


class TestSearch:
    def test_typing_enters_searching(self):
        ctl = SelectionController(["Go", "Python", "JavaScript"], SEARCH)
        state = type_text(ctl, "Go")
        assert state is SelectionState.SEARCHING
        assert ctl.filtered == (0,)

    def test_filter_resets_cursor(self):
        ctl = SelectionController(["apple", "apricot", "banana"], SEARCH)
        press(ctl, DOWN, DOWN)
        type_text(ctl, "a")
        assert ctl.cursor == 0

    def test_backspace_to_empty_returns_to_browsing(self):
        ctl = SelectionController(["a", "b"], SEARCH)
        type_text(ctl, "a")
        assert press(ctl, BACKSPACE) is SelectionState.BROWSING
        assert ctl.filtered == (0, 1)

    def test_escape_clears_query_then_cancels(self):
        ctl = SelectionController(["a", "b"], SEARCH)
        type_text(ctl, "b")
        assert press(ctl, ESC) is SelectionState.BROWSING
        assert ctl.query == ""
        assert press(ctl, ESC) is SelectionState.CANCELLED

    def test_escape_cancels_immediately_without_query(self):
        ctl = SelectionController(["a"], SEARCH)
        assert press(ctl, ESC) is SelectionState.CANCELLED

    def test_space_appends_to_query_in_single_select(self):
        ctl = SelectionController(["new york", "newark"], SEARCH)
        type_text(ctl, "new")
        press(ctl, SPACE)
        assert ctl.query == "new "
        assert ctl.filtered == (0,)

    def test_runes_ignored_without_search(self):
        ctl = SelectionController(["a", "b"])
        press(ctl, KeyEvent.char("b"))
        assert ctl.query == ""
        assert ctl.state is SelectionState.BROWSING

    def test_no_matches_then_enter_is_noop(self):
        ctl = SelectionController(["a", "b"], SEARCH)
        type_text(ctl, "zz")
        assert press(ctl, ENTER) is SelectionState.SEARCHING
        assert ctl.committed == ()

    def test_options_reflect_filtered_view(self):
        ctl = SelectionController(["red", "green", "reed"], SEARCH)
        type_text(ctl, "re")
        assert [(o.label, o.index) for o in ctl.options] == [("red", 0), ("reed", 2), ("green", 1)]


class TestSingleSelect:
    def test_enter_confirms_current(self):
        ctl = SelectionController(["a", "b", "c"], SEARCH)
        press(ctl, DOWN)
        assert press(ctl, ENTER) is SelectionState.CONFIRMED
        assert ctl.committed == (1,)

    def test_committed_index_is_original_after_filtering(self):
        ctl = SelectionController(["Go", "Python", "JavaScript"], SEARCH)
        type_text(ctl, "script")
        press(ctl, ENTER)
        assert ctl.committed == (2,)

    def test_ctrl_c_cancels_even_while_searching(self):
        ctl = SelectionController(["a"], SEARCH)
        type_text(ctl, "a")
        assert press(ctl, CTRL_C) is SelectionState.CANCELLED
        assert ctl.committed == ()

    def test_events_after_terminal_state_are_ignored(self):
        ctl = SelectionController(["a", "b"], SEARCH)
        press(ctl, ENTER)
        press(ctl, DOWN, ESC)
        assert ctl.state is SelectionState.CONFIRMED
        assert ctl.committed == (0,)

    def test_validator_rejects(self):
        def no_b(values):
            if values == ["b"]:
                raise ValidationError("b is not allowed")

        ctl = SelectionController(["a", "b"], SEARCH, validator=no_b)
        press(ctl, DOWN)
        assert press(ctl, ENTER) is SelectionState.BROWSING
        assert ctl.error == "b is not allowed"
        press(ctl, UP)
        assert press(ctl, ENTER) is SelectionState.CONFIRMED

    def test_reopen(self):
        ctl = SelectionController(["a", "b"])
        press(ctl, ENTER)
        ctl.reopen(error="try again")
        assert ctl.state is SelectionState.BROWSING
        assert ctl.error == "try again"
        assert ctl.committed == ()


class TestMultiSelect:
    def test_space_toggles(self):
        ctl = SelectionController(["a", "b"], MULTI)
        press(ctl, SPACE)
        assert ctl.selected == {0}
        press(ctl, SPACE)
        assert ctl.selected == frozenset()

    def test_max_rejects_third_selection(self):
        ctl = SelectionController(["a", "b", "c"], MULTI, min_select=1, max_select=2)
        press(ctl, SPACE, DOWN, SPACE, DOWN, SPACE)
        assert ctl.selected == {0, 1}
        assert ctl.error is not None

    def test_min_blocks_enter_with_nothing_selected(self):
        ctl = SelectionController(["a", "b", "c"], MULTI, min_select=1, max_select=2)
        assert press(ctl, ENTER) is SelectionState.BROWSING
        assert ctl.error == "Please select at least 1 option(s)"

    def test_error_cleared_by_next_toggle(self):
        ctl = SelectionController(["a", "b"], MULTI, min_select=1)
        press(ctl, ENTER)
        assert ctl.error
        press(ctl, SPACE)
        assert ctl.error is None

    def test_error_kept_on_navigation(self):
        ctl = SelectionController(["a", "b"], MULTI, min_select=1)
        press(ctl, ENTER, DOWN)
        assert ctl.error

    def test_confirm_commits_in_original_order(self):
        ctl = SelectionController(["a", "b", "c"], MULTI)
        press(ctl, DOWN, DOWN, SPACE, UP, UP, SPACE)
        press(ctl, ENTER)
        assert ctl.committed == (0, 2)

    def test_selection_survives_filtering(self):
        ctl = SelectionController(["apple", "banana", "cherry"], MULTI)
        type_text(ctl, "ban")
        press(ctl, SPACE)
        press(ctl, ESC)
        assert ctl.query == ""
        assert ctl.selected == {1}

    def test_tab_selects_all_visible_then_none(self):
        ctl = SelectionController(["a1", "b", "a2"], MULTI)
        type_text(ctl, "a")
        press(ctl, TAB)
        assert ctl.selected == {0, 2}
        press(ctl, TAB)
        assert ctl.selected == frozenset()

    def test_tab_respects_max(self):
        ctl = SelectionController(["a", "b", "c"], MULTI, max_select=2)
        press(ctl, TAB)
        assert ctl.selected == {0, 1}

    def test_custom_validator(self):
        def needs_b(values):
            if "b" not in values:
                raise ValidationError("b is required")

        ctl = SelectionController(["a", "b"], MULTI, validator=needs_b)
        press(ctl, SPACE)
        assert press(ctl, ENTER) is SelectionState.BROWSING
        assert ctl.error == "b is required"
        press(ctl, DOWN, SPACE)
        assert press(ctl, ENTER) is SelectionState.CONFIRMED
        assert ctl.committed == (0, 1)

    def test_initial_selected(self):
        ctl = SelectionController(["a", "b"], MULTI, initial_selected=[1])
        press(ctl, ENTER)
        assert ctl.committed == (1,)

    def test_repeated_labels_are_distinct(self):
        ctl = SelectionController(["x", "x"], MULTI)
        press(ctl, SPACE, DOWN, SPACE)
        assert ctl.selected == {0, 1}


class TestConfiguration:
    def test_max_below_min(self):
        with pytest.raises(ValueError):
            SelectionController(["a", "b"], MULTI, min_select=2, max_select=1)

    def test_zero_visible(self):
        with pytest.raises(ValueError):
            SelectionController(["a"], visible_count=0)

    def test_too_many_preselected(self):
        with pytest.raises(ValueError):
            SelectionController(["a", "b"], MULTI, max_select=1, initial_selected=[0, 1])

    def test_custom_keybindings(self):
        kb = Keybindings({"confirm": ["enter", "tab"]})
        ctl = SelectionController(["a", "b"], keybindings=kb)
        assert press(ctl, TAB) is SelectionState.CONFIRMED


class TestCursorInvariant:
    EVENTS = [
        UP, DOWN, ENTER, SPACE, TAB, BACKSPACE,
        KeyEvent(Key.HOME), KeyEvent(Key.END), KeyEvent(Key.PAGE_UP), KeyEvent(Key.PAGE_DOWN),
        KeyEvent.char("a"), KeyEvent.char("e"), KeyEvent.char("x"), KeyEvent(Key.UNKNOWN),
    ]

    @pytest.mark.parametrize("caps", [
        Capabilities(),
        Capabilities(supports_search=True),
        Capabilities(supports_search=True, supports_multiple=True),
        Capabilities(wrap=True, vi_keys=True),
    ])
    def test_cursor_stays_in_range(self, caps):
        rng = random.Random(1234)
        labels = ["apple", "grape", "pear", "banana", "melon", "kiwi", "lemon", "date"]
        for _ in range(50):
            ctl = SelectionController(labels, caps, visible_count=3, max_select=4 if caps.supports_multiple else None)
            for _ in range(40):
                ctl.handle_key(rng.choice(self.EVENTS))
                if ctl.filtered:
                    assert 0 <= ctl.cursor < len(ctl.filtered)
                else:
                    assert ctl.cursor == 0
                assert all(0 <= i < len(labels) for i in ctl.selected)
                if ctl.done:
                    break
