"""Tests for pi.multiselect.dispatcher -- the key-driven state machine."""

from __future__ import annotations

import pytest

from pi.multiselect.dispatcher import TRANSITIONS, Dispatcher, PromptState
from pi.multiselect.items import build_items
from pi.multiselect.keybindings import PROMPT_ACTIONS, PromptKeybindingsManager
from pi.multiselect.state import SelectionState

LABELS = ["apple", "banana", "cabbage", "date", "kebab", "lime"]


def _dispatcher(
    labels: list[str] | None = None,
    *,
    filter_enabled: bool = False,
    start_filtering: bool = False,
    page_size: int = 3,
    keybindings: PromptKeybindingsManager | None = None,
    disabled: dict[int, str | None] | None = None,
) -> Dispatcher:
    items = build_items(labels or LABELS, disabled=disabled)
    return Dispatcher(
        SelectionState(items),
        keybindings=keybindings,
        filter_enabled=filter_enabled,
        start_filtering=start_filtering,
        page_size=page_size,
    )


def _feed(d: Dispatcher, *symbols: str) -> None:
    for symbol in symbols:
        d.dispatch(symbol)


class TestTables:
    """The transition tables cover every action in the live states."""

    @pytest.mark.parametrize("state", [PromptState.ACTIVE, PromptState.FILTERING])
    def test_every_action_has_a_row(self, state: PromptState) -> None:
        assert set(TRANSITIONS[state]) == PROMPT_ACTIONS

    @pytest.mark.parametrize("state", [PromptState.DONE, PromptState.ABORTED])
    def test_terminal_states_have_no_rows(self, state: PromptState) -> None:
        assert TRANSITIONS[state] == {}
        assert state.is_terminal

    def test_filtering_rows_never_fall_back_to_active(self) -> None:
        for action, (_, next_state) in TRANSITIONS[PromptState.FILTERING].items():
            assert next_state is not PromptState.ACTIVE, action


class TestActive:
    """Navigation, toggling and termination from the Active state."""

    def test_starts_active(self) -> None:
        assert _dispatcher().state is PromptState.ACTIVE

    def test_down_down_space(self) -> None:
        d = _dispatcher()
        _feed(d, "down", "down", "space")
        assert d.state is PromptState.ACTIVE
        assert d.selection.checked == {2}

    def test_vim_keys_navigate_without_filter(self) -> None:
        d = _dispatcher()
        _feed(d, "j", "j", "k")
        assert d.selection.cursor == 1

    def test_page_down_and_up(self) -> None:
        d = _dispatcher(page_size=3)
        d.dispatch("pageDown")
        assert d.selection.cursor == 3
        d.dispatch("pageDown")
        assert d.selection.cursor == 5
        d.dispatch("pageUp")
        assert d.selection.cursor == 2

    def test_home_and_end(self) -> None:
        d = _dispatcher()
        d.dispatch("end")
        assert d.selection.cursor == len(LABELS) - 1
        d.dispatch("home")
        assert d.selection.cursor == 0

    def test_toggle_all_with_a(self) -> None:
        d = _dispatcher()
        d.dispatch("a")
        assert d.selection.checked == set(range(len(LABELS)))

    def test_enter_confirms(self) -> None:
        d = _dispatcher()
        outcome = d.dispatch("enter")
        assert outcome.state is PromptState.DONE
        assert outcome.changed is True
        assert d.done

    @pytest.mark.parametrize("key", ["escape", "ctrl+c"])
    def test_cancel_keys_abort(self, key: str) -> None:
        d = _dispatcher()
        d.dispatch(key)
        assert d.state is PromptState.ABORTED
        assert d.selection.aborted

    def test_unbound_key_is_ignored(self) -> None:
        d = _dispatcher()
        outcome = d.dispatch("f5")
        assert outcome.state is PromptState.ACTIVE
        assert outcome.changed is False
        assert d.selection.cursor == 0

    def test_printable_without_filter_is_ignored(self) -> None:
        d = _dispatcher()
        outcome = d.dispatch("x")
        assert outcome.changed is False
        assert d.selection.filter == ""

    def test_space_on_disabled_item_reports_no_change(self) -> None:
        d = _dispatcher(disabled={0: "locked"})
        outcome = d.dispatch("space")
        assert outcome.changed is False
        assert d.selection.checked == set()

    def test_keys_after_done_are_ignored(self) -> None:
        d = _dispatcher()
        _feed(d, "enter", "space", "escape")
        assert d.state is PromptState.DONE
        assert d.selection.checked == set()
        assert not d.selection.aborted


class TestFiltering:
    """Printable keys feed the filter when filtering is enabled."""

    def test_printable_enters_filtering(self) -> None:
        d = _dispatcher(filter_enabled=True)
        outcome = d.dispatch("b")
        assert outcome.state is PromptState.FILTERING
        assert outcome.changed is True
        assert d.selection.filter == "b"

    def test_filter_narrows_visible(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", "b")
        assert d.selection.visible == [2, 4]

    def test_letters_bound_to_actions_go_to_filter(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "k", "a")
        assert d.selection.filter == "ka"
        assert d.selection.checked == set()

    def test_ctrl_a_toggles_all_visible(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", "b", "ctrl+a")
        assert d.state is PromptState.FILTERING
        assert d.selection.checked == {2, 4}

    def test_backspace_to_empty_returns_to_active(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", "b")
        d.dispatch("backspace")
        assert d.state is PromptState.FILTERING
        assert d.selection.filter == "a"
        d.dispatch("backspace")
        assert d.state is PromptState.ACTIVE
        assert d.selection.visible == list(range(len(LABELS)))

    def test_backspace_with_empty_filter_is_noop(self) -> None:
        d = _dispatcher(filter_enabled=True)
        outcome = d.dispatch("backspace")
        assert outcome.state is PromptState.ACTIVE
        assert outcome.changed is False

    def test_navigation_while_filtering(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", "b", "down", "space")
        assert d.state is PromptState.FILTERING
        assert d.selection.checked == {4}

    @pytest.mark.parametrize("key", ["up", "pageDown", "home", "end"])
    def test_jumps_while_filtering_keep_filtering(self, key: str) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", key)
        assert d.state is PromptState.FILTERING
        assert d.selection.filter == "a"

    def test_escape_while_filtering_aborts(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "a", "escape")
        assert d.state is PromptState.ABORTED

    def test_enter_while_filtering_confirms(self) -> None:
        d = _dispatcher(filter_enabled=True)
        _feed(d, "l", "i", "space", "enter")
        assert d.state is PromptState.DONE
        assert d.selection.finalize() == [5]

    def test_start_filtering(self) -> None:
        d = _dispatcher(filter_enabled=True, start_filtering=True)
        assert d.state is PromptState.FILTERING

    def test_start_filtering_needs_filter_enabled(self) -> None:
        d = _dispatcher(filter_enabled=False, start_filtering=True)
        assert d.state is PromptState.ACTIVE

    def test_space_is_not_filter_text(self) -> None:
        d = _dispatcher(filter_enabled=True)
        d.dispatch("space")
        assert d.selection.filter == ""
        assert d.selection.checked == {0}


class TestCustomKeybindings:
    """User keybindings replace the defaults for the named action."""

    def test_rebound_confirm(self) -> None:
        manager = PromptKeybindingsManager({"confirm": "tab"})
        d = _dispatcher(keybindings=manager)
        assert d.dispatch("enter").state is PromptState.ACTIVE
        assert d.dispatch("tab").state is PromptState.DONE
