"""Input dispatcher: a table-driven state machine over key symbols.

Each prompt state owns a table mapping a :data:`PromptAction` to an effect
on the :class:`SelectionState` and the next state.  Printable characters
bypass the tables when filtering is enabled and are appended to the filter.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Union

from pi.multiselect.keybindings import PromptAction, PromptKeybindingsManager
from pi.multiselect.keys import KeySymbol, is_printable
from pi.multiselect.state import SelectionState

logger = logging.getLogger(__name__)


class PromptState(enum.Enum):
    ACTIVE = "active"
    FILTERING = "filtering"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (PromptState.DONE, PromptState.ABORTED)


@dataclass(frozen=True)
class Outcome:
    """Result of dispatching one key symbol.

    ``changed`` is ``True`` when the state machine moved or the selection
    state was mutated, i.e. when the screen needs to be reconciled.
    """

    state: PromptState
    changed: bool


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

Effect = Callable[["Dispatcher"], bool]
NextState = Union[PromptState, Callable[["Dispatcher"], PromptState]]


def _no_effect(d: Dispatcher) -> bool:
    return False


def _cursor_up(d: Dispatcher) -> bool:
    return d.selection.move(-1)


def _cursor_down(d: Dispatcher) -> bool:
    return d.selection.move(1)


def _page_up(d: Dispatcher) -> bool:
    return d.selection.move_to(d.selection.cursor - d.page_size)


def _page_down(d: Dispatcher) -> bool:
    return d.selection.move_to(d.selection.cursor + d.page_size)


def _cursor_first(d: Dispatcher) -> bool:
    return d.selection.move_to(0)


def _cursor_last(d: Dispatcher) -> bool:
    return d.selection.move_to(len(d.selection.rows) - 1)


def _toggle(d: Dispatcher) -> bool:
    return d.selection.toggle_current()


def _toggle_all(d: Dispatcher) -> bool:
    return d.selection.toggle_all()


def _abort(d: Dispatcher) -> bool:
    d.selection.abort()
    return True


def _delete_filter_char(d: Dispatcher) -> bool:
    text = d.selection.filter
    if not text:
        return False
    d.selection.set_filter(text[:-1])
    return True


def _after_delete(d: Dispatcher) -> PromptState:
    return PromptState.FILTERING if d.selection.filter else PromptState.ACTIVE


_ACTIVE_TABLE: dict[PromptAction, tuple[Effect, NextState]] = {
    "cursorUp": (_cursor_up, PromptState.ACTIVE),
    "cursorDown": (_cursor_down, PromptState.ACTIVE),
    "pageUp": (_page_up, PromptState.ACTIVE),
    "pageDown": (_page_down, PromptState.ACTIVE),
    "cursorFirst": (_cursor_first, PromptState.ACTIVE),
    "cursorLast": (_cursor_last, PromptState.ACTIVE),
    "toggle": (_toggle, PromptState.ACTIVE),
    "toggleAll": (_toggle_all, PromptState.ACTIVE),
    "deleteFilterChar": (_delete_filter_char, _after_delete),
    "confirm": (_no_effect, PromptState.DONE),
    "cancel": (_abort, PromptState.ABORTED),
}

# Filtering shares the Active rows, but navigating or toggling while a filter
# is being typed keeps the machine in Filtering.
_FILTERING_TABLE: dict[PromptAction, tuple[Effect, NextState]] = {
    action: (effect, PromptState.FILTERING if next_state is PromptState.ACTIVE else next_state)
    for action, (effect, next_state) in _ACTIVE_TABLE.items()
}

TRANSITIONS: dict[PromptState, dict[PromptAction, tuple[Effect, NextState]]] = {
    PromptState.ACTIVE: _ACTIVE_TABLE,
    PromptState.FILTERING: _FILTERING_TABLE,
    PromptState.DONE: {},
    PromptState.ABORTED: {},
}


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class Dispatcher:
    """Feeds key symbols through the transition tables."""

    def __init__(
        self,
        selection: SelectionState,
        *,
        keybindings: PromptKeybindingsManager | None = None,
        filter_enabled: bool = False,
        start_filtering: bool = False,
        page_size: int = 1,
    ) -> None:
        self.selection = selection
        self.keybindings = keybindings or PromptKeybindingsManager()
        self.filter_enabled = filter_enabled
        self.page_size = page_size
        self.state = (
            PromptState.FILTERING
            if filter_enabled and start_filtering
            else PromptState.ACTIVE
        )

    @property
    def done(self) -> bool:
        return self.state.is_terminal

    def dispatch(self, symbol: KeySymbol) -> Outcome:
        """Apply one key symbol and return the resulting :class:`Outcome`."""
        previous = self.state
        if previous.is_terminal:
            return Outcome(previous, False)

        if self.filter_enabled and is_printable(symbol):
            self.selection.set_filter(self.selection.filter + symbol)
            self.state = PromptState.FILTERING
            logger.debug("filter -> %r (%d visible)", self.selection.filter,
                         len(self.selection.visible))
            return Outcome(self.state, True)

        action = self.keybindings.resolve(symbol)
        if action is None:
            return Outcome(previous, False)

        row = TRANSITIONS[previous].get(action)
        if row is None:
            return Outcome(previous, False)

        effect, next_state = row
        mutated = effect(self)
        self.state = next_state(self) if callable(next_state) else next_state

        if self.state is not previous:
            logger.debug("%s --%s--> %s", previous.value, action, self.state.value)
        return Outcome(self.state, mutated or self.state is not previous)
