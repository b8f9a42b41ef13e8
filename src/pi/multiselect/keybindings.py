"""Prompt keybindings manager."""

from __future__ import annotations

from typing import Literal, get_args

from pi.multiselect.keys import KeySymbol

PromptAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "pageUp",
    "pageDown",
    "cursorFirst",
    "cursorLast",
    # Selection
    "toggle",
    "toggleAll",
    # Filter editing
    "deleteFilterChar",
    # Termination
    "confirm",
    "cancel",
]

PROMPT_ACTIONS: frozenset[str] = frozenset(get_args(PromptAction))

PromptKeybindingsConfig = dict[PromptAction, KeySymbol | list[KeySymbol]]

DEFAULT_KEYBINDINGS: dict[PromptAction, KeySymbol | list[KeySymbol]] = {
    # Cursor movement
    "cursorUp": ["up", "k"],
    "cursorDown": ["down", "j"],
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    "cursorFirst": "home",
    "cursorLast": "end",
    # Selection
    "toggle": "space",
    "toggleAll": ["a", "ctrl+a"],
    # Filter editing
    "deleteFilterChar": "backspace",
    # Termination
    "confirm": "enter",
    "cancel": ["escape", "ctrl+c"],
}


class PromptKeybindingsManager:
    """Maps key symbols to prompt actions."""

    def __init__(self, config: PromptKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[PromptAction, list[KeySymbol]] = {}
        self._key_to_action: dict[KeySymbol, PromptAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PromptKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        # Start with defaults
        for action, keys in DEFAULT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Override with user config
        for action, keys in config.items():
            if action not in PROMPT_ACTIONS:
                raise ValueError(f"Unknown prompt action: {action!r}")
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # First binding wins when a key is listed under two actions
        for action, keys in self._action_to_keys.items():
            for key in keys:
                self._key_to_action.setdefault(key, action)

    def matches(self, symbol: KeySymbol, action: PromptAction) -> bool:
        """Check if a key symbol is bound to a specific action."""
        return symbol in self._action_to_keys.get(action, [])

    def resolve(self, symbol: KeySymbol) -> PromptAction | None:
        """Return the action bound to *symbol*, if any."""
        return self._key_to_action.get(symbol)

    def get_keys(self, action: PromptAction) -> list[KeySymbol]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: PromptKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
