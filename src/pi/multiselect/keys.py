"""Key symbols and decoding of raw terminal input.

A key symbol is a plain string: a named key such as ``"up"``,
``"enter"`` or ``"ctrl+c"``, or a single printable character such as
``"a"``.  :func:`parse_key` turns one complete input sequence (as split by
:class:`~pi.multiselect.stdin_buffer.StdinBuffer`) into a symbol.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeySymbol = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    # Not a key: emitted by a terminal when its window size changed.
    resize = "resize"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[Z": "shift+tab",
}

# Modifier parameter of ``CSI 1;<mod><letter>`` -> prefix
_MODIFIER_PREFIXES: dict[str, str] = {
    "2": "shift+",
    "3": "alt+",
    "4": "shift+alt+",
    "5": "ctrl+",
    "6": "ctrl+shift+",
    "7": "ctrl+alt+",
    "8": "ctrl+shift+alt+",
}

_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeySymbol | None:  # noqa: C901
    """Parse one raw input sequence and return its key symbol, or ``None``.

    The returned string uses the same format as the keybinding tables:
    e.g. ``"a"``, ``"ctrl+a"``, ``"up"``, ``"pageDown"``.
    """
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # --- Modified arrows / home / end: CSI 1;<mod><letter> ---
    if (
        data.startswith("\x1b[1;")
        and len(data) == 6
        and data[4] in _MODIFIER_PREFIXES
        and data[5] in _CSI_LETTER_KEYS
    ):
        return _MODIFIER_PREFIXES[data[4]] + _CSI_LETTER_KEYS[data[5]]

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if ch == "\r":
            return "alt+enter"
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def is_printable(symbol: KeySymbol) -> bool:
    """Return ``True`` if *symbol* is a single printable character.

    Space is reported as the named key ``"space"`` and is therefore not
    printable in this sense.
    """
    return len(symbol) == 1 and symbol.isprintable() and symbol != " "
