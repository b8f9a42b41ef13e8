"""Row styles and the themes that turn them into ANSI-decorated text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol

Style = Literal[
    "prompt",
    "header",
    "item",
    "checked",
    "warning",
    "disabled",
    "cursor",
    "cursor_disabled",
    "hint",
    "blank",
]

STYLES: tuple[Style, ...] = (
    "prompt",
    "header",
    "item",
    "checked",
    "warning",
    "disabled",
    "cursor",
    "cursor_disabled",
    "hint",
    "blank",
)


class Theme(Protocol):
    prompt: Callable[[str], str]
    header: Callable[[str], str]
    item: Callable[[str], str]
    checked: Callable[[str], str]
    warning: Callable[[str], str]
    disabled: Callable[[str], str]
    cursor: Callable[[str], str]
    cursor_disabled: Callable[[str], str]
    hint: Callable[[str], str]
    blank: Callable[[str], str]


def apply_style(theme: Theme, text: str, style: Style) -> str:
    """Decorate *text* with the theme function registered for *style*."""
    return getattr(theme, style)(text)


# ── ANSI helpers ─────────────────────────────────────────────────────

_BOLD = "\033[1m"
_DIM = "\033[2m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_CYAN = "\033[36m"
_RESET = "\033[0m"


def _wrap(*codes: str) -> Callable[[str], str]:
    prefix = "".join(codes)

    def style(text: str) -> str:
        return f"{prefix}{text}{_RESET}" if text else text

    return style


def _identity(text: str) -> str:
    return text


@dataclass(frozen=True)
class AnsiTheme:
    """Default colour theme."""

    prompt: Callable[[str], str] = _wrap(_BOLD)
    header: Callable[[str], str] = _wrap(_BOLD)
    item: Callable[[str], str] = _identity
    checked: Callable[[str], str] = _wrap(_GREEN)
    warning: Callable[[str], str] = _wrap(_YELLOW)
    disabled: Callable[[str], str] = _wrap(_DIM)
    cursor: Callable[[str], str] = _wrap(_BOLD, _CYAN)
    cursor_disabled: Callable[[str], str] = _wrap(_DIM, _CYAN)
    hint: Callable[[str], str] = _wrap(_DIM)
    blank: Callable[[str], str] = _identity


@dataclass(frozen=True)
class PlainTheme:
    """Theme that returns text unmodified, used when colour is off."""

    prompt: Callable[[str], str] = _identity
    header: Callable[[str], str] = _identity
    item: Callable[[str], str] = _identity
    checked: Callable[[str], str] = _identity
    warning: Callable[[str], str] = _identity
    disabled: Callable[[str], str] = _identity
    cursor: Callable[[str], str] = _identity
    cursor_disabled: Callable[[str], str] = _identity
    hint: Callable[[str], str] = _identity
    blank: Callable[[str], str] = _identity
