"""pi-multiselect: interactive checkbox prompt with incremental rendering."""

# Configuration
from pi.multiselect.config import PromptConfig, load_config

# Input dispatch
from pi.multiselect.dispatcher import TRANSITIONS, Dispatcher, Outcome, PromptState

# Errors
from pi.multiselect.errors import (
    Cancelled,
    InvalidConfiguration,
    IoFailure,
    MultiSelectError,
)

# Rendering
from pi.multiselect.frame import Frame, Line, build_frame, park_position

# Item model
from pi.multiselect.items import Group, Item, Row, build_items

# Keybindings
from pi.multiselect.keybindings import (
    DEFAULT_KEYBINDINGS,
    PromptAction,
    PromptKeybindingsManager,
)

# Keyboard input handling
from pi.multiselect.keys import Key, KeySymbol, is_printable, parse_key

# Prompt controller
from pi.multiselect.prompt import MultiSelect, multiselect
from pi.multiselect.render import (
    ClearLine,
    MoveCursor,
    Op,
    Renderer,
    WriteStyled,
    diff_frames,
)

# Selection state
from pi.multiselect.state import GroupState, SelectionState

# Input buffering
from pi.multiselect.stdin_buffer import StdinBuffer

# Terminal interface and implementations
from pi.multiselect.terminal import ProcessTerminal, Terminal, raw_mode

# Themes
from pi.multiselect.theme import AnsiTheme, PlainTheme, Style, Theme

# Utilities
from pi.multiselect.utils import truncate_to_width, visible_width

# Viewport
from pi.multiselect.viewport import Viewport

__all__ = [
    # Configuration
    "PromptConfig",
    "load_config",
    # Dispatch
    "TRANSITIONS",
    "Dispatcher",
    "Outcome",
    "PromptState",
    # Errors
    "Cancelled",
    "InvalidConfiguration",
    "IoFailure",
    "MultiSelectError",
    # Frames
    "Frame",
    "Line",
    "build_frame",
    "park_position",
    # Items
    "Group",
    "Item",
    "Row",
    "build_items",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "PromptAction",
    "PromptKeybindingsManager",
    # Keys
    "Key",
    "KeySymbol",
    "is_printable",
    "parse_key",
    # Prompt
    "MultiSelect",
    "multiselect",
    # Renderer
    "ClearLine",
    "MoveCursor",
    "Op",
    "Renderer",
    "WriteStyled",
    "diff_frames",
    # State
    "GroupState",
    "SelectionState",
    # Stdin buffer
    "StdinBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "raw_mode",
    # Themes
    "AnsiTheme",
    "PlainTheme",
    "Style",
    "Theme",
    # Utilities
    "truncate_to_width",
    "visible_width",
    # Viewport
    "Viewport",
]
