"""mdless: Markdown pager for the terminal."""

__version__ = "0.1.0"

# Interactive application
from mdless.app import App, print_document

# Keys
from mdless.keybindings import DEFAULT_PAGER_KEYBINDINGS, PagerAction, PagerKeybindingsManager
from mdless.keys import Key, is_complete_sequence, parse_key

# Layout
from mdless.layout import layout, layout_document

# Document model
from mdless.model import (
    AnsiColor,
    Block,
    BlockLineCount,
    Document,
    ScreenLine,
    Span,
    Style,
)

# Pager
from mdless.pager import Pager, Pos

# Parsing
from mdless.parser import parse, parse_inlines

# Rendering
from mdless.render import line_text, render_line, render_lines, render_with_highlights

# Search
from mdless.search import compute_matches, find_next, find_prev

# Settings
from mdless.settings import Settings, load_settings

# Terminal
from mdless.terminal import ProcessTerminal, Terminal

# Themes
from mdless.theme import DARK, LIGHT, NO_COLOR, Theme, ThemeMode, theme_by_name

# Width
from mdless.width import expand_tabs, string_width

__all__ = [
    "__version__",
    # App
    "App",
    "print_document",
    # Keys
    "DEFAULT_PAGER_KEYBINDINGS",
    "Key",
    "PagerAction",
    "PagerKeybindingsManager",
    "is_complete_sequence",
    "parse_key",
    # Layout
    "layout",
    "layout_document",
    # Model
    "AnsiColor",
    "Block",
    "BlockLineCount",
    "Document",
    "ScreenLine",
    "Span",
    "Style",
    # Pager
    "Pager",
    "Pos",
    # Parsing
    "parse",
    "parse_inlines",
    # Rendering
    "line_text",
    "render_line",
    "render_lines",
    "render_with_highlights",
    # Search
    "compute_matches",
    "find_next",
    "find_prev",
    # Settings
    "Settings",
    "load_settings",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Themes
    "DARK",
    "LIGHT",
    "NO_COLOR",
    "Theme",
    "ThemeMode",
    "theme_by_name",
    # Width
    "expand_tabs",
    "string_width",
]
