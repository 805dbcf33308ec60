"""Document model shared by the parser, layout engine, pager and renderer.

Blocks and inlines are produced once per parse and never mutated; every
collection is a tuple so the tree can be shared by any number of layout
passes. ``ScreenLine`` objects are produced fresh by each layout pass.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Emph:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Strong:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Code:
    """Inline code span; its content is never parsed further."""

    code: str


@dataclass(frozen=True)
class Link:
    """A link. ``url`` is carried for collaborators but is not rendered."""

    children: tuple[Inline, ...]
    url: str


@dataclass(frozen=True)
class SoftBreak:
    """Line break inside a paragraph; renders as a separating space."""


@dataclass(frozen=True)
class HardBreak:
    """Forced line break."""


Inline = Union[Text, Emph, Strong, Code, Link, SoftBreak, HardBreak]


# ---------------------------------------------------------------------------
# Block kinds
# ---------------------------------------------------------------------------


class ColAlign(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Heading:
    level: int


@dataclass(frozen=True)
class Paragraph:
    pass


@dataclass(frozen=True)
class ListItem:
    """Child blocks of one list item: usually a paragraph, maybe a nested list."""

    blocks: tuple[Block, ...]


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[ListItem, ...]


@dataclass(frozen=True)
class Blockquote:
    children: tuple[Block, ...]


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code. ``text`` is raw; tabs are expanded at layout time."""

    language: str | None
    text: str


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[str, ...], ...]
    aligns: tuple[ColAlign, ...]


@dataclass(frozen=True)
class Image:
    alt: str


BlockKind = Union[
    Heading,
    Paragraph,
    ListBlock,
    Blockquote,
    CodeBlock,
    ThematicBreak,
    Table,
    Image,
]


@dataclass(frozen=True)
class Block:
    """A structural unit of the document.

    ``id`` is unique within one parse and is how the pager and search refer
    to a block; positions in the block list are never used for that.
    """

    id: int
    kind: BlockKind
    inlines: tuple[Inline, ...] = ()


class BlockIds:
    """Monotonic block id source threaded through a single parse."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value


# ---------------------------------------------------------------------------
# Styling
# ---------------------------------------------------------------------------


class AnsiColor(enum.Enum):
    """Foreground colours; the value is the SGR parameter."""

    DEFAULT = 39
    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


@dataclass(frozen=True)
class Style:
    fg: AnsiColor | None = None
    bold: bool = False
    underline: bool = False

    def combine(self, child: Style) -> Style:
        """Return the style of *child* nested inside ``self``.

        An explicit child foreground wins; bold and underline accumulate.
        """
        return Style(
            fg=child.fg if child.fg is not None else self.fg,
            bold=self.bold or child.bold,
            underline=self.underline or child.underline,
        )


PLAIN = Style()


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = PLAIN


# ---------------------------------------------------------------------------
# Layout output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScreenLine:
    """One width-bounded output line, tagged with its source block and row."""

    spans: tuple[Span, ...]
    block_id: int
    row: int

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True)
class BlockLineCount:
    block_id: int
    count: int


@dataclass
class Document:
    """Parsed blocks plus the most recent layout generation.

    The lines and counts are replaced together on every reflow; they are
    never patched in place.
    """

    blocks: list[Block]
    lines: list[ScreenLine] = field(default_factory=list)
    counts: list[BlockLineCount] = field(default_factory=list)
    width: int = 0
