"""Attach styles to inline content according to a theme.

The styler walks the inline tree carrying an inherited ``Style``; each node
kind contributes its own style, combined with :meth:`Style.combine` (explicit
foreground wins, bold / underline accumulate). In no-colour mode every span
is the plain default style.
"""

from __future__ import annotations

from collections.abc import Iterable

from mdless.model import (
    PLAIN,
    Code,
    Emph,
    HardBreak,
    Inline,
    Link,
    SoftBreak,
    Span,
    Strong,
    Style,
    Text,
)
from mdless.theme import NO_COLOR, Theme

_EMPH = Style(underline=True)
_STRONG = Style(bold=True)


class Styler:
    """Role-to-style lookups for one theme."""

    def __init__(self, theme: Theme | None = None) -> None:
        self.theme = theme or NO_COLOR

    # -- roles --------------------------------------------------------------

    def _role(self, style: Style) -> Style:
        return PLAIN if self.theme.no_color else style

    def text(self) -> Style:
        return self._role(Style(fg=self.theme.text))

    def heading(self) -> Style:
        return self._role(Style(fg=self.theme.heading, bold=True))

    def code(self) -> Style:
        return self._role(Style(fg=self.theme.code))

    def link(self) -> Style:
        return self._role(Style(fg=self.theme.link, underline=True))

    def quote(self) -> Style:
        return self._role(Style(fg=self.theme.quote))

    def table_header(self) -> Style:
        return self._role(Style(fg=self.theme.text, bold=True))

    def marker(self) -> Style:
        """Style of list bullets, table rules and other layout furniture."""
        return self.text()

    # -- inline tree --------------------------------------------------------

    def inlines(self, nodes: Iterable[Inline], *, heading: bool = False) -> list[Span]:
        """Flatten *nodes* into styled spans.

        ``SoftBreak`` becomes a single space and ``HardBreak`` a newline;
        the layout engine treats both as token boundaries.
        """
        spans: list[Span] = []
        base = self.heading() if heading else self.text()
        self._walk(nodes, base, spans)
        return spans

    def _walk(self, nodes: Iterable[Inline], inherited: Style, spans: list[Span]) -> None:
        for node in nodes:
            if isinstance(node, Text):
                self._add(spans, node.text, inherited)
            elif isinstance(node, Code):
                self._add(spans, node.code, inherited.combine(self.code()))
            elif isinstance(node, Emph):
                self._walk(node.children, inherited.combine(self._role(_EMPH)), spans)
            elif isinstance(node, Strong):
                self._walk(node.children, inherited.combine(self._role(_STRONG)), spans)
            elif isinstance(node, Link):
                self._walk(node.children, inherited.combine(self.link()), spans)
            elif isinstance(node, SoftBreak):
                self._add(spans, " ", inherited)
            elif isinstance(node, HardBreak):
                self._add(spans, "\n", inherited)

    def _add(self, spans: list[Span], text: str, style: Style) -> None:
        if not text:
            return
        spans.append(Span(text, PLAIN if self.theme.no_color else style))
