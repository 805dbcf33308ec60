"""Interactive pager loop and non-interactive printing.

The loop is single-threaded: poll the terminal size, reflow when the width
changed, re-clamp the pager to the new height, redraw, then wait briefly for
a key. Layout output and the pager are always replaced together so the pager
never indexes lines from another generation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import IO

from mdless.keybindings import PagerAction, PagerKeybindingsManager
from mdless.keys import Key, is_printable, parse_key
from mdless.layout import layout_document
from mdless.model import Block, Document
from mdless.pager import Pager
from mdless.render import render_highlighted_line, render_lines
from mdless.search import compute_matches, find_next, find_prev
from mdless.terminal import Terminal
from mdless.theme import Theme
from mdless.width import split_at_columns

logger = logging.getLogger(__name__)

MIN_WIDTH = 20
KEY_TIMEOUT = 0.1  # seconds between size polls while idle

STATUS_FMT = "-- {percent}% (q quit, / ? search) --"
NOT_FOUND_FMT = "Pattern not found: {query}"

_STATUS_STYLE = "\x1b[7m"
_RESET = "\x1b[0m"
_CLEAR_TO_EOL = "\x1b[K"


# ---------------------------------------------------------------------------
# Non-interactive mode
# ---------------------------------------------------------------------------


def print_document(
    blocks: Sequence[Block],
    out: IO[str],
    *,
    width: int,
    tab_width: int = 4,
    theme: Theme | None = None,
    color: bool = False,
) -> None:
    """Lay out *blocks* at *width* and write every line to *out*."""
    lines, _ = layout_document(blocks, width, tab_width, theme if color else None)
    out.write(render_lines(lines, color=color))


# ---------------------------------------------------------------------------
# Interactive mode
# ---------------------------------------------------------------------------


class _Prompt:
    """Search prompt being edited on the status line."""

    def __init__(self, direction: int) -> None:
        self.direction = direction
        self.buffer = ""

    @property
    def leader(self) -> str:
        return "/" if self.direction > 0 else "?"


class App:
    """Full-screen pager over an already parsed document."""

    def __init__(
        self,
        terminal: Terminal,
        blocks: Sequence[Block],
        *,
        theme: Theme | None = None,
        tab_width: int = 4,
        width: int | None = None,
        keybindings: PagerKeybindingsManager | None = None,
    ) -> None:
        self.terminal = terminal
        self.document = Document(list(blocks))
        self.theme = theme
        self.tab_width = tab_width
        self.fixed_width = width
        self.keybindings = keybindings or PagerKeybindingsManager()

        self.pager: Pager | None = None
        self.running = False
        self._dirty = True
        self._prompt: _Prompt | None = None
        self._message: str | None = None
        self._last_query: str | None = None
        self._last_direction = 1
        self._last_hit: int | None = None

    # -- main loop ----------------------------------------------------------

    def run(self) -> None:
        """Run until the user quits. The terminal is always restored."""
        self.terminal.start()
        try:
            self.running = True
            while self.running:
                self.sync_size()
                if self._dirty:
                    self.draw()
                data = self.terminal.read_key(KEY_TIMEOUT)
                if data is not None:
                    self.handle_input(data)
        finally:
            self.terminal.stop()

    # -- geometry -----------------------------------------------------------

    def _target_size(self) -> tuple[int, int]:
        width = self.fixed_width or max(self.terminal.columns, MIN_WIDTH)
        height = max(self.terminal.rows - 1, 1)
        return width, height

    def sync_size(self) -> None:
        """Reflow on a width change, then re-clamp the pager to the height."""
        width, height = self._target_size()
        if self.pager is None or width != self.document.width:
            self.reflow(width, height)
        if height != self.pager.height:
            self.pager.set_height(height)
            self._dirty = True

    def reflow(self, width: int, height: int) -> None:
        """Lay the document out again, keeping the top line's block in view."""
        anchor = None
        if self.pager is not None and self.pager.total_lines:
            anchor = self.pager.logical_to_pos(self.pager.top_line)

        lines, counts = layout_document(self.document.blocks, width, self.tab_width, self.theme)
        self.document.lines = lines
        self.document.counts = counts
        self.document.width = width

        pager = Pager(counts, self.pager.height if self.pager is not None else height)
        if anchor is not None:
            rows = {c.block_id: c.count for c in counts}
            if anchor.block_id in rows:
                row = min(anchor.row, rows[anchor.block_id] - 1)
                pager.scroll_to(pager.pos_to_logical(anchor.block_id, row))
        self.pager = pager
        self._last_hit = None
        self._dirty = True
        logger.debug("Reflowed to width %d: %d lines", width, len(lines))

    # -- drawing ------------------------------------------------------------

    def status_text(self) -> str:
        if self._prompt is not None:
            return self._prompt.leader + self._prompt.buffer
        if self._message is not None:
            return self._message
        assert self.pager is not None
        return STATUS_FMT.format(percent=self.pager.percent())

    def draw(self) -> None:
        """Redraw the whole viewport and the status line."""
        assert self.pager is not None
        view = self.pager.viewport_range()
        visible = self.document.lines[view.start : view.stop]
        if self._last_query:
            highlights = compute_matches(visible, self._last_query)
        else:
            highlights = [[] for _ in visible]

        rows = [render_highlighted_line(line, ranges) for line, ranges in zip(visible, highlights)]
        rows.extend([""] * (self.pager.height - len(rows)))

        status, _ = split_at_columns(self.status_text(), max(self.terminal.columns, 1))

        self.terminal.clear_screen()
        self.terminal.write("\r\n".join(rows))
        self.terminal.write(f"\x1b[{self.pager.height + 1};1H{_STATUS_STYLE}{status}{_RESET}{_CLEAR_TO_EOL}")
        self._dirty = False

    # -- input --------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Process one complete key sequence."""
        self._dirty = True
        if self._prompt is not None:
            self._handle_prompt_input(data)
            return

        action = self.keybindings.action_for(parse_key(data))
        if action is None:
            return
        self._message = None
        self.dispatch(action)

    def dispatch(self, action: PagerAction) -> None:
        pager = self.pager
        assert pager is not None
        if action == "lineDown":
            pager.scroll_lines(1)
        elif action == "lineUp":
            pager.scroll_lines(-1)
        elif action == "pageDown":
            pager.scroll_pages(1)
        elif action == "pageUp":
            pager.scroll_pages(-1)
        elif action == "halfPageDown":
            pager.scroll_lines(max(pager.height // 2, 1))
        elif action == "halfPageUp":
            pager.scroll_lines(-max(pager.height // 2, 1))
        elif action == "top":
            pager.jump_to_top()
        elif action == "bottom":
            pager.jump_to_bottom()
        elif action == "searchForward":
            self._prompt = _Prompt(1)
        elif action == "searchBackward":
            self._prompt = _Prompt(-1)
        elif action == "nextMatch":
            self.repeat_search(self._last_direction)
        elif action == "prevMatch":
            self.repeat_search(-self._last_direction)
        elif action == "quit":
            self.running = False

    def _handle_prompt_input(self, data: str) -> None:
        prompt = self._prompt
        assert prompt is not None
        key = parse_key(data)
        if key in (Key.escape, Key.ctrl("c")):
            self._prompt = None
        elif key == Key.enter:
            self._prompt = None
            query = prompt.buffer or self._last_query
            if query:
                self.search(query, prompt.direction)
        elif key == Key.backspace:
            if prompt.buffer:
                prompt.buffer = prompt.buffer[:-1]
            else:
                self._prompt = None
        elif is_printable(data):
            prompt.buffer += data

    # -- search -------------------------------------------------------------

    def search(self, query: str, direction: int) -> int | None:
        """Start a new search from the top of the viewport.

        A forward search includes the top line itself; a backward search
        starts just above it.
        """
        assert self.pager is not None
        self._last_query = query
        self._last_direction = direction
        top = self.pager.top_line
        start = top - 1 if direction > 0 else top
        return self._jump(query, direction, start)

    def repeat_search(self, direction: int) -> int | None:
        """Find the next match after (or before) the current one."""
        if not self._last_query:
            return None
        assert self.pager is not None
        top = self.pager.top_line
        start = top
        if direction > 0 and self._last_hit is not None:
            start = max(top, self._last_hit)
        return self._jump(self._last_query, direction, start)

    def _jump(self, query: str, direction: int, start: int) -> int | None:
        assert self.pager is not None
        lines = self.document.lines
        hit = find_next(lines, query, start) if direction > 0 else find_prev(lines, query, start)
        if hit is None:
            self._message = NOT_FOUND_FMT.format(query=query)
            logger.debug("No match for %r from line %d", query, start)
            return None
        self.pager.scroll_to(hit)
        self._last_hit = hit
        self._message = None
        logger.debug("Match for %r at line %d", query, hit)
        return hit
