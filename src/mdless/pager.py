"""Viewport arithmetic over a laid-out document.

The pager never sees line content, only per-block line counts. It keeps a
prefix-sum array so a logical line maps back to ``(block_id, row)`` with a
binary search and a position maps forward with a dict lookup. A new pager is
built on every reflow; the old top line is carried over by the caller.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence
from typing import NamedTuple

from mdless.model import BlockLineCount


class Pos(NamedTuple):
    """A logical line expressed as a block id and a row inside that block."""

    block_id: int
    row: int


class Pager:
    """Tracks the top line of a fixed-height viewport."""

    def __init__(self, counts: Sequence[BlockLineCount], height: int) -> None:
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")
        self._counts = list(counts)
        self._height = height
        self._top = 0

        # _starts[i] is the first logical line of block i; the last entry is
        # the total line count.
        self._starts: list[int] = [0]
        self._index_by_id: dict[int, int] = {}
        for i, count in enumerate(self._counts):
            self._starts.append(self._starts[-1] + count.count)
            self._index_by_id[count.block_id] = i

    # -- properties ---------------------------------------------------------

    @property
    def total_lines(self) -> int:
        return self._starts[-1]

    @property
    def height(self) -> int:
        return self._height

    @property
    def top_line(self) -> int:
        return self._top

    @property
    def max_top(self) -> int:
        return max(0, self.total_lines - self._height)

    # -- movement -----------------------------------------------------------

    def _clamp(self, line: int) -> int:
        return min(max(line, 0), self.max_top)

    def set_height(self, height: int) -> None:
        """Change the viewport height and re-clamp the top line."""
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")
        self._height = height
        self._top = self._clamp(self._top)

    def scroll_to(self, line: int) -> None:
        self._top = self._clamp(line)

    def scroll_lines(self, n: int) -> None:
        self._top = self._clamp(self._top + n)

    def scroll_pages(self, n: int) -> None:
        self._top = self._clamp(self._top + n * self._height)

    def jump_to_top(self) -> None:
        self._top = 0

    def jump_to_bottom(self) -> None:
        self._top = self.max_top

    # -- queries ------------------------------------------------------------

    def viewport_range(self) -> range:
        """Logical lines currently visible, as a half-open range."""
        return range(self._top, min(self._top + self._height, self.total_lines))

    def percent(self) -> int:
        """Scroll position as a percentage; 100 when there is nothing to scroll."""
        max_top = self.max_top
        if self.total_lines == 0 or max_top == 0:
            return 100
        return min(max(self._top * 100 // max_top, 0), 100)

    def logical_to_pos(self, line: int) -> Pos:
        if not 0 <= line < self.total_lines:
            raise ValueError(f"line {line} out of range [0, {self.total_lines})")
        # Blocks with zero lines share a start; bisect_right skips past them.
        index = bisect.bisect_right(self._starts, line) - 1
        return Pos(self._counts[index].block_id, line - self._starts[index])

    def pos_to_logical(self, block_id: int, row: int) -> int:
        index = self._index_by_id.get(block_id)
        if index is None:
            raise ValueError(f"unknown block id {block_id}")
        count = self._counts[index].count
        if not 0 <= row < count:
            raise ValueError(f"row {row} outside block {block_id} ({count} lines)")
        return self._starts[index] + row
