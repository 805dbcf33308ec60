"""Terminal abstraction for the interactive pager.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
manages raw mode, cursor visibility and screen clearing via ANSI escape
sequences. Input is read synchronously: ``read_key`` waits a bounded time for
one complete key sequence so the caller can poll the terminal size between
keys.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import tty
from typing import IO, Protocol

from mdless.keys import ESC, is_complete_sequence

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"

DEFAULT_COLUMNS = 80
DEFAULT_ROWS = 24

# How long to wait for the rest of an escape sequence before giving up.
_ESCAPE_TIMEOUT = 0.01


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_key(self, timeout: float) -> str | None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_screen(self) -> None: ...


# ---------------------------------------------------------------------------
# Size detection
# ---------------------------------------------------------------------------


def terminal_size(*fds: int) -> tuple[int, int]:
    """Return ``(columns, rows)`` for the first fd that reports a size.

    Falls back to the ``COLUMNS`` / ``LINES`` environment variables and then
    to 80x24.
    """
    for fd in fds:
        try:
            size = os.get_terminal_size(fd)
        except (ValueError, OSError):
            continue
        if size.columns > 0 and size.lines > 0:
            return size.columns, size.lines

    columns = _env_int("COLUMNS") or DEFAULT_COLUMNS
    rows = _env_int("LINES") or DEFAULT_ROWS
    return columns, rows


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name, "")
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by ``sys.stdout`` and the controlling tty.

    Keys are read from ``sys.stdin`` when it is a terminal, otherwise from
    ``/dev/tty`` (the document itself was piped in).
    """

    def __init__(self, output: IO[str] | None = None) -> None:
        self._output = output or sys.stdout
        self._input_fd: int | None = None
        self._owns_input_fd = False
        self._original_termios: list | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._write_log_path: str = os.environ.get("MDLESS_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    def _size(self) -> tuple[int, int]:
        fds: list[int] = []
        try:
            fds.append(self._output.fileno())
        except (AttributeError, ValueError, OSError):
            pass
        if self._input_fd is not None:
            fds.append(self._input_fd)
        return terminal_size(*fds)

    @property
    def columns(self) -> int:
        return self._size()[0]

    @property
    def rows(self) -> int:
        return self._size()[1]

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Open the key source, enter raw mode and switch to the alternate screen."""
        if sys.stdin.isatty():
            self._input_fd = sys.stdin.fileno()
        else:
            self._input_fd = os.open("/dev/tty", os.O_RDONLY)
            self._owns_input_fd = True
            logger.debug("stdin is not a terminal, reading keys from /dev/tty")

        self._original_termios = termios.tcgetattr(self._input_fd)
        tty.setraw(self._input_fd)

        self._raw_write(_ALT_SCREEN_ENABLE)
        self.hide_cursor()

    def stop(self) -> None:
        """Restore terminal state. Safe to call more than once."""
        self.show_cursor()
        self._raw_write(_ALT_SCREEN_DISABLE)

        if self._input_fd is not None:
            if self._original_termios is not None:
                termios.tcsetattr(self._input_fd, termios.TCSADRAIN, self._original_termios)
                self._original_termios = None
            if self._owns_input_fd:
                os.close(self._input_fd)
                self._owns_input_fd = False
            self._input_fd = None
        self._pending = ""

    # -- input --------------------------------------------------------------

    def _fill(self, timeout: float) -> bool:
        """Read whatever input is available within *timeout* seconds."""
        if self._input_fd is None:
            return False
        try:
            ready, _, _ = select.select([self._input_fd], [], [], timeout)
        except InterruptedError:
            return False
        if not ready:
            return False
        try:
            raw = os.read(self._input_fd, 4096)
        except OSError:
            return False
        if not raw:
            return False
        self._pending += self._decoder.decode(raw)
        return True

    def read_key(self, timeout: float) -> str | None:
        """Return one complete key sequence, or ``None`` if none arrived in time."""
        if not self._pending and not self._fill(timeout):
            return None
        if not self._pending:
            # Only part of a multi-byte character has arrived so far.
            return None

        if not self._pending.startswith(ESC):
            key, self._pending = self._pending[0], self._pending[1:]
            return key

        while True:
            for end in range(1, len(self._pending) + 1):
                if is_complete_sequence(self._pending[:end]) == "complete":
                    key, self._pending = self._pending[:end], self._pending[end:]
                    return key
            if not self._fill(_ESCAPE_TIMEOUT):
                # Lone ESC or a truncated sequence: hand over what we have.
                key, self._pending = self._pending, ""
                return key

    # -- write --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the output and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    # -- cursor / screen manipulation --------------------------------------

    def hide_cursor(self) -> None:
        self._raw_write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._raw_write(_SHOW_CURSOR)

    def clear_screen(self) -> None:
        self._raw_write(_CLEAR_SCREEN)

    # -- private: raw write ------------------------------------------------

    def _raw_write(self, data: str) -> None:
        try:
            self._output.write(data)
            self._output.flush()
        except OSError:
            pass
