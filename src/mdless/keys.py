"""Keyboard input decoding for the pager.

Raw terminal input is turned into key identifiers such as ``"j"``,
``"pageDown"`` or ``"ctrl+c"``. Only legacy (xterm / VT) sequences are
recognized; the pager never enables extended keyboard protocols.
"""

from __future__ import annotations

import re

ESC = "\x1b"

KeyId = str


class Key:
    """Named key constants."""

    escape = "escape"
    enter = "enter"
    space = "space"
    backspace = "backspace"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


LEGACY_KEY_SEQUENCES: dict[str, KeyId] = {
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
}


def parse_key(data: str) -> KeyId | None:
    """Return the key identifier for one complete input sequence, or ``None``."""
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    if data == ESC:
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data in ("\x7f", "\x08"):
        return "backspace"

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == ESC and data[1].isprintable():
        return "alt+" + data[1]

    if len(data) == 1 and data.isprintable():
        return data

    return None


def is_printable(data: str) -> bool:
    """True for a single printable character, the only input a prompt accepts."""
    return len(data) == 1 and data.isprintable()


# ---------------------------------------------------------------------------
# Sequence completeness
# ---------------------------------------------------------------------------

_CSI_PARAMS_RE = re.compile(r"^[\x30-\x3f]*[\x20-\x2f]*$")


def is_complete_sequence(data: str) -> str:
    """Check whether *data* is a complete escape sequence.

    Returns ``'complete'``, ``'incomplete'`` or ``'not-escape'``.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI: ESC [ params intermediates final (0x40-0x7E)
    if after_esc.startswith("["):
        if len(data) < 3:
            return "incomplete"
        payload = data[2:]
        if 0x40 <= ord(payload[-1]) <= 0x7E:
            return "complete"
        return "incomplete" if _CSI_PARAMS_RE.match(payload) else "complete"

    # SS3: ESC O + one character
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"
