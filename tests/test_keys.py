"""Tests for mdless.keys -- raw input decoding."""

from __future__ import annotations

import pytest

from mdless.keys import LEGACY_KEY_SEQUENCES, Key, is_complete_sequence, is_printable, parse_key


class TestParseKey:
    """Raw sequences to key identifiers."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1bOA", "up"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[6~", "pageDown"),
            ("\x1b[H", "home"),
            ("\x1b[1~", "home"),
            ("\x1b[F", "end"),
            ("\x1b[4~", "end"),
        ],
    )
    def test_legacy_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_simple_keys(self) -> None:
        assert parse_key("\x1b") == "escape"
        assert parse_key("\r") == "enter"
        assert parse_key("\n") == "enter"
        assert parse_key(" ") == "space"
        assert parse_key("\x7f") == "backspace"
        assert parse_key("\x08") == "backspace"
        assert parse_key("\t") == "tab"

    def test_ctrl_letters(self) -> None:
        assert parse_key("\x03") == "ctrl+c"
        assert parse_key("\x06") == "ctrl+f"
        assert parse_key("\x02") == "ctrl+b"

    def test_printable_characters_keep_case(self) -> None:
        assert parse_key("j") == "j"
        assert parse_key("G") == "G"
        assert parse_key("/") == "/"
        assert parse_key("?") == "?"

    def test_alt_key(self) -> None:
        assert parse_key("\x1bv") == "alt+v"

    def test_unknown(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[99~") is None

    def test_key_constants_match_table(self) -> None:
        assert LEGACY_KEY_SEQUENCES["\x1b[6~"] == Key.page_down
        assert Key.ctrl("n") == "ctrl+n"


class TestIsPrintable:
    """Prompt input filter."""

    def test_printable(self) -> None:
        assert is_printable("a")
        assert is_printable(" ")
        assert is_printable("é")

    def test_not_printable(self) -> None:
        assert not is_printable("\x1b")
        assert not is_printable("\x7f")
        assert not is_printable("ab")


class TestIsCompleteSequence:
    """Escape sequence completeness."""

    def test_not_escape(self) -> None:
        assert is_complete_sequence("a") == "not-escape"

    def test_lone_escape_incomplete(self) -> None:
        assert is_complete_sequence("\x1b") == "incomplete"

    def test_csi(self) -> None:
        assert is_complete_sequence("\x1b[") == "incomplete"
        assert is_complete_sequence("\x1b[5") == "incomplete"
        assert is_complete_sequence("\x1b[5~") == "complete"
        assert is_complete_sequence("\x1b[A") == "complete"
        assert is_complete_sequence("\x1b[1;5") == "incomplete"

    def test_ss3(self) -> None:
        assert is_complete_sequence("\x1bO") == "incomplete"
        assert is_complete_sequence("\x1bOA") == "complete"

    def test_meta(self) -> None:
        assert is_complete_sequence("\x1bx") == "complete"
