"""Tests for the input cursor and spans."""

from __future__ import annotations

import dataclasses

import pytest

from combinator.source import Cursor, Location, Span


class TestCursorAdvance:
    def test_starts_at_row_one_column_one(self):
        assert Cursor.start("abc").location == Location(1, 1)

    def test_empty_input_cannot_advance(self):
        assert Cursor.start("").advance() is None
        assert Cursor.start("").at_end

    def test_advance_returns_char_and_new_cursor(self):
        ch, rest = Cursor.start("ab").advance()
        assert ch == "a"
        assert rest.remaining == "b"
        assert rest.location == Location(1, 2)

    def test_newline_increments_row_and_resets_column(self):
        _, after_a = Cursor.start("a\nb").advance()
        ch, after_newline = after_a.advance()
        assert ch == "\n"
        assert after_newline.location == Location(2, 1)
        _, after_b = after_newline.advance()
        assert after_b.location == Location(2, 2)

    def test_advance_past_end(self):
        _, rest = Cursor.start("x").advance()
        assert rest.at_end
        assert rest.advance() is None

    def test_advance_does_not_mutate(self):
        cursor = Cursor.start("abc")
        cursor.advance()
        assert cursor.remaining == "abc"
        assert cursor.location == Location(1, 1)

    def test_frozen(self):
        cursor = Cursor.start("abc")
        with pytest.raises(dataclasses.FrozenInstanceError):
            cursor.offset = 2  # type: ignore[misc]


class TestCursorEquality:
    def test_equal_on_position_and_remaining_text(self):
        assert Cursor("xab", offset=1) == Cursor("ab")

    def test_different_position_not_equal(self):
        assert Cursor("ab", row=2) != Cursor("ab")
        assert Cursor("ab", col=3) != Cursor("ab")

    def test_different_remaining_not_equal(self):
        assert Cursor("ab") != Cursor("ac")

    def test_hash_consistent_with_equality(self):
        assert hash(Cursor("xab", offset=1)) == hash(Cursor("ab"))

    def test_not_equal_to_other_types(self):
        assert Cursor("ab") != "ab"


class TestSpan:
    def test_between_locations(self):
        span = Span.between(Location(1, 5), Location(1, 8))
        assert span == Span("<input>", 1, 5, 1, 8)

    def test_str(self):
        assert str(Span("expr", 2, 3, 2, 4)) == "expr:2:3"

    def test_location_str(self):
        assert str(Location(3, 7)) == "3:7"
