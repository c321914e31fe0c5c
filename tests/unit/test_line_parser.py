"""Tests for the line cursor."""

from pathlib import Path

import pytest

from org_agenda.core.parser.line_parser import LineParser, read_lines
from org_agenda.errors import SourceReadError


def test_peek_does_not_advance() -> None:
    parser = LineParser.from_string("first\nsecond")
    assert parser.peek() == "first"
    assert parser.line_number == 0
    assert parser.next() == "first"
    assert parser.line_number == 1
    assert parser.next() == "second"
    assert parser.next() is None
    assert parser.peek() is None


def test_next_stamps_diagnostics_with_line_number() -> None:
    parser = LineParser.from_string("a\nb\nc")
    parser.next()
    parser.next()
    parser.warning("something odd")
    assert [d.line for d in parser.diagnostics] == [2]


def test_take_until_consumes_marker() -> None:
    parser = LineParser.from_string("one\ntwo\n  :END:  \nafter")
    assert parser.take_until(":END:") == ["one", "two"]
    assert parser.next() == "after"
    assert len(parser.diagnostics) == 0


def test_take_until_warns_at_end_of_input() -> None:
    parser = LineParser.from_string("one\ntwo")
    assert parser.take_until(":END:") == ["one", "two"]
    assert len(parser.diagnostics) == 1


def test_take_while_stops_before_mismatch() -> None:
    parser = LineParser.from_string("| a |\n| b |\ntext")
    assert parser.take_while(lambda line: line.startswith("|")) == ["| a |", "| b |"]
    assert parser.next() == "text"


def test_read_lines_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError) as exc_info:
        read_lines(tmp_path / "missing.org")
    assert exc_info.value.path == tmp_path / "missing.org"


def test_undecodable_file_raises_source_read_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.org"
    path.write_bytes(b"* Heading\n\xff\xfe\xfa broken\n")
    parser = LineParser.from_path(path)
    with pytest.raises(SourceReadError):
        while parser.next() is not None:
            pass


def test_line_endings_are_stripped(tmp_path: Path) -> None:
    path = tmp_path / "crlf.org"
    path.write_bytes(b"* One\r\nbody\r\n")
    assert list(read_lines(path)) == ["* One", "body"]


def test_string_and_file_split_lines_the_same(tmp_path: Path) -> None:
    text = "* Meeting\x0cnotes\r\n* Other\u2028** Sneaky\rlast\n"
    path = tmp_path / "odd.org"
    path.write_bytes(text.encode("utf-8"))

    from_file = list(read_lines(path))
    from_text = LineParser.from_string(text).take_while(lambda line: True)

    assert from_text == from_file
    assert from_text == ["* Meeting\x0cnotes", "* Other\u2028** Sneaky", "last"]
