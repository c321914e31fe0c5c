"""Tests for clock entries and logbook totals."""

import datetime as dt

from loguru import logger

from org_agenda.core.document import Document
from org_agenda.models.elements import Drawer
from org_agenda.models.logbook import ClockEntry, Logbook, format_duration


def test_clock_entry_duration() -> None:
    entry = ClockEntry.parse(
        "  CLOCK: [2018-09-15 Sat 09:00]--[2018-09-15 Sat 10:30] =>  1:30"
    )
    assert entry is not None
    assert entry.time_spent() == dt.timedelta(hours=1, minutes=30)


def test_open_clock_counts_as_zero() -> None:
    entry = ClockEntry.parse("CLOCK: [2018-09-15 Sat 09:00]")
    assert entry is not None
    assert entry.time_spent() == dt.timedelta(0)


def test_non_clock_lines_are_ignored() -> None:
    assert ClockEntry.parse("- State \"DONE\" from \"TODO\" [2018-09-15 Sat 09:00]") is None
    logbook = Logbook.from_drawer(Drawer(name="LOGBOOK", contents=["note", ""]))
    assert logbook.entries == ()


def test_logbook_totals(clocked_text: str, saturday: dt.date) -> None:
    document = Document.from_string(clocked_text)
    fix_header = list(document.walk())[1]

    assert fix_header.time_spent() == dt.timedelta(hours=1, minutes=40)
    assert fix_header.time_spent_today(saturday) == dt.timedelta(hours=1, minutes=10)
    assert fix_header.was_clocked_to_today(saturday)
    assert not fix_header.was_clocked_to_today(saturday + dt.timedelta(days=1))


def test_nodes_clocked_to_today(clocked_text: str, saturday: dt.date) -> None:
    document = Document.from_string(clocked_text)
    titles = [node.title for node in document.nodes_clocked_to_today(saturday)]
    assert titles == ["Website", "Fix header", "Email"]
    friday = saturday - dt.timedelta(days=1)
    assert [node.title for node in document.nodes_clocked_to_today(friday)] == ["Fix header"]


def test_logbook_timestamps_are_not_agenda_items(clocked_text: str, saturday: dt.date) -> None:
    document = Document.from_string(clocked_text)
    assert list(document.nodes_for_date(saturday, saturday)) == []


def test_format_duration() -> None:
    assert format_duration(dt.timedelta(0)) == "0:00"
    assert format_duration(dt.timedelta(hours=2, minutes=5)) == "2:05"
    assert format_duration(dt.timedelta(days=1, minutes=30)) == "24:30"


def test_invalid_clock_line_is_logged() -> None:
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        bad_line = "CLOCK: [2018-02-30 Fri 09:00]--[2018-02-30 Fri 10:00]"
        logbook = Logbook.from_drawer(Drawer(name="LOGBOOK", contents=[bad_line]))
    finally:
        logger.remove(handler_id)

    assert logbook.entries == ()
    assert any("Skipping clock entry" in message for message in messages)
