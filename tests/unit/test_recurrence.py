"""Tests for resolving timestamps to concrete occurrences."""

import datetime as dt

import pytest

from org_agenda.diagnostics import Diagnostics
from org_agenda.models.timestamp import TimestampKind, parse_timestamp

D = dt.date


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (D(2018, 9, 15), True),
        (D(2018, 10, 15), True),
        (D(2019, 1, 15), True),
        (D(2018, 10, 16), False),
        (D(2018, 8, 15), False),
        (D(2018, 9, 14), False),
    ],
)
def test_monthly_repeater(day: dt.date, expected: bool) -> None:
    assert parse_timestamp("<2018-09-15 +1m>").matches(day) is expected


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (D(2018, 9, 15), True),
        (D(2018, 9, 22), True),
        (D(2018, 10, 13), True),
        (D(2018, 9, 23), False),
        (D(2018, 9, 8), False),
    ],
)
def test_weekly_repeater(day: dt.date, expected: bool) -> None:
    assert parse_timestamp("<2018-09-15 +1w>").matches(day) is expected


def test_yearly_and_multi_day_repeaters() -> None:
    yearly = parse_timestamp("<2018-09-15 Sat +1y>")
    assert yearly.matches(D(2020, 9, 15))
    assert not yearly.matches(D(2020, 9, 16))

    every_third_day = parse_timestamp("<2018-09-15 Sat +3d>")
    assert every_third_day.matches(D(2018, 9, 18))
    assert not every_third_day.matches(D(2018, 9, 17))


def test_hourly_repeater_is_rejected() -> None:
    diagnostics = Diagnostics()
    ts = parse_timestamp("<2018-09-15 Sat 10:00 +1h>", diagnostics=diagnostics)
    assert ts.repeater is None
    assert len(diagnostics) == 1
    assert ts.matches(D(2018, 9, 15))
    assert not ts.matches(D(2018, 9, 16))


def test_occurrence_is_a_dated_copy() -> None:
    ts = parse_timestamp("<2018-09-15 Sat 10:00 +1w>")
    occurrence = ts.occurrence_on(D(2018, 9, 29))
    assert occurrence is not None
    assert occurrence.date == D(2018, 9, 29)
    assert occurrence.time == dt.time(10, 0)
    assert occurrence.repeater == ts.repeater
    assert ts.date == D(2018, 9, 15)


def test_inactive_timestamps_never_recur() -> None:
    ts = parse_timestamp("[2018-09-15 Sat +1w]")
    assert ts.matches(D(2018, 9, 15))
    assert not ts.matches(D(2018, 9, 22))


def test_range_covers_every_day_and_does_not_recur() -> None:
    ts = parse_timestamp("<2018-09-15 Sat>--<2018-09-17 Mon>")
    assert [ts.matches(D(2018, 9, day)) for day in range(14, 19)] == [
        False,
        True,
        True,
        True,
        False,
    ]


def test_scheduled_repeats_only_after_reference() -> None:
    """Up to the reference date only the first date counts."""
    ts = parse_timestamp("<2018-09-15 Sat +1w>", kind=TimestampKind.SCHEDULED)
    reference = D(2018, 9, 25)

    assert ts.matches(D(2018, 9, 15), reference)
    assert not ts.matches(D(2018, 9, 22), reference)
    assert ts.matches(D(2018, 9, 29), reference)
    assert ts.matches(D(2018, 9, 22), D(2018, 9, 20))


def test_monthly_repeater_skips_short_months() -> None:
    ts = parse_timestamp("<2018-01-31 +1m>")
    assert not ts.matches(D(2018, 2, 28))
    assert not ts.matches(D(2018, 3, 1))
    assert ts.matches(D(2018, 3, 31))
    assert not ts.matches(D(2018, 4, 30))
    assert ts.matches(D(2018, 5, 31))


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (D(2017, 2, 28), False),
        (D(2017, 3, 1), False),
        (D(2020, 2, 29), True),
        (D(2021, 2, 28), False),
        (D(2024, 2, 29), True),
    ],
)
def test_yearly_repeater_on_leap_day(day: dt.date, expected: bool) -> None:
    assert parse_timestamp("<2016-02-29 +1y>").matches(day) is expected
