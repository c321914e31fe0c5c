"""Timestamp value type, timestamp parsing and recurrence resolution."""

import datetime as dt
import functools
import re
from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from org_agenda.errors import TimestampError
from org_agenda.protocols import WarningSink

_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class TimestampKind(Enum):
    """Where a timestamp came from. Assigned by parse context."""

    SCHEDULED = "scheduled"
    DEADLINE = "deadline"
    CLOSED = "closed"
    ACTIVE = "active"
    INACTIVE = "inactive"


class TimeUnit(Enum):
    HOUR = "h"
    DAY = "d"
    WEEK = "w"
    MONTH = "m"
    YEAR = "y"


class RepeaterMark(Enum):
    CUMULATE = "+"
    CATCH_UP = "++"
    RESTART = ".+"


class DelayMark(Enum):
    ALL = "-"
    FIRST = "--"


@dataclass(frozen=True)
class Repeater:
    """Recurrence rule, e.g. ``+1w``."""

    mark: RepeaterMark
    value: int
    unit: TimeUnit

    def __str__(self) -> str:
        return f"{self.mark.value}{self.value}{self.unit.value}"


@dataclass(frozen=True)
class Delay:
    """Warning lead time, e.g. ``-2d``."""

    mark: DelayMark
    value: int
    unit: TimeUnit

    def __str__(self) -> str:
        return f"{self.mark.value}{self.value}{self.unit.value}"


def today() -> dt.date:
    return dt.date.today()


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Timestamp:
    """One calendar point or range with optional repeater and delay.

    Equality, hashing and ordering only look at (date, time). A timestamp
    without a time sorts before any timed one on the same date.
    """

    date: dt.date
    end_date: dt.date | None = None
    time: dt.time | None = None
    end_time: dt.time | None = None
    kind: TimestampKind = TimestampKind.ACTIVE
    repeater: Repeater | None = None
    delay: Delay | None = None

    @property
    def sort_key(self) -> tuple[dt.date, bool, dt.time]:
        return (self.date, self.time is not None, self.time or dt.time.min)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self.date == other.date and self.time == other.time

    def __lt__(self, other: "Timestamp") -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash((self.date, self.time))

    @property
    def is_active(self) -> bool:
        return self.kind not in (TimestampKind.INACTIVE, TimestampKind.CLOSED)

    @property
    def is_range(self) -> bool:
        return self.end_date is not None

    def start(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time or dt.time.min)

    def end(self) -> dt.datetime:
        end_date = self.end_date or self.date
        end_time = self.end_time or self.time or dt.time.min
        return dt.datetime.combine(end_date, end_time)

    def duration(self) -> dt.timedelta:
        """Time between start and end; zero for point timestamps."""
        return max(self.end() - self.start(), dt.timedelta(0))

    def is_past(self, reference: dt.date | None = None) -> bool:
        """True if the timestamp's date lies strictly before ``reference`` (default today)."""
        return self.date < (reference or today())

    def covers(self, day: dt.date) -> bool:
        """True if ``day`` is the timestamp's date or falls inside its range."""
        return self.date <= day <= (self.end_date or self.date)

    def with_kind(self, kind: TimestampKind) -> "Timestamp":
        return replace(self, kind=kind)

    def occurrence_on(self, day: dt.date, reference: dt.date | None = None) -> "Timestamp | None":
        """Return the occurrence of this timestamp's series on ``day``, if any.

        The result is a copy dated ``day`` (time, kind and repeater carried
        over), never the recurring template itself.

        Args:
            day: The candidate date.
            reference: What counts as "today" (default: the current date).
                Scheduled and deadline timestamps only recur forward for
                candidate dates after it; overdue items are tracked separately.
        """
        if self.kind in (TimestampKind.INACTIVE, TimestampKind.CLOSED):
            hit = day == self.date
        elif self.kind in (TimestampKind.SCHEDULED, TimestampKind.DEADLINE) and day <= (
            reference or today()
        ):
            hit = self.covers(day)
        elif self.repeater is None or self.is_range:
            hit = self.covers(day)
        else:
            hit = self._repeats_on(day)

        if not hit:
            return None
        return replace(self, date=day)

    def matches(self, day: dt.date, reference: dt.date | None = None) -> bool:
        return self.occurrence_on(day, reference) is not None

    def _repeats_on(self, day: dt.date) -> bool:
        assert self.repeater is not None
        if day < self.date:
            return False

        value = self.repeater.value
        unit = self.repeater.unit
        if unit is TimeUnit.DAY:
            return (day - self.date).days % value == 0
        if unit is TimeUnit.WEEK:
            return (day - self.date).days % (7 * value) == 0
        if unit is TimeUnit.MONTH:
            months = 12 * (day.year - self.date.year) + (day.month - self.date.month)
            return day.day == self.date.day and months % value == 0
        if unit is TimeUnit.YEAR:
            years = day.year - self.date.year
            same_day = (day.month, day.day) == (self.date.month, self.date.day)
            return same_day and years % value == 0
        # Hourly repeaters are dropped at parse time.
        return day == self.date

    def __str__(self) -> str:
        open_, close = ("[", "]") if not self.is_active else ("<", ">")
        start = _format_part(self.date, self.time, self.end_time if not self.is_range else None)
        extras = [str(x) for x in (self.repeater, self.delay) if x is not None]
        first = open_ + " ".join([start, *extras]) + close
        if self.end_date is None:
            return first
        second = open_ + _format_part(self.end_date, self.end_time, None) + close
        return f"{first}--{second}"

    def __repr__(self) -> str:
        return f"Timestamp({str(self)!r}, kind={self.kind.name})"


def _format_part(date: dt.date, time: dt.time | None, end_time: dt.time | None) -> str:
    text = f"{date:%Y-%m-%d} {_DAY_NAMES[date.weekday()]}"
    if time is not None:
        text += f" {time:%H:%M}"
        if end_time is not None:
            text += f"-{end_time:%H:%M}"
    return text


_PART_RE = re.compile(
    r"""
    ^
    (?P<open>[<\[])
    \s*
    (?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})
    (?:\s+(?P<dayname>[^\W\d_]+\.?))?
    (?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})
        (?:-(?P<end_hour>\d{1,2}):(?P<end_minute>\d{2}))?
        (?:\s*(?P<ampm>[AaPp][Mm]))?
    )?
    (?:\s+(?P<repeater>(?:\.\+|\+\+|\+)\d+[hdwmy]))?
    (?:\s+(?P<delay>--?\d+[hdwmy]))?
    \s*
    (?P<close>[>\]])
    $
    """,
    re.VERBOSE,
)

_RANGE_SEPARATOR_RE = re.compile(r"(?<=[>\]])--(?=[<\[])")

_REPEATER_RE = re.compile(r"^(?P<mark>\.\+|\+\+|\+)(?P<value>\d+)(?P<unit>[hdwmy])$")
_DELAY_RE = re.compile(r"^(?P<mark>--?)(?P<value>\d+)(?P<unit>[hdwmy])$")

# Finds timestamps (and ranges) embedded in free text.
TIMESTAMP_RE = re.compile(
    r"""
    [<\[] \d{4}-\d{1,2}-\d{1,2} [^<>\[\]\n]* [>\]]
    (?: -- [<\[] \d{4}-\d{1,2}-\d{1,2} [^<>\[\]\n]* [>\]] )?
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class _Part:
    is_active: bool
    date: dt.date
    time: dt.time | None
    end_time: dt.time | None
    repeater: Repeater | None
    delay: Delay | None


def _warn(diagnostics: WarningSink | None, message: str) -> None:
    if diagnostics is not None:
        diagnostics.warning(message)
    else:
        logger.debug(message)


def _to_hour(hour: int, ampm: str | None) -> int:
    if ampm is None:
        return hour
    if hour == 12:
        hour = 0
    if ampm.lower() == "pm":
        hour += 12
    return hour


def _make_time(hour: str, minute: str, ampm: str | None, text: str) -> dt.time:
    try:
        return dt.time(_to_hour(int(hour), ampm), int(minute))
    except ValueError as exc:
        msg = f"Invalid time in timestamp {text!r}: {exc}"
        raise TimestampError(msg) from exc


def _parse_repeater(token: str, text: str, diagnostics: WarningSink | None) -> Repeater | None:
    match = _REPEATER_RE.match(token)
    assert match is not None
    repeater = Repeater(
        mark=RepeaterMark(match["mark"]),
        value=int(match["value"]),
        unit=TimeUnit(match["unit"]),
    )
    if repeater.unit is TimeUnit.HOUR:
        _warn(diagnostics, f"Hourly repeater {token!r} is not supported, ignoring it in {text!r}")
        return None
    if repeater.value == 0:
        _warn(diagnostics, f"Repeater {token!r} has a zero interval, ignoring it in {text!r}")
        return None
    return repeater


def _parse_delay(token: str) -> Delay:
    match = _DELAY_RE.match(token)
    assert match is not None
    return Delay(
        mark=DelayMark(match["mark"]),
        value=int(match["value"]),
        unit=TimeUnit(match["unit"]),
    )


def _parse_part(text: str, diagnostics: WarningSink | None) -> _Part:
    match = _PART_RE.match(text)
    if match is None:
        msg = f"Cannot parse timestamp {text!r}"
        raise TimestampError(msg)
    if (match["open"] == "<") != (match["close"] == ">"):
        msg = f"Mismatched brackets in timestamp {text!r}"
        raise TimestampError(msg)

    try:
        date = dt.date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError as exc:
        msg = f"Invalid date in timestamp {text!r}: {exc}"
        raise TimestampError(msg) from exc

    ampm = match["ampm"]
    time = None
    end_time = None
    if match["hour"] is not None:
        time = _make_time(match["hour"], match["minute"], ampm, text)
    if match["end_hour"] is not None:
        end_time = _make_time(match["end_hour"], match["end_minute"], ampm, text)

    repeater = None
    if match["repeater"] is not None:
        repeater = _parse_repeater(match["repeater"], text, diagnostics)
    delay = _parse_delay(match["delay"]) if match["delay"] is not None else None

    return _Part(
        is_active=match["open"] == "<",
        date=date,
        time=time,
        end_time=end_time,
        repeater=repeater,
        delay=delay,
    )


def parse_timestamp(
    text: str,
    *,
    kind: TimestampKind | None = None,
    diagnostics: WarningSink | None = None,
) -> Timestamp:
    """Parse a timestamp such as ``<2018-09-15 Sat 10:00 +1w>`` or a ``--`` range.

    Args:
        text: The timestamp text, brackets included.
        kind: Kind assigned by the parse context (planning keyword). Defaults
            to active/inactive according to the brackets.
        diagnostics: Sink for soft problems. Dropped values (hourly or range
            repeaters, delays on a range end) are reported here.

    Raises:
        TimestampError: The text is not a timestamp or names an invalid date.
    """
    text = text.strip()
    pieces = _RANGE_SEPARATOR_RE.split(text)
    if len(pieces) > 2:
        msg = f"Too many range parts in timestamp {text!r}"
        raise TimestampError(msg)

    first = _parse_part(pieces[0], diagnostics)
    if kind is None:
        kind = TimestampKind.ACTIVE if first.is_active else TimestampKind.INACTIVE

    if len(pieces) == 1:
        return Timestamp(
            date=first.date,
            time=first.time,
            end_time=first.end_time,
            kind=kind,
            repeater=first.repeater,
            delay=first.delay,
        )

    last = _parse_part(pieces[1], diagnostics)
    repeater = first.repeater
    if first.repeater is not None and last.repeater is not None:
        _warn(diagnostics, f"Both parts of range {text!r} carry a repeater")
    if first.repeater is not None or last.repeater is not None:
        _warn(diagnostics, f"Repeating ranges are not supported, dropping repeater in {text!r}")
        repeater = None
    if last.delay is not None:
        _warn(diagnostics, f"Range end carries a delay, dropping it in {text!r}")

    return Timestamp(
        date=first.date,
        end_date=last.date,
        time=first.time,
        end_time=last.time,
        kind=kind,
        repeater=repeater,
        delay=first.delay,
    )


def find_timestamps(text: str, diagnostics: WarningSink | None = None) -> list[Timestamp]:
    """Return every parseable timestamp in ``text``, sorted.

    Unparseable candidates are reported to ``diagnostics`` and skipped.
    """
    timestamps: list[Timestamp] = []
    for match in TIMESTAMP_RE.finditer(text):
        try:
            timestamps.append(parse_timestamp(match[0], diagnostics=diagnostics))
        except TimestampError as exc:
            _warn(diagnostics, str(exc))
    timestamps.sort()
    return timestamps
