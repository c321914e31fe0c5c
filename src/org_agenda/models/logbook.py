"""Clock entries read from a node's LOGBOOK drawer."""

import datetime as dt
from dataclasses import dataclass

from loguru import logger

from org_agenda.errors import TimestampError
from org_agenda.models.elements import Drawer
from org_agenda.models.timestamp import TIMESTAMP_RE, Timestamp, parse_timestamp, today
from org_agenda.protocols import WarningSink

CLOCK_MARKER = "CLOCK:"


def format_duration(duration: dt.timedelta) -> str:
    """Format a duration as ``H:MM``."""
    minutes = int(duration.total_seconds()) // 60
    return f"{minutes // 60}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ClockEntry:
    """One ``CLOCK: [start]--[end]`` line."""

    timestamp: Timestamp

    @classmethod
    def parse(cls, line: str, diagnostics: WarningSink | None = None) -> "ClockEntry | None":
        line = line.strip()
        if not line.startswith(CLOCK_MARKER):
            return None
        match = TIMESTAMP_RE.search(line, len(CLOCK_MARKER))
        if match is None:
            return None
        try:
            return cls(timestamp=parse_timestamp(match[0], diagnostics=diagnostics))
        except TimestampError as exc:
            if diagnostics is not None:
                diagnostics.warning(f"Skipping clock entry: {exc}")
            else:
                logger.debug("Skipping clock entry: {}", exc)
            return None

    def time_spent(self) -> dt.timedelta:
        return self.timestamp.duration()


@dataclass(frozen=True)
class Logbook:
    entries: tuple[ClockEntry, ...] = ()

    @classmethod
    def from_drawer(cls, drawer: Drawer | None) -> "Logbook":
        if drawer is None:
            return cls()
        entries = (ClockEntry.parse(line) for line in drawer.contents)
        return cls(entries=tuple(entry for entry in entries if entry is not None))

    def time_spent(self) -> dt.timedelta:
        return sum((entry.time_spent() for entry in self.entries), dt.timedelta(0))

    def time_spent_today(self, reference: dt.date | None = None) -> dt.timedelta:
        day = reference or today()
        return sum(
            (entry.time_spent() for entry in self.entries if entry.timestamp.date == day),
            dt.timedelta(0),
        )

    def was_clocked_to_today(self, reference: dt.date | None = None) -> bool:
        day = reference or today()
        return any(entry.timestamp.date == day for entry in self.entries)
