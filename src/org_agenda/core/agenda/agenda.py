"""Agenda: per-day lists of scheduled, deadline and active entries."""

import datetime as dt
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from org_agenda.core.document import Document
from org_agenda.models.node import Headline, Node
from org_agenda.models.timestamp import Timestamp, TimestampKind, today as current_date


class AgendaRange(Enum):
    DAY = "day"
    WEEK = "week"

    @property
    def days(self) -> int:
        return 7 if self is AgendaRange.WEEK else 1


class AgendaEntryKind(IntEnum):
    """Display kind of an entry. The order is the display order within a day."""

    DEADLINE = 0
    SCHEDULED = 1
    NORMAL = 2

    @classmethod
    def from_timestamp_kind(cls, kind: TimestampKind) -> "AgendaEntryKind":
        if kind is TimestampKind.DEADLINE:
            return cls.DEADLINE
        if kind is TimestampKind.SCHEDULED:
            return cls.SCHEDULED
        return cls.NORMAL


@dataclass(frozen=True)
class AgendaEntry:
    """One line of the agenda: a node and the occurrence that put it there."""

    document_id: int
    node_id: int
    headline: Headline
    category: str
    kind: AgendaEntryKind
    timestamp: Timestamp
    time_spent: dt.timedelta = dt.timedelta(0)
    effort: dt.timedelta | None = None

    @property
    def sort_key(self) -> tuple:
        return (self.kind, self.timestamp.sort_key, self.category)


@dataclass
class Agenda:
    start_date: dt.date
    range: AgendaRange
    entries: dict[dt.date, list[AgendaEntry]] = field(default_factory=dict)
    past_scheduled: list[AgendaEntry] = field(default_factory=list)
    past_deadline: list[AgendaEntry] = field(default_factory=list)

    def dates(self) -> list[dt.date]:
        """Every date in the agenda's range, in order, including empty ones."""
        return [self.start_date + dt.timedelta(days=i) for i in range(self.range.days)]

    def entries_for(self, day: dt.date) -> list[AgendaEntry]:
        return self.entries.get(day, [])

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.entries.values())


_VISIBLE_KINDS = (TimestampKind.ACTIVE, TimestampKind.SCHEDULED, TimestampKind.DEADLINE)


def start_of_range(reference_date: dt.date, agenda_range: AgendaRange) -> dt.date:
    """First day shown: the date itself, or the Monday of its week."""
    if agenda_range is AgendaRange.WEEK:
        return reference_date - dt.timedelta(days=reference_date.weekday())
    return reference_date


def _make_entry(document: Document, node: Node, timestamp: Timestamp) -> AgendaEntry:
    return AgendaEntry(
        document_id=document.id,
        node_id=node.id,
        headline=node.headline,
        category=document.node_category(node.id) or "",
        kind=AgendaEntryKind.from_timestamp_kind(timestamp.kind),
        timestamp=timestamp,
        time_spent=document.node_time_spent(node.id),
        effort=node.effort(),
    )


def _entries_on(document: Document, day: dt.date, reference: dt.date) -> Iterator[AgendaEntry]:
    for occurrence, node in document.nodes_for_date(day, reference):
        if node.is_habit() or occurrence.kind not in _VISIBLE_KINDS:
            continue
        yield _make_entry(document, node, occurrence)


def _sorted(entries: Iterable[AgendaEntry]) -> list[AgendaEntry]:
    return sorted(entries, key=lambda entry: entry.sort_key)


def build_agenda(
    documents: Iterable[Document],
    reference_date: dt.date,
    agenda_range: AgendaRange,
    *,
    today: dt.date | None = None,
) -> Agenda:
    """Build the agenda for ``agenda_range`` around ``reference_date``.

    Args:
        documents: Parsed documents to collect entries from.
        reference_date: A day inside the range. Weekly agendas start on
            the Monday of its week.
        agenda_range: One day or one week.
        today: What counts as the current date for recurrence and overdue
            checks. Defaults to the system date.

    Returns:
        The agenda, with each day's entries and both overdue buckets sorted
        deadlines first, then scheduled, then plain timestamps.
    """
    today = today or current_date()
    documents = list(documents)
    agenda = Agenda(start_date=start_of_range(reference_date, agenda_range), range=agenda_range)

    for day in agenda.dates():
        day_entries = [
            entry for document in documents for entry in _entries_on(document, day, today)
        ]
        if day_entries:
            agenda.entries[day] = _sorted(day_entries)

    past_scheduled: list[AgendaEntry] = []
    past_deadline: list[AgendaEntry] = []
    for document in documents:
        for node in document.nodes_past_scheduled(today):
            if not node.is_habit() and node.scheduled_for is not None:
                past_scheduled.append(_make_entry(document, node, node.scheduled_for))
        for node in document.nodes_past_deadline(today):
            if not node.is_habit() and node.deadline is not None:
                past_deadline.append(_make_entry(document, node, node.deadline))
    agenda.past_scheduled = _sorted(past_scheduled)
    agenda.past_deadline = _sorted(past_deadline)
    return agenda
