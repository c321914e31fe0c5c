"""Domain models for outline nodes."""

import datetime as dt
import re
from dataclasses import dataclass, field

from org_agenda.config import EFFORT_PROPERTY, HABIT_STYLE, STYLE_PROPERTY
from org_agenda.models.elements import LOGBOOK_DRAWER_NAME, Drawer, Section
from org_agenda.models.logbook import Logbook
from org_agenda.models.timestamp import Timestamp
from org_agenda.protocols import WarningSink

_EFFORT_RE = re.compile(r"^\s*(?P<hours>\d+):(?P<minutes>\d{2})\s*$")


@dataclass(frozen=True)
class Headline:
    """``STARS KEYWORD PRIORITY COMMENT TITLE TAGS``."""

    indent: int
    keyword: str | None = None
    priority: str | None = None
    is_commented: bool = False
    title: str = ""
    tags: tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = ["*" * self.indent]
        if self.keyword:
            parts.append(self.keyword)
        if self.priority:
            parts.append(f"[#{self.priority}]")
        if self.is_commented:
            parts.append("COMMENT")
        if self.title:
            parts.append(self.title)
        if self.tags:
            parts.append(":" + ":".join(self.tags) + ":")
        return " ".join(parts)


@dataclass(frozen=True)
class Planning:
    """SCHEDULED/DEADLINE/CLOSED timestamps from one planning line."""

    line: str
    scheduled: Timestamp | None = None
    deadline: Timestamp | None = None
    closed: Timestamp | None = None

    def is_empty(self) -> bool:
        return self.scheduled is None and self.deadline is None and self.closed is None

    def timestamps(self) -> list[Timestamp]:
        return [t for t in (self.deadline, self.scheduled, self.closed) if t is not None]

    def __str__(self) -> str:
        parts = []
        if self.scheduled is not None:
            parts.append(f"SCHEDULED: {self.scheduled}")
        if self.deadline is not None:
            parts.append(f"DEADLINE: {self.deadline}")
        if self.closed is not None:
            parts.append(f"CLOSED: {self.closed}")
        return " ".join(parts)


@dataclass
class Node:
    """A single headline with its properties, planning and body."""

    headline: Headline
    id: int = 0
    document_id: int = 0
    properties: dict[str, str] = field(default_factory=dict)
    section: Section = field(default_factory=Section)
    scheduled_for: Timestamp | None = None
    deadline: Timestamp | None = None
    closed_at: Timestamp | None = None
    has_property_drawer: bool = False

    @property
    def indent(self) -> int:
        return self.headline.indent

    @property
    def title(self) -> str:
        return self.headline.title

    def add_line(self, line: str, diagnostics: WarningSink | None = None) -> None:
        self.section.add_line(line, diagnostics)

    def has_planning(self) -> bool:
        return any(t is not None for t in (self.scheduled_for, self.deadline, self.closed_at))

    def planning(self) -> Planning | None:
        if not self.has_planning():
            return None
        return Planning(
            line="",
            scheduled=self.scheduled_for,
            deadline=self.deadline,
            closed=self.closed_at,
        )

    def set_planning(
        self, planning: Planning, line: str, diagnostics: WarningSink | None = None
    ) -> bool:
        """Attach planning info; only valid right after the headline.

        A duplicate or late planning line is reported and kept as body content.

        Returns:
            True if the planning was accepted.
        """
        if self.has_planning():
            reason = "Planning info already set"
        elif not self.section.is_empty() or self.has_property_drawer:
            reason = "Planning info must come immediately after the headline"
        else:
            self.scheduled_for = planning.scheduled
            self.deadline = planning.deadline
            self.closed_at = planning.closed
            self.section.add_timestamps(planning.timestamps())
            return True

        if diagnostics is not None:
            diagnostics.warning(f"{reason}, keeping line as text")
        self.add_line(line, diagnostics)
        return False

    def properties_drawer(self) -> Drawer | None:
        if not self.properties and not self.has_property_drawer:
            return None
        return Drawer.from_properties(self.properties)

    def matches_date(self, day: dt.date, reference: dt.date | None = None) -> bool:
        return self.section.matches_date(day, reference)

    def timestamps_for_date(
        self, day: dt.date, reference: dt.date | None = None
    ) -> list[Timestamp]:
        return self.section.timestamps_for_date(day, reference)

    def is_past_scheduled(self, reference: dt.date | None = None) -> bool:
        return self.scheduled_for is not None and self.scheduled_for.is_past(reference)

    def is_past_deadline(self, reference: dt.date | None = None) -> bool:
        return self.deadline is not None and self.deadline.is_past(reference)

    def property(self, name: str) -> str | None:
        return self.properties.get(name)

    def has_tag(self, tag: str) -> bool:
        return tag in self.headline.tags

    def is_habit(self) -> bool:
        return self.property(STYLE_PROPERTY) == HABIT_STYLE

    def effort(self) -> dt.timedelta | None:
        """Effort estimate from the ``Effort`` property (``H:MM``)."""
        effort = self.property(EFFORT_PROPERTY)
        match = _EFFORT_RE.match(effort) if effort is not None else None
        if match is None:
            return None
        return dt.timedelta(hours=int(match["hours"]), minutes=int(match["minutes"]))

    def drawer(self, name: str) -> Drawer | None:
        return self.section.drawer(name)

    # TODO: cache the logbook instead of reparsing the drawer on every call
    def logbook(self) -> Logbook:
        return Logbook.from_drawer(self.drawer(LOGBOOK_DRAWER_NAME))

    def time_spent(self) -> dt.timedelta:
        return self.logbook().time_spent()

    def time_spent_today(self, reference: dt.date | None = None) -> dt.timedelta:
        return self.logbook().time_spent_today(reference)

    def was_clocked_to_today(self, reference: dt.date | None = None) -> bool:
        return self.logbook().was_clocked_to_today(reference)

    def __str__(self) -> str:
        parts = [str(self.headline)]
        planning = self.planning()
        if planning is not None:
            parts.append(str(planning))
        drawer = self.properties_drawer()
        if drawer is not None:
            parts.append(str(drawer))
        if not self.section.is_empty():
            parts.append(str(self.section))
        return "\n".join(parts)
