"""Body elements of a node (or of the document preamble) and the section holding them."""

import bisect
import datetime as dt
import re
from dataclasses import dataclass, field

from org_agenda.models.timestamp import Timestamp, find_timestamps
from org_agenda.protocols import WarningSink

DRAWER_END = ":END:"
PROPERTIES_DRAWER_NAME = "PROPERTIES"
LOGBOOK_DRAWER_NAME = "LOGBOOK"

_PROPERTY_RE = re.compile(r"^\s*:([^\s:]+):\s+(.*)$")


@dataclass
class Drawer:
    """A ``:NAME:`` ... ``:END:`` block. Contents are kept as raw lines."""

    name: str
    contents: list[str] = field(default_factory=list)

    @classmethod
    def from_properties(cls, properties: dict[str, str]) -> "Drawer":
        contents = [f":{key}: {value}" for key, value in properties.items()]
        return cls(name=PROPERTIES_DRAWER_NAME, contents=contents)

    def is_properties_drawer(self) -> bool:
        return self.name == PROPERTIES_DRAWER_NAME

    def as_properties(self) -> dict[str, str] | None:
        """Parse a property drawer into a mapping; None for other drawers.

        Lines not shaped like ``:KEY: value`` are ignored. Later keys win.
        """
        if not self.is_properties_drawer():
            return None
        properties: dict[str, str] = {}
        for line in self.contents:
            match = _PROPERTY_RE.match(line)
            if match:
                properties[match[1]] = match[2]
        return properties

    def __str__(self) -> str:
        return "\n".join([f":{self.name}:", *self.contents, DRAWER_END])


@dataclass
class Paragraph:
    """Plain content lines, blank lines included."""

    lines: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return "\n".join(self.lines)


def _prefixed(lines: list[str], prefix: str) -> str:
    return "\n".join(f"{prefix} {line}" if line else prefix for line in lines)


@dataclass
class Comment:
    """``#``-prefixed lines; ``lines`` hold the text after the prefix."""

    lines: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return _prefixed(self.lines, "#")


@dataclass
class FixedWidth:
    """``:``-prefixed lines; ``lines`` hold the text after the prefix."""

    lines: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return _prefixed(self.lines, ":")


@dataclass(frozen=True)
class HorizontalRule:
    def __str__(self) -> str:
        return "-" * 5


@dataclass
class Keyword:
    """An in-buffer setting such as ``#+TITLE: Notes``."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"#+{self.key}: {self.value}" if self.value else f"#+{self.key}:"


@dataclass
class Table:
    """Contiguous ``|`` lines. Column alignment is left to renderers."""

    lines: list[str] = field(default_factory=list)

    @property
    def rows(self) -> list[list[str] | None]:
        """Cells of each row; ``None`` marks a ``|---`` rule."""
        rows: list[list[str] | None] = []
        for line in self.lines:
            line = line.strip()
            if line.startswith("|-"):
                rows.append(None)
            else:
                rows.append([cell.strip() for cell in line.strip("|").split("|")])
        return rows

    def __str__(self) -> str:
        return "\n".join(self.lines)


@dataclass
class PlainList:
    """A plain list: item lines plus their more-indented continuation lines."""

    lines: list[str] = field(default_factory=list)
    indent: int = 0

    def __str__(self) -> str:
        return "\n".join(self.lines)


Element = Drawer | Paragraph | Comment | FixedWidth | HorizontalRule | Keyword | Table | PlainList


@dataclass
class Section:
    """The body of a node or of the document preamble.

    ``timestamps`` is the sorted union of every timestamp found in the
    section's content (paragraphs, lists and tables) plus, for nodes, the
    planning timestamps.
    """

    elements: list[Element] = field(default_factory=list)
    timestamps: list[Timestamp] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.elements

    def add_line(self, line: str, diagnostics: WarningSink | None = None) -> None:
        """Append a content line, extending the trailing paragraph if there is one."""
        last = self.elements[-1] if self.elements else None
        if isinstance(last, Paragraph):
            last.lines.append(line)
        else:
            self.elements.append(Paragraph(lines=[line]))
        self.add_timestamps(find_timestamps(line, diagnostics))

    def add_drawer(self, drawer: Drawer) -> None:
        self.elements.append(drawer)

    def add_element(self, element: Element, diagnostics: WarningSink | None = None) -> None:
        self.elements.append(element)
        if isinstance(element, (Paragraph, Table, PlainList)):
            self.add_timestamps(find_timestamps(str(element), diagnostics))

    def add_timestamps(self, timestamps: list[Timestamp]) -> None:
        for timestamp in timestamps:
            bisect.insort(self.timestamps, timestamp)

    def drawer(self, name: str) -> Drawer | None:
        """Return the first drawer called ``name``."""
        for element in self.elements:
            if isinstance(element, Drawer) and element.name == name:
                return element
        return None

    def keywords(self) -> dict[str, str]:
        return {e.key.upper(): e.value for e in self.elements if isinstance(e, Keyword)}

    def matches_date(self, day: dt.date, reference: dt.date | None = None) -> bool:
        return any(timestamp.matches(day, reference) for timestamp in self.timestamps)

    def timestamps_for_date(
        self, day: dt.date, reference: dt.date | None = None
    ) -> list[Timestamp]:
        """Concrete occurrences on ``day`` of every timestamp in the section."""
        occurrences = (timestamp.occurrence_on(day, reference) for timestamp in self.timestamps)
        return [occurrence for occurrence in occurrences if occurrence is not None]

    def __str__(self) -> str:
        return "\n".join(str(element) for element in self.elements)
