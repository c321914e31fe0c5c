"""Parse org-style outline files and build agendas from them."""

from org_agenda.core.agenda.agenda import (
    Agenda,
    AgendaEntry,
    AgendaEntryKind,
    AgendaRange,
    build_agenda,
)
from org_agenda.core.document import Document
from org_agenda.core.library import Library
from org_agenda.diagnostics import Diagnostic, Diagnostics
from org_agenda.errors import OrgError, SourceReadError, TimestampError, TreeError
from org_agenda.models.logbook import format_duration
from org_agenda.models.node import Headline, Node
from org_agenda.models.timestamp import Timestamp, TimestampKind, parse_timestamp

__all__ = [
    "Agenda",
    "AgendaEntry",
    "AgendaEntryKind",
    "AgendaRange",
    "Diagnostic",
    "Diagnostics",
    "Document",
    "Headline",
    "Library",
    "Node",
    "OrgError",
    "SourceReadError",
    "Timestamp",
    "TimestampError",
    "TimestampKind",
    "TreeError",
    "build_agenda",
    "format_duration",
    "parse_timestamp",
]
