"""Exception types raised by org-agenda.

Grammar irregularities in the input are never raised; they are collected as
diagnostics (see ``org_agenda.diagnostics``). Only the failures below escape.
"""

from pathlib import Path


class OrgError(Exception):
    """Base class for org-agenda errors."""


class SourceReadError(OrgError):
    """Reading lines from a file failed (missing, unreadable, undecodable)."""

    def __init__(self, path: str | Path | None, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        where = f" {str(path)!r}" if path is not None else ""
        super().__init__(f"Cannot read{where}: {cause}")


class TimestampError(OrgError, ValueError):
    """A timestamp could not be parsed (bad syntax or invalid calendar date)."""


class TreeError(OrgError, LookupError):
    """An id referenced by the tree does not exist. Indicates a programming error."""
