"""Incremental line cursor with one line of lookahead."""

import io
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any, TextIO

from org_agenda.diagnostics import Diagnostics
from org_agenda.errors import SourceReadError


def _iter_text(handle: TextIO) -> Iterator[str]:
    for line in handle:
        yield line.rstrip("\r\n")


def _iter_file(handle: TextIO, path: Path) -> Iterator[str]:
    with handle:
        try:
            yield from _iter_text(handle)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(path, exc) from exc


def read_lines(path: str | Path) -> Iterator[str]:
    """Open ``path`` and return a lazy iterator over its lines.

    Opening happens right away so a missing file fails here, not on the
    first read.

    Raises:
        SourceReadError: The file cannot be opened. Read and decoding errors
            raised later while iterating use the same type.
    """
    path = Path(path)
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise SourceReadError(path, exc) from exc
    return _iter_file(handle, path)


class LineParser:
    """Pull lines one at a time from a fallible line source.

    Owns only parse-position state: the lookahead buffer, the running line
    counter and the diagnostics sink that stamps warnings with that counter.
    """

    def __init__(
        self,
        lines: Iterable[str],
        *,
        path: str | Path | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._lines = iter(lines)
        self.path = Path(path) if path is not None else None
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.line_number = 0

        self._lookahead: list[str] = []
        self._exhausted = False
        # A read error hit while peeking, raised by the following next().
        self._pending_error: SourceReadError | None = None

    @classmethod
    def from_string(cls, text: str, **kwargs: Any) -> "LineParser":
        """Read lines from ``text``, splitting on line endings exactly as files are split."""
        return cls(_iter_text(io.StringIO(text, newline=None)), **kwargs)

    @classmethod
    def from_path(cls, path: str | Path, **kwargs: Any) -> "LineParser":
        return cls(read_lines(path), path=path, **kwargs)

    def _fetch(self) -> str | None:
        if self._exhausted:
            return None
        try:
            return next(self._lines)
        except StopIteration:
            self._exhausted = True
            return None
        except SourceReadError:
            self._exhausted = True
            raise
        except OSError as exc:
            self._exhausted = True
            raise SourceReadError(self.path, exc) from exc

    def next(self) -> str | None:
        """Advance and return the next line, or None at end of input.

        Raises:
            SourceReadError: The underlying source failed.
        """
        if self._lookahead:
            line: str | None = self._lookahead.pop()
        elif self._pending_error is not None:
            error, self._pending_error = self._pending_error, None
            raise error
        else:
            line = self._fetch()

        if line is None:
            return None
        self.line_number += 1
        self.diagnostics.line = self.line_number
        return line

    def peek(self) -> str | None:
        """Return the next line without consuming it; None at end of input."""
        if self._lookahead:
            return self._lookahead[-1]
        if self._pending_error is not None:
            return None
        try:
            line = self._fetch()
        except SourceReadError as exc:
            self._pending_error = exc
            return None
        if line is not None:
            self._lookahead.append(line)
        return line

    def take_until(self, marker: str) -> list[str]:
        """Consume lines up to and including one equal to ``marker`` (after trimming).

        The marker line itself is not returned. Running out of input first is
        reported as a warning and whatever was collected is returned.
        """
        start = self.line_number
        lines: list[str] = []
        while True:
            line = self.next()
            if line is None:
                self.diagnostics.warning(
                    f"Expected {marker!r} before end of file (block opened on line {start})"
                )
                return lines
            if line.strip() == marker:
                return lines
            lines.append(line)

    def take_while(self, predicate: Callable[[str], bool]) -> list[str]:
        """Consume contiguous lines for which ``predicate`` holds."""
        lines: list[str] = []
        while True:
            line = self.peek()
            if line is None or not predicate(line):
                return lines
            self.next()
            lines.append(line)

    def warning(self, message: str) -> None:
        self.diagnostics.warning(message)
