"""Structured diagnostics collected while parsing.

Soft problems in the input (late planning, indent too deep, bad timestamps,
...) do not stop parsing. They are recorded here with the line number they
were found on and the caller decides how to show them.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found in the input."""

    severity: Severity
    message: str
    line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.severity.value}: {self.message}"
        return f"line {self.line}: {self.severity.value}: {self.message}"


@dataclass
class Diagnostics:
    """Collects diagnostics; ``line`` is kept current by the line parser."""

    items: list[Diagnostic] = field(default_factory=list)
    line: int | None = None

    def warning(self, message: str) -> None:
        self._add(Severity.WARNING, message)

    def error(self, message: str) -> None:
        self._add(Severity.ERROR, message)

    def _add(self, severity: Severity, message: str) -> None:
        diagnostic = Diagnostic(severity=severity, message=message, line=self.line)
        self.items.append(diagnostic)
        logger.debug("{}", diagnostic)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)
