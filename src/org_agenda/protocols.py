"""Protocols for dependency injection in the parser."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class WarningSink(Protocol):
    """Receives soft parse problems (see ``org_agenda.diagnostics.Diagnostics``)."""

    def warning(self, message: str) -> None:
        """Record a problem that was resolved by a fallback."""
        ...
