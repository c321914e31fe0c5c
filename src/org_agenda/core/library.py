"""A collection of parsed documents addressed by document id."""

import datetime as dt
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from org_agenda.config import ORG_FILE_SUFFIX
from org_agenda.core.agenda.agenda import Agenda, AgendaRange, build_agenda
from org_agenda.core.document import Document
from org_agenda.models.node import Node
from org_agenda.models.timestamp import today


class Library:
    """Owns documents and hands out ids for them, starting at 1."""

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, document_id: int) -> Document:
        try:
            return self._documents[document_id]
        except KeyError:
            msg = f"Unknown document id: {document_id!r}"
            raise KeyError(msg) from None

    def documents(self) -> Iterator[Document]:
        return iter(list(self._documents.values()))

    def add(self, document: Document) -> int:
        """Take ownership of ``document`` and return its new id."""
        document_id = self._next_id
        self._next_id += 1
        document.assign_id(document_id)
        self._documents[document_id] = document
        return document_id

    def open(self, path: str | Path) -> list[int]:
        """Open a file, or every ``.org`` file below a directory.

        Returns:
            Ids of the documents added, in file name order.

        Raises:
            SourceReadError: A file is missing or cannot be read.
        """
        path = Path(path)
        if not path.is_dir():
            return [self.open_file(path)]

        ids: list[int] = []
        for child in sorted(path.iterdir()):
            if child.is_dir() or child.suffix == ORG_FILE_SUFFIX:
                ids.extend(self.open(child))
        logger.info("Loaded {} documents from {}", len(ids), path)
        return ids

    def open_file(self, path: str | Path) -> int:
        return self.add(Document.open(path))

    def agenda(
        self,
        agenda_range: AgendaRange,
        start_date: dt.date,
        *,
        reference: dt.date | None = None,
    ) -> Agenda:
        return build_agenda(self.documents(), start_date, agenda_range, today=reference)

    def agenda_today(self) -> Agenda:
        return self.agenda(AgendaRange.DAY, today())

    def agenda_this_week(self) -> Agenda:
        return self.agenda(AgendaRange.WEEK, today())

    def nodes_clocked_to_today(self, reference: dt.date | None = None) -> Iterator[Node]:
        """Nodes with a clock entry starting today, document by document."""
        for document in self.documents():
            yield from document.nodes_clocked_to_today(reference)
