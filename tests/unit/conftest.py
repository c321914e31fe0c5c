"""Shared test fixtures."""

import datetime as dt
from collections.abc import Callable
from pathlib import Path

import pytest

from org_agenda.core.document import Document

BUY_MILK = "* TODO [#A] Buy milk :errand:\nSCHEDULED: <2018-09-15 Sat>"

SAMPLE_DOCUMENT = """\
#+TITLE: Notes
* TODO [#A] Buy milk :errand:
SCHEDULED: <2018-09-15 Sat>
:PROPERTIES:
:CATEGORY: home
:Effort: 0:30
:END:
Remember the receipt.
** DONE Sub task
CLOSED: [2018-09-14 Fri 10:00]
* Weekly review
<2018-09-10 Mon 16:00 +1w>
- check inbox
- plan next week"""

CLOCKED_DOCUMENT = """\
#+TITLE: Work
* Website :PROJECT:
:LOGBOOK:
CLOCK: [2018-09-15 Sat 09:00]--[2018-09-15 Sat 09:20] =>  0:20
:END:
** Fix header
:LOGBOOK:
CLOCK: [2018-09-15 Sat 10:00]--[2018-09-15 Sat 11:10] =>  1:10
CLOCK: [2018-09-14 Fri 10:00]--[2018-09-14 Fri 10:30] =>  0:30
:END:
* Email
:LOGBOOK:
CLOCK: [2018-09-15 Sat 12:00]--[2018-09-15 Sat 12:30] =>  0:30
:END:"""

SATURDAY = dt.date(2018, 9, 15)


@pytest.fixture
def buy_milk() -> Document:
    return Document.from_string(BUY_MILK)


@pytest.fixture
def sample_document() -> Document:
    return Document.from_string(SAMPLE_DOCUMENT, path="notes.org")


@pytest.fixture
def write_org(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an org file below tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def clocked_text() -> str:
    return CLOCKED_DOCUMENT


@pytest.fixture
def saturday() -> dt.date:
    return SATURDAY


@pytest.fixture
def buy_milk_text() -> str:
    return BUY_MILK
