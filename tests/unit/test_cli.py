"""Tests for the org-agenda CLI."""

import datetime as dt
import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from org_agenda.cli import app, round_duration

runner = CliRunner()


def test_agenda_day(write_org: Callable[[str, str], Path], buy_milk_text: str) -> None:
    path = write_org("todo.org", buy_milk_text)
    result = runner.invoke(app, ["agenda", str(path), "--day", "--date", "2018-09-15"])

    assert result.exit_code == 0
    assert "Daily Agenda" in result.stdout
    assert "Saturday   15 September 2018 W37" in result.stdout
    assert "  todo:      Scheduled: TODO [#A] Buy milk" in result.stdout


def test_agenda_week_lists_every_day(
    write_org: Callable[[str, str], Path], sample_text: str
) -> None:
    path = write_org("notes.org", sample_text)
    result = runner.invoke(app, ["agenda", str(path), "--date", "2018-09-15"])

    assert result.exit_code == 0
    assert "Weekly Agenda" in result.stdout
    assert "Monday     10 September 2018 W37" in result.stdout
    assert "Sunday     16 September 2018" in result.stdout
    assert "  notes:     16:00...... Weekly review" in result.stdout
    assert "Buy milk [0:00/0:30]" in result.stdout


def test_agenda_shows_overdue_under_today(
    write_org: Callable[[str, str], Path], buy_milk_text: str
) -> None:
    path = write_org("todo.org", buy_milk_text)
    result = runner.invoke(app, ["agenda", str(path), "--day", "--date", "2018-09-20"])

    assert result.exit_code == 0
    assert "Buy milk" in result.stdout


def test_agenda_missing_path(tmp_path: Path) -> None:
    result = runner.invoke(app, ["agenda", str(tmp_path / "missing.org")])
    assert result.exit_code == 1


def test_agenda_uses_org_dir_from_environment(
    tmp_path: Path,
    write_org: Callable[[str, str], Path],
    buy_milk_text: str,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    write_org("todo.org", buy_milk_text)
    monkeypatch.setenv("ORG_AGENDA_DIR", str(tmp_path))
    result = runner.invoke(app, ["agenda", "--day", "--date", "2018-09-15"])

    assert result.exit_code == 0
    assert "Buy milk" in result.stdout


def test_clock_report(write_org: Callable[[str, str], Path], clocked_text: str) -> None:
    path = write_org("work.org", clocked_text)
    result = runner.invoke(app, ["clock-report", str(path), "--date", "2018-09-15"])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[:3] == ["Website\t[1:30]", " - Fix header\t[1:10]", " - General tasks\t[0:20]"]
    assert "Work\t[0:30]" in lines
    assert " - Email\t[0:30]" in lines
    assert lines[-1] == "Total time spent\t[2:00]"


def test_format_prints_canonical_text(
    write_org: Callable[[str, str], Path], sample_text: str
) -> None:
    path = write_org("notes.org", sample_text)
    result = runner.invoke(app, ["format", str(path)])

    assert result.exit_code == 0
    assert result.stdout == sample_text + "\n"


def test_format_in_place(write_org: Callable[[str, str], Path]) -> None:
    path = write_org("messy.org", "*  TODO   Tidy")
    result = runner.invoke(app, ["format", str(path), "--in-place"])

    assert result.exit_code == 0
    assert path.read_text(encoding="utf-8") == "* TODO Tidy\n"


def test_json(write_org: Callable[[str, str], Path], buy_milk_text: str) -> None:
    path = write_org("todo.org", buy_milk_text)
    result = runner.invoke(app, ["json", str(path)])

    assert result.exit_code == 0
    (document,) = json.loads(result.stdout)
    assert document["nodes"][0]["title"] == "Buy milk"


def test_round_duration() -> None:
    assert round_duration(dt.timedelta(minutes=44)) == dt.timedelta(minutes=30)
    assert round_duration(dt.timedelta(minutes=45)) == dt.timedelta(minutes=45)
