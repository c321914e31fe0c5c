"""CLI for org-agenda (agenda, clock report, reformat, JSON dump)."""

import datetime as dt
import itertools
import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from org_agenda.config import CLOCK_ROUND_MINUTES, PROJECT_TAG, resolve_org_directory
from org_agenda.core.agenda.agenda import Agenda, AgendaEntry, AgendaEntryKind, AgendaRange
from org_agenda.core.document import Document
from org_agenda.core.export.json_export import document_to_dict
from org_agenda.core.library import Library
from org_agenda.errors import SourceReadError
from org_agenda.logging_config import configure_logging
from org_agenda.models.logbook import format_duration
from org_agenda.models.node import Node
from org_agenda.models.timestamp import Timestamp, today

app = typer.Typer(help="org-agenda: agenda and clock reports for org outline files.")

PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Org files or directories (default: your org directory)"),
]

DateOption = Annotated[
    dt.datetime | None,
    typer.Option("--date", help="Reference date (default: today)", formats=["%Y-%m-%d"]),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _load_library(paths: list[Path] | None) -> Library:
    """Open every path into a fresh library, exiting on missing or unreadable input."""
    if not paths:
        default = resolve_org_directory()
        if default is None:
            logger.error("No paths given and no org directory found")
            raise typer.Exit(1)
        paths = [default]

    library = Library()
    for path in paths:
        if not path.exists():
            logger.error("Path not found: {}", path)
            raise typer.Exit(1)
        try:
            library.open(path)
        except SourceReadError as exc:
            logger.error("{}", exc)
            raise typer.Exit(1) from exc
    return library


def _open_document(path: Path) -> Document:
    if not path.exists():
        logger.error("Path not found: {}", path)
        raise typer.Exit(1)
    try:
        document = Document.open(path)
    except SourceReadError as exc:
        logger.error("{}", exc)
        raise typer.Exit(1) from exc
    for diagnostic in document.diagnostics:
        logger.warning("{}: {}", path, diagnostic)
    return document


def _format_time(timestamp: Timestamp) -> str:
    if timestamp.time is None:
        return ""
    text = f" {timestamp.time.hour:>2}:{timestamp.time:%M}"
    if timestamp.end_time is not None:
        return text + f"-{timestamp.end_time.hour:>2}:{timestamp.end_time:%M}"
    return text + "......"


_KIND_LABELS = {
    AgendaEntryKind.DEADLINE: " Deadline: ",
    AgendaEntryKind.SCHEDULED: " Scheduled:",
    AgendaEntryKind.NORMAL: "",
}


def format_entry(entry: AgendaEntry) -> str:
    """One agenda line: category, time, kind, keyword, priority, title, clocked/effort."""
    line = f"  {entry.category + ':':10}{_format_time(entry.timestamp)}{_KIND_LABELS[entry.kind]}"
    headline = entry.headline
    if headline.keyword:
        line += f" {headline.keyword}"
    if headline.priority:
        line += f" [#{headline.priority}]"
    line += f" {headline.title}"
    if entry.time_spent or entry.effort is not None:
        line += f" [{format_duration(entry.time_spent)}"
        if entry.effort is not None:
            line += f"/{format_duration(entry.effort)}"
        line += "]"
    return line


def format_agenda(agenda: Agenda, *, reference: dt.date) -> list[str]:
    """Plain-text agenda. Overdue items are listed under ``reference``."""
    title = "Weekly" if agenda.range is AgendaRange.WEEK else "Daily"
    lines = [f"==================== {title} Agenda ===================="]
    for index, day in enumerate(agenda.dates()):
        heading = f"{day:%A}".ljust(11) + f"{day.day:>2} {day:%B %Y}"
        if index == 0:
            heading += f" W{day:%W}"
        lines.append(heading)
        if day == reference:
            lines.extend(format_entry(entry) for entry in agenda.past_deadline)
            lines.extend(format_entry(entry) for entry in agenda.past_scheduled)
        lines.extend(format_entry(entry) for entry in agenda.entries_for(day))
    return lines


@app.command()
def agenda(
    paths: PathsArgument = None,
    week: bool = typer.Option(True, "--week/--day", help="Show a week or a single day"),
    date: DateOption = None,
) -> None:
    """Show the agenda for this week (or a single day)."""
    library = _load_library(paths)
    reference = date.date() if date is not None else today()
    agenda_range = AgendaRange.WEEK if week else AgendaRange.DAY
    result = library.agenda(agenda_range, reference, reference=reference)
    for line in format_agenda(result, reference=reference):
        typer.echo(line)


def round_duration(duration: dt.timedelta) -> dt.timedelta:
    """Round down to a whole number of ``CLOCK_ROUND_MINUTES``."""
    minutes = int(duration.total_seconds()) // 60
    return dt.timedelta(minutes=CLOCK_ROUND_MINUTES * (minutes // CLOCK_ROUND_MINUTES))


def _project_name(library: Library, node: Node) -> str:
    document = library[node.document_id]
    project = document.parent_with_tag(node.id, PROJECT_TAG)
    if project is not None:
        return project.title
    if document.title:
        return document.title
    return document.path.stem if document.path is not None else ""


@app.command(name="clock-report")
def clock_report(
    paths: PathsArgument = None,
    date: DateOption = None,
) -> None:
    """Show time clocked today, grouped by project."""
    library = _load_library(paths)
    reference = date.date() if date is not None else today()
    total = dt.timedelta(0)

    nodes = library.nodes_clocked_to_today(reference)
    for project_name, group in itertools.groupby(
        nodes, key=lambda node: _project_name(library, node)
    ):
        group_nodes = list(group)
        spent = sum(
            (node.time_spent_today(reference) for node in group_nodes), dt.timedelta(0)
        )
        total += spent
        typer.echo(f"{project_name}\t[{format_duration(round_duration(spent))}]")

        general = dt.timedelta(0)
        has_general = False
        for node in group_nodes:
            node_spent = node.time_spent_today(reference)
            # Time clocked on the project headline itself.
            if node.title == project_name:
                has_general = True
                general += node_spent
            else:
                typer.echo(f" - {node.title}\t[{format_duration(node_spent)}]")
        if has_general:
            typer.echo(f" - General tasks\t[{format_duration(general)}]")
        typer.echo()

    typer.echo(f"Total time spent\t[{format_duration(round_duration(total))}]")


@app.command(name="format")
def format_cmd(
    path: Path = typer.Argument(..., help="Org file to reformat"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Overwrite the file"),
) -> None:
    """Print a file in canonical form (or rewrite it with --in-place)."""
    document = _open_document(path)
    text = str(document)
    if in_place:
        path.write_text(text + "\n", encoding="utf-8")
        logger.info("Reformatted {}", path)
    else:
        typer.echo(text)


@app.command(name="json")
def json_cmd(
    paths: Annotated[list[Path], typer.Argument(help="Org files to dump")],
) -> None:
    """Dump parsed files as JSON."""
    documents = [document_to_dict(_open_document(path)) for path in paths]
    typer.echo(json.dumps(documents, indent=2, ensure_ascii=False))
