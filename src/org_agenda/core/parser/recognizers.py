"""Line recognizers: classify a line (plus lookahead) as one outline construct.

Each ``parse_*`` function returns None when the line is not of its shape.
The document builder tries them in a fixed order: headline, drawer,
planning, block element, and finally plain paragraph content.
"""

import re
from collections.abc import Sequence

from org_agenda.core.parser.line_parser import LineParser
from org_agenda.errors import TimestampError
from org_agenda.models.elements import (
    DRAWER_END,
    Comment,
    Drawer,
    Element,
    FixedWidth,
    HorizontalRule,
    Keyword,
    PlainList,
    Table,
)
from org_agenda.models.node import Headline, Planning
from org_agenda.models.timestamp import Timestamp, TimestampKind, parse_timestamp
from org_agenda.protocols import WarningSink

_HEADLINE_START_RE = re.compile(r"^(?P<stars>\*+)(?:\s|$)")

_HEADLINE_RE = re.compile(
    r"""
    ^
    (?:\[\#(?P<priority>.)\])?
    \s*
    (?P<comment>COMMENT(?:\s|$))?
    (?P<title>.*)
    $
    """,
    re.VERBOSE,
)

_TAGS_RE = re.compile(r":(?:[a-zA-Z0-9_@#%]*:)+")

_DRAWER_NAME_RE = re.compile(r"^:(?P<name>[a-zA-Z0-9_-]+):$")

_PLANNING_TIMESTAMP = r"[<\[][^>\]]*[>\]](?:--[<\[][^>\]]*[>\]])?"
_PLANNING_ITEM_RE = re.compile(
    rf"(?P<keyword>DEADLINE|SCHEDULED|CLOSED):\s+(?P<timestamp>{_PLANNING_TIMESTAMP})"
)
_PLANNING_LINE_RE = re.compile(
    rf"^\s*(?:\b(?:DEADLINE|SCHEDULED|CLOSED):\s+{_PLANNING_TIMESTAMP}\s*)+$"
)

_PLANNING_KINDS = {
    "SCHEDULED": TimestampKind.SCHEDULED,
    "DEADLINE": TimestampKind.DEADLINE,
    "CLOSED": TimestampKind.CLOSED,
}

_KEYWORD_RE = re.compile(r"^\s*#\+(?P<key>[^\s:]+):\s*(?P<value>.*?)\s*$")

_LIST_ITEM_RE = re.compile(
    r"^(?P<indent>\s*)(?P<bullet>[-+]|(?<=\s)\*|(?:\d+|[a-zA-Z])[.)])(?:\s|$)"
)


def is_headline(line: str) -> bool:
    return _HEADLINE_START_RE.match(line) is not None


def parse_headline(line: str, todo_keywords: Sequence[str]) -> Headline | None:
    """Parse ``** TODO [#A] COMMENT Title :tag1:tag2:``."""
    start = _HEADLINE_START_RE.match(line)
    if start is None:
        return None

    indent = len(start["stars"])
    text = line[indent:].strip()

    keyword = None
    for candidate in todo_keywords:
        if text == candidate or text.startswith(candidate + " "):
            keyword = candidate
            text = text[len(candidate) :].strip()
            break

    tags: tuple[str, ...] = ()
    parts = text.rsplit(None, 1)
    if len(parts) == 2 and _TAGS_RE.fullmatch(parts[1]):
        text = parts[0]
        tags = tuple(tag for tag in parts[1][1:-1].split(":") if tag)

    match = _HEADLINE_RE.match(text)
    assert match is not None, "headline pattern matches any text"

    return Headline(
        indent=indent,
        keyword=keyword,
        priority=match["priority"],
        is_commented=match["comment"] is not None,
        title=match["title"].strip(),
        tags=tags,
    )


def parse_drawer_name(line: str) -> str | None:
    match = _DRAWER_NAME_RE.match(line.strip())
    return match["name"] if match else None


def parse_drawer(line: str, parser: LineParser) -> Drawer | None:
    """Recognize ``:NAME:`` and gather the drawer body up to ``:END:``."""
    name = parse_drawer_name(line)
    if name is None or line.strip() == DRAWER_END:
        return None
    return Drawer(name=name, contents=parser.take_until(DRAWER_END))


def parse_planning(line: str, diagnostics: WarningSink | None = None) -> Planning | None:
    """Parse a line made only of ``KEYWORD: <timestamp>`` pairs, in any order.

    Unparseable timestamps are reported and skipped. Returns None when the
    line is not a planning line or none of its timestamps parse.
    """
    if not _PLANNING_LINE_RE.match(line):
        return None

    found: dict[str, Timestamp] = {}
    for match in _PLANNING_ITEM_RE.finditer(line):
        keyword = match["keyword"]
        try:
            timestamp = parse_timestamp(
                match["timestamp"], kind=_PLANNING_KINDS[keyword], diagnostics=diagnostics
            )
        except TimestampError as exc:
            if diagnostics is not None:
                diagnostics.warning(f"Skipping {keyword}: {exc}")
            continue
        if keyword in found and diagnostics is not None:
            diagnostics.warning(f"{keyword} is already set on this line")
        found[keyword] = timestamp

    if not found:
        return None
    return Planning(
        line=line,
        scheduled=found.get("SCHEDULED"),
        deadline=found.get("DEADLINE"),
        closed=found.get("CLOSED"),
    )


def _strip_prefix(line: str, prefix: str) -> str | None:
    line = line.strip()
    if line == prefix:
        return ""
    if line.startswith(prefix + " "):
        return line[len(prefix) + 1 :]
    return None


def _parse_prefixed_area(line: str, parser: LineParser, prefix: str) -> list[str] | None:
    first = _strip_prefix(line, prefix)
    if first is None:
        return None
    rest = parser.take_while(lambda next_line: _strip_prefix(next_line, prefix) is not None)
    return [first, *(_strip_prefix(extra, prefix) or "" for extra in rest)]


def is_horizontal_rule(line: str) -> bool:
    line = line.strip()
    return len(line) >= 5 and set(line) == {"-"}


def is_table_row(line: str) -> bool:
    return line.strip().startswith("|")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def list_item_indent(line: str) -> int | None:
    """Indent of a plain list item line, or None if ``line`` is not one."""
    match = _LIST_ITEM_RE.match(line)
    if match is None:
        return None
    return len(match["indent"])


def _parse_list(line: str, parser: LineParser) -> PlainList | None:
    list_indent = list_item_indent(line)
    if list_indent is None:
        return None

    lines = [line]
    was_blank = False
    while True:
        next_line = parser.peek()
        if next_line is None:
            break
        if not next_line.strip():
            # A single blank line may separate items; two end the list.
            if was_blank:
                break
            was_blank = True
        else:
            indent = _indent_of(next_line)
            if indent < list_indent:
                break
            if indent == list_indent and list_item_indent(next_line) != list_indent:
                break
            was_blank = False
        parser.next()
        lines.append(next_line)

    return PlainList(lines=lines, indent=list_indent)


def parse_element(line: str, parser: LineParser) -> Element | None:
    """Recognize block elements that may consume several contiguous lines."""
    keyword = _KEYWORD_RE.match(line)
    if keyword:
        return Keyword(key=keyword["key"], value=keyword["value"])

    comment = _parse_prefixed_area(line, parser, "#")
    if comment is not None:
        return Comment(lines=comment)

    fixed_width = _parse_prefixed_area(line, parser, ":")
    if fixed_width is not None:
        return FixedWidth(lines=fixed_width)

    if is_horizontal_rule(line):
        return HorizontalRule()

    if is_table_row(line):
        return Table(lines=[line, *parser.take_while(is_table_row)])

    return _parse_list(line, parser)
