"""Configuration constants for org-agenda."""

import os
from pathlib import Path

# Keywords recognized at the start of a headline title.
TODO_KEYWORDS: tuple[str, ...] = ("TODO", "IN-PROGRESS", "DONE")

# Property names with special meaning.
CATEGORY_PROPERTY: str = "CATEGORY"
EFFORT_PROPERTY: str = "Effort"
STYLE_PROPERTY: str = "STYLE"
HABIT_STYLE: str = "habit"

# Files picked up when a directory is opened.
ORG_FILE_SUFFIX: str = ".org"

# Clock report totals are rounded down to this many minutes.
CLOCK_ROUND_MINUTES: int = 15

# Tag marking a project headline in the clock report.
PROJECT_TAG: str = "PROJECT"

# Directories with org files. First directory which is found is used.
ORG_DIRECTORIES: list[Path] = [
    Path("~/org").expanduser(),
    Path("~/Documents/org").expanduser(),
    Path("~/.local/share/org").expanduser(),
]

# Environment variable overriding ORG_DIRECTORIES.
ORG_DIRECTORY_ENV: str = "ORG_AGENDA_DIR"


def resolve_org_directory() -> Path | None:
    """Return the directory to read org files from, or None if none exists."""
    override = os.environ.get(ORG_DIRECTORY_ENV)
    if override:
        return Path(override).expanduser()
    for candidate in ORG_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return None
