"""Convert parsed documents into JSON-serializable dicts."""

from typing import Any

from org_agenda.core.document import Document
from org_agenda.models.timestamp import Timestamp


def timestamp_to_dict(timestamp: Timestamp) -> dict[str, Any]:
    return {
        "text": str(timestamp),
        "kind": timestamp.kind.value,
        "date": timestamp.date.isoformat(),
        "time": timestamp.time.strftime("%H:%M") if timestamp.time else None,
        "end_date": timestamp.end_date.isoformat() if timestamp.end_date else None,
        "end_time": timestamp.end_time.strftime("%H:%M") if timestamp.end_time else None,
        "repeater": str(timestamp.repeater) if timestamp.repeater else None,
        "delay": str(timestamp.delay) if timestamp.delay else None,
    }


def _optional_timestamp(timestamp: Timestamp | None) -> dict[str, Any] | None:
    return timestamp_to_dict(timestamp) if timestamp is not None else None


def node_to_dict(document: Document, node_id: int) -> dict[str, Any]:
    """Serialize a node and, recursively, its children."""
    node = document[node_id]
    return {
        "id": node.id,
        "level": node.indent,
        "keyword": node.headline.keyword,
        "priority": node.headline.priority,
        "commented": node.headline.is_commented,
        "title": node.title,
        "tags": list(node.headline.tags),
        "properties": dict(node.properties),
        "category": document.node_category(node_id),
        "scheduled": _optional_timestamp(node.scheduled_for),
        "deadline": _optional_timestamp(node.deadline),
        "closed": _optional_timestamp(node.closed_at),
        "timestamps": [timestamp_to_dict(t) for t in node.section.timestamps],
        "body": str(node.section),
        "children": [node_to_dict(document, child_id) for child_id in document.child_ids(node_id)],
    }


def document_to_dict(document: Document) -> dict[str, Any]:
    """Serialize a whole document, including the diagnostics found while parsing.

    Args:
        document: The parsed document.

    Returns:
        Dict with ``path``, ``title``, ``properties``, ``preamble``,
        ``nodes`` (top-level nodes with nested children) and ``diagnostics``.
    """
    return {
        "id": document.id,
        "path": str(document.path) if document.path is not None else None,
        "title": document.title,
        "properties": dict(document.properties),
        "preamble": str(document.section),
        "nodes": [node_to_dict(document, node_id) for node_id in document.root_ids()],
        "diagnostics": [
            {"severity": d.severity.value, "message": d.message, "line": d.line}
            for d in document.diagnostics
        ],
    }
