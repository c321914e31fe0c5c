"""Render a parsed document back to outline text.

Supported constructs (headlines, planning, property drawers, body lines)
round-trip structurally. Lists and tables are emitted as they were read.
"""

from typing import TYPE_CHECKING

from org_agenda.models.elements import Drawer
from org_agenda.models.node import Node

if TYPE_CHECKING:
    from org_agenda.core.document import Document


def render_node(node: Node) -> str:
    """Headline, planning line, property drawer and body of a single node."""
    return str(node)


def render_document(document: "Document") -> str:
    parts: list[str] = []
    if document.properties or document.has_property_drawer:
        parts.append(str(Drawer.from_properties(document.properties)))
    if not document.section.is_empty():
        parts.append(str(document.section))
    parts.extend(render_node(node) for node in document.walk())
    return "\n".join(parts)
