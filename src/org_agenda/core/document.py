"""Document assembly and queries over the parsed outline tree."""

import datetime as dt
from collections.abc import Iterator, Sequence
from pathlib import Path

from loguru import logger

from org_agenda.config import CATEGORY_PROPERTY, TODO_KEYWORDS
from org_agenda.core.parser.line_parser import LineParser
from org_agenda.core.parser.recognizers import (
    parse_drawer,
    parse_element,
    parse_headline,
    parse_planning,
)
from org_agenda.core.tree.tree import Tree
from org_agenda.diagnostics import Diagnostics
from org_agenda.errors import TreeError
from org_agenda.models.elements import Drawer, Element, Keyword, Section
from org_agenda.models.node import Headline, Node, Planning
from org_agenda.models.timestamp import Timestamp


class Document:
    """One parsed outline file: preamble section, properties and a tree of nodes."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.id = 0
        self.path = Path(path) if path is not None else None
        self.title = ""
        self.section = Section()
        self.properties: dict[str, str] = {}
        self.has_property_drawer = False
        self.diagnostics = Diagnostics()
        self._tree: Tree[Node] = Tree()

    def __repr__(self) -> str:
        return f"Document(id={self.id!r}, path={self.path!r}, title={self.title!r})"

    def __len__(self) -> int:
        return len(self._tree)

    def __str__(self) -> str:
        from org_agenda.core.render import render_document

        return render_document(self)

    # --- Parsing ---

    @classmethod
    def from_string(
        cls,
        text: str,
        *,
        path: str | Path | None = None,
        todo_keywords: Sequence[str] = TODO_KEYWORDS,
    ) -> "Document":
        return cls.parse(LineParser.from_string(text, path=path), todo_keywords=todo_keywords)

    @classmethod
    def open(cls, path: str | Path, *, todo_keywords: Sequence[str] = TODO_KEYWORDS) -> "Document":
        """Parse the file at ``path``.

        Raises:
            SourceReadError: The file is missing or cannot be read.
        """
        document = cls.parse(LineParser.from_path(path), todo_keywords=todo_keywords)
        logger.debug(
            "Parsed {} ({} nodes, {} warnings)", path, len(document), len(document.diagnostics)
        )
        return document

    @classmethod
    def parse(
        cls, parser: LineParser, *, todo_keywords: Sequence[str] = TODO_KEYWORDS
    ) -> "Document":
        """Build a document in a single forward pass over ``parser``'s lines.

        Malformed input never raises; problems end up in ``diagnostics``.
        """
        document = cls(parser.path)
        document.diagnostics = parser.diagnostics
        diagnostics = parser.diagnostics
        current_id: int | None = None

        while True:
            line = parser.next()
            if line is None:
                break

            headline = parse_headline(line, todo_keywords)
            if headline is not None:
                current_id = document.add_new_node(current_id, headline)
                continue

            drawer = parse_drawer(line, parser)
            if drawer is not None:
                document._attach_drawer(current_id, drawer)
                continue

            planning = parse_planning(line, diagnostics)
            if planning is not None:
                document._attach_planning(current_id, planning, line)
                continue

            element = parse_element(line, parser)
            if element is not None:
                document._attach_element(current_id, element)
                continue

            document.section_of(current_id).add_line(line, diagnostics)

        return document

    def _attach_drawer(self, current_id: int | None, drawer: Drawer) -> None:
        section = self.section_of(current_id)
        properties = drawer.as_properties()
        if properties is None:
            section.add_drawer(drawer)
            return

        if current_id is None:
            accepted = not self.has_property_drawer and all(
                isinstance(element, Keyword) for element in section.elements
            )
            if accepted:
                self.has_property_drawer = True
                self.properties.update(properties)
        else:
            node = self[current_id]
            accepted = not node.has_property_drawer and section.is_empty()
            if accepted:
                node.has_property_drawer = True
                node.properties.update(properties)

        if not accepted:
            self.diagnostics.warning(
                "Property drawer must come right after the headline, keeping it as a drawer"
            )
            section.add_drawer(drawer)

    def _attach_planning(self, current_id: int | None, planning: Planning, line: str) -> None:
        if current_id is None:
            self.diagnostics.warning("Planning info found above first headline")
            self.section.add_line(line, self.diagnostics)
            return
        self[current_id].set_planning(planning, line, self.diagnostics)

    def _attach_element(self, current_id: int | None, element: Element) -> None:
        if current_id is None and isinstance(element, Keyword) and element.key.upper() == "TITLE":
            self.title = element.value
        self.section_of(current_id).add_element(element, self.diagnostics)

    def find_parent(self, current_id: int | None, indent: int) -> int | None:
        """Find the parent for a new headline of ``indent`` stars.

        Walks up from ``current_id`` while the node's indent is >= ``indent``.
        None means the new node goes at the top level.
        """
        parent_id = current_id
        if parent_id is not None and self.node(parent_id) is None:
            self.diagnostics.warning(f"Node not found: {parent_id}")
            return None

        while parent_id is not None and self[parent_id].indent >= indent:
            parent_id = self.parent_id(parent_id)

        expected = self[parent_id].indent + 1 if parent_id is not None else 1
        if indent > expected:
            self.diagnostics.warning(f"Indent is too deep: {indent} > {expected}")
        return parent_id

    def assign_id(self, document_id: int) -> None:
        """Set the document id (done by ``Library``) on the document and its nodes."""
        self.id = document_id
        for node in self.all_nodes():
            node.document_id = document_id

    def add_new_node(self, current_id: int | None, headline: Headline) -> int:
        parent_id = self.find_parent(current_id, headline.indent)
        node = Node(headline=headline, document_id=self.id)
        node.id = self._tree.insert(
            parent_id if parent_id is not None else self._tree.root_id, node
        )
        return node.id

    # --- Tree access ---

    def __getitem__(self, node_id: int) -> Node:
        return self._tree[node_id]

    def node(self, node_id: int) -> Node | None:
        return self._tree.node(node_id)

    def all_ids(self) -> Iterator[int]:
        return self._tree.all_ids()

    def all_nodes(self) -> Iterator[Node]:
        return self._tree.all_nodes()

    def walk(self, node_id: int | None = None) -> Iterator[Node]:
        """Yield nodes below ``node_id`` (default: all) in document order."""
        start = node_id if node_id is not None else self._tree.root_id
        for descendant_id in self._tree.walk(start):
            yield self._tree[descendant_id]

    def root_ids(self) -> list[int]:
        return self._tree.child_ids(self._tree.root_id)

    def roots(self) -> list[Node]:
        return self._tree.children(self._tree.root_id)

    def child_ids(self, node_id: int | None = None) -> list[int]:
        return self._tree.child_ids(node_id if node_id is not None else self._tree.root_id)

    def children(self, node_id: int | None = None) -> list[Node]:
        return self._tree.children(node_id if node_id is not None else self._tree.root_id)

    def parent_id(self, node_id: int) -> int | None:
        parent_id = self._tree.parent_id(node_id)
        return None if parent_id == self._tree.root_id else parent_id

    def parent(self, node_id: int) -> Node | None:
        parent_id = self.parent_id(node_id)
        return None if parent_id is None else self._tree.node(parent_id)

    def ancestor_ids(self, node_id: int) -> Iterator[int]:
        """Yield ``node_id`` and then each of its ancestors up to the top level."""
        current: int | None = node_id
        while current is not None:
            yield current
            current = self.parent_id(current)

    def section_of(self, node_id: int | None) -> Section:
        """The body of node ``node_id``, or the preamble for None."""
        if node_id is None:
            return self.section
        node = self.node(node_id)
        if node is None:
            msg = f"Unknown node id: {node_id!r}"
            raise TreeError(msg)
        return node.section

    # --- Queries ---

    def nodes_for_date(
        self, day: dt.date, reference: dt.date | None = None
    ) -> Iterator[tuple[Timestamp, Node]]:
        """Yield (occurrence, node) for every timestamp occurring on ``day``."""
        for node in self.walk():
            for occurrence in node.timestamps_for_date(day, reference):
                yield occurrence, node

    def nodes_past_scheduled(self, reference: dt.date | None = None) -> Iterator[Node]:
        return (node for node in self.walk() if node.is_past_scheduled(reference))

    def nodes_past_deadline(self, reference: dt.date | None = None) -> Iterator[Node]:
        return (node for node in self.walk() if node.is_past_deadline(reference))

    def nodes_clocked_to_today(self, reference: dt.date | None = None) -> Iterator[Node]:
        return (node for node in self.walk() if node.was_clocked_to_today(reference))

    # TODO: support extending inherited values with NAME+ properties
    def node_property(self, node_id: int, name: str) -> str | None:
        """Value of property ``name`` on the node or its nearest ancestor.

        Document-level properties act as the outermost ancestor.
        """
        for ancestor_id in self.ancestor_ids(node_id):
            node = self.node(ancestor_id)
            if node is not None and name in node.properties:
                return node.properties[name]
        return self.properties.get(name)

    def node_category(self, node_id: int) -> str | None:
        """``CATEGORY`` property, else ``#+CATEGORY:``, else the file stem."""
        category = self.node_property(node_id, CATEGORY_PROPERTY)
        if category is not None:
            return category
        category = self.section.keywords().get(CATEGORY_PROPERTY)
        if category:
            return category
        if self.path is not None:
            return self.path.stem
        return None

    def node_time_spent(self, node_id: int) -> dt.timedelta:
        """Clocked time of the node plus all of its descendants."""
        node = self.node(node_id)
        total = node.time_spent() if node is not None else dt.timedelta(0)
        for child_id in self.child_ids(node_id):
            total += self.node_time_spent(child_id)
        return total

    def parent_with_tag(self, node_id: int, tag: str) -> Node | None:
        """The node itself or its nearest ancestor carrying ``tag``."""
        for ancestor_id in self.ancestor_ids(node_id):
            node = self.node(ancestor_id)
            if node is not None and node.has_tag(tag):
                return node
        return None
