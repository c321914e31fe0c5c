"""Arena tree: payloads addressed by stable integer ids."""

from collections.abc import Iterator
from typing import Generic, TypeVar

from org_agenda.errors import TreeError

T = TypeVar("T")

ROOT_ID = 0


class Tree(Generic[T]):
    """Payloads keyed by id, with parent and ordered children maps.

    Id 0 is a virtual root without payload. Ids are assigned from 1 upwards
    and never reused. Nodes are only ever appended as new leaves, so existing
    parent/child links never change once made.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, T] = {}
        self._children: dict[int, list[int]] = {}
        self._parents: dict[int, int] = {}
        self._next_id = ROOT_ID + 1

    @property
    def root_id(self) -> int:
        return ROOT_ID

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __getitem__(self, node_id: int) -> T:
        try:
            return self._nodes[node_id]
        except KeyError:
            msg = f"Unknown node id: {node_id!r}"
            raise TreeError(msg) from None

    def is_empty(self) -> bool:
        return not self._nodes

    def insert(self, parent_id: int, payload: T) -> int:
        """Append ``payload`` as the last child of ``parent_id`` and return its id.

        Raises:
            TreeError: ``parent_id`` is neither the root nor a known node.
        """
        if parent_id != ROOT_ID and parent_id not in self._nodes:
            msg = f"Cannot insert under unknown parent id {parent_id!r}"
            raise TreeError(msg)

        node_id = self._next_id
        self._next_id += 1
        self._nodes[node_id] = payload
        self._children.setdefault(parent_id, []).append(node_id)
        self._parents[node_id] = parent_id
        return node_id

    def node(self, node_id: int) -> T | None:
        return self._nodes.get(node_id)

    def all_ids(self) -> Iterator[int]:
        return iter(list(self._nodes))

    def all_nodes(self) -> Iterator[T]:
        return iter(list(self._nodes.values()))

    def child_ids(self, node_id: int) -> list[int]:
        return list(self._children.get(node_id, ()))

    def children(self, node_id: int) -> list[T]:
        return [self[child_id] for child_id in self.child_ids(node_id)]

    def parent_id(self, node_id: int) -> int | None:
        return self._parents.get(node_id)

    def parent(self, node_id: int) -> T | None:
        parent_id = self._parents.get(node_id)
        return None if parent_id is None else self._nodes.get(parent_id)

    def walk(self, node_id: int = ROOT_ID) -> Iterator[int]:
        """Yield descendant ids of ``node_id`` in document (pre-)order."""
        todo = list(reversed(self.child_ids(node_id)))
        while todo:
            current = todo.pop()
            yield current
            todo.extend(reversed(self.child_ids(current)))
