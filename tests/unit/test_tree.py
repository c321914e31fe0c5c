"""Tests for the arena tree."""

import pytest

from org_agenda.core.tree.tree import ROOT_ID, Tree
from org_agenda.errors import TreeError


def test_insert_assigns_increasing_ids() -> None:
    tree: Tree[str] = Tree()
    first = tree.insert(ROOT_ID, "a")
    second = tree.insert(first, "b")
    third = tree.insert(ROOT_ID, "c")

    assert (first, second, third) == (1, 2, 3)
    assert len(tree) == 3
    assert tree.child_ids(ROOT_ID) == [first, third]
    assert tree.parent_id(second) == first


def test_insert_under_unknown_parent_raises() -> None:
    tree: Tree[str] = Tree()
    with pytest.raises(TreeError):
        tree.insert(42, "orphan")


def test_unknown_ids() -> None:
    tree: Tree[str] = Tree()
    assert tree.node(7) is None
    assert tree.parent(7) is None
    assert tree.child_ids(7) == []
    with pytest.raises(TreeError):
        tree[7]


def test_walk_is_preorder() -> None:
    """Children come right after their parent, in insertion order."""
    tree: Tree[str] = Tree()
    a = tree.insert(ROOT_ID, "a")
    tree.insert(ROOT_ID, "d")
    b = tree.insert(a, "b")
    tree.insert(b, "c")

    assert [tree[node_id] for node_id in tree.walk()] == ["a", "b", "c", "d"]
    assert [tree[node_id] for node_id in tree.walk(a)] == ["b", "c"]


def test_root_has_no_payload() -> None:
    tree: Tree[str] = Tree()
    assert tree.is_empty()
    assert ROOT_ID not in tree
    child = tree.insert(ROOT_ID, "a")
    assert tree.parent(child) is None
    assert tree.children(ROOT_ID) == ["a"]
