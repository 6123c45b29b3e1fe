"""Traversal helpers over an immutable forest of ``TreeNode``.

All helpers are pure: they never mutate their inputs and return freshly
built collections. Each call is linear in the size of the forest.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..exceptions import DuplicateNodeError, TreeConstructionError
from .models import TreeNode


def iter_nodes(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node in depth-first pre-order, roots in input order."""
    stack = list(reversed(tuple(roots)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_postorder(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node after all of its children (depth-first post-order)."""
    stack: list[tuple[TreeNode, bool]] = [(root, False) for root in reversed(tuple(roots))]
    while stack:
        node, visited = stack.pop()
        if visited or not node.children:
            yield node
            continue
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node.children))


def find_node(roots: Iterable[TreeNode], node_id: str) -> Optional[TreeNode]:
    """Return the first node with ``node_id``, or None if absent."""
    for node in iter_nodes(roots):
        if node.id == node_id:
            return node
    return None


def descendants_of(node: TreeNode) -> frozenset[str]:
    """Ids of every node below ``node`` at any depth, excluding ``node``."""
    return frozenset(n.id for n in iter_nodes(node.children))


def all_ids_of(node: TreeNode) -> frozenset[str]:
    """``node.id`` plus the ids of all of its descendants."""
    return descendants_of(node) | {node.id}


def parent_of(roots: Iterable[TreeNode], node_id: str) -> Optional[TreeNode]:
    """Return the node whose direct children contain ``node_id``.

    None when ``node_id`` is a root or not in the forest.
    """
    for node in iter_nodes(roots):
        if any(child.id == node_id for child in node.children):
            return node
    return None


def ancestors_of(roots: Iterable[TreeNode], node_id: str) -> tuple[TreeNode, ...]:
    """Parent chain of ``node_id``, nearest parent first, root last.

    Empty for roots and unknown ids.
    """
    parents: dict[str, TreeNode] = {}
    for node in iter_nodes(roots):
        for child in node.children:
            parents[child.id] = node

    chain: list[TreeNode] = []
    current = parents.get(node_id)
    while current is not None:
        chain.append(current)
        current = parents.get(current.id)
    return tuple(chain)


def index_nodes(roots: Iterable[TreeNode]) -> dict[str, TreeNode]:
    """Map every id in the forest to its node.

    Also checks that ``parent_id`` agrees with the nesting: a child's
    ``parent_id`` is either None or its container's id, and a root's
    ``parent_id`` never names a node of the forest.

    Raises:
        DuplicateNodeError: an id occurs more than once.
        TreeConstructionError: a ``parent_id`` contradicts the nesting.
    """
    roots = tuple(roots)
    index: dict[str, TreeNode] = {}
    for node in iter_nodes(roots):
        if node.id in index:
            raise DuplicateNodeError(node.id)
        index[node.id] = node
        for child in node.children:
            if child.parent_id is not None and child.parent_id != node.id:
                raise TreeConstructionError(
                    f"Node {child.id!r} declares parent {child.parent_id!r} but is nested under {node.id!r}",
                    node_id=child.id,
                    parent_id=child.parent_id,
                )

    for root in roots:
        if root.parent_id is not None and root.parent_id in index:
            raise TreeConstructionError(
                f"Root {root.id!r} declares parent {root.parent_id!r}, which is in the tree",
                node_id=root.id,
                parent_id=root.parent_id,
            )
    return index


__all__ = [
    "all_ids_of",
    "ancestors_of",
    "descendants_of",
    "find_node",
    "index_nodes",
    "iter_nodes",
    "iter_postorder",
    "parent_of",
]
