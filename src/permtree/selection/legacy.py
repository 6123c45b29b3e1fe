"""Legacy selection semantics.

A parent and all of its descendants share one selection state: toggling an
internal node writes (or clears) the whole subtree in the explicit set.
The visual set is the explicit set; there is no inference step.
"""

from __future__ import annotations

from typing import Iterable

from ..tree import TreeNode, all_ids_of


def _affected(node: TreeNode) -> frozenset[str]:
    if node.has_children:
        return all_ids_of(node)
    return frozenset({node.id})


def select(node: TreeNode, explicit: Iterable[str]) -> frozenset[str]:
    """Add ``node`` and, for internal nodes, its whole subtree."""
    return frozenset(explicit) | _affected(node)


def deselect(node: TreeNode, explicit: Iterable[str]) -> frozenset[str]:
    """Remove ``node`` and, for internal nodes, its whole subtree."""
    return frozenset(explicit) - _affected(node)


__all__ = ["deselect", "select"]
