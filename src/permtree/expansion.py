"""Expansion state: which subtrees are shown expanded.

Purely presentational and independent of selection. Like the selection
sets, expansion sets are frozensets and every helper returns a new one.
"""

from __future__ import annotations

from typing import Iterable

from .tree import TreeNode, ancestors_of, iter_nodes


def toggle_expanded(node_id: str, expansion: Iterable[str]) -> frozenset[str]:
    """Add ``node_id`` if absent, otherwise remove it."""
    expansion = frozenset(expansion)
    if node_id in expansion:
        return expansion - {node_id}
    return expansion | {node_id}


def expand_to(roots: Iterable[TreeNode], node_id: str, expansion: Iterable[str]) -> frozenset[str]:
    """Expand every ancestor of ``node_id`` so the node becomes visible.

    The node itself is not expanded. Unknown ids and roots leave the
    expansion unchanged.
    """
    return frozenset(expansion) | {ancestor.id for ancestor in ancestors_of(roots, node_id)}


def prune_expansion(roots: Iterable[TreeNode], expansion: Iterable[str]) -> frozenset[str]:
    """Drop ids that no longer name a node with children.

    Used after the node list is refreshed: deleted nodes and nodes that
    lost their last child cannot be expanded.
    """
    expandable = {node.id for node in iter_nodes(roots) if node.has_children}
    return frozenset(expansion) & expandable


__all__ = [
    "expand_to",
    "prune_expansion",
    "toggle_expanded",
]
