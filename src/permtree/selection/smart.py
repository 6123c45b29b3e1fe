"""Smart selection semantics.

The explicit set records only what the user checked directly. The visual
set is derived from it:

1. every explicit id is visual;
2. an explicit internal node makes its whole subtree visual;
3. an internal node whose direct children are all visual becomes visual,
   resolved bottom-up so full coverage climbs to the top of a covered
   subtree.

Leaves are never added by rule 3: an empty child list does not count as
full coverage.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..tree import TreeNode, descendants_of, index_nodes, iter_postorder

logger = logging.getLogger(__name__)


def select(node: TreeNode, explicit: Iterable[str]) -> frozenset[str]:
    """Record ``node`` as directly selected. Other ids are untouched."""
    return frozenset(explicit) | {node.id}


def deselect(node: TreeNode, explicit: Iterable[str]) -> frozenset[str]:
    """Drop ``node`` and any explicitly selected descendants.

    Clearing the descendants keeps a later re-select of ``node`` from
    resurrecting stale child selections that were hidden by inference.
    Deselecting a node that is only visually selected leaves ``explicit``
    unchanged apart from that cleanup.
    """
    return frozenset(explicit) - descendants_of(node) - {node.id}


def compute_visual(explicit: Iterable[str], roots: Iterable[TreeNode]) -> frozenset[str]:
    """Derive the visual selection for ``explicit`` over the forest ``roots``.

    Ids in ``explicit`` that are not in the tree are carried over as-is.

    Raises:
        DuplicateNodeError: the forest repeats a node id.

    Example::

        # A -> [B, C], B -> [D, E]
        compute_visual({"D", "E"}, roots)       # {"D", "E", "B"}
        compute_visual({"D", "E", "C"}, roots)  # {"A", "B", "C", "D", "E"}
        compute_visual({"A"}, roots)            # {"A", "B", "C", "D", "E"}
    """
    roots = tuple(roots)
    explicit = frozenset(explicit)
    index = index_nodes(roots)
    visual = set(explicit)

    # Downward: an explicit ancestor covers its whole subtree
    for node_id in explicit:
        node = index.get(node_id)
        if node is None:
            logger.debug("Explicit id %r is not in the tree; kept without propagation", node_id)
            continue
        if node.has_children:
            visual.update(descendants_of(node))

    # Upward: children are resolved before their parent
    for node in iter_postorder(roots):
        if node.has_children and node.id not in visual:
            if all(child.id in visual for child in node.children):
                visual.add(node.id)

    return frozenset(visual)


__all__ = ["compute_visual", "deselect", "select"]
