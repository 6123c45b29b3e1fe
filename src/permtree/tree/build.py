"""Forest construction from flat parent-pointer records.

The node collaborator lists nodes as ``{nodeId, name, parentId}``. This
module links them into an owned, acyclic forest in a single pass and
fails fast on duplicate ids or cyclic parent links.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable, Mapping, Optional, Union

from ..exceptions import DuplicateNodeError, TreeCycleError
from .models import NodeRecord, TreeNode

logger = logging.getLogger(__name__)

RecordLike = Union[NodeRecord, Mapping[str, Any]]


def _coerce(record: RecordLike) -> NodeRecord:
    if isinstance(record, NodeRecord):
        return record
    return NodeRecord.model_validate(record)


def build_tree(records: Iterable[RecordLike]) -> tuple[TreeNode, ...]:
    """Link flat node records into a forest of ``TreeNode`` roots.

    Records whose ``parent_id`` is absent or does not match any record
    become roots. Roots and children keep the input order.

    Args:
        records: ``NodeRecord`` instances or raw dicts with
                 ``nodeId``/``name``/``parentId`` keys.

    Returns:
        Tuple of root nodes.

    Raises:
        DuplicateNodeError: Two records share a node id.
        TreeCycleError: Parent links form a cycle (including a record
            that names itself as parent).
        pydantic.ValidationError: A raw record is malformed.

    Example::

        roots = build_tree([
            {"nodeId": "A", "name": "Root"},
            {"nodeId": "B", "name": "Child", "parentId": "A"},
        ])
        roots[0].children[0].id  # "B"
    """
    by_id: dict[str, NodeRecord] = {}
    for record in map(_coerce, records):
        if record.node_id in by_id:
            raise DuplicateNodeError(record.node_id)
        by_id[record.node_id] = record

    root_ids: list[str] = []
    children: dict[str, list[str]] = {node_id: [] for node_id in by_id}
    resolved_parent: dict[str, Optional[str]] = {}

    for node_id, record in by_id.items():
        parent_id = record.parent_id
        if parent_id is not None and parent_id in by_id:
            children[parent_id].append(node_id)
            resolved_parent[node_id] = parent_id
            continue
        if parent_id is not None:
            logger.warning("Node %r declares unknown parent %r; treating it as a root", node_id, parent_id)
        root_ids.append(node_id)
        resolved_parent[node_id] = None

    # Breadth-first from the roots: parents are always ordered before children
    order: list[str] = []
    queue = deque(root_ids)
    while queue:
        node_id = queue.popleft()
        order.append(node_id)
        queue.extend(children[node_id])

    if len(order) != len(by_id):
        reached = set(order)
        raise TreeCycleError(tuple(sorted(node_id for node_id in by_id if node_id not in reached)))

    built: dict[str, TreeNode] = {}
    for node_id in reversed(order):
        built[node_id] = TreeNode(
            id=node_id,
            name=by_id[node_id].name,
            children=tuple(built[child_id] for child_id in children[node_id]),
            parent_id=resolved_parent[node_id],
        )

    logger.debug("Built node tree: %d nodes, %d roots", len(built), len(root_ids))
    return tuple(built[node_id] for node_id in root_ids)


__all__ = [
    "RecordLike",
    "build_tree",
]
