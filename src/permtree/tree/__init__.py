"""Permission tree structure and traversal.

Provides:
- ``TreeNode``: immutable node with ordered children
- ``NodeRecord`` / ``PermissionGrant``: validated collaborator records
- ``build_tree()``: link flat parent-pointer records into a forest
- Traversal helpers: ``find_node``, ``descendants_of``, ``all_ids_of``,
  ``parent_of``, ``ancestors_of``, ``index_nodes``
"""

from .build import build_tree
from .models import NodeRecord, PermissionGrant, TreeNode
from .traversal import (
    all_ids_of,
    ancestors_of,
    descendants_of,
    find_node,
    index_nodes,
    iter_nodes,
    iter_postorder,
    parent_of,
)

__all__ = [
    "NodeRecord",
    "PermissionGrant",
    "TreeNode",
    "all_ids_of",
    "ancestors_of",
    "build_tree",
    "descendants_of",
    "find_node",
    "index_nodes",
    "iter_nodes",
    "iter_postorder",
    "parent_of",
]
