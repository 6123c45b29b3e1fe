"""Shared fixtures: the reference permission tree.

    A
    ├── B
    │   ├── D
    │   └── E
    └── C
"""

from __future__ import annotations

import pytest

from permtree import TreeNode, build_tree

REFERENCE_RECORDS = [
    {"nodeId": "A", "name": "Application"},
    {"nodeId": "B", "name": "Reports", "parentId": "A"},
    {"nodeId": "C", "name": "Settings", "parentId": "A"},
    {"nodeId": "D", "name": "Daily", "parentId": "B"},
    {"nodeId": "E", "name": "Monthly", "parentId": "B"},
]


@pytest.fixture
def roots() -> tuple[TreeNode, ...]:
    return build_tree(REFERENCE_RECORDS)


@pytest.fixture
def forest() -> tuple[TreeNode, ...]:
    """Two roots, one three levels deep, built from nested literals."""
    return (
        TreeNode(
            "X",
            "Billing",
            children=(
                TreeNode(
                    "X1",
                    "Invoices",
                    children=(TreeNode("X1a", "Drafts", parent_id="X1"), TreeNode("X1b", "Sent", parent_id="X1")),
                    parent_id="X",
                ),
                TreeNode("X2", "Payments", parent_id="X"),
            ),
        ),
        TreeNode("Y", "Audit log"),
    )
