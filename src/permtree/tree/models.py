"""Tree data models.

``TreeNode`` is the immutable in-memory node; ``NodeRecord`` and
``PermissionGrant`` are Pydantic models for the flat records delivered by
the node-listing and role collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, Field, field_validator


@dataclass(frozen=True)
class TreeNode:
    """A node of the permission tree.

    - id: Unique across the whole forest
    - name: Display name
    - children: Ordered child nodes (order is for display only)
    - parent_id: Id of the node whose ``children`` contains this node,
      None for roots
    """

    id: str
    name: str
    children: tuple[TreeNode, ...] = field(default=(), repr=False)
    parent_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def child_ids(self) -> tuple[str, ...]:
        return tuple(child.id for child in self.children)


class NodeRecord(BaseModel):
    """Flat node record as listed by the node collaborator.

    Accepts wire names (``nodeId``, ``parentId``) as well as field names.
    A blank ``parentId`` is treated as absent.
    """

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    node_id: str = Field(alias="nodeId", min_length=1)
    name: str = ""
    parent_id: Optional[str] = Field(default=None, alias="parentId")

    @field_validator("parent_id", mode="before")
    @classmethod
    def blank_parent_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PermissionGrant(BaseModel):
    """A node permission previously granted to a role."""

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    node_id: str = Field(alias="nodeId", min_length=1)
    name: str = ""


__all__ = [
    "NodeRecord",
    "PermissionGrant",
    "TreeNode",
]
