"""Unified exception hierarchy for permtree.

All errors inherit from PermTreeError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to classes (e.g. when a caller
  reports errors to a UI or an API layer)

Usage:
    from permtree.exceptions import (
        PermTreeError,
        TreeCycleError,
        UnknownNodeError,
    )
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "PermTreeError",
    "ConfigurationError",
    "TreeConstructionError",
    "DuplicateNodeError",
    "TreeCycleError",
    "UnknownNodeError",
    "SessionStateError",
    "PersistenceError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class PermTreeError(Exception):
    """Base exception for permtree.

    Attributes:
        code: Stable error code string (e.g. "TREE_CYCLE").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(PermTreeError, ValueError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class TreeConstructionError(PermTreeError):
    """Node records could not be linked into a valid forest."""

    code: str = "TREE_CONSTRUCTION_ERROR"
    message: str = "Invalid node tree"


class DuplicateNodeError(TreeConstructionError):
    """The same node id appears more than once."""

    code: str = "DUPLICATE_NODE"

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Duplicate node id: {node_id!r}", node_id=node_id)
        self.node_id = node_id


class TreeCycleError(TreeConstructionError):
    """Parent links form a cycle, so some nodes never reach a root."""

    code: str = "TREE_CYCLE"

    def __init__(self, node_ids: tuple[str, ...]) -> None:
        super().__init__(
            f"Parent links form a cycle; nodes unreachable from any root: {', '.join(node_ids)}",
            node_ids=node_ids,
        )
        self.node_ids = node_ids


class UnknownNodeError(PermTreeError, ValueError):
    """A selection operation named a node that is not in the tree."""

    code: str = "UNKNOWN_NODE"

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node {node_id!r} is not in the tree", node_id=node_id)
        self.node_id = node_id


class SessionStateError(PermTreeError):
    """Operation not allowed in the current edit-session state."""

    code: str = "SESSION_STATE_ERROR"


class PersistenceError(PermTreeError):
    """The permission store rejected an add/remove call."""

    code: str = "PERSISTENCE_ERROR"
    message: str = "Failed to update permissions"


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[PermTreeError])


class ErrorRegistry:
    """Registry for mapping stable error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[PermTreeError]] = {}

    def register(self, code: str, error_cls: type[PermTreeError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[PermTreeError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[PermTreeError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("ROLE_LOCKED")
        class RoleLockedError(PermTreeError):
            code = "ROLE_LOCKED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", PermTreeError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("TREE_CONSTRUCTION_ERROR", TreeConstructionError)
error_registry.register("DUPLICATE_NODE", DuplicateNodeError)
error_registry.register("TREE_CYCLE", TreeCycleError)
error_registry.register("UNKNOWN_NODE", UnknownNodeError)
error_registry.register("SESSION_STATE_ERROR", SessionStateError)
error_registry.register("PERSISTENCE_ERROR", PersistenceError)
