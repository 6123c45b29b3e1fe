"""Permission edit session: the confirm/cancel protocol around the engine.

A session shows a role's persisted node permissions, lets the user edit a
working copy with the selection engine, and commits the difference to a
``PermissionStore``.

States::

    VIEWING --begin_edit--> EDITING --toggle--> EDITING
    EDITING --cancel--> VIEWING
    EDITING --confirm--> PERSISTING --ok--> VIEWING
                                    --error/cancelled--> EDITING (working set kept)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Protocol, Union, runtime_checkable
from uuid import uuid4

from .config import SelectionConfig
from .exceptions import PersistenceError, SessionStateError
from .logging import get_session_logger, safe_preview
from .selection import DisplayState, SelectionEngine, SelectionMode
from .tree import PermissionGrant, TreeNode

GrantLike = Union[PermissionGrant, Mapping[str, Any], str]


class SessionState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    PERSISTING = "persisting"


@dataclass(frozen=True)
class SelectionDiff:
    """Node ids to grant and to revoke when committing an edit."""

    added: frozenset[str]
    removed: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def diff_selection(persisted: Iterable[str], working: Iterable[str]) -> SelectionDiff:
    """Plain set difference between the stored and the edited explicit sets."""
    persisted = frozenset(persisted)
    working = frozenset(working)
    return SelectionDiff(added=working - persisted, removed=persisted - working)


def seed_selection(grants: Iterable[GrantLike]) -> frozenset[str]:
    """Build an explicit selection from a role's granted permissions.

    Accepts ``PermissionGrant`` instances, raw ``{"nodeId": ...}`` dicts or
    bare node id strings.
    """
    node_ids: set[str] = set()
    for grant in grants:
        if isinstance(grant, str):
            node_ids.add(grant)
        elif isinstance(grant, PermissionGrant):
            node_ids.add(grant.node_id)
        else:
            node_ids.add(PermissionGrant.model_validate(grant).node_id)
    return frozenset(node_ids)


@runtime_checkable
class PermissionStore(Protocol):
    """External store of role → node permissions.

    Implementations wrap the remote permission API. Both calls receive a
    sorted list of node ids and raise on failure.
    """

    async def add_permissions(self, role_id: str, node_ids: list[str]) -> None: ...

    async def remove_permissions(self, role_id: str, node_ids: list[str]) -> None: ...


class PermissionEditSession:
    """Edit session for one role's node permissions.

    Args:
        roots: Forest the permissions refer to.
        role_id: Role being edited (None until a role is chosen).
        grants: Previously granted permissions, seeds the persisted set.
        mode: Selection semantics, smart by default.
        session_id: Identifier used in log records (random when omitted).

    Example::

        session = PermissionEditSession(roots, role_id="editor", grants=role.permissions)
        session.begin_edit()
        session.toggle("reports")
        diff = await session.confirm(store)
    """

    def __init__(
        self,
        roots: Iterable[TreeNode],
        *,
        role_id: Optional[str] = None,
        grants: Iterable[GrantLike] = (),
        mode: SelectionMode | str = SelectionMode.SMART,
        session_id: Optional[str] = None,
    ) -> None:
        self.engine = SelectionEngine(roots, mode)
        self.role_id = role_id
        self.session_id = session_id or uuid4().hex
        self._persisted = seed_selection(grants)
        self._working: Optional[frozenset[str]] = None
        self._state = SessionState.VIEWING
        self._logger = get_session_logger(__name__, role_id=role_id, session_id=self.session_id)

    @classmethod
    def from_config(
        cls,
        config: SelectionConfig,
        roots: Iterable[TreeNode],
        *,
        role_id: Optional[str] = None,
        grants: Iterable[GrantLike] = (),
        session_id: Optional[str] = None,
    ) -> PermissionEditSession:
        """Create a session using ``config.selection_mode``."""
        return cls(
            roots,
            role_id=role_id,
            grants=grants,
            mode=config.selection_mode,
            session_id=session_id,
        )

    # ── State ───────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def persisted(self) -> frozenset[str]:
        return self._persisted

    @property
    def explicit(self) -> frozenset[str]:
        """The working set while editing, the persisted set otherwise."""
        if self._working is not None:
            return self._working
        return self._persisted

    @property
    def visual(self) -> frozenset[str]:
        return self.engine.visual(self.explicit)

    @property
    def pending_diff(self) -> SelectionDiff:
        return diff_selection(self._persisted, self.explicit)

    def display_states(self) -> dict[str, DisplayState]:
        return self.engine.display_states(self.explicit)

    def _require(self, state: SessionState, action: str) -> None:
        if self._state is not state:
            raise SessionStateError(
                f"Cannot {action} while {self._state.value}",
                state=self._state.value,
            )

    # ── Transitions ─────────────────────────────────────

    def begin_edit(self) -> None:
        """VIEWING → EDITING: snapshot the persisted set into a working copy."""
        self._require(SessionState.VIEWING, "begin editing")
        self._working = self._persisted
        self._state = SessionState.EDITING
        self._logger.debug("Editing started with %d explicit node(s)", len(self._working))

    def toggle(self, node_id: str) -> frozenset[str]:
        """Flip the displayed checkbox of ``node_id`` in the working set."""
        self._require(SessionState.EDITING, "toggle nodes")
        self._working = self.engine.toggle(node_id, self.explicit)
        return self._working

    def select(self, node_id: str) -> frozenset[str]:
        self._require(SessionState.EDITING, "select nodes")
        self._working = self.engine.select(node_id, self.explicit)
        return self._working

    def deselect(self, node_id: str) -> frozenset[str]:
        self._require(SessionState.EDITING, "deselect nodes")
        self._working = self.engine.deselect(node_id, self.explicit)
        return self._working

    def cancel(self) -> None:
        """EDITING → VIEWING: discard the working set."""
        self._require(SessionState.EDITING, "cancel")
        self._working = None
        self._state = SessionState.VIEWING
        self._logger.debug("Editing cancelled")

    async def confirm(self, store: PermissionStore) -> SelectionDiff:
        """EDITING → PERSISTING → VIEWING: commit the working set.

        Revocations are sent before grants; an empty half is skipped.

        Returns:
            The committed ``SelectionDiff``.

        Raises:
            SessionStateError: Not editing, or no role selected.
            PersistenceError: The store failed. The session is back in
                EDITING with the working set intact, so the user can retry.
            asyncio.CancelledError: Re-raised as-is; the session is also
                back in EDITING.
        """
        self._require(SessionState.EDITING, "confirm")
        if not self.role_id:
            raise SessionStateError("Cannot confirm permissions without a role")

        working = self.explicit
        diff = diff_selection(self._persisted, working)
        self._state = SessionState.PERSISTING
        try:
            if diff.removed:
                await store.remove_permissions(self.role_id, sorted(diff.removed))
            if diff.added:
                await store.add_permissions(self.role_id, sorted(diff.added))
        except Exception as exc:
            self._state = SessionState.EDITING
            self._logger.error(
                "Permission update failed: %s (added=%s, removed=%s)",
                exc,
                safe_preview(diff.added),
                safe_preview(diff.removed),
            )
            raise PersistenceError(
                role_id=self.role_id,
                added=sorted(diff.added),
                removed=sorted(diff.removed),
            ) from exc
        except BaseException:
            # Cancellation (e.g. a caller's timeout) propagates unchanged
            self._state = SessionState.EDITING
            self._logger.warning("Permission update interrupted; working set kept")
            raise

        self._persisted = working
        self._working = None
        self._state = SessionState.VIEWING
        self._logger.info(
            "Permissions updated: %d added, %d removed",
            len(diff.added),
            len(diff.removed),
        )
        return diff

    def switch_role(self, role_id: Optional[str], grants: Iterable[GrantLike] = ()) -> None:
        """Show another role: replace the persisted set and drop any edit."""
        if self._state is SessionState.PERSISTING:
            raise SessionStateError("Cannot switch roles while persisting", state=self._state.value)
        if self._working is not None:
            self._logger.debug("Discarding unsaved edit on role switch")
        self.role_id = role_id
        self._logger.role_id = role_id
        self._persisted = seed_selection(grants)
        self._working = None
        self._state = SessionState.VIEWING

    def replace_tree(self, roots: Iterable[TreeNode]) -> None:
        """Swap in a refreshed forest, keeping the persisted and working sets."""
        if self._state is SessionState.PERSISTING:
            raise SessionStateError("Cannot replace the tree while persisting", state=self._state.value)
        self.engine = SelectionEngine(roots, self.engine.mode)

    def __repr__(self) -> str:
        return (
            f"PermissionEditSession(role_id={self.role_id!r}, state={self._state.value!r}, "
            f"explicit={len(self.explicit)})"
        )


__all__ = [
    "GrantLike",
    "PermissionEditSession",
    "PermissionStore",
    "SelectionDiff",
    "SessionState",
    "diff_selection",
    "seed_selection",
]
