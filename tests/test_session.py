"""Tests for the permission edit session (confirm/cancel protocol)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from permtree import (
    PermissionEditSession,
    PermissionGrant,
    PermissionStore,
    PersistenceError,
    SelectionConfig,
    SelectionMode,
    SessionState,
    SessionStateError,
    TreeNode,
    build_tree,
    diff_selection,
    seed_selection,
)


class RecordingStore:
    """In-memory permission store that records calls in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, list[str]]] = []

    async def add_permissions(self, role_id: str, node_ids: list[str]) -> None:
        self.calls.append(("add", role_id, node_ids))

    async def remove_permissions(self, role_id: str, node_ids: list[str]) -> None:
        self.calls.append(("remove", role_id, node_ids))


class TestHelpers:
    """Tests for diff_selection and seed_selection."""

    def test_diff_selection(self) -> None:
        diff = diff_selection({"A", "B"}, {"B", "C"})
        assert diff.added == {"C"}
        assert diff.removed == {"A"}
        assert not diff.is_empty

    def test_empty_diff(self) -> None:
        assert diff_selection({"A"}, {"A"}).is_empty

    def test_seed_from_mixed_grants(self) -> None:
        grants = [
            {"name": "Reports", "nodeId": "B"},
            PermissionGrant(node_id="C"),
            "D",
            {"nodeId": "B"},
        ]
        assert seed_selection(grants) == {"B", "C", "D"}

    def test_recording_store_matches_protocol(self) -> None:
        assert isinstance(RecordingStore(), PermissionStore)


class TestSessionTransitions:
    """Tests for VIEWING/EDITING transitions."""

    def test_starts_viewing_persisted(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", grants=[{"nodeId": "D"}, {"nodeId": "E"}])
        assert session.state is SessionState.VIEWING
        assert session.explicit == {"D", "E"}
        assert session.visual == {"B", "D", "E"}

    def test_toggle_requires_editing(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        with pytest.raises(SessionStateError):
            session.toggle("A")

    def test_begin_edit_snapshots_persisted(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", grants=["C"])
        session.begin_edit()
        assert session.state is SessionState.EDITING
        session.toggle("D")
        session.toggle("E")
        assert session.explicit == {"C", "D", "E"}
        assert session.visual == {"A", "B", "C", "D", "E"}
        assert session.persisted == {"C"}

    def test_begin_edit_twice_rejected(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        with pytest.raises(SessionStateError):
            session.begin_edit()

    def test_cancel_discards_working_set(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", grants=["C"])
        session.begin_edit()
        session.select("A")
        session.deselect("C")
        session.cancel()
        assert session.state is SessionState.VIEWING
        assert session.explicit == {"C"}

    def test_cancel_requires_editing(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        with pytest.raises(SessionStateError):
            session.cancel()

    def test_pending_diff(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", grants=["C"])
        session.begin_edit()
        session.toggle("C")
        session.toggle("B")
        assert session.pending_diff.added == {"B"}
        assert session.pending_diff.removed == {"C"}

    def test_display_states_follow_working_set(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        session.toggle("B")
        states = session.display_states()
        assert states["B"].value == "direct"
        assert states["D"].value == "implied"

    def test_legacy_mode_session(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", mode=SelectionMode.LEGACY)
        session.begin_edit()
        assert session.toggle("B") == {"B", "D", "E"}

    def test_from_config_uses_selection_mode(self, roots: tuple[TreeNode, ...]) -> None:
        config = SelectionConfig(selection_mode="legacy")
        session = PermissionEditSession.from_config(config, roots, role_id="editor", grants=["C"])
        assert session.engine.mode is SelectionMode.LEGACY
        assert session.persisted == {"C"}
        session.begin_edit()
        assert session.toggle("B") == {"B", "C", "D", "E"}

    def test_from_config_defaults_to_smart(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession.from_config(SelectionConfig(), roots, role_id="editor")
        assert session.engine.mode is SelectionMode.SMART
        session.begin_edit()
        assert session.toggle("B") == {"B"}

    def test_switch_role_resets(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor", grants=["C"])
        session.begin_edit()
        session.toggle("D")
        session.switch_role("viewer", [{"nodeId": "A"}])
        assert session.role_id == "viewer"
        assert session.state is SessionState.VIEWING
        assert session.explicit == {"A"}

    def test_replace_tree_keeps_working_set(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        session.toggle("D")
        refreshed = build_tree(
            [
                {"nodeId": "A", "name": "A"},
                {"nodeId": "B", "name": "B", "parentId": "A"},
                {"nodeId": "D", "name": "D", "parentId": "B"},
            ]
        )
        session.replace_tree(refreshed)
        assert session.state is SessionState.EDITING
        assert session.explicit == {"D"}
        assert session.visual == {"A", "B", "D"}


class TestConfirm:
    """Tests for the async confirm path."""

    @pytest.mark.asyncio
    async def test_confirm_removes_then_adds(self, roots: tuple[TreeNode, ...]) -> None:
        store = RecordingStore()
        session = PermissionEditSession(roots, role_id="editor", grants=["D", "E"])
        session.begin_edit()
        session.toggle("D")
        session.toggle("C")

        diff = await session.confirm(store)

        assert diff.added == {"C"}
        assert diff.removed == {"D"}
        assert store.calls == [("remove", "editor", ["D"]), ("add", "editor", ["C"])]
        assert session.state is SessionState.VIEWING
        assert session.persisted == {"C", "E"}

    @pytest.mark.asyncio
    async def test_confirm_without_changes_skips_store(self, roots: tuple[TreeNode, ...]) -> None:
        store = RecordingStore()
        session = PermissionEditSession(roots, role_id="editor", grants=["A"])
        session.begin_edit()
        session.toggle("B")  # implied by A: no explicit change

        diff = await session.confirm(store)

        assert diff.is_empty
        assert store.calls == []
        assert session.state is SessionState.VIEWING

    @pytest.mark.asyncio
    async def test_failure_keeps_working_set(self, roots: tuple[TreeNode, ...]) -> None:
        store = AsyncMock()
        store.add_permissions.side_effect = RuntimeError("503 Service Unavailable")
        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        session.toggle("B")

        with pytest.raises(PersistenceError) as exc_info:
            await session.confirm(store)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.details["added"] == ["B"]
        assert session.state is SessionState.EDITING
        assert session.explicit == {"B"}
        assert session.persisted == frozenset()

        # Retry succeeds with the same working set
        retry_store = RecordingStore()
        await session.confirm(retry_store)
        assert retry_store.calls == [("add", "editor", ["B"])]
        assert session.persisted == {"B"}

    @pytest.mark.asyncio
    async def test_timeout_returns_to_editing(self, roots: tuple[TreeNode, ...]) -> None:
        class SlowStore(RecordingStore):
            async def add_permissions(self, role_id: str, node_ids: list[str]) -> None:
                await asyncio.sleep(10)

        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        session.toggle("D")

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(session.confirm(SlowStore()), timeout=0.05)

        assert session.state is SessionState.EDITING
        assert session.explicit == {"D"}
        assert session.persisted == frozenset()

        # Still editable and cancellable after the interrupted commit
        assert session.toggle("C") == {"C", "D"}
        session.cancel()
        assert session.state is SessionState.VIEWING
        assert session.explicit == frozenset()

    @pytest.mark.asyncio
    async def test_cancelled_task_returns_to_editing(self, roots: tuple[TreeNode, ...]) -> None:
        started = asyncio.Event()

        async def add_permissions(role_id: str, node_ids: list[str]) -> None:
            started.set()
            await asyncio.sleep(10)

        store = AsyncMock()
        store.add_permissions.side_effect = add_permissions
        session = PermissionEditSession(roots, role_id="editor")
        session.begin_edit()
        session.toggle("B")

        task = asyncio.create_task(session.confirm(store))
        await started.wait()
        assert session.state is SessionState.PERSISTING
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.state is SessionState.EDITING
        assert session.explicit == {"B"}

    @pytest.mark.asyncio
    async def test_toggle_rejected_while_persisting(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        observed: list[SessionState] = []

        async def add_permissions(role_id: str, node_ids: list[str]) -> None:
            observed.append(session.state)
            with pytest.raises(SessionStateError):
                session.toggle("C")

        store = AsyncMock()
        store.add_permissions.side_effect = add_permissions
        session.begin_edit()
        session.toggle("D")

        await session.confirm(store)

        assert observed == [SessionState.PERSISTING]
        assert session.persisted == {"D"}

    @pytest.mark.asyncio
    async def test_confirm_requires_role(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots)
        session.begin_edit()
        with pytest.raises(SessionStateError, match="without a role"):
            await session.confirm(RecordingStore())

    @pytest.mark.asyncio
    async def test_confirm_requires_editing(self, roots: tuple[TreeNode, ...]) -> None:
        session = PermissionEditSession(roots, role_id="editor")
        with pytest.raises(SessionStateError):
            await session.confirm(RecordingStore())
