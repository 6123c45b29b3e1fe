"""Tests for expansion state helpers."""

from __future__ import annotations

from permtree import TreeNode, compute_visual, expand_to, prune_expansion, toggle_expanded


class TestToggleExpanded:
    """Tests for toggle_expanded."""

    def test_adds_when_absent(self) -> None:
        assert toggle_expanded("B", frozenset()) == {"B"}

    def test_removes_when_present(self) -> None:
        assert toggle_expanded("B", {"A", "B"}) == {"A"}

    def test_input_not_mutated(self) -> None:
        expansion = {"A"}
        toggle_expanded("A", expansion)
        assert expansion == {"A"}

    def test_independent_of_selection(self, roots: tuple[TreeNode, ...]) -> None:
        expansion = toggle_expanded("B", frozenset())
        assert compute_visual({"D"}, roots) == {"D"}
        assert expansion == {"B"}


class TestExpandTo:
    """Tests for revealing a node by expanding its ancestors."""

    def test_expands_ancestors_only(self, forest: tuple[TreeNode, ...]) -> None:
        assert expand_to(forest, "X1a", frozenset()) == {"X", "X1"}

    def test_keeps_existing(self, forest: tuple[TreeNode, ...]) -> None:
        assert expand_to(forest, "X2", {"Y"}) == {"X", "Y"}

    def test_root_and_unknown_are_noops(self, forest: tuple[TreeNode, ...]) -> None:
        assert expand_to(forest, "X", {"X1"}) == {"X1"}
        assert expand_to(forest, "missing", frozenset()) == frozenset()


class TestPruneExpansion:
    """Tests for dropping stale expansion entries."""

    def test_drops_unknown_and_leaf_ids(self, forest: tuple[TreeNode, ...]) -> None:
        assert prune_expansion(forest, {"X", "X1", "X2", "Y", "deleted"}) == {"X", "X1"}
