"""Mode-aware selection engine.

``SelectionEngine`` binds a forest snapshot to a ``SelectionMode`` and
dispatches select/deselect/toggle to the legacy or smart rules. It never
holds selection state itself: every call takes the current explicit set
and returns a new one.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..exceptions import UnknownNodeError
from ..tree import TreeNode, index_nodes, iter_nodes
from . import legacy, smart
from .modes import DisplayState, SelectionMode

logger = logging.getLogger(__name__)


class SelectionEngine:
    """Selection operations over one immutable forest.

    Args:
        roots: Root nodes of the forest.
        mode: ``SelectionMode`` (or its string value). Defaults to smart.

    Raises:
        DuplicateNodeError: the forest repeats a node id.

    Example::

        engine = SelectionEngine(roots, SelectionMode.SMART)
        explicit = engine.select("D", frozenset())
        explicit = engine.select("E", explicit)
        engine.visual(explicit)                  # {"B", "D", "E"}
        engine.display_state("B", explicit)      # DisplayState.IMPLIED
    """

    __slots__ = ("roots", "mode", "_index")

    def __init__(
        self,
        roots: Iterable[TreeNode],
        mode: SelectionMode | str = SelectionMode.SMART,
    ) -> None:
        self.roots = tuple(roots)
        self.mode = SelectionMode(mode)
        self._index = index_nodes(self.roots)

    def node(self, node_id: str) -> TreeNode:
        """Return the node for ``node_id``.

        Raises:
            UnknownNodeError: ``node_id`` is not in the forest.
        """
        try:
            return self._index[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def select(self, node_id: str, explicit: Iterable[str]) -> frozenset[str]:
        """Apply the mode's select rule to ``node_id``."""
        node = self.node(node_id)
        if self.mode is SelectionMode.LEGACY:
            return legacy.select(node, explicit)
        return smart.select(node, explicit)

    def deselect(self, node_id: str, explicit: Iterable[str]) -> frozenset[str]:
        """Apply the mode's deselect rule to ``node_id``."""
        node = self.node(node_id)
        if self.mode is SelectionMode.LEGACY:
            return legacy.deselect(node, explicit)
        return smart.deselect(node, explicit)

    def set_selected(self, node_id: str, explicit: Iterable[str], selected: bool) -> frozenset[str]:
        """Select or deselect ``node_id`` as a checkbox change would."""
        if selected:
            return self.select(node_id, explicit)
        return self.deselect(node_id, explicit)

    def is_checked(self, node_id: str, explicit: Iterable[str]) -> bool:
        """Whether the checkbox for ``node_id`` renders as checked."""
        return node_id in self.visual(explicit)

    def toggle(self, node_id: str, explicit: Iterable[str]) -> frozenset[str]:
        """Flip the displayed checkbox of ``node_id``.

        In smart mode the displayed state is the visual state, so clicking an
        implied node deselects it (which only clears explicit descendants).
        """
        explicit = frozenset(explicit)
        checked = self.is_checked(node_id, explicit)
        result = self.set_selected(node_id, explicit, not checked)
        logger.debug(
            "Toggled %r (%s mode): %s, explicit %d -> %d",
            node_id,
            self.mode.value,
            "deselected" if checked else "selected",
            len(explicit),
            len(result),
        )
        return result

    def visual(self, explicit: Iterable[str]) -> frozenset[str]:
        """Ids that render as checked for ``explicit``."""
        if self.mode is SelectionMode.LEGACY:
            return frozenset(explicit)
        return smart.compute_visual(explicit, self.roots)

    def display_state(self, node_id: str, explicit: Iterable[str]) -> DisplayState:
        explicit = frozenset(explicit)
        if node_id in explicit:
            return DisplayState.DIRECT
        if node_id in self.visual(explicit):
            return DisplayState.IMPLIED
        return DisplayState.UNSELECTED

    def display_states(self, explicit: Iterable[str]) -> dict[str, DisplayState]:
        """``DisplayState`` for every node, in display (pre-)order."""
        explicit = frozenset(explicit)
        visual = self.visual(explicit)
        states: dict[str, DisplayState] = {}
        for node in iter_nodes(self.roots):
            if node.id in explicit:
                states[node.id] = DisplayState.DIRECT
            elif node.id in visual:
                states[node.id] = DisplayState.IMPLIED
            else:
                states[node.id] = DisplayState.UNSELECTED
        return states

    def __repr__(self) -> str:
        return f"SelectionEngine(nodes={len(self._index)}, mode={self.mode.value!r})"


def toggle_selection(
    roots: Iterable[TreeNode],
    node_id: str,
    explicit: Iterable[str],
    mode: SelectionMode | str = SelectionMode.SMART,
) -> frozenset[str]:
    """One-shot ``SelectionEngine(roots, mode).toggle(node_id, explicit)``."""
    return SelectionEngine(roots, mode).toggle(node_id, explicit)


def visual_selection(
    roots: Iterable[TreeNode],
    explicit: Iterable[str],
    mode: SelectionMode | str = SelectionMode.SMART,
) -> frozenset[str]:
    """One-shot ``SelectionEngine(roots, mode).visual(explicit)``."""
    return SelectionEngine(roots, mode).visual(explicit)


__all__ = [
    "SelectionEngine",
    "toggle_selection",
    "visual_selection",
]
