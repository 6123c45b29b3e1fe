"""Selection semantics and display states.

Provides:
- ``SelectionMode``: legacy (whole-subtree toggles) or smart (inferred).
- ``DisplayState``: how a node renders for a given explicit selection.
"""

from __future__ import annotations

from enum import Enum


class SelectionMode(str, Enum):
    """Selection semantics used when toggling a node.

    ``legacy``: a parent and all of its descendants share one state; toggling
    an internal node writes the whole subtree into the explicit set.

    ``smart``: only the toggled node is recorded explicitly; coverage of
    descendants and ancestors is inferred when the visual set is computed.
    """

    LEGACY = "legacy"
    SMART = "smart"


class DisplayState(str, Enum):
    """Rendering state of a single node.

    ``DIRECT`` and ``IMPLIED`` both render as checked; ``DIRECT`` gets the
    stronger emphasis because the user chose it explicitly.
    """

    UNSELECTED = "unselected"
    IMPLIED = "implied"  # Checked only through inference
    DIRECT = "direct"  # Present in the explicit set

    @property
    def checked(self) -> bool:
        return self is not DisplayState.UNSELECTED


__all__ = [
    "DisplayState",
    "SelectionMode",
]
