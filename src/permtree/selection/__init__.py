"""Hierarchical selection engine.

Provides:
- ``SelectionMode`` / ``DisplayState``: semantics and rendering states
- ``legacy`` / ``smart``: pure select/deselect rules per mode
- ``compute_visual()``: smart-mode visual set derivation
- ``SelectionEngine``: mode dispatch over one forest snapshot
"""

from . import legacy, smart
from .engine import SelectionEngine, toggle_selection, visual_selection
from .modes import DisplayState, SelectionMode
from .smart import compute_visual

__all__ = [
    "DisplayState",
    "SelectionEngine",
    "SelectionMode",
    "compute_visual",
    "legacy",
    "smart",
    "toggle_selection",
    "visual_selection",
]
