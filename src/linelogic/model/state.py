"""
Circuit State (Data Model)
==========================
This module defines the central aggregate for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the engine handle, the goal set, the clipboard
   and the dirty tracker in one place.
2. Decoupling: Views read from this object; Controllers write to this object.

Classes:
    CircuitState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from linelogic.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from linelogic.model.clipboard import ClipboardBuffer
from linelogic.model.dirty import DirtyTracker
from linelogic.model.engine import GridEngine, SimulationEngine
from linelogic.model.goals import GoalMode, GoalSet

logger = logging.getLogger(__name__)


def _default_engine() -> SimulationEngine:
    return GridEngine(DEFAULT_WIDTH, DEFAULT_HEIGHT)


@dataclass
class CircuitState:
    """
    Owns everything the controllers mutate.
    Pass this instance to your Controllers and Views.
    """
    engine: SimulationEngine = field(default_factory=_default_engine)
    goals: GoalSet = field(default_factory=GoalSet)
    clipboard: ClipboardBuffer = field(default_factory=ClipboardBuffer)
    dirty: DirtyTracker = field(default_factory=DirtyTracker)

    # Read by the scheduler on every evaluation.
    goal_mode: GoalMode = GoalMode.IGNORE

    @property
    def width(self) -> int:
        return self.engine.width

    @property
    def height(self) -> int:
        return self.engine.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def in_interior(self, x: int, y: int) -> bool:
        """In bounds and off the 1-cell border reserved for layout."""
        return 1 <= x < self.width - 1 and 1 <= y < self.height - 1
