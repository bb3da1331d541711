"""
Goal Set
========
Watched coordinates whose state decides when a run is complete.

Classes:
    GoalMode: The completion predicate selected by the user.
    Goal: One watched cell plus the state it had at the last evaluation.
    GoalSet: Coordinate-keyed, insertion-ordered collection of goals.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, Iterator, Optional, Tuple, TYPE_CHECKING

from linelogic.model.cells import Cell

if TYPE_CHECKING:
    from linelogic.model.engine import SimulationEngine

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class GoalMode(StrEnum):
    IGNORE = "ignore"
    ALL = "all"
    ANY = "any"
    CHANGE = "change"


@dataclass
class Goal:
    x: int
    y: int
    # None until the first observation; never equal to a cell value.
    last_observed_state: Optional[int] = None

    @property
    def coord(self) -> Coord:
        return self.x, self.y


class GoalSet:
    """
    Goals keyed by (x, y). Iteration follows insertion order.
    """
    def __init__(self) -> None:
        self._goals: Dict[Coord, Goal] = {}

    def __len__(self) -> int:
        return len(self._goals)

    def __iter__(self) -> Iterator[Goal]:
        return iter(list(self._goals.values()))

    def __contains__(self, coord: object) -> bool:
        return coord in self._goals

    def get(self, x: int, y: int) -> Optional[Goal]:
        return self._goals.get((x, y))

    def add(self, x: int, y: int) -> bool:
        """Register a goal. Returns False if one already exists at (x, y)."""
        if (x, y) in self._goals:
            return False
        self._goals[(x, y)] = Goal(x, y)
        return True

    def remove(self, x: int, y: int) -> bool:
        """Unregister the goal at (x, y). Returns True if one was removed."""
        return self._goals.pop((x, y), None) is not None

    def clear(self) -> None:
        self._goals.clear()

    def retain_within(self, x_max: int, y_max: int) -> list[Goal]:
        """Drop goals with x >= x_max or y >= y_max. Returns the dropped goals."""
        dropped = [g for g in self._goals.values() if g.x >= x_max or g.y >= y_max]
        for goal in dropped:
            del self._goals[goal.coord]
        return dropped

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def observe(self, engine: SimulationEngine) -> None:
        """Refresh every goal's last observed state from the engine."""
        for goal in self._goals.values():
            goal.last_observed_state = engine.get_cell(goal.x, goal.y)

    def is_achieved(self, engine: SimulationEngine, mode: GoalMode) -> bool:
        """Apply the completion predicate without touching observations."""
        if mode == GoalMode.ALL:
            if not self._goals:
                return False
            return all(engine.get_cell(g.x, g.y) & Cell.SIGNAL for g in self._goals.values())

        if mode == GoalMode.ANY:
            return any(engine.get_cell(g.x, g.y) & Cell.SIGNAL for g in self._goals.values())

        if mode == GoalMode.CHANGE:
            return any(
                engine.get_cell(g.x, g.y) != g.last_observed_state for g in self._goals.values()
            )

        return False

    def evaluate(self, engine: SimulationEngine, mode: GoalMode) -> bool:
        """
        Apply the predicate, then refresh all observations regardless of mode.
        The refresh is what makes CHANGE edge-triggered.
        """
        achieved = self.is_achieved(engine, mode)
        self.observe(engine)
        return achieved
