"""
Edit Operations
===============
Point, line and rectangle mutators over the live circuit.

Why is this file needed?
------------------------
1. Guarding: Every edit honours the protection flag unless it is forced, and
   never lets a goal lose its protection through ordinary editing.
2. Consistency: Whenever a cell stops being a goal on the grid, the goal set
   forgets it too (and vice versa).
3. Bounds: Coordinates outside the grid are silently ignored. Point and line
   edits additionally keep off the 1-cell border.

Every successful mutation raises the dirty flags so renderers and other
observers can react.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Tuple

from linelogic.model.cells import Cell
from linelogic.model.dirty import Invalidation
from linelogic.model.state import CircuitState

logger = logging.getLogger(__name__)


class ClearTarget(StrEnum):
    WIRES = "wires"
    PROTECTION = "protection"
    GOALS = "goals"


def _normalize(x1: int, y1: int, x2: int, y2: int) -> Tuple[int, int, int, int]:
    return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)


class CircuitEditor:
    def __init__(self, state: CircuitState) -> None:
        self.state = state

    @property
    def engine(self):
        return self.state.engine

    def _changed(self) -> None:
        self.state.dirty.mark(Invalidation.ALL)

    def _drop_goal(self, x: int, y: int) -> None:
        """Unregister a goal and clear its flag on the grid."""
        if self.state.goals.remove(x, y):
            self.engine.sub_from_cell(x, y, Cell.GOAL)
            logger.debug(f"Goal at ({x}, {y}) removed.")

    # ------------------------------------------------------------------
    # Point edits
    # ------------------------------------------------------------------

    def toggle_point(self, x: int, y: int, force: bool = False) -> None:
        """Add a wire where there is none, otherwise clear the cell's material."""
        if not self.state.in_interior(x, y):
            return

        value = self.engine.get_cell(x, y)
        is_protected = bool(value & Cell.PROTECTED)
        if is_protected and not force:
            return

        if not value & Cell.WIRE:
            self.engine.add_to_cell(x, y, Cell.WIRE)
        else:
            self.engine.sub_from_cell(x, y, Cell.MATERIAL)
            if is_protected:
                self._drop_goal(x, y)
        self._changed()

    def _edit_cell(self, x: int, y: int, set_to: bool, force: bool) -> None:
        """Guarded per-cell edit shared by lines and rectangle erase."""
        is_protected = bool(self.engine.get_cell(x, y) & Cell.PROTECTED)
        if not is_protected or force:
            if set_to:
                self.engine.add_to_cell(x, y, Cell.WIRE)
            else:
                self.engine.sub_from_cell(x, y, Cell.WIRE | Cell.GOAL | Cell.SIGNAL)
        if is_protected and force and not set_to:
            self._drop_goal(x, y)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, set_to: bool = True, force: bool = False) -> None:
        """
        Draw an L-shaped orthogonal connector between two points.

        The longer axis is walked first at the start point's perpendicular
        coordinate, the shorter one second at the end point's.
        """
        if not (self.state.in_interior(x1, y1) and self.state.in_interior(x2, y2)):
            return

        lo_x, lo_y, hi_x, hi_y = _normalize(x1, y1, x2, y2)
        if abs(x2 - x1) >= abs(y2 - y1):
            for x in range(lo_x, hi_x + 1):
                self._edit_cell(x, y1, set_to, force)
            for y in range(lo_y, hi_y + 1):
                self._edit_cell(x2, y, set_to, force)
        else:
            for y in range(lo_y, hi_y + 1):
                self._edit_cell(x1, y, set_to, force)
            for x in range(lo_x, hi_x + 1):
                self._edit_cell(x, y2, set_to, force)
        self._changed()

    def toggle_protect(self, x: int, y: int) -> None:
        if not self.state.in_bounds(x, y) or (x, y) in self.state.goals:
            return
        self.engine.toggle_in_cell(x, y, Cell.PROTECTED)
        self._changed()

    def toggle_goal(self, x: int, y: int) -> None:
        if not self.state.in_interior(x, y):
            return
        if self.state.goals.add(x, y):
            self.engine.add_to_cell(x, y, Cell.WIRE | Cell.PROTECTED | Cell.GOAL)
            logger.debug(f"Goal placed at ({x}, {y}).")
        else:
            self._drop_goal(x, y)
        self._changed()

    # ------------------------------------------------------------------
    # Rectangle edits
    # ------------------------------------------------------------------

    def _rect_in_bounds(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        return self.state.in_bounds(x1, y1) and self.state.in_bounds(x2, y2)

    def rect_protect(self, x1: int, y1: int, x2: int, y2: int, set_to: bool = True) -> None:
        if not self._rect_in_bounds(x1, y1, x2, y2):
            return
        x1, y1, x2, y2 = _normalize(x1, y1, x2, y2)
        changed = False
        for y in range(y1, y2 + 1):
            for x in range(x1, x2 + 1):
                if (x, y) in self.state.goals:
                    continue
                if bool(self.engine.get_cell(x, y) & Cell.PROTECTED) != set_to:
                    self.engine.set_in_cell(x, y, Cell.PROTECTED, set_to)
                    changed = True
        if changed:
            self._changed()

    def rect_copy(self, x1: int, y1: int, x2: int, y2: int) -> None:
        if not self._rect_in_bounds(x1, y1, x2, y2):
            return
        x1, y1, x2, y2 = _normalize(x1, y1, x2, y2)
        clipboard = self.state.clipboard
        clipboard.resize(x2 - x1 + 1, y2 - y1 + 1)
        for y in range(y1, y2 + 1):
            for x in range(x1, x2 + 1):
                clipboard.cells[y - y1, x - x1] = self.engine.get_cell(x, y)
        logger.debug(f"Copied {clipboard.width} x {clipboard.height} region at ({x1}, {y1}).")
        self.state.dirty.mark(Invalidation.FULL_REDRAW)

    def rect_erase(self, x1: int, y1: int, x2: int, y2: int, force: bool = False) -> None:
        if not self._rect_in_bounds(x1, y1, x2, y2):
            return
        x1, y1, x2, y2 = _normalize(x1, y1, x2, y2)
        for y in range(y1, y2 + 1):
            for x in range(x1, x2 + 1):
                self._edit_cell(x, y, False, force)
        self._changed()

    def rect_cut(self, x1: int, y1: int, x2: int, y2: int, force: bool = False) -> None:
        self.rect_copy(x1, y1, x2, y2)
        self.rect_erase(x1, y1, x2, y2, force)

    def rect_paste(self, x1: int, y1: int, additive: bool = False, subtract: bool = False, force: bool = False) -> None:
        """
        Paste the clipboard with its top-left corner at (x1, y1).

        Cells landing on or beyond the far border are dropped. A forced paste
        removes a protected goal when the source cell has no wire or when the
        goal cell ends up without one.
        """
        state = self.state
        if not (1 <= x1 < state.width and 1 <= y1 < state.height):
            return

        clipboard = state.clipboard
        x2 = min(x1 + clipboard.width, state.width - 1)
        y2 = min(y1 + clipboard.height, state.height - 1)
        for y in range(y1, y2):
            for x in range(x1, x2):
                source = clipboard.get(x - x1, y - y1)
                is_protected = bool(self.engine.get_cell(x, y) & Cell.PROTECTED)
                if is_protected and not force:
                    continue

                if additive:
                    if subtract:
                        if source != 0:
                            self.engine.sub_from_cell(x, y, Cell.MATERIAL)
                    else:
                        self.engine.add_to_cell(x, y, source & Cell.MATERIAL)
                else:
                    self.engine.sub_from_cell(x, y, Cell.MATERIAL)
                    self.engine.add_to_cell(x, y, source & Cell.MATERIAL)

                # A protected goal loses its registration once it has no wire left
                if is_protected and (not source & Cell.WIRE or not self.engine.get_cell(x, y) & Cell.WIRE):
                    self._drop_goal(x, y)
        logger.debug(f"Pasted {clipboard.width} x {clipboard.height} clipboard at ({x1}, {y1}).")
        self._changed()

    # ------------------------------------------------------------------
    # Whole-grid edits
    # ------------------------------------------------------------------

    def reset_signals(self) -> None:
        """Clear every signal and resynchronize goal observations."""
        state = self.state
        self.engine.sub_from_all(Cell.SIGNAL)
        state.goals.observe(self.engine)
        logger.info("Signals reset.")
        self._changed()

    def clear(self, target: ClearTarget) -> None:
        state = self.state
        if target == ClearTarget.GOALS:
            for goal in state.goals:
                self._drop_goal(goal.x, goal.y)
        elif target == ClearTarget.PROTECTION:
            self.engine.sub_from_all(Cell.PROTECTED)
            for goal in state.goals:
                self.engine.add_to_cell(goal.x, goal.y, Cell.PROTECTED)
        else:
            self.engine.sub_from_all(Cell.MATERIAL, unless=Cell.PROTECTED)
        logger.info(f"Cleared {target}.")
        self._changed()

    def resize(self, width: int, height: int) -> None:
        """Resize the grid; goals that end up outside the new interior are dropped."""
        self.engine.resize(width, height)
        dropped = self.state.goals.retain_within(width - 1, height - 1)
        if dropped:
            logger.info(f"Resize dropped {len(dropped)} goal(s).")
        logger.info(f"Grid resized to {width} x {height}.")
        self._changed()
