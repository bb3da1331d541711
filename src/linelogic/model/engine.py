"""
Simulation Engine Contract
==========================
This module defines the narrow interface through which the controller talks
to the simulation engine, and a NumPy-backed grid engine implementing it.

Why is this file needed?
------------------------
1. Decoupling: The controller never touches cell memory directly. It only
   reads and mutates cells through the calls listed in `SimulationEngine`.
2. Pluggability: The transition rule (signal physics) is owned by whoever
   supplies the engine. `GridEngine` only stores cells and delegates `tick()`
   to an injected rule.

Note: Callers must pre-validate coordinates. The engine does not bounds-check
beyond what NumPy indexing does on its own.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# A transition rule maps the current cell grid to the next one.
TransitionRule = Callable[["npt.NDArray[np.uint8]"], "npt.NDArray[np.uint8]"]


class SimulationEngine(Protocol):
    """Calls the controller is allowed to issue against the engine."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def cells(self) -> npt.NDArray[np.uint8]: ...

    def resize(self, width: int, height: int) -> None: ...
    def tick(self) -> None: ...
    def get_cell(self, x: int, y: int) -> int: ...
    def set_cell(self, x: int, y: int, flags: int) -> None: ...
    def add_to_cell(self, x: int, y: int, flags: int) -> None: ...
    def sub_from_cell(self, x: int, y: int, flags: int) -> None: ...
    def toggle_in_cell(self, x: int, y: int, flags: int) -> None: ...
    def set_in_cell(self, x: int, y: int, flags: int, value: bool) -> None: ...
    def load(self, cells: npt.NDArray[np.uint8]) -> None: ...
    def sub_from_all(self, flags: int, unless: int = 0) -> None: ...
    def count(self, flags: int) -> int: ...


def _static_rule(cells: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    return cells


class GridEngine:
    """
    Cell storage implementing `SimulationEngine`.

    Cells live in a (height, width) uint8 array indexed as [y, x].
    """
    def __init__(self, width: int, height: int, rule: Optional[TransitionRule] = None) -> None:
        self._check_size(width, height)
        self._cells: npt.NDArray[np.uint8] = np.zeros((height, width), dtype=np.uint8)
        self.rule: TransitionRule = rule or _static_rule
        self.tick_count: int = 0

    @staticmethod
    def _check_size(width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Width and height must be > 0, got {width} x {height}.")

    # --- PROPERTIES ---

    @property
    def width(self) -> int:
        return self._cells.shape[1]

    @property
    def height(self) -> int:
        return self._cells.shape[0]

    @property
    def cells(self) -> npt.NDArray[np.uint8]:
        """Read-only view of the grid, for renderers."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    # --- LIFECYCLE ---

    def resize(self, width: int, height: int) -> None:
        """
        Re-register the grid at a new size.
        The interior of the overlapping region is kept, the border is cleared.
        """
        self._check_size(width, height)
        new_cells = np.zeros((height, width), dtype=np.uint8)

        copy_w = min(self.width, width)
        copy_h = min(self.height, height)
        if copy_w > 2 and copy_h > 2:
            new_cells[1:copy_h - 1, 1:copy_w - 1] = self._cells[1:copy_h - 1, 1:copy_w - 1]

        self._cells = new_cells
        logger.debug(f"Engine resized to {width} x {height}.")

    def tick(self) -> None:
        next_cells = self.rule(self._cells)
        if next_cells.shape != self._cells.shape:
            raise ValueError(
                f"Transition rule returned shape {next_cells.shape}, expected {self._cells.shape}."
            )
        self._cells = np.asarray(next_cells, dtype=np.uint8)
        self.tick_count += 1

    # --- CELL ACCESS ---

    def get_cell(self, x: int, y: int) -> int:
        return int(self._cells[y, x])

    def set_cell(self, x: int, y: int, flags: int) -> None:
        self._cells[y, x] = int(flags) & 0xFF

    def add_to_cell(self, x: int, y: int, flags: int) -> None:
        self._cells[y, x] |= int(flags) & 0xFF

    def sub_from_cell(self, x: int, y: int, flags: int) -> None:
        self._cells[y, x] &= 0xFF ^ (int(flags) & 0xFF)

    def toggle_in_cell(self, x: int, y: int, flags: int) -> None:
        self._cells[y, x] ^= int(flags) & 0xFF

    def set_in_cell(self, x: int, y: int, flags: int, value: bool) -> None:
        if value:
            self.add_to_cell(x, y, flags)
        else:
            self.sub_from_cell(x, y, flags)

    # --- BULK ACCESS ---

    def load(self, cells: npt.NDArray[np.uint8]) -> None:
        """Overwrite the whole grid. `cells` must match the current shape."""
        if cells.shape != self._cells.shape:
            raise ValueError(f"Cannot load shape {cells.shape} into a {self._cells.shape} grid.")
        self._cells[:, :] = cells

    def sub_from_all(self, flags: int, unless: int = 0) -> None:
        """Clear `flags` on every cell that carries none of the `unless` bits."""
        mask = np.uint8(0xFF ^ (int(flags) & 0xFF))
        if unless:
            keep = (self._cells & int(unless)) != 0
            self._cells[~keep] &= mask
        else:
            self._cells &= mask

    def count(self, flags: int) -> int:
        """Number of cells carrying any of `flags`."""
        return int(np.count_nonzero(self._cells & int(flags)))
