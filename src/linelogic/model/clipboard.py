"""
Clipboard Buffer
================
A rectangular snapshot of raw cell values, independent of the live grid.

Coordinates are local to the buffer (0-based). Transforms rebuild the grid
from a copy of the previous state so no cell is read after it was written.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def _empty() -> npt.NDArray[np.uint8]:
    return np.zeros((0, 0), dtype=np.uint8)


@dataclass
class ClipboardBuffer:
    """Raw cell snapshot stored as a (height, width) uint8 array, indexed [y, x]."""
    cells: npt.NDArray[np.uint8] = field(default_factory=_empty)

    @classmethod
    def from_rows(cls, rows: list[list[int]]) -> ClipboardBuffer:
        if not rows:
            return cls()
        return cls(cells=np.array(rows, dtype=np.uint8))

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.cells.size == 0

    def get(self, x: int, y: int) -> int:
        return int(self.cells[y, x])

    def resize(self, width: int, height: int) -> None:
        """Resize in place; kept cells stay at their local coordinates, new cells are zero."""
        new_cells = np.zeros((height, width), dtype=np.uint8)
        keep_h = min(height, self.height)
        keep_w = min(width, self.width)
        new_cells[:keep_h, :keep_w] = self.cells[:keep_h, :keep_w]
        self.cells = new_cells

    def store(self, snapshot: npt.NDArray[np.uint8]) -> None:
        """Replace the buffer with a copy of `snapshot`."""
        self.resize(snapshot.shape[1], snapshot.shape[0])
        self.cells[:, :] = snapshot

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def flip_horizontal(self) -> None:
        """new[y][x] = old[y][w-1-x]"""
        old = self.cells.copy()
        self.cells = np.ascontiguousarray(old[:, ::-1])

    def flip_vertical(self) -> None:
        """new[y][x] = old[h-1-y][x]"""
        old = self.cells.copy()
        self.cells = np.ascontiguousarray(old[::-1, :])

    def rotate_ccw(self) -> None:
        """Swaps width and height. new[y][x] = old[x][w_old-1-y]"""
        old = self.cells.copy()
        self.cells = np.ascontiguousarray(np.rot90(old, k=1))

    def rotate_cw(self) -> None:
        """Swaps width and height. new[y][x] = old[h_old-1-x][y]"""
        old = self.cells.copy()
        self.cells = np.ascontiguousarray(np.rot90(old, k=-1))
