"""
Raster Import
=============
Builds a circuit from decoded per-pixel colour triples.

Colour legend (r, g, b):
    b == 255                 -> plain wire
    r == 255 and g >= 128    -> energized wire, signal from b
    r >= 128 and g == 0      -> goal wire, signal from b (registered as goal)
    anything else            -> empty
Protected when g == 255, or r <= 32 and b <= 32 and g == 128, or the pixel
is a goal.

Decoding image files is left to the caller (the view uses QImage); this
module only consumes an (height, width, 3|4) integer array.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from linelogic.config import MAX_GRID_SIZE, MIN_GRID_SIZE
from linelogic.model.cells import Cell, SIGNAL_SHIFT
from linelogic.model.dirty import Invalidation

if TYPE_CHECKING:
    import numpy.typing as npt
    from linelogic.controller.editor import CircuitEditor

logger = logging.getLogger(__name__)


class RasterImportError(ValueError):
    """Raised when pixel data cannot be turned into a circuit."""


def _validate(pixels: object) -> npt.NDArray[np.int64]:
    if not isinstance(pixels, np.ndarray):
        raise RasterImportError(f"Expected a NumPy array of pixels, got {type(pixels).__name__}.")
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise RasterImportError(f"Expected shape (H, W, 3) or (H, W, 4), got {pixels.shape}.")
    if not np.issubdtype(pixels.dtype, np.integer):
        raise RasterImportError(f"Expected integer channels, got dtype {pixels.dtype}.")

    height, width = pixels.shape[:2]
    if not (MIN_GRID_SIZE <= width <= MAX_GRID_SIZE and MIN_GRID_SIZE <= height <= MAX_GRID_SIZE):
        raise RasterImportError(
            f"Raster size {width} x {height} outside [{MIN_GRID_SIZE}, {MAX_GRID_SIZE}]."
        )
    if pixels.min() < 0 or pixels.max() > 255:
        raise RasterImportError("Channel values must lie in [0, 255].")
    return pixels[:, :, :3].astype(np.int64)


def decode_cells(pixels: npt.NDArray) -> npt.NDArray[np.uint8]:
    """
    Map pixels to raw cell values.

    Raises:
        RasterImportError: If `pixels` is not a valid RGB(A) raster.
    """
    rgb = _validate(pixels)
    r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
    signal = (b << SIGNAL_SHIFT) & int(Cell.SIGNAL)

    plain = b == 255
    energized = ~plain & (r == 255) & (g >= 128)
    goal = ~plain & ~energized & (r >= 128) & (g == 0)

    cells = np.zeros(r.shape, dtype=np.int64)
    cells[plain] = int(Cell.WIRE)
    cells[energized] = int(Cell.WIRE) | signal[energized]
    cells[goal] = int(Cell.WIRE | Cell.GOAL) | signal[goal]

    protected = (g == 255) | ((r <= 32) & (b <= 32) & (g == 128)) | ((r >= 128) & (g == 0))
    cells[protected] |= int(Cell.PROTECTED)
    return cells.astype(np.uint8)


def import_raster(editor: CircuitEditor, pixels: npt.NDArray) -> int:
    """
    Replace the circuit with the one drawn in `pixels`.

    The grid takes the raster's size, existing goals are discarded and the
    1-cell border is left empty.

    Returns:
        Number of goals registered.
    """
    try:
        cells = decode_cells(pixels)
    except RasterImportError as e:
        logger.error(f"Raster import failed: {e}")
        raise

    height, width = cells.shape
    state = editor.state
    editor.resize(width, height)
    state.goals.clear()

    # The 1-cell border stays empty
    cells[[0, -1], :] = 0
    cells[:, [0, -1]] = 0
    state.engine.load(cells)

    # Row-major, so goals are registered top to bottom, left to right
    for y, x in np.argwhere(cells & int(Cell.GOAL)):
        state.goals.add(int(x), int(y))

    state.dirty.mark(Invalidation.ALL)
    logger.info(f"Imported {width} x {height} raster with {len(state.goals)} goal(s).")
    return len(state.goals)
