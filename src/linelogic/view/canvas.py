"""
Circuit Canvas
==============
Pixel view of the grid: one cell per pixel, scaled up without smoothing.

The background layer (checkerboard + protection) is only rebuilt when a full
redraw was requested; wires, goals and the paste preview are painted on top
every frame.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import Qt, QRect
from PySide6.QtGui import QImage, QPainter, QMouseEvent, QPaintEvent
from PySide6.QtWidgets import QWidget, QSizePolicy

from linelogic.config import DEFAULT_SCALE
from linelogic.controller.input import Action
from linelogic.model.cells import Cell, signal_level
from linelogic.model.dirty import Invalidation

if TYPE_CHECKING:
    import numpy.typing as npt
    from linelogic.controller.input import InputController
    from linelogic.model.state import CircuitState

logger = logging.getLogger(__name__)


def render_background(cells: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Checkerboard, tinted green where cells are protected."""
    h, w = cells.shape
    ys, xs = np.indices((h, w))
    odd = ((xs % 2) ^ (ys % 2)) == 1
    protected = (cells & int(Cell.PROTECTED)) != 0

    rgb = np.zeros((h, w, 3), dtype=np.uint8)
    rgb[odd] = (32, 32, 32)
    rgb[protected & ~odd] = (0, 128, 0)
    rgb[protected & odd] = (32, 128, 32)
    return rgb


def render_cells(
    background: npt.NDArray[np.uint8],
    cells: npt.NDArray[np.uint8],
    goal_mask: npt.NDArray[np.bool_],
) -> npt.NDArray[np.uint8]:
    """Paint wires and goals over a copy of the background."""
    rgb = background.copy()
    wire = (cells & int(Cell.WIRE)) != 0
    signal = (cells & int(Cell.SIGNAL)) != 0
    protected = (cells & int(Cell.PROTECTED)) != 0
    level = signal_level(cells).astype(np.uint8)
    green = np.where(protected, 255, 128).astype(np.uint8)

    on = wire & signal
    off = wire & ~signal
    rgb[on, 0] = 255
    rgb[on, 1] = green[on]
    rgb[on, 2] = level[on]
    rgb[off, 0] = 0
    rgb[off, 1] = green[off]
    rgb[off, 2] = 255

    goal_on = goal_mask & signal
    goal_off = goal_mask & ~signal
    rgb[goal_on] = 0
    rgb[goal_on, 0] = 255
    rgb[goal_on, 2] = level[goal_on]
    rgb[goal_off] = (128, 0, 0)
    return rgb


def overlay_clipboard(
    rgb: npt.NDArray[np.uint8],
    clip: npt.NDArray[np.uint8],
    x0: int,
    y0: int,
    show_empty: bool,
) -> None:
    """Draw the clipboard with its corner at (x0, y0), clipped to the image."""
    h, w = rgb.shape[:2]
    ch, cw = clip.shape
    x1, y1 = min(x0 + cw, w), min(y0 + ch, h)
    if x0 < 0 or y0 < 0 or x1 <= x0 or y1 <= y0:
        return
    src = clip[: y1 - y0, : x1 - x0]
    dst = rgb[y0:y1, x0:x1]

    wire = (src & int(Cell.WIRE)) != 0
    energized = wire & ((src & int(Cell.SIGNAL)) != 0)
    dst[wire & ~energized] = (64, 192, 255)
    dst[energized] = (255, 192, 0)
    if show_empty:
        dst[~wire] = (64, 64, 64)


class CircuitCanvas(QWidget):
    def __init__(self, state: CircuitState, input_ctrl: InputController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.state = state
        self.input = input_ctrl
        self.scale: int = DEFAULT_SCALE

        self._background: Optional[npt.NDArray[np.uint8]] = None
        self._frame: Optional[npt.NDArray[np.uint8]] = None

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.NoFocus)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self._update_geometry()

        state.dirty.subscribe(Invalidation.FULL_REDRAW, self.update)

    # --- PUBLIC API ---

    def set_scale(self, scale: int) -> None:
        self.scale = max(1, int(scale))
        self._update_geometry()
        self.update()

    def grid_resized(self) -> None:
        self._update_geometry()
        self.state.dirty.mark(Invalidation.FULL_REDRAW)

    def grid_pos(self, event: QMouseEvent) -> tuple[int, int]:
        pos = event.position()
        return int(pos.x() // self.scale), int(pos.y() // self.scale)

    # --- RENDERING ---

    def _update_geometry(self) -> None:
        self.setFixedSize(self.state.width * self.scale, self.state.height * self.scale)

    def _compose(self) -> npt.NDArray[np.uint8]:
        cells = np.asarray(self.state.engine.cells)
        if self._background is None or self._background.shape[:2] != cells.shape \
                or self.state.dirty.consume(Invalidation.FULL_REDRAW):
            self._background = render_background(cells)

        goal_mask = np.zeros(cells.shape, dtype=bool)
        for goal in self.state.goals:
            goal_mask[goal.y, goal.x] = True
        rgb = render_cells(self._background, cells, goal_mask)

        if self.input.paste_preview and not self.state.clipboard.is_empty:
            x0, y0 = self.input.pointer
            overlay_clipboard(rgb, self.state.clipboard.cells, x0, y0,
                              show_empty=Action.PASTE in self.input.held)
        return np.ascontiguousarray(rgb)

    def paintEvent(self, event: QPaintEvent, /) -> None:
        self._frame = self._compose()
        h, w = self._frame.shape[:2]
        image = QImage(self._frame.data, w, h, 3 * w, QImage.Format_RGB888)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, False)
        painter.drawImage(QRect(0, 0, w * self.scale, h * self.scale), image)
        painter.end()

    # --- MOUSE ---

    def mousePressEvent(self, event: QMouseEvent, /) -> None:
        if event.button() == Qt.LeftButton:
            self.input.pointer_press(*self.grid_pos(event))
            event.accept()

    def mouseMoveEvent(self, event: QMouseEvent, /) -> None:
        self.input.pointer_move(*self.grid_pos(event))
        if self.input.paste_preview:
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent, /) -> None:
        if event.button() == Qt.LeftButton:
            self.input.pointer_release(*self.grid_pos(event))
            self.update()
            event.accept()
