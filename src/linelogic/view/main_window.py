"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the Control Panel and the
Circuit Canvas, and drives the scheduler from a frame timer.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It forwards key events to the input adapter and connects global
   actions (Load image, Clear, Reset) to the controllers.
3. Timing: A QTimer calls `StepScheduler.step()` once per frame.
"""
from __future__ import annotations

import logging
import time

import numpy as np
from PySide6.QtCore import Qt, QTimer, QSettings
from PySide6.QtGui import QAction, QImage, QKeyEvent
from PySide6.QtWidgets import QMainWindow, QWidget, QHBoxLayout, QScrollArea, QFileDialog, QMessageBox

from linelogic.application import VISIBLE_APP_NAME
from linelogic.config import DEFAULT_HEIGHT, DEFAULT_SCALE, DEFAULT_WIDTH, FRAME_INTERVAL_MS
from linelogic.controller.editor import CircuitEditor, ClearTarget
from linelogic.controller.importer import RasterImportError, import_raster
from linelogic.controller.input import InputController
from linelogic.controller.scheduler import FrameStatus, StepScheduler
from linelogic.model.dirty import Invalidation
from linelogic.model.state import CircuitState
from linelogic.view.canvas import CircuitCanvas
from linelogic.view.control_panel import ControlPanel

logger = logging.getLogger(__name__)


def read_image_pixels(path: str) -> np.ndarray:
    """
    Decode an image file into an (H, W, 3) uint8 array.

    Raises:
        RasterImportError: If Qt cannot decode the file.
    """
    image = QImage(path)
    if image.isNull():
        raise RasterImportError(f"Could not decode image '{path}'.")
    image = image.convertToFormat(QImage.Format_RGB888)
    w, h = image.width(), image.height()
    buffer = np.frombuffer(image.constBits(), dtype=np.uint8, count=image.sizeInBytes())
    # Rows are padded to bytesPerLine
    return buffer.reshape(h, image.bytesPerLine())[:, : w * 3].reshape(h, w, 3).copy()


class MainWindow(QMainWindow):
    def __init__(self, state: CircuitState) -> None:
        super().__init__()
        self.state = state
        self.settings = QSettings()

        self.editor = CircuitEditor(state)
        self.scheduler = StepScheduler(state)
        self.input = InputController(self.editor, self.scheduler)

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1000, 700)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QHBoxLayout(main_widget)

        self.panel = ControlPanel(state, self.input, self.scheduler)
        main_layout.addWidget(self.panel)

        self.canvas = CircuitCanvas(state, self.input)
        scroller = QScrollArea()
        scroller.setWidget(self.canvas)
        scroller.setAlignment(Qt.AlignCenter)
        scroller.setFocusPolicy(Qt.NoFocus)
        main_layout.addWidget(scroller, stretch=1)

        # --- SIGNAL CONNECTIONS ---
        self.panel.size_requested.connect(self.on_size_requested)
        self.panel.scale_changed.connect(self.on_scale_changed)
        self.panel.reset_requested.connect(self.on_reset)
        state.dirty.subscribe(Invalidation.DOWNSTREAM_UPDATE, self.on_circuit_changed)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # --- FRAME TIMER ---
        self._showing_run = False
        self.timer = QTimer(self)
        self.timer.setInterval(FRAME_INTERVAL_MS)
        self.timer.timeout.connect(self.on_frame)
        self.timer.start()

        self._restore_settings()
        self.setFocusPolicy(Qt.StrongFocus)

    def _create_actions(self) -> None:
        self.act_load = QAction("Load from image...", self)
        self.act_load.setShortcut("Ctrl+O")
        self.act_load.triggered.connect(self.on_load_image)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_clear_wires = QAction("Clear unprotected wires", self)
        self.act_clear_wires.triggered.connect(lambda: self.on_clear(ClearTarget.WIRES))

        self.act_clear_protection = QAction("Clear protection", self)
        self.act_clear_protection.triggered.connect(lambda: self.on_clear(ClearTarget.PROTECTION))

        self.act_clear_goals = QAction("Clear goals", self)
        self.act_clear_goals.triggered.connect(lambda: self.on_clear(ClearTarget.GOALS))

        self.act_run = QAction("Start / Stop", self)
        self.act_run.triggered.connect(self.on_toggle_run)

        self.act_reset = QAction("Reset signals", self)
        self.act_reset.triggered.connect(self.on_reset)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_load)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        edit_menu = menu_bar.addMenu("&Edit")
        edit_menu.addAction(self.act_clear_wires)
        edit_menu.addAction(self.act_clear_protection)
        edit_menu.addAction(self.act_clear_goals)

        sim_menu = menu_bar.addMenu("&Simulation")
        sim_menu.addAction(self.act_run)
        sim_menu.addAction(self.act_reset)

    # --- SETTINGS ---

    def _restore_settings(self) -> None:
        width = self.settings.value("grid/width", DEFAULT_WIDTH, type=int)
        height = self.settings.value("grid/height", DEFAULT_HEIGHT, type=int)
        scale = self.settings.value("view/scale", DEFAULT_SCALE, type=int)
        if (width, height) != (self.state.width, self.state.height):
            self.on_size_requested(width, height)
        self.panel.spin_scale.setValue(scale)
        self.on_scale_changed(scale)

    def _save_settings(self) -> None:
        self.settings.setValue("grid/width", self.state.width)
        self.settings.setValue("grid/height", self.state.height)
        self.settings.setValue("view/scale", self.canvas.scale)

    # --- FRAME ---

    def on_frame(self) -> None:
        report = self.scheduler.step(time.perf_counter())

        if report.status == FrameStatus.STOPPED:
            # Stopped from outside since the last frame
            if self._showing_run:
                self._showing_run = False
                self.panel.status_message = report.summary
                self.panel.sync_run_button()
            if self.input.paste_preview:
                self.canvas.update()
            return

        if report.status != FrameStatus.SKIPPED:
            self.panel.status_message = report.summary
        self._showing_run = report.status != FrameStatus.COMPLETE
        if report.status == FrameStatus.COMPLETE:
            self.panel.sync_run_button()
        self.canvas.update()

    # --- KEYS ---

    def keyPressEvent(self, event: QKeyEvent, /) -> None:
        if self.input.key_press(event.text()):
            self._after_input()
            event.accept()
        else:
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent, /) -> None:
        if event.isAutoRepeat():
            return
        if self.input.key_release(event.text()):
            self.canvas.update()
            event.accept()
        else:
            super().keyReleaseEvent(event)

    def focusOutEvent(self, event, /) -> None:
        self.input.release_all()
        super().focusOutEvent(event)

    def _after_input(self) -> None:
        self.panel.load_from_state()
        self.canvas.update()

    # --- SLOTS ---

    def on_circuit_changed(self) -> None:
        """Consumer of DOWNSTREAM_UPDATE: refresh the circuit summary."""
        self.state.dirty.consume(Invalidation.DOWNSTREAM_UPDATE)
        self.panel.update_summary()

    def on_toggle_run(self) -> None:
        self.scheduler.toggle()
        self.panel.sync_run_button()

    def on_reset(self) -> None:
        self.input.reset()
        self.panel.status_message = "Reset"
        self.canvas.update()

    def on_clear(self, target: ClearTarget) -> None:
        self.editor.clear(target)
        self.canvas.update()

    def on_size_requested(self, width: int, height: int) -> None:
        try:
            self.editor.resize(width, height)
        except ValueError as e:
            logger.warning(f"Resize rejected: {e}")
            QMessageBox.warning(self, "Resize", str(e))
            return
        self.canvas.grid_resized()
        self.panel.load_from_state()
        self._save_settings()

    def on_scale_changed(self, scale: int) -> None:
        self.canvas.set_scale(scale)
        self._save_settings()

    def on_load_image(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(
            self, "Load Circuit Image", "", "Images (*.png *.bmp *.gif)"
        )
        if not fname:
            return
        try:
            pixels = read_image_pixels(fname)
            import_raster(self.editor, pixels)
        except RasterImportError as e:
            logger.warning(f"Could not load '{fname}': {e}")
            QMessageBox.warning(self, "Load from image", f"Could not load the image:\n{e}")
            return

        self.scheduler.reset()
        self.canvas.grid_resized()
        self.panel.load_from_state()
        self.panel.status_message = "Loaded from image"
        self._save_settings()

    def closeEvent(self, event, /) -> None:
        self.timer.stop()
        self.scheduler.stop()
        self._save_settings()
        event.accept()
