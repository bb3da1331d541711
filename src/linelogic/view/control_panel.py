"""
Editor Control Panel
====================
Side panel with the edit-mode and goal-mode selectors, the simulation
controls and the grid size settings.
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QSpinBox, QGroupBox, QFormLayout,
    QRadioButton, QButtonGroup
)
from PySide6.QtCore import Signal, Qt

from linelogic.config import (
    DEFAULT_SCALE, MAX_GRID_SIZE, MAX_SCALE, MIN_GRID_SIZE, SPEED_MAX, SPEED_MIN
)
from linelogic.controller.input import EditMode, InputController
from linelogic.controller.scheduler import StepScheduler
from linelogic.model.cells import Cell
from linelogic.model.goals import GoalMode
from linelogic.model.state import CircuitState

logger = logging.getLogger(__name__)

EDIT_MODE_LABELS = {
    EditMode.WIRE: "Wire (1)",
    EditMode.PROTECT: "Protect (2)",
    EditMode.FORCED_WIRE: "Forced wire (3)",
    EditMode.GOAL: "Goal (4)",
}

GOAL_MODE_LABELS = {
    GoalMode.IGNORE: "Ignore goals",
    GoalMode.ALL: "All goals energized",
    GoalMode.ANY: "Any goal energized",
    GoalMode.CHANGE: "Any goal changes",
}


class ControlPanel(QWidget):
    # Signal: (width, height)
    size_requested = Signal(int, int)
    scale_changed = Signal(int)
    reset_requested = Signal()

    def __init__(self, state: CircuitState, input_ctrl: InputController, scheduler: StepScheduler) -> None:
        super().__init__()
        self.state = state
        self.input = input_ctrl
        self.scheduler = scheduler

        layout = QVBoxLayout(self)

        # --- Edit Mode ---
        grp_mode = QGroupBox("Edit mode")
        l_mode = QVBoxLayout(grp_mode)
        self.mode_group = QButtonGroup(self)
        self.mode_buttons: dict[EditMode, QRadioButton] = {}
        for mode, label in EDIT_MODE_LABELS.items():
            btn = QRadioButton(label)
            btn.setFocusPolicy(Qt.NoFocus)
            btn.toggled.connect(lambda checked, m=mode: self.on_mode_toggled(m, checked))
            self.mode_group.addButton(btn)
            self.mode_buttons[mode] = btn
            l_mode.addWidget(btn)
        layout.addWidget(grp_mode)

        # --- Goal Mode ---
        grp_goal = QGroupBox("Completion")
        l_goal = QVBoxLayout(grp_goal)
        self.goal_group = QButtonGroup(self)
        self.goal_buttons: dict[GoalMode, QRadioButton] = {}
        for mode, label in GOAL_MODE_LABELS.items():
            btn = QRadioButton(label)
            btn.setFocusPolicy(Qt.NoFocus)
            btn.toggled.connect(lambda checked, m=mode: self.on_goal_mode_toggled(m, checked))
            self.goal_group.addButton(btn)
            self.goal_buttons[mode] = btn
            l_goal.addWidget(btn)
        layout.addWidget(grp_goal)

        # --- Simulation ---
        grp_sim = QGroupBox("Simulation")
        l_sim = QVBoxLayout(grp_sim)

        form_speed = QFormLayout()
        self.spin_speed = QSpinBox()
        self.spin_speed.setRange(SPEED_MIN, SPEED_MAX)
        self.spin_speed.setToolTip("Negative runs several ticks per frame, positive skips frames.")
        self.spin_speed.valueChanged.connect(self.on_speed_changed)
        form_speed.addRow("Speed:", self.spin_speed)
        l_sim.addLayout(form_speed)

        hbox_run = QHBoxLayout()
        self.btn_run = QPushButton("Start")
        self.btn_run.setFocusPolicy(Qt.NoFocus)
        self.btn_run.clicked.connect(self.on_run_clicked)
        hbox_run.addWidget(self.btn_run)

        self.btn_reset = QPushButton("Reset")
        self.btn_reset.setFocusPolicy(Qt.NoFocus)
        self.btn_reset.clicked.connect(self.reset_requested.emit)
        hbox_run.addWidget(self.btn_reset)
        l_sim.addLayout(hbox_run)

        self.lbl_status = QLabel("Stopped")
        self.lbl_status.setStyleSheet("QLabel { padding: 5px; background-color: rgba(0,0,0,10); border-radius: 3px; }")
        l_sim.addWidget(self.lbl_status)

        self.lbl_summary = QLabel("")
        self.lbl_summary.setStyleSheet("color: gray;")
        l_sim.addWidget(self.lbl_summary)
        layout.addWidget(grp_sim)

        # --- Grid ---
        grp_grid = QGroupBox("Grid")
        form_grid = QFormLayout(grp_grid)

        self.spin_width = QSpinBox()
        self.spin_width.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        form_grid.addRow("Width:", self.spin_width)

        self.spin_height = QSpinBox()
        self.spin_height.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        form_grid.addRow("Height:", self.spin_height)

        self.btn_resize = QPushButton("Apply size")
        self.btn_resize.setFocusPolicy(Qt.NoFocus)
        self.btn_resize.clicked.connect(self.on_resize_clicked)
        form_grid.addRow(self.btn_resize)

        self.spin_scale = QSpinBox()
        self.spin_scale.setRange(1, MAX_SCALE)
        self.spin_scale.setValue(DEFAULT_SCALE)
        self.spin_scale.setSuffix(" px")
        self.spin_scale.valueChanged.connect(self.scale_changed.emit)
        form_grid.addRow("Scale:", self.spin_scale)
        layout.addWidget(grp_grid)

        layout.addStretch()

        self.load_from_state()

    # --- PROPERTIES ---

    @property
    def status_message(self) -> str:
        return self.lbl_status.text()

    @status_message.setter
    def status_message(self, text: str) -> None:
        self.lbl_status.setText(text)

    # --- SLOTS ---

    def on_mode_toggled(self, mode: EditMode, checked: bool) -> None:
        if checked:
            self.input.mode = mode

    def on_goal_mode_toggled(self, mode: GoalMode, checked: bool) -> None:
        if checked:
            self.state.goal_mode = mode
            logger.debug(f"Goal mode set to {mode}.")

    def on_speed_changed(self, value: int) -> None:
        self.scheduler.speed = value

    def on_run_clicked(self) -> None:
        self.scheduler.toggle()
        self.sync_run_button()

    def on_resize_clicked(self) -> None:
        self.size_requested.emit(self.spin_width.value(), self.spin_height.value())

    # --- SYNC ---

    def sync_run_button(self) -> None:
        self.btn_run.setText("Stop" if self.scheduler.running else "Start")

    def update_summary(self) -> None:
        wires = self.state.engine.count(Cell.WIRE)
        self.lbl_summary.setText(f"Wires: {wires}   Goals: {len(self.state.goals)}")

    def load_from_state(self) -> None:
        """Syncs widgets from the state and controllers without echoing changes back."""
        widgets = [self.spin_speed, self.spin_width, self.spin_height, *self.mode_buttons.values(),
                   *self.goal_buttons.values()]
        for w in widgets:
            w.blockSignals(True)
        try:
            self.spin_speed.setValue(self.scheduler.speed)
            self.spin_width.setValue(self.state.width)
            self.spin_height.setValue(self.state.height)
            self.mode_buttons[self.input.mode].setChecked(True)
            self.goal_buttons[self.state.goal_mode].setChecked(True)
        finally:
            for w in widgets:
                w.blockSignals(False)
        self.sync_run_button()
        self.update_summary()
