"""
Adaptive Step Scheduler
=======================
Decides, frame by frame, how many engine ticks to run.

Why is this file needed?
------------------------
1. Speed: It converts the user's speed value into a per-frame tick budget.
   Non-negative speeds throttle below one tick per frame; negative speeds
   run several ticks per frame, unbounded at the bottom of the range.
2. Latency: Ticking stops as soon as a frame has used its wall-clock budget,
   however many ticks were requested.
3. Completion: Goals are evaluated after every tick and a hit stops the run.

Note: This module should be pure Python and should NOT import PySide6. Any
host loop (Qt timer, test, batch driver) calls `step(now)` once per frame.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from linelogic.config import DEFAULT_SPEED, FRAME_TIME_BUDGET, SPEED_MAX, SPEED_MIN, SPEED_SCALE
from linelogic.model.state import CircuitState

logger = logging.getLogger(__name__)


class RunState(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


class FrameStatus(StrEnum):
    STOPPED = "Stopped"
    SKIPPED = "Skipped"
    RUNNING = "Running"
    COMPLETE = "Complete"


@dataclass(frozen=True)
class FrameReport:
    """Outcome of one scheduler frame."""
    status: FrameStatus
    ticks: int
    # None means the frame was allowed an unbounded number of ticks.
    budget: Optional[int]
    total_iterations: int

    @property
    def summary(self) -> str:
        """Human-readable status text for the UI."""
        if self.status == FrameStatus.COMPLETE:
            return f"Complete:\nIteration count: {self.total_iterations}"
        if self.status in (FrameStatus.RUNNING, FrameStatus.SKIPPED):
            target = "unbounded" if self.budget is None else str(self.budget)
            return (
                f"Running:\nCycles per frame: {self.ticks}\n"
                f"out of target: {target}\nIteration count: {self.total_iterations}"
            )
        return f"Stopped\nIteration count: {self.total_iterations}"


def iteration_budget(speed: int) -> Optional[int]:
    """
    Ticks allowed in a frame that is not skipped.
    Returns None for an unbounded budget.
    """
    if speed >= 0:
        return 1
    if speed > -SPEED_SCALE:
        return SPEED_SCALE // (speed + SPEED_SCALE)
    return None


class StepScheduler:
    def __init__(
        self,
        state: CircuitState,
        speed: int = DEFAULT_SPEED,
        frame_budget: float = FRAME_TIME_BUDGET,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.state = state
        self.frame_budget = frame_budget
        self.clock = clock

        self.run_state: RunState = RunState.STOPPED
        self.total_iterations: int = 0
        self._slow_count: int = 0
        self._speed: int = DEFAULT_SPEED
        self.speed = speed

    # --- PROPERTIES ---

    @property
    def speed(self) -> int:
        return self._speed

    @speed.setter
    def speed(self, value: int) -> None:
        self._speed = max(SPEED_MIN, min(SPEED_MAX, int(value)))

    @property
    def running(self) -> bool:
        return self.run_state == RunState.RUNNING

    def faster(self) -> None:
        self.speed = self._speed - 1

    def slower(self) -> None:
        self.speed = self._speed + 1

    # --- LIFECYCLE ---

    def start(self) -> None:
        if self.running:
            return
        self.state.goals.observe(self.state.engine)
        self.run_state = RunState.RUNNING
        logger.info(f"Simulation started at speed {self._speed}.")

    def stop(self) -> None:
        if not self.running:
            return
        self.run_state = RunState.STOPPED
        logger.info(f"Simulation stopped after {self.total_iterations} iterations.")

    def toggle(self) -> None:
        if self.running:
            self.stop()
        else:
            self.start()

    def reset(self) -> None:
        """Zero the iteration counter. Does not change the run state."""
        self.total_iterations = 0
        self._slow_count = 0

    def idle_report(self) -> FrameReport:
        return FrameReport(FrameStatus.STOPPED, 0, None, self.total_iterations)

    # --- FRAME ---

    def _frame_due(self) -> bool:
        """Throttle for non-negative speeds: tick on every (speed + 1)-th frame."""
        if self._speed < 0:
            return True
        if self._slow_count < self._speed:
            self._slow_count += 1
            return False
        self._slow_count = 0
        return True

    def step(self, now: Optional[float] = None) -> FrameReport:
        """
        Run one frame.

        Args:
            now: Timestamp the frame began at, on the scheduler's clock.
        """
        if not self.running:
            return self.idle_report()

        budget = iteration_budget(self._speed)
        if not self._frame_due():
            return FrameReport(FrameStatus.SKIPPED, 0, budget, self.total_iterations)

        start = self.clock() if now is None else now
        engine = self.state.engine
        goals = self.state.goals

        ticks = 0
        achieved = False
        while budget is None or ticks < budget:
            engine.tick()
            ticks += 1

            # The mode is re-read on every evaluation.
            achieved = goals.evaluate(engine, self.state.goal_mode)
            if achieved:
                break
            if self.clock() - start > self.frame_budget:
                break

        self.total_iterations += ticks

        if achieved:
            self.run_state = RunState.STOPPED
            logger.info(f"Goal achieved after {self.total_iterations} iterations.")
            return FrameReport(FrameStatus.COMPLETE, ticks, budget, self.total_iterations)
        return FrameReport(FrameStatus.RUNNING, ticks, budget, self.total_iterations)
