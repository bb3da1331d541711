import pytest

from linelogic.controller.editor import CircuitEditor
from linelogic.controller.input import InputController
from linelogic.controller.scheduler import StepScheduler
from linelogic.model.cells import Cell
from linelogic.model.engine import GridEngine
from linelogic.model.state import CircuitState


class FakeClock:
    """Monotonic clock advancing by `step` seconds on every read."""

    def __init__(self, step=0.0):
        self.now = 0.0
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


def energize_after(n, x, y):
    """Transition rule that raises a signal bit at (x, y) from the n-th tick on."""
    calls = {"n": 0}

    def rule(cells):
        calls["n"] += 1
        out = cells.copy()
        if calls["n"] >= n:
            out[y, x] |= int(Cell.RIGHT)
        return out

    return rule


@pytest.fixture
def engine():
    return GridEngine(10, 8)


@pytest.fixture
def state(engine):
    return CircuitState(engine=engine)


@pytest.fixture
def editor(state):
    return CircuitEditor(state)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(state, clock):
    return StepScheduler(state, clock=clock)


@pytest.fixture
def controls(editor, scheduler):
    return InputController(editor, scheduler)
