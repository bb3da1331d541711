import numpy as np

from linelogic.controller.editor import ClearTarget
from linelogic.model.cells import Cell
from linelogic.model.dirty import Invalidation

GOAL_BITS = Cell.WIRE | Cell.PROTECTED | Cell.GOAL


def wires(engine):
    return {
        (x, y)
        for y in range(engine.height)
        for x in range(engine.width)
        if engine.get_cell(x, y) & Cell.WIRE
    }


# --- Points ---

def test_point_edits_ignore_border_and_outside(editor, engine):
    for x, y in [(0, 3), (9, 3), (3, 0), (3, 7), (-1, 2), (10, 2), (4, 50)]:
        editor.toggle_point(x, y)
        editor.toggle_goal(x, y)
    assert not engine.cells.any()
    assert len(editor.state.goals) == 0


def test_toggle_point(editor, engine):
    editor.toggle_point(2, 2)
    assert engine.get_cell(2, 2) == Cell.WIRE
    engine.add_to_cell(2, 2, Cell.UP)
    editor.toggle_point(2, 2)
    assert engine.get_cell(2, 2) == 0


def test_protected_point_needs_force(editor, engine):
    engine.set_cell(3, 3, Cell.WIRE | Cell.PROTECTED)
    editor.toggle_point(3, 3)
    assert engine.get_cell(3, 3) == Cell.WIRE | Cell.PROTECTED
    editor.toggle_point(3, 3, force=True)
    assert engine.get_cell(3, 3) == Cell.PROTECTED


def test_forced_point_clear_removes_goal(editor, engine, state):
    editor.toggle_goal(4, 4)
    editor.toggle_point(4, 4)
    assert engine.get_cell(4, 4) == GOAL_BITS

    editor.toggle_point(4, 4, force=True)
    assert (4, 4) not in state.goals
    assert not engine.get_cell(4, 4) & Cell.GOAL


def test_toggle_goal(editor, engine, state):
    editor.toggle_goal(2, 3)
    assert (2, 3) in state.goals
    assert engine.get_cell(2, 3) == GOAL_BITS

    editor.toggle_goal(2, 3)
    assert (2, 3) not in state.goals
    assert not engine.get_cell(2, 3) & Cell.GOAL


def test_toggle_protect_skips_goals(editor, engine, state):
    editor.toggle_protect(0, 0)
    assert engine.get_cell(0, 0) == Cell.PROTECTED
    editor.toggle_goal(2, 2)
    editor.toggle_protect(2, 2)
    assert engine.get_cell(2, 2) & Cell.PROTECTED
    state.dirty.consume(Invalidation.ALL)
    editor.toggle_protect(2, 2)
    assert state.dirty.pending == Invalidation.NONE
    editor.toggle_protect(5, 5)
    assert state.dirty.pending == Invalidation.ALL


def test_rect_protect_marks_dirty_only_on_change(editor, state):
    editor.rect_protect(1, 1, 2, 2)
    assert state.dirty.pending == Invalidation.ALL
    state.dirty.consume(Invalidation.ALL)
    editor.rect_protect(1, 1, 2, 2)
    assert state.dirty.pending == Invalidation.NONE


# --- Lines ---

def test_line_horizontal_major(editor, engine):
    editor.draw_line(1, 1, 5, 3)
    expected = {(x, 1) for x in range(1, 6)} | {(5, y) for y in range(1, 4)}
    assert wires(engine) == expected


def test_line_vertical_major(editor, engine):
    editor.draw_line(3, 5, 2, 1)
    expected = {(3, y) for y in range(1, 6)} | {(x, 1) for x in range(2, 4)}
    assert wires(engine) == expected


def test_line_erase_restores_empty_grid(editor, engine):
    editor.draw_line(2, 2, 7, 6)
    editor.draw_line(2, 2, 7, 6, set_to=False)
    assert not engine.cells.any()


def test_line_endpoint_on_border_is_noop(editor, engine):
    editor.draw_line(0, 2, 5, 2)
    editor.draw_line(2, 2, 2, 7)
    assert not engine.cells.any()


def test_line_respects_protection(editor, engine, state):
    engine.set_cell(3, 2, Cell.PROTECTED)
    editor.draw_line(1, 2, 5, 2)
    assert engine.get_cell(3, 2) == Cell.PROTECTED

    editor.toggle_goal(4, 4)
    editor.draw_line(1, 4, 6, 4, set_to=False)
    assert (4, 4) in state.goals
    editor.draw_line(1, 4, 6, 4, set_to=False, force=True)
    assert (4, 4) not in state.goals


# --- Rectangles ---

def test_rect_protect_leaves_goals_protected(editor, engine, state):
    editor.toggle_goal(3, 3)
    editor.rect_protect(1, 1, 5, 5)
    assert all(engine.get_cell(x, y) & Cell.PROTECTED for x in range(1, 6) for y in range(1, 6))
    editor.rect_protect(5, 5, 1, 1, set_to=False)
    assert engine.get_cell(3, 3) == GOAL_BITS
    assert not engine.get_cell(2, 2) & Cell.PROTECTED


def test_rect_out_of_bounds_is_noop(editor, engine, state):
    editor.draw_line(1, 1, 4, 1)
    editor.toggle_goal(2, 2)
    editor.rect_copy(-1, 0, 3, 3)
    assert state.clipboard.is_empty

    state.clipboard.store(np.zeros((2, 2), dtype=np.uint8))
    before = np.array(engine.cells)
    state.dirty.consume(Invalidation.ALL)

    editor.rect_erase(1, 1, 10, 1, force=True)
    editor.rect_cut(2, 2, 3, 8, force=True)
    editor.rect_protect(0, 0, 10, 7)
    editor.rect_protect(-1, 2, 3, 3, set_to=False)
    editor.toggle_protect(10, 3)
    editor.toggle_protect(3, -1)
    for x, y in [(10, 3), (3, 8), (-1, 2), (2, -1), (40, 40)]:
        editor.rect_paste(x, y, force=True)
        editor.rect_paste(x, y, additive=True, subtract=True, force=True)

    assert np.array_equal(engine.cells, before)
    assert [g.coord for g in state.goals] == [(2, 2)]
    assert (state.clipboard.width, state.clipboard.height) == (2, 2)
    assert state.dirty.pending == Invalidation.NONE


def test_rect_copy_and_replace_paste(editor, engine, state):
    engine.set_cell(1, 1, Cell.WIRE | Cell.RIGHT)
    engine.set_cell(3, 2, Cell.WIRE)
    editor.rect_copy(3, 2, 1, 1)
    assert (state.clipboard.width, state.clipboard.height) == (3, 2)

    engine.set_cell(6, 4, Cell.WIRE)
    editor.rect_paste(5, 3)
    assert engine.get_cell(5, 3) == Cell.WIRE | Cell.RIGHT
    assert engine.get_cell(7, 4) == Cell.WIRE
    # Replace mode clears cells the source leaves empty
    assert engine.get_cell(6, 4) == 0


def test_paste_clipped_at_far_border(editor, engine, state):
    state.clipboard.store(np.full((3, 3), int(Cell.WIRE), dtype=np.uint8))
    editor.rect_paste(8, 6)
    assert wires(engine) == {(8, 6)}


def test_paste_anchor_on_near_border_is_noop(editor, engine, state):
    state.clipboard.store(np.full((2, 2), int(Cell.WIRE), dtype=np.uint8))
    editor.rect_paste(0, 3)
    editor.rect_paste(3, 0)
    assert not engine.cells.any()


def test_additive_paste_and_subtract(editor, engine, state):
    engine.set_cell(2, 2, Cell.WIRE)
    state.clipboard.store(np.array([[0, int(Cell.WIRE)]], dtype=np.uint8))

    editor.rect_paste(2, 2, additive=True)
    assert wires(engine) == {(2, 2), (3, 2)}

    editor.rect_paste(2, 2, additive=True, subtract=True)
    assert wires(engine) == {(2, 2)}


def test_paste_skips_protected_unless_forced(editor, engine, state):
    engine.set_cell(2, 2, Cell.PROTECTED)
    state.clipboard.store(np.array([[int(Cell.WIRE)]], dtype=np.uint8))
    editor.rect_paste(2, 2)
    assert engine.get_cell(2, 2) == Cell.PROTECTED
    editor.rect_paste(2, 2, force=True)
    assert engine.get_cell(2, 2) == Cell.WIRE | Cell.PROTECTED


def test_forced_subtractive_paste_drops_unwired_goal(editor, engine, state):
    editor.toggle_goal(2, 2)
    editor.toggle_goal(4, 4)
    state.clipboard.store(np.array([[int(Cell.WIRE)]], dtype=np.uint8))

    editor.rect_paste(2, 2, additive=True, subtract=True)
    assert engine.get_cell(2, 2) == GOAL_BITS

    editor.rect_paste(2, 2, additive=True, subtract=True, force=True)
    assert (2, 2) not in state.goals
    assert engine.get_cell(2, 2) == Cell.PROTECTED
    assert [g.coord for g in state.goals] == [(4, 4)]


def test_registered_goals_always_have_wire(editor, engine, state):
    for x, y in [(2, 2), (3, 2), (5, 4)]:
        editor.toggle_goal(x, y)
    state.clipboard.store(np.array([[int(Cell.WIRE), 0], [0, int(Cell.WIRE)]], dtype=np.uint8))

    editor.rect_paste(2, 2, additive=True, subtract=True, force=True)
    editor.rect_paste(4, 3, force=True)
    editor.draw_line(1, 4, 6, 4, set_to=False, force=True)

    for goal in state.goals:
        assert engine.get_cell(goal.x, goal.y) & GOAL_BITS == GOAL_BITS


def test_forced_empty_paste_removes_only_covered_goals(editor, engine, state):
    editor.toggle_goal(2, 2)
    editor.toggle_goal(6, 5)
    state.clipboard.store(np.zeros((3, 3), dtype=np.uint8))

    editor.rect_paste(1, 1)
    assert len(state.goals) == 2

    editor.rect_paste(1, 1, force=True)
    assert [g.coord for g in state.goals] == [(6, 5)]
    assert not engine.get_cell(2, 2) & (Cell.WIRE | Cell.GOAL)
    assert engine.get_cell(6, 5) == GOAL_BITS


def test_rect_erase_and_cut(editor, engine, state):
    editor.draw_line(1, 2, 6, 2)
    editor.toggle_goal(3, 3)

    editor.rect_erase(1, 2, 3, 3)
    assert wires(engine) == {(4, 2), (5, 2), (6, 2), (3, 3)}
    assert (3, 3) in state.goals

    editor.rect_cut(4, 2, 6, 3, force=False)
    assert wires(engine) == {(3, 3)}
    assert state.clipboard.get(0, 0) == Cell.WIRE

    editor.rect_erase(3, 3, 3, 3, force=True)
    assert len(state.goals) == 0
    assert not wires(engine)


# --- Whole grid ---

def test_reset_signals(editor, engine, state):
    editor.toggle_goal(2, 2)
    engine.add_to_cell(2, 2, Cell.SIGNAL)
    engine.set_cell(5, 5, Cell.WIRE | Cell.DOWN)
    editor.reset_signals()
    assert not (engine.cells & int(Cell.SIGNAL)).any()
    assert engine.get_cell(5, 5) == Cell.WIRE
    assert state.goals.get(2, 2).last_observed_state == GOAL_BITS


def test_clear_wires_keeps_protected(editor, engine):
    editor.draw_line(1, 1, 5, 1)
    engine.add_to_cell(3, 1, Cell.PROTECTED)
    editor.clear(ClearTarget.WIRES)
    assert wires(engine) == {(3, 1)}


def test_clear_protection_keeps_goal_protection(editor, engine):
    editor.toggle_goal(2, 2)
    editor.rect_protect(1, 1, 4, 4)
    editor.clear(ClearTarget.PROTECTION)
    assert engine.get_cell(2, 2) == GOAL_BITS
    assert engine.count(Cell.PROTECTED) == 1


def test_clear_goals(editor, engine, state):
    editor.toggle_goal(2, 2)
    editor.toggle_goal(4, 4)
    editor.clear(ClearTarget.GOALS)
    assert len(state.goals) == 0
    assert engine.count(Cell.GOAL) == 0


def test_resize_drops_goals_outside_interior(editor, engine, state):
    editor.toggle_goal(2, 2)
    editor.toggle_goal(7, 5)
    editor.toggle_goal(3, 4)
    editor.resize(6, 5)
    assert [g.coord for g in state.goals] == [(2, 2)]
    assert engine.get_cell(2, 2) == GOAL_BITS
    assert (engine.width, engine.height) == (6, 5)


def test_edits_raise_dirty_flags(editor, state):
    calls = []
    state.dirty.subscribe(Invalidation.DOWNSTREAM_UPDATE, lambda: calls.append(1))
    editor.toggle_point(2, 2)
    assert state.dirty.needs_full_redraw
    assert calls == [1]
