"""
Input Adapter
=============
Turns normalized key and pointer events into editor and scheduler calls.

Why is this file needed?
------------------------
1. Routing: The view only forwards key text and grid coordinates; which
   operation a click or drag performs is decided here.
2. Atomic drags: Only the press and release positions matter, so a drag is
   applied in one piece on release.
3. Rebinding: Keys are looked up in a binding table (see config).
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Dict, Optional, Set, Tuple

from linelogic.config import DEFAULT_KEY_BINDINGS
from linelogic.controller.editor import CircuitEditor
from linelogic.controller.scheduler import StepScheduler

logger = logging.getLogger(__name__)


class EditMode(StrEnum):
    WIRE = "wire"
    PROTECT = "protect"
    FORCED_WIRE = "forced_wire"
    GOAL = "goal"


class Action(StrEnum):
    GUARD = "guard"
    RESET = "reset"
    PAUSE = "pause"
    SLOWER = "slower"
    FASTER = "faster"
    MODE_WIRE = "mode_wire"
    MODE_PROTECT = "mode_protect"
    MODE_WIRE_FORCE = "mode_wire_force"
    MODE_GOAL = "mode_goal"
    SUBTRACT = "subtract"
    COPY = "copy"
    CUT = "cut"
    ERASE = "erase"
    PASTE = "paste"
    ADDITIVE_PASTE = "additive_paste"
    FLIP_V = "flip_v"
    FLIP_H = "flip_h"
    ROTATE_CCW = "rotate_ccw"
    ROTATE_CW = "rotate_cw"


_MODE_ACTIONS: Dict[Action, EditMode] = {
    Action.MODE_WIRE: EditMode.WIRE,
    Action.MODE_PROTECT: EditMode.PROTECT,
    Action.MODE_WIRE_FORCE: EditMode.FORCED_WIRE,
    Action.MODE_GOAL: EditMode.GOAL,
}


class InputController:
    def __init__(
        self,
        editor: CircuitEditor,
        scheduler: StepScheduler,
        bindings: Optional[Dict[str, str]] = None,
    ) -> None:
        self.editor = editor
        self.scheduler = scheduler
        self.mode: EditMode = EditMode.WIRE

        self.held: Set[Action] = set()
        self.pointer: Tuple[int, int] = (0, 0)
        self._press: Optional[Tuple[int, int]] = None

        self._actions: Dict[str, Action] = {}
        self.rebind(bindings or DEFAULT_KEY_BINDINGS)

    def rebind(self, bindings: Dict[str, str]) -> None:
        """Install a new action -> key table. Unknown action names raise ValueError."""
        self._actions = {key.upper(): Action(name) for name, key in bindings.items()}

    def action_for(self, key: str) -> Optional[Action]:
        return self._actions.get(key.upper())

    # --- PROPERTIES ---

    @property
    def force(self) -> bool:
        return self.mode == EditMode.FORCED_WIRE

    @property
    def paste_preview(self) -> bool:
        """True while a paste key is held and the clipboard should follow the pointer."""
        return Action.PASTE in self.held or Action.ADDITIVE_PASTE in self.held

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def key_press(self, key: str) -> bool:
        """
        Handle a key press (including auto-repeat).
        Returns True if the key is bound.
        """
        action = self.action_for(key)
        if action is None:
            return False

        # Speed keys act on every repeat
        if action == Action.FASTER:
            self.scheduler.faster()
            return True
        if action == Action.SLOWER:
            self.scheduler.slower()
            return True

        if action in self.held:
            return True
        self.held.add(action)

        if action in _MODE_ACTIONS:
            self.mode = _MODE_ACTIONS[action]
        elif action == Action.PAUSE:
            self.scheduler.toggle()
        elif action == Action.RESET and Action.GUARD in self.held:
            self.reset()

        clipboard = self.editor.state.clipboard
        if action == Action.FLIP_V:
            clipboard.flip_vertical()
        elif action == Action.FLIP_H:
            clipboard.flip_horizontal()
        elif action == Action.ROTATE_CW:
            clipboard.rotate_cw()
        elif action == Action.ROTATE_CCW:
            clipboard.rotate_ccw()
        return True

    def key_release(self, key: str) -> bool:
        action = self.action_for(key)
        if action is None:
            return False
        self.held.discard(action)
        return True

    def release_all(self) -> None:
        """Forget held keys, e.g. when the window loses focus."""
        self.held.clear()

    def reset(self) -> None:
        self.editor.reset_signals()
        self.scheduler.reset()

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def pointer_press(self, x: int, y: int) -> None:
        self._press = (x, y)
        self.pointer = (x, y)

    def pointer_move(self, x: int, y: int) -> None:
        self.pointer = (x, y)

    def pointer_release(self, x: int, y: int) -> None:
        self.pointer = (x, y)
        if self._press is None:
            return
        start = self._press
        self._press = None

        if start == (x, y):
            self._click(x, y)
        else:
            self._drag(start[0], start[1], x, y)

    def _click(self, x: int, y: int) -> None:
        editor = self.editor
        if Action.PASTE in self.held:
            editor.rect_paste(x, y, additive=False, force=self.force)
        elif Action.ADDITIVE_PASTE in self.held:
            editor.rect_paste(x, y, additive=True, subtract=Action.SUBTRACT in self.held, force=self.force)
        elif self.mode == EditMode.WIRE:
            editor.toggle_point(x, y, force=False)
        elif self.mode == EditMode.PROTECT:
            editor.toggle_protect(x, y)
        elif self.mode == EditMode.FORCED_WIRE:
            editor.toggle_point(x, y, force=True)
        elif self.mode == EditMode.GOAL:
            editor.toggle_goal(x, y)

    def _drag(self, x1: int, y1: int, x2: int, y2: int) -> None:
        editor = self.editor
        if Action.COPY in self.held:
            editor.rect_copy(x1, y1, x2, y2)
        elif Action.CUT in self.held:
            editor.rect_cut(x1, y1, x2, y2, force=self.force)
        elif Action.ERASE in self.held:
            editor.rect_erase(x1, y1, x2, y2, force=self.force)
        else:
            set_to = Action.SUBTRACT not in self.held
            if self.mode == EditMode.WIRE:
                editor.draw_line(x1, y1, x2, y2, set_to, force=False)
            elif self.mode == EditMode.PROTECT:
                editor.rect_protect(x1, y1, x2, y2, set_to)
            elif self.mode == EditMode.FORCED_WIRE:
                editor.draw_line(x1, y1, x2, y2, set_to, force=True)
            elif self.mode == EditMode.GOAL:
                editor.toggle_goal(x2, y2)
