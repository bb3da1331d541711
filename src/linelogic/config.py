"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (grid size, frame budget, speed
   range) scattered throughout the code.
2. Rebinding: The default key bindings live here as plain data, so the input
   adapter can be rebound without touching Qt code.

Exports:
    DEFAULT_WIDTH, DEFAULT_HEIGHT (int): Initial grid size.
    FRAME_TIME_BUDGET (float): Wall-clock cap on ticking per frame, seconds.
    SPEED_SCALE (int): Constant of the negative-speed budget formula.
    DEFAULT_KEY_BINDINGS (dict): Logical action -> key text.
"""
from typing import Dict

# Grid
DEFAULT_WIDTH: int = 16
DEFAULT_HEIGHT: int = 16
MIN_GRID_SIZE: int = 3
MAX_GRID_SIZE: int = 4096

# Display
DEFAULT_SCALE: int = 24
MAX_SCALE: int = 64

# Scheduling
FRAME_INTERVAL_MS: int = 16
FRAME_TIME_BUDGET: float = 0.001
SPEED_SCALE: int = 120
SPEED_MIN: int = -SPEED_SCALE
SPEED_MAX: int = 60
DEFAULT_SPEED: int = 0

# Keys are compared against the upper-cased text a key event produces.
DEFAULT_KEY_BINDINGS: Dict[str, str] = {
    "guard": "G",
    "reset": "R",
    "pause": " ",
    "slower": "[",
    "faster": "]",
    "mode_wire": "1",
    "mode_protect": "2",
    "mode_wire_force": "3",
    "mode_goal": "4",
    "subtract": "D",
    "copy": "C",
    "cut": "X",
    "erase": "E",
    "paste": "V",
    "additive_paste": "B",
    "flip_v": "I",
    "flip_h": "K",
    "rotate_ccw": "J",
    "rotate_cw": "L",
}
