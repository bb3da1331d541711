"""
Cell Flags
==========
Bit-flag vocabulary shared between the controller and the simulation engine.

A cell is one unsigned byte. The low nibble holds design metadata (wire,
protection, goal) plus an engine-internal queue marker, the high nibble holds
the four directional signal bits. Together the four signal bits form the
cell's signal level.
"""
from __future__ import annotations

from enum import IntFlag


SIGNAL_SHIFT: int = 4


class Cell(IntFlag):
    EMPTY     = 0b00000000

    WIRE      = 0b00000001
    PROTECTED = 0b00000010
    GOAL      = 0b00000100

    QUEUED    = 0b00001000

    RIGHT     = 0b00010000
    DOWN      = 0b00100000
    LEFT      = 0b01000000
    UP        = 0b10000000

    DESIGN    = 0b00000111
    SIGNAL    = 0b11110000
    MATERIAL  = 0b11110001

    HORIZONTAL = 0b00110000
    VERTICAL   = 0b11000000


def signal_level(value):
    """Packed 4-bit signal level of a raw cell value or an array of them."""
    return (value >> SIGNAL_SHIFT) & 0xF
