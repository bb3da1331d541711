"""
Dirty-State Tracking
====================
Two independent invalidations raised by whoever changes the circuit and
cleared only by whoever reacts to them.

FULL_REDRAW: the background/overlay must be repainted completely.
DOWNSTREAM_UPDATE: the circuit contents changed (summaries, titles, ...).

Consumers either subscribe a callback, called when a flag goes from clear
to raised, or pull with `consume()`.
"""
from __future__ import annotations

import logging
from enum import IntFlag
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class Invalidation(IntFlag):
    NONE = 0
    FULL_REDRAW = 1
    DOWNSTREAM_UPDATE = 2
    ALL = FULL_REDRAW | DOWNSTREAM_UPDATE


class DirtyTracker:
    def __init__(self) -> None:
        self._pending: Invalidation = Invalidation.NONE
        self._observers: Dict[Invalidation, List[Callable[[], None]]] = {
            Invalidation.FULL_REDRAW: [],
            Invalidation.DOWNSTREAM_UPDATE: [],
        }

    @property
    def pending(self) -> Invalidation:
        return self._pending

    @property
    def needs_full_redraw(self) -> bool:
        return bool(self._pending & Invalidation.FULL_REDRAW)

    @property
    def needs_downstream_update(self) -> bool:
        return bool(self._pending & Invalidation.DOWNSTREAM_UPDATE)

    def subscribe(self, flag: Invalidation, callback: Callable[[], None]) -> None:
        if flag not in self._observers:
            raise ValueError(f"Can only subscribe to a single invalidation, got {flag!r}.")
        self._observers[flag].append(callback)

    def mark(self, flags: Invalidation) -> None:
        raised = Invalidation(flags & ~self._pending)
        self._pending |= flags
        for flag, callbacks in self._observers.items():
            if raised & flag:
                for callback in callbacks:
                    callback()

    def consume(self, flag: Invalidation) -> bool:
        """Clear `flag` and report whether it was raised."""
        was_set = bool(self._pending & flag)
        self._pending &= ~flag
        return was_set
