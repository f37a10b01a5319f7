"""Drag session state and click-vs-drag recognition."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .models import ColumnId


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragSession:
    """Which task, if any, is being relocated and where the drag began."""

    phase: DragPhase = DragPhase.IDLE
    active_id: Optional[str] = None
    origin_column: Optional[ColumnId] = None
    origin_index: int = -1

    @classmethod
    def idle(cls) -> "DragSession":
        return cls()

    @classmethod
    def dragging(cls, task_id: str, origin_column: ColumnId, origin_index: int) -> "DragSession":
        return cls(
            phase=DragPhase.DRAGGING,
            active_id=task_id,
            origin_column=origin_column,
            origin_index=origin_index,
        )

    @property
    def is_dragging(self) -> bool:
        return self.phase is DragPhase.DRAGGING


class PointerGesture:
    """Tracks one press on a card until release.

    A press only becomes a drag once the pointer has travelled ``threshold``
    pixels from where it went down. Anything shorter is a click.
    """

    def __init__(self, threshold: float) -> None:
        self.threshold = float(threshold)
        self._pressed_id: Optional[str] = None
        self._origin: Tuple[float, float] = (0.0, 0.0)
        self._recognized = False

    @property
    def pressed_id(self) -> Optional[str]:
        return self._pressed_id

    @property
    def recognized(self) -> bool:
        return self._recognized

    def press(self, task_id: str, x: float, y: float) -> None:
        self._pressed_id = task_id
        self._origin = (float(x), float(y))
        self._recognized = False

    def move(self, x: float, y: float) -> bool:
        """Return True exactly once: on the move that crosses the threshold."""
        if self._pressed_id is None or self._recognized:
            return False
        travelled = math.hypot(float(x) - self._origin[0], float(y) - self._origin[1])
        if travelled >= self.threshold:
            self._recognized = True
            return True
        return False

    def release(self) -> Tuple[Optional[str], bool]:
        pressed, recognized = self._pressed_id, self._recognized
        self._pressed_id = None
        self._recognized = False
        return pressed, recognized
