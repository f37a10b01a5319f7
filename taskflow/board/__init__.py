"""Kanban board core: column model, drag session, reorder engine and status sync.

Nothing in this package imports Streamlit; pages drive a
:class:`BoardStateManager` through pointer events or the helpers in
:mod:`taskflow.board.gestures`.
"""

from .columns import BoardColumns, Column
from .manager import BoardStateManager, DropKind, DropOutcome
from .models import COLUMN_ORDER, Assignee, BoardSnapshot, BoardTask, ColumnId
from .reducer import BoardState, SyncFailure, SyncState
from .repository import BoardRepository, SqlBoardRepository
from .session import DragPhase, DragSession

__all__ = [
    "COLUMN_ORDER",
    "Assignee",
    "BoardColumns",
    "BoardRepository",
    "BoardSnapshot",
    "BoardState",
    "BoardStateManager",
    "BoardTask",
    "Column",
    "ColumnId",
    "DragPhase",
    "DragSession",
    "DropKind",
    "DropOutcome",
    "SqlBoardRepository",
    "SyncFailure",
    "SyncState",
]
