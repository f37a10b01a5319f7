"""Board state and the reducer that owns every transition.

All mutations of the board arrangement, the drag session and the per-task
sync bookkeeping go through :func:`reduce`. Pages and the manager only build
actions. Rollback on a failed status sync is the :class:`CommitFailed`
transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Union

from taskflow.models import TaskStatus

from .columns import BoardColumns
from .models import BoardSnapshot, ColumnId
from .reorder import move_across, move_to_index, reorder_within
from .session import DragSession

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"


@dataclass(frozen=True)
class SyncTicket:
    """The most recent status sync issued for one task."""

    token: int
    status: TaskStatus
    origin_column: ColumnId
    origin_index: int


@dataclass(frozen=True)
class SyncFailure:
    task_id: str
    status: TaskStatus
    message: str


@dataclass(frozen=True)
class BoardState:
    columns: BoardColumns
    session: DragSession = field(default_factory=DragSession.idle)
    # Column matching the last status the server is known to hold.
    confirmed: Dict[str, ColumnId] = field(default_factory=dict)
    inflight: Dict[str, SyncTicket] = field(default_factory=dict)
    last_error: Optional[SyncFailure] = None

    @classmethod
    def initial(cls, snapshot: BoardSnapshot) -> "BoardState":
        columns = BoardColumns.from_snapshot(snapshot)
        confirmed = {t.id: col.id for col in columns for t in col.tasks}
        return cls(columns=columns, confirmed=confirmed)

    def sync_state(self, task_id: str) -> SyncState:
        return SyncState.SYNCING if task_id in self.inflight else SyncState.IDLE


# ---------------------------------------------------------------- actions


@dataclass(frozen=True)
class DragStarted:
    task_id: str


@dataclass(frozen=True)
class HoverReorder:
    task_id: str
    over_id: str


@dataclass(frozen=True)
class HoverMove:
    task_id: str
    to_column: ColumnId
    over_id: Optional[str] = None


@dataclass(frozen=True)
class DragEnded:
    """Drop inside the column the drag started in: keep the local reorder."""


@dataclass(frozen=True)
class DragCancelled:
    """Drop with no valid target: the task returns to where the drag began.

    Hover moves are undone rather than kept, so a task only ever rests in the
    column of its confirmed status or of the status it is being synced to.
    """


@dataclass(frozen=True)
class Commit:
    task_id: str
    to_column: ColumnId
    token: int


@dataclass(frozen=True)
class CommitSucceeded:
    task_id: str
    token: int
    status: TaskStatus


@dataclass(frozen=True)
class CommitFailed:
    task_id: str
    token: int
    message: str
    rollback: bool = True


@dataclass(frozen=True)
class ErrorDismissed:
    pass


Action = Union[
    DragStarted,
    HoverReorder,
    HoverMove,
    DragEnded,
    DragCancelled,
    Commit,
    CommitSucceeded,
    CommitFailed,
    ErrorDismissed,
]


def plan_hover(columns: BoardColumns, active_id: str, over_id: str) -> Optional[Action]:
    """Translate a hover over ``over_id`` into the action it implies, if any."""
    if active_id == over_id:
        return None
    active_col = columns.column_of(active_id)
    over_col = columns.resolve_target(over_id)
    if active_col is None or over_col is None:
        return None
    if active_col.id == over_col.id:
        if over_col.index_of(over_id) == -1:
            # Hovering the column's own empty area.
            return None
        return HoverReorder(task_id=active_id, over_id=over_id)
    over_task = over_id if over_col.index_of(over_id) != -1 else None
    return HoverMove(task_id=active_id, to_column=over_col.id, over_id=over_task)


# ---------------------------------------------------------------- reducer


def reduce(state: BoardState, action: Action) -> BoardState:
    if isinstance(action, DragStarted):
        col = state.columns.column_of(action.task_id)
        if col is None:
            return state
        session = DragSession.dragging(action.task_id, col.id, col.index_of(action.task_id))
        return replace(state, session=session)

    if isinstance(action, HoverReorder):
        if state.session.active_id != action.task_id:
            return state
        return replace(state, columns=reorder_within(state.columns, action.task_id, action.over_id))

    if isinstance(action, HoverMove):
        if state.session.active_id != action.task_id:
            return state
        columns = move_across(state.columns, action.task_id, action.to_column, action.over_id)
        return replace(state, columns=columns)

    if isinstance(action, DragEnded):
        return replace(state, session=DragSession.idle())

    if isinstance(action, DragCancelled):
        return _cancel_drag(state)

    if isinstance(action, Commit):
        return _commit(state, action)

    if isinstance(action, CommitSucceeded):
        return _commit_succeeded(state, action)

    if isinstance(action, CommitFailed):
        return _commit_failed(state, action)

    if isinstance(action, ErrorDismissed):
        return replace(state, last_error=None)

    raise TypeError(f"Unknown board action: {action!r}")


def _cancel_drag(state: BoardState) -> BoardState:
    session = state.session
    if not session.is_dragging:
        return state
    columns = move_to_index(state.columns, session.active_id, session.origin_column, session.origin_index)
    return replace(state, columns=columns, session=DragSession.idle())


def _commit(state: BoardState, action: Commit) -> BoardState:
    session = state.session
    if session.is_dragging and session.active_id == action.task_id:
        origin_column, origin_index = session.origin_column, session.origin_index
    else:
        origin_column = state.confirmed.get(action.task_id, action.to_column)
        origin_index = -1
    ticket = SyncTicket(
        token=action.token,
        status=action.to_column.status,
        origin_column=origin_column,
        origin_index=origin_index,
    )
    inflight = dict(state.inflight)
    inflight[action.task_id] = ticket
    return replace(state, session=DragSession.idle(), inflight=inflight)


def _commit_succeeded(state: BoardState, action: CommitSucceeded) -> BoardState:
    confirmed = dict(state.confirmed)
    column_id = ColumnId.for_status(action.status)
    if column_id is not None:
        confirmed[action.task_id] = column_id

    ticket = state.inflight.get(action.task_id)
    if ticket is None or ticket.token != action.token:
        logger.debug("Stale sync success for %s (token %s)", action.task_id, action.token)
        return replace(state, confirmed=confirmed)

    inflight = dict(state.inflight)
    del inflight[action.task_id]
    return replace(state, confirmed=confirmed, inflight=inflight)


def _commit_failed(state: BoardState, action: CommitFailed) -> BoardState:
    ticket = state.inflight.get(action.task_id)
    if ticket is None or ticket.token != action.token:
        logger.debug("Stale sync failure for %s (token %s) ignored", action.task_id, action.token)
        return state

    inflight = dict(state.inflight)
    del inflight[action.task_id]
    failure = SyncFailure(task_id=action.task_id, status=ticket.status, message=action.message)
    state = replace(state, inflight=inflight, last_error=failure)
    if not action.rollback:
        return state

    current = state.columns.column_of(action.task_id)
    target = state.confirmed.get(action.task_id, ticket.origin_column)
    if current is None or current.id == target:
        return state

    index = ticket.origin_index if target == ticket.origin_column and ticket.origin_index >= 0 else len(
        state.columns.column(target)
    )
    columns = move_to_index(state.columns, action.task_id, target, index)
    session = state.session
    if session.is_dragging and session.active_id == action.task_id:
        # The card jumps back under the pointer; the ongoing drag now starts from there.
        landed = columns.column(target)
        session = DragSession.dragging(action.task_id, target, landed.index_of(action.task_id))
    elif session.is_dragging:
        session = _shift_origin(session, state.columns, columns, action.task_id)
    return replace(state, columns=columns, session=session)


def _shift_origin(session: DragSession, before: BoardColumns, after: BoardColumns, moved_id: str) -> DragSession:
    """Keep another drag's origin between the same neighbours after ``moved_id`` relocates."""

    def others(columns: BoardColumns):
        return [tid for tid in columns.column(session.origin_column).task_ids() if tid != session.active_id]

    old, new = others(before), others(after)
    index = session.origin_index
    if moved_id in old and old.index(moved_id) < index:
        index -= 1
    if moved_id in new and new.index(moved_id) <= index:
        index += 1
    if index == session.origin_index:
        return session
    return replace(session, origin_index=index)
