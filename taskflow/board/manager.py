"""Mountable kanban board state manager.

One :class:`BoardStateManager` is created per board mount. It owns the column
arrangement, the drag session and the per-task sync bookkeeping until
:meth:`BoardStateManager.unmount`. Input arrives as pointer events
(``pointer_down`` / ``pointer_move`` / ``drag_over`` / ``pointer_up``); a drop
that changes a task's column issues one optimistic status sync.

Status syncs are scheduled on the running asyncio loop, so drops must be
delivered from inside a coroutine. Callers that live outside asyncio (the
Streamlit page) wrap a gesture and :meth:`BoardStateManager.wait_idle` in a
single ``asyncio.run``.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from taskflow.config import DEFAULT_DRAG_THRESHOLD_PX
from taskflow.errors import StatusUpdateError, TaskflowError
from taskflow.models import TaskStatus

from .columns import BoardColumns
from .models import BoardSnapshot, BoardTask, ColumnId
from .reducer import (
    Action,
    BoardState,
    Commit,
    CommitFailed,
    CommitSucceeded,
    DragCancelled,
    DragEnded,
    DragStarted,
    ErrorDismissed,
    HoverMove,
    SyncFailure,
    SyncState,
    plan_hover,
    reduce,
)
from .repository import BoardRepository
from .session import DragSession, PointerGesture
from .sync import StatusSync, SyncRequest, SyncResult

logger = logging.getLogger(__name__)


class DropKind(str, Enum):
    CLICK = "click"
    IGNORED = "ignored"
    CANCELLED = "cancelled"
    REORDERED = "reordered"
    COMMITTED = "committed"


@dataclass(frozen=True)
class DropOutcome:
    kind: DropKind
    task_id: Optional[str] = None
    column: Optional[ColumnId] = None
    status: Optional[TaskStatus] = None
    token: Optional[int] = None


class BoardStateManager:
    def __init__(
        self,
        snapshot: BoardSnapshot,
        repository: BoardRepository,
        *,
        drag_threshold: float = DEFAULT_DRAG_THRESHOLD_PX,
        rollback_on_failure: bool = True,
    ) -> None:
        self._state = BoardState.initial(snapshot)
        self._gesture = PointerGesture(drag_threshold)
        self._rollback_on_failure = rollback_on_failure
        self._tokens = itertools.count(1)
        self._sync = StatusSync(repository, self._on_settled)
        self._mounted = True

    # ------------------------------------------------------------ views

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def columns(self) -> BoardColumns:
        return self._state.columns

    @property
    def session(self) -> DragSession:
        return self._state.session

    @property
    def last_error(self) -> Optional[SyncFailure]:
        return self._state.last_error

    @property
    def drag_threshold(self) -> float:
        return self._gesture.threshold

    @property
    def mounted(self) -> bool:
        return self._mounted

    def drag_preview(self) -> Optional[BoardTask]:
        """The card following the pointer, while a drag is in progress."""
        session = self._state.session
        if not session.is_dragging:
            return None
        return self._state.columns.find_task(session.active_id)

    def sync_state(self, task_id: str) -> SyncState:
        return self._state.sync_state(task_id)

    # ------------------------------------------------------------ input

    def dispatch(self, action: Action) -> BoardState:
        self._state = reduce(self._state, action)
        return self._state

    def pointer_down(self, task_id: str, x: float = 0.0, y: float = 0.0) -> None:
        if not self._mounted or self._state.session.is_dragging:
            return
        if self._state.columns.find_task(task_id) is None:
            return
        self._gesture.press(task_id, x, y)

    def pointer_move(self, x: float, y: float) -> bool:
        """Feed pointer travel; returns True while a drag is in progress."""
        if self._gesture.move(x, y):
            self.dispatch(DragStarted(task_id=self._gesture.pressed_id))
        return self._state.session.is_dragging

    def drag_over(self, target_id: str) -> None:
        session = self._state.session
        if not session.is_dragging:
            return
        action = plan_hover(self._state.columns, session.active_id, target_id)
        if action is not None:
            self.dispatch(action)

    def pointer_up(self, target_id: Optional[str] = None) -> DropOutcome:
        pressed_id, recognized = self._gesture.release()
        if pressed_id is None:
            return DropOutcome(DropKind.IGNORED)
        if not recognized:
            return DropOutcome(DropKind.CLICK, task_id=pressed_id)

        session = self._state.session
        if not session.is_dragging:
            return DropOutcome(DropKind.IGNORED, task_id=pressed_id)
        active_id = session.active_id

        columns = self._state.columns
        target = columns.resolve_target(target_id) if target_id else None
        if target is None:
            self.dispatch(DragCancelled())
            return DropOutcome(DropKind.CANCELLED, task_id=active_id, column=session.origin_column)

        current = columns.column_of(active_id)
        if current is not None and current.id != target.id:
            over_task = target_id if target.index_of(target_id) != -1 else None
            self.dispatch(HoverMove(task_id=active_id, to_column=target.id, over_id=over_task))

        if target.id == session.origin_column:
            self.dispatch(DragEnded())
            return DropOutcome(DropKind.REORDERED, task_id=active_id, column=target.id)

        return self._commit(active_id, target.id)

    def cancel_drag(self) -> None:
        """Abandon the current press or drag; a dragged card returns to its origin."""
        self._gesture.release()
        self.dispatch(DragCancelled())

    def dismiss_error(self) -> None:
        self.dispatch(ErrorDismissed())

    # ------------------------------------------------------------ sync

    def _commit(self, task_id: str, column_id: ColumnId) -> DropOutcome:
        token = next(self._tokens)
        self.dispatch(Commit(task_id=task_id, to_column=column_id, token=token))
        status = column_id.status
        logger.info("Task %s dropped on %s; syncing status %s (token %s)", task_id, column_id.value, status.value, token)
        self._sync.submit(SyncRequest(task_id=task_id, status=status, token=token))
        return DropOutcome(DropKind.COMMITTED, task_id=task_id, column=column_id, status=status, token=token)

    def _on_settled(self, result: SyncResult) -> None:
        request = result.request
        if not self._mounted:
            logger.debug("Board unmounted; ignoring sync result for %s (token %s)", request.task_id, request.token)
            return
        if result.ok:
            self.dispatch(CommitSucceeded(task_id=request.task_id, token=request.token, status=request.status))
            return

        error = result.error
        if not isinstance(error, TaskflowError):
            error = StatusUpdateError(request.task_id, request.status.value, str(error))
        self.dispatch(
            CommitFailed(
                task_id=request.task_id,
                token=request.token,
                message=str(error),
                rollback=self._rollback_on_failure,
            )
        )

    async def wait_idle(self) -> None:
        """Wait for every issued status sync, queued ones included, to settle."""
        await self._sync.drain()

    def unmount(self) -> None:
        """Cancel any drag in progress and stop applying sync results.

        Calls already issued keep running.
        """
        self.cancel_drag()
        self._mounted = False
