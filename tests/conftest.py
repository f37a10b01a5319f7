from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Set, Tuple

import pytest

from taskflow.board.models import BoardSnapshot, BoardTask
from taskflow.config import reset_config
from taskflow.db import init_db, reset_engine
from taskflow.errors import StatusUpdateError
from taskflow.models import TaskStatus


class FakeBoardRepository:
    """In-memory board repository.

    ``hold`` parks every status call on a gate until ``release_all``;
    ``fail`` lists (task_id, status) pairs whose call raises.
    """

    def __init__(self, snapshot: Optional[BoardSnapshot] = None) -> None:
        self.snapshot = snapshot or BoardSnapshot()
        self.calls: List[Tuple[str, TaskStatus]] = []
        self.persisted: Dict[str, TaskStatus] = {}
        self.fail: Set[Tuple[str, TaskStatus]] = set()
        self.fail_all = False
        self.hold = False
        self._gates: List[asyncio.Event] = []

    async def load_board_snapshot(self, user_id):
        return self.snapshot

    async def update_task_status(self, task_id, status):
        self.calls.append((task_id, status))
        if self.hold:
            gate = asyncio.Event()
            self._gates.append(gate)
            await gate.wait()
        if self.fail_all or (task_id, status) in self.fail:
            raise StatusUpdateError(task_id, status.value, "database unavailable")
        self.persisted[task_id] = status

    def release_all(self) -> None:
        self.hold = False
        for gate in self._gates:
            gate.set()
        self._gates.clear()


def make_snapshot(new=(), processing=(), done=()) -> BoardSnapshot:
    def tasks(ids):
        return tuple(BoardTask(id=tid, title=f"Task {tid}") for tid in ids)

    return BoardSnapshot(new=tasks(new), processing=tasks(processing), done=tasks(done))


@pytest.fixture()
def snapshot():
    return make_snapshot


@pytest.fixture()
def repo():
    return FakeBoardRepository()


@pytest.fixture()
def drag():
    """Drive a full pointer drag: press, move past the threshold, hover, release."""

    def _drag(manager, task_id, hovers, drop=None):
        manager.pointer_down(task_id, 0, 0)
        manager.pointer_move(manager.drag_threshold + 4, 0)
        for target in hovers:
            manager.drag_over(target)
        return manager.pointer_up(drop if drop is not None else (hovers[-1] if hovers else None))

    return _drag


@pytest.fixture()
def db(tmp_path, monkeypatch):
    url = f"sqlite:///{(tmp_path / 'taskflow.db').as_posix()}"
    monkeypatch.setenv("TASKFLOW_DATABASE_URL", url)
    reset_config()
    reset_engine()
    init_db()
    yield url
    reset_engine()
    reset_config()
