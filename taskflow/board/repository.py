"""Persistence seam for the board."""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from taskflow import tasks_repo
from taskflow.models import TaskStatus

from .models import BoardSnapshot, BoardTask


class BoardRepository(Protocol):
    async def load_board_snapshot(self, user_id: Optional[str]) -> BoardSnapshot:
        ...

    async def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        """Persist ``status``; raise on any failure."""
        ...


class SqlBoardRepository:
    """Board repository over the SQLAlchemy task functions.

    Session work is blocking, so each call runs in a worker thread.
    """

    async def load_board_snapshot(self, user_id: Optional[str]) -> BoardSnapshot:
        groups = await asyncio.to_thread(tasks_repo.get_tasks_by_status, user_id)
        return BoardSnapshot.from_mapping(
            {key: [BoardTask.from_dict(row) for row in rows] for key, rows in groups.items()}
        )

    async def update_task_status(self, task_id: str, status: TaskStatus) -> None:
        await asyncio.to_thread(tasks_repo.update_task_status, task_id, status)
