"""Per-task serialized status sync.

At most one ``update_task_status`` call is in flight per task. A drop that
arrives while a call is running replaces whatever was queued behind it, so the
last call the server sees for a task always carries the most recent drop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from taskflow.models import TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncRequest:
    task_id: str
    status: TaskStatus
    token: int


@dataclass(frozen=True)
class SyncResult:
    request: SyncRequest
    ok: bool
    error: Optional[BaseException] = None


class StatusSync:
    """Runs status updates against a repository, one per task at a time.

    ``submit`` must be called while an event loop is running; the update is
    scheduled on it and ``on_settled`` receives every outcome.
    """

    def __init__(self, repository, on_settled: Callable[[SyncResult], None]) -> None:
        self._repository = repository
        self._on_settled = on_settled
        self._running: Dict[str, asyncio.Task] = {}
        self._pending: Dict[str, SyncRequest] = {}

    def in_flight(self, task_id: str) -> bool:
        return task_id in self._running

    def submit(self, request: SyncRequest) -> None:
        if request.task_id in self._running:
            replaced = self._pending.get(request.task_id)
            if replaced is not None:
                logger.debug(
                    "Dropping queued sync for %s (token %s) in favour of token %s",
                    request.task_id,
                    replaced.token,
                    request.token,
                )
            self._pending[request.task_id] = request
            return
        self._start(request)

    def _start(self, request: SyncRequest) -> None:
        loop = asyncio.get_running_loop()
        self._running[request.task_id] = loop.create_task(self._run(request))

    async def _run(self, request: SyncRequest) -> None:
        try:
            await self._repository.update_task_status(request.task_id, request.status)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Status sync failed for task %s -> %s: %s",
                request.task_id,
                request.status.value,
                exc,
            )
            result = SyncResult(request=request, ok=False, error=exc)
        else:
            result = SyncResult(request=request, ok=True)
        finally:
            self._running.pop(request.task_id, None)

        self._on_settled(result)

        queued = self._pending.pop(request.task_id, None)
        if queued is not None:
            self._start(queued)

    async def drain(self) -> None:
        """Wait until no call is running or queued for any task."""
        while self._running:
            await asyncio.gather(*list(self._running.values()), return_exceptions=True)
