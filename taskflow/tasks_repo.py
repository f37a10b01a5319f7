"""Task repository functions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session
from .errors import NotFoundError, PermissionDeniedError, StatusUpdateError, ValidationError
from .models import Comment, Priority, Role, Task, TaskStatus, User

logger = logging.getLogger(__name__)

_BOARD_GROUPS = {
    TaskStatus.NEW.value: "new",
    TaskStatus.PROCESSING.value: "processing",
    TaskStatus.DONE.value: "done",
}


@dataclass(frozen=True)
class DashboardStats:
    open_tasks: int = 0
    overdue_tasks: int = 0
    due_today: int = 0
    completed_tasks: int = 0


def _coerce_status(status: Union[TaskStatus, str]) -> TaskStatus:
    try:
        return TaskStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown task status: {status!r}") from None


def _coerce_priority(priority: Union[Priority, str, None]) -> Priority:
    if not priority:
        return Priority.NORMAL
    try:
        return Priority(priority)
    except ValueError:
        raise ValidationError(f"Unknown task priority: {priority!r}") from None


def _require_maintainer(session, actor_id: str, action: str) -> None:
    actor = session.get(User, actor_id)
    if actor is None or actor.role != Role.MAINTAINER.value:
        raise PermissionDeniedError(f"Only maintainers can {action} tasks")


def get_task_details(task_id: str) -> Optional[Dict[str, Any]]:
    """Get a single task with its assignee, or None if it does not exist."""
    with get_session() as s:
        task = s.get(Task, task_id)
        return task.to_dict() if task else None


def get_all_tasks(user_id: Optional[str]) -> List[Dict[str, Any]]:
    """List tasks assigned to a user, newest first.

    Args:
        user_id: Assignee to filter by. No user means no tasks.
    """
    if not user_id:
        return []
    with get_session() as s:
        rows = (
            s.execute(
                select(Task)
                .where(Task.assignee_id == user_id)
                .order_by(Task.created_date.desc())
            )
            .unique()
            .scalars()
            .all()
        )
        return [t.to_dict() for t in rows]


def get_tasks_by_status(user_id: Optional[str]) -> Dict[str, List[Dict[str, Any]]]:
    """Group a user's non-archived tasks into the three board columns.

    Each group keeps the canonical order (creation date, newest first).

    Returns:
        Dict with keys ``new``, ``processing`` and ``done``.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {"new": [], "processing": [], "done": []}
    for task in get_all_tasks(user_id):
        key = _BOARD_GROUPS.get(task["status"])
        if key is not None:
            grouped[key].append(task)
    return grouped


def create_task(
    user_id: str,
    title: str,
    description: Optional[str] = None,
    priority: Union[Priority, str, None] = None,
    due_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Create a task assigned to the creating user.

    Args:
        user_id: Creating user, who also becomes the assignee
        title: Required; surrounding whitespace is stripped
        description: Optional free text
        priority: Defaults to Normal
        due_date: Optional calendar date

    Returns:
        The new task as a dict.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    if not user_id:
        raise ValidationError("A user is required to create a task")

    task = Task(
        title=title,
        description=(description or "").strip() or None,
        status=TaskStatus.NEW.value,
        priority=_coerce_priority(priority).value,
        due_date=due_date,
        assignee_id=user_id,
    )
    with get_session() as s:
        s.add(task)
        s.commit()
        s.refresh(task)
        logger.info("Created task %s (%s)", task.id, task.title)
        return task.to_dict()


def update_task_status(task_id: str, status: Union[TaskStatus, str]) -> None:
    """Persist a new status for a task.

    Raises:
        StatusUpdateError: the task is missing or the write failed.
    """
    status = _coerce_status(status)
    try:
        with get_session() as s:
            task = s.get(Task, task_id)
            if task is None:
                raise StatusUpdateError(task_id, status.value, "task not found")
            task.status = status.value
            s.commit()
    except SQLAlchemyError as exc:
        logger.error("Error updating task status for %s: %s", task_id, exc)
        raise StatusUpdateError(task_id, status.value, str(exc)) from exc
    logger.info("Task %s status -> %s", task_id, status.value)


def update_task_priority(task_id: str, priority: Union[Priority, str]) -> None:
    priority = _coerce_priority(priority)
    with get_session() as s:
        task = s.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        task.priority = priority.value
        s.commit()


def get_task_comments(task_id: str) -> List[Dict[str, Any]]:
    """Comments on a task, oldest first."""
    with get_session() as s:
        rows = (
            s.execute(
                select(Comment)
                .where(Comment.task_id == task_id)
                .order_by(Comment.created_date.asc())
            )
            .unique()
            .scalars()
            .all()
        )
        return [c.to_dict() for c in rows]


def add_comment(task_id: str, user_id: str, content: str) -> Dict[str, Any]:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content is required")
    with get_session() as s:
        if s.get(Task, task_id) is None:
            raise NotFoundError(f"Task {task_id} not found")
        comment = Comment(task_id=task_id, user_id=user_id, content=content)
        s.add(comment)
        s.commit()
        s.refresh(comment)
        return comment.to_dict()


def archive_task(actor_id: str, task_id: str) -> None:
    """Move a task to Archived; it disappears from the board. Maintainers only."""
    with get_session() as s:
        _require_maintainer(s, actor_id, "archive")
        task = s.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        task.status = TaskStatus.ARCHIVED.value
        s.commit()
    logger.info("Task %s archived by %s", task_id, actor_id)


def delete_task(actor_id: str, task_id: str) -> None:
    """Delete a task and its comments. Maintainers only."""
    with get_session() as s:
        _require_maintainer(s, actor_id, "delete")
        task = s.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        s.delete(task)
        s.commit()
    logger.info("Task %s deleted by %s", task_id, actor_id)


def get_dashboard_stats(user_id: Optional[str], today: Optional[date] = None) -> DashboardStats:
    """Count a user's tasks for the dashboard metrics.

    Args:
        user_id: Assignee to count for. No user means all zeros.
        today: Reference day for overdue / due today (defaults to the local date).
    """
    if not user_id:
        return DashboardStats()
    today = today or date.today()
    with get_session() as s:
        rows = s.execute(
            select(Task.status, Task.due_date).where(Task.assignee_id == user_id)
        ).all()

    open_statuses = {TaskStatus.NEW.value, TaskStatus.PROCESSING.value}
    done = TaskStatus.DONE.value
    return DashboardStats(
        open_tasks=sum(1 for status, _ in rows if status in open_statuses),
        overdue_tasks=sum(1 for status, due in rows if due and status != done and due < today),
        due_today=sum(1 for status, due in rows if due and status != done and due == today),
        completed_tasks=sum(1 for status, _ in rows if status == done),
    )


_DEMO_USERS = [
    ("maya@example.com", "Maya Chen", Role.MAINTAINER),
    ("omar@example.com", "Omar Haddad", Role.USER),
    ("lena@example.com", None, Role.USER),
]

# (title, status, priority, due in days or None)
_DEMO_TASKS = [
    ("Draft Q3 roadmap", TaskStatus.NEW, Priority.NORMAL, 7),
    ("Fix login redirect loop", TaskStatus.NEW, Priority.URGENT, 0),
    ("Review onboarding copy", TaskStatus.PROCESSING, Priority.FAST, 2),
    ("Migrate reports to new schema", TaskStatus.PROCESSING, Priority.NORMAL, -3),
    ("Rotate API keys", TaskStatus.DONE, Priority.URGENT, -1),
    ("Set up status page", TaskStatus.NEW, Priority.NORMAL, None),
]


def seed_demo_data() -> bool:
    """Insert demo users and tasks into an empty database.

    Returns:
        True if data was inserted, False if users already existed.
    """
    with get_session() as s:
        if s.execute(select(User.id).limit(1)).first() is not None:
            return False

        now = datetime.utcnow()
        users = [User(email=e, full_name=n, role=r.value) for e, n, r in _DEMO_USERS]
        s.add_all(users)
        s.flush()

        for idx, (title, status, priority, due_in) in enumerate(_DEMO_TASKS):
            s.add(
                Task(
                    title=title,
                    status=status.value,
                    priority=priority.value,
                    due_date=(now.date() + timedelta(days=due_in)) if due_in is not None else None,
                    created_date=now - timedelta(hours=idx),
                    assignee_id=users[0].id,
                )
            )
        s.add(
            Task(
                title="Prepare release notes",
                status=TaskStatus.NEW.value,
                priority=Priority.FAST.value,
                created_date=now,
                assignee_id=users[1].id,
            )
        )
        s.commit()
    logger.info("Seeded demo data")
    return True
