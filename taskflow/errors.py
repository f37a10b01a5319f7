"""Exceptions raised by the Taskflow repositories and board core."""

from __future__ import annotations


class TaskflowError(Exception):
    """Base class for errors that pages render to the user."""


class ValidationError(TaskflowError):
    """A required field was missing or blank."""


class NotFoundError(TaskflowError):
    """The referenced task, comment or user does not exist."""


class PermissionDeniedError(TaskflowError):
    """The acting user lacks the role required for the operation."""


class StatusUpdateError(TaskflowError):
    """Persisting a task's new status failed."""

    def __init__(self, task_id: str, status: str, reason: str = "") -> None:
        self.task_id = task_id
        self.status = status
        self.reason = reason
        message = f"Failed to update task status ({task_id} -> {status})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
