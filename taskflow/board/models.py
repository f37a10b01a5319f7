"""View types used by the kanban board.

These are read-only projections of the persisted rows: the board never
creates, deletes or edits tasks, it only moves them between columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from taskflow.models import TaskStatus


class ColumnId(str, Enum):
    """The three board lanes. Archived tasks never appear on the board."""

    NEW = "new"
    PROCESSING = "processing"
    DONE = "done"

    @property
    def label(self) -> str:
        return COLUMN_LABELS[self]

    @property
    def status(self) -> TaskStatus:
        return COLUMN_STATUS[self]

    @classmethod
    def for_status(cls, status: TaskStatus) -> Optional["ColumnId"]:
        for column_id, column_status in COLUMN_STATUS.items():
            if column_status == status:
                return column_id
        return None

    @classmethod
    def parse(cls, raw: str) -> Optional["ColumnId"]:
        try:
            return cls(raw)
        except ValueError:
            return None


# Display order of the lanes.
COLUMN_ORDER: Tuple[ColumnId, ...] = (ColumnId.NEW, ColumnId.PROCESSING, ColumnId.DONE)

COLUMN_LABELS: Dict[ColumnId, str] = {
    ColumnId.NEW: "New",
    ColumnId.PROCESSING: "Processing",
    ColumnId.DONE: "Done",
}

COLUMN_STATUS: Dict[ColumnId, TaskStatus] = {
    ColumnId.NEW: TaskStatus.NEW,
    ColumnId.PROCESSING: TaskStatus.PROCESSING,
    ColumnId.DONE: TaskStatus.DONE,
}


@dataclass(frozen=True)
class Assignee:
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email.split("@")[0]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Assignee":
        return cls(
            id=str(data["id"]),
            email=str(data.get("email") or ""),
            full_name=data.get("full_name"),
            avatar_url=data.get("avatar_url"),
        )


@dataclass(frozen=True)
class BoardTask:
    """A card on the board."""

    id: str
    title: str
    due_date: Optional[date] = None
    assignees: Tuple[Assignee, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoardTask":
        raw_due = data.get("due_date")
        due = date.fromisoformat(raw_due) if isinstance(raw_due, str) and raw_due else raw_due
        raw_assignees = data.get("assignees")
        if raw_assignees is None:
            single = data.get("assignee")
            raw_assignees = [single] if single else []
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            due_date=due,
            assignees=tuple(Assignee.from_dict(a) for a in raw_assignees),
        )


@dataclass(frozen=True)
class BoardSnapshot:
    """Tasks grouped by board column, as loaded once at mount time."""

    new: Tuple[BoardTask, ...] = field(default_factory=tuple)
    processing: Tuple[BoardTask, ...] = field(default_factory=tuple)
    done: Tuple[BoardTask, ...] = field(default_factory=tuple)

    def tasks_for(self, column_id: ColumnId) -> Tuple[BoardTask, ...]:
        return getattr(self, column_id.value)

    @classmethod
    def from_mapping(cls, groups: Mapping[str, Iterable[BoardTask]]) -> "BoardSnapshot":
        return cls(**{c.value: tuple(groups.get(c.value, ())) for c in COLUMN_ORDER})

    def to_dict(self) -> Dict[str, list]:
        return {c.value: [t.id for t in self.tasks_for(c)] for c in COLUMN_ORDER}
