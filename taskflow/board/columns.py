"""Column model: the three fixed lanes and lookups over them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple

from .models import COLUMN_ORDER, BoardSnapshot, BoardTask, ColumnId


@dataclass(frozen=True)
class Column:
    id: ColumnId
    title: str
    tasks: Tuple[BoardTask, ...] = ()

    def index_of(self, task_id: str) -> int:
        for idx, task in enumerate(self.tasks):
            if task.id == task_id:
                return idx
        return -1

    def task_ids(self) -> List[str]:
        return [t.id for t in self.tasks]

    def with_tasks(self, tasks: Tuple[BoardTask, ...]) -> "Column":
        return replace(self, tasks=tuple(tasks))

    def __len__(self) -> int:
        return len(self.tasks)


@dataclass(frozen=True)
class BoardColumns:
    """Immutable arrangement of the board; every mutation returns a copy."""

    columns: Tuple[Column, ...]

    @classmethod
    def from_snapshot(cls, snapshot: BoardSnapshot) -> "BoardColumns":
        seen: Dict[str, ColumnId] = {}
        columns = []
        for column_id in COLUMN_ORDER:
            tasks = tuple(snapshot.tasks_for(column_id))
            for task in tasks:
                if task.id in seen:
                    raise ValueError(
                        f"Task {task.id} listed in both {seen[task.id].value} and {column_id.value}"
                    )
                seen[task.id] = column_id
            columns.append(Column(id=column_id, title=column_id.label, tasks=tasks))
        return cls(columns=tuple(columns))

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def column(self, column_id: ColumnId) -> Column:
        for col in self.columns:
            if col.id == column_id:
                return col
        raise KeyError(column_id)

    def column_of(self, task_id: str) -> Optional[Column]:
        for col in self.columns:
            if col.index_of(task_id) != -1:
                return col
        return None

    def find_task(self, task_id: str) -> Optional[BoardTask]:
        col = self.column_of(task_id)
        if col is None:
            return None
        return col.tasks[col.index_of(task_id)]

    def resolve_target(self, target_id: str) -> Optional[Column]:
        """A drop/hover target is either a task (its column) or a column id."""
        col = self.column_of(target_id)
        if col is not None:
            return col
        column_id = ColumnId.parse(target_id)
        return self.column(column_id) if column_id is not None else None

    def with_column(self, column: Column) -> "BoardColumns":
        return BoardColumns(columns=tuple(column if c.id == column.id else c for c in self.columns))

    def task_ids(self) -> List[str]:
        return [tid for col in self.columns for tid in col.task_ids()]

    def arrangement(self) -> Dict[str, List[str]]:
        return {col.id.value: col.task_ids() for col in self.columns}
