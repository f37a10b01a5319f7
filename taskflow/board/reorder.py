"""Hover-time list splicing.

Both operations are pure: they take a :class:`BoardColumns` and return a new
one, or the same object when the hover does not change anything.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, TypeVar

from .columns import BoardColumns
from .models import ColumnId

T = TypeVar("T")


def array_move(items: Sequence[T], from_index: int, to_index: int) -> Tuple[T, ...]:
    """Move one element so it ends up at ``to_index``; others shift by one."""
    out = list(items)
    out.insert(to_index, out.pop(from_index))
    return tuple(out)


def reorder_within(columns: BoardColumns, task_id: str, over_id: str) -> BoardColumns:
    """Same-column hover: the dragged task takes the hovered task's index."""
    col = columns.column_of(task_id)
    if col is None:
        return columns
    active_index = col.index_of(task_id)
    over_index = col.index_of(over_id)
    if over_index == -1 or over_index == active_index:
        return columns
    return columns.with_column(col.with_tasks(array_move(col.tasks, active_index, over_index)))


def move_across(
    columns: BoardColumns,
    task_id: str,
    to_column: ColumnId,
    over_id: Optional[str] = None,
) -> BoardColumns:
    """Cross-column hover: insert right after the hovered task, else append."""
    source = columns.column_of(task_id)
    if source is None or source.id == to_column:
        return columns
    dest = columns.column(to_column)
    over_index = dest.index_of(over_id) if over_id is not None else -1
    index = over_index + 1 if over_index != -1 else len(dest.tasks)
    return move_to_index(columns, task_id, to_column, index)


def move_to_index(columns: BoardColumns, task_id: str, to_column: ColumnId, index: int) -> BoardColumns:
    """Place a task at ``index`` (clamped) in ``to_column``, wherever it is now."""
    source = columns.column_of(task_id)
    if source is None:
        return columns
    task = source.tasks[source.index_of(task_id)]
    remaining = tuple(t for t in source.tasks if t.id != task_id)
    columns = columns.with_column(source.with_tasks(remaining))

    dest = columns.column(to_column)
    tasks = list(dest.tasks)
    index = max(0, min(index, len(tasks)))
    tasks.insert(index, task)
    return columns.with_column(dest.with_tasks(tuple(tasks)))
