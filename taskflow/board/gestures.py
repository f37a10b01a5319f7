"""Translate widget output into pointer gestures on the board.

The sortable widget reports a whole new arrangement after each drop. Here
that arrangement is diffed against the board to recover the one task that
moved, and the drop is replayed on the manager as press, move past the
threshold, hovers and release, so it follows exactly the same path as a
pointer drag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from .columns import BoardColumns
from .manager import BoardStateManager, DropOutcome
from .models import ColumnId


@dataclass(frozen=True)
class MovedTask:
    task_id: str
    from_column: ColumnId
    to_column: ColumnId
    to_index: int


def _without(arrangement: Mapping[str, Sequence[str]], task_id: str) -> Dict[str, List[str]]:
    return {col: [tid for tid in ids if tid != task_id] for col, ids in arrangement.items()}


def _locate(arrangement: Mapping[str, Sequence[str]], task_id: str):
    for col, ids in arrangement.items():
        ids = list(ids)
        if task_id in ids:
            return col, ids.index(task_id)
    return None, -1


def find_moved_task(
    before: Mapping[str, Sequence[str]],
    after: Mapping[str, Sequence[str]],
) -> Optional[MovedTask]:
    """Find the single task whose relocation turns ``before`` into ``after``.

    Returns None when nothing changed, or when the two arrangements differ by
    more than one relocation or hold different tasks.
    """
    before = {col: list(ids) for col, ids in before.items()}
    after = {col: list(ids) for col, ids in after.items()}
    if before == after:
        return None
    if sorted(t for ids in before.values() for t in ids) != sorted(t for ids in after.values() for t in ids):
        return None

    for col, ids in before.items():
        for task_id in ids:
            if _without(before, task_id) != _without(after, task_id):
                continue
            to_col, to_index = _locate(after, task_id)
            from_column, to_column = ColumnId.parse(col), ColumnId.parse(to_col or "")
            if from_column is None or to_column is None:
                return None
            return MovedTask(task_id=task_id, from_column=from_column, to_column=to_column, to_index=to_index)
    return None


def plan_targets(columns: BoardColumns, move: MovedTask) -> List[str]:
    """Hover targets that bring the task to ``move.to_index``; the last one is the drop target."""
    dest = columns.column(move.to_column)
    if move.to_column == move.from_column:
        return [dest.tasks[move.to_index].id]
    if not dest.tasks:
        return [move.to_column.value]
    if move.to_index == 0:
        # Cross-column hovers insert after the hovered card; a second hover
        # over the same card (now a same-column hover) takes its place.
        first = dest.tasks[0].id
        return [first, first]
    return [dest.tasks[move.to_index - 1].id]


def replay_drag(manager: BoardStateManager, task_id: str, targets: Sequence[str]) -> DropOutcome:
    """Drive one full drag of ``task_id`` over ``targets``, dropping on the last."""
    manager.pointer_down(task_id, 0.0, 0.0)
    manager.pointer_move(manager.drag_threshold, 0.0)
    for target_id in targets:
        manager.drag_over(target_id)
    return manager.pointer_up(targets[-1] if targets else None)


def apply_arrangement(
    manager: BoardStateManager,
    arrangement: Mapping[str, Sequence[str]],
) -> Optional[DropOutcome]:
    """Replay the drop that produced ``arrangement``; None if there is nothing to replay."""
    move = find_moved_task(manager.columns.arrangement(), arrangement)
    if move is None:
        return None
    return replay_drag(manager, move.task_id, plan_targets(manager.columns, move))


def move_to_column(manager: BoardStateManager, task_id: str, column_id: ColumnId) -> DropOutcome:
    """Drag a card onto the empty area of another column."""
    return replay_drag(manager, task_id, [column_id.value])
