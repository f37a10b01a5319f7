import random

import pytest

from taskflow.board.columns import BoardColumns
from taskflow.board.models import BoardSnapshot, BoardTask, ColumnId
from taskflow.board.reducer import (
    BoardState,
    Commit,
    CommitFailed,
    CommitSucceeded,
    DragCancelled,
    DragStarted,
    ErrorDismissed,
    HoverMove,
    HoverReorder,
    SyncState,
    plan_hover,
    reduce,
)
from taskflow.board.reorder import array_move, move_across, move_to_index, reorder_within
from taskflow.models import TaskStatus


# ----- Columns -----


def test_empty_snapshot_still_has_three_columns():
    columns = BoardColumns.from_snapshot(BoardSnapshot())

    assert [c.id for c in columns] == [ColumnId.NEW, ColumnId.PROCESSING, ColumnId.DONE]
    assert [c.title for c in columns] == ["New", "Processing", "Done"]
    assert all(len(c) == 0 for c in columns)


def test_snapshot_listing_a_task_twice_is_rejected():
    task = BoardTask(id="T1", title="dup")
    with pytest.raises(ValueError):
        BoardColumns.from_snapshot(BoardSnapshot(new=(task,), done=(task,)))


def test_resolve_target_accepts_task_or_column_id(snapshot):
    columns = BoardColumns.from_snapshot(snapshot(new=["T1"], done=["T2"]))

    assert columns.resolve_target("T2").id is ColumnId.DONE
    assert columns.resolve_target("processing").id is ColumnId.PROCESSING
    assert columns.resolve_target("nowhere") is None
    assert columns.find_task("T1").title == "Task T1"
    assert columns.column_of("missing") is None


def test_column_id_maps_to_status():
    assert ColumnId.NEW.status is TaskStatus.NEW
    assert ColumnId.PROCESSING.status is TaskStatus.PROCESSING
    assert ColumnId.DONE.status is TaskStatus.DONE
    assert ColumnId.for_status(TaskStatus.ARCHIVED) is None


def test_board_task_from_row_dict():
    task = BoardTask.from_dict(
        {
            "id": "abc",
            "title": "Ship it",
            "due_date": "2024-03-05",
            "assignee": {"id": "u1", "email": "maya@example.com", "full_name": None},
        }
    )

    assert task.due_date.isoformat() == "2024-03-05"
    assert task.assignees[0].display_name == "maya"


# ----- Reorder engine -----


def test_array_move_shifts_intervening_items():
    assert array_move(["a", "b", "c", "d"], 0, 2) == ("b", "c", "a", "d")
    assert array_move(["a", "b", "c", "d"], 3, 1) == ("a", "d", "b", "c")


def test_reorder_within_takes_hovered_index(snapshot):
    columns = BoardColumns.from_snapshot(snapshot(new=["A", "B", "C"]))

    moved = reorder_within(columns, "A", "C")

    assert moved.column(ColumnId.NEW).task_ids() == ["B", "C", "A"]
    assert reorder_within(columns, "A", "A") is columns
    assert reorder_within(columns, "A", "ghost") is columns


def test_move_across_inserts_after_hovered_task(snapshot):
    columns = BoardColumns.from_snapshot(snapshot(new=["A"], done=["X", "Y"]))

    moved = move_across(columns, "A", ColumnId.DONE, "X")

    assert moved.column(ColumnId.DONE).task_ids() == ["X", "A", "Y"]
    assert moved.column(ColumnId.NEW).task_ids() == []


def test_move_across_appends_on_empty_area(snapshot):
    columns = BoardColumns.from_snapshot(snapshot(new=["A"], done=["X", "Y"]))

    moved = move_across(columns, "A", ColumnId.DONE)

    assert moved.column(ColumnId.DONE).task_ids() == ["X", "Y", "A"]


def test_move_to_index_clamps(snapshot):
    columns = BoardColumns.from_snapshot(snapshot(new=["A", "B"], done=["X"]))

    assert move_to_index(columns, "A", ColumnId.DONE, 99).column(ColumnId.DONE).task_ids() == ["X", "A"]
    assert move_to_index(columns, "B", ColumnId.NEW, -3).column(ColumnId.NEW).task_ids() == ["B", "A"]


# ----- Reducer -----


def test_plan_hover():
    columns = BoardColumns.from_snapshot(
        BoardSnapshot(
            new=(BoardTask("A", "a"), BoardTask("B", "b")),
            done=(BoardTask("X", "x"),),
        )
    )

    assert plan_hover(columns, "A", "A") is None
    assert plan_hover(columns, "A", "ghost") is None
    assert plan_hover(columns, "A", "new") is None
    assert plan_hover(columns, "A", "B") == HoverReorder(task_id="A", over_id="B")
    assert plan_hover(columns, "A", "X") == HoverMove(task_id="A", to_column=ColumnId.DONE, over_id="X")
    assert plan_hover(columns, "A", "processing") == HoverMove(task_id="A", to_column=ColumnId.PROCESSING)


def test_hover_without_active_drag_is_ignored(snapshot):
    state = BoardState.initial(snapshot(new=["A", "B"]))

    assert reduce(state, HoverReorder(task_id="A", over_id="B")) is state


def test_random_hover_sequences_keep_every_task_exactly_once(snapshot):
    rng = random.Random(1234)
    ids = ["T%d" % i for i in range(7)]
    targets = ids + [c.value for c in ColumnId] + ["ghost"]

    for _ in range(200):
        state = BoardState.initial(snapshot(new=ids[:3], processing=ids[3:5], done=ids[5:]))
        active = rng.choice(ids)
        state = reduce(state, DragStarted(task_id=active))
        for _ in range(rng.randint(1, 12)):
            action = plan_hover(state.columns, active, rng.choice(targets))
            if action is not None:
                state = reduce(state, action)
            board_ids = state.columns.task_ids()
            assert sorted(board_ids) == sorted(ids)
            assert len(board_ids) == len(set(board_ids))


def test_stale_success_only_updates_confirmed_column(snapshot):
    state = BoardState.initial(snapshot(new=["A"]))
    state = reduce(state, DragStarted(task_id="A"))
    state = reduce(state, HoverMove(task_id="A", to_column=ColumnId.DONE))
    state = reduce(state, Commit(task_id="A", to_column=ColumnId.DONE, token=2))

    state = reduce(state, CommitSucceeded(task_id="A", token=1, status=TaskStatus.PROCESSING))

    assert state.confirmed["A"] is ColumnId.PROCESSING
    assert state.sync_state("A") is SyncState.SYNCING
    assert state.columns.column(ColumnId.DONE).task_ids() == ["A"]


def test_failure_records_error_and_dismiss_clears_it(snapshot):
    state = BoardState.initial(snapshot(new=["A"]))
    state = reduce(state, DragStarted(task_id="A"))
    state = reduce(state, HoverMove(task_id="A", to_column=ColumnId.DONE))
    state = reduce(state, Commit(task_id="A", to_column=ColumnId.DONE, token=1))

    state = reduce(state, CommitFailed(task_id="A", token=1, message="nope"))

    assert state.last_error.status is TaskStatus.DONE
    assert state.columns.column(ColumnId.NEW).task_ids() == ["A"]
    assert state.sync_state("A") is SyncState.IDLE
    assert reduce(state, ErrorDismissed()).last_error is None


def test_rollback_out_of_another_drags_column_keeps_its_origin(snapshot):
    state = BoardState.initial(snapshot(new=["A"], processing=["X", "Y", "Z"]))
    state = reduce(state, DragStarted(task_id="A"))
    state = reduce(state, HoverMove(task_id="A", to_column=ColumnId.PROCESSING, over_id="X"))
    state = reduce(state, Commit(task_id="A", to_column=ColumnId.PROCESSING, token=1))
    state = reduce(state, DragStarted(task_id="Y"))
    assert state.session.origin_index == 2

    state = reduce(state, CommitFailed(task_id="A", token=1, message="nope"))

    assert state.session.origin_index == 1
    state = reduce(state, HoverMove(task_id="Y", to_column=ColumnId.DONE))
    state = reduce(state, DragCancelled())
    assert state.columns.column(ColumnId.PROCESSING).task_ids() == ["X", "Y", "Z"]
    assert state.columns.column(ColumnId.NEW).task_ids() == ["A"]


def test_unknown_action_raises(snapshot):
    state = BoardState.initial(snapshot())
    with pytest.raises(TypeError):
        reduce(state, object())
