import asyncio

import streamlit as st
from streamlit_sortables import sort_items

from taskflow.board import BoardStateManager, DropKind, SqlBoardRepository, SyncState
from taskflow.board.gestures import apply_arrangement, move_to_column
from taskflow.board.models import COLUMN_ORDER
from taskflow.config import get_config
from taskflow.formatting import format_due_date
from taskflow.theme import set_theme
from taskflow.ui import bootstrap, current_user, open_task, task_card_html

set_theme(page_title="Kanban", page_icon="🗂️")
bootstrap()
user = current_user()

st.title("Kanban board")

if not user:
    st.stop()

cfg = get_config()
repository = SqlBoardRepository()


def mount_board(user_id: str) -> BoardStateManager:
    previous = st.session_state.get("board_manager")
    if previous is not None:
        previous.unmount()
    snapshot = asyncio.run(repository.load_board_snapshot(user_id))
    manager = BoardStateManager(
        snapshot,
        repository,
        drag_threshold=cfg.drag_threshold_px,
        rollback_on_failure=cfg.rollback_on_sync_failure,
    )
    st.session_state.board_manager = manager
    st.session_state.board_user_id = user_id
    st.session_state.board_version = st.session_state.get("board_version", 0) + 1
    return manager


if st.session_state.get("board_user_id") != user["id"] or "board_manager" not in st.session_state:
    mount_board(user["id"])
manager: BoardStateManager = st.session_state.board_manager


def run_gesture(gesture):
    """Deliver one gesture and let its status sync settle before the rerun."""

    async def _run():
        outcome = gesture()
        await manager.wait_idle()
        return outcome

    return asyncio.run(_run())


def report(outcome) -> None:
    kind = outcome.kind if outcome is not None else None
    if kind is DropKind.COMMITTED and manager.last_error is None:
        st.toast(f"Moved to {outcome.column.label}", icon="✅")
    elif kind is DropKind.CANCELLED:
        st.toast("Move cancelled", icon="↩️")
    st.session_state.board_version += 1
    st.rerun()


# ----- Toolbar -----
tb1, tb2 = st.columns([5, 1])
with tb1:
    st.caption("Drag cards between columns to change their status. Order within a column is not saved.")
with tb2:
    if st.button("↻ Reload", help="Reload the board from the database", use_container_width=True):
        mount_board(user["id"])
        st.toast("Board reloaded", icon="✅")
        st.rerun()

error = manager.last_error
if error is not None:
    ec1, ec2 = st.columns([6, 1])
    with ec1:
        st.error(error.message)
    with ec2:
        if st.button("Dismiss", key="dismiss-sync-error"):
            manager.dismiss_error()
            st.rerun()

# ----- Drag and drop -----
# The sortable widget draws its own drag preview.
label_to_id = {}
containers = []
for column in manager.columns:
    items = []
    for task in column.tasks:
        label = f"{task.title} · {format_due_date(task.due_date)} · #{task.id[:6]}"
        label_to_id[label] = task.id
        items.append(label)
    containers.append({"header": f"{column.title} ({len(column)})", "items": items})

sorted_containers = sort_items(
    containers,
    multi_containers=True,
    key=f"kanban-sortable-{st.session_state.board_version}",
)
arrangement = {
    column_id.value: [label_to_id[label] for label in container["items"] if label in label_to_id]
    for column_id, container in zip(COLUMN_ORDER, sorted_containers)
}
if arrangement != manager.columns.arrangement():
    report(run_gesture(lambda: apply_arrangement(manager, arrangement)))

# ----- Cards -----
st.divider()
board_cols = st.columns(len(COLUMN_ORDER))
for idx, column in enumerate(manager.columns):
    with board_cols[idx]:
        st.markdown(
            f'<div class="tf-column-header tf-column-{column.id.value}">{column.title}'
            f'<span class="tf-column-count">{len(column)}</span></div>',
            unsafe_allow_html=True,
        )
        for task in column.tasks:
            syncing = manager.sync_state(task.id) is SyncState.SYNCING
            st.markdown(task_card_html(task, syncing=syncing), unsafe_allow_html=True)
            b1, b2, b3 = st.columns(3)
            with b1:
                if idx > 0 and st.button("←", key=f"prev-{task.id}", help=f"Move to {COLUMN_ORDER[idx - 1].label}"):
                    report(run_gesture(lambda t=task.id, c=COLUMN_ORDER[idx - 1]: move_to_column(manager, t, c)))
            with b2:
                if st.button("Open", key=f"open-{task.id}"):
                    manager.pointer_down(task.id)
                    if manager.pointer_up(task.id).kind is DropKind.CLICK:
                        open_task(task.id)
            with b3:
                if idx < len(COLUMN_ORDER) - 1 and st.button(
                    "→", key=f"next-{task.id}", help=f"Move to {COLUMN_ORDER[idx + 1].label}"
                ):
                    report(run_gesture(lambda t=task.id, c=COLUMN_ORDER[idx + 1]: move_to_column(manager, t, c)))
        if not column.tasks:
            st.caption(f"No tasks in {column.title}.")
