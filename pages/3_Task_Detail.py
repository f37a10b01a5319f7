import html

import streamlit as st

from taskflow import tasks_repo, users_repo
from taskflow.errors import TaskflowError
from taskflow.formatting import format_last_updated, format_long_date
from taskflow.models import Priority, Role, TaskStatus
from taskflow.theme import set_theme
from taskflow.ui import badge, bootstrap, current_user, invalidate_board

set_theme(page_title="Task", page_icon="📝")
bootstrap()
user = current_user()

task_id = st.query_params.get("task") or st.session_state.get("active_task_id")
if not task_id:
    st.title("Task")
    st.info("Pick a task from the Dashboard or the Kanban board.")
    st.stop()

task = tasks_repo.get_task_details(task_id)
if task is None:
    st.title("Task not found")
    st.warning("This task does not exist or was deleted.")
    if st.button("← Back to board"):
        st.switch_page("pages/2_Kanban.py")
    st.stop()

bc1, bc2 = st.columns([0.15, 0.85])
with bc1:
    if st.button("← Back", help="Return to board"):
        st.session_state.pop("active_task_id", None)
        st.switch_page("pages/2_Kanban.py")

st.title(task["title"])
st.markdown(badge("status", task["status"]) + badge("priority", task["priority"]), unsafe_allow_html=True)

main, side = st.columns([2, 1])

with side:
    st.markdown("#### Details")
    assignee = task["assignee"]
    st.markdown(f"**Assignee:** {(assignee['full_name'] or assignee['email']) if assignee else 'Unassigned'}")
    st.markdown(f"**Due:** {format_long_date(task['due_date'])}")
    st.markdown(f"**Created:** {format_last_updated(task['created_date'])}")

    statuses = [s.value for s in TaskStatus if s is not TaskStatus.ARCHIVED or task["status"] == s.value]
    new_status = st.selectbox("Status", statuses, index=statuses.index(task["status"]))
    priorities = [p.value for p in Priority]
    new_priority = st.selectbox("Priority", priorities, index=priorities.index(task["priority"]))
    if st.button("💾 Save", key="detail-save"):
        try:
            if new_status != task["status"]:
                tasks_repo.update_task_status(task_id, new_status)
            if new_priority != task["priority"]:
                tasks_repo.update_task_priority(task_id, new_priority)
        except TaskflowError as exc:
            st.error(str(exc))
        else:
            invalidate_board()
            st.toast("Task updated", icon="✅")
            st.rerun()

    if user and users_repo.check_user_role(user["id"]) is Role.MAINTAINER:
        st.markdown("#### Maintainer")
        if st.button("🗄️ Archive", disabled=task["status"] == TaskStatus.ARCHIVED.value):
            try:
                tasks_repo.archive_task(user["id"], task_id)
            except TaskflowError as exc:
                st.error(str(exc))
            else:
                invalidate_board()
                st.rerun()
        if st.button("🗑 Delete", type="primary"):
            try:
                tasks_repo.delete_task(user["id"], task_id)
            except TaskflowError as exc:
                st.error(str(exc))
            else:
                invalidate_board()
                st.session_state.pop("active_task_id", None)
                st.switch_page("pages/2_Kanban.py")

with main:
    st.markdown("#### Description")
    st.write(task["description"] or "_No description._")

    comments = tasks_repo.get_task_comments(task_id)
    st.markdown(f"#### Comments ({len(comments)})")
    for comment in comments:
        author = comment["user"]
        who = (author["full_name"] or author["email"]) if author else "Unknown"
        st.markdown(
            f'<div class="tf-comment"><div class="tf-comment-meta">{html.escape(who)} · '
            f'{format_last_updated(comment["created_date"])}</div>{html.escape(comment["content"])}</div>',
            unsafe_allow_html=True,
        )

    if user:
        with st.form("add-comment", clear_on_submit=True):
            content = st.text_area("Add a comment")
            if st.form_submit_button("Post Comment"):
                try:
                    tasks_repo.add_comment(task_id, user["id"], content)
                except TaskflowError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()
