"""Streamlit widgets and HTML fragments shared by the pages."""

from __future__ import annotations

import html
from typing import Any, Dict, Optional

import streamlit as st

from . import tasks_repo, users_repo
from .board.models import BoardTask
from .config import configure_logging, get_config
from .db import init_db
from .formatting import assignee_initials, assignee_name, format_due_date, is_overdue


def bootstrap() -> None:
    """Logging, tables and (optionally) demo data. Runs on every page load."""
    cfg = get_config()
    configure_logging(cfg)
    init_db()
    if cfg.seed_demo and not st.session_state.get("_tf_seeded"):
        tasks_repo.seed_demo_data()
        st.session_state["_tf_seeded"] = True


def current_user() -> Optional[Dict[str, Any]]:
    """Sidebar selector for the acting user; returns the selected user dict."""
    users = users_repo.get_all_users()
    if not users:
        st.sidebar.info("No users yet. Invite one from the Admin page.")
        return None

    by_id = {u["id"]: u for u in users}
    if st.session_state.get("current_user_id") not in by_id:
        default = users_repo.get_user_by_email(get_config().default_user_email or "")
        st.session_state["current_user_id"] = default["id"] if default else users[-1]["id"]

    ids = list(by_id)
    selected = st.sidebar.selectbox(
        "Signed in as",
        options=ids,
        index=ids.index(st.session_state["current_user_id"]),
        format_func=lambda uid: by_id[uid]["full_name"] or by_id[uid]["email"],
    )
    st.session_state["current_user_id"] = selected
    user = by_id[selected]
    st.sidebar.caption(f"{user['email']} · {user['role']}")
    return user


def badge(kind: str, value: str) -> str:
    return f'<span class="tf-badge tf-{kind}-{html.escape(value)}">{html.escape(value)}</span>'


def kpi_block(label: str, value: Any, tone: str = "") -> str:
    tone_cls = f" tf-kpi-{tone}" if tone else ""
    return (
        f'<div class="tf-kpi-box"><div class="tf-kpi-label">{html.escape(label)}</div>'
        f'<div class="tf-kpi-value{tone_cls}">{value}</div></div>'
    )


def task_card_html(task: BoardTask, syncing: bool = False) -> str:
    classes = "tf-task-card"
    if syncing:
        classes += " tf-syncing"
    due = html.escape(format_due_date(task.due_date))
    if is_overdue(task.due_date):
        due = f'<span class="tf-overdue-date">{due}</span>'
    name = html.escape(assignee_name(task.assignees))
    return (
        f'<div class="{classes}">'
        f'<div class="tf-task-title">{html.escape(task.title)}</div>'
        f'<div class="tf-task-meta"><span>📅 {due}</span>'
        f'<span class="tf-avatar" title="{name}">{html.escape(assignee_initials(task.assignees))}</span></div>'
        f"</div>"
    )


def open_task(task_id: str) -> None:
    st.session_state["active_task_id"] = task_id
    st.switch_page("pages/3_Task_Detail.py")


def invalidate_board() -> None:
    """Drop the mounted board so the Kanban page reloads it from the database."""
    manager = st.session_state.pop("board_manager", None)
    if manager is not None:
        manager.unmount()
