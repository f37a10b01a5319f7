from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from taskflow import tasks_repo
from taskflow.errors import TaskflowError
from taskflow.formatting import format_last_updated
from taskflow.models import Priority
from taskflow.theme import set_theme
from taskflow.ui import bootstrap, current_user, invalidate_board, kpi_block, open_task

set_theme(page_title="Dashboard", page_icon="📊")
bootstrap()
user = current_user()

st.title("Dashboard")

if not user:
    st.stop()

stats = tasks_repo.get_dashboard_stats(user["id"])
k1, k2, k3, k4 = st.columns(4)
with k1:
    st.markdown(kpi_block("Open tasks", stats.open_tasks), unsafe_allow_html=True)
with k2:
    st.markdown(kpi_block("Overdue", stats.overdue_tasks, "bad" if stats.overdue_tasks else ""), unsafe_allow_html=True)
with k3:
    st.markdown(kpi_block("Due today", stats.due_today, "warn" if stats.due_today else ""), unsafe_allow_html=True)
with k4:
    st.markdown(kpi_block("Completed", stats.completed_tasks, "good"), unsafe_allow_html=True)

tasks = tasks_repo.get_all_tasks(user["id"])

left, right = st.columns([1.6, 1])
with left:
    st.subheader("Recent tasks")
    if not tasks:
        st.info("No tasks yet. Create one below.")
    else:
        df = pd.DataFrame(
            [
                {
                    "Title": t["title"],
                    "Status": t["status"],
                    "Priority": t["priority"],
                    "Due": t["due_date"] or "",
                    "Last updated": format_last_updated(t["created_date"]),
                }
                for t in tasks[:10]
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)
        chosen = st.selectbox(
            "Open a task",
            options=[t["id"] for t in tasks],
            format_func=lambda tid: next(t["title"] for t in tasks if t["id"] == tid),
        )
        if st.button("Open", key="dash-open"):
            open_task(chosen)

with right:
    st.subheader("By status")
    if tasks:
        counts = pd.DataFrame(tasks)["status"].value_counts().rename_axis("status").reset_index(name="count")
        fig = px.bar(counts, x="status", y="count", color="status", template="plotly_white")
        fig.update_layout(margin=dict(l=6, r=6, t=10, b=10), height=300, showlegend=False)
        st.plotly_chart(fig, use_container_width=True)

st.subheader("Create task")
with st.form("create-task", clear_on_submit=True):
    title = st.text_input("Title")
    description = st.text_area("Description")
    c1, c2 = st.columns(2)
    with c1:
        priority = st.selectbox("Priority", [p.value for p in Priority])
    with c2:
        no_due = st.checkbox("No due date", value=True)
        due = st.date_input("Due date", value=date.today())
    if st.form_submit_button("Create"):
        try:
            created = tasks_repo.create_task(
                user["id"],
                title,
                description=description,
                priority=priority,
                due_date=None if no_due else due,
            )
        except TaskflowError as exc:
            st.error(str(exc))
        else:
            invalidate_board()
            st.toast(f"Created “{created['title']}”", icon="✅")
            st.rerun()
