import streamlit as st

from taskflow.theme import set_theme
from taskflow.ui import bootstrap, current_user

set_theme()
bootstrap()
user = current_user()

st.markdown(
    '<div class="tf-hero"><h1>Taskflow</h1>'
    "<p>Track your work, move it across the board, and keep the team in sync.</p></div>",
    unsafe_allow_html=True,
)

if user:
    st.markdown(f"Welcome back, **{user['full_name'] or user['email']}**.")

c1, c2, c3 = st.columns(3)
with c1:
    st.caption("Your open, overdue and completed tasks at a glance.")
    if st.button("📊 Dashboard", use_container_width=True):
        st.switch_page("pages/1_Dashboard.py")
with c2:
    st.caption("Drag cards between New, Processing and Done.")
    if st.button("🗂️ Kanban board", use_container_width=True):
        st.switch_page("pages/2_Kanban.py")
with c3:
    st.caption("Invite people and manage maintainer roles.")
    if st.button("🛡️ Admin", use_container_width=True):
        st.switch_page("pages/4_Admin.py")
