import pandas as pd
import streamlit as st

from taskflow import users_repo
from taskflow.errors import TaskflowError
from taskflow.models import Role
from taskflow.theme import set_theme
from taskflow.ui import bootstrap, current_user

set_theme(page_title="Admin", page_icon="🛡️")
bootstrap()
user = current_user()

st.title("Admin")

if not user or users_repo.check_user_role(user["id"]) is not Role.MAINTAINER:
    st.warning("Only maintainers can manage users.")
    st.stop()

users = users_repo.get_all_users()

st.subheader(f"Users ({len(users)})")
st.dataframe(
    pd.DataFrame(
        [{"Name": u["full_name"] or "", "Email": u["email"], "Role": u["role"]} for u in users]
    ),
    use_container_width=True,
    hide_index=True,
)

roles = [r.value for r in Role]
for u in users:
    c1, c2, c3 = st.columns([3, 2, 1])
    with c1:
        st.markdown(f"**{u['full_name'] or u['email']}**  \n{u['email']}")
    with c2:
        chosen = st.selectbox(
            "Role",
            roles,
            index=roles.index(u["role"]) if u["role"] in roles else 0,
            key=f"role-{u['id']}",
            label_visibility="collapsed",
        )
    with c3:
        if st.button("Update", key=f"role-save-{u['id']}", disabled=chosen == u["role"]):
            try:
                users_repo.update_user_role(u["id"], chosen)
            except TaskflowError as exc:
                st.error(str(exc))
            else:
                st.toast(f"{u['email']} is now {chosen}", icon="✅")
                st.rerun()

st.subheader("Invite user")
with st.form("invite-user", clear_on_submit=True):
    email = st.text_input("Email")
    full_name = st.text_input("Full name (optional)")
    if st.form_submit_button("Invite"):
        try:
            invited = users_repo.invite_user(email, full_name=full_name)
        except TaskflowError as exc:
            st.error(str(exc))
        else:
            st.toast(f"Invited {invited['email']}", icon="✅")
            st.rerun()
