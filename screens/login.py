# screens/login.py
# -------------------------------------------------------------------
# Session panel. The real sign-in happens on the backend; this only
# seeds session_state with the role and the session cookie value the
# backend issued, so the console can call the API on the user's behalf.
# -------------------------------------------------------------------
from __future__ import annotations
import streamlit as st

from core.ui import hide_sidebar

def render(settings):
    hide_sidebar()

    st.title(settings.app.name)
    st.caption(f"Backend: {settings.api.base_url}")

    with st.form("session_form"):
        name = st.text_input("Display name", value="")
        role = st.selectbox("Role", settings.rbac.roles, index=0)
        token = st.text_input(f"Session cookie ({settings.api.session_cookie})", type="password")
        submitted = st.form_submit_button("Continue", type="primary")

    if submitted:
        st.session_state["user"] = {"name": name.strip(), "role": role, "token": token.strip()}
        st.rerun()
