# screens/logout.py
from __future__ import annotations
import streamlit as st

from core.ui import hide_sidebar
from screens.crud_page import unmount_all

SESSION_KEYS = ("user", "api_client", "api_client_token", "notifier", "show_logout")

def render():
    hide_sidebar()
    st.title("🚪 Logout")

    # in-flight responses must not land on the next user's screens
    unmount_all()
    for key in SESSION_KEYS:
        st.session_state.pop(key, None)

    st.success("You have been logged out successfully.")
    if st.button("🔄 Return to Sign In", type="primary"):
        st.rerun()
