# core/ui.py
from __future__ import annotations
import logging
import time
import streamlit as st

from core.notify import NoticeKind, Notifier
from core.settings import load_settings

logger = logging.getLogger(__name__)

TOAST_ICONS = {NoticeKind.SUCCESS: "✅", NoticeKind.ERROR: "❌"}

def tagline():
    st.caption("Students → Library History → Staff → Fees")

def hide_sidebar():
    st.markdown(
        "<style>[data-testid=\"stSidebar\"], [data-testid=\"stSidebarCollapsedControl\"] {display: none;}</style>",
        unsafe_allow_html=True,
    )

def warn(msg: str): st.warning(msg)
def info(msg: str): st.info(msg)

def handle_error(e: Exception, user_message: str = "An error occurred."):
    """
    Log the full exception server-side and show a friendly or
    detailed error in Streamlit based on the debug setting.
    """
    settings = load_settings()
    logger.error(f"{user_message}: {e}", exc_info=True)
    if settings.app.debug:
        st.error(f"{user_message}\n\n**Debug Info:**\n```\n{e}\n```")
    else:
        st.error(user_message)

def get_notifier() -> Notifier:
    """One notifier per browser session."""
    if "notifier" not in st.session_state:
        ui = load_settings().ui
        st.session_state["notifier"] = Notifier(ttl_seconds=ui.notification_ttl_seconds, max_items=ui.max_notifications)
    return st.session_state["notifier"]

def toast_seconds(notifier: Notifier) -> int:
    """st.toast takes whole seconds."""
    return max(1, round(notifier.ttl_seconds))

def show_notifications(notifier: Notifier) -> int:
    """Toast everything raised since the last call; newest last."""
    notes = notifier.drain()
    for note in notes:
        st.toast(note.message, icon=TOAST_ICONS[note.kind], duration=toast_seconds(notifier))
    return len(notes)

def pause_with_notifications(notifier: Notifier, seconds: float):
    """Show pending toasts, then hold the dialog open long enough to read them."""
    show_notifications(notifier)
    time.sleep(seconds)
