# app.py
from __future__ import annotations
import logging
import os
from pathlib import Path
import streamlit as st
from core.settings import load_settings
from core.logging_setup import configure_logging
from core.http_client import client_from_settings
from core.policy import current_user, validate_role, visible_pages_for
from core.resource_registry import all_resources, auto_discover
from core.ui import handle_error, tagline
from screens import login as login_screen
from screens import logout as logout_screen

APP_FILE = Path(__file__).resolve()
APP_DIR  = APP_FILE.parent

# (policy name, page file, title)
PAGES = [
    ("Students",        "screens/students/page.py",        "🎓 Students"),
    ("Student Profile", "screens/student_profile.py",      "👤 Student Profile"),
    ("Library History", "screens/library_history/page.py", "📚 Library History"),
    ("Staff",           "screens/staff/page.py",           "👨‍🏫 Staff"),
    ("Fees",            "screens/fees/page.py",            "💰 Fees"),
]

logger = logging.getLogger(__name__)

def _ensure_client(settings, user: dict):
    """One API client per signed-in session; rebuilt when the session token changes."""
    token = user.get("token") or ""
    if st.session_state.get("api_client_token") != token or "api_client" not in st.session_state:
        st.session_state["api_client"] = client_from_settings(settings, token or None)
        st.session_state["api_client_token"] = token
    return st.session_state["api_client"]

def _build_flat_pages(role: str, page_access: dict):
    allowed = set(visible_pages_for(role, page_access))
    pages, missing = [], []
    for policy_name, rel_path, title in PAGES:
        if policy_name not in allowed:
            continue
        if not (APP_DIR / rel_path).exists():
            missing.append(rel_path)
            continue
        url_path = Path(rel_path).parent.name if rel_path.endswith("page.py") else Path(rel_path).stem
        pages.append(st.Page(rel_path.replace("/", os.path.sep), title=title, url_path=url_path, default=not pages))
    if missing:
        st.sidebar.warning(f"Missing pages: {missing}")
    return pages

def main():
    settings = load_settings()
    configure_logging(logging.DEBUG if settings.app.debug else logging.INFO)
    st.set_page_config(page_title=settings.app.name, layout="wide")

    if "resources_discovered" not in st.session_state:
        auto_discover("schemas")
        logger.info("Resources: %s", ", ".join(r.name for r in all_resources()))
        st.session_state["resources_discovered"] = True

    if st.session_state.get("show_logout"):
        logout_screen.render()
        return

    user = current_user()
    if not user.get("role"):
        login_screen.render(settings)
        return

    try:
        role = validate_role(user.get("role"), settings.rbac.roles)
    except ValueError as e:
        handle_error(e, f"Role '{user.get('role')}' is not recognised. Sign in again.")
        st.session_state.pop("user", None)
        return

    _ensure_client(settings, user)

    left, right = st.columns([0.8, 0.2])
    with left: st.caption(f"Signed in as **{user.get('name') or 'User'}** · _{role}_")
    with right:
        if st.button("Logout", key="logout_top"):
            st.session_state["show_logout"] = True
            st.rerun()

    with st.sidebar:
        tagline()

    pages = _build_flat_pages(role, settings.rbac.page_access)
    if not pages:
        st.error("No pages available for your current role.")
        return
    st.navigation(pages, position="sidebar").run()

if __name__ == "__main__":
    main()
