# core/policy.py
"""
Role gates.

The role is read once from the session by the app shell and passed down
explicitly; nothing here writes it. These checks only decide what the UI
shows. The backend enforces permissions on its own.
"""
from __future__ import annotations

import functools
from typing import Callable, Dict, Iterable, List, Mapping, Optional

import streamlit as st

from core.settings import load_settings

PUBLIC = "public"


def normalize_role(role: Optional[str]) -> str:
    return (role or "").strip().lower()


def validate_role(role: Optional[str], known_roles: Iterable[str]) -> str:
    """Returns the normalized role; raises ValueError for a role outside the closed set."""
    r = normalize_role(role)
    known = {normalize_role(k) for k in known_roles}
    if r not in known:
        raise ValueError(f"Unknown role: {role!r}")
    return r


def can_edit(role: Optional[str], read_only_roles: Iterable[str]) -> bool:
    """True when mutation actions (Add, Edit, Delete) are shown to this role."""
    r = normalize_role(role)
    if not r:
        return False
    return r not in {normalize_role(x) for x in read_only_roles}


def can_view_page(page_name: str, role: Optional[str], page_access: Mapping[str, Iterable[str]]) -> bool:
    allowed = {normalize_role(x) for x in page_access.get(page_name, ())}
    if PUBLIC in allowed:
        return True
    return normalize_role(role) in allowed


def visible_pages_for(role: Optional[str], page_access: Mapping[str, Iterable[str]]) -> List[str]:
    return sorted(p for p in page_access if can_view_page(p, role, page_access))


def current_user() -> Dict:
    return st.session_state.get("user") or {}


def current_role() -> str:
    return normalize_role(current_user().get("role"))


def require_page(page_name: str, page_access: Optional[Mapping[str, Iterable[str]]] = None):
    """Stops the page for roles outside its page_access entry (settings.yaml by default)."""
    def _wrap(fn: Callable):
        @functools.wraps(fn)
        def _inner(*args, **kwargs):
            access = page_access if page_access is not None else load_settings().rbac.page_access
            if not can_view_page(page_name, current_role(), access):
                st.error("Access Denied. You don't have permission to view this page.")
                st.stop()
            return fn(*args, **kwargs)
        return _inner
    return _wrap
