# screens/crud_page.py
# -------------------------------------------------------------------
# Generic role-gated CRUD screen.
# One ScreenController per resource lives in session_state; switching
# pages unmounts the others so their late responses are dropped.
# -------------------------------------------------------------------
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import streamlit as st

from core.forms import reference_options
from core.policy import current_role
from core.resource_registry import ResourceDefinition, get_resource
from core.screen import DialogMode, ScreenController
from core.settings import load_settings
from core.tables import ActionSpec, build_table, reference_index
from core.ui import get_notifier, handle_error, info, pause_with_notifications, show_notifications, warn
from screens import widgets

logger = logging.getLogger(__name__)

CONTROLLERS_KEY = "screen_controllers"


def _k(resource: ResourceDefinition, s: str) -> str:
    """Per-resource key namespace for widgets."""
    return f"{resource.name}__{s}"


def _controllers() -> Dict[str, ScreenController]:
    return st.session_state.setdefault(CONTROLLERS_KEY, {})


def unmount_all(except_name: Optional[str] = None) -> None:
    ctls = _controllers()
    for name in list(ctls):
        if name != except_name:
            ctls.pop(name).unmount()


def get_controller(resource: ResourceDefinition) -> ScreenController:
    settings = load_settings()
    notifier = get_notifier()
    role = current_role()
    client = st.session_state["api_client"]

    ctls = _controllers()
    ctl = ctls.get(resource.name)
    if ctl is None or ctl.disposed or ctl.role != role or ctl.client is not client:
        if ctl is not None:
            ctl.unmount()
        ctl = ScreenController(
            resource,
            client,
            notifier,
            role,
            read_only_roles=tuple(settings.rbac.read_only_roles),
            close_delay=settings.ui.dialog_close_delay_seconds,
            pause=lambda s: pause_with_notifications(notifier, s),
        )
        ctls[resource.name] = ctl
    unmount_all(except_name=resource.name)
    ctl.mount()
    return ctl


def _reference_choices(ctl: ScreenController) -> Dict[str, Optional[List[Tuple[str, str]]]]:
    out = {}
    for name, records in ctl.references.items():
        label = get_resource(name).reference_label
        out[name] = None if records is None else reference_options(records, label)
    return out


def _dialog_body(ctl: ScreenController):
    resource = ctl.resource
    draft = ctl.draft or {}
    form_key = _k(resource, f"form_{ctl.dialog_seq}")
    with st.form(form_key):
        edited = widgets.render_form_fields(
            resource.form,
            draft,
            ctl.field_errors,
            key=form_key,
            references=_reference_choices(ctl),
            reference_loading=ctl.reference_loading,
        )
        label = "Update Record" if ctl.dialog_mode is DialogMode.EDIT else "Add Record"
        submitted = st.form_submit_button(label, type="primary", use_container_width=True)

    if st.button("Cancel", key=_k(resource, f"cancel_{ctl.dialog_seq}")):
        ctl.close_dialog()
        st.rerun()

    if submitted:
        with st.spinner("Saving…"):
            outcome = ctl.submit(edited)
        show_notifications(ctl.notifier)
        if outcome.ok:
            with st.spinner("Refreshing…"):
                ctl.wait()
            st.rerun()
        elif outcome.errors:
            st.rerun(scope="fragment")


def _open_dialog(ctl: ScreenController):
    title = "Edit Record" if ctl.dialog_mode is DialogMode.EDIT else "Add New Record"
    # dismissing with X or Esc discards the draft like Cancel
    st.dialog(title, width="large", on_dismiss=ctl.close_dialog)(_dialog_body)(ctl)


def render(resource_name: str):
    settings = load_settings()
    resource = get_resource(resource_name)
    try:
        ctl = get_controller(resource)
    except KeyError as e:
        handle_error(e, "Your session is not set up. Sign in again.")
        return

    if ctl.is_loading or any(ctl.reference_loading.values()):
        with st.spinner("Loading…"):
            ctl.wait()
    show_notifications(ctl.notifier)

    st.title(resource.title)

    if ctl.can_edit:
        _, right = st.columns([4, 1])
        with right:
            if st.button(f"Add {resource.singular}", key=_k(resource, "add"), type="primary", use_container_width=True):
                ctl.open_add()
    else:
        info("📖 Read-only mode: you can view records but not change them.")

    if ctl.rejected:
        warn(f"{len(ctl.rejected)} record(s) from the server were incomplete and are hidden.")

    references = reference_index({k: v or [] for k, v in ctl.references.items()})
    view = build_table(
        ctl.snapshot,
        ctl.role,
        resource.columns,
        actions=[
            ActionSpec("Edit", ctl.open_edit),
            ActionSpec("Delete", ctl.delete, pass_id=True, danger=True),
        ],
        read_only_roles=ctl.read_only_roles,
        references=references,
        empty_message=resource.empty_message,
    )
    clicked = widgets.render_table(view, resource.columns, key=_k(resource, "table"))
    if clicked:
        action, rid = clicked
        logger.debug("%s %s/%s", action, resource.name, rid)
        view.invoke(action, rid)
        if action == "Delete":
            with st.spinner("Refreshing…"):
                ctl.wait()
            st.rerun()

    if ctl.dialog_open:
        _open_dialog(ctl)

    st.caption(f"{len(ctl.snapshot)} record(s) · {settings.app.name}")
