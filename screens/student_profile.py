# screens/student_profile.py
from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from core.dates import to_display_date
from core.errors import ApiError, GENERIC_ERROR_MESSAGE, RecordSchemaError
from core.forms import reference_options
from core.http_client import ApiClient
from core.notify import Notifier
from core.policy import require_page
from core.records import parse_record
from core.resource_registry import get_resource
from core.ui import show_notifications
from schemas.students_schema import Student
from screens import crud_page

logger = logging.getLogger(__name__)


def load_student_profile(client: ApiClient, notifier: Notifier, rid: str) -> Optional[Student]:
    """Single student by id; failures are reported on the notifier and yield None."""
    resource = get_resource("students")
    try:
        env = client.get(resource.endpoints.detail_path(rid))
    except ApiError as e:
        notifier.error(e.message)
        return None
    if not env.success:
        notifier.error(env.message or GENERIC_ERROR_MESSAGE)
        return None
    try:
        return parse_record(Student, env.data, resource.name)
    except RecordSchemaError as e:
        logger.warning("Student profile %s rejected: %s", rid, e.detail)
        notifier.error("Unexpected student data from server")
        return None


def _line(label: str, value: Optional[str]):
    st.markdown(f"**{label}:** {value or '-'}")


@require_page("Student Profile")
def render():
    ctl = crud_page.get_controller(get_resource("students"))
    with st.spinner("Loading…"):
        ctl.wait()
    show_notifications(ctl.notifier)

    st.title("Student Profile")
    options = reference_options(ctl.snapshot)
    if not options:
        st.info("No Student Data")
        return
    labels = dict(options)
    rid = st.selectbox("Pick a student", list(labels), format_func=lambda i: labels[i], key="profile__pick")

    student = load_student_profile(ctl.client, ctl.notifier, rid)
    show_notifications(ctl.notifier)
    if student is None:
        return

    left, right = st.columns([1, 3])
    with left:
        if student.photo and student.photo.url:
            st.image(student.photo.url, width=160)
    with right:
        st.subheader(student.name)
        _line("Class", student.student_class)
        _line("Gender", student.gender)
        _line("Date of Birth", to_display_date(student.dateOfBirth))

    contact, guardian = st.columns(2)
    with contact:
        st.markdown("#### Contact")
        info = student.contactInfo
        _line("Phone", info.phone)
        _line("Email", info.email)
        addr = info.address
        _line("Address", ", ".join(p for p in (addr.street, addr.city, addr.state, addr.postalCode) if p))
    with guardian:
        st.markdown("#### Guardian")
        g = student.guardian
        _line("Name", g.name)
        _line("Relationship", g.relationship)
        _line("Phone", g.phone)
        _line("Email", g.email)


if __name__ == "__main__":
    render()
