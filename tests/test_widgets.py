"""
Streamlit rendering of forms and tables, driven through AppTest.
"""
from __future__ import annotations

import pytest
from streamlit.testing.v1 import AppTest

from core.forms import prefill_draft
from core.notify import Notifier
from core.resource_registry import get_resource
from core.ui import toast_seconds

from conftest import LIBRARY, STAFF, STUDENTS

FEE = {
    "_id": "f1",
    "student": {"_id": "s1", "name": "Asha Rao"},
    "amount": 1250.5,
    "feeType": "Tuition",
    "dueDate": "2024-04-01T00:00:00.000Z",
    "paidDate": None,
    "status": "Paid",
}


def _amount_app(value):
    from schemas.fees_schema import FORM
    from screens.widgets import render_field

    render_field(FORM.field("amount"), value, key="amount")


def _student_select_app():
    import streamlit as st

    from schemas.library_history_schema import FORM
    from screens.widgets import render_field

    refs = st.session_state.get("refs")
    st.session_state["picked"] = render_field(
        FORM.field("student"), "s2", key="student",
        reference_options=refs, reference_loading=refs is None,
    )


def _edit_form_app(resource_name, record):
    import streamlit as st

    import schemas.fees_schema  # noqa: F401
    import schemas.library_history_schema  # noqa: F401
    import schemas.staff_schema  # noqa: F401
    import schemas.students_schema  # noqa: F401
    from core.forms import prefill_draft
    from core.resource_registry import get_resource
    from screens.widgets import render_form_fields

    resource = get_resource(resource_name)
    with st.form("edit"):
        st.session_state["edited"] = render_form_fields(
            resource.form,
            prefill_draft(resource.form, record),
            {},
            key="edit",
            references={"students": [("s1", "Asha Rao"), ("s2", "Kabir Shah")]},
            reference_loading={},
        )
        st.form_submit_button("Update Record")


def _table_app(role):
    import streamlit as st

    from core.tables import ActionSpec, build_table
    from schemas.staff_schema import COLUMNS
    from screens.widgets import render_table

    records = [
        {"_id": "t1", "name": "Nisha Iyer", "designation": "Teacher", "joiningDate": "2019-06-01"},
        {"_id": "t2", "name": "Arjun Das", "designation": "Clerk", "joiningDate": "2021-08-15"},
    ]
    view = build_table(
        records, role, COLUMNS,
        actions=[ActionSpec("Edit", print), ActionSpec("Delete", print, pass_id=True, danger=True)],
    )
    clicked = render_table(view, COLUMNS, key="staff")
    if clicked:
        st.session_state["clicked"] = clicked


@pytest.mark.parametrize("value", [1500, 1250.5, None])
def test_amount_input_accepts_prefilled_values(value):
    at = AppTest.from_function(_amount_app, args=(value,)).run()
    assert not at.exception
    field = at.number_input(key="amount")
    assert field.value == (None if value is None else float(value))
    field.set_value(99.75).run()
    assert not at.exception
    assert at.number_input(key="amount").value == 99.75


def test_reference_select_waits_for_its_list():
    at = AppTest.from_function(_student_select_app).run()
    assert not at.exception
    pending = at.selectbox(key="student__pending")
    assert pending.disabled
    assert pending.placeholder == "Loading students…"
    assert at.session_state["picked"] == "s2"

    at.session_state["refs"] = [("s1", "Asha Rao"), ("s2", "Kabir Shah")]
    at.run()
    assert not at.exception
    select = at.selectbox(key="student")
    assert select.options == ["Asha Rao", "Kabir Shah"]
    assert select.value == "s2"
    assert at.session_state["picked"] == "s2"


@pytest.mark.parametrize(
    "resource_name, record",
    [
        ("students", STUDENTS[0]),
        ("library", LIBRARY[0]),
        ("library", LIBRARY[1]),
        ("staff", STAFF[1]),
        ("fees", FEE),
    ],
)
def test_edit_form_renders_prefilled(resource_name, record):
    at = AppTest.from_function(_edit_form_app, args=(resource_name, record)).run()
    assert not at.exception
    form = get_resource(resource_name).form
    assert at.session_state["edited"] == prefill_draft(form, record)


def test_table_actions_for_editing_role():
    at = AppTest.from_function(_table_app, args=("admin",)).run()
    assert not at.exception
    assert at.button(key="staff__Delete").proto.type == "primary"
    assert at.button(key="staff__Edit").proto.type == "secondary"

    at.button(key="staff__Delete").click().run()
    assert at.session_state["clicked"] == ("Delete", "t1")


def test_table_without_actions_for_read_only_role():
    at = AppTest.from_function(_table_app, args=("librarian",)).run()
    assert not at.exception
    assert len(at.button) == 0
    assert len(at.dataframe) == 1


def test_toast_duration_follows_ttl():
    assert toast_seconds(Notifier(ttl_seconds=1.5)) == 2
    assert toast_seconds(Notifier(ttl_seconds=0.2)) == 1
    assert toast_seconds(Notifier(ttl_seconds=4)) == 4


def test_dismissing_the_dialog_discards_the_draft(make_controller, monkeypatch):
    from screens import crud_page

    seen = {}

    def fake_dialog(title, **kwargs):
        seen["title"] = title
        seen.update(kwargs)
        return lambda body: (lambda ctl: None)

    monkeypatch.setattr(crud_page.st, "dialog", fake_dialog)
    ctl = make_controller("staff")
    assert ctl.open_edit(STAFF[0])
    crud_page._open_dialog(ctl)
    assert seen["title"] == "Edit Record"

    seen["on_dismiss"]()
    assert not ctl.dialog_open
    assert ctl.draft is None and ctl.editing_id is None

    assert ctl.open_add()
    crud_page._open_dialog(ctl)
    assert seen["title"] == "Add New Record"
    assert all(v in ("", None) for v in ctl.draft.values())
