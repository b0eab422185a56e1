from __future__ import annotations

import pytest

from core.policy import can_edit, can_view_page, validate_role, visible_pages_for

PAGE_ACCESS = {
    "Students": ["admin", "staff", "librarian"],
    "Staff": ["admin"],
    "Fees": ["admin", "staff"],
    "Help": ["public"],
}


def test_can_edit():
    assert can_edit("admin", ["librarian"])
    assert can_edit("Staff", ["librarian"])
    assert not can_edit("librarian", ["librarian"])
    assert not can_edit(" Librarian ", ["librarian"])
    assert not can_edit(None, ["librarian"])
    assert not can_edit("", [])


def test_validate_role():
    assert validate_role(" Admin ", ["admin", "staff", "librarian"]) == "admin"
    with pytest.raises(ValueError):
        validate_role("superuser", ["admin", "staff", "librarian"])
    with pytest.raises(ValueError):
        validate_role(None, ["admin"])


def test_page_access():
    assert can_view_page("Students", "librarian", PAGE_ACCESS)
    assert not can_view_page("Staff", "staff", PAGE_ACCESS)
    assert can_view_page("Help", None, PAGE_ACCESS)
    assert not can_view_page("Unlisted", "admin", PAGE_ACCESS)
    assert visible_pages_for("librarian", PAGE_ACCESS) == ["Help", "Students"]
    assert visible_pages_for("admin", PAGE_ACCESS) == ["Fees", "Help", "Staff", "Students"]
