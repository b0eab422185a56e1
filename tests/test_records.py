from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.errors import RecordSchemaError
from core.records import as_record, index_by_id, parse_record, parse_records, record_id
from schemas.library_history_schema import LibraryRecord
from schemas.staff_schema import Staff
from schemas.students_schema import StudentRef

from conftest import LIBRARY, STAFF


def test_identifier_is_immutable():
    staff = parse_record(Staff, STAFF[0], "staff")
    assert staff.id == "t1"
    with pytest.raises(ValidationError):
        staff.id = "t9"


def test_record_without_identifier_is_rejected():
    with pytest.raises(RecordSchemaError) as exc:
        parse_record(Staff, {"name": "No Id"}, "staff")
    assert exc.value.resource == "staff"


def test_parse_records_splits_good_and_bad():
    payload = list(LIBRARY) + [{"_id": "l3", "student": "s1"}]
    good, bad = parse_records(LibraryRecord, payload, "library")
    assert [r.id for r in good] == ["l1", "l2"]
    assert isinstance(good[0].student, StudentRef)
    assert good[1].student == "s2"
    assert len(bad) == 1 and bad[0].resource == "library"


def test_parse_records_needs_a_list():
    assert parse_records(Staff, None) == ([], [])
    with pytest.raises(RecordSchemaError):
        parse_records(Staff, {"_id": "t1"}, "staff")


def test_unknown_fields_survive_a_dump():
    staff = parse_record(Staff, dict(STAFF[0], createdAt="2019-06-01T10:00:00Z"), "staff")
    dumped = as_record(staff)
    assert dumped["_id"] == "t1"
    assert dumped["createdAt"] == "2019-06-01T10:00:00Z"


def test_record_id_and_index():
    staff = parse_record(Staff, STAFF[1], "staff")
    assert record_id(staff) == "t2"
    assert record_id({"id": "x"}) == "x"
    index = index_by_id([staff, STAFF[0]])
    assert set(index) == {"t1", "t2"}
    assert index["t2"]["name"] == "Arjun Das"
    with pytest.raises(TypeError):
        as_record("t1")
