# schemas/library_history_schema.py
from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from core.forms import FieldKind, FieldSpec, FormSpec
from core.records import DomainRecord
from core.resource_registry import Endpoints, ResourceDefinition, register
from core.tables import ColumnKind, ColumnSpec
from schemas.students_schema import StudentRef

STATUSES = ("Borrowed", "Returned")


class LibraryRecord(DomainRecord):
    # populated object on list responses, bare id elsewhere
    student: Union[StudentRef, str]
    bookName: str = Field(min_length=1)
    borrowDate: str
    returnDate: Optional[str] = None
    status: str = "Borrowed"


FORM = FormSpec(fields=(
    FieldSpec("student", "Student", FieldKind.REFERENCE, reference="students",
              required_message="Student is required"),
    FieldSpec("bookName", "Book Name", min_length=2,
              required_message="Book name is required",
              message="Book name must be at least 2 characters long"),
    FieldSpec("borrowDate", "Borrow Date", FieldKind.DATE,
              required_message="Borrow date is required"),
    FieldSpec("returnDate", "Return Date", FieldKind.DATE, required=False),
    FieldSpec("status", "Status", FieldKind.SELECT, options=STATUSES,
              required_message="Status is required"),
))

COLUMNS = (
    ColumnSpec("Photo", "student.photo.url", ColumnKind.IMAGE, reference="students"),
    ColumnSpec("Student Name", "student.name", reference="students"),
    ColumnSpec("Book Name", "bookName"),
    ColumnSpec("Borrow Date", "borrowDate", ColumnKind.DATE),
    ColumnSpec("Return Date", "returnDate", ColumnKind.DATE),
    ColumnSpec("Status", "status", ColumnKind.BADGE, success_values=("Returned",)),
)

RESOURCE = register(ResourceDefinition(
    name="library",
    page_name="Library History",
    title="Library History Management",
    singular="Library record",
    model=LibraryRecord,
    form=FORM,
    columns=COLUMNS,
    endpoints=Endpoints(
        list="/library/all",
        create="/library/create",
        update="/library/update",
        delete="/library/delete",
    ),
    empty_message="No library records found",
    references=("students",),
))
