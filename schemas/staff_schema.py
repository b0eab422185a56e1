# schemas/staff_schema.py
from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.forms import FieldKind, FieldSpec, FormSpec
from core.records import DomainRecord
from core.resource_registry import Endpoints, ResourceDefinition, register
from core.tables import ColumnKind, ColumnSpec
from schemas.students_schema import GENDERS


class Staff(DomainRecord):
    name: str = Field(min_length=1)
    email: str = ""
    phone: str = ""
    gender: Optional[str] = None
    designation: str = ""
    department: Optional[str] = None
    joiningDate: Optional[str] = None


FORM = FormSpec(fields=(
    FieldSpec("name", "Full Name", min_length=2, message="Name must be at least 2 characters."),
    FieldSpec("email", "Email", FieldKind.EMAIL, message="Please enter a valid email address."),
    FieldSpec("phone", "Phone Number", FieldKind.PHONE, min_length=10,
              message="Phone number must be at least 10 digits."),
    FieldSpec("gender", "Gender", FieldKind.SELECT, options=GENDERS,
              required_message="Please select a gender."),
    FieldSpec("designation", "Designation", min_length=2, placeholder="Teacher"),
    FieldSpec("department", "Department", required=False, placeholder="Science"),
    FieldSpec("joiningDate", "Joining Date", FieldKind.DATE),
))

COLUMNS = (
    ColumnSpec("Name", "name"),
    ColumnSpec("Designation", "designation"),
    ColumnSpec("Department", "department"),
    ColumnSpec("Email", "email"),
    ColumnSpec("Phone", "phone"),
    ColumnSpec("Joining Date", "joiningDate", ColumnKind.DATE),
)

RESOURCE = register(ResourceDefinition(
    name="staff",
    page_name="Staff",
    title="Staff Management",
    singular="Staff member",
    model=Staff,
    form=FORM,
    columns=COLUMNS,
    endpoints=Endpoints(
        list="/staff/all",
        create="/staff/create",
        update="/staff/update",
        delete="/staff/delete",
    ),
    empty_message="No Staff Data",
))
