# schemas/fees_schema.py
from __future__ import annotations

from typing import Optional, Union

from core.forms import FieldKind, FieldSpec, FormSpec
from core.records import DomainRecord
from core.resource_registry import Endpoints, ResourceDefinition, register
from core.tables import ColumnKind, ColumnSpec
from schemas.students_schema import StudentRef

FEE_STATUSES = ("Pending", "Paid")
FEE_TYPES = ("Tuition", "Library", "Transport", "Examination", "Other")


class FeeRecord(DomainRecord):
    student: Union[StudentRef, str]
    amount: float
    feeType: str = "Tuition"
    dueDate: Optional[str] = None
    paidDate: Optional[str] = None
    status: str = "Pending"


FORM = FormSpec(fields=(
    FieldSpec("student", "Student", FieldKind.REFERENCE, reference="students",
              required_message="Student is required"),
    FieldSpec("feeType", "Fee Type", FieldKind.SELECT, options=FEE_TYPES,
              required_message="Fee type is required"),
    FieldSpec("amount", "Amount", FieldKind.NUMBER, min_value=0,
              message="Amount must be a positive number"),
    FieldSpec("dueDate", "Due Date", FieldKind.DATE, required=False),
    FieldSpec("paidDate", "Paid Date", FieldKind.DATE, required=False),
    FieldSpec("status", "Status", FieldKind.SELECT, options=FEE_STATUSES,
              required_message="Status is required"),
))

COLUMNS = (
    ColumnSpec("Student Name", "student.name", reference="students"),
    ColumnSpec("Fee Type", "feeType"),
    ColumnSpec("Amount", lambda r: f"{float(r.get('amount') or 0):,.2f}"),
    ColumnSpec("Due Date", "dueDate", ColumnKind.DATE),
    ColumnSpec("Paid Date", "paidDate", ColumnKind.DATE),
    ColumnSpec("Status", "status", ColumnKind.BADGE, success_values=("Paid",)),
)

RESOURCE = register(ResourceDefinition(
    name="fees",
    page_name="Fees",
    title="Fees Management",
    singular="Fee record",
    model=FeeRecord,
    form=FORM,
    columns=COLUMNS,
    endpoints=Endpoints(
        list="/fees/all",
        create="/fees/create",
        update="/fees/update",
        delete="/fees/delete",
    ),
    empty_message="No Fees History",
    references=("students",),
))
