# schemas/students_schema.py
"""
Students resource.

The backend nests contact details and guardian into objects and stores the
photo as an uploaded file. The form edits them flat; build_payload nests them
back and the request goes out as multipart with contactInfo and guardian
JSON-stringified into their own parts.
"""
from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from core.forms import FieldKind, FieldSpec, FormSpec
from core.records import DomainRecord
from core.resource_registry import Endpoints, ResourceDefinition, register
from core.tables import ColumnKind, ColumnSpec

GENDERS = ("Male", "Female", "Other")
PHOTO_MAX_BYTES = 2 * 1024 * 1024


class Photo(BaseModel):
    model_config = ConfigDict(extra="allow")
    url: Optional[str] = None


class Address(BaseModel):
    model_config = ConfigDict(extra="allow")
    street: str = ""
    city: str = ""
    state: str = ""
    postalCode: str = ""


class ContactInfo(BaseModel):
    model_config = ConfigDict(extra="allow")
    phone: str = ""
    email: str = ""
    address: Address = Field(default_factory=Address)


class Guardian(BaseModel):
    model_config = ConfigDict(extra="allow")
    name: str = ""
    relationship: str = ""
    phone: str = ""
    email: str = ""


class Student(DomainRecord):
    name: str = Field(min_length=1)
    dateOfBirth: Optional[str] = None
    gender: Optional[str] = None
    student_class: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("class", "studentClass"),
        serialization_alias="class",
    )
    contactInfo: ContactInfo = Field(default_factory=ContactInfo)
    guardian: Guardian = Field(default_factory=Guardian)
    photo: Optional[Photo] = None


class StudentRef(DomainRecord):
    """A student as populated inside another record (library loan, fee)."""
    name: str = ""
    photo: Optional[Photo] = None


FORM = FormSpec(
    multipart=True,
    fields=(
        FieldSpec("name", "Full Name", min_length=2,
                  message="Name must be at least 2 characters.", placeholder="John Doe"),
        FieldSpec("dateOfBirth", "Date of Birth", FieldKind.DATE,
                  message="Please enter a valid date."),
        FieldSpec("gender", "Gender", FieldKind.SELECT, options=GENDERS,
                  required_message="Please select a gender."),
        FieldSpec("class", "Class", min_length=1, submit_as=("studentClass",),
                  required_message="Please enter a class.", placeholder="10th Grade"),
        FieldSpec("phone", "Phone Number", FieldKind.PHONE, min_length=10, source="contactInfo.phone",
                  message="Phone number must be at least 10 digits.", placeholder="1234567890"),
        FieldSpec("email", "Email", FieldKind.EMAIL, source="contactInfo.email",
                  submit_as=("email", "contactInfo.email"),
                  message="Please enter a valid email address.", placeholder="john@example.com"),
        FieldSpec("photo", "Photo", FieldKind.FILE, required=False,
                  accept=("png", "jpg", "jpeg", "gif", "webp"), max_bytes=PHOTO_MAX_BYTES),
        FieldSpec("street", "Street Address", source="contactInfo.address.street",
                  required_message="Please enter a street address.", placeholder="123 Main St"),
        FieldSpec("city", "City", source="contactInfo.address.city",
                  required_message="Please enter a city.", placeholder="Anytown"),
        FieldSpec("state", "State", source="contactInfo.address.state",
                  required_message="Please enter a state.", placeholder="State"),
        FieldSpec("postalCode", "Postal Code", source="contactInfo.address.postalCode",
                  required_message="Please enter a postal code.", placeholder="12345"),
        FieldSpec("guardianName", "Guardian Name", min_length=2, source="guardian.name",
                  message="Guardian name must be at least 2 characters.", placeholder="Jane Doe"),
        FieldSpec("guardianRelationship", "Guardian Relationship", source="guardian.relationship",
                  required_message="Please enter the guardian's relationship.", placeholder="Mother"),
        FieldSpec("guardianPhone", "Guardian Phone", FieldKind.PHONE, min_length=10, source="guardian.phone",
                  message="Guardian phone number must be at least 10 digits.", placeholder="0987654321"),
        FieldSpec("guardianEmail", "Guardian Email", FieldKind.EMAIL, source="guardian.email",
                  message="Please enter a valid guardian email address.", placeholder="jane@example.com"),
    ),
)

COLUMNS = (
    ColumnSpec("Photo", "photo.url", ColumnKind.IMAGE),
    ColumnSpec("Name", "name"),
    ColumnSpec("Class", "class"),
    ColumnSpec("Gender", "gender"),
    ColumnSpec("Date of Birth", "dateOfBirth", ColumnKind.DATE),
    ColumnSpec("Phone", "contactInfo.phone"),
    ColumnSpec("Email", "contactInfo.email"),
    ColumnSpec("Guardian", "guardian.name"),
)

RESOURCE = register(ResourceDefinition(
    name="students",
    page_name="Students",
    title="Student Management",
    singular="Student",
    model=Student,
    form=FORM,
    columns=COLUMNS,
    endpoints=Endpoints(
        list="/student/all",
        create="/student/create",
        update="/student/update",
        delete="/student/delete",
        detail="/student/profile",
    ),
    empty_message="No Student Data",
    fetch_detail_on_edit=True,
))
