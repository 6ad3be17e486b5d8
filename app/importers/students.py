"""
app/importers/students.py

Student roster rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from app.domain.filters import Equals
from app.importers.base import ImportDescriptor, UniquenessRule, format_cell, string_column_lengths
from app.importers.fields import RowReader
from db.models import Student

GENDERS: tuple[str, ...] = ("male", "female", "other")

# CSV column -> record field; also the template and export column order.
COLUMN_FIELDS: dict[str, str] = {
    "studentId": "student_code",
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "dateOfBirth": "date_of_birth",
    "gender": "gender",
    "street": "street",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "country": "country",
    "fatherName": "father_name",
    "motherName": "mother_name",
    "guardianName": "guardian_name",
    "parentContactNumber": "parent_contact_number",
    "parentEmail": "parent_email",
    "class": "class_name",
    "section": "section",
    "rollNumber": "roll_number",
    "admissionDate": "admission_date",
    "emergencyContactName": "emergency_contact_name",
    "emergencyContactRelationship": "emergency_contact_relationship",
    "emergencyContactPhone": "emergency_contact_phone",
    "profileImage": "profile_image",
    "bloodGroup": "blood_group",
    "medicalConditions": "medical_conditions",
}

REQUIRED_COLUMNS: tuple[str, ...] = (
    "studentId",
    "firstName",
    "lastName",
    "dateOfBirth",
    "gender",
    "street",
    "city",
    "state",
    "zipCode",
    "country",
    "fatherName",
    "motherName",
    "parentContactNumber",
    "class",
    "section",
    "rollNumber",
    "admissionDate",
    "emergencyContactName",
    "emergencyContactRelationship",
    "emergencyContactPhone",
)

TEMPLATE = """\
studentId,firstName,lastName,email,phone,dateOfBirth,gender,street,city,state,zipCode,country,fatherName,motherName,guardianName,parentContactNumber,parentEmail,class,section,rollNumber,admissionDate,emergencyContactName,emergencyContactRelationship,emergencyContactPhone,profileImage,bloodGroup,medicalConditions
STU001,John,Doe,john.doe@student.com,+1234567890,2010-06-15,male,123 Main St,Springfield,IL,62701,USA,Robert Doe,Jane Doe,Robert Doe,+1234567891,parent@example.com,Grade 5,A,001,2023-08-15,Jane Doe,Mother,+1234567892,,A+,
STU002,Jane,Smith,jane.smith@student.com,+1234567893,2009-03-22,female,456 Oak Ave,Springfield,IL,62702,USA,Michael Smith,Sarah Smith,,+1234567894,parent2@example.com,Grade 6,B,002,2023-08-15,Michael Smith,Father,+1234567895,,B+,"Allergic to nuts, Asthma"
STU003,Invalid,Email,invalid-email,+1234567896,2011-01-10,male,789 Pine Rd,Springfield,IL,62703,USA,David Email,Mary Email,,+1234567897,parent3@example.com,Grade 4,C,003,2023-08-15,David Email,Father,+1234567898,,O+,
STU004,Missing,Parents,missing.parents@student.com,+1234567899,2010-08-20,female,321 Elm St,Springfield,IL,62704,USA,,,,+1234567900,parent4@example.com,Grade 5,A,004,2023-08-15,Missing Contact,Mother,+1234567901,,AB+,Diabetes
"""


@dataclass(frozen=True)
class StudentCreate:
    student_code: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    date_of_birth: date
    gender: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    father_name: str
    mother_name: str
    guardian_name: str | None
    parent_contact_number: str
    parent_email: str | None
    class_name: str
    section: str
    roll_number: str
    admission_date: date
    emergency_contact_name: str
    emergency_contact_relationship: str
    emergency_contact_phone: str
    profile_image: str | None = None
    blood_group: str | None = None
    medical_conditions: list[str] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        record["is_active"] = True
        return record


def parse_student_row(row: RowReader) -> StudentCreate:
    return StudentCreate(
        student_code=row.text("studentId"),
        first_name=row.text("firstName"),
        last_name=row.text("lastName"),
        email=row.email("email"),
        phone=row.optional_text("phone"),
        date_of_birth=row.date("dateOfBirth"),
        gender=row.choice("gender", GENDERS),
        street=row.text("street"),
        city=row.text("city"),
        state=row.text("state"),
        zip_code=row.text("zipCode"),
        country=row.text("country"),
        father_name=row.text("fatherName"),
        mother_name=row.text("motherName"),
        guardian_name=row.optional_text("guardianName"),
        parent_contact_number=row.text("parentContactNumber"),
        parent_email=row.email("parentEmail"),
        class_name=row.text("class"),
        section=row.text("section"),
        roll_number=row.text("rollNumber"),
        admission_date=row.date("admissionDate"),
        emergency_contact_name=row.text("emergencyContactName"),
        emergency_contact_relationship=row.text("emergencyContactRelationship"),
        emergency_contact_phone=row.text("emergencyContactPhone"),
        profile_image=row.optional_text("profileImage"),
        blood_group=row.optional_text("bloodGroup"),
        medical_conditions=row.string_list("medicalConditions"),
    )


def export_student_row(record: Mapping[str, Any]) -> dict[str, str]:
    return {column: format_cell(record.get(name)) for column, name in COLUMN_FIELDS.items()}


STUDENT_IMPORT = ImportDescriptor(
    entity_type="students",
    label="Student",
    columns=tuple(COLUMN_FIELDS),
    required_columns=REQUIRED_COLUMNS,
    parse_row=parse_student_row,
    export_row=export_student_row,
    template=TEMPLATE,
    uniqueness_rules=(
        UniquenessRule(name="student_code", fields=("student_code",), description="studentId"),
        UniquenessRule(
            name="class_roll_number",
            fields=("class_name", "section", "roll_number"),
            description="class, section and rollNumber",
        ),
    ),
    export_filter=Equals("is_active", True),
    column_lengths=string_column_lengths(Student, COLUMN_FIELDS),
)
