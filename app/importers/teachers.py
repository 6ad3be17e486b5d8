"""
app/importers/teachers.py

Teaching staff rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from app.domain.filters import Equals
from app.importers.base import ImportDescriptor, UniquenessRule, format_cell, string_column_lengths
from app.importers.fields import RowReader, RowValidationFailure
from app.importers.students import GENDERS
from db.models import Teacher

BANK_COLUMNS: tuple[str, ...] = ("bankAccountNumber", "bankName", "ifscCode")

COLUMN_FIELDS: dict[str, str] = {
    "teacherId": "teacher_code",
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
    "qualifications": "qualifications",
    "subjects": "subjects",
    "experience": "experience",
    "joiningDate": "joining_date",
    "salary": "salary",
    "emergencyContactName": "emergency_contact_name",
    "emergencyContactRelationship": "emergency_contact_relationship",
    "emergencyContactPhone": "emergency_contact_phone",
    "profileImage": "profile_image",
    "bloodGroup": "blood_group",
    "bankAccountNumber": "bank_account_number",
    "bankName": "bank_name",
    "ifscCode": "ifsc_code",
}

REQUIRED_COLUMNS: tuple[str, ...] = (
    "teacherId",
    "firstName",
    "lastName",
    "email",
    "phone",
    "dateOfBirth",
    "gender",
    "street",
    "city",
    "state",
    "zipCode",
    "country",
    "qualifications",
    "subjects",
    "experience",
    "joiningDate",
    "salary",
    "emergencyContactName",
    "emergencyContactRelationship",
    "emergencyContactPhone",
)

TEMPLATE = """\
teacherId,firstName,lastName,email,phone,dateOfBirth,gender,street,city,state,zipCode,country,qualifications,subjects,experience,joiningDate,salary,emergencyContactName,emergencyContactRelationship,emergencyContactPhone,profileImage,bloodGroup,bankAccountNumber,bankName,ifscCode
TCH001,John,Doe,john.doe@school.com,+1234567890,1985-06-15,male,123 Main St,Springfield,IL,62701,USA,B.Ed,Math,5,2020-08-01,50000,Jane Doe,Spouse,+1234567891,,A+,1234567890,ABC Bank,ABCD0123456
TCH002,Jane,Smith,jane.smith@school.com,+1234567892,1990-03-22,female,456 Oak Ave,Springfield,IL,62702,USA,"M.Sc Physics, B.Ed","Physics, Chemistry",3,2021-07-15,45000,Robert Smith,Spouse,+1234567893,,B+,9876543210,XYZ Bank,XYZD0654321
TCH003,Invalid,User,invalid-email,+1234567894,1988-12-10,male,789 Pine Rd,Springfield,IL,62703,USA,B.Sc,Science,7,2019-06-01,55000,Emergency Contact,Father,+1234567895,,O+,5555555555,DEF Bank,DEFG0987654
TCH004,Missing,Fields,missing.fields@school.com,+1234567896,1992-04-18,female,321 Elm St,Springfield,IL,62704,USA,,,2,2022-01-10,40000,Missing Contact,Mother,+1234567897,,AB+,7777777777,GHI Bank,GHIJ0456789
"""


@dataclass(frozen=True)
class TeacherCreate:
    teacher_code: str
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: date
    gender: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    qualifications: list[str]
    subjects: list[str]
    experience: int
    joining_date: date
    salary: Decimal
    emergency_contact_name: str
    emergency_contact_relationship: str
    emergency_contact_phone: str
    profile_image: str | None = None
    blood_group: str | None = None
    bank_account_number: str | None = None
    bank_name: str | None = None
    ifsc_code: str | None = None

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        record["is_active"] = True
        return record


def _bank_details(row: RowReader) -> dict[str, str | None]:
    account, bank, ifsc = (row.optional_text(column) for column in BANK_COLUMNS)
    supplied = [value is not None for value in (account, bank, ifsc)]
    if any(supplied) and not all(supplied):
        missing = [column for column, present in zip(BANK_COLUMNS, supplied) if not present]
        raise RowValidationFailure(
            f"Incomplete bank details: {', '.join(missing)} required when any bank field is given"
        )
    return {"bank_account_number": account, "bank_name": bank, "ifsc_code": ifsc}


def parse_teacher_row(row: RowReader) -> TeacherCreate:
    return TeacherCreate(
        teacher_code=row.text("teacherId"),
        first_name=row.text("firstName"),
        last_name=row.text("lastName"),
        email=row.email("email", required=True),
        phone=row.text("phone"),
        date_of_birth=row.date("dateOfBirth"),
        gender=row.choice("gender", GENDERS),
        street=row.text("street"),
        city=row.text("city"),
        state=row.text("state"),
        zip_code=row.text("zipCode"),
        country=row.text("country"),
        qualifications=row.string_list("qualifications", non_empty=True),
        subjects=row.string_list("subjects", non_empty=True),
        experience=row.integer("experience", minimum=0),
        joining_date=row.date("joiningDate"),
        salary=row.decimal(
            "salary",
            positive=True,
            max_digits=Teacher.__table__.c.salary.type.precision,
            places=Teacher.__table__.c.salary.type.scale,
        ),
        emergency_contact_name=row.text("emergencyContactName"),
        emergency_contact_relationship=row.text("emergencyContactRelationship"),
        emergency_contact_phone=row.text("emergencyContactPhone"),
        profile_image=row.optional_text("profileImage"),
        blood_group=row.optional_text("bloodGroup"),
        **_bank_details(row),
    )


def export_teacher_row(record: Mapping[str, Any]) -> dict[str, str]:
    return {column: format_cell(record.get(name)) for column, name in COLUMN_FIELDS.items()}


TEACHER_IMPORT = ImportDescriptor(
    entity_type="teachers",
    label="Teacher",
    columns=tuple(COLUMN_FIELDS),
    required_columns=REQUIRED_COLUMNS,
    parse_row=parse_teacher_row,
    export_row=export_teacher_row,
    template=TEMPLATE,
    uniqueness_rules=(
        UniquenessRule(name="teacher_code", fields=("teacher_code",), description="teacherId"),
        UniquenessRule(name="email", fields=("email",), description="email"),
    ),
    export_filter=Equals("is_active", True),
    column_lengths=string_column_lengths(Teacher, COLUMN_FIELDS),
)
