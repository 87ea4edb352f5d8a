"""
ID Generator Utility

Human-readable natural keys for schools, students, teachers and admins:
- School ID:  sch_XXXY    (XXX = sequence 001-999, Y = b/g/m school type)
- Student ID: st + last 4 of school ID + last 4 NIC digits
- Teacher ID: te + last 4 of school ID + last 4 NIC digits
- Admin ID:   admXXXX     (sequence 0001-9999)

Student and teacher IDs are a pure function of (school ID, NIC): two people
sharing the last four NIC digits in one school collide, and only the unique
index on the table catches it.
"""
import re
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edupro.core.exceptions import CapacityExceededError, InvalidInputError

SCHOOL_ID_PATTERN = re.compile(r"^sch_(\d{3})[bgm]$", re.ASCII)
STUDENT_ID_PATTERN = re.compile(r"^st\d{3}[bgm]\d{4}$", re.ASCII)
TEACHER_ID_PATTERN = re.compile(r"^te\d{3}[bgm]\d{4}$", re.ASCII)
MEMBER_ID_PATTERN = re.compile(r"^(st|te)(\d{3}[bgm])\d{4}$", re.ASCII)
ADMIN_ID_PATTERN = re.compile(r"^adm(\d{4})$", re.ASCII)

SCHOOL_TYPE_SUFFIXES = {
    "boys": "b",
    "girls": "g",
    "mixed": "m",
}

MAX_SCHOOLS = 999
MAX_ADMINS = 9999

STUDENT_PREFIX = "st"
TEACHER_PREFIX = "te"


def school_type_suffix(school_type: Optional[str]) -> str:
    suffix = SCHOOL_TYPE_SUFFIXES.get(school_type.lower()) if isinstance(school_type, str) else None
    if not suffix:
        raise InvalidInputError("Invalid school type. Must be: boys, girls, or mixed", field="school_type")
    return suffix


def next_sequence(last_id: Optional[str], pattern: "re.Pattern[str]") -> int:
    """Number following the one embedded in ``last_id``; 1 when there is none"""
    if last_id:
        match = pattern.fullmatch(last_id)
        if match:
            return int(match.group(1)) + 1
    return 1


async def generate_school_id(db: AsyncSession, school_type: str) -> str:
    """
    Next school ID for ``school_type`` ('boys', 'girls' or 'mixed').

    Reads the current maximum school ID; the result is not persisted here.
    Callers must serialize generate-then-insert (see register_admin) or two
    concurrent registrations can read the same maximum.
    """
    suffix = school_type_suffix(school_type)

    from edupro.models.admin import Admin

    result = await db.execute(
        select(Admin.school_id)
        .where(Admin.school_id.isnot(None))
        .order_by(Admin.school_id.desc())
        .limit(1)
    )
    next_number = next_sequence(result.scalar_one_or_none(), SCHOOL_ID_PATTERN)

    if next_number > MAX_SCHOOLS:
        raise CapacityExceededError("schools", MAX_SCHOOLS)

    return f"sch_{next_number:03d}{suffix}"


async def generate_admin_id(db: AsyncSession) -> str:
    from edupro.models.admin import Admin

    result = await db.execute(
        select(Admin.admin_id).order_by(Admin.admin_id.desc()).limit(1)
    )
    next_number = next_sequence(result.scalar_one_or_none(), ADMIN_ID_PATTERN)

    if next_number > MAX_ADMINS:
        raise CapacityExceededError("admins", MAX_ADMINS)

    return f"adm{next_number:04d}"


def _member_id(prefix: str, school_id: str, nic: str) -> str:
    if not school_id or not isinstance(school_id, str):
        raise InvalidInputError("Invalid school ID provided", field="school_id")
    if not nic or not isinstance(nic, str):
        raise InvalidInputError("Invalid NIC provided", field="nic")

    school_last4 = school_id[-4:]
    if len(school_last4) != 4:
        raise InvalidInputError("School ID must be at least 4 characters long", field="school_id")

    nic_digits = re.sub(r"[^0-9]", "", nic)
    if len(nic_digits) < 4:
        raise InvalidInputError("NIC must contain at least 4 digits", field="nic")

    return f"{prefix}{school_last4}{nic_digits[-4:]}"


def generate_student_id(school_id: str, nic: str) -> str:
    """e.g. ('sch_010m', '200012341099') -> 'st010m1099'"""
    return _member_id(STUDENT_PREFIX, school_id, nic)


def generate_teacher_id(school_id: str, nic: str) -> str:
    """e.g. ('sch_010m', '851231102V') -> 'te010m1102'"""
    return _member_id(TEACHER_PREFIX, school_id, nic)


def _matches(pattern: "re.Pattern[str]", value) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_school_id(school_id) -> bool:
    return _matches(SCHOOL_ID_PATTERN, school_id)


def is_valid_student_id(student_id) -> bool:
    return _matches(STUDENT_ID_PATTERN, student_id)


def is_valid_teacher_id(teacher_id) -> bool:
    return _matches(TEACHER_ID_PATTERN, teacher_id)


def extract_school_id(user_id) -> Optional[str]:
    """School ID embedded in a student or teacher ID, or None"""
    if not isinstance(user_id, str):
        return None
    match = MEMBER_ID_PATTERN.fullmatch(user_id)
    if match:
        return f"sch_{match.group(2)}"
    return None
