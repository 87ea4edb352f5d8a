from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Literal
from datetime import date

from edupro.utils.id_generator import is_valid_school_id

CONTACT_REGEX = r'^\+?\d{10,15}$'
MIN_PASSWORD_LENGTH = 6


def _school_id(value: str) -> str:
    if not is_valid_school_id(value):
        raise ValueError("Invalid school ID format (expected e.g. sch_010m)")
    return value


def _nic(value: str) -> str:
    if sum(ch in "0123456789" for ch in value) < 4:
        raise ValueError("NIC must contain at least 4 digits")
    return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    contact: Optional[str] = Field(None, pattern=CONTACT_REGEX)
    school_name: str = Field(..., min_length=1)
    # Checked by the ID generator so a bad type surfaces as INVALID_INPUT
    school_type: str
    address: Optional[str] = None
    school_email: Optional[EmailStr] = None
    established_year: Optional[int] = None


class StudentRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    contact: str = Field(..., pattern=CONTACT_REGEX)
    school_id: str
    nic: str
    roll_num: Optional[int] = None
    birth: Optional[date] = None
    gender: Literal["male", "female", "other"] = "other"

    _check_school_id = field_validator("school_id")(_school_id)
    _check_nic = field_validator("nic")(_nic)


class TeacherRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    school_id: str
    nic: str
    teach_subject: Optional[str] = None

    _check_school_id = field_validator("school_id")(_school_id)
    _check_nic = field_validator("nic")(_nic)


class CoachRegister(BaseModel):
    coach_id: str = Field(..., pattern=r'^[A-Z0-9]{6,10}$')
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    contact: str = Field(..., pattern=CONTACT_REGEX)
    sports: List[str] = Field(default_factory=list)
