from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Literal
from datetime import datetime, date

from edupro.models import ActorStatus, AdminRole, Gender, SchoolType
from edupro.schemas.auth import CONTACT_REGEX, MIN_PASSWORD_LENGTH

StatusValue = Literal["active", "inactive", "suspended"]


class AdminResponse(BaseModel):
    id: str
    admin_id: str
    name: str
    email: str
    role: AdminRole
    status: ActorStatus
    school_id: Optional[str] = None
    school_name: Optional[str] = None
    school_type: Optional[SchoolType] = None
    permissions: Dict[str, Dict[str, bool]] = Field(default_factory=dict)
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class StudentResponse(BaseModel):
    id: str
    student_id: str
    name: str
    email: str
    school_id: str
    contact: str
    roll_num: Optional[int] = None
    birth: Optional[date] = None
    gender: Gender
    status: ActorStatus
    courses: List[str] = Field(default_factory=list)
    sports: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True
        use_enum_values = True


class TeacherResponse(BaseModel):
    id: str
    teacher_id: str
    name: str
    email: str
    school_id: str
    teach_subject: Optional[str] = None
    status: ActorStatus

    class Config:
        from_attributes = True
        use_enum_values = True


class CoachResponse(BaseModel):
    id: str
    coach_id: str
    name: str
    email: str
    contact: str
    sports: List[str] = Field(default_factory=list)
    status: ActorStatus

    class Config:
        from_attributes = True
        use_enum_values = True


# ============================================
# Admin-side updates
# ============================================

class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)
    contact: Optional[str] = Field(None, pattern=CONTACT_REGEX)
    roll_num: Optional[int] = None
    birth: Optional[date] = None
    gender: Optional[Literal["male", "female", "other"]] = None
    status: Optional[StatusValue] = None
    courses: Optional[List[str]] = None
    sports: Optional[List[str]] = None


class CoachUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)
    contact: Optional[str] = Field(None, pattern=CONTACT_REGEX)
    sports: Optional[List[str]] = None
    status: Optional[StatusValue] = None


class PermissionsUpdate(BaseModel):
    """Partial permission table, e.g. {"students": {"delete": false}}"""
    permissions: Dict[str, Dict[str, bool]]
