import enum

from sqlalchemy import Column, String, Date, Enum as SQLEnum, Integer, JSON
from sqlalchemy.orm import validates

from edupro.core.database import Base
from edupro.models.base import (
    GUID, generate_uuid, ActorStatus, CredentialMixin, TimestampMixin,
    EMAIL_PATTERN, CONTACT_PATTERN, check_pattern,
)
from edupro.utils.id_generator import SCHOOL_ID_PATTERN, STUDENT_ID_PATTERN


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Student(CredentialMixin, TimestampMixin, Base):
    """Student model"""
    __tablename__ = "students"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    student_id = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    school_id = Column(String(8), index=True, nullable=False)
    nic = Column(String(32), nullable=False)
    contact = Column(String(16), nullable=False)
    roll_num = Column(Integer, nullable=True)
    birth = Column(Date, nullable=True)
    gender = Column(SQLEnum(Gender), default=Gender.OTHER, nullable=False)
    status = Column(SQLEnum(ActorStatus), default=ActorStatus.ACTIVE, nullable=False)

    # Enrolments, as lists of course / sport identifiers
    courses = Column(JSON, default=list, nullable=False)
    sports = Column(JSON, default=list, nullable=False)

    @validates("student_id")
    def _validate_student_id(self, key, value):
        return check_pattern(STUDENT_ID_PATTERN, value, key)

    @validates("school_id")
    def _validate_school_id(self, key, value):
        return check_pattern(SCHOOL_ID_PATTERN, value, key)

    @validates("email")
    def _validate_email(self, key, value):
        return check_pattern(EMAIL_PATTERN, value.lower() if isinstance(value, str) else value, key)

    @validates("contact")
    def _validate_contact(self, key, value):
        return check_pattern(CONTACT_PATTERN, value, key)

    @property
    def is_active(self) -> bool:
        return self.status == ActorStatus.ACTIVE

    def __repr__(self):
        return f"<Student {self.student_id}>"
