from sqlalchemy import Column, String, Enum as SQLEnum
from sqlalchemy.orm import validates

from edupro.core.database import Base
from edupro.models.base import (
    GUID, generate_uuid, ActorStatus, CredentialMixin, TimestampMixin,
    EMAIL_PATTERN, check_pattern,
)
from edupro.utils.id_generator import SCHOOL_ID_PATTERN, TEACHER_ID_PATTERN


class Teacher(CredentialMixin, TimestampMixin, Base):
    """Teacher model"""
    __tablename__ = "teachers"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    teacher_id = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    nic = Column(String(32), nullable=False)
    school_id = Column(String(8), index=True, nullable=False)
    teach_subject = Column(String(64), nullable=True)  # course identifier
    status = Column(SQLEnum(ActorStatus), default=ActorStatus.ACTIVE, nullable=False)

    @validates("teacher_id")
    def _validate_teacher_id(self, key, value):
        return check_pattern(TEACHER_ID_PATTERN, value, key)

    @validates("school_id")
    def _validate_school_id(self, key, value):
        return check_pattern(SCHOOL_ID_PATTERN, value, key)

    @validates("email")
    def _validate_email(self, key, value):
        return check_pattern(EMAIL_PATTERN, value.lower() if isinstance(value, str) else value, key)

    @property
    def is_active(self) -> bool:
        return self.status == ActorStatus.ACTIVE

    def __repr__(self):
        return f"<Teacher {self.teacher_id}>"
