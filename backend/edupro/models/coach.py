import re

from sqlalchemy import Column, String, Enum as SQLEnum, JSON
from sqlalchemy.orm import validates

from edupro.core.database import Base
from edupro.models.base import (
    GUID, generate_uuid, ActorStatus, CredentialMixin, TimestampMixin,
    EMAIL_PATTERN, CONTACT_PATTERN, check_pattern,
)

COACH_ID_PATTERN = re.compile(r"^[A-Z0-9]{6,10}$", re.ASCII)


class Coach(CredentialMixin, TimestampMixin, Base):
    """Sports coach"""
    __tablename__ = "coaches"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    coach_id = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    contact = Column(String(16), nullable=False)
    sports = Column(JSON, default=list, nullable=False)
    status = Column(SQLEnum(ActorStatus), default=ActorStatus.ACTIVE, nullable=False)

    @validates("coach_id")
    def _validate_coach_id(self, key, value):
        return check_pattern(COACH_ID_PATTERN, value, key)

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
        return f"<Coach {self.coach_id}>"
