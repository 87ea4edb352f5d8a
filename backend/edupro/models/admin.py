from datetime import datetime
import enum

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Text, JSON
from sqlalchemy.orm import validates

from edupro.core.database import Base
from edupro.core.exceptions import InvalidInputError
from edupro.core.permissions import default_permissions, has_permission
from edupro.models.base import (
    GUID, generate_uuid, ActorStatus, CredentialMixin, TimestampMixin,
    EMAIL_PATTERN, CONTACT_PATTERN, check_pattern,
)
from edupro.utils.id_generator import ADMIN_ID_PATTERN, SCHOOL_ID_PATTERN

MIN_ESTABLISHED_YEAR = 1800


class AdminRole(str, enum.Enum):
    """Admin roles; SUPER_ADMIN bypasses the permission table"""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MODERATOR = "moderator"
    PRINCIPAL = "principal"


class SchoolType(str, enum.Enum):
    BOYS = "boys"
    GIRLS = "girls"
    MIXED = "mixed"


class Admin(CredentialMixin, TimestampMixin, Base):
    """School administrator; a school-owning admin also holds the school's ID"""
    __tablename__ = "admins"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    admin_id = Column(String(7), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    contact = Column(String(16), nullable=True)

    role = Column(SQLEnum(AdminRole), default=AdminRole.ADMIN, nullable=False)
    status = Column(SQLEnum(ActorStatus), default=ActorStatus.ACTIVE, nullable=False)
    permissions = Column(JSON, default=default_permissions, nullable=False)

    # School fields
    school_name = Column(String(255), unique=True, nullable=True)
    school_id = Column(String(8), unique=True, index=True, nullable=True)
    school_type = Column(SQLEnum(SchoolType), nullable=True)
    address = Column(Text, nullable=True)
    school_email = Column(String(255), nullable=True)
    established_year = Column(Integer, nullable=True)

    last_login = Column(DateTime, nullable=True)

    @validates("admin_id")
    def _validate_admin_id(self, key, value):
        return check_pattern(ADMIN_ID_PATTERN, value, key)

    @validates("email")
    def _validate_email(self, key, value):
        return check_pattern(EMAIL_PATTERN, value.lower() if isinstance(value, str) else value, key)

    @validates("school_email")
    def _validate_school_email(self, key, value):
        return check_pattern(EMAIL_PATTERN, value, key, required=False)

    @validates("contact")
    def _validate_contact(self, key, value):
        return check_pattern(CONTACT_PATTERN, value, key, required=False)

    @validates("school_id")
    def _validate_school_id(self, key, value):
        if self.school_id is not None and value != self.school_id:
            raise InvalidInputError("School ID cannot be changed once assigned", field=key)
        return check_pattern(SCHOOL_ID_PATTERN, value, key, required=False)

    @validates("established_year")
    def _validate_established_year(self, key, value):
        if value is not None and not MIN_ESTABLISHED_YEAR <= value <= datetime.utcnow().year:
            raise InvalidInputError(
                f"Established year must be between {MIN_ESTABLISHED_YEAR} and the current year",
                field=key
            )
        return value

    def has_permission(self, resource: str, action: str) -> bool:
        """Checked against the state loaded when the request authenticated"""
        return has_permission(self.role, self.permissions, resource, action)

    @property
    def is_active(self) -> bool:
        return self.status == ActorStatus.ACTIVE

    def __repr__(self):
        return f"<Admin {self.admin_id}>"
