"""Shared column types and mixins for the actor models"""
import enum
import re
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Column, DateTime, String, TypeDecorator

from edupro.core.exceptions import InvalidInputError
from edupro.core.security import get_password_hash, verify_password

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONTACT_PATTERN = re.compile(r"^\+?\d{10,15}$", re.ASCII)


def generate_uuid() -> str:
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """UUID primary keys stored as VARCHAR(36) on every backend"""
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return str(value) if value is not None else None

    def process_result_value(self, value, dialect):
        return str(value) if value is not None else None


class ActorStatus(str, enum.Enum):
    """Lifecycle status shared by every actor"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


def check_pattern(pattern: "re.Pattern[str]", value: Optional[str], field: str, required: bool = True) -> Optional[str]:
    """Model-level field validator, raising the API's InvalidInputError"""
    if value is None:
        if required:
            raise InvalidInputError(f"{field} is required", field=field)
        return value
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise InvalidInputError(f"Invalid {field} format", field=field)
    return value


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CredentialMixin:
    """
    Password lifecycle for one actor.

    Records are built through ``create()`` which hashes the plaintext before
    the row exists; there is no save hook doing it behind the caller's back.
    """

    hashed_password = Column(String(255), nullable=False)

    @classmethod
    def create(cls, *, password: str, **fields: Any):
        return cls(hashed_password=get_password_hash(password), **fields)

    def set_password(self, password: str) -> bool:
        """Replace the stored hash unless the incoming value is the stored one. Returns True when changed."""
        if password == self.hashed_password:
            return False
        self.hashed_password = get_password_hash(password)
        return True

    def compare_password(self, candidate: str) -> bool:
        return verify_password(candidate, self.hashed_password)
