# Re-export all models for convenient imports
from edupro.models.base import ActorStatus
from edupro.models.admin import Admin, AdminRole, SchoolType
from edupro.models.student import Student, Gender
from edupro.models.teacher import Teacher
from edupro.models.coach import Coach

__all__ = [
    "ActorStatus",
    "Admin",
    "AdminRole",
    "SchoolType",
    "Student",
    "Gender",
    "Teacher",
    "Coach",
]
