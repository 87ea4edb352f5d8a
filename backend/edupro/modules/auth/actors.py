"""
Actor registry.

Every kind of account that can log in (admin, student, teacher, coach) is
described once here: which model stores it, which attribute holds its public
ID, which claim carries that ID in the token and how it is serialized.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Type

from pydantic import BaseModel

from edupro.core.security import create_access_token
from edupro.models import Admin, Student, Teacher, Coach
from edupro.schemas.actors import AdminResponse, StudentResponse, TeacherResponse, CoachResponse


class ActorRole(str, enum.Enum):
    ADMIN = "admin"
    STUDENT = "student"
    TEACHER = "teacher"
    COACH = "coach"


@dataclass(frozen=True)
class ActorKind:
    role: ActorRole
    model: Type[Any]
    id_attr: str
    id_claim: str
    response_schema: Type[BaseModel]
    label: str

    def public_id(self, actor: Any) -> str:
        return getattr(actor, self.id_attr)

    def serialize(self, actor: Any) -> Dict[str, Any]:
        return self.response_schema.model_validate(actor).model_dump(mode="json")


ACTOR_KINDS: Dict[ActorRole, ActorKind] = {
    ActorRole.ADMIN: ActorKind(ActorRole.ADMIN, Admin, "admin_id", "adminID", AdminResponse, "Admin"),
    ActorRole.STUDENT: ActorKind(ActorRole.STUDENT, Student, "student_id", "studentID", StudentResponse, "Student"),
    ActorRole.TEACHER: ActorKind(ActorRole.TEACHER, Teacher, "teacher_id", "teacherID", TeacherResponse, "Teacher"),
    ActorRole.COACH: ActorKind(ActorRole.COACH, Coach, "coach_id", "coachID", CoachResponse, "Coach"),
}


def get_actor_kind(role) -> ActorKind:
    return ACTOR_KINDS[ActorRole(role)]


def create_actor_token(kind: ActorKind, actor: Any) -> str:
    """Token payload: {id, <role>ID, role} plus exp and type"""
    return create_access_token({
        "id": str(actor.id),
        kind.id_claim: kind.public_id(actor),
        "role": kind.role.value,
    })


def issue_session(kind: ActorKind, actor: Any) -> Dict[str, Any]:
    """Login response body for an authenticated actor"""
    return {
        "success": True,
        "message": "Login successful",
        "token": create_actor_token(kind, actor),
        kind.role.value: kind.serialize(actor),
    }
