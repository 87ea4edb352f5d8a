"""
Account registration and login.

Registration builds each record through ``CredentialMixin.create`` so the
password is hashed before the row exists. School-owning admins draw their
school ID from a global sequence; ``register_admin`` holds the registration
lock across generate-and-insert and the unique index on ``admins.school_id``
turns any cross-process collision into a ConflictError.
"""
import asyncio
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edupro.core.exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
)
from edupro.core.logging_config import logger
from edupro.core.permissions import default_permissions
from edupro.core.security import get_password_hash, verify_password
from edupro.models import Admin, AdminRole, Coach, Gender, SchoolType, Student, Teacher
from edupro.modules.auth.actors import ActorKind, ActorRole, get_actor_kind
from edupro.schemas.auth import AdminRegister, CoachRegister, StudentRegister, TeacherRegister
from edupro.utils.id_generator import (
    generate_admin_id,
    generate_school_id,
    generate_student_id,
    generate_teacher_id,
)


async def _exists(db: AsyncSession, column, value) -> bool:
    result = await db.execute(select(column).where(column == value).limit(1))
    return result.first() is not None


async def get_school(db: AsyncSession, school_id: str) -> Optional[Admin]:
    result = await db.execute(select(Admin).where(Admin.school_id == school_id))
    return result.scalar_one_or_none()


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash("edupro-timing-equalizer")


async def _commit_new(db: AsyncSession, record: Any, resource_type: str) -> None:
    db.add(record)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"[Register] Unique index rejected new {resource_type}")
        raise ConflictError(f"{resource_type} registration conflicted with a concurrent write, please retry")
    await db.refresh(record)


# ============================================
# Login
# ============================================

async def authenticate(db: AsyncSession, role: ActorRole, email: str, password: str) -> Any:
    """
    Resolve an actor from email and password.

    Unknown email and wrong password fail identically; an inactive account
    is only reported once the password has been proven.
    """
    kind: ActorKind = get_actor_kind(role)
    email = email.lower()

    result = await db.execute(select(kind.model).where(kind.model.email == email))
    actor = result.scalar_one_or_none()

    if actor is None:
        # Same bcrypt cost as a wrong password
        verify_password(password, _dummy_hash())

    if not actor or not actor.compare_password(password):
        logger.log_auth_event("login", success=False, user_email=email,
                              reason="Invalid credentials", account_role=kind.role.value)
        raise UnauthenticatedError("Invalid email or password")

    if not actor.is_active:
        logger.log_auth_event("login", success=False, user_email=email,
                              reason="Account not active", account_role=kind.role.value)
        raise UnauthenticatedError("Account is not active")

    if isinstance(actor, Admin):
        actor.last_login = datetime.utcnow()
        await db.commit()

    logger.log_auth_event("login", success=True, user_email=email, account_role=kind.role.value)
    return actor


# ============================================
# Registration
# ============================================

async def register_admin(db: AsyncSession, data: AdminRegister, lock: asyncio.Lock) -> Admin:
    """Register a school-owning admin, assigning school and admin IDs"""
    email = data.email.lower()

    if await _exists(db, Admin.email, email):
        logger.log_auth_event("register", success=False, user_email=email, reason="Email already registered")
        raise AlreadyExistsError("Admin", "email")

    if await _exists(db, Admin.school_name, data.school_name):
        logger.log_auth_event("register", success=False, user_email=email, reason="School name already registered")
        raise AlreadyExistsError("School", "name")

    async with lock:
        school_id = await generate_school_id(db, data.school_type)
        admin_id = await generate_admin_id(db)

        admin = Admin.create(
            password=data.password,
            admin_id=admin_id,
            name=data.name,
            email=email,
            contact=data.contact,
            role=AdminRole.ADMIN,
            permissions=default_permissions(),
            school_name=data.school_name,
            school_id=school_id,
            school_type=SchoolType(data.school_type.lower()),
            address=data.address,
            school_email=data.school_email,
            established_year=data.established_year,
        )
        await _commit_new(db, admin, "School")

    logger.log_auth_event("register", success=True, user_email=email,
                          account_role="admin", school_id=school_id)
    return admin


async def register_student(db: AsyncSession, data: StudentRegister) -> Student:
    email = data.email.lower()

    if not await get_school(db, data.school_id):
        raise NotFoundError("School", data.school_id)

    student_id = generate_student_id(data.school_id, data.nic)

    if await _exists(db, Student.email, email):
        logger.log_auth_event("register", success=False, user_email=email, reason="Email already registered")
        raise AlreadyExistsError("Student", "email")
    if await _exists(db, Student.student_id, student_id):
        logger.log_auth_event("register", success=False, user_email=email, reason="Student ID already taken")
        raise AlreadyExistsError("Student", "student ID")

    student = Student.create(
        password=data.password,
        student_id=student_id,
        name=data.name,
        email=email,
        school_id=data.school_id,
        nic=data.nic,
        contact=data.contact,
        roll_num=data.roll_num,
        birth=data.birth,
        gender=Gender(data.gender),
    )
    await _commit_new(db, student, "Student")

    logger.log_auth_event("register", success=True, user_email=email,
                          account_role="student", student_id=student_id)
    return student


async def register_teacher(db: AsyncSession, data: TeacherRegister) -> Teacher:
    email = data.email.lower()

    if not await get_school(db, data.school_id):
        raise NotFoundError("School", data.school_id)

    teacher_id = generate_teacher_id(data.school_id, data.nic)

    if await _exists(db, Teacher.email, email):
        logger.log_auth_event("register", success=False, user_email=email, reason="Email already registered")
        raise AlreadyExistsError("Teacher", "email")
    if await _exists(db, Teacher.teacher_id, teacher_id):
        logger.log_auth_event("register", success=False, user_email=email, reason="Teacher ID already taken")
        raise AlreadyExistsError("Teacher", "teacher ID")

    teacher = Teacher.create(
        password=data.password,
        teacher_id=teacher_id,
        name=data.name,
        email=email,
        school_id=data.school_id,
        nic=data.nic,
        teach_subject=data.teach_subject,
    )
    await _commit_new(db, teacher, "Teacher")

    logger.log_auth_event("register", success=True, user_email=email,
                          account_role="teacher", teacher_id=teacher_id)
    return teacher


async def register_coach(db: AsyncSession, data: CoachRegister) -> Coach:
    email = data.email.lower()

    if await _exists(db, Coach.coach_id, data.coach_id):
        raise AlreadyExistsError("Coach", "coach ID")
    if await _exists(db, Coach.email, email):
        logger.log_auth_event("register", success=False, user_email=email, reason="Email already registered")
        raise AlreadyExistsError("Coach", "email")

    coach = Coach.create(
        password=data.password,
        coach_id=data.coach_id,
        name=data.name,
        email=email,
        contact=data.contact,
        sports=list(data.sports),
    )
    await _commit_new(db, coach, "Coach")

    logger.log_auth_event("register", success=True, user_email=email,
                          account_role="coach", coach_id=data.coach_id)
    return coach
