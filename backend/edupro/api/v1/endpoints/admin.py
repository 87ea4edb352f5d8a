"""
Admin portal endpoints.

Every route authenticates an admin and then checks one entry of the admin's
permission table. Admins tied to a school only see that school's members.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from edupro.core.database import get_db
from edupro.core.exceptions import (
    AlreadyExistsError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from edupro.core.logging_config import logger
from edupro.core.permissions import SUPER_ADMIN, ensure_permission, merge_permissions, require_permission
from edupro.models import ActorStatus, Admin, Coach, Gender, Student, Teacher
from edupro.modules.auth import service
from edupro.modules.auth.actors import ActorRole, get_actor_kind
from edupro.modules.auth.dependencies import get_current_admin
from edupro.schemas.actors import CoachUpdate, PermissionsUpdate, StudentUpdate
from edupro.schemas.auth import CoachRegister, StudentRegister
from edupro.utils.id_generator import extract_school_id, is_valid_student_id, is_valid_teacher_id
from edupro.utils.pagination import paginate

router = APIRouter()

ADMIN = get_actor_kind(ActorRole.ADMIN)
STUDENT = get_actor_kind(ActorRole.STUDENT)
TEACHER = get_actor_kind(ActorRole.TEACHER)
COACH = get_actor_kind(ActorRole.COACH)


def scoped(query, model, admin: Admin):
    """Restrict a member query to the admin's school, if they own one"""
    if admin.school_id:
        return query.where(model.school_id == admin.school_id)
    return query


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(select(func.count()).select_from(query.subquery()))
    return result.scalar() or 0


async def _get_student(db: AsyncSession, admin: Admin, student_id: str) -> Student:
    result = await db.execute(scoped(select(Student).where(Student.student_id == student_id), Student, admin))
    student = result.scalar_one_or_none()
    if not student:
        raise NotFoundError("Student", student_id)
    return student


async def _get_coach(db: AsyncSession, coach_id: str) -> Coach:
    result = await db.execute(select(Coach).where(Coach.coach_id == coach_id))
    coach = result.scalar_one_or_none()
    if not coach:
        raise NotFoundError("Coach", coach_id)
    return coach


async def _ensure_email_free(db: AsyncSession, model, actor, email: Optional[str], label: str) -> None:
    if email is None or email.lower() == actor.email:
        return
    result = await db.execute(select(model.id).where(model.email == email.lower()))
    if result.first() is not None:
        raise AlreadyExistsError(label, "email")


def _apply_common(actor, changes: dict) -> None:
    password = changes.pop("password", None)
    if password is not None:
        actor.set_password(password)
    if changes.get("status") is not None:
        changes["status"] = ActorStatus(changes["status"])
    for field, value in changes.items():
        setattr(actor, field, value)


# ============================================
# Dashboard
# ============================================

@router.get("/dashboard")
async def dashboard(
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    students = scoped(select(Student.id), Student, admin)
    teachers = scoped(select(Teacher.id), Teacher, admin)

    return {
        "success": True,
        "admin": ADMIN.serialize(admin),
        "stats": {
            "totalStudents": await _count(db, students),
            "activeStudents": await _count(db, students.where(Student.status == ActorStatus.ACTIVE)),
            "totalTeachers": await _count(db, teachers),
            "totalCoaches": await _count(db, select(Coach.id)),
        }
    }


# ============================================
# Students
# ============================================

@router.get("/students")
async def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: Admin = Depends(require_permission("students", "view")),
    db: AsyncSession = Depends(get_db)
):
    query = scoped(select(Student), Student, admin)

    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Student.name.ilike(pattern),
            Student.email.ilike(pattern),
            Student.student_id.ilike(pattern),
        ))
    if status_filter:
        try:
            query = query.where(Student.status == ActorStatus(status_filter))
        except ValueError:
            raise InvalidInputError("Invalid status filter", field="status")

    items, meta = await paginate(db, query.order_by(Student.created_at.desc()), page, limit)
    return {
        "success": True,
        "students": [STUDENT.serialize(s) for s in items],
        "pagination": meta,
    }


@router.post("/students", status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentRegister,
    admin: Admin = Depends(require_permission("students", "create")),
    db: AsyncSession = Depends(get_db)
):
    if admin.school_id and data.school_id != admin.school_id:
        raise ForbiddenError("Access denied: students can only be added to your own school")

    student = await service.register_student(db, data)
    return {"success": True, "message": "Student created successfully", "student": STUDENT.serialize(student)}


@router.get("/students/{student_id}")
async def get_student(
    student_id: str,
    admin: Admin = Depends(require_permission("students", "view")),
    db: AsyncSession = Depends(get_db)
):
    student = await _get_student(db, admin, student_id)
    return {"success": True, "student": STUDENT.serialize(student)}


@router.put("/students/{student_id}")
async def update_student(
    student_id: str,
    data: StudentUpdate,
    admin: Admin = Depends(require_permission("students", "edit")),
    db: AsyncSession = Depends(get_db)
):
    student = await _get_student(db, admin, student_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    await _ensure_email_free(db, Student, student, changes.get("email"), "Student")
    if changes.get("gender") is not None:
        changes["gender"] = Gender(changes["gender"])
    _apply_common(student, changes)

    await db.commit()
    await db.refresh(student)
    logger.info(f"[Admin] {admin.admin_id} updated student {student_id}")
    return {"success": True, "message": "Student updated successfully", "student": STUDENT.serialize(student)}


@router.delete("/students/{student_id}")
async def delete_student(
    student_id: str,
    admin: Admin = Depends(require_permission("students", "delete")),
    db: AsyncSession = Depends(get_db)
):
    student = await _get_student(db, admin, student_id)
    await db.delete(student)
    await db.commit()
    logger.info(f"[Admin] {admin.admin_id} deleted student {student_id}")
    return {"success": True, "message": "Student deleted successfully"}


# ============================================
# Coaches
# ============================================

@router.get("/coaches")
async def list_coaches(
    admin: Admin = Depends(require_permission("coaches", "view")),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Coach).order_by(Coach.coach_id))
    return {"success": True, "coaches": [COACH.serialize(c) for c in result.scalars().all()]}


@router.post("/coaches", status_code=status.HTTP_201_CREATED)
async def create_coach(
    data: CoachRegister,
    admin: Admin = Depends(require_permission("coaches", "create")),
    db: AsyncSession = Depends(get_db)
):
    coach = await service.register_coach(db, data)
    return {"success": True, "message": "Coach created successfully", "coach": COACH.serialize(coach)}


@router.put("/coaches/{coach_id}")
async def update_coach(
    coach_id: str,
    data: CoachUpdate,
    admin: Admin = Depends(require_permission("coaches", "edit")),
    db: AsyncSession = Depends(get_db)
):
    coach = await _get_coach(db, coach_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    await _ensure_email_free(db, Coach, coach, changes.get("email"), "Coach")
    _apply_common(coach, changes)

    await db.commit()
    await db.refresh(coach)
    return {"success": True, "message": "Coach updated successfully", "coach": COACH.serialize(coach)}


@router.delete("/coaches/{coach_id}")
async def delete_coach(
    coach_id: str,
    admin: Admin = Depends(require_permission("coaches", "delete")),
    db: AsyncSession = Depends(get_db)
):
    coach = await _get_coach(db, coach_id)
    await db.delete(coach)
    await db.commit()
    logger.info(f"[Admin] {admin.admin_id} deleted coach {coach_id}")
    return {"success": True, "message": "Coach deleted successfully"}


# ============================================
# Member lookup
# ============================================

@router.get("/members/{member_id}")
async def get_member(
    member_id: str,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Resolve a student or teacher ID to its record, checking the embedded school"""
    if is_valid_student_id(member_id):
        kind, column = STUDENT, Student.student_id
        ensure_permission(admin, "students", "view")
    elif is_valid_teacher_id(member_id):
        kind, column = TEACHER, Teacher.teacher_id
    else:
        raise InvalidInputError("Invalid member ID format", field="member_id")

    school_id = extract_school_id(member_id)
    if admin.school_id and school_id != admin.school_id:
        raise ForbiddenError("Access denied: member belongs to another school")

    result = await db.execute(select(kind.model).where(column == member_id))
    member = result.scalar_one_or_none()
    if not member:
        raise NotFoundError(kind.label, member_id)

    return {"success": True, "role": kind.role.value, "schoolId": school_id, kind.role.value: kind.serialize(member)}


# ============================================
# Admin permissions
# ============================================

@router.patch("/admins/{admin_id}/permissions")
async def update_admin_permissions(
    admin_id: str,
    data: PermissionsUpdate,
    admin: Admin = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Edit another admin's permission table (super_admin only)"""
    if getattr(admin.role, "value", admin.role) != SUPER_ADMIN:
        logger.log_permission_denied("admins", "edit", getattr(admin.role, "value", admin.role))
        raise ForbiddenError("Access denied: super_admin role required")

    result = await db.execute(select(Admin).where(Admin.admin_id == admin_id))
    target = result.scalar_one_or_none()
    if not target:
        raise NotFoundError("Admin", admin_id)

    # Reassign so the JSON column is flagged dirty
    target.permissions = merge_permissions(target.permissions, data.permissions)
    await db.commit()
    await db.refresh(target)

    logger.info(f"[Admin] {admin.admin_id} updated permissions of {admin_id}")
    return {"success": True, "message": "Permissions updated successfully", "admin": ADMIN.serialize(target)}
