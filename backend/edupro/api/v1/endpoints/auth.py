import asyncio
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from edupro.core.database import get_db
from edupro.core.rate_limiter import auth_rate_limit
from edupro.modules.auth import service
from edupro.modules.auth.actors import ActorKind, ActorRole, get_actor_kind, issue_session
from edupro.modules.auth.dependencies import AUTHENTICATORS, security
from edupro.schemas.auth import (
    LoginRequest,
    AdminRegister,
    StudentRegister,
    TeacherRegister,
    CoachRegister,
)

router = APIRouter()


def get_school_registration_lock(request: Request) -> asyncio.Lock:
    return request.app.state.school_registration_lock


def registered(kind: ActorKind, actor: Any) -> Dict[str, Any]:
    return {
        "success": True,
        "message": f"{kind.label} registered successfully",
        kind.role.value: kind.serialize(actor),
    }


@router.post("/{role}/login", dependencies=[Depends(auth_rate_limit)])
async def login(
    role: ActorRole,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Log in as an admin, student, teacher or coach (rate limited: 5/min)"""
    actor = await service.authenticate(db, role, credentials.email, credentials.password)
    return issue_session(get_actor_kind(role), actor)


@router.post("/admin/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
async def register_admin(
    data: AdminRegister,
    db: AsyncSession = Depends(get_db),
    lock: asyncio.Lock = Depends(get_school_registration_lock)
):
    """Register a school and its admin; assigns the school ID and admin ID"""
    admin = await service.register_admin(db, data, lock)
    return registered(get_actor_kind(ActorRole.ADMIN), admin)


@router.post("/student/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
async def register_student(data: StudentRegister, db: AsyncSession = Depends(get_db)):
    student = await service.register_student(db, data)
    return registered(get_actor_kind(ActorRole.STUDENT), student)


@router.post("/teacher/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
async def register_teacher(data: TeacherRegister, db: AsyncSession = Depends(get_db)):
    teacher = await service.register_teacher(db, data)
    return registered(get_actor_kind(ActorRole.TEACHER), teacher)


@router.post("/coach/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
async def register_coach(data: CoachRegister, db: AsyncSession = Depends(get_db)):
    coach = await service.register_coach(db, data)
    return registered(get_actor_kind(ActorRole.COACH), coach)


async def current_actor(
    role: ActorRole,
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Any:
    return await AUTHENTICATORS[role](request, credentials, db)


@router.get("/{role}/me")
async def get_me(role: ActorRole, actor: Any = Depends(current_actor)):
    """Current actor for the role in the path"""
    kind = get_actor_kind(role)
    return {"success": True, kind.role.value: kind.serialize(actor)}
