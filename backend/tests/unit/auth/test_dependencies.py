"""
Unit Tests for the actor authentication chain
No token -> bad token -> wrong role -> actor missing or inactive -> authorized
"""
import pytest
from datetime import timedelta
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from edupro.core.exceptions import (
    ForbiddenError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthenticatedError,
)
from edupro.core.logging_config import get_actor_id, get_actor_role
from edupro.core.security import create_access_token
from edupro.models import ActorStatus
from edupro.modules.auth.actors import ActorRole, create_actor_token, get_actor_kind
from edupro.modules.auth.dependencies import get_current_admin, get_current_student, require_actor


def make_request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""})


def creds(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAuthChain:

    async def test_no_token(self, db_session):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await get_current_admin(make_request(), None, db_session)

        assert exc_info.value.message == "No token provided"

    async def test_bad_signature(self, db_session):
        with pytest.raises(InvalidTokenError):
            await get_current_admin(make_request(), creds("abc.def.ghi"), db_session)

    async def test_expired(self, db_session, school_admin):
        token = create_access_token({"id": school_admin.id, "role": "admin"}, expires_delta=timedelta(seconds=-5))

        with pytest.raises(TokenExpiredError):
            await get_current_admin(make_request(), creds(token), db_session)

    async def test_wrong_role(self, db_session, student):
        token = create_actor_token(get_actor_kind(ActorRole.STUDENT), student)

        with pytest.raises(ForbiddenError) as exc_info:
            await get_current_admin(make_request(), creds(token), db_session)

        assert exc_info.value.message == "Access denied: Admin role required"

    async def test_missing_id_claim(self, db_session):
        token = create_access_token({"role": "admin"})

        with pytest.raises(InvalidTokenError):
            await get_current_admin(make_request(), creds(token), db_session)

    async def test_actor_deleted(self, db_session):
        token = create_access_token({"id": "00000000-0000-0000-0000-000000000000", "role": "admin"})

        with pytest.raises(UnauthenticatedError) as exc_info:
            await get_current_admin(make_request(), creds(token), db_session)

        assert exc_info.value.message == "Admin account not found or inactive"

    async def test_actor_inactive(self, db_session, student):
        student.status = ActorStatus.INACTIVE
        await db_session.commit()
        token = create_actor_token(get_actor_kind(ActorRole.STUDENT), student)

        with pytest.raises(UnauthenticatedError):
            await get_current_student(make_request(), creds(token), db_session)

    async def test_authorized(self, db_session, student):
        request = make_request()
        token = create_actor_token(get_actor_kind(ActorRole.STUDENT), student)

        actor = await get_current_student(request, creds(token), db_session)

        assert actor.student_id == "st010m4567"
        assert request.state.actor is actor
        assert get_actor_id() == str(student.id)
        assert get_actor_role() == "student"


class TestRequireActor:

    def test_accepts_role_string(self):
        assert require_actor("coach").kind.role is ActorRole.COACH

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            require_actor("librarian")
