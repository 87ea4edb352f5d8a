from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional

from edupro.core.database import get_db
from edupro.core.exceptions import ForbiddenError, InvalidTokenError, UnauthenticatedError
from edupro.core.logging_config import logger, set_actor
from edupro.core.security import decode_token
from edupro.modules.auth.actors import ActorKind, ActorRole, get_actor_kind

# auto_error=False so a missing header surfaces as our own 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


class ActorAuthenticator:
    """
    Dependency authenticating the bearer token for one actor kind.

    The chain stops at the first failure:
    no token -> bad token -> wrong role -> actor missing or inactive.
    On success the actor is attached to ``request.state.actor``.
    """

    def __init__(self, role: ActorRole):
        self.kind: ActorKind = get_actor_kind(role)

    def _claims(self, credentials: Optional[HTTPAuthorizationCredentials]) -> Dict[str, Any]:
        if credentials is None or not credentials.credentials:
            raise UnauthenticatedError("No token provided")

        payload = decode_token(credentials.credentials)

        if payload.get("type") != "access":
            raise InvalidTokenError("Invalid token type")

        if payload.get("role") != self.kind.role.value:
            logger.log_auth_event("token", success=False, reason="Role mismatch",
                                  expected_role=self.kind.role.value, token_role=payload.get("role"))
            raise ForbiddenError(f"Access denied: {self.kind.label} role required")

        if not payload.get("id"):
            raise InvalidTokenError("Invalid token payload")

        return payload

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        db: AsyncSession = Depends(get_db)
    ) -> Any:
        payload = self._claims(credentials)

        actor = await db.get(self.kind.model, str(payload["id"]))
        if actor is None or not actor.is_active:
            raise UnauthenticatedError(f"{self.kind.label} account not found or inactive")

        request.state.actor = actor
        set_actor(str(actor.id), self.kind.role.value)
        return actor


def require_actor(role) -> ActorAuthenticator:
    """
    Usage:
        @router.get("/courses")
        async def my_courses(student: Student = Depends(require_actor("student"))):
            ...
    """
    return ActorAuthenticator(ActorRole(role))


get_current_admin = require_actor(ActorRole.ADMIN)
get_current_student = require_actor(ActorRole.STUDENT)
get_current_teacher = require_actor(ActorRole.TEACHER)
get_current_coach = require_actor(ActorRole.COACH)

AUTHENTICATORS = {
    ActorRole.ADMIN: get_current_admin,
    ActorRole.STUDENT: get_current_student,
    ActorRole.TEACHER: get_current_teacher,
    ActorRole.COACH: get_current_coach,
}
