"""
Custom Exceptions for Edu-Pro
=============================

Every error raised by the ID codec, the credential store, the permission
resolver and the auth dependencies is one of these. The API layer maps them
to HTTP responses in one place (see ``edupro.main``).

Usage:
    from edupro.core.exceptions import InvalidInputError, NotFoundError

    if not school:
        raise NotFoundError("School", school_id)
"""

from typing import Optional, Any, Dict


class EduProError(Exception):
    """Base exception for all Edu-Pro errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (400-type)
# ============================================

class InvalidInputError(EduProError):
    """Malformed school type, NIC, or ID shape"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="INVALID_INPUT", details=details)


class AlreadyExistsError(InvalidInputError):
    """Unique natural key (email, student ID, ...) already taken"""

    def __init__(self, resource_type: str, field: str):
        super().__init__(f"{resource_type} with this {field} already exists", field=field)
        self.code = "ALREADY_EXISTS"
        self.details["resource_type"] = resource_type


# ============================================
# Capacity / Conflict Errors (409-type)
# ============================================

class ConflictError(EduProError):
    """Write lost against a concurrent writer"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class CapacityExceededError(EduProError):
    """Identifier sequence exhausted"""

    status_code = 409

    def __init__(self, sequence: str, maximum: int):
        super().__init__(
            f"Maximum number of {sequence} ({maximum}) reached",
            code="CAPACITY_EXCEEDED",
            details={"sequence": sequence, "maximum": maximum}
        )


# ============================================
# Authentication & Authorization Errors
# ============================================

class UnauthenticatedError(EduProError):
    """Missing, invalid or expired token, or inactive actor"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="UNAUTHENTICATED", headers={"WWW-Authenticate": "Bearer"})


class TokenExpiredError(UnauthenticatedError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(UnauthenticatedError):
    """JWT token is invalid"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class ForbiddenError(EduProError):
    """Role or permission mismatch"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(EduProError):
    """Referenced document absent"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


# ============================================
# Throttling
# ============================================

class RateLimitedError(EduProError):
    """Too many requests from one client"""

    status_code = 429

    def __init__(self, retry_after: int, message: str = "Too many requests, please try again later"):
        super().__init__(
            message,
            code="RATE_LIMITED",
            details={"retry_after_seconds": retry_after},
            headers={"Retry-After": str(retry_after)}
        )


# ============================================
# Internal Errors (500-type)
# ============================================

class InternalError(EduProError):
    """Hashing or persistence failure; message never reaches the client"""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: EduProError, expose_message: bool = True) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    body = error.to_dict()
    message = error.message
    if not expose_message:
        message = "Internal server error"
        body = {"code": error.code, "message": message, "details": {}}
    return {
        "success": False,
        "message": message,
        "error": body
    }
