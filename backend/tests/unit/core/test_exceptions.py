"""
Unit Tests for the error taxonomy
"""
from edupro.core.exceptions import (
    AlreadyExistsError,
    CapacityExceededError,
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
    RateLimitedError,
    TokenExpiredError,
    UnauthenticatedError,
    error_response,
)


class TestStatusCodes:

    def test_client_errors(self):
        assert InvalidInputError("bad").status_code == 400
        assert AlreadyExistsError("Student", "email").status_code == 400
        assert UnauthenticatedError().status_code == 401
        assert ForbiddenError().status_code == 403
        assert NotFoundError("School", "sch_001b").status_code == 404
        assert ConflictError("lost race").status_code == 409
        assert CapacityExceededError("schools", 999).status_code == 409
        assert RateLimitedError(30).status_code == 429

    def test_internal_error(self):
        assert InternalError().status_code == 500


class TestErrorDetails:

    def test_invalid_input_field(self):
        error = InvalidInputError("Invalid NIC provided", field="nic")

        assert error.code == "INVALID_INPUT"
        assert error.details == {"field": "nic"}

    def test_already_exists(self):
        error = AlreadyExistsError("Student", "email")

        assert error.message == "Student with this email already exists"
        assert error.code == "ALREADY_EXISTS"

    def test_not_found(self):
        error = NotFoundError("School", "sch_001b")

        assert error.message == "School not found"
        assert error.code == "SCHOOL_NOT_FOUND"
        assert error.details["resource_id"] == "sch_001b"

    def test_capacity(self):
        assert CapacityExceededError("schools", 999).message == "Maximum number of schools (999) reached"

    def test_unauthenticated_header(self):
        assert UnauthenticatedError().headers == {"WWW-Authenticate": "Bearer"}
        assert TokenExpiredError().code == "TOKEN_EXPIRED"

    def test_rate_limited_header(self):
        error = RateLimitedError(42)

        assert error.headers == {"Retry-After": "42"}
        assert error.details["retry_after_seconds"] == 42


class TestErrorResponse:

    def test_shape(self):
        body = error_response(ForbiddenError("Access denied: delete permission required for students"))

        assert body["success"] is False
        assert body["message"] == "Access denied: delete permission required for students"
        assert body["error"]["code"] == "FORBIDDEN"

    def test_hidden_message(self):
        body = error_response(InternalError("Password hashing failed: TypeError"), expose_message=False)

        assert body["message"] == "Internal server error"
        assert "hashing" not in str(body)
