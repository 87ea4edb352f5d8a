"""
Unit Tests for auth request schemas
"""
import pytest
from pydantic import ValidationError

from edupro.schemas.auth import (
    AdminRegister,
    CoachRegister,
    LoginRequest,
    StudentRegister,
    TeacherRegister,
)
from edupro.schemas.actors import PermissionsUpdate, StudentUpdate


@pytest.fixture
def student_data():
    return {
        "name": "Kamala Silva",
        "email": "kamala@edupro.lk",
        "password": "secret123",
        "contact": "+94771234567",
        "school_id": "sch_010m",
        "nic": "200012341099",
    }


class TestLoginRequest:

    def test_valid(self):
        login = LoginRequest(email="admin@edupro.lk", password="x")
        assert login.email == "admin@edupro.lk"

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="admin", password="x")

    def test_empty_password(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="admin@edupro.lk", password="")


class TestStudentRegister:

    def test_valid(self, student_data):
        student = StudentRegister(**student_data)

        assert student.school_id == "sch_010m"
        assert student.gender == "other"

    def test_bad_school_id(self, student_data):
        student_data["school_id"] = "school-10"
        with pytest.raises(ValidationError):
            StudentRegister(**student_data)

    def test_nic_needs_four_digits(self, student_data):
        student_data["nic"] = "V12"
        with pytest.raises(ValidationError):
            StudentRegister(**student_data)

    @pytest.mark.parametrize("contact", ["12345", "+94-77-123-4567", "0771234567890123"])
    def test_bad_contact(self, student_data, contact):
        student_data["contact"] = contact
        with pytest.raises(ValidationError):
            StudentRegister(**student_data)

    def test_short_password(self, student_data):
        student_data["password"] = "abc"
        with pytest.raises(ValidationError):
            StudentRegister(**student_data)

    def test_bad_gender(self, student_data):
        student_data["gender"] = "unknown"
        with pytest.raises(ValidationError):
            StudentRegister(**student_data)


class TestOtherRegistrations:

    def test_teacher(self):
        teacher = TeacherRegister(name="T", email="t@edupro.lk", password="secret123",
                                  school_id="sch_002g", nic="851231102V")
        assert teacher.teach_subject is None

    def test_admin_school_type_left_to_generator(self):
        admin = AdminRegister(name="A", email="a@edupro.lk", password="secret123",
                              school_name="Royal College", school_type="coed")
        assert admin.school_type == "coed"

    @pytest.mark.parametrize("coach_id", ["CH1", "ch100001", "CH-10001", "CH10000000001"])
    def test_coach_id_format(self, coach_id):
        with pytest.raises(ValidationError):
            CoachRegister(coach_id=coach_id, name="C", email="c@edupro.lk",
                          password="secret123", contact="+94771234567")


class TestUpdates:

    def test_partial_student_update(self):
        update = StudentUpdate(status="suspended")
        assert update.model_dump(exclude_unset=True) == {"status": "suspended"}

    def test_bad_status(self):
        with pytest.raises(ValidationError):
            StudentUpdate(status="deleted")

    def test_permissions_update(self):
        update = PermissionsUpdate(permissions={"students": {"delete": False}})
        assert update.permissions["students"]["delete"] is False
