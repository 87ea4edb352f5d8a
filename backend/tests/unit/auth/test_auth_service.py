"""
Unit Tests for the auth service
Tests for: concurrent school registration, unique index conflicts, login timing
"""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from edupro.core.exceptions import UnauthenticatedError
from edupro.core.security import verify_password
from edupro.modules.auth import service
from edupro.modules.auth.actors import ActorRole
from edupro.schemas.auth import AdminRegister
from conftest import SCHOOL_ID, TestSessionLocal, fake_email


def admin_form(i: int) -> AdminRegister:
    return AdminRegister(
        name=f"Principal {i}",
        email=fake_email(),
        password="adminpass123",
        contact="0112345678",
        school_name=f"Central College {i}",
        school_type="mixed",
    )


class TestConcurrentSchoolRegistration:

    async def test_parallel_registrations_get_distinct_school_ids(self, db_session):
        lock = asyncio.Lock()

        async def register(i: int) -> str:
            async with TestSessionLocal() as session:
                admin = await service.register_admin(session, admin_form(i), lock)
                return admin.school_id

        school_ids = await asyncio.gather(*(register(i) for i in range(5)))

        assert sorted(school_ids) == [f"sch_00{n}m" for n in range(1, 6)]

    async def test_parallel_registrations_get_distinct_admin_ids(self, db_session):
        lock = asyncio.Lock()

        async def register(i: int) -> str:
            async with TestSessionLocal() as session:
                admin = await service.register_admin(session, admin_form(i), lock)
                return admin.admin_id

        admin_ids = await asyncio.gather(*(register(i) for i in range(3)))

        assert sorted(admin_ids) == ["adm0001", "adm0002", "adm0003"]


class TestUniqueIndexConflict:

    async def test_taken_school_id_is_409(self, client: AsyncClient, school_admin):
        """Another process inserted the same school ID between generate and commit"""
        with patch("edupro.modules.auth.service.generate_school_id", AsyncMock(return_value=SCHOOL_ID)):
            response = await client.post("/api/v1/auth/admin/register", json=admin_form(1).model_dump())

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "CONFLICT"


class TestLoginTiming:

    async def test_unknown_email_still_checks_a_hash(self, db_session):
        with patch("edupro.modules.auth.service.verify_password", wraps=verify_password) as check:
            with pytest.raises(UnauthenticatedError):
                await service.authenticate(db_session, ActorRole.STUDENT, "nobody@edupro.lk", "guess123")

        check.assert_called_once()
        assert check.call_args.args[0] == "guess123"

    async def test_known_email_skips_dummy_hash(self, db_session, student):
        with patch("edupro.modules.auth.service.verify_password", wraps=verify_password) as check:
            with pytest.raises(UnauthenticatedError):
                await service.authenticate(db_session, ActorRole.STUDENT, student.email, "guess123")

        check.assert_not_called()
