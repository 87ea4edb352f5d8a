"""
Edu-Pro - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['DISABLE_RATE_LIMITING'] = 'true'
os.environ['BCRYPT_ROUNDS'] = '4'

from edupro.main import app
from edupro.core.database import Base, get_db
from edupro.core.permissions import default_permissions
from edupro.models import Admin, AdminRole, SchoolType, Student, Teacher, Coach
from edupro.modules.auth.actors import ActorRole, create_actor_token, get_actor_kind

fake = Faker()

SCHOOL_ID = 'sch_010m'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


def fake_email() -> str:
    return f"{fake.unique.user_name()}@edupro.lk"


def fake_contact() -> str:
    return fake.numerify('+9477#######')


def bearer(role: ActorRole, actor) -> dict:
    token = create_actor_token(get_actor_kind(role), actor)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _save(db_session: AsyncSession, record):
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


@pytest.fixture
async def school_admin(db_session: AsyncSession) -> Admin:
    """Admin owning school sch_010m, with the default all-true table"""
    return await _save(db_session, Admin.create(
        password='adminpassword123',
        admin_id='adm0001',
        name=fake.name(),
        email=fake_email(),
        role=AdminRole.ADMIN,
        permissions=default_permissions(),
        school_name=f"{fake.city()} College",
        school_id=SCHOOL_ID,
        school_type=SchoolType.MIXED,
    ))


@pytest.fixture
async def super_admin(db_session: AsyncSession) -> Admin:
    """super_admin with an all-false table; the role alone grants access"""
    return await _save(db_session, Admin.create(
        password='superpassword123',
        admin_id='adm0002',
        name=fake.name(),
        email=fake_email(),
        role=AdminRole.SUPER_ADMIN,
        permissions=default_permissions(granted=False),
    ))


@pytest.fixture
async def moderator(db_session: AsyncSession) -> Admin:
    """Moderator who may view and edit students but not delete them"""
    permissions = default_permissions()
    permissions['students']['delete'] = False
    return await _save(db_session, Admin.create(
        password='modpassword123',
        admin_id='adm0003',
        name=fake.name(),
        email=fake_email(),
        role=AdminRole.MODERATOR,
        permissions=permissions,
    ))


@pytest.fixture
async def student(db_session: AsyncSession, school_admin: Admin) -> Student:
    return await _save(db_session, Student.create(
        password='studentpass123',
        student_id='st010m4567',
        name=fake.name(),
        email=fake_email(),
        school_id=SCHOOL_ID,
        nic='901234567',
        contact=fake_contact(),
    ))


@pytest.fixture
async def teacher(db_session: AsyncSession, school_admin: Admin) -> Teacher:
    return await _save(db_session, Teacher.create(
        password='teacherpass123',
        teacher_id='te010m1102',
        name=fake.name(),
        email=fake_email(),
        school_id=SCHOOL_ID,
        nic='851231102V',
        teach_subject='MATH101',
    ))


@pytest.fixture
async def coach(db_session: AsyncSession) -> Coach:
    return await _save(db_session, Coach.create(
        password='coachpass123',
        coach_id='CH1001',
        name=fake.name(),
        email=fake_email(),
        contact=fake_contact(),
        sports=['cricket'],
    ))


@pytest.fixture
def admin_headers(school_admin: Admin) -> dict:
    return bearer(ActorRole.ADMIN, school_admin)


@pytest.fixture
def super_admin_headers(super_admin: Admin) -> dict:
    return bearer(ActorRole.ADMIN, super_admin)


@pytest.fixture
def moderator_headers(moderator: Admin) -> dict:
    return bearer(ActorRole.ADMIN, moderator)


@pytest.fixture
def student_headers(student: Student) -> dict:
    return bearer(ActorRole.STUDENT, student)


@pytest.fixture
def add_school(db_session: AsyncSession):
    """Factory persisting a school-owning admin with the given IDs"""
    async def _add(admin_id: str, school_id: str, school_type: SchoolType = SchoolType.MIXED) -> Admin:
        return await _save(db_session, Admin.create(
            password='password123',
            admin_id=admin_id,
            name=fake.name(),
            email=fake_email(),
            role=AdminRole.ADMIN,
            school_name=f"School {school_id}",
            school_id=school_id,
            school_type=school_type,
        ))
    return _add
