"""
Test configuration and fixtures.

The app runs against an in-memory SQLite database shared through a static
pool; every request gets its own session, like in production.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Settings are read at import time
os.environ["APP_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["APP_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["APP_SQL_LOG_FILE"] = ""
os.environ["APP_STORAGE_BACKEND"] = "local"
os.environ["APP_MEDIA_ROOT"] = tempfile.mkdtemp(prefix="media-")
os.environ["APP_ERROR_WEBHOOK_URL"] = ""
os.environ["APP_SEED_SUPERUSER_EMAIL"] = ""

from doth import application
from app.api.applications.lifecycle import ApplicationStatus
from app.api.applications.models import VolunteerApplications
from app.api.events.models import Events
from app.api.ngos.models import NGOProfiles
from app.api.users.models import UserRoles, Users
from app.core.auth.authentication import get_password_hash
from app.core.auth.jwt import ACCESS_TOKEN, create_token
from app.db.base import AbstractSQLModel
from app.db.core import get_session

fake = Faker()

DEFAULT_PASSWORD = "Passw0rd"
# Hashing once keeps bcrypt out of every fixture
DEFAULT_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)

TEST_DATABASE_URL = "sqlite+aiosqlite://"
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)
TestSessionLocal = async_sessionmaker(
    bind=test_engine, autoflush=False, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.drop_all)


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionLocal


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Test client whose requests use the test database"""

    async def override_get_session():
        async with TestSessionLocal() as session:
            yield session

    application.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    application.dependency_overrides.clear()


def auth_headers(user: Users) -> dict:
    token = create_token(user.id, ACCESS_TOKEN, timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}


class Factory:
    """Inserts rows directly, bypassing the API's checks."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _save(self, *objects):
        async with self.session_factory() as session:
            session.add_all(objects)
            await session.commit()
        return objects[0]

    async def user(
        self,
        role: UserRoles = UserRoles.volunteer,
        email: str | None = None,
        is_active: bool = True,
    ) -> Users:
        return await self._save(
            Users(
                email=email or fake.unique.email(),
                full_name=fake.name(),
                password=DEFAULT_PASSWORD_HASH,
                role=role,
                is_active=is_active,
            )
        )

    async def volunteer(self, **kwargs) -> Users:
        return await self.user(UserRoles.volunteer, **kwargs)

    async def superuser(self, **kwargs) -> Users:
        return await self.user(UserRoles.superuser, **kwargs)

    async def ngo(self, name: str | None = None, **kwargs) -> tuple[Users, NGOProfiles]:
        user = await self.user(UserRoles.ngo, **kwargs)
        profile = await self._save(
            NGOProfiles(
                user_id=user.id,
                name=name or fake.company(),
                mission=fake.sentence(),
                contact_email=user.email,
                contact_phone="9876543210",
                address=fake.address(),
            )
        )
        return user, profile

    async def event(
        self,
        ngo_id: int,
        capacity: int = 5,
        starts_in: timedelta = timedelta(days=7),
        duration: timedelta = timedelta(hours=3),
        **kwargs,
    ) -> Events:
        start_at = datetime.now(timezone.utc) + starts_in
        values = {
            "title": fake.sentence(nb_words=4),
            "description": fake.paragraph(),
            "category": "Community",
            "venue": fake.city(),
            "is_public": True,
            "is_active": True,
        }
        values.update(kwargs)
        return await self._save(
            Events(
                ngo_id=ngo_id,
                capacity=capacity,
                start_at=start_at,
                end_at=start_at + duration,
                **values,
            )
        )

    async def application(
        self,
        event_id: int,
        user_id: int,
        status: ApplicationStatus = ApplicationStatus.pending,
    ) -> VolunteerApplications:
        return await self._save(
            VolunteerApplications(
                event_id=event_id,
                user_id=user_id,
                message="I would like to help.",
                status=status,
                applied_at=datetime.now(timezone.utc),
            )
        )


@pytest.fixture
def factory(session_factory) -> Factory:
    return Factory(session_factory)


def event_payload(**overrides) -> dict:
    start_at = datetime.now(timezone.utc) + timedelta(days=10)
    payload = {
        "title": "Beach clean-up",
        "description": "Collect litter along the shore.",
        "category": "Environment",
        "start_at": start_at.isoformat(),
        "end_at": (start_at + timedelta(hours=4)).isoformat(),
        "venue": "North Beach",
        "capacity": 10,
    }
    payload.update(overrides)
    return payload
