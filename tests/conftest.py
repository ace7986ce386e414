"""
Shared fixtures: in-memory database, settings, fake object storage and an
HTTP client wired to the FastAPI app.
"""

from datetime import timedelta
from typing import AsyncGenerator

import httpx
import pytest
from pydantic import SecretStr

from orpheus_common.config import AuthSettings, DatabaseSettings, Settings, StorageSettings
from orpheus_common.db import Database
from orpheus_common.models.user import Role, User
from orpheus_common.storage import StoredObject
from orpheus_web.config import WebSettings
from orpheus_web.main import create_app
from orpheus_web.services.sessions import SessionService
from orpheus_web.services.users import create_user

JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"


class FakeStorage:
    """Stands in for ObjectStorage and records every put."""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.puts: list[tuple[str, bytes, str]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> StoredObject:
        self.puts.append((key, data, content_type))
        return StoredObject(key=key, url=f"https://cdn.example.test/{key}")


# ==================== Settings ====================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        auth=AuthSettings(
            jwt_secret=SecretStr(JWT_SECRET),
            admin_email=ADMIN_EMAIL,
            admin_password=SecretStr(ADMIN_PASSWORD),
        ),
        storage=StorageSettings(
            access_key_id="",
            secret_access_key=SecretStr(""),
            bucket="",
            endpoint=None,
            public_url_base=None,
        ),
        environment="test",
    )


@pytest.fixture
def sessions(settings) -> SessionService:
    return SessionService.from_settings(settings.auth)


# ==================== Database ====================

@pytest.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    """Fresh in-memory database per test."""
    db = Database(settings.database)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as db_session:
        yield db_session


async def make_user(database: Database, email: str, role: Role = Role.USER) -> User:
    async with database.session() as db_session:
        return await create_user(db_session, email=email, name=email.split("@")[0], role=role)


@pytest.fixture
async def admin_user(database) -> User:
    return await make_user(database, ADMIN_EMAIL, Role.ADMIN)


@pytest.fixture
async def regular_user(database) -> User:
    return await make_user(database, "reader@example.com", Role.USER)


@pytest.fixture
def admin_headers(admin_user, sessions) -> dict[str, str]:
    token = sessions.issue_session(admin_user.id, admin_user.email, admin_user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(regular_user, sessions) -> dict[str, str]:
    token = sessions.issue_session(regular_user.id, regular_user.email, regular_user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_token(admin_user, sessions) -> str:
    return sessions.issue_session(admin_user.id, admin_user.email, "admin", ttl=timedelta(seconds=-10))


# ==================== Application ====================

@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def app(settings, database, fake_storage):
    return create_app(
        settings,
        web_settings=WebSettings(cors_origins=""),
        database=database,
        storage=fake_storage,
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
