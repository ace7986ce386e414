"""Tests for role resolution, login flows and request authentication."""

from datetime import datetime, timedelta

import pytest
from pydantic import SecretStr

from orpheus_common.config import AuthSettings
from orpheus_common.errors import ForbiddenError, StorageUnavailableError, UnauthorizedError
from orpheus_common.models.user import Role
from orpheus_web.services.users import (
    authenticate,
    create_user,
    get_user_by_email,
    login_with_email,
    login_with_password,
    pwd_context,
    resolve_role,
    upsert_user,
    verify_admin_password,
)
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, JWT_SECRET
from tests.helpers import make_request


def auth_settings(**overrides) -> AuthSettings:
    values = {
        "jwt_secret": SecretStr(JWT_SECRET),
        "admin_email": ADMIN_EMAIL,
        "admin_password": SecretStr(ADMIN_PASSWORD),
    }
    values.update(overrides)
    return AuthSettings(**values)


@pytest.mark.parametrize(
    "email, admin_email, expected",
    [
        ("admin@example.com", "admin@example.com", Role.ADMIN),
        ("Admin@Example.COM ", "admin@example.com", Role.ADMIN),
        ("reader@example.com", "admin@example.com", Role.USER),
        ("admin@example.com", "", Role.USER),
        (None, "admin@example.com", Role.USER),
    ],
)
def test_resolve_role(email, admin_email, expected):
    assert resolve_role(email, admin_email) == expected


def test_verify_admin_password_plain_and_hashed():
    assert verify_admin_password("s3cret", "s3cret")
    assert not verify_admin_password("s3cret", "other")

    hashed = pwd_context.hash("s3cret")
    assert verify_admin_password("s3cret", hashed)
    assert not verify_admin_password("wrong", hashed)


async def test_login_with_email_creates_user(session, sessions):
    result = await login_with_email(session, sessions, auth_settings(), "writer@example.com")

    assert result.user.id is not None
    assert result.user.name == "writer"
    assert result.user.role == Role.USER
    assert result.user.open_id.startswith("local_")
    claims = sessions.verify_session(result.token)
    assert claims.user_id == result.user.id
    assert claims.role == "user"


async def test_login_with_email_promotes_admin(session, sessions):
    existing = await create_user(session, email=ADMIN_EMAIL, name="admin", role=Role.USER)

    result = await login_with_email(session, sessions, auth_settings(), ADMIN_EMAIL)

    assert result.user.id == existing.id
    assert result.user.role == Role.ADMIN
    assert sessions.verify_session(result.token).role == "admin"


async def test_password_login_not_configured(session, sessions):
    settings = auth_settings(admin_password=None)

    with pytest.raises(ForbiddenError, match="Password login not configured"):
        await login_with_password(session, sessions, settings, ADMIN_EMAIL, "anything")


@pytest.mark.parametrize(
    "email, password",
    [
        (ADMIN_EMAIL, "wrong password"),
        ("someone@example.com", ADMIN_PASSWORD),
    ],
)
async def test_password_login_rejects_mismatch(session, sessions, email, password):
    with pytest.raises(UnauthorizedError, match="Invalid email or password"):
        await login_with_password(session, sessions, auth_settings(), email, password)

    assert await get_user_by_email(session, email) is None


async def test_password_login_issues_admin_session(session, sessions):
    result = await login_with_password(session, sessions, auth_settings(), ADMIN_EMAIL, ADMIN_PASSWORD)

    assert result.user.role == Role.ADMIN
    assert result.user.email == ADMIN_EMAIL


async def test_password_login_accepts_hashed_config(session, sessions):
    settings = auth_settings(admin_password=SecretStr(pwd_context.hash(ADMIN_PASSWORD)))

    result = await login_with_password(session, sessions, settings, ADMIN_EMAIL, ADMIN_PASSWORD)

    assert result.user.role == Role.ADMIN


async def test_authenticate_resolves_user_and_touches_last_signed_in(session, sessions):
    user = await create_user(session, email="reader@example.com")
    before = datetime(2020, 1, 1)
    user.last_signed_in = before
    await session.flush()
    token = sessions.issue_session(user.id, user.email, user.role.value)

    resolved = await authenticate(make_request({"authorization": f"Bearer {token}"}), session, sessions)

    assert resolved.id == user.id
    assert resolved.last_signed_in.replace(tzinfo=None) > before


async def test_authenticate_without_token(session, sessions):
    with pytest.raises(UnauthorizedError, match="Invalid or expired session"):
        await authenticate(make_request(), session, sessions)


async def test_authenticate_with_expired_token(session, sessions):
    user = await create_user(session, email="reader@example.com")
    token = sessions.issue_session(user.id, user.email, "user", ttl=timedelta(seconds=-5))

    with pytest.raises(UnauthorizedError, match="Invalid or expired session"):
        await authenticate(make_request({"authorization": f"Bearer {token}"}), session, sessions)


async def test_authenticate_unknown_user(session, sessions):
    token = sessions.issue_session(9999, "ghost@example.com", "admin")

    with pytest.raises(UnauthorizedError, match="User not found"):
        await authenticate(make_request({"cookie": f"app_session={token}"}), session, sessions)


async def test_upsert_user_syncs_role_from_email(session):
    settings = auth_settings()

    created = await upsert_user(session, settings, open_id="ext-1", email="reader@example.com", name="Reader")
    assert created.role == Role.USER

    updated = await upsert_user(session, settings, open_id="ext-1", email=ADMIN_EMAIL)
    assert updated.id == created.id
    assert updated.role == Role.ADMIN
    assert updated.name == "Reader"


async def test_upsert_user_keeps_explicit_role(session):
    user = await upsert_user(session, auth_settings(), open_id="ext-2", email=ADMIN_EMAIL, role=Role.USER)

    assert user.role == Role.USER


async def test_user_writes_require_database(sessions):
    with pytest.raises(StorageUnavailableError):
        await create_user(None, email="reader@example.com")
    assert await get_user_by_email(None, "reader@example.com") is None
