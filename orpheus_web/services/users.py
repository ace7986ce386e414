"""User management and authentication helpers."""

import hmac
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import HTTPConnection

from orpheus_common.config import AuthSettings
from orpheus_common.errors import ForbiddenError, StorageUnavailableError, UnauthorizedError
from orpheus_common.logging import get_logger
from orpheus_common.models.user import Role, User
from orpheus_common.utils import generate_id
from orpheus_web.services.sessions import SessionService

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["argon2", "bcrypt_sha256"],
    deprecated="auto",
)


@dataclass
class AuthResult:
    user: User
    token: str


def resolve_role(email: str | None, admin_email: str | None) -> Role:
    """Admin iff the email matches the configured administrator email (case-insensitive)."""
    if not email or not admin_email:
        return Role.USER
    if email.strip().lower() == admin_email.strip().lower():
        return Role.ADMIN
    return Role.USER


def verify_admin_password(password: str, configured: str) -> bool:
    """Compare a password against the configured value, which may be a passlib hash."""
    if pwd_context.identify(configured) is not None:
        return pwd_context.verify(password, configured)
    return hmac.compare_digest(password.encode("utf-8"), configured.encode("utf-8"))


def _require_session(session: AsyncSession | None) -> AsyncSession:
    if session is None:
        raise StorageUnavailableError()
    return session


async def get_user_by_id(session: AsyncSession | None, user_id: int) -> User | None:
    if session is None:
        logger.warning("database_unavailable", operation="get_user_by_id")
        return None
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession | None, email: str) -> User | None:
    if session is None:
        logger.warning("database_unavailable", operation="get_user_by_email")
        return None
    result = await session.execute(
        select(User).where(User.email == email.strip()).order_by(User.id).limit(1)
    )
    return result.scalar_one_or_none()


async def get_user_by_open_id(session: AsyncSession | None, open_id: str) -> User | None:
    if session is None:
        logger.warning("database_unavailable", operation="get_user_by_open_id")
        return None
    result = await session.execute(select(User).where(User.open_id == open_id))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession | None,
    *,
    email: str,
    name: str | None = None,
    role: Role = Role.USER,
    login_method: str | None = "password",
) -> User:
    """Create and persist a new User with a locally generated open id."""

    session = _require_session(session)
    user = User(
        open_id=f"local_{int(time.time() * 1000)}_{generate_id(7)}",
        email=email.strip(),
        name=name,
        role=role,
        login_method=login_method,
        last_signed_in=datetime.now(timezone.utc),
    )
    session.add(user)
    await session.flush()
    logger.info("user_created", user_id=user.id, role=role.value)
    return user


async def record_login(session: AsyncSession | None, user: User) -> None:
    """Update last_signed_in timestamp."""

    session = _require_session(session)
    user.last_signed_in = datetime.now(timezone.utc)
    await session.flush()


async def update_user_role(session: AsyncSession | None, user: User, role: Role) -> User:
    session = _require_session(session)
    if user.role != role:
        logger.info("user_role_changed", user_id=user.id, old=user.role.value, new=role.value)
        user.role = role
        await session.flush()
    return user


async def upsert_user(
    session: AsyncSession | None,
    settings: AuthSettings,
    *,
    open_id: str,
    name: str | None = None,
    email: str | None = None,
    login_method: str | None = None,
    role: Role | None = None,
    last_signed_in: datetime | None = None,
) -> User:
    """
    Insert or update a user keyed by its external identifier.

    Only the given attributes are written. When no role is passed the role is
    re-synced from the admin email, if an email is known.
    """
    session = _require_session(session)
    if not open_id:
        raise ValueError("open_id is required for upsert")

    user = await get_user_by_open_id(session, open_id)
    if user is None:
        user = User(open_id=open_id, role=Role.USER)
        session.add(user)

    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if login_method is not None:
        user.login_method = login_method
    if role is None and email:
        role = resolve_role(email, settings.admin_email)
    if role is not None:
        user.role = role
    user.last_signed_in = last_signed_in or datetime.now(timezone.utc)

    await session.flush()
    return user


async def authenticate(
    request: HTTPConnection,
    session: AsyncSession | None,
    sessions: SessionService,
) -> User:
    """
    Resolve the caller behind a request.

    Raises:
        UnauthorizedError: no token, invalid/expired token, or unknown user
    """
    claims = sessions.verify_session(sessions.resolve_token(request))
    if claims is None:
        raise UnauthorizedError("Invalid or expired session")

    user = await get_user_by_id(session, claims.user_id)
    if user is None:
        raise UnauthorizedError("User not found")

    await record_login(session, user)
    return user


async def login_with_email(
    session: AsyncSession | None,
    sessions: SessionService,
    settings: AuthSettings,
    email: str,
) -> AuthResult:
    """Find or create the user for an email, sync its role and issue a session."""

    user = await get_user_by_email(session, email)
    role = resolve_role(email, settings.admin_email)

    if user is None:
        user = await create_user(
            session,
            email=email,
            name=email.split("@")[0],
            role=role,
        )
    else:
        if role == Role.ADMIN:
            await update_user_role(session, user, Role.ADMIN)
        await record_login(session, user)

    token = sessions.issue_session(user.id, user.email or "", user.role.value)
    logger.info("user_logged_in", user_id=user.id, role=user.role.value)
    return AuthResult(user=user, token=token)


async def login_with_password(
    session: AsyncSession | None,
    sessions: SessionService,
    settings: AuthSettings,
    email: str,
    password: str,
) -> AuthResult:
    """
    Password login for the single administrator account.

    Raises:
        ForbiddenError: no admin password configured
        UnauthorizedError: email or password mismatch
    """
    if settings.admin_password is None or not settings.admin_password.get_secret_value():
        raise ForbiddenError("Password login not configured")

    email_matches = bool(settings.admin_email) and (
        email.strip().lower() == settings.admin_email.lower()
    )
    password_matches = verify_admin_password(password, settings.admin_password.get_secret_value())
    if not (email_matches and password_matches):
        logger.warning("password_login_rejected", email=email)
        raise UnauthorizedError("Invalid email or password")

    return await login_with_email(session, sessions, settings, email)
