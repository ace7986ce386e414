"""
Session tokens: signed, expiring JWTs carried by cookie or bearer header.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from starlette.requests import HTTPConnection

from orpheus_common.config import AuthSettings
from orpheus_common.logging import get_logger

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    email: str
    role: str


class SessionService:
    """Issues and verifies session tokens with one server-held secret."""

    def __init__(self, secret: str, default_ttl: timedelta, cookie_name: str = "app_session"):
        if not secret:
            raise ValueError("Session secret is empty; set ORPHEUS_AUTH_JWT_SECRET")
        self._secret = secret
        self.default_ttl = default_ttl
        self.cookie_name = cookie_name

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> "SessionService":
        return cls(
            secret=settings.jwt_secret.get_secret_value(),
            default_ttl=timedelta(days=settings.session_max_age_days),
            cookie_name=settings.session_cookie_name,
        )

    def issue_session(
        self,
        user_id: int,
        email: str,
        role: str,
        ttl: timedelta | None = None,
    ) -> str:
        """Create a signed token embedding the user's id, email and role."""
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + (ttl if ttl is not None else self.default_ttl)
        claims: dict[str, Any] = {
            "userId": user_id,
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(claims, self._secret, algorithm=JWT_ALGORITHM, headers={"typ": "JWT"})

    def verify_session(self, token: str | None) -> SessionClaims | None:
        """
        Check signature and expiry of a token.

        Returns None for a missing, malformed, tampered or expired token;
        verification problems never raise.
        """
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as exc:
            logger.warning("session_verification_failed", error=str(exc))
            return None

        user_id = payload.get("userId")
        email = payload.get("email")
        role = payload.get("role")
        if (
            not isinstance(user_id, int)
            or isinstance(user_id, bool)
            or not isinstance(email, str)
            or not isinstance(role, str)
        ):
            logger.warning("session_payload_invalid")
            return None

        return SessionClaims(user_id=user_id, email=email, role=role)

    def resolve_token(self, request: HTTPConnection) -> str | None:
        """Session token from the cookie, falling back to `Authorization: Bearer`."""
        cookie_token = request.cookies.get(self.cookie_name)
        if cookie_token:
            return cookie_token

        header = request.headers.get("authorization", "")
        if header.startswith("Bearer "):
            return header[len("Bearer "):].strip() or None
        return None


def is_secure_request(request: HTTPConnection) -> bool:
    if request.url.scheme == "https":
        return True
    forwarded = request.headers.get("x-forwarded-proto", "")
    return any(proto.strip().lower() == "https" for proto in forwarded.split(","))


def session_cookie_options(request: HTTPConnection, production: bool) -> dict[str, Any]:
    """
    Cookie attributes for the session cookie.

    Cross-site front ends only receive the cookie with SameSite=None, which
    browsers accept on secure connections only.
    """
    secure = is_secure_request(request)
    return {
        "httponly": True,
        "path": "/",
        "samesite": "none" if production and secure else "lax",
        "secure": secure,
    }
