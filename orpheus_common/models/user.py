"""User table backing the session/login flow."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orpheus_common.models.base import Base, utcnow


class Role(str, enum.Enum):
    """Access role of a user."""

    USER = "user"
    ADMIN = "admin"


class User(Base):
    """Login identity; in practice the single site administrator."""

    __tablename__ = "users"

    open_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, index=True)
    login_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
    )
    last_signed_in: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self):
        payload = super().to_dict()
        payload["role"] = self.role.value
        return payload

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User(id={self.id}, email={self.email!r}, role={self.role.value})>"
