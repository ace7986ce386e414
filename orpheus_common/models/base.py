"""
Base SQLAlchemy setup for async operations.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime, Integer, MetaData
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from orpheus_common.utils import decode_list


# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(AsyncAttrs, DeclarativeBase):
    """
    Base class for all models.
    Includes common columns: id, created_at, updated_at.
    """

    metadata = metadata

    # Columns holding a comma-joined list; exposed as list[str] by to_dict()
    __list_columns__: ClassVar[tuple[str, ...]] = ()

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation showing class and id."""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready payload with camelCase keys."""
        payload: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if column.key in self.__list_columns__:
                value = decode_list(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            payload[to_camel(column.key)] = value
        return payload
