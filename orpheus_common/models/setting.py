"""Free-text key/value site settings."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orpheus_common.models.base import Base


class SiteSetting(Base):
    __tablename__ = "site_settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
