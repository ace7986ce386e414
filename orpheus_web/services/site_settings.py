"""Free-text key/value site settings."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orpheus_common.db import reads_database, writes_database
from orpheus_common.logging import get_logger
from orpheus_common.models import SiteSetting

logger = get_logger(__name__)


class SettingsRepository:
    """Upsert-only key/value store; there is no separate create or update."""

    def __init__(self, session: AsyncSession | None):
        self.session = session

    @reads_database(lambda: None)
    async def get(self, key: str) -> str | None:
        result = await self.session.execute(select(SiteSetting.value).where(SiteSetting.key == key))
        return result.scalar_one_or_none()

    @reads_database(dict)
    async def all(self) -> dict[str, str]:
        result = await self.session.execute(select(SiteSetting).order_by(SiteSetting.key))
        return {row.key: row.value or "" for row in result.scalars().all()}

    @writes_database
    async def set(self, key: str, value: str) -> dict[str, bool]:
        result = await self.session.execute(select(SiteSetting).where(SiteSetting.key == key))
        setting = result.scalar_one_or_none()
        if setting is None:
            self.session.add(SiteSetting(key=key, value=value))
        else:
            setting.value = value
        await self.session.commit()
        logger.info("site_setting_saved", key=key)
        return {"success": True}
