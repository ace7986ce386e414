"""Tests for the key/value site settings repository."""

import pytest

from orpheus_common.errors import StorageUnavailableError
from orpheus_web.services.site_settings import SettingsRepository


async def test_set_then_get(session):
    repository = SettingsRepository(session)

    assert await repository.set("site_title", "Orpheus") == {"success": True}
    assert await repository.get("site_title") == "Orpheus"


async def test_set_overwrites_existing_key(session):
    repository = SettingsRepository(session)
    await repository.set("tagline", "first")

    await repository.set("tagline", "second")

    assert await repository.get("tagline") == "second"
    assert await repository.all() == {"tagline": "second"}


async def test_missing_key_is_none(session):
    assert await SettingsRepository(session).get("absent") is None


async def test_all_returns_every_key(session):
    repository = SettingsRepository(session)
    await repository.set("b", "2")
    await repository.set("a", "1")

    assert await repository.all() == {"a": "1", "b": "2"}


async def test_without_database():
    repository = SettingsRepository(None)

    assert await repository.get("a") is None
    assert await repository.all() == {}
    with pytest.raises(StorageUnavailableError):
        await repository.set("a", "1")
