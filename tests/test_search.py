"""Tests for site-wide substring search."""

import pytest

from orpheus_common.errors import BadRequestError
from orpheus_web.services.content import (
    SEARCH_LIMIT,
    EssayRepository,
    PaperRepository,
    PhotoRepository,
    search_content,
)


@pytest.fixture
async def library(session):
    await PhotoRepository(session).create(
        {"title": "Winter Solitude", "image_url": "u", "location": "Isle of Skye", "tags": ["snow"]}
    )
    await EssayRepository(session).create(
        {"title": "The Silence of Snow", "content": "c", "published": True}
    )
    await EssayRepository(session).create(
        {"title": "Snow Draft", "content": "c", "published": False}
    )
    await PaperRepository(session).create(
        {"title": "Light", "authors": ["Orpheus D."], "abstract": "Snowfields at dusk", "published": True}
    )
    await PaperRepository(session).create(
        {"title": "Unpublished snow", "authors": ["Orpheus D."], "published": False}
    )
    return session


async def test_no_match_returns_all_empty_buckets(library):
    assert await search_content(library, "xyz") == {"photos": [], "essays": [], "papers": []}


async def test_match_is_case_insensitive_and_published_only(library):
    results = await search_content(library, "SNOW")

    assert [photo["title"] for photo in results["photos"]] == ["Winter Solitude"]
    assert [essay["title"] for essay in results["essays"]] == ["The Silence of Snow"]
    assert [paper["title"] for paper in results["papers"]] == ["Light"]


async def test_type_filter_keeps_other_keys_empty(library):
    results = await search_content(library, "snow", "essays")

    assert set(results) == {"photos", "essays", "papers"}
    assert results["photos"] == []
    assert results["papers"] == []
    assert len(results["essays"]) == 1


async def test_unknown_type_is_rejected(library):
    with pytest.raises(BadRequestError):
        await search_content(library, "snow", "videos")


async def test_results_are_capped(session):
    photos = PhotoRepository(session)
    for index in range(SEARCH_LIMIT + 5):
        await photos.create({"title": f"Harbour {index}", "image_url": "u"})

    results = await search_content(session, "harbour", "photos")

    assert len(results["photos"]) == SEARCH_LIMIT


async def test_like_wildcards_are_literal(session):
    photos = PhotoRepository(session)
    await photos.create({"title": "100% grain", "image_url": "u"})
    await photos.create({"title": "snake_case", "image_url": "u"})
    await photos.create({"title": "plain", "image_url": "u"})

    percent = await search_content(session, "%", "photos")
    underscore = await search_content(session, "_", "photos")

    assert [photo["title"] for photo in percent["photos"]] == ["100% grain"]
    assert [photo["title"] for photo in underscore["photos"]] == ["snake_case"]


async def test_search_without_database_is_empty():
    assert await search_content(None, "snow") == {"photos": [], "essays": [], "papers": []}
