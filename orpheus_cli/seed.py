"""Sample content for a fresh installation."""

from datetime import datetime, timezone

from sqlalchemy import func, select

from orpheus_common.db import Database
from orpheus_common.logging import get_logger
from orpheus_common.models import Essay, Paper, Photo
from orpheus_web.services.content import (
    ContentRepository,
    EssayRepository,
    PaperRepository,
    PhotoRepository,
)

logger = get_logger(__name__)


def _date(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


SEED_PHOTOS = [
    {
        "title": "Winter Solitude",
        "description": "Snow-covered peaks under a pale winter sky, where silence speaks louder than words.",
        "location": "Isle of Skye, Scotland",
        "image_url": "/images/DSCF3114.JPG",
        "category": "Landscape",
        "tags": ["winter", "mountains", "scotland", "snow"],
        "featured": True,
        "sort_order": 1,
        "published_at": _date("2024-01-15"),
    },
    {
        "title": "Edge of the World",
        "description": "Where chalk cliffs meet the sea, two figures walk toward the infinite horizon.",
        "location": "Seven Sisters, England",
        "image_url": "/images/image7.jpg",
        "category": "Landscape",
        "tags": ["cliffs", "sea", "england", "coast"],
        "featured": True,
        "sort_order": 2,
        "published_at": _date("2024-02-20"),
    },
    {
        "title": "Threshold",
        "description": "An elderly man pauses at the doorway, caught between shadow and light.",
        "location": "York, England",
        "image_url": "/images/image5.jpg",
        "category": "Street",
        "tags": ["street", "portrait", "england", "light"],
        "sort_order": 4,
        "published_at": _date("2024-04-05"),
    },
    {
        "title": "Roman Passage",
        "description": "The Pantheon stands eternal, as modern life flows past its ancient columns.",
        "location": "Rome, Italy",
        "image_url": "/images/image3.jpg",
        "category": "Architecture",
        "tags": ["italy", "rome", "architecture", "pantheon"],
        "sort_order": 6,
        "published_at": _date("2024-06-20"),
    },
]

SEED_ESSAYS = [
    {
        "title": "The Art of Seeing",
        "subtitle": "On Photography and Presence",
        "excerpt": (
            "In an age of infinite images, what does it mean to truly see? The camera becomes "
            "not just a tool for capture, but a lens through which we learn to inhabit the present."
        ),
        "content": (
            "In an age of infinite images, what does it mean to truly see?\n\n"
            "Photography, at its essence, is an act of attention. When we raise the camera to our "
            "eye, we are making a declaration: this moment matters."
        ),
        "cover_image_url": "/images/image7.jpg",
        "category": "Photography",
        "tags": ["photography", "art", "seeing", "presence"],
        "read_time": 12,
        "featured": True,
        "published": True,
        "published_at": _date("2024-12-01"),
    },
    {
        "title": "The Silence of Snow",
        "subtitle": "A Winter Journey to the Scottish Highlands",
        "excerpt": (
            "There is a particular quality to highland silence in winter, not an absence of sound "
            "but a presence of stillness so profound it becomes almost audible."
        ),
        "content": (
            "There is a particular quality to highland silence in winter.\n\n"
            "I arrived in the Scottish Highlands in late January, when the land lay buried under "
            "a thick blanket of snow."
        ),
        "cover_image_url": "/images/DSCF3114.JPG",
        "category": "Travel",
        "tags": ["scotland", "winter", "travel", "nature"],
        "read_time": 10,
        "published": True,
        "published_at": _date("2024-10-20"),
    },
]

SEED_PAPERS = [
    {
        "title": "Visual Rhetoric in Contemporary Documentary Photography: A Semiotic Analysis",
        "authors": ["Orpheus D."],
        "abstract": (
            "This paper examines the evolving visual rhetoric employed in contemporary documentary "
            "photography, analyzing how photographers construct meaning through compositional choices."
        ),
        "journal": "Journal of Visual Culture",
        "year": 2024,
        "volume": "23",
        "pages": "145-172",
        "doi": "10.1177/1470412924000001",
        "category": "Visual Culture",
        "tags": ["Documentary Photography", "Visual Rhetoric", "Semiotics"],
        "citations": 12,
        "featured": True,
        "published": True,
        "published_at": _date("2024-03-15"),
    },
    {
        "title": "The Phenomenology of Place: Architectural Experience and Embodied Perception",
        "authors": ["Orpheus D.", "Smith, J."],
        "abstract": (
            "This study investigates the phenomenological dimensions of architectural experience, "
            "focusing on how built environments shape embodied perception."
        ),
        "journal": "Architectural Theory Review",
        "year": 2024,
        "volume": "29",
        "pages": "78-103",
        "doi": "10.1080/13264826.2024.000002",
        "category": "Architecture",
        "tags": ["Phenomenology", "Architecture", "Embodiment"],
        "citations": 8,
        "published": True,
        "published_at": _date("2024-06-20"),
    },
]

SEED_SETS: list[tuple[str, type, type[ContentRepository], list[dict]]] = [
    ("photos", Photo, PhotoRepository, SEED_PHOTOS),
    ("essays", Essay, EssayRepository, SEED_ESSAYS),
    ("papers", Paper, PaperRepository, SEED_PAPERS),
]


async def seed_database(database: Database) -> dict[str, int]:
    """
    Insert sample content into empty tables.

    Tables that already hold rows are left alone. Returns the number of rows
    added per table.
    """
    added: dict[str, int] = {}
    for name, model, repository_cls, rows in SEED_SETS:
        async with database.session() as session:
            existing = (await session.execute(select(func.count(model.id)))).scalar_one()
            if existing:
                logger.info("seed_skipped", table=name, existing=existing)
                added[name] = 0
                continue

            repository = repository_cls(session)
            for row in rows:
                await repository.create(dict(row))
            added[name] = len(rows)
            logger.info("seed_completed", table=name, added=len(rows))
    return added
