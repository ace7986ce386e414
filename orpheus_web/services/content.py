"""Content repositories for photos, essays, papers and backgrounds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from orpheus_common.db import reads_database, writes_database
from orpheus_common.errors import BadRequestError
from orpheus_common.logging import get_logger
from orpheus_common.models import Background, Essay, Paper, Photo
from orpheus_common.models.base import Base
from orpheus_common.utils import encode_list

logger = get_logger(__name__)

SEARCH_LIMIT = 20
SEARCH_TYPES = ("photos", "essays", "papers")

# Server-managed columns; never written from caller input
_READONLY_COLUMNS = frozenset({"id", "created_at", "updated_at"})


@dataclass(frozen=True)
class EntitySpec:
    """Per-entity parameters of the generic repository."""

    name: str
    model: type[Base]
    order_by: tuple[Any, ...]
    flags: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    list_fields: tuple[str, ...] = ()


PHOTOS = EntitySpec(
    name="photo",
    model=Photo,
    order_by=(Photo.sort_order.desc(), Photo.created_at.desc(), Photo.id.desc()),
    flags=("featured",),
    required=("title", "image_url"),
    list_fields=("tags",),
)

ESSAYS = EntitySpec(
    name="essay",
    model=Essay,
    order_by=(Essay.published_at.desc(), Essay.created_at.desc(), Essay.id.desc()),
    flags=("featured", "published"),
    required=("title", "content"),
    list_fields=("tags",),
)

PAPERS = EntitySpec(
    name="paper",
    model=Paper,
    order_by=(Paper.year.desc(), Paper.created_at.desc(), Paper.id.desc()),
    flags=("featured", "published"),
    required=("title", "authors"),
    list_fields=("authors", "tags"),
)

BACKGROUNDS = EntitySpec(
    name="background",
    model=Background,
    order_by=(Background.sort_order.asc(), Background.created_at.asc(), Background.id.asc()),
    flags=("active",),
    required=("image_url",),
)


class ContentRepository:
    """
    CRUD plus filtered listing for one content table.

    Subclasses only pick an EntitySpec. Payloads coming in use the model's
    attribute names (snake_case) with real lists for list columns; rows going
    out are camelCase dicts from ``Base.to_dict()``.
    """

    spec: ClassVar[EntitySpec]

    def __init__(self, session: AsyncSession | None):
        self.session = session

    @property
    def model(self) -> type[Base]:
        return self.spec.model

    def _columns(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Translate caller fields into column values, encoding list columns."""
        known = set(self.model.__table__.columns.keys()) - _READONLY_COLUMNS
        columns: dict[str, Any] = {}
        for name, value in fields.items():
            if name not in known:
                raise BadRequestError(f"Unknown {self.spec.name} field: {name}")
            if name in self.spec.list_fields and value is not None:
                if isinstance(value, str):
                    value = [value]
                value = encode_list(value)
            columns[name] = value
        return columns

    @reads_database(lambda: [])
    async def list(
        self,
        *,
        limit: int | None = None,
        category: str | None = None,
        **flags: bool | None,
    ) -> list[dict[str, Any]]:
        """
        List rows in the entity's default order.

        Flags left at None are not filtered on; ``category`` is an exact match.
        """
        stmt = select(self.model)
        for name, value in flags.items():
            if name not in self.spec.flags:
                raise ValueError(f"{self.spec.name} cannot be filtered on {name}")
            if value is not None:
                stmt = stmt.where(getattr(self.model, name).is_(value))
        if category is not None:
            stmt = stmt.where(self.model.category == category)
        stmt = stmt.order_by(*self.spec.order_by)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return [row.to_dict() for row in result.scalars().all()]

    @reads_database(lambda: None)
    async def get(self, item_id: int) -> dict[str, Any] | None:
        row = await self.session.get(self.model, item_id)
        return row.to_dict() if row is not None else None

    @writes_database
    async def create(self, fields: dict[str, Any]) -> dict[str, int]:
        missing = [name for name in self.spec.required if fields.get(name) in (None, "", [])]
        if missing:
            raise BadRequestError(f"Missing required {self.spec.name} field(s): {', '.join(missing)}")

        row = self.model(**self._columns(fields))
        self.session.add(row)
        await self.session.commit()
        logger.info(f"{self.spec.name}_created", id=row.id)
        return {"id": row.id}

    @writes_database
    async def update(self, item_id: int, fields: dict[str, Any]) -> dict[str, bool]:
        """Overwrite only the given fields; None values count as omitted."""
        columns = self._columns({k: v for k, v in fields.items() if v is not None})
        if columns:
            await self.session.execute(
                update(self.model).where(self.model.id == item_id).values(**columns)
            )
            await self.session.commit()
            logger.info(f"{self.spec.name}_updated", id=item_id, fields=sorted(columns))
        return {"success": True}

    @writes_database
    async def delete(self, item_id: int) -> dict[str, bool]:
        result = await self.session.execute(delete(self.model).where(self.model.id == item_id))
        await self.session.commit()
        logger.info(f"{self.spec.name}_deleted", id=item_id, removed=result.rowcount)
        return {"success": True}


class PhotoRepository(ContentRepository):
    spec = PHOTOS


class EssayRepository(ContentRepository):
    spec = ESSAYS


class PaperRepository(ContentRepository):
    spec = PAPERS


class BackgroundRepository(ContentRepository):
    spec = BACKGROUNDS


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _matches_any(columns, pattern: str):
    return or_(*(func.lower(column).like(pattern, escape="\\") for column in columns))


async def search_content(
    session: AsyncSession | None,
    q: str,
    type: str | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """
    Case-insensitive substring search over published content.

    Every bucket key is always present; with ``type`` set, the other buckets
    stay empty. Degrades to empty buckets when the database is unavailable.
    """
    results: dict[str, list[dict[str, Any]]] = {name: [] for name in SEARCH_TYPES}
    if type is not None and type not in SEARCH_TYPES:
        raise BadRequestError(f"Unknown search type: {type}")
    if session is None:
        logger.warning("database_unavailable", operation="search_content")
        return results

    pattern = f"%{_escape_like(q.strip().lower())}%"
    queries = {
        "photos": select(Photo)
        .where(_matches_any((Photo.title, Photo.description, Photo.location, Photo.tags), pattern))
        .order_by(Photo.created_at.desc(), Photo.id.desc()),
        "essays": select(Essay)
        .where(Essay.published.is_(True))
        .where(_matches_any((Essay.title, Essay.subtitle, Essay.excerpt, Essay.tags), pattern))
        .order_by(Essay.published_at.desc(), Essay.id.desc()),
        "papers": select(Paper)
        .where(Paper.published.is_(True))
        .where(_matches_any((Paper.title, Paper.abstract, Paper.authors, Paper.tags), pattern))
        .order_by(Paper.year.desc(), Paper.id.desc()),
    }

    for name, stmt in queries.items():
        if type is not None and type != name:
            continue
        try:
            rows = (await session.execute(stmt.limit(SEARCH_LIMIT))).scalars().all()
        except OperationalError as exc:
            logger.warning("search_failed", bucket=name, error=str(exc))
            await session.rollback()
            continue
        results[name] = [row.to_dict() for row in rows]

    logger.debug("search_completed", q=q, type=type, **{k: len(v) for k, v in results.items()})
    return results
