"""Common FastAPI dependencies for the API."""

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from orpheus_common.config import Settings
from orpheus_common.db import Database
from orpheus_common.storage import ObjectStorage
from orpheus_web.rpc import ProcedureRouter
from orpheus_web.services.sessions import SessionService


def get_settings_state(request: Request) -> Settings:
    return request.app.state.settings


def get_session_service(request: Request) -> SessionService:
    return request.app.state.sessions


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


def get_procedures(request: Request) -> ProcedureRouter:
    return request.app.state.procedures


async def get_db_session(request: Request) -> AsyncGenerator[Optional[AsyncSession], None]:
    """
    Yield a session on the application's database, or None when no database
    is configured; repositories degrade on None instead of failing the request.
    """

    database: Database = request.app.state.database
    if not database.available:
        yield None
        return

    async with database.session() as session:
        yield session
