"""FastAPI entrypoint for the Orpheus API."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from orpheus_common.config import Settings, get_settings, validate_settings
from orpheus_common.db import Database
from orpheus_common.errors import HttpError
from orpheus_common.logging import get_logger, setup_logging
from orpheus_common.storage import ObjectStorage
from orpheus_web.config import WebSettings, get_web_settings
from orpheus_web.procedures import app_router
from orpheus_web.routes import auth, rpc
from orpheus_web.services.sessions import SessionService

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    web_settings: Optional[WebSettings] = None,
    database: Optional[Database] = None,
    storage: Optional[ObjectStorage] = None,
) -> FastAPI:
    """
    Build the application and its long-lived collaborators.

    The database handle and storage client live on ``app.state``; tests pass
    their own instances instead of the ones derived from settings.
    """
    settings = settings or get_settings()
    web_settings = web_settings or get_web_settings()
    database = database or Database(settings.database)
    storage = storage or ObjectStorage(settings.storage)

    for problem in validate_settings(settings):
        logger.warning("configuration_problem", problem=problem)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # pragma: no cover - app bootstrap
        if database.available:
            await database.create_all()
        else:
            logger.warning("database_not_configured")
        logger.info("api_started", environment=settings.environment, procedures=len(app_router.procedures))
        yield
        await database.dispose()
        logger.info("api_stopped")

    app = FastAPI(
        title=f"{web_settings.title} API",
        description="Content API for photos, essays, papers and backgrounds",
        version="2.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.web_settings = web_settings
    app.state.database = database
    app.state.storage = storage
    app.state.sessions = SessionService.from_settings(settings.auth)
    app.state.procedures = app_router

    app.include_router(auth.router)
    app.include_router(rpc.router)

    if settings.is_production:
        origins = web_settings.cors_origin_list
        if not origins:
            logger.warning("configuration_problem", problem="ORPHEUS_WEB_CORS_ORIGINS is empty; cross-origin calls are refused")
    else:
        origins = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HttpError)
    async def _http_error(request: Request, exc: HttpError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    @app.get("/health")
    async def healthcheck() -> dict:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def run() -> None:  # pragma: no cover - manual entry point
    import uvicorn

    settings = get_settings()
    setup_logging(settings.logging)
    web_settings = get_web_settings()
    uvicorn.run(
        "orpheus_web.main:create_app",
        factory=True,
        host=web_settings.host,
        port=web_settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
