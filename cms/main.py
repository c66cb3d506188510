import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cms.api.router import api_router
from cms.core.config import Settings
from cms.core.db import Database
from cms.core.logging_setup import configure_logging
from cms.core.rate_limit import RateLimiter
from cms.domains.identity.services import IdentityService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    database.init()
    await database.create_all()

    if settings.admin_email and settings.admin_password:
        async with database.session() as session:
            await IdentityService(session, settings).ensure_admin(
                settings.admin_email, settings.admin_password
            )

    logger.info(f"CMS started for app {settings.app_id}")
    yield

    await database.dispose()
    logger.info("CMS stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Создание приложения с явными настройками и собственной БД"""
    if settings is None:
        from cms.core.config import settings as default_settings
        settings = default_settings

    configure_logging(settings.log_level)

    app = FastAPI(
        title="Site CMS",
        description="Администрирование контента сайта: коллекции, страницы и блог",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url, echo=settings.sql_echo)
    app.state.rate_limiter = RateLimiter(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(api_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": "Site CMS API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
