"""
profrate.api.app

FastAPI app factory.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Own startup/shutdown: DB engine, dev/test table creation, bootstrap administrator.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from profrate import __version__
from profrate.api.errors import register_error_handlers
from profrate.api.routers.auth import router as auth_router
from profrate.api.routers.health import router as health_router
from profrate.api.routers.users import router as users_router
from profrate.db.init_db import init_db
from profrate.db.session import create_engine, create_sessionmaker
from profrate.observability.logging import configure_logging, get_logger
from profrate.observability.middleware import RequestContextMiddleware
from profrate.settings import Settings
from profrate.users.service import UsersService

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schemas come from Alembic migrations.
            await init_db(engine)

        async with app.state.sessionmaker() as session:
            await UsersService(session=session, settings=settings).ensure_default_admin()

        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Professor Rating API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    return app
