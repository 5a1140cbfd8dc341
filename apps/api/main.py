"""Account API entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from credential_backend.application.services.account_service import AccountService
from credential_backend.config.settings import Settings, load_settings
from credential_backend.infrastructure.db.account_repository import SqlAlchemyAccountRepository
from credential_backend.infrastructure.db.schema_bootstrap import (
    SchemaBootstrapError,
    bootstrap_schema,
)
from credential_backend.infrastructure.db.session import (
    create_database_engine,
    create_session_factory,
)
from credential_backend.infrastructure.http.account_router import (
    build_account_router,
    error_response,
)
from credential_backend.infrastructure.logging import configure_logging
from credential_backend.infrastructure.security.password_hasher import BcryptPasswordHasher

INVALID_REQUEST_BODY_MESSAGE = "Invalid request body"
logger = logging.getLogger(__name__)


def build_account_service(session_factory: async_sessionmaker[AsyncSession]) -> AccountService:
    """Build account service with SQLAlchemy-backed dependencies."""

    return AccountService(
        accounts=SqlAlchemyAccountRepository(session_factory),
        password_hasher=BcryptPasswordHasher(),
    )


def build_engine(database_url: str, *, settings: Settings | None = None) -> AsyncEngine:
    """Build the pooled engine, using pool limits from settings when available."""

    if settings is None:
        return create_database_engine(database_url)
    return create_database_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout_seconds=settings.db_pool_timeout_seconds,
    )


async def _invalid_request_body(request: Request, exc: Exception) -> JSONResponse:
    logger.info("request_rejected path=%s reason=invalid_body", request.url.path)
    return error_response(status_code=400, message=INVALID_REQUEST_BODY_MESSAGE)


def create_app(
    *,
    account_service: AccountService | None = None,
    database_url: str | None = None,
    cors_origins: list[str] | None = None,
    static_dir: str | None = None,
) -> FastAPI:
    """Create FastAPI app exposing account signup, login and listing routes."""

    settings = None
    if account_service is None and database_url is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        database_url = settings.database_url
        if cors_origins is None:
            cors_origins = settings.cors_origin_list()
        if static_dir is None:
            static_dir = settings.static_dir

    engine: AsyncEngine | None = None
    if account_service is None:
        assert database_url is not None
        engine = build_engine(database_url, settings=settings)
        account_service = build_account_service(create_session_factory(engine))

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            if engine is not None:
                await engine.dispose()

    origins = cors_origins or ["*"]
    app = FastAPI(title="Credential Backend", lifespan=lifespan)
    # Browsers reject credentialed responses for a wildcard origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _invalid_request_body)
    app.include_router(build_account_router(account_service=account_service))

    if static_dir is not None:
        # Mounted last so API routes take precedence over static paths.
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def run_asgi_server(*, host: str, port: int) -> None:
    """Run the API as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Bootstrap database schema, then serve the API."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    try:
        bootstrap_schema(settings)
    except SchemaBootstrapError:
        logger.exception("api_startup_aborted reason=bootstrap_failed")
        raise SystemExit(1) from None

    logger.info("api_starting host=%s port=%s", settings.api_host, settings.api_port)
    run_asgi_server(host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
