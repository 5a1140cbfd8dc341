"""Startup helpers that make sure the database and schema exist."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import sqlalchemy as sa
from alembic.config import Config
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import command
from credential_backend.config.settings import Settings

logger = logging.getLogger(__name__)


class SchemaBootstrapError(RuntimeError):
    """Raised when the database or schema cannot be prepared at startup."""


def _server_url(url: URL) -> URL:
    """Return the server-level URL used to create the target database."""

    if url.get_backend_name() == "postgresql":
        return url.set(database="postgres")
    return url.set(database=None)


async def ensure_database_exists(database_url: str) -> bool:
    """Create the configured database when missing; return whether it was created."""

    url = make_url(database_url)
    backend = url.get_backend_name()
    database_name = url.database

    if backend == "sqlite":
        if database_name and database_name != ":memory:":
            Path(database_name).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
        return False

    if not database_name:
        raise SchemaBootstrapError("DATABASE_URL must name a database")

    engine = create_async_engine(_server_url(url), isolation_level="AUTOCOMMIT")
    try:
        async with engine.connect() as connection:
            quoted_name = connection.dialect.identifier_preparer.quote(database_name)
            if backend == "mysql":
                result = await connection.execute(
                    sa.text(f"CREATE DATABASE IF NOT EXISTS {quoted_name}")
                )
                created = bool(result.rowcount)
            elif backend == "postgresql":
                existing = await connection.execute(
                    sa.text("SELECT 1 FROM pg_database WHERE datname = :name"),
                    {"name": database_name},
                )
                created = existing.first() is None
                if created:
                    await connection.execute(sa.text(f"CREATE DATABASE {quoted_name}"))
            else:
                raise SchemaBootstrapError(f"unsupported database backend: {backend}")
    finally:
        await engine.dispose()

    logger.info(
        "database_ready backend=%s database=%s created=%s",
        backend,
        database_name,
        created,
    )
    return created


def build_alembic_config(*, database_url: str, config_path: str) -> Config:
    """Return Alembic config targeting database_url."""

    path = Path(config_path)
    if not path.is_file():
        raise SchemaBootstrapError(f"alembic config not found: {config_path}")

    alembic_config = Config(str(path))
    # ConfigParser interpolation treats a bare % as a reference.
    alembic_config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    # Process logging is already configured; keep alembic.ini loggers out of it.
    alembic_config.attributes["configure_logger"] = False
    return alembic_config


def run_migrations(*, database_url: str, config_path: str) -> None:
    """Upgrade schema to the latest revision.

    Must run outside a running event loop: Alembic drives async drivers with
    its own `asyncio.run`.
    """

    command.upgrade(
        build_alembic_config(database_url=database_url, config_path=config_path),
        "head",
    )
    logger.info("schema_ready revision=head")


def bootstrap_schema(settings: Settings) -> None:
    """Ensure database and schema exist before the API accepts traffic."""

    try:
        asyncio.run(ensure_database_exists(settings.database_url))
        run_migrations(
            database_url=settings.database_url,
            config_path=settings.alembic_config_path,
        )
    except SchemaBootstrapError:
        raise
    except Exception as exc:
        raise SchemaBootstrapError("database bootstrap failed") from exc
