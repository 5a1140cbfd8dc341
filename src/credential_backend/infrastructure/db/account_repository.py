"""SQLAlchemy adapter for account persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import cast

import sqlalchemy as sa
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from credential_backend.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
    AccountSummary,
    DuplicateEmailError,
)
from credential_backend.infrastructure.db.metadata import users

logger = logging.getLogger(__name__)


def _is_duplicate_email_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return any(
        marker in message
        for marker in ("uq_users_email", "users.email", "for key 'email'")
    )


def _to_account_record(row: RowMapping) -> AccountRecord:
    return AccountRecord(
        account_id=int(row["id"]),
        name=cast(str, row["name"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        phone=cast("str | None", row["phone"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )


def _to_account_summary(row: RowMapping) -> AccountSummary:
    return AccountSummary(
        account_id=int(row["id"]),
        name=cast(str, row["name"]),
        email=cast(str, row["email"]),
        phone=cast("str | None", row["phone"]),
        created_at=cast(datetime, row["created_at"]),
    )


class SqlAlchemyAccountRepository(AccountRepositoryPort):
    """Account repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_account(self, payload: AccountCreateInput) -> int:
        """Insert a new account row and return its generated id.

        The explicit lookup rejects the common duplicate case; the unique
        email constraint settles concurrent inserts that both passed it.
        """

        existing = sa.select(users.c.id).where(users.c.email == payload.email).limit(1)
        statement = sa.insert(users).values(
            name=payload.name,
            email=payload.email,
            password_hash=payload.password_hash,
            phone=payload.phone,
        )

        async with self._session_factory() as session:
            found = await session.execute(existing)
            if found.first() is not None:
                raise DuplicateEmailError(email=payload.email)

            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_email_error(error):
                    logger.info("account_insert_conflict reason=unique_email")
                    raise DuplicateEmailError(email=payload.email) from error
                raise

        inserted_primary_key = result.inserted_primary_key
        assert inserted_primary_key is not None
        return int(inserted_primary_key[0])

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return the full account row for email, or None."""

        statement = sa.select(
            users.c.id,
            users.c.name,
            users.c.email,
            users.c.password_hash,
            users.c.phone,
            users.c.created_at,
            users.c.updated_at,
        ).where(users.c.email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_account_record(row)

    async def list_accounts(self) -> list[AccountSummary]:
        """Return public account fields ordered by id."""

        statement = sa.select(
            users.c.id,
            users.c.name,
            users.c.email,
            users.c.phone,
            users.c.created_at,
        ).order_by(users.c.id)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_account_summary(row) for row in result.mappings().all()]
