"""Port for account persistence used by the account credential service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class DuplicateEmailError(ValueError):
    """Raised when an account with the same email already exists."""

    def __init__(self, *, email: str) -> None:
        super().__init__("email already registered")
        self.email = email


@dataclass(frozen=True)
class AccountCreateInput:
    """Insert payload for one new account row."""

    name: str
    email: str
    password_hash: str
    phone: str | None


@dataclass(frozen=True)
class AccountRecord:
    """Full account persistence model, including the password hash."""

    account_id: int
    name: str
    email: str
    password_hash: str
    phone: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AccountSummary:
    """Public account projection safe to return to callers."""

    account_id: int
    name: str
    email: str
    phone: str | None
    created_at: datetime


class AccountRepositoryPort(Protocol):
    """Account repository contract."""

    async def create_account(self, payload: AccountCreateInput) -> int:
        """Insert one account and return its id, raising DuplicateEmailError on conflict."""

    async def get_by_email(self, *, email: str) -> AccountRecord | None:
        """Return account by email or None."""

    async def list_accounts(self) -> list[AccountSummary]:
        """Return public fields for every account ordered by id."""
