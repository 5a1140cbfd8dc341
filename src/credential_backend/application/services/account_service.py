"""Application service for account registration, login and listing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from credential_backend.application.ports.account_repository_port import (
    AccountCreateInput,
    AccountRecord,
    AccountRepositoryPort,
    AccountSummary,
    DuplicateEmailError,
)
from credential_backend.application.ports.password_hasher_port import PasswordHasherPort
from credential_backend.domain.accounts.validation import (
    INVALID_LOGIN_MESSAGE,
    validate_login,
    validate_registration,
)

DUPLICATE_EMAIL_MESSAGE = "Email already registered"

logger = logging.getLogger(__name__)


class AccountOutcome(StrEnum):
    """Supported account use-case outcomes."""

    SUCCESS = "success"
    INVALID_INPUT = "invalid_input"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class RegistrationResult:
    """Registration result model."""

    outcome: AccountOutcome
    message: str
    account_id: int | None = None


@dataclass(frozen=True)
class AuthenticationResult:
    """Authentication result model."""

    outcome: AccountOutcome
    message: str
    account: AccountRecord | None = None


class AccountService:
    """Validate, hash and persist account credentials.

    Business-rule failures come back as result outcomes. Store and hashing
    errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher

    async def register(
        self,
        *,
        name: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
        phone: str | None,
    ) -> RegistrationResult:
        """Create one account when input is valid and the email is unused."""

        failure = validate_registration(
            name=name,
            email=email,
            password=password,
            confirm_password=confirm_password,
            phone=phone,
        )
        if failure is not None:
            logger.info("registration_rejected reason=invalid_input")
            return RegistrationResult(outcome=AccountOutcome.INVALID_INPUT, message=failure)
        assert name is not None and email is not None and password is not None

        if await self._accounts.get_by_email(email=email) is not None:
            logger.info("registration_rejected reason=duplicate_email")
            return RegistrationResult(
                outcome=AccountOutcome.DUPLICATE_EMAIL,
                message=DUPLICATE_EMAIL_MESSAGE,
            )

        password_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)
        try:
            account_id = await self._accounts.create_account(
                AccountCreateInput(
                    name=name,
                    email=email,
                    password_hash=password_hash,
                    phone=phone,
                )
            )
        except DuplicateEmailError:
            logger.info("registration_rejected reason=duplicate_email")
            return RegistrationResult(
                outcome=AccountOutcome.DUPLICATE_EMAIL,
                message=DUPLICATE_EMAIL_MESSAGE,
            )

        logger.info("account_registered account_id=%s", account_id)
        return RegistrationResult(
            outcome=AccountOutcome.SUCCESS,
            message=f"Account created successfully! Welcome, {name}!",
            account_id=account_id,
        )

    async def authenticate(
        self,
        *,
        email: str | None,
        password: str | None,
    ) -> AuthenticationResult:
        """Verify credentials without revealing whether the email exists."""

        failure = validate_login(email=email, password=password)
        if failure is not None:
            logger.info("login_rejected reason=invalid_input")
            return AuthenticationResult(outcome=AccountOutcome.INVALID_INPUT, message=failure)
        assert email is not None and password is not None

        account = await self._accounts.get_by_email(email=email)
        if account is None:
            logger.info("login_failed reason=invalid_credentials")
            return AuthenticationResult(
                outcome=AccountOutcome.INVALID_CREDENTIALS,
                message=INVALID_LOGIN_MESSAGE,
            )

        is_valid = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=account.password_hash,
        )
        if not is_valid:
            logger.info("login_failed reason=invalid_credentials")
            return AuthenticationResult(
                outcome=AccountOutcome.INVALID_CREDENTIALS,
                message=INVALID_LOGIN_MESSAGE,
            )

        logger.info("login_succeeded account_id=%s", account.account_id)
        return AuthenticationResult(
            outcome=AccountOutcome.SUCCESS,
            message=f"Welcome back! Logged in as {email}",
            account=account,
        )

    async def list_accounts(self) -> list[AccountSummary]:
        """Return public fields for every registered account."""

        return await self._accounts.list_accounts()
