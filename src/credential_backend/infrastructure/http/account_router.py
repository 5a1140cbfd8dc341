"""FastAPI router for account signup, login and listing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from credential_backend.application.dto.account_models import (
    AccountListItem,
    AccountListResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from credential_backend.application.services.account_service import (
    AccountOutcome,
    AccountService,
)

SERVER_ERROR_MESSAGE = "Server error. Please try again later."
LIST_SERVER_ERROR_MESSAGE = "Server error"

_OUTCOME_STATUS_CODES = {
    AccountOutcome.INVALID_INPUT: 400,
    AccountOutcome.DUPLICATE_EMAIL: 400,
    AccountOutcome.INVALID_CREDENTIALS: 401,
}

logger = logging.getLogger(__name__)


def error_response(*, status_code: int, message: str) -> JSONResponse:
    """Render the shared `{success: false, message}` failure body."""

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(by_alias=True),
    )


def build_account_router(*, account_service: AccountService) -> APIRouter:
    """Build router exposing account credential endpoints under /api."""

    router = APIRouter(prefix="/api", tags=["accounts"])
    error_responses: dict[int | str, dict[str, object]] = {
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }

    @router.post(
        "/signup",
        status_code=201,
        response_model=SignupResponse,
        responses=error_responses,
    )
    async def signup(body: SignupRequest | None = None) -> SignupResponse | JSONResponse:
        # An absent body is validated like an empty object.
        body = body or SignupRequest()
        try:
            result = await account_service.register(
                name=body.name,
                email=body.email,
                password=body.password,
                confirm_password=body.confirm_password,
                phone=body.phone,
            )
        except Exception:
            logger.exception("signup_failed reason=server_error")
            return error_response(status_code=500, message=SERVER_ERROR_MESSAGE)

        if result.outcome is not AccountOutcome.SUCCESS:
            return error_response(
                status_code=_OUTCOME_STATUS_CODES[result.outcome],
                message=result.message,
            )

        assert result.account_id is not None
        return SignupResponse(message=result.message, user_id=result.account_id)

    @router.post(
        "/login",
        response_model=LoginResponse,
        responses={**error_responses, 401: {"model": ErrorResponse}},
    )
    async def login(body: LoginRequest | None = None) -> LoginResponse | JSONResponse:
        body = body or LoginRequest()
        try:
            result = await account_service.authenticate(
                email=body.email,
                password=body.password,
            )
        except Exception:
            logger.exception("login_failed reason=server_error")
            return error_response(status_code=500, message=SERVER_ERROR_MESSAGE)

        if result.outcome is not AccountOutcome.SUCCESS:
            return error_response(
                status_code=_OUTCOME_STATUS_CODES[result.outcome],
                message=result.message,
            )

        account = result.account
        assert account is not None
        return LoginResponse(
            message=result.message,
            user_id=account.account_id,
            name=account.name,
            phone=account.phone or None,
        )

    @router.get(
        "/users",
        response_model=AccountListResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def list_users() -> AccountListResponse | JSONResponse:
        try:
            accounts = await account_service.list_accounts()
        except Exception:
            logger.exception("list_users_failed reason=server_error")
            return error_response(status_code=500, message=LIST_SERVER_ERROR_MESSAGE)

        return AccountListResponse(
            users=[
                AccountListItem(
                    id=account.account_id,
                    name=account.name,
                    email=account.email,
                    phone=account.phone,
                    created_at=account.created_at,
                )
                for account in accounts
            ]
        )

    return router
