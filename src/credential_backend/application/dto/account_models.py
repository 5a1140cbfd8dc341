"""Pydantic models for account HTTP request and response bodies."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """Registration payload; field presence is checked by the service."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None
    phone: str | None = None


class LoginRequest(CamelModel):
    """Login payload; field presence is checked by the service."""

    email: str | None = None
    password: str | None = None


class ErrorResponse(CamelModel):
    success: bool = False
    message: str


class SignupResponse(CamelModel):
    success: bool = True
    message: str
    user_id: int


class LoginResponse(CamelModel):
    success: bool = True
    message: str
    user_id: int
    name: str
    phone: str | None


class AccountListItem(CamelModel):
    """One account row in list responses; never carries the password hash."""

    id: int
    name: str
    email: str
    phone: str | None
    created_at: datetime


class AccountListResponse(CamelModel):
    success: bool = True
    users: list[AccountListItem]
