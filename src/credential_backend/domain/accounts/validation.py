"""Input validation rules for account registration and login payloads.

Each validator returns ``None`` for valid input or the first failing
user-facing message. Checks run in a fixed order.
"""

from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 100
MAX_PHONE_LENGTH = 20
MAX_PASSWORD_BYTES = 72

MISSING_FIELDS_MESSAGE = "Please fill in all fields"
NAME_TOO_SHORT_MESSAGE = f"Name must be at least {MIN_NAME_LENGTH} characters"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
PASSWORD_TOO_SHORT_MESSAGE = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
NAME_TOO_LONG_MESSAGE = f"Name must be at most {MAX_NAME_LENGTH} characters"
EMAIL_TOO_LONG_MESSAGE = f"Email must be at most {MAX_EMAIL_LENGTH} characters"
PHONE_TOO_LONG_MESSAGE = f"Phone number must be at most {MAX_PHONE_LENGTH} characters"
PASSWORD_TOO_LONG_MESSAGE = "Password is too long"
INVALID_LOGIN_MESSAGE = "Invalid email or password"


def is_valid_email(email: str) -> bool:
    """Return whether email has a basic `local@domain.tld` shape."""

    return EMAIL_PATTERN.fullmatch(email) is not None


def _all_present(*values: str | None) -> bool:
    return all(value is not None and value != "" for value in values)


def validate_registration(
    *,
    name: str | None,
    email: str | None,
    password: str | None,
    confirm_password: str | None,
    phone: str | None,
) -> str | None:
    """Return the first registration failure message, or None when valid."""

    if not _all_present(name, email, password, confirm_password, phone):
        return MISSING_FIELDS_MESSAGE
    assert name is not None and email is not None and password is not None
    assert phone is not None

    if len(name.strip()) < MIN_NAME_LENGTH:
        return NAME_TOO_SHORT_MESSAGE
    if not is_valid_email(email):
        return INVALID_EMAIL_MESSAGE
    if len(password) < MIN_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT_MESSAGE
    if password != confirm_password:
        return PASSWORD_MISMATCH_MESSAGE

    # Column limits; kept after the checks above so their ordering holds.
    if len(name) > MAX_NAME_LENGTH:
        return NAME_TOO_LONG_MESSAGE
    if len(email) > MAX_EMAIL_LENGTH:
        return EMAIL_TOO_LONG_MESSAGE
    if len(phone) > MAX_PHONE_LENGTH:
        return PHONE_TOO_LONG_MESSAGE
    # bcrypt rejects input longer than 72 bytes.
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return PASSWORD_TOO_LONG_MESSAGE
    return None


def validate_login(*, email: str | None, password: str | None) -> str | None:
    """Return the first login failure message, or None when valid.

    Format and length failures share one generic message so a caller cannot
    tell which constraint rejected the credentials.
    """

    if not _all_present(email, password):
        return MISSING_FIELDS_MESSAGE
    assert email is not None and password is not None

    if not is_valid_email(email):
        return INVALID_LOGIN_MESSAGE
    if len(password) < MIN_PASSWORD_LENGTH:
        return INVALID_LOGIN_MESSAGE
    return None
