"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """One-way adaptive password hashing contract."""

    def hash_password(self, password: str) -> str:
        """Return a self-describing salted hash for plaintext password."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Return whether plaintext password matches the stored hash."""
