# todo_api/core/security.py
from __future__ import annotations

from passlib.context import CryptContext

from todo_api.core.config import settings
from todo_api.core.errors import HashingError, PasswordMismatchError

MAX_PASSWORD_LENGTH = 128


class PasswordHasher:
    """One-way salted argon2 hashing; ``time_cost`` is the adaptive cost factor."""

    def __init__(self, time_cost: int | None = None):
        self._context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__time_cost=time_cost or settings.HASH_TIME_COST,
            argon2__memory_cost=19456,
            argon2__parallelism=1,
        )

    def hash(self, password: str) -> str:
        if not isinstance(password, str) or not password:
            raise HashingError("password is required")
        if len(password) > MAX_PASSWORD_LENGTH:
            raise HashingError(f"password length exceeds {MAX_PASSWORD_LENGTH} characters")
        try:
            return self._context.hash(password)
        except (ValueError, TypeError) as exc:
            raise HashingError(str(exc)) from exc

    def verify(self, password_hash: str, password: str) -> None:
        """Raise ``PasswordMismatchError`` on mismatch, ``HashingError`` if the hash is unusable."""
        try:
            ok = self._context.verify(password, password_hash)
        except (ValueError, TypeError) as exc:
            raise HashingError(str(exc)) from exc
        if not ok:
            raise PasswordMismatchError("password does not match")


password_hasher = PasswordHasher()
