# todo_api/core/tokens.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from jose import jwt, JWTError

from todo_api.core.config import settings
from todo_api.core.errors import TokenSigningError, UnauthorizedError

ACCESS = "access"
REFRESH = "refresh"

Clock = Callable[[], datetime]
IdSource = Callable[[], str]


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InvalidTokenError(UnauthorizedError):
    default_message = "invalid token"


class InvalidSignatureError(InvalidTokenError):
    default_message = "invalid token signature"


class TokenExpiredError(InvalidTokenError):
    default_message = "token has expired"


class TokenNotYetValidError(InvalidTokenError):
    default_message = "token is not yet valid"


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    name: str
    email: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime


@dataclass(frozen=True)
class RefreshClaims:
    user_id: int
    issued_at: datetime
    not_before: datetime
    expires_at: datetime


def _ts(value: datetime) -> int:
    return int(value.timestamp())


def _dt(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTokenError("malformed time claim")
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class TokenIssuer:
    """Signs and verifies HS256 access/refresh tokens against an injectable clock.

    Every token carries a fresh ``jti``, so two tokens issued in the same second
    still differ.
    """

    def __init__(self, algorithm: str | None = None, clock: Clock = _now, new_id: IdSource = _new_id):
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.clock = clock
        self.new_id = new_id

    def issue_access_token(self, *, user_id: int, name: str, email: str, ttl_minutes: int, secret: str) -> str:
        now = self.clock()
        payload: Dict[str, Any] = {
            "type": ACCESS,
            "jti": self.new_id(),
            "id": user_id,
            "name": name,
            "email": email,
            "iat": _ts(now),
            "nbf": _ts(now),
            "exp": _ts(now + timedelta(minutes=ttl_minutes)),
        }
        return self._sign(payload, secret)

    def issue_refresh_token(self, *, user_id: int, ttl_days: int, secret: str) -> str:
        now = self.clock()
        payload: Dict[str, Any] = {
            "type": REFRESH,
            "jti": self.new_id(),
            "id": user_id,
            "iat": _ts(now),
            "nbf": _ts(now),
            "exp": _ts(now + timedelta(days=ttl_days)),
        }
        return self._sign(payload, secret)

    def verify_access_token(self, token: str, secret: str) -> AccessClaims:
        payload = self.verify(token, secret, expected_type=ACCESS)
        name, email = payload.get("name"), payload.get("email")
        if not isinstance(name, str) or not isinstance(email, str):
            raise InvalidTokenError("malformed access token claims")
        return AccessClaims(
            user_id=payload["id"],
            name=name,
            email=email,
            issued_at=_dt(payload.get("iat")),
            not_before=_dt(payload["nbf"]),
            expires_at=_dt(payload["exp"]),
        )

    def verify_refresh_token(self, token: str, secret: str) -> RefreshClaims:
        payload = self.verify(token, secret, expected_type=REFRESH)
        return RefreshClaims(
            user_id=payload["id"],
            issued_at=_dt(payload.get("iat")),
            not_before=_dt(payload["nbf"]),
            expires_at=_dt(payload["exp"]),
        )

    def verify(self, token: str, secret: str, *, expected_type: str) -> Dict[str, Any]:
        """Check signature, token type and the nbf/exp window; return the raw claims."""
        if not token:
            raise InvalidTokenError("token is empty")
        try:
            # Time checks run below against self.clock
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
            )
        except JWTError as exc:
            raise InvalidSignatureError() from exc
        if not isinstance(payload, dict) or payload.get("type") != expected_type:
            raise InvalidTokenError(f"expected {expected_type} token")
        user_id = payload.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise InvalidTokenError("malformed id claim")

        now = self.clock()
        if now < _dt(payload.get("nbf")):
            raise TokenNotYetValidError()
        if now >= _dt(payload.get("exp")):
            raise TokenExpiredError()
        return payload

    def _sign(self, payload: Dict[str, Any], secret: str) -> str:
        try:
            return jwt.encode(payload, secret, algorithm=self.algorithm)
        except JWTError as exc:
            raise TokenSigningError(str(exc)) from exc


token_issuer = TokenIssuer()
