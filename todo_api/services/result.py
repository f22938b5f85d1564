# todo_api/services/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from todo_api.core.errors import GENERIC_INTERNAL_MESSAGE, ServiceError


@dataclass
class ServiceResult:
    """What a service call resolved to: HTTP status, JSON body and any issued tokens."""

    status_code: int
    body: Optional[Any] = None
    access_token: str = ""
    refresh_token: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @classmethod
    def from_error(cls, error: ServiceError) -> "ServiceResult":
        # tokens stay empty on every failure
        return cls(status_code=error.status_code, body=error.to_body())

    @classmethod
    def internal_error(cls) -> "ServiceResult":
        return cls(status_code=500, body={"message": GENERIC_INTERNAL_MESSAGE})
