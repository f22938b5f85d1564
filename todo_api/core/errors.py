# todo_api/core/errors.py
"""Error taxonomy shared by the services and the HTTP layer.

Every ``ServiceError`` knows the HTTP status it resolves to, so a service can
turn any failure into a ``ServiceResult`` without the transport layer having
to classify it again.
"""
from __future__ import annotations

from fastapi import status

GENERIC_INTERNAL_MESSAGE = "internal server error"


class NoRowsError(Exception):
    """A lookup or ``INSERT ... RETURNING`` produced no row."""

    def __init__(self, message: str = "no rows in result set"):
        super().__init__(message)


class PasswordMismatchError(Exception):
    """The password does not match the stored hash."""


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_INTERNAL_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"message": self.message}


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad request"


class ValidationError(BadRequestError):
    default_message = "invalid request"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class InternalError(ServiceError):
    pass


class RowCountMismatchError(InternalError):
    default_message = "rows affected not one"


class DatabaseConnectionError(InternalError):
    pass


class HashingError(InternalError):
    pass


class TokenSigningError(InternalError):
    pass
