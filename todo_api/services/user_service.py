# todo_api/services/user_service.py
"""Registration, login and access-token refresh.

Nothing is kept between calls: the only state is the user row, whose
``refresh_token`` column always holds the most recently issued refresh token.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from todo_api.core.errors import (
    BadRequestError,
    HashingError,
    InternalError,
    NoRowsError,
    PasswordMismatchError,
    RowCountMismatchError,
    ServiceError,
)
from todo_api.core.security import PasswordHasher
from todo_api.core.tokens import InvalidTokenError, TokenIssuer
from todo_api.crud.user import CRUDUser
from todo_api.db.transaction import TransactionCoordinator
from todo_api.schemas.user import LoginRequest, RegisterRequest
from todo_api.schemas.validation import parse
from todo_api.services.result import ServiceResult

logger = logging.getLogger(__name__)

WRONG_CREDENTIALS = "wrong email or password"


class UserService:
    def __init__(
        self,
        *,
        transactions: TransactionCoordinator,
        users: CRUDUser,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        secret: str,
        access_ttl_minutes: int,
        refresh_ttl_days: int,
    ):
        self.transactions = transactions
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.secret = secret
        self.access_ttl_minutes = access_ttl_minutes
        self.refresh_ttl_days = refresh_ttl_days

    # ------------------------------------------------------------------
    # register
    # ------------------------------------------------------------------
    def register(self, payload: Any) -> ServiceResult:
        try:
            request = parse(RegisterRequest, payload)
        except ServiceError as exc:
            return ServiceResult.from_error(exc)
        return self.transactions.run(lambda db: self._register(db, request))

    def _register(self, db: Session, request: RegisterRequest) -> ServiceResult:
        password_hash = self.hasher.hash(request.password)
        try:
            user_id = self.users.insert(db, name=request.name, email=request.email, password_hash=password_hash)
        except NoRowsError as exc:
            raise BadRequestError(str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.error("cannot insert user: %s", exc.__class__.__name__)
            raise InternalError() from exc

        access_token, refresh_token = self._issue_and_store(db, user_id, request.name, request.email)
        logger.info("registered user %s", user_id)
        return ServiceResult(
            status_code=status.HTTP_201_CREATED,
            body={"message": "successfully registered"},
            access_token=access_token,
            refresh_token=refresh_token,
        )

    # ------------------------------------------------------------------
    # login
    # ------------------------------------------------------------------
    def login(self, payload: Any) -> ServiceResult:
        try:
            request = parse(LoginRequest, payload)
        except ServiceError as exc:
            return ServiceResult.from_error(exc)
        return self.transactions.run(lambda db: self._login(db, request))

    def _login(self, db: Session, request: LoginRequest) -> ServiceResult:
        try:
            user = self.users.find_by_email(db, request.email)
        except NoRowsError as exc:
            # same answer as a wrong password
            raise BadRequestError(WRONG_CREDENTIALS) from exc
        except SQLAlchemyError as exc:
            logger.error("cannot look up user by email: %s", exc.__class__.__name__)
            raise InternalError() from exc

        try:
            self.hasher.verify(user.password, request.password)
        except (PasswordMismatchError, HashingError) as exc:
            if isinstance(exc, HashingError):
                logger.error("stored hash for user %s is unusable: %s", user.id, exc)
            raise BadRequestError(WRONG_CREDENTIALS) from exc

        access_token, refresh_token = self._issue_and_store(db, user.id, user.name, user.email)
        return ServiceResult(
            status_code=status.HTTP_200_OK,
            body={"message": "successfully login"},
            access_token=access_token,
            refresh_token=refresh_token,
        )

    # ------------------------------------------------------------------
    # refresh
    # ------------------------------------------------------------------
    def refresh_access_token(self, refresh_token: str) -> ServiceResult:
        try:
            claims = self.tokens.verify_refresh_token(refresh_token, self.secret)
        except InvalidTokenError as exc:
            logger.info("rejected refresh token: %s", exc.message)
            return ServiceResult.from_error(exc)

        try:
            with self.transactions.reader() as db:
                user = self.users.find_by_refresh_token(db, refresh_token)
                user_id, name, email = user.id, user.name, user.email
        except NoRowsError:
            return ServiceResult.from_error(BadRequestError("cannot find user by refresh token"))
        except SQLAlchemyError as exc:
            logger.error("cannot look up user by refresh token: %s", exc.__class__.__name__)
            return ServiceResult.internal_error()

        if user_id != claims.user_id:
            return ServiceResult.from_error(BadRequestError("cannot find user by refresh token"))

        try:
            access_token = self._access_token(user_id, name, email)
        except ServiceError as exc:
            logger.error("cannot sign access token for user %s: %s", user_id, exc.message)
            return ServiceResult.from_error(exc)
        return ServiceResult(
            status_code=status.HTTP_200_OK,
            body={"message": "successfully refresh token"},
            access_token=access_token,
        )

    # ------------------------------------------------------------------
    def _access_token(self, user_id: int, name: str, email: str) -> str:
        return self.tokens.issue_access_token(
            user_id=user_id, name=name, email=email, ttl_minutes=self.access_ttl_minutes, secret=self.secret
        )

    def _issue_and_store(self, db: Session, user_id: int, name: str, email: str) -> tuple[str, str]:
        access_token = self._access_token(user_id, name, email)
        refresh_token = self.tokens.issue_refresh_token(
            user_id=user_id, ttl_days=self.refresh_ttl_days, secret=self.secret
        )
        try:
            rows = self.users.update_refresh_token(db, user_id, refresh_token)
        except SQLAlchemyError as exc:
            logger.error("cannot store refresh token for user %s: %s", user_id, exc.__class__.__name__)
            raise InternalError() from exc
        if rows != 1:
            raise RowCountMismatchError()
        return access_token, refresh_token
