# todo_api/db/transaction.py
"""Commit-or-rollback discipline around one logical write.

``finish`` never raises: a failed commit or rollback comes back as a value so
the caller can decide what the client sees. ``run`` applies the rule every
service follows: whatever the work computed, a close-time failure replaces it
with a generic internal error.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from todo_api.core.errors import DatabaseConnectionError, InternalError, ServiceError
from todo_api.db.session import SessionLocal
from todo_api.services.result import ServiceResult

logger = logging.getLogger(__name__)

Work = Callable[[Session], ServiceResult]


class TransactionCoordinator:
    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def begin(self) -> Session:
        session = self.session_factory()
        try:
            session.begin()
            # check out a connection now so pool failures surface here
            session.connection()
        except SQLAlchemyError as exc:
            session.close()
            raise DatabaseConnectionError(f"cannot begin transaction: {exc.__class__.__name__}") from exc
        return session

    def finish(self, session: Session, error: Optional[BaseException]) -> Optional[Exception]:
        """Commit when ``error`` is None, otherwise roll back; return the close failure, if any."""
        try:
            if error is None:
                session.commit()
            else:
                session.rollback()
        except SQLAlchemyError as exc:
            return exc
        finally:
            session.close()
        return None

    def run(self, work: Work) -> ServiceResult:
        try:
            session = self.begin()
        except DatabaseConnectionError as exc:
            logger.error("%s", exc)
            return ServiceResult.from_error(exc)

        error: Optional[ServiceError] = None
        try:
            result = work(session)
        except ServiceError as exc:
            error = exc
            result = ServiceResult.from_error(exc)
        except SQLAlchemyError as exc:
            logger.exception("unclassified persistence failure")
            error = InternalError()
            result = ServiceResult.from_error(error)
        except Exception:
            # still roll back and release the connection
            logger.exception("unexpected failure inside transaction")
            error = InternalError()
            result = ServiceResult.from_error(error)

        if error is not None and error.status_code >= 500:
            logger.error("rolling back after internal error: %s", error.message)

        close_error = self.finish(session, error)
        if close_error is not None:
            action = "commit" if error is None else "rollback"
            logger.error("transaction %s failed: %s", action, close_error)
            return ServiceResult.internal_error()
        return result

    @contextmanager
    def reader(self) -> Iterator[Session]:
        """Pooled session for read-only work; no explicit transaction."""
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()


transaction_coordinator = TransactionCoordinator()
