# todo_api/services/todo_service.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from todo_api.core.errors import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NoRowsError,
    NotFoundError,
    RowCountMismatchError,
    ServiceError,
    ValidationError,
)
from todo_api.crud.todo import CRUDTodo
from todo_api.db.transaction import TransactionCoordinator
from todo_api.models.todo import Todo
from todo_api.schemas.todo import TodoOut, TodoPage, TodoRequest
from todo_api.schemas.validation import parse
from todo_api.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _require_owner(owner_id: Optional[int]) -> int:
    # authentication runs before any of these calls, so a missing id is our fault
    if owner_id is None:
        raise InternalError("cannot find user id")
    return owner_id


class TodoService:
    """Owner-scoped todo operations. Every write runs in its own transaction."""

    def __init__(self, *, transactions: TransactionCoordinator, todos: CRUDTodo):
        self.transactions = transactions
        self.todos = todos

    def create(self, owner_id: Optional[int], payload: Any) -> ServiceResult:
        try:
            request = parse(TodoRequest, payload)
            owner = _require_owner(owner_id)
        except ServiceError as exc:
            return ServiceResult.from_error(exc)
        return self.transactions.run(lambda db: self._create(db, owner, request))

    def _create(self, db: Session, owner_id: int, request: TodoRequest) -> ServiceResult:
        try:
            todo_id = self.todos.insert(db, owner_id=owner_id, title=request.title, description=request.description)
        except NoRowsError as exc:
            raise BadRequestError(str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.error("cannot insert todo for user %s: %s", owner_id, exc.__class__.__name__)
            raise InternalError() from exc
        item = TodoOut(id=todo_id, title=request.title, description=request.description)
        return ServiceResult(status_code=status.HTTP_201_CREATED, body=item.model_dump())

    def update(self, owner_id: Optional[int], todo_id: int, payload: Any) -> ServiceResult:
        try:
            request = parse(TodoRequest, payload)
            owner = _require_owner(owner_id)
        except ServiceError as exc:
            return ServiceResult.from_error(exc)
        return self.transactions.run(lambda db: self._update(db, owner, todo_id, request))

    def _update(self, db: Session, owner_id: int, todo_id: int, request: TodoRequest) -> ServiceResult:
        todo = self._owned(db, todo_id, owner_id)
        try:
            rows = self.todos.update(db, todo.id, title=request.title, description=request.description)
        except SQLAlchemyError as exc:
            logger.error("cannot update todo %s: %s", todo_id, exc.__class__.__name__)
            raise InternalError() from exc
        if rows != 1:
            raise RowCountMismatchError()
        item = TodoOut(id=todo.id, title=request.title, description=request.description)
        return ServiceResult(status_code=status.HTTP_200_OK, body=item.model_dump())

    def delete(self, owner_id: Optional[int], todo_id: int) -> ServiceResult:
        try:
            owner = _require_owner(owner_id)
        except ServiceError as exc:
            return ServiceResult.from_error(exc)
        return self.transactions.run(lambda db: self._delete(db, owner, todo_id))

    def _delete(self, db: Session, owner_id: int, todo_id: int) -> ServiceResult:
        todo = self._owned(db, todo_id, owner_id)
        try:
            rows = self.todos.delete(db, todo.id)
        except SQLAlchemyError as exc:
            logger.error("cannot delete todo %s: %s", todo_id, exc.__class__.__name__)
            raise InternalError() from exc
        if rows != 1:
            raise RowCountMismatchError()
        return ServiceResult(status_code=status.HTTP_204_NO_CONTENT)

    def list(self, owner_id: Optional[int], page: int, limit: int) -> ServiceResult:
        try:
            owner = _require_owner(owner_id)
            if page < 1 or limit < 1:
                raise ValidationError("page and limit must be positive")
        except ServiceError as exc:
            return ServiceResult.from_error(exc)

        offset = (page - 1) * limit
        try:
            with self.transactions.reader() as db:
                todos = self.todos.list_by_owner(db, owner, offset=offset, limit=limit)
                if not todos:
                    return ServiceResult.from_error(NotFoundError("cannot find todos"))
                data = [TodoOut.model_validate(t) for t in todos]
                total = self.todos.count(db)
        except SQLAlchemyError as exc:
            logger.error("cannot list todos for user %s: %s", owner, exc.__class__.__name__)
            return ServiceResult.internal_error()

        body = TodoPage(data=data, page=page, limit=limit, total=total)
        return ServiceResult(status_code=status.HTTP_200_OK, body=body.model_dump())

    def _owned(self, db: Session, todo_id: int, owner_id: int) -> Todo:
        # one lookup answers both "missing" and "not yours"
        try:
            return self.todos.find_by_id_and_owner(db, todo_id, owner_id)
        except NoRowsError as exc:
            raise ForbiddenError() from exc
        except SQLAlchemyError as exc:
            logger.error("cannot look up todo %s: %s", todo_id, exc.__class__.__name__)
            raise InternalError() from exc
