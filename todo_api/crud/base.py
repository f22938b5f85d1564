from typing import TypeVar, Generic, Type, Any, Dict
from sqlalchemy import insert, update, delete, Select
from sqlalchemy.orm import Session
from todo_api.core.errors import NoRowsError
from todo_api.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

class CRUDBase(Generic[ModelType]):
    """Parameterized statements on the caller's session. Never commits: the caller owns the transaction."""

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self.table = model.__table__

    def _one(self, db: Session, stmt: Select) -> ModelType:
        obj = db.execute(stmt).scalars().first()
        if obj is None:
            raise NoRowsError()
        return obj

    def _insert_returning_id(self, db: Session, values: Dict[str, Any]) -> int:
        row = db.execute(insert(self.table).values(**values).returning(self.table.c.id)).first()
        if row is None:
            raise NoRowsError()
        return row[0]

    def _update_by_id(self, db: Session, id: int, values: Dict[str, Any]) -> int:
        result = db.execute(update(self.table).where(self.table.c.id == id).values(**values))
        return result.rowcount

    def _delete_by_id(self, db: Session, id: int) -> int:
        result = db.execute(delete(self.table).where(self.table.c.id == id))
        return result.rowcount
