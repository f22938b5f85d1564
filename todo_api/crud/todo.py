from typing import List
from sqlalchemy import select, func
from sqlalchemy.orm import Session
from todo_api.crud.base import CRUDBase
from todo_api.models.todo import Todo

class CRUDTodo(CRUDBase[Todo]):
    def insert(self, db: Session, *, owner_id: int, title: str, description: str) -> int:
        return self._insert_returning_id(db, {"user_id": owner_id, "title": title, "description": description})

    def find_by_id_and_owner(self, db: Session, todo_id: int, owner_id: int) -> Todo:
        return self._one(db, select(Todo).where(Todo.id == todo_id, Todo.user_id == owner_id))

    def update(self, db: Session, todo_id: int, *, title: str, description: str) -> int:
        return self._update_by_id(db, todo_id, {"title": title, "description": description})

    def delete(self, db: Session, todo_id: int) -> int:
        return self._delete_by_id(db, todo_id)

    def list_by_owner(self, db: Session, owner_id: int, *, offset: int, limit: int) -> List[Todo]:
        stmt = (
            select(Todo)
            .where(Todo.user_id == owner_id)
            .order_by(Todo.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all())

    def count(self, db: Session) -> int:
        # every owner's todos, not just the caller's
        return db.execute(select(func.count()).select_from(Todo)).scalar_one()

todo_crud = CRUDTodo(Todo)
