from sqlalchemy import select
from sqlalchemy.orm import Session
from todo_api.crud.base import CRUDBase
from todo_api.models.user import User

class CRUDUser(CRUDBase[User]):
    def insert(self, db: Session, *, name: str, email: str, password_hash: str) -> int:
        return self._insert_returning_id(db, {"name": name, "email": email, "password": password_hash})

    def update_refresh_token(self, db: Session, user_id: int, refresh_token: str) -> int:
        return self._update_by_id(db, user_id, {"refresh_token": refresh_token})

    def find_by_email(self, db: Session, email: str) -> User:
        return self._one(db, select(User).where(User.email == email))

    def find_by_refresh_token(self, db: Session, refresh_token: str) -> User:
        return self._one(db, select(User).where(User.refresh_token == refresh_token))

user_crud = CRUDUser(User)
