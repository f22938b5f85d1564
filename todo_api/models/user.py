from typing import Optional
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from todo_api.db.base import Base

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    # argon2 hash, never the plaintext
    password: Mapped[str] = mapped_column(String(255))
    # last issued refresh token; lookups match it exactly
    refresh_token: Mapped[Optional[str]] = mapped_column(Text(), nullable=True, index=True)

    todos = relationship("Todo", back_populates="owner", cascade="all, delete-orphan")
