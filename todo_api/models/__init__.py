# todo_api/models/__init__.py
from todo_api.db.base import Base  # noqa: F401

__all__: list[str] = ["Base"]
