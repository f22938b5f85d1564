# todo_api/core/config.py
import os
from typing import ClassVar
from pydantic import BaseModel, Field

from dotenv import load_dotenv

load_dotenv()


def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    if not os.getenv("DATABASE_URL"):
        os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'todos.db')}")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings(BaseModel):
    # Not a pydantic field
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    JWT_SECRET: str = Field(default_factory=lambda: os.getenv("JWT_SECRET", "CHANGE_ME_SUPER_SECRET"))
    JWT_ALGORITHM: str = Field(default_factory=lambda: os.getenv("JWT_ALGORITHM", "HS256"))
    # minutes
    JWT_ACCESS_TOKEN_TIME: int = Field(default_factory=lambda: int(os.getenv("JWT_ACCESS_TOKEN_TIME", "15")))
    # days
    JWT_REFRESH_TOKEN_TIME: int = Field(default_factory=lambda: int(os.getenv("JWT_REFRESH_TOKEN_TIME", "1")))
    HASH_TIME_COST: int = Field(default_factory=lambda: int(os.getenv("HASH_TIME_COST", "2")))
    NUMBER_OF_LIMIT: int = Field(default_factory=lambda: int(os.getenv("NUMBER_OF_LIMIT", "100")))
    COOKIE_SECURE: bool = Field(default_factory=lambda: _env_bool("COOKIE_SECURE", "false"))
    RUN_MIGRATIONS: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS", "true"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

settings = Settings()
