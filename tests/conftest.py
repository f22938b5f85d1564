import os

# must be set before todo_api.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_ACCESS_TOKEN_TIME", "15")
os.environ.setdefault("JWT_REFRESH_TOKEN_TIME", "1")
os.environ.setdefault("HASH_TIME_COST", "1")
os.environ.setdefault("COOKIE_SECURE", "false")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from todo_api.api.deps import get_password_hasher, get_token_issuer, get_transaction_coordinator
from todo_api.core.config import settings
from todo_api.core.security import PasswordHasher
from todo_api.core.tokens import TokenIssuer
from todo_api.crud.todo import todo_crud
from todo_api.crud.user import user_crud
from todo_api.db.base import Base
from todo_api.db.transaction import TransactionCoordinator
from todo_api.main import api
from todo_api.services.todo_service import TodoService
from todo_api.services.user_service import UserService

SECRET = settings.JWT_SECRET


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def coordinator(session_factory):
    return TransactionCoordinator(session_factory)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issuer(clock):
    return TokenIssuer(algorithm="HS256", clock=clock)


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(time_cost=1)


@pytest.fixture
def user_service(coordinator, hasher, issuer):
    return UserService(
        transactions=coordinator,
        users=user_crud,
        hasher=hasher,
        tokens=issuer,
        secret=SECRET,
        access_ttl_minutes=15,
        refresh_ttl_days=1,
    )


@pytest.fixture
def todo_service(coordinator):
    return TodoService(transactions=coordinator, todos=todo_crud)


@pytest.fixture
def register(user_service):
    """Register a user and return (user_id, result)."""
    def _register(name="John Doe", email="john@doe.com", password="password"):
        result = user_service.register({"name": name, "email": email, "password": password})
        assert result.status_code == 201, result.body
        claims = user_service.tokens.verify_access_token(result.access_token, SECRET)
        return claims.user_id, result
    return _register


@pytest.fixture
def client(coordinator, hasher, issuer):
    api.dependency_overrides[get_transaction_coordinator] = lambda: coordinator
    api.dependency_overrides[get_password_hasher] = lambda: hasher
    api.dependency_overrides[get_token_issuer] = lambda: issuer
    try:
        yield TestClient(api)
    finally:
        api.dependency_overrides.clear()
