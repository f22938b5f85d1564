from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status

from todo_api.core.config import settings
from todo_api.core.security import PasswordHasher, password_hasher
from todo_api.core.tokens import InvalidTokenError, TokenIssuer, token_issuer
from todo_api.crud.todo import todo_crud
from todo_api.crud.user import user_crud
from todo_api.db.transaction import TransactionCoordinator, transaction_coordinator
from todo_api.services.todo_service import TodoService
from todo_api.services.user_service import UserService

ACCESS_COOKIE = "Authorization"
REFRESH_COOKIE = "refreshToken"

# ----------------------------------------------------------------------
# Collaborators (overridable in tests via api.dependency_overrides)
# ----------------------------------------------------------------------
def get_password_hasher() -> PasswordHasher:
    return password_hasher

def get_token_issuer() -> TokenIssuer:
    return token_issuer

def get_transaction_coordinator() -> TransactionCoordinator:
    return transaction_coordinator

def get_user_service(
    transactions: TransactionCoordinator = Depends(get_transaction_coordinator),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> UserService:
    return UserService(
        transactions=transactions,
        users=user_crud,
        hasher=hasher,
        tokens=tokens,
        secret=settings.JWT_SECRET,
        access_ttl_minutes=settings.JWT_ACCESS_TOKEN_TIME,
        refresh_ttl_days=settings.JWT_REFRESH_TOKEN_TIME,
    )

def get_todo_service(
    transactions: TransactionCoordinator = Depends(get_transaction_coordinator),
) -> TodoService:
    return TodoService(transactions=transactions, todos=todo_crud)

# ----------------------------------------------------------------------
# Access token from the Authorization cookie -> user id
# ----------------------------------------------------------------------
def get_current_user_id(
    token: Optional[str] = Cookie(None, alias=ACCESS_COOKIE),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> int:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="token not found")
    try:
        claims = tokens.verify_access_token(token, settings.JWT_SECRET)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return claims.user_id
