# todo_api/api/auth.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Cookie, Depends, status
from fastapi.responses import JSONResponse

from todo_api.api.deps import ACCESS_COOKIE, REFRESH_COOKIE, get_user_service
from todo_api.api.responses import render, set_token_cookie
from todo_api.schemas.user import MessageResponse
from todo_api.services.user_service import UserService

router = APIRouter()

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def register(payload: Dict[str, Any] = Body(...), service: UserService = Depends(get_user_service)):
    result = service.register(payload)
    response = render(result)
    set_token_cookie(response, ACCESS_COOKIE, result.access_token)
    set_token_cookie(response, REFRESH_COOKIE, result.refresh_token)
    return response

@router.post("/login", response_model=MessageResponse)
def login(payload: Dict[str, Any] = Body(...), service: UserService = Depends(get_user_service)):
    result = service.login(payload)
    response = render(result)
    set_token_cookie(response, ACCESS_COOKIE, result.access_token)
    set_token_cookie(response, REFRESH_COOKIE, result.refresh_token)
    return response

@router.post("/refresh-token", response_model=MessageResponse)
def refresh_token(
    token: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    service: UserService = Depends(get_user_service),
):
    if not token:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "cookie not found"})
    result = service.refresh_access_token(token)
    response = render(result)
    set_token_cookie(response, ACCESS_COOKIE, result.access_token)
    return response
