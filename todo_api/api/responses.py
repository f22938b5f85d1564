from fastapi import Response, status
from fastapi.responses import JSONResponse

from todo_api.core.config import settings
from todo_api.services.result import ServiceResult


def render(result: ServiceResult) -> Response:
    if result.status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(status_code=result.status_code, content=result.body)


def set_token_cookie(response: Response, name: str, value: str) -> None:
    # failed calls carry no token; leave the client's cookie alone
    if not value:
        return
    response.set_cookie(
        key=name,
        value=value,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        path="/",
    )
