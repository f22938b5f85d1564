import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from todo_api.api.router import api_router
from todo_api.core.config import settings
from todo_api.core.errors import GENERIC_INTERNAL_MESSAGE
from todo_api.core.logging import setup_logging
from todo_api.core.rate_limit import InFlightLimiter, RateLimitMiddleware
from todo_api.db.bootstrap import run_migrations
from todo_api.schemas.validation import describe

setup_logging()
logger = logging.getLogger(__name__)

limiter = InFlightLimiter(settings.NUMBER_OF_LIMIT)

api = FastAPI(
    title="Todo List API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

api.add_middleware(RateLimitMiddleware, limiter=limiter)
api.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # restrict to known domains in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router)

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    if settings.RUN_MIGRATIONS:
        run_migrations()

@api.exception_handler(StarletteHTTPException)
def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=getattr(exc, "headers", None))

@api.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    # malformed JSON, missing body, non-numeric path/query values
    return JSONResponse(status_code=400, content={"message": describe(exc.errors())})

@api.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": GENERIC_INTERNAL_MESSAGE})
