# todo_api/core/rate_limit.py
import logging
import threading

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class InFlightLimiter:
    """Counts requests currently being served and refuses new ones past ``ceiling``."""

    def __init__(self, ceiling: int):
        self.ceiling = ceiling
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def try_acquire(self) -> bool:
        with self._lock:
            if self._in_flight >= self.ceiling:
                return False
            self._in_flight += 1
            return True

    def release(self) -> None:
        with self._lock:
            if self._in_flight > 0:
                self._in_flight -= 1


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: InFlightLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if not self.limiter.try_acquire():
            logger.warning("rejecting %s %s: in-flight ceiling %d reached", request.method, request.url.path, self.limiter.ceiling)
            return JSONResponse(status_code=429, content={"message": "too many request"})
        try:
            return await call_next(request)
        finally:
            self.limiter.release()
