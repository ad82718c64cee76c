"""Rate limiting middleware.

Rules:
  - Auth endpoints (register/login/refresh): RATE_LIMIT_AUTH_PER_MINUTE req/min/IP
  - Sale creation (POST /sales):             RATE_LIMIT_SALES_PER_MINUTE req/min/IP

Fixed-window counting with Redis INCR + EXPIRE:
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, 60)
    if count > limit:
        -> 429 with Retry-After

Errors raised inside a BaseHTTPMiddleware bypass the app's exception
handlers, so the 429 envelope is rendered here directly.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.bk_common.errors import RateLimitError
from src.bk_common.redis_client import get_redis
from src.bk_common.response import error_response

logger = logging.getLogger("bk.request")

WINDOW_SECONDS = 60

_AUTH_PATHS = frozenset(
    {"/api/v1/auth/register", "/api/v1/auth/login", "/api/v1/auth/refresh"}
)
_SALES_PATH = "/api/v1/sales"


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


def classify(request: Request) -> tuple[str, int] | None:
    """Return (endpoint_group, limit) for limited routes, None otherwise."""
    path = request.url.path.rstrip("/")
    if request.method == "POST" and path in _AUTH_PATHS:
        return "auth", settings.RATE_LIMIT_AUTH_PER_MINUTE
    if request.method == "POST" and path == _SALES_PATH:
        return "sales", settings.RATE_LIMIT_SALES_PER_MINUTE
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        rule = classify(request)
        if rule is None:
            return await call_next(request)

        group, limit = rule
        key = f"ratelimit:{client_ip(request)}:{group}"
        redis = await get_redis()
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, WINDOW_SECONDS)

        if count > limit:
            ttl = await redis.ttl(key)
            retry_after = ttl if ttl and ttl > 0 else WINDOW_SECONDS
            logger.warning("Rate limit hit: key=%s count=%d limit=%d", key, count, limit)
            err = RateLimitError()
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message).model_dump(),
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
