import logging
import time
import uuid
from collections import defaultdict
from typing import Dict, List

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .request_context import set_request_id

logger = logging.getLogger("parikshan.middleware")

_RATE_WINDOW_SEC = 60
# bucket -> requests allowed per IP per window
RATE_LIMITS: Dict[str, int] = {
    "upload": 10,
    "submission": 20,
    "answer": 120,
}
_SUBMISSION_PATHS = frozenset(
    {"/api/submit-assessment", "/api/reset-candidate-assessment", "/api/n8n/submit-test"}
)

# "<bucket>:<ip>" -> timestamps inside the current window
_rate_limit_store: Dict[str, List[float]] = defaultdict(list)
# full sweep of idle keys once the store grows past this many entries
_SWEEP_THRESHOLD = 1024


def _get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _bucket_for(path: str) -> str:
    if path.endswith("/csv-upload"):
        return "upload"
    if path in _SUBMISSION_PATHS:
        return "submission"
    if path == "/api/n8n/save-answer":
        return "answer"
    return ""


def _evict_idle_keys(now: float) -> None:
    window_start = now - _RATE_WINDOW_SEC
    for key in [k for k, hits in _rate_limit_store.items() if not hits or hits[-1] <= window_start]:
        del _rate_limit_store[key]


def _rate_limit_key(ip: str, path: str) -> str:
    bucket = _bucket_for(path)
    return f"{bucket}:{ip}" if bucket else ""


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window limit per client IP on uploads, submissions and answer saves."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        key = _rate_limit_key(_get_client_ip(request), path)
        if not key:
            return await call_next(request)

        now = time.time()
        if len(_rate_limit_store) > _SWEEP_THRESHOLD:
            _evict_idle_keys(now)
        hits = [t for t in _rate_limit_store[key] if t > now - _RATE_WINDOW_SEC]
        limit = RATE_LIMITS[key.split(":", 1)[0]]
        if len(hits) >= limit:
            _rate_limit_store[key] = hits
            retry_after = max(1, int(hits[0] + _RATE_WINDOW_SEC - now) + 1)
            logger.warning("Rate limit exceeded key=%s path=%s limit=%d", key, path, limit)
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests. Please try again later."},
                headers={"Retry-After": str(retry_after)},
            )
        hits.append(now)
        _rate_limit_store[key] = hits
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag the request with an id and log method, path, status and duration."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        set_request_id(request_id)

        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if request.url.path != "/health":
            logger.info(
                "%s %s -> %d in %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                extra={"request_id": request_id},
            )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Hardening headers on every response; HSTS only when served in production."""

    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response
