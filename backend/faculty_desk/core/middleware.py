from __future__ import annotations

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from faculty_desk.core.config import Settings

DEFAULT_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self._hsts = None
        if settings.security_enable_hsts:
            self._hsts = f"max-age={max(1, settings.security_hsts_max_age_seconds)}; includeSubDomains"

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in DEFAULT_SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if self._hsts:
            response.headers.setdefault("Strict-Transport-Security", self._hsts)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bodies whose declared Content-Length exceeds ``max_bytes``."""

    def __init__(self, app, *, max_bytes: int) -> None:
        super().__init__(app)
        self._max_bytes = max(1, max_bytes)

    def _declared_length(self, request: Request) -> int:
        raw = request.headers.get("content-length")
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError:
            return 0

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = self._declared_length(request)
        if declared > self._max_bytes:
            return JSONResponse(
                status_code=413,
                content={
                    "kind": "validation_error",
                    "message": f"Request body too large ({declared} bytes, limit {self._max_bytes}).",
                    "details": {},
                },
            )
        return await call_next(request)
