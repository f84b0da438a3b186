"""HTTP middleware: security headers, rate limiting, access log."""

import logging
import time
from typing import Dict, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("taskmanager.access")

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


class SecurityHeadersMiddleware:
    """Adds the configured security headers unless the endpoint set them."""

    def __init__(
        self,
        app: ASGIApp,
        x_content_type_options: str = "nosniff",
        x_frame_options: str = "SAMEORIGIN",
        referrer_policy: str = "no-referrer",
        cross_origin_resource_policy: str = "same-origin",
    ):
        self.app = app
        self.headers = [
            (b"x-content-type-options", x_content_type_options.encode()),
            (b"x-frame-options", x_frame_options.encode()),
            (b"referrer-policy", referrer_policy.encode()),
            (b"cross-origin-resource-policy", cross_origin_resource_policy.encode()),
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                existing = {name.lower() for name, _ in headers}
                for name, value in self.headers:
                    if name not in existing:
                        headers.append((name, value))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_headers)


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows of `window_seconds`."""

    def __init__(self, max_requests: int, window_seconds: float, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> Tuple[bool, int, float]:
        """Record one request; returns (allowed, remaining, seconds until reset)."""
        now = self.clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0
        count += 1
        self._windows[key] = (start, count)

        # Purge des fenêtres expirées pour ne pas grossir indéfiniment
        if len(self._windows) > 10000:
            self._windows = {
                k: v for k, v in self._windows.items() if now - v[0] < self.window_seconds
            }

        reset_in = max(0.0, self.window_seconds - (now - start))
        remaining = max(0, self.max_requests - count)
        return count <= self.max_requests, remaining, reset_in


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        allowed, remaining, reset_in = self.limiter.hit(self.client_key(request))
        limit_headers = {
            "X-RateLimit-Limit": str(self.limiter.max_requests),
            "X-RateLimit-Remaining": str(remaining),
        }

        if not allowed:
            logger.warning("Rate limit exceeded for %s", self.client_key(request))
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"success": False, "error": RATE_LIMIT_MESSAGE},
                headers={**limit_headers, "Retry-After": str(int(reset_in) + 1)}
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status_code: Optional[int] = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                '%s "%s %s" %s %.1fms',
                self.client_host(request),
                request.method,
                request.url.path,
                status_code if status_code is not None else 500,
                duration_ms
            )

    @staticmethod
    def client_host(request: Request) -> str:
        return request.client.host if request.client else "-"
