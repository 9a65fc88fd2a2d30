"""
Lexicon Backend: Rate Limiting Middleware
=========================================

What:  Per-IP sliding window rate limiter for the /api surface.
How:   Keeps each IP's request timestamps in memory, drops the ones older
       than the window, and rejects with 429 once the window is full.
When:  Right after RequestIDMiddleware, so a rejected request still gets a
       request ID but never reaches logging, language negotiation or routing.

Algorithm: Sliding Window Log
    1. Each IP maps to a list of request timestamps
    2. On each request, discard timestamps older than `window` seconds
    3. If the remaining count >= limit → 429 with Retry-After
    4. Otherwise record the timestamp and continue

Every /api response also carries the draft-standard RateLimit-Limit and
RateLimit-Remaining headers.

State is per process; several uvicorn workers each enforce their own limit.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from lexicon.config import settings
from lexicon.exceptions import RateLimitExceededError
from lexicon.responses import error_envelope

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration:
        max_requests / window: explicit limits (tests); default to
        settings.rate_limit_requests / settings.rate_limit_window.

    Scope:
        Only paths under `LIMITED_PREFIX` are counted; health checks and the
        OpenAPI docs are never limited.
    """

    LIMITED_PREFIX = "/api"
    EXCLUDED_PATHS = {"/api/health"}
    CLEANUP_EVERY = 1000

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window = window or settings.rate_limit_window
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._seen = 0

    def _is_limited(self, path: str) -> bool:
        if path in self.EXCLUDED_PATHS:
            return False
        return path == self.LIMITED_PREFIX or path.startswith(self.LIMITED_PREFIX + "/")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self._is_limited(request.url.path):
            return await call_next(request)

        # Behind a proxy this is the proxy's address; run uvicorn with
        # --proxy-headers so request.client reflects X-Forwarded-For.
        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        timestamps.append(now)
        remaining = self.max_requests - len(timestamps)

        self._seen += 1
        if self._seen % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self.max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        return response

    def _reject(self, exc: RateLimitExceededError) -> JSONResponse:
        """Exception handlers sit inside the middleware stack, so answer here."""
        return error_envelope(
            exc.status_code,
            exc.message,
            headers={
                "Retry-After": str(exc.retry_after),
                "RateLimit-Limit": str(self.max_requests),
                "RateLimit-Remaining": "0",
            },
        )

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs whose newest request has left the window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
