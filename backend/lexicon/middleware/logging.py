"""
Lexicon Backend: Request Logging Middleware
===========================================

What:  The `lexicon.access` log: one line per translation API call.
How:   Times the downstream call; the line is written after the response so
       it can carry the language LanguageMiddleware negotiated further in.
When:  Inside RequestIDMiddleware and the rate limiter (a rejected 429 is
       logged by the limiter itself), outside LanguageMiddleware.

Line format:
    GET /api/translations/en/common 200 3.2ms [6f1c...] lang=en from 10.0.0.7

The same fields are attached to the record as `extra` (request_id, method,
path, status, duration_ms, language, client_ip) for structured handlers.

Level follows the response status: 5xx → ERROR, 4xx → WARNING, else INFO.
A 401/403 from the admin gates therefore shows up as a warning.

Not logged: /api/health, request bodies (bundle edits), the Authorization
header and query strings.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from lexicon.middleware.request_id import request_id_var

logger = logging.getLogger("lexicon.access")

# Probed every few seconds by orchestrators; would drown out real traffic.
QUIET_PATHS = {"/api/health"}


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line for every request outside QUIET_PATHS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "language": getattr(request.state, "language", ""),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for(response.status_code),
            "%s %s %d %.1fms [%s] lang=%s from %s",
            fields["method"],
            fields["path"],
            fields["status"],
            duration_ms,
            fields["request_id"],
            fields["language"] or "-",
            fields["client_ip"],
            extra=fields,
        )
        return response
