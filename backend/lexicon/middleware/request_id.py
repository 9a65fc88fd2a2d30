"""
Lexicon Backend: Request ID Middleware
======================================

What:  Gives every request a correlation ID and returns it in X-Request-ID.
How:   Reuses a client-supplied X-Request-ID or generates a short UUID, stores
       it in a ContextVar and on request.state.
Who:   Applied to every request via Starlette middleware.
When:  Outermost of the application middleware, so even a 429 from the
       rate limiter carries an ID.

The ID appears in every access-log line and in every error envelope
(`request_id`), so a client reporting an error can be matched to the log.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs longer than this are replaced; they end up in log lines.
MAX_CLIENT_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID when present and reasonably short
        2. Otherwise generate the first 8 hex chars of a UUID4
        3. Store in `request_id_var` and `request.state.request_id`
        4. Echo in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if not rid or len(rid) > MAX_CLIENT_ID_LENGTH:
            rid = uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
