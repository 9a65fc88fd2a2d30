"""
Lexicon Backend: Error Responses
================================

What:  The `{"success": false, ...}` JSON body every failure is reported with.
Who:   The exception handlers in `lexicon.main`, the rate limiter (which answers
       from middleware, outside the exception handlers) and the admin body
       parsers.

Envelope:
    {
        "success": false,
        "message": "Validation failed",
        "errors": [{"msg": "translations: Field required"}],   # optional
        "request_id": "6f1c..."
    }
"""

from typing import Any, Dict, Iterable, List, Optional

from fastapi.responses import JSONResponse

from lexicon.middleware.request_id import request_id_var

ENDPOINT_NOT_FOUND = "API endpoint not found"
GENERIC_SERVER_ERROR = "An unexpected error occurred. Please try again or contact support."


def error_envelope(
    status_code: int,
    message: str,
    errors: Optional[list] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the error response; `request_id` comes from RequestIDMiddleware."""
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    content["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def validation_error_items(raw_errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into `{"msg": "<location>: <message>"}` items.

    The leading "body" location segment FastAPI adds is dropped.
    """
    items = []
    for err in raw_errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = err.get("msg", "Invalid value")
        items.append({"msg": f"{location}: {msg}" if location else msg})
    return items
