"""
Lexicon Backend: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions, one per error response the API emits.
How:   Each exception carries a user-facing message, optional field-level
       `errors` and a private `context` dict. Global handlers in main.py map
       them to status codes and the `{"success": false, ...}` envelope.
Who:   Raised by gates, services and middleware; caught by global handlers.

Exception Hierarchy:
    LexiconError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── AuthorizationError       → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── TranslationStorageError  → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class LexiconError(Exception):
    """
    Base exception for all Lexicon application errors.

    Attributes:
        message:  User-facing error description (returned in the envelope)
        errors:   Optional list of `{"msg": ...}` items (returned in the envelope)
        context:  Debug info (logged, NOT returned to the client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(LexiconError):
    """
    Raised when client input fails a business rule.

    When:  Unsupported language, unknown namespace, malformed edit payload.
    HTTP:  400 Bad Request

    Example response:
        {
            "success": false,
            "message": "Error",
            "errors": [{"msg": "Unsupported language"}]
        }
    """

    status_code = 400

    def __init__(
        self,
        detail: str = "Validation failed",
        message: str = "Error",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        errors: Optional[List[Dict[str, str]]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, errors=errors or [{"msg": detail}], context=ctx)
        self.detail = detail
        self.field = field


class AuthenticationError(LexiconError):
    """
    Raised by the identity gate.

    When:  No bearer token, bad signature, expired token, inactive user.
    HTTP:  401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Access token required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(LexiconError):
    """
    Raised by the role gate when a verified identity lacks the required role.

    HTTP:  403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Insufficient permissions",
        required_roles: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if required_roles:
            ctx["required_roles"] = required_roles
        super().__init__(message=message, context=ctx)
        self.required_roles = required_roles or []


class NotFoundError(LexiconError):
    """
    Raised when a requested resource does not exist.

    When:  Admin edit against a bundle whose JSON file is absent.
    HTTP:  404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        message: str = "The requested resource was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(LexiconError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:  429 Too Many Requests, with a Retry-After header.
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "Too many requests, please try again later."
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class TranslationStorageError(LexiconError):
    """
    Raised when a resource bundle cannot be read or written.

    When:  Corrupt JSON on disk, permission denied, disk full.
    HTTP:  500 Internal Server Error

    The client only sees a generic message; the path and OS error stay in
    `context` for the server log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Translation storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
