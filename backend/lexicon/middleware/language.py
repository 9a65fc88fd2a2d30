"""
Lexicon Backend: Language Negotiation Middleware
================================================

What:  Picks the response language for each request.
How:   Walks the candidate sources in priority order and keeps the first
       supported language; otherwise falls back to the configured default.
Who:   Applied to every request via Starlette middleware.
When:  After RequestIDMiddleware, before routing.

Candidate order:
    1. ?lang=<code>           query parameter
    2. ?lng=<code>            query parameter (i18next detector name)
    3. i18next=<code>         cookie
    4. Accept-Language        first entry, primary subtag only ("en-US" → "en")

The chosen code is stored in `language_var` (read by the catalog translator),
on `request.state.language`, and echoed in the Content-Language header.
"""

import logging
from contextvars import ContextVar
from typing import Iterable, Iterator, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from lexicon.config import settings

logger = logging.getLogger(__name__)

language_var: ContextVar[str] = ContextVar("language", default="")

LANGUAGE_COOKIE = "i18next"


def primary_subtag(tag: str) -> str:
    """'en-US;q=0.8' → 'en'"""
    return tag.split(";", 1)[0].strip().split("-", 1)[0].lower()


def _candidates(request: Request) -> Iterator[str]:
    for param in ("lang", "lng"):
        value = request.query_params.get(param)
        if value:
            yield value.strip().lower()

    cookie = request.cookies.get(LANGUAGE_COOKIE)
    if cookie:
        yield cookie.strip().lower()

    accept = request.headers.get("accept-language")
    if accept:
        first = accept.split(",", 1)[0]
        if first.strip():
            yield primary_subtag(first)


def negotiate_language(
    request: Request,
    supported: Iterable[str],
    default: str,
) -> str:
    """Return the first supported candidate language, or `default`."""
    supported_set = set(supported)
    for candidate in _candidates(request):
        if candidate in supported_set:
            return candidate
    return default


class LanguageMiddleware(BaseHTTPMiddleware):
    """
    Negotiates the request language and exposes it to handlers.

    `supported` and `default` may be passed explicitly (tests, probe apps);
    otherwise they are read from settings.
    """

    def __init__(
        self,
        app,
        supported: Optional[List[str]] = None,
        default: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.supported = supported or settings.supported_languages_list
        self.default = default or settings.default_language

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        language = negotiate_language(request, self.supported, self.default)
        language_var.set(language)
        request.state.language = language
        logger.debug("Negotiated language '%s' for %s", language, request.url.path)

        response = await call_next(request)

        response.headers["Content-Language"] = language
        return response
