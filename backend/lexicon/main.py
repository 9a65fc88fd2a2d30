"""
Lexicon Backend: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn lexicon.main:app`) and the `lexicon serve` command.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────┐ ┌────────────┐ ┌─────────┐ ┌──────────────┐  │
    │  │ Req ID │→│ Rate Limit │→│ Logging │→│ Language     │  │
    │  └────────┘ └────────────┘ └─────────┘ └──────────────┘  │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────────────┐ ┌───────────────────────────┐  │
    │  │ /api/translations/*  │ │ /api/admin/translations/* │  │
    │  └──────────────────────┘ └───────────────────────────┘  │
    │  ┌──────────────────────┐                                │
    │  │ GET /api/health      │                                │
    │  └──────────────────────┘                                │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ 400 │ 401 │ 403 │ 404 │ 429 │ 500                  │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Log catalog summary
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from lexicon import __version__
from lexicon.config import settings
from lexicon.exceptions import LexiconError, TranslationStorageError
from lexicon.middleware.language import LanguageMiddleware
from lexicon.middleware.logging import RequestLoggingMiddleware
from lexicon.middleware.rate_limit import RateLimitMiddleware
from lexicon.middleware.request_id import RequestIDMiddleware, request_id_var
from lexicon.responses import (
    ENDPOINT_NOT_FOUND,
    GENERIC_SERVER_ERROR,
    error_envelope,
    validation_error_items,
)
from lexicon.routes import admin_translations, health, translations
from lexicon.services.catalog import TranslationCatalog

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] lexicon.access: GET /api/... → 200
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup checks and log banner; nothing to release on shutdown."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Lexicon Backend %s starting up (%s)...", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: public metadata routes and health still work
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    catalog: TranslationCatalog = app.state.catalog
    logger.info(
        "Languages: %s (default %s, fallback %s)",
        ", ".join(catalog.languages),
        catalog.default_language,
        catalog.fallback_language,
    )
    logger.info("Namespaces: %s", ", ".join(catalog.namespaces))
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Lexicon Backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError, RequestValidationError  → 400
        AuthenticationError                      → 401
        AuthorizationError                       → 403
        NotFoundError, unmatched route           → 404
        TranslationStorageError                  → 500 (generic message)
        Exception (fallback)                     → 500 (generic message)

    429 never reaches these handlers: RateLimitMiddleware answers it with the
    same envelope before routing.

    Security: `context` and stack traces are logged server-side only.
    """

    @app.exception_handler(TranslationStorageError)
    async def handle_storage_error(request: Request, exc: TranslationStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Translation storage error: %s | Context: %s", rid, exc.message, exc.context)
        return error_envelope(500, GENERIC_SERVER_ERROR)

    @app.exception_handler(LexiconError)
    async def handle_lexicon_error(request: Request, exc: LexiconError):
        """400/401/403/404 and any other LexiconError subclass."""
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return error_envelope(exc.status_code, GENERIC_SERVER_ERROR)

        logger.warning(
            "[%s] %s on %s %s: %s",
            rid,
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.errors or exc.message,
        )
        return error_envelope(exc.status_code, exc.message, errors=exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed body or parameters; FastAPI's 422 becomes a 400."""
        errors = validation_error_items(exc.errors())
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return error_envelope(400, "Validation failed", errors=errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_envelope(404, ENDPOINT_NOT_FOUND)
        return error_envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_envelope(500, GENERIC_SERVER_ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(catalog: Optional[TranslationCatalog] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        catalog: Preloaded catalog (tests); defaults to one built from settings.
                 Loaded here rather than in lifespan so the app is usable
                 under transports that do not run lifespan events.
    """
    app = FastAPI(
        title="Lexicon API",
        description=(
            "Translation catalog service for the stadium booking platform: "
            "language metadata, resource bundles and admin editing."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.catalog = catalog if catalog is not None else TranslationCatalog.from_settings()

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → RateLimit → Logging → Language → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "Content-Language",
            "Retry-After",
            "RateLimit-Limit",
            "RateLimit-Remaining",
        ],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        LanguageMiddleware,
        supported=app.state.catalog.languages,
        default=app.state.catalog.default_language,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(translations.router, prefix="/api/translations")
    app.include_router(admin_translations.router, prefix="/api/admin/translations")
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
