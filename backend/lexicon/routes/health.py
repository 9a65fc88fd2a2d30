"""
Lexicon Backend: Health Check Route
===================================

What:  Health check endpoint for Docker and load balancer probes.
How:   Reports whether the translation catalog holds any content, plus
       version, environment and uptime.
Who:   Docker health checks, load balancers, uptime monitors.

Status levels:
    healthy:   at least one non-empty bundle is loaded
    degraded:  the catalog is empty (wrong LOCALES_DIR, missing volume);
               the API still answers but every translation falls back to its key

The path is excluded from rate limiting and access logging: probes hit it
every few seconds.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from lexicon import __version__
from lexicon.config import settings
from lexicon.schemas.translation import HealthResponse
from lexicon.services.catalog import TranslationCatalog, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    catalog: TranslationCatalog = Depends(get_catalog),
) -> HealthResponse:
    languages_loaded = sum(
        1
        for language in catalog.languages
        if any(catalog.keys(language, namespace) for namespace in catalog.namespaces)
    )

    overall = "healthy" if catalog.loaded_bundle_count > 0 else "degraded"
    if overall != "healthy":
        logger.warning("Health check: no translation bundles loaded from %s", catalog.locales_dir)

    return HealthResponse(
        status=overall,
        version=__version__,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.time() - _start_time, 2),
        languages_loaded=languages_loaded,
    )
