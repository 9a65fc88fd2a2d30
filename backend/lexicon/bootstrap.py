"""
Lexicon Backend: Bootstrap Probe Servers
========================================

What:  Two minimal liveness servers used while provisioning a host, before
       the full API is deployed.
How:   Each probe is its own FastAPI app with one static route and a JSON
       404 fallback; `run_probe` serves one of them with uvicorn.
Who:   `lexicon probe root` / `lexicon probe api`, container smoke tests.

Probes:
    root   GET /          {"message": "Server is running!"}                    port 3000
    api    GET /api/test  {"success": true, "message": "Test route working"}   port 5000

    Anything else → 404 {"success": false, "message": "API endpoint not found"}

The listening port comes from the PORT environment variable when set.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import Field
from pydantic_settings import BaseSettings
from starlette.exceptions import HTTPException as StarletteHTTPException

from lexicon.config import settings

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = {"success": False, "message": "API endpoint not found"}


class ProbeSettings(BaseSettings):
    """Reads PORT; the bind address is the main server's BACKEND_HOST."""

    port: Optional[int] = Field(default=None, ge=1, le=65535)

    model_config = {"case_sensitive": False}


@dataclass(frozen=True)
class Probe:
    name: str
    path: str
    payload: Dict[str, Any]
    default_port: int


PROBES: Dict[str, Probe] = {
    "root": Probe(
        name="root",
        path="/",
        payload={"message": "Server is running!"},
        default_port=3000,
    ),
    "api": Probe(
        name="api",
        path="/api/test",
        payload={"success": True, "message": "Test route working"},
        default_port=5000,
    ),
}


def create_probe_app(probe: Probe) -> FastAPI:
    """Build a probe app: one GET route returning `probe.payload`, JSON 404 otherwise."""
    app = FastAPI(
        title=f"Lexicon {probe.name} probe",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get(probe.path)
    async def probe_route() -> Dict[str, Any]:
        return probe.payload

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content=NOT_FOUND_BODY)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
        )

    return app


root_probe = create_probe_app(PROBES["root"])
api_probe = create_probe_app(PROBES["api"])


def resolve_port(probe: Probe, config: Optional[ProbeSettings] = None) -> int:
    config = config or ProbeSettings()
    return config.port or probe.default_port


def run_probe(name: str, config: Optional[ProbeSettings] = None) -> None:
    """
    Serve one probe until interrupted.

    Raises:
        KeyError: unknown probe name
    """
    probe = PROBES[name]
    config = config or ProbeSettings()
    port = resolve_port(probe, config)
    logger.info("Starting %s probe on port %d", probe.name, port)
    uvicorn.run(create_probe_app(probe), host=settings.backend_host, port=port)
