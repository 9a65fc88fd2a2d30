"""
Lexicon Backend: Middleware Tests
=================================

What:  Tests for language negotiation, request IDs, rate limiting and the
       access log.
How:   The full app (via `test_client`) for language and request ID; a bare
       FastAPI app with a tight RateLimitMiddleware for the limiter.
"""

import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from lexicon.middleware import rate_limit
from lexicon.middleware.logging import level_for
from lexicon.middleware.rate_limit import RateLimitMiddleware


LANGUAGES = "/api/translations/languages"


class TestLanguageNegotiation:

    @pytest.mark.asyncio
    async def test_default_language(self, test_client):
        response = await test_client.get(LANGUAGES)
        assert response.headers["Content-Language"] == "lo"

    @pytest.mark.asyncio
    async def test_accept_language_primary_subtag(self, test_client):
        response = await test_client.get(LANGUAGES, headers={"Accept-Language": "en-US,en;q=0.9"})
        assert response.headers["Content-Language"] == "en"

    @pytest.mark.asyncio
    async def test_query_param_beats_header(self, test_client):
        response = await test_client.get(
            LANGUAGES, params={"lang": "lo"}, headers={"Accept-Language": "en"}
        )
        assert response.headers["Content-Language"] == "lo"

    @pytest.mark.asyncio
    async def test_lng_param(self, test_client):
        response = await test_client.get(LANGUAGES, params={"lng": "en"})
        assert response.headers["Content-Language"] == "en"

    @pytest.mark.asyncio
    async def test_cookie(self, test_client):
        response = await test_client.get(LANGUAGES, headers={"Cookie": "i18next=en"})
        assert response.headers["Content-Language"] == "en"
        assert response.json()["message"] == "Success"

    @pytest.mark.asyncio
    async def test_unsupported_candidate_skipped(self, test_client):
        response = await test_client.get(
            LANGUAGES, params={"lang": "fr"}, headers={"Accept-Language": "en-GB"}
        )
        assert response.headers["Content-Language"] == "en"

    @pytest.mark.asyncio
    async def test_only_first_accept_language_entry_counts(self, test_client):
        response = await test_client.get(LANGUAGES, headers={"Accept-Language": "fr-FR,en;q=0.8"})
        assert response.headers["Content-Language"] == "lo"


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_id(self, test_client):
        response = await test_client.get(LANGUAGES)
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_id_echoed(self, test_client):
        response = await test_client.get(LANGUAGES, headers={"X-Request-ID": "trace-abc"})
        assert response.headers["X-Request-ID"] == "trace-abc"

    @pytest.mark.asyncio
    async def test_oversized_client_id_replaced(self, test_client):
        response = await test_client.get(LANGUAGES, headers={"X-Request-ID": "x" * 100})
        assert response.headers["X-Request-ID"] != "x" * 100

    @pytest.mark.asyncio
    async def test_error_envelope_carries_id(self, test_client):
        response = await test_client.get(
            "/api/translations/missing", headers={"X-Request-ID": "trace-401"}
        )
        assert response.status_code == 401
        assert response.json()["request_id"] == "trace-401"


def make_limited_app(max_requests=2, window=60):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window=window)

    @app.get("/api/ping")
    async def ping():
        return {"ok": True}

    @app.get("/api/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/docs-like")
    async def outside():
        return {"ok": True}

    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_after_limit(self):
        transport = ASGITransport(app=make_limited_app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.get("/api/ping")
            second = await client.get("/api/ping")
            third = await client.get("/api/ping")

        assert first.headers["RateLimit-Remaining"] == "1"
        assert second.headers["RateLimit-Remaining"] == "0"
        assert third.status_code == 429
        assert third.json()["success"] is False
        assert third.json()["message"] == "Too many requests, please try again later."
        assert 1 <= int(third.headers["Retry-After"]) <= 61

    @pytest.mark.asyncio
    async def test_health_and_non_api_paths_not_limited(self):
        transport = ASGITransport(app=make_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/api/ping")
            health = [await client.get("/api/health") for _ in range(3)]
            outside = [await client.get("/docs-like") for _ in range(3)]

        assert all(r.status_code == 200 for r in health + outside)
        assert "RateLimit-Limit" not in health[0].headers

    @pytest.mark.asyncio
    async def test_window_expiry_allows_again(self, monkeypatch):
        clock = [1000.0]
        monkeypatch.setattr(rate_limit, "time", SimpleNamespace(time=lambda: clock[0]))

        transport = ASGITransport(app=make_limited_app(max_requests=1, window=10))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/api/ping")).status_code == 200
            assert (await client.get("/api/ping")).status_code == 429
            clock[0] += 11
            assert (await client.get("/api/ping")).status_code == 200

    @pytest.mark.asyncio
    async def test_rejection_carries_request_id(self, catalog, monkeypatch):
        """The limiter sits inside RequestIDMiddleware, so 429s are traceable."""
        from lexicon.config import settings
        from lexicon.main import create_app

        monkeypatch.setattr(settings, "rate_limit_requests", 1)
        transport = ASGITransport(app=create_app(catalog=catalog))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get(LANGUAGES)
            limited = await client.get(LANGUAGES, headers={"X-Request-ID": "trace-429"})

        assert limited.status_code == 429
        assert limited.headers["X-Request-ID"] == "trace-429"
        assert limited.headers["RateLimit-Remaining"] == "0"
        assert limited.json() == {
            "success": False,
            "message": "Too many requests, please try again later.",
            "request_id": "trace-429",
        }

    def test_no_exception_handler_for_rate_limit(self, catalog):
        from lexicon.exceptions import RateLimitExceededError
        from lexicon.main import create_app

        assert RateLimitExceededError not in create_app(catalog=catalog).exception_handlers


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_line_carries_negotiated_language(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="lexicon.access")

        await test_client.get(LANGUAGES, params={"lang": "en"}, headers={"X-Request-ID": "trace-log"})

        [record] = [r for r in caplog.records if r.name == "lexicon.access"]
        assert record.levelno == logging.INFO
        assert "GET /api/translations/languages 200" in record.getMessage()
        assert "lang=en" in record.getMessage()
        assert record.language == "en"
        assert record.request_id == "trace-log"

    @pytest.mark.asyncio
    async def test_gate_rejection_logged_as_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="lexicon.access")

        await test_client.get("/api/translations/missing")

        [record] = [r for r in caplog.records if r.name == "lexicon.access"]
        assert record.levelno == logging.WARNING
        assert record.status == 401

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="lexicon.access")

        await test_client.get("/api/health")

        assert not [r for r in caplog.records if r.name == "lexicon.access"]

    def test_level_for_status(self):
        assert level_for(200) == logging.INFO
        assert level_for(404) == logging.WARNING
        assert level_for(503) == logging.ERROR
