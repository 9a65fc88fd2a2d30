"""
Lexicon Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── sample_locales: en/lo bundles for two namespaces in a temp directory
    ├── catalog: TranslationCatalog loaded from sample_locales
    ├── make_token: factory for signed bearer tokens
    ├── admin_headers / user_headers: Authorization headers per role
    ├── test_client: HTTPX AsyncClient over an app bound to `catalog`
    └── full_disk: aiofiles writes fail with ENOSPC
"""

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

# Override settings for testing BEFORE any lexicon imports
os.environ["JWT_SECRET"] = "lexicon-test-secret-0123456789abcdef"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["ENVIRONMENT"] = "test"

import aiofiles
import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lexicon.config import settings
from lexicon.services.catalog import TranslationCatalog


SAMPLE_BUNDLES = {
    ("en", "common"): {
        "welcome": "Welcome",
        "success": "Success",
        "error": "Error",
        "greeting": "Hello, {{name}}!",
        "auth": {"adminOnly": "Admins only"},
        "farewell": "Goodbye",
    },
    ("lo", "common"): {
        "welcome": "ຍິນດີຕ້ອນຮັບ",
        "success": "ສຳເລັດ",
        "error": "ຂໍ້ຜິດພາດ",
        "auth": {"adminOnly": "ສະເພາະ ຜູ້ດູແລລະບົບ"},
    },
    ("en", "booking"): {
        "bookingConfirmation": "Booking Confirmation",
        "cancel": "Cancel",
    },
    ("lo", "booking"): {
        "bookingConfirmation": "ການຢືນຢັນການຈອງ",
    },
}


def write_bundles(root, bundles):
    for (language, namespace), data in bundles.items():
        directory = root / language
        directory.mkdir(parents=True, exist_ok=True)
        (directory / f"{namespace}.json").write_text(
            json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8"
        )
    return root


@pytest.fixture
def sample_locales(tmp_path):
    """
    A locales tree with en/lo × common/booking.

    lo is missing common.greeting, common.farewell and booking.cancel.
    """
    return write_bundles(tmp_path / "locales", SAMPLE_BUNDLES)


@pytest.fixture
def catalog(sample_locales):
    catalog = TranslationCatalog(
        locales_dir=sample_locales,
        languages=["en", "lo"],
        namespaces=["common", "booking"],
        default_language="lo",
        fallback_language="en",
    )
    catalog.load()
    return catalog


@pytest.fixture
def make_token():
    """
    Factory for bearer tokens signed with the test secret.

    Usage:
        token = make_token(role="customer")
        expired = make_token(expires_in=-60)
    """

    def _make(role="superadmin", expires_in=3600, secret=None, **claims):
        payload = {
            "userId": "user-1",
            "role": role,
            "email": "admin@example.com",
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        payload.update(claims)
        return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")

    return _make


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def user_headers(make_token):
    return {"Authorization": f"Bearer {make_token(role='customer')}"}


@pytest_asyncio.fixture
async def test_client(catalog):
    """
    Async HTTP client talking to a fresh app bound to the sample catalog.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from lexicon.main import create_app

    app = create_app(catalog=catalog)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class FullDiskFile:
    """Async file stand-in whose writes fail the way a full disk does."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def write(self, data):
        raise OSError(28, "No space left on device")

    async def flush(self):
        pass


@pytest.fixture
def full_disk():
    """
    Make every aiofiles write fail with ENOSPC; reads still hit the disk.

    The target file is still created (and truncated) on open, as a real
    "w" open would do.
    """
    real_open = aiofiles.open

    def fake_open(file, mode="r", *args, **kwargs):
        if "w" in mode:
            Path(file).write_text("", encoding="utf-8")
            return FullDiskFile()
        return real_open(file, mode, *args, **kwargs)

    with patch("aiofiles.open", side_effect=fake_open):
        yield
