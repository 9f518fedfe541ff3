# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Builds the service container around an in-memory store and fake FTP
# - Provides a TestClient and signed admin tokens
# =============================================================================

import os
import time
import uuid

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
TEST_WEBHOOK_SECRET = "test-webhook-secret"

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["REALTIME_WEBHOOK_SECRET"] = TEST_WEBHOOK_SECRET
os.environ["REALTIME_BACKEND"] = "local"
os.environ["PUBLIC_IMAGE_BASE_URL"] = "https://cdn.test/upload"
os.environ["FTP_UPLOAD_DIR"] = "/upload"
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import get_settings
from core.services.container import build_services
from core.services.image_relay import FtpUploader
from tests.fakes import FakeAuthClient, FakeFTP, InMemoryStore


def make_token(
    sub: str | None = None,
    email: str = "admin@example.com",
    secret: str = TEST_JWT_SECRET,
    expires_in: int = 3600,
) -> str:
    """Supabase-style HS256 access token."""
    now = int(time.time())
    claims = {
        "sub": sub or str(uuid.uuid4()),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def fake_ftp():
    FakeFTP.reset()
    yield FakeFTP
    FakeFTP.reset()


@pytest.fixture
def uploader(fake_ftp):
    return FtpUploader(
        host="ftp.test",
        user="uploader",
        password="secret",
        port=21,
        timeout=5,
        ftp_factory=fake_ftp,
    )


@pytest.fixture
def services(store, uploader):
    container = build_services(get_settings(), store=store, uploader=uploader)
    yield container
    container.close()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def client(services, auth_client):
    """TestClient running the real app over the in-memory services."""
    from app.main import app

    app.state.services = services
    app.state.auth_client = auth_client
    with TestClient(app) as test_client:
        yield test_client
    app.state.services = None
    app.state.auth_client = None


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def catalog_rows(store):
    """Two categories and four products (one unavailable, one uncategorised)."""
    oils, soaps = store.seed(
        "categories",
        {"name": "Essential Oils", "display_order": 1},
        {"name": "Handmade Soap", "display_order": 2},
    )
    products = store.seed(
        "products",
        {"name": "Lavender Oil", "category_id": oils["id"], "availability": True,
         "is_featured": True, "display_order": 1, "description": "Calming"},
        {"name": "Tea Tree Oil", "category_id": oils["id"], "availability": True,
         "is_featured": False, "display_order": 2, "description": "Antiseptic"},
        {"name": "Oat Soap", "category_id": soaps["id"], "availability": True,
         "is_featured": True, "display_order": 3, "description": "Gentle bar"},
        {"name": "Retired Soap", "category_id": soaps["id"], "availability": False,
         "is_featured": False, "display_order": 4, "description": "Gone"},
        {"name": "Gift Card", "category_id": None, "availability": True,
         "is_featured": False, "display_order": 5, "description": "Any amount"},
    )
    return {"categories": [oils, soaps], "products": products}
