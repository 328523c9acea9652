# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory task store, token minting and an API client
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-unit-tests-only")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from .fakes import FakeTaskStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store() -> FakeTaskStore:
    """Empty in-memory task store."""
    return FakeTaskStore()


@pytest.fixture
def make_token():
    """Mint HS256 access tokens the way the identity provider does."""

    def _make(
        sub: str | None = "u1",
        expires_in: int = 3600,
        secret: str | None = None,
        **claims,
    ) -> str:
        payload = {
            "aud": settings.JWT_AUDIENCE,
            "exp": int(time.time()) + expires_in,
            "email": f"{sub}@example.com" if sub else None,
            **claims,
        }
        if sub is not None:
            payload["sub"] = sub
        return jwt.encode(
            payload,
            secret or settings.SUPABASE_JWT_SECRET,
            algorithm="HS256",
        )

    return _make


@pytest.fixture
def auth_headers(make_token):
    """Authorization headers for a given user id."""

    def _headers(sub: str = "u1") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(sub)}"}

    return _headers


@pytest.fixture
def client(store):
    """
    API client wired to the in-memory store.

    The lifespan is not started, so no Supabase client is created.
    """
    from app.dependencies import get_task_store
    from app.main import app

    app.dependency_overrides[get_task_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_csv() -> bytes:
    """The canonical one-row import file."""
    return b"title,description,effort,dueDate\nBuy milk,,2,2024-01-01"
