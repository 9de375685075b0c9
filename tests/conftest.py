"""Pytest configuration and shared fixtures."""

import tempfile
import time
from pathlib import Path

import httpx
import jwt
import pytest

from dashpipe.core.settings import get_settings

AUTH_SECRET = "dashpipe-test-secret-0123456789abcdef"


@pytest.fixture(autouse=True)
def reset_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def source_dir(temp_dir):
    """Create a sources subdirectory in temp_dir."""
    sources = temp_dir / "sources"
    sources.mkdir()
    return sources


@pytest.fixture
def env_vars(monkeypatch):
    """Fixture to set secret environment variables for testing."""
    test_vars = {
        "API_KEY": "key-123",
        "SALES_TOKEN": "token-456",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


@pytest.fixture
def sales_rows():
    """Small fixed sales row set used across transform tests."""
    return [
        {"id": 1, "product": "Product A", "revenue": 1200, "region": "North"},
        {"id": 2, "product": "Product B", "revenue": 5400, "region": "South"},
        {"id": 3, "product": "Product A", "revenue": 3100, "region": "North"},
        {"id": 4, "product": "Product C", "revenue": 800, "region": "East"},
        {"id": 5, "product": "Product B", "revenue": 9900, "region": "South"},
    ]


def _make_token(
    user_id: str = "user-1",
    secret: str = AUTH_SECRET,
    expires_in: int = 3600,
    **claims,
) -> str:
    """Sign a bearer token for the test server."""
    payload = {"sub": user_id, "exp": int(time.time()) + expires_in, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def _mock_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def make_token():
    """Factory signing bearer tokens with the test secret."""
    return _make_token


@pytest.fixture
def mock_client():
    """Factory building an AsyncClient backed by a request handler."""
    return _mock_client


@pytest.fixture
def auth_secret():
    """Secret the test server verifies bearer tokens with."""
    return AUTH_SECRET
