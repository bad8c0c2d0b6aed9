# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
ensures dependency_overrides are cleared after every test so persona
configuration from one test never leaks into the next.

The app is driven without entering its lifespan, so the in-memory store
installed by the top-level ``store`` / ``use_records`` fixtures stays the
backend for every request.
"""

import pytest
from fastapi.testclient import TestClient

from src.main import app as real_app
from src.middleware.auth import get_current_user
from src.schemas.auth import Principal


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    return real_app


@pytest.fixture
def make_client(app):
    """Factory fixture: authenticate every request as ``user``."""

    def _make(user: Principal) -> TestClient:
        app.dependency_overrides[get_current_user] = lambda: user
        return TestClient(app, raise_server_exceptions=False)

    return _make
