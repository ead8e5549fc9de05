# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
ensures dependency_overrides are cleared after every test so persona
configuration from one test never leaks into the next.
"""

import pytest
from fastapi.testclient import TestClient

from src.main import app as real_app

from .mock_db import EffectRecorder, configure_app_for_persona
from .personas import persona


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
def recorder() -> EffectRecorder:
    return EffectRecorder()


@pytest.fixture
def make_client(app, world, recorder):
    """Factory fixture: act as ``profile`` against the shared registry."""

    def _make(profile, session=None) -> TestClient:
        configure_app_for_persona(app, persona(profile), world.db, recorder, session)
        return TestClient(app)

    return _make
