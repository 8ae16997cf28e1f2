"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from weekboard.main import app


ALICE_HEADERS = {"X-Auth-Email": "alice@x.com", "X-Auth-Name": "Alice", "X-Auth-Avatar": "https://img/alice.png"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Identity-provider headers for a signed-in member."""
    return dict(ALICE_HEADERS)


@pytest.fixture
def app_client() -> TestClient:
    """TestClient for the full application.

    Not used as a context manager, so the lifespan (credential and
    connectivity validation) does not run.
    """
    return TestClient(app)
