"""API test fixtures: the real app wired to mocked record store and billing clients."""

import pytest
from starlette.testclient import TestClient

from main import create_app

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def app(record_store, billing, config):
    return create_app(record_store, billing, WEBHOOK_SECRET, config)


@pytest.fixture
def client(app):
    """TestClient that returns 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)
