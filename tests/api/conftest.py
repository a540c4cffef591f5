"""Fixtures for API tests."""

import os

import pytest
from fastapi.testclient import TestClient

from tests.helpers import FakeBrowserClient, make_orchestrator

# Keep a developer .env or shell from leaking into the app under test
for _name in [name for name in os.environ if name.startswith("PAGE_AUDIT_")]:
    del os.environ[_name]
os.environ["PAGE_AUDIT_ENVIRONMENT"] = "development"


def _clear_http_collectors() -> None:
    """Drop request metrics so each app can register its own."""
    from prometheus_client import REGISTRY

    collectors_to_remove = []
    for name in list(REGISTRY._names_to_collectors.keys()):
        if name.startswith("http_"):
            collectors_to_remove.append(REGISTRY._names_to_collectors[name])
    for collector in set(collectors_to_remove):
        try:
            REGISTRY.unregister(collector)
        except KeyError:
            pass


@pytest.fixture(autouse=True)
def clear_prometheus_registry():
    """Clear Prometheus registry before each test to avoid duplication errors."""
    _clear_http_collectors()
    yield


@pytest.fixture
def settings(tmp_path):
    from page_audit.api.config import APISettings

    return APISettings(storage_dir=str(tmp_path / "artifacts"))


@pytest.fixture
def fake_client():
    return FakeBrowserClient()


@pytest.fixture
def app(settings, fake_client, memory_store):
    """App with the audit engine wired to fakes instead of a real browser."""
    from page_audit.api.main import create_app

    app = create_app(settings)
    app.state.browser_client = fake_client
    app.state.orchestrator = make_orchestrator(fake_client, memory_store)
    return app


@pytest.fixture
def client(app):
    """Test client with mocked dependencies."""
    return TestClient(app)
