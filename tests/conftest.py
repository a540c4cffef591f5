"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from page_audit.storage.memory import InMemoryScreenshotStore
from tests.helpers import FakeBrowserClient, make_orchestrator


@pytest.fixture(scope="session")
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def configs_dir(project_root):
    """Get configs directory."""
    return project_root / "configs"


@pytest.fixture
def fake_client():
    """Browser backend serving a healthy example page."""
    return FakeBrowserClient()


@pytest.fixture
def memory_store():
    return InMemoryScreenshotStore()


@pytest.fixture
def orchestrator(fake_client, memory_store):
    """Orchestrator wired to the fake backend and in-memory store."""
    return make_orchestrator(fake_client, memory_store)
