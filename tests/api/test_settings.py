"""Tests for API settings."""

from page_audit.api.config import APISettings, build_audit_config
from page_audit.core.types import BrowserBackend


def test_no_overrides_by_default():
    assert APISettings(_env_file=None).config_overrides() == {}


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PAGE_AUDIT_BROWSER_BACKEND", "cdp")
    monkeypatch.setenv("PAGE_AUDIT_CDP_ENDPOINT", "ws://browser:9222")
    monkeypatch.setenv("PAGE_AUDIT_NAVIGATION_TIMEOUT_MS", "15000")
    monkeypatch.setenv("PAGE_AUDIT_STORAGE_DIR", str(tmp_path))

    settings = APISettings(_env_file=None)
    config = build_audit_config(settings)

    assert config.browser.backend == BrowserBackend.CDP
    assert config.browser.cdp_endpoint == "ws://browser:9222"
    assert config.run.navigation_timeout_ms == 15000
    assert config.run.selector_timeout_ms == 5000
    assert config.storage.out_dir == str(tmp_path)


def test_production_disables_docs():
    from page_audit.api.main import create_app

    settings = APISettings(_env_file=None, environment="production")

    assert settings.is_production
    assert create_app(settings).docs_url is None
