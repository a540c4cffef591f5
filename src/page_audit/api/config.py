"""API configuration settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.config import load_config
from ..core.types import AuditConfig, BrowserBackend


class APISettings(BaseSettings):
    """API configuration from environment variables.

    Fields left as ``None`` fall back to the YAML audit configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGE_AUDIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Page Audit API")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    environment: Literal["development", "staging", "production"] = Field(default="development")

    # Server settings
    host: str = Field(default="0.0.0.0")  # nosec B104 - intentional for container deployment
    port: int = Field(default=8000)
    workers: int = Field(default=1)
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(default="info")

    # CORS
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    # Audit configuration
    config_path: Path | None = Field(default=None, description="YAML audit configuration file")
    browser_backend: BrowserBackend | None = Field(default=None)
    headless: bool | None = Field(default=None)
    cdp_endpoint: str | None = Field(default=None)
    max_sessions: int | None = Field(default=None, ge=1)
    navigation_timeout_ms: int | None = Field(default=None, gt=0)
    selector_timeout_ms: int | None = Field(default=None, gt=0)
    storage_dir: str | None = Field(default=None)
    public_base_url: str | None = Field(default=None)

    # Serve the local storage directory so screenshot URLs resolve
    serve_artifacts: bool = Field(default=True)
    artifacts_path: str = Field(default="/artifacts")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    def config_overrides(self) -> dict[str, Any]:
        """Audit configuration overrides taken from the environment."""
        sections: dict[str, dict[str, Any]] = {
            "browser": {
                "backend": self.browser_backend.value if self.browser_backend else None,
                "headless": self.headless,
                "cdp_endpoint": self.cdp_endpoint,
                "max_sessions": self.max_sessions,
            },
            "run": {
                "navigation_timeout_ms": self.navigation_timeout_ms,
                "selector_timeout_ms": self.selector_timeout_ms,
            },
            "storage": {
                "out_dir": self.storage_dir,
                "public_base_url": self.public_base_url,
            },
        }
        overrides: dict[str, Any] = {}
        for section, values in sections.items():
            values = {k: v for k, v in values.items() if v is not None}
            if values:
                overrides[section] = values
        return overrides


def build_audit_config(settings: APISettings) -> AuditConfig:
    """Load the YAML audit configuration and apply environment overrides."""
    return load_config(config_path=settings.config_path, overrides=settings.config_overrides())


@lru_cache
def get_settings() -> APISettings:
    """Get cached settings instance."""
    return APISettings()
