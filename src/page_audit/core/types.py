"""Type definitions for the page audit system."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

WEBP_MIME_TYPE = "image/webp"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Viewport(CamelModel):
    """Browser viewport size in CSS pixels."""

    width: int = Field(default=1920, gt=0, description="Viewport width")
    height: int = Field(default=1080, gt=0, description="Viewport height")


class AuditRequest(CamelModel):
    """A request to audit one URL."""

    url: str = Field(min_length=1, description="Page URL to audit")
    viewport: Viewport | None = Field(default=None, description="Viewport override")
    wait_for_selector: str | None = Field(
        default=None, description="CSS selector that must appear after the page is idle"
    )
    full_page: bool = Field(default=True, description="Capture the full scrollable page")

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be blank")
        return value

    @field_validator("wait_for_selector")
    @classmethod
    def blank_selector_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("full_page", mode="before")
    @classmethod
    def null_full_page_is_true(cls, value: Any) -> Any:
        return True if value is None else value


class SignalKind(str, Enum):
    """Runtime signal channels exposed by a browser page."""

    CONSOLE = "console"
    PAGE_ERROR = "pageerror"
    REQUEST_FAILED = "requestfailed"


@dataclass(frozen=True)
class PageSignal:
    """One runtime observation delivered on a signal channel."""

    kind: SignalKind
    text: str
    severity: str | None = None
    reason: str | None = None


SignalListener = Callable[[PageSignal], None]


class DiagnosticLog(CamelModel):
    """Runtime signals observed during one audit, in arrival order."""

    console_warnings_and_errors: list[str] = Field(default_factory=list)
    uncaught_page_errors: list[str] = Field(default_factory=list)
    failed_network_requests: list[str] = Field(default_factory=list)


class NavigationOutcome(CamelModel):
    """Result of driving the page to network idle."""

    http_status: int = Field(description="Status of the final navigation response")
    load_time_ms: int = Field(ge=0, description="Milliseconds from navigation start to idle")


class SeoMetadata(CamelModel):
    """Basic SEO metadata read from the settled page."""

    title: str
    meta_description: str | None = Field(
        default=None, description="None when the tag or attribute is absent or unreadable"
    )


class LookupStatus(str, Enum):
    """Outcome of a single DOM attribute lookup."""

    FOUND = "found"
    ELEMENT_MISSING = "element_missing"
    ATTRIBUTE_MISSING = "attribute_missing"
    FAILED = "failed"


@dataclass(frozen=True)
class AttributeLookup:
    """Typed optional result of reading one attribute from one element."""

    status: LookupStatus
    value: str | None = None
    error: str | None = None

    @property
    def present(self) -> bool:
        return self.status == LookupStatus.FOUND

    @classmethod
    def found(cls, value: str) -> "AttributeLookup":
        return cls(LookupStatus.FOUND, value=value)

    @classmethod
    def element_missing(cls) -> "AttributeLookup":
        return cls(LookupStatus.ELEMENT_MISSING)

    @classmethod
    def attribute_missing(cls) -> "AttributeLookup":
        return cls(LookupStatus.ATTRIBUTE_MISSING)

    @classmethod
    def failed(cls, error: str) -> "AttributeLookup":
        return cls(LookupStatus.FAILED, error=error)


class ScreenshotArtifact(CamelModel):
    """A persisted screenshot and its public reference."""

    data: bytes = Field(exclude=True, repr=False)
    mime_type: Literal["image/webp"] = WEBP_MIME_TYPE
    storage_key: str
    url: str


class AuditReport(CamelModel):
    """Terminal success value of an audit."""

    url: str
    http_status: int
    load_time_ms: int
    seo: SeoMetadata
    diagnostics: DiagnosticLog
    screenshot_url: str

    @property
    def success(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        """Serialise as the success envelope."""
        return {"success": True, "data": self.model_dump(mode="json", by_alias=True)}


class AuditError(CamelModel):
    """Terminal failure value of an audit. Never carries a partial report."""

    message: str
    kind: str = "audit_failed"

    @property
    def success(self) -> bool:
        return False

    def to_payload(self) -> dict[str, Any]:
        """Serialise as the failure envelope."""
        return {"success": False, "error": self.message}


AuditResult = AuditReport | AuditError


# Browser collaborator protocols


@runtime_checkable
class BrowserPage(Protocol):
    """One browser page owned by a single audit."""

    def subscribe(self, kind: SignalKind, listener: SignalListener) -> None: ...

    async def goto(self, url: str, timeout_ms: int) -> int | None: ...

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None: ...

    async def title(self) -> str: ...

    async def query_attribute(self, selector: str, attribute: str) -> AttributeLookup: ...

    async def screenshot(self, full_page: bool, image_format: str, quality: int) -> bytes: ...


@runtime_checkable
class BrowserClient(Protocol):
    """Browser backend able to open and close isolated pages."""

    async def open_page(self, viewport: Viewport) -> BrowserPage: ...

    async def close_page(self, page: BrowserPage) -> None: ...

    async def close(self) -> None: ...


# Configuration models


class BrowserBackend(str, Enum):
    """Supported browser backends."""

    PLAYWRIGHT = "playwright"
    CDP = "cdp"


class BrowserConfig(BaseModel):
    """Browser backend configuration."""

    backend: BrowserBackend = Field(default=BrowserBackend.PLAYWRIGHT)
    headless: bool = Field(default=True, description="Run browser in headless mode")
    cdp_endpoint: str | None = Field(
        default=None, description="DevTools endpoint of a remote browser (cdp backend)"
    )
    max_sessions: int | None = Field(
        default=None, ge=1, description="Upper bound on concurrent browser sessions"
    )

    @model_validator(mode="after")
    def cdp_requires_endpoint(self) -> "BrowserConfig":
        if self.backend == BrowserBackend.CDP and not self.cdp_endpoint:
            raise ValueError("CDP backend requires 'cdp_endpoint'")
        return self


class RunConfig(BaseModel):
    """Per-audit timing and capture configuration."""

    navigation_timeout_ms: int = Field(default=30000, gt=0)
    selector_timeout_ms: int = Field(default=5000, gt=0)
    viewport_width: int = Field(default=1920, gt=0)
    viewport_height: int = Field(default=1080, gt=0)
    full_page: bool = Field(default=True)
    screenshot_quality: int = Field(default=80, ge=0, le=100)

    @property
    def viewport(self) -> Viewport:
        return Viewport(width=self.viewport_width, height=self.viewport_height)


class StorageConfig(BaseModel):
    """Screenshot storage configuration."""

    out_dir: str = Field(default="./artifacts", description="Directory for stored screenshots")
    public_base_url: str = Field(
        default="http://localhost:8000/artifacts",
        description="Base URL under which stored keys are publicly served",
    )
    key_prefix: str = Field(default="audits", description="Prefix for generated storage keys")


class AuditConfig(BaseModel):
    """Complete audit configuration."""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
