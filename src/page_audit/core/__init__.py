"""Core orchestration and type definitions."""

from .errors import AuditFailure
from .types import (
    AuditConfig,
    AuditError,
    AuditReport,
    AuditRequest,
    DiagnosticLog,
    NavigationOutcome,
    SeoMetadata,
    Viewport,
)

__all__ = [
    "AuditConfig",
    "AuditError",
    "AuditFailure",
    "AuditReport",
    "AuditRequest",
    "DiagnosticLog",
    "NavigationOutcome",
    "SeoMetadata",
    "Viewport",
]
