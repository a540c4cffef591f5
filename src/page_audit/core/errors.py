"""Failure taxonomy for a page audit."""

GENERIC_FAILURE_MESSAGE = "Browser execution failed"


class AuditFailure(Exception):
    """Base class for every failure that ends an audit."""

    kind = "audit_failed"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(AuditFailure):
    """The request is missing a URL or carries malformed options."""

    kind = "invalid_request"


class SessionUnavailable(AuditFailure):
    """The browser backend could not provide a session."""

    kind = "session_unavailable"


class NavigationTimeout(AuditFailure):
    """The page did not reach network idle within the navigation budget."""

    kind = "navigation_timeout"


class NavigationFailed(AuditFailure):
    """Navigation failed at the transport, DNS or TLS level."""

    kind = "navigation_failed"


class SelectorTimeout(AuditFailure):
    """The requested selector never appeared in the DOM."""

    kind = "selector_timeout"


class ExtractionFailed(AuditFailure):
    """The page title could not be read."""

    kind = "extraction_failed"


class CaptureFailed(AuditFailure):
    """The screenshot could not be produced."""

    kind = "capture_failed"


class PersistenceFailed(AuditFailure):
    """The screenshot could not be written to storage."""

    kind = "persistence_failed"


def failure_message(exc: BaseException) -> str:
    """Return a human-readable message for ``exc``, falling back to a generic one."""
    message = exc.message if isinstance(exc, AuditFailure) else str(exc)
    return message.strip() or GENERIC_FAILURE_MESSAGE


def failure_kind(exc: BaseException) -> str:
    """Return the taxonomy kind for ``exc``."""
    if isinstance(exc, AuditFailure):
        return exc.kind
    return AuditFailure.kind
