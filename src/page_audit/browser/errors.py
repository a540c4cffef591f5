"""Translation of Playwright errors into audit failures."""

from ..core.errors import AuditFailure, NavigationFailed, NavigationTimeout, SelectorTimeout


def is_timeout(exc: BaseException) -> bool:
    """Check whether ``exc`` is a Playwright timeout.

    Args:
        exc: The exception raised by a Playwright call.

    Returns:
        True for ``playwright.async_api.TimeoutError``.
    """
    from playwright.async_api import TimeoutError as PlaywrightTimeoutError

    return isinstance(exc, PlaywrightTimeoutError)


def first_line(exc: BaseException) -> str:
    """Return the first line of an exception message.

    Playwright appends a multi-line call log to its messages.
    """
    text = str(exc).strip()
    return text.splitlines()[0] if text else ""


def navigation_failure(exc: BaseException, timeout_ms: int) -> AuditFailure:
    """Map a failed ``page.goto`` into the audit failure taxonomy."""
    if is_timeout(exc):
        return NavigationTimeout(f"Navigation timeout of {timeout_ms} ms exceeded")
    return NavigationFailed(first_line(exc))


def selector_failure(exc: BaseException, selector: str, timeout_ms: int) -> AuditFailure:
    """Map a failed ``page.wait_for_selector`` into the audit failure taxonomy.

    Every selector wait failure ends the audit as ``SelectorTimeout``; the
    message tells a timeout apart from other causes.
    """
    if is_timeout(exc):
        return SelectorTimeout(f"Waiting for selector `{selector}` failed: {timeout_ms} ms exceeded")
    return SelectorTimeout(f"Waiting for selector `{selector}` failed: {first_line(exc)}")
