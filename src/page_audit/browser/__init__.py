"""Browser automation module."""

from .factory import create_browser_client
from .session import BrowserSession, SessionManager

__all__ = [
    "BrowserSession",
    "SessionManager",
    "create_browser_client",
]
