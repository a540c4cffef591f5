"""API dependencies for the audit engine."""

import logging

from fastapi import FastAPI, Request

from ..browser.factory import create_browser_client
from ..core.orchestrator import PageAuditOrchestrator, build_orchestrator
from ..core.types import AuditConfig
from ..storage.local import LocalScreenshotStore

logger = logging.getLogger(__name__)


async def init_engine(app: FastAPI, config: AuditConfig) -> None:
    """Create the browser backend, store and orchestrator on ``app.state``.

    The browser itself starts lazily on the first audit.
    """
    client = create_browser_client(config.browser)
    store = LocalScreenshotStore(config.storage.out_dir)
    app.state.browser_client = client
    app.state.orchestrator = build_orchestrator(config, client, store)
    logger.info("Audit engine initialized")


async def close_engine(app: FastAPI) -> None:
    """Shut down the browser backend."""
    client = getattr(app.state, "browser_client", None)
    if client is not None:
        await client.close()
        app.state.browser_client = None
        app.state.orchestrator = None
        logger.info("Audit engine closed")


def get_orchestrator(request: Request) -> PageAuditOrchestrator:
    """Get the orchestrator for the running app."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Audit engine not initialized. Call init_engine() first.")
    return orchestrator
