"""Server entry point for running the API."""

import argparse
import logging

from .config import APISettings, get_settings

logger = logging.getLogger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def parse_args(settings: APISettings, argv: list[str] | None = None) -> argparse.Namespace:
    """Parse server arguments.

    Defaults come from ``APISettings``, so ``PAGE_AUDIT_HOST``,
    ``PAGE_AUDIT_PORT``, ``PAGE_AUDIT_WORKERS``, ``PAGE_AUDIT_DEBUG`` and
    ``PAGE_AUDIT_LOG_LEVEL`` (or ``.env``) apply unless a flag overrides them.
    """
    parser = argparse.ArgumentParser(description="Page Audit API Server")
    parser.add_argument("--host", default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.workers,
        help="Number of worker processes (ignored with --reload)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=settings.debug,
        help="Enable auto-reload (default: on when PAGE_AUDIT_DEBUG is set)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=LOG_LEVELS,
        help="Log level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run the API server."""
    settings = get_settings()
    args = parse_args(settings, argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(
        f"Serving {settings.app_name} v{settings.app_version} on {args.host}:{args.port} "
        f"({settings.environment})"
    )

    import uvicorn

    uvicorn.run(
        "page_audit.api.main:app",
        host=args.host,
        port=args.port,
        workers=1 if args.reload else args.workers,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
