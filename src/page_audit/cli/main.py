"""CLI entrypoint for page audits."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..core.config import load_config
from ..core.errors import InvalidRequest
from ..core.orchestrator import run_audit

# Load environment variables
load_dotenv()

EXIT_OK = 0
EXIT_AUDIT_FAILED = 1
EXIT_INVALID_REQUEST = 2


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration.

    Logs go to stderr so stdout carries only the JSON result.

    Args:
        level: Logging level
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def parse_viewport(value: str) -> dict[str, int]:
    """Parse ``WIDTHxHEIGHT`` into a viewport mapping."""
    try:
        width, height = (int(part) for part in value.lower().split("x", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Viewport must look like 1366x768, got {value!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("Viewport dimensions must be positive")
    return {"width": width, "height": height}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Page Audit - audit a single web page with a headless browser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Audit a page with the default 1920x1080 viewport
  page-audit https://www.example.com

  # Mobile viewport, wait for the app root, capture only the viewport
  page-audit https://app.example.com --viewport 390x844 --wait-for "#root" --no-full-page

  # Use a remote browser over CDP and a custom config
  page-audit https://www.example.com --cdp-endpoint ws://localhost:9222 --config configs/prod.yaml
        """,
    )

    parser.add_argument("url", type=str, help="URL of the page to audit")

    parser.add_argument(
        "--viewport",
        type=parse_viewport,
        help="Viewport as WIDTHxHEIGHT (default: from config, 1920x1080)",
    )

    parser.add_argument(
        "--wait-for",
        type=str,
        dest="wait_for_selector",
        help="CSS selector that must appear after the page is idle",
    )

    parser.add_argument(
        "--no-full-page",
        action="store_true",
        help="Capture only the viewport instead of the full page",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: configs/default.yaml)",
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for stored screenshots (overrides config)",
    )

    parser.add_argument(
        "--public-base-url",
        type=str,
        help="Base URL under which stored screenshots are served (overrides config)",
    )

    parser.add_argument(
        "--cdp-endpoint",
        type=str,
        help="Connect to a remote browser over CDP instead of launching one",
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate CLI flags into configuration overrides."""
    overrides: dict[str, Any] = {}

    if args.cdp_endpoint:
        overrides.setdefault("browser", {}).update(
            {"backend": "cdp", "cdp_endpoint": args.cdp_endpoint}
        )

    if args.no_headless:
        overrides.setdefault("browser", {})["headless"] = False

    if args.output_dir:
        overrides.setdefault("storage", {})["out_dir"] = str(args.output_dir)

    if args.public_base_url:
        overrides.setdefault("storage", {})["public_base_url"] = args.public_base_url

    return overrides


def build_request(args: argparse.Namespace) -> dict[str, Any]:
    """Build the audit request payload from CLI flags."""
    request: dict[str, Any] = {"url": args.url}
    if args.viewport:
        request["viewport"] = args.viewport
    if args.wait_for_selector:
        request["waitForSelector"] = args.wait_for_selector
    if args.no_full_page:
        request["fullPage"] = False
    return request


async def main_async(argv: list[str] | None = None) -> int:
    """Async main function.

    Returns:
        Exit code
    """
    args = parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(config_path=args.config, overrides=build_overrides(args))
    except Exception as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_INVALID_REQUEST

    try:
        result = await run_audit(config, build_request(args))
    except KeyboardInterrupt:
        logger.info("Audit interrupted by user")
        return 130

    print(json.dumps(result.to_payload(), indent=2))

    if result.success:
        return EXIT_OK
    if result.kind == InvalidRequest.kind:
        return EXIT_INVALID_REQUEST
    return EXIT_AUDIT_FAILED


def main() -> None:
    """Main CLI entrypoint."""
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
