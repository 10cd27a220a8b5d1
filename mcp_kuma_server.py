#!/usr/bin/env python3
"""
Uptime Kuma MCP Server Entry Point

Usage:
    python mcp_kuma_server.py [--config CONFIG_FILE] [--log-level LEVEL]

The server runs on stdio for MCP client integration. Connection settings
come from UPTIME_KUMA_URL and either UPTIME_KUMA_USERNAME +
UPTIME_KUMA_PASSWORD or UPTIME_KUMA_API_KEY (a .env file is honoured).
"""

import sys
import asyncio
import logging
import argparse
import warnings
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from kuma_mcp_server.config import load_config
from kuma_mcp_server.logging_utils import setup_logging as configure_logging
from kuma_mcp_server.mcp_server import KumaMCPServer


def _is_client_disconnect_error(exception: BaseException) -> bool:
    """Check if an exception represents a client disconnect."""
    if isinstance(exception, (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)):
        return True

    error_str = str(exception)
    error_indicators = [
        "Broken pipe", "Connection reset", "Connection aborted",
        "BrokenResourceError", "ClosedResourceError",
        "[Errno 32]", "[Errno 104]"
    ]
    return any(indicator in error_str for indicator in error_indicators)


def _is_client_disconnect_group(exception_group: BaseExceptionGroup) -> bool:
    """Check if an exception group contains only client disconnect errors."""
    if not exception_group.exceptions:
        return False

    for exc in exception_group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            if not _is_client_disconnect_group(exc):
                return False
        elif not _is_client_disconnect_error(exc):
            return False
    return True


def setup_logging(log_level: str = "INFO"):
    """Setup stderr logging with request IDs and quiet transport loggers."""
    configure_logging(log_level, include_request_id=True)

    warnings.filterwarnings("ignore", category=ResourceWarning)

    # Broken pipes during normal shutdown
    logging.getLogger("mcp.server.stdio").setLevel(logging.CRITICAL)
    logging.getLogger("anyio").setLevel(logging.WARNING)


async def main():
    """Main entry point for the Uptime Kuma MCP server."""
    parser = argparse.ArgumentParser(description="Uptime Kuma MCP Server")
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--force-mcp",
        action="store_true",
        help="Force MCP server mode even when run in terminal"
    )

    args = parser.parse_args()

    # Check if this is being run manually in a terminal
    if sys.stdin.isatty() and sys.stdout.isatty() and not args.force_mcp:
        print("╭─────────────────────────────────────────────────────────────────╮")
        print("│                    Uptime Kuma MCP Server                      │")
        print("╰─────────────────────────────────────────────────────────────────╯")
        print()
        print("This is an MCP (Model Context Protocol) server designed to be")
        print("called by AI clients like Claude Desktop, not run manually.")
        print()
        print("To check your connection settings, try:")
        print("  kuma-mcp-server test")
        print()
        print("To force MCP server mode anyway, use: --force-mcp")
        sys.exit(0)

    config = load_config(args.config)
    setup_logging(args.log_level or config.log_level)
    logger = logging.getLogger(__name__)

    logger.info("Starting Uptime Kuma MCP Server...")
    logger.info(f"Uptime Kuma URL: {config.kuma.url or '(not configured)'}")

    server = KumaMCPServer(config)
    try:
        await server.initialize()
        logger.info("MCP Server initialized, starting transport...")
        sys.stderr.flush()
        await server.run(transport_type="stdio")
    except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError):
        logger.debug("Client disconnected")
    except BaseExceptionGroup as eg:
        # anyio task groups wrap transport errors
        if _is_client_disconnect_group(eg):
            logger.debug("Client disconnected (exception group)")
        else:
            logger.exception("Fatal error in MCP server (exception group)")
            sys.exit(1)
    except asyncio.CancelledError:
        logger.debug("Server task cancelled")
    except Exception as e:
        if _is_client_disconnect_error(e):
            logger.debug(f"Client disconnected (wrapped): {type(e).__name__}")
        else:
            logger.exception("Fatal error in MCP server")
            sys.exit(1)
    finally:
        await server.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
