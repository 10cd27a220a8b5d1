"""Utility modules for the Uptime Kuma MCP server."""

from .request_context import (
    generate_request_id,
    get_request_id,
    set_request_id,
    with_request_id,
    ensure_request_id,
    format_request_id,
    REQUEST_ID_CONTEXT,
)

__all__ = [
    "generate_request_id",
    "get_request_id",
    "set_request_id",
    "with_request_id",
    "ensure_request_id",
    "format_request_id",
    "REQUEST_ID_CONTEXT",
]
