"""MCP server package for Uptime Kuma monitor management."""

from .container import ServiceContainer
from .server import KumaMCPServer, run_server

__all__ = ["KumaMCPServer", "ServiceContainer", "run_server"]
