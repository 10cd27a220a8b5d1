"""
Uptime Kuma MCP Server

Exposes Uptime Kuma monitor management (create, update, remove, pause,
resume, inspect and search monitors) to MCP clients over stdio.
"""

# Logging is configured at app entry point via kuma_mcp_server/logging_utils.py

__version__ = "1.0.0"
__author__ = "Uptime Kuma MCP Server"
__description__ = "MCP server for managing Uptime Kuma monitors"
