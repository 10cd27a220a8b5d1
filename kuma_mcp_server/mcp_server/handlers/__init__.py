"""
MCP Server Handlers Package

Modules:
    registry: Tool registration, MCP list/call handlers and the error envelope
"""

from .registry import CLIENT_NOT_INITIALIZED, ToolRegistry

__all__ = ["CLIENT_NOT_INITIALIZED", "ToolRegistry"]
