"""
MCP Server Utilities Package

Modules:
    serialization: JSON serialization utilities including MCPJSONEncoder
"""

from .serialization import MCPJSONEncoder, safe_json_dumps

__all__ = [
    "MCPJSONEncoder",
    "safe_json_dumps",
]
