"""
MCP Server Tools Package

Tool categories:
    monitors: Create, update, remove, pause, resume, get, find and list monitors
"""

from .monitors import MonitorTools

__all__ = ["MonitorTools"]
