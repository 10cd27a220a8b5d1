"""Monitor management tools."""

from .tools import MonitorTools

__all__ = ["MonitorTools"]
