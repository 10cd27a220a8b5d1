"""Monitor management tools for the Uptime Kuma MCP server.

Each handler receives the raw argument mapping of a tool call, validates it
through the matching pydantic input model and delegates to MonitorService.
"""

import logging
from typing import Any, Dict, Type, TYPE_CHECKING

from mcp.types import Tool
from pydantic import BaseModel

from ....services.models.monitors import (
    FindMonitorsByNameInput,
    ListMonitorsInput,
    MonitorConfig,
    MonitorIdInput,
    UpdateMonitorInput,
)

if TYPE_CHECKING:
    from ...container import ServiceContainer
    from ....services.monitor_service import MonitorService

logger = logging.getLogger(__name__)


def input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON schema advertised to MCP clients for a tool's input model."""
    schema = model.model_json_schema()
    schema.setdefault("properties", {})
    schema["type"] = "object"
    schema.pop("title", None)
    return schema


class MonitorTools:
    """Monitor management tools for MCP server."""

    def __init__(self, container: "ServiceContainer"):
        """Initialize monitor tools.

        Args:
            container: Service container; the monitor service is resolved
                per call so tools registered before initialisation still work
        """
        self.container = container
        self._tool_handlers: Dict[str, Any] = {}
        self._tools: Dict[str, Tool] = {}

    @property
    def monitor_service(self) -> "MonitorService":
        return self.container.get_service("monitor_service")

    def get_tools(self) -> Dict[str, Tool]:
        """Get all monitor tool definitions."""
        return self._tools.copy()

    def get_handlers(self) -> Dict[str, Any]:
        """Get all monitor tool handlers."""
        return self._tool_handlers.copy()

    def register_tools(self) -> None:
        """Register all monitor tools and handlers."""

        # Add monitor tool
        self._tools["add_monitor"] = Tool(
            name="add_monitor",
            description=(
                "Add a new monitor to Uptime Kuma. Monitors can check various services like "
                "HTTP endpoints, ports, ping, DNS, databases, and more."
            ),
            inputSchema=input_schema(MonitorConfig),
        )

        async def add_monitor(arguments: Dict[str, Any]):
            config = MonitorConfig.model_validate(arguments)
            return await self.monitor_service.add_monitor(config)

        self._tool_handlers["add_monitor"] = add_monitor

        # Update monitor tool
        self._tools["update_monitor_by_id"] = Tool(
            name="update_monitor_by_id",
            description="Update an existing monitor in Uptime Kuma using its ID",
            inputSchema=input_schema(UpdateMonitorInput),
        )

        async def update_monitor_by_id(arguments: Dict[str, Any]):
            update = UpdateMonitorInput.model_validate(arguments)
            return await self.monitor_service.update_monitor(update)

        self._tool_handlers["update_monitor_by_id"] = update_monitor_by_id

        # Remove monitor tool
        self._tools["remove_monitor_by_id"] = Tool(
            name="remove_monitor_by_id",
            description="Remove a monitor from Uptime Kuma using its ID",
            inputSchema=input_schema(MonitorIdInput),
        )

        async def remove_monitor_by_id(arguments: Dict[str, Any]):
            params = MonitorIdInput.model_validate(arguments)
            return await self.monitor_service.remove_monitor(params.id)

        self._tool_handlers["remove_monitor_by_id"] = remove_monitor_by_id

        # Pause monitor tool
        self._tools["pause_monitor_by_id"] = Tool(
            name="pause_monitor_by_id",
            description="Pause a monitor in Uptime Kuma (stop checking) using its ID",
            inputSchema=input_schema(MonitorIdInput),
        )

        async def pause_monitor_by_id(arguments: Dict[str, Any]):
            params = MonitorIdInput.model_validate(arguments)
            return await self.monitor_service.pause_monitor(params.id)

        self._tool_handlers["pause_monitor_by_id"] = pause_monitor_by_id

        # Resume monitor tool
        self._tools["resume_monitor_by_id"] = Tool(
            name="resume_monitor_by_id",
            description="Resume a paused monitor in Uptime Kuma (start checking again) using its ID",
            inputSchema=input_schema(MonitorIdInput),
        )

        async def resume_monitor_by_id(arguments: Dict[str, Any]):
            params = MonitorIdInput.model_validate(arguments)
            return await self.monitor_service.resume_monitor(params.id)

        self._tool_handlers["resume_monitor_by_id"] = resume_monitor_by_id

        # Get monitor tool
        self._tools["get_monitor_by_id"] = Tool(
            name="get_monitor_by_id",
            description="Get details of a specific monitor using its ID",
            inputSchema=input_schema(MonitorIdInput),
        )

        async def get_monitor_by_id(arguments: Dict[str, Any]):
            params = MonitorIdInput.model_validate(arguments)
            return await self.monitor_service.get_monitor(params.id)

        self._tool_handlers["get_monitor_by_id"] = get_monitor_by_id

        # Find monitors tool
        self._tools["find_monitors_by_name"] = Tool(
            name="find_monitors_by_name",
            description=(
                "Find monitors by name or partial name. Returns a list of matching monitors with "
                "id, name, url, description, type, path, hostname, port, and active status."
            ),
            inputSchema=input_schema(FindMonitorsByNameInput),
        )

        async def find_monitors_by_name(arguments: Dict[str, Any]):
            params = FindMonitorsByNameInput.model_validate(arguments)
            return await self.monitor_service.find_monitors_by_name(
                params.searchTerm, use_regex=params.useRegex
            )

        self._tool_handlers["find_monitors_by_name"] = find_monitors_by_name

        # List monitors tool
        self._tools["list_monitors"] = Tool(
            name="list_monitors",
            description="List all monitors in Uptime Kuma",
            inputSchema=input_schema(ListMonitorsInput),
        )

        async def list_monitors(arguments: Dict[str, Any]):
            ListMonitorsInput.model_validate(arguments)
            return await self.monitor_service.list_monitors()

        self._tool_handlers["list_monitors"] = list_monitors

        logger.debug(f"Registered {len(self._tools)} monitor tools")
