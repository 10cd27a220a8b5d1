"""MCP server implementation for Uptime Kuma.

Wires the service container, the monitor tool category and the tool
registry to an ``mcp`` low-level server speaking stdio.
"""

import logging
from typing import Dict, Any

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.lowlevel.server import NotificationOptions

from .. import __version__
from ..config import AppConfig
from .container import ServiceContainer
from .handlers.registry import ToolRegistry
from .tools.monitors import MonitorTools

logger = logging.getLogger(__name__)

SERVER_NAME = "kuma-mcp"


class KumaMCPServer:
    """Uptime Kuma MCP Server.

    Components:
    - Service container owning the Socket.IO client
    - Tool registry dispatching tool calls
    - Monitor tool category
    """

    def __init__(self, config: AppConfig, container: ServiceContainer = None):
        """Initialize the MCP server.

        Args:
            config: Application configuration
            container: Optional pre-built container
        """
        self.config = config
        self.server: Server = Server(SERVER_NAME)

        self.container = container or ServiceContainer(config)
        self.tool_registry = ToolRegistry()
        self._tool_categories: Dict[str, Any] = {}

        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the container, register tools and MCP handlers."""
        if self._initialized:
            return

        await self.container.initialize()

        self._register_all_tools()
        self.tool_registry.register_mcp_handlers(self.server, self.container.is_initialized)

        self._initialized = True
        logger.info(
            f"Uptime Kuma MCP Server initialized with {self.tool_registry.get_tool_count()} tools"
        )

    def _register_all_tools(self) -> None:
        monitor_tools = MonitorTools(self.container)
        monitor_tools.register_tools()
        self._tool_categories["monitors"] = monitor_tools

        for category_name, category in self._tool_categories.items():
            handlers = category.get_handlers()
            for name, tool in category.get_tools().items():
                self.tool_registry.register_tool(
                    name, tool, handlers[name], metadata={"category": category_name}
                )

    async def run(self, transport_type: str = "stdio") -> None:
        """Run the MCP server with the specified transport.

        Args:
            transport_type: Transport type to use (only "stdio" is supported)
        """
        if not self._initialized:
            await self.initialize()

        if transport_type == "stdio":
            from mcp.server.stdio import stdio_server

            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=__version__,
                        capabilities=self.server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={},
                        ),
                    ),
                )
        else:
            raise ValueError(f"Unsupported transport type: {transport_type}")

    async def shutdown(self) -> None:
        """Shutdown the server and disconnect from Uptime Kuma."""
        try:
            await self.container.shutdown()
        finally:
            self.tool_registry.clear_registry()
            self._tool_categories.clear()
            self._initialized = False
            logger.info("MCP server shutdown completed")

    def get_server_info(self) -> Dict[str, Any]:
        return {
            'initialized': self._initialized,
            'client_initialized': self.container.is_initialized(),
            'tool_count': self.tool_registry.get_tool_count(),
            'tool_categories': list(self._tool_categories.keys()),
            'server_name': SERVER_NAME,
            'server_version': __version__,
        }


async def run_server(config: AppConfig, transport_type: str = "stdio") -> None:
    """Create, run and always shut down a server for ``config``."""
    server = KumaMCPServer(config)
    try:
        await server.run(transport_type)
    finally:
        await server.shutdown()
