"""Tool registry for MCP server - manages tool registration and dispatch."""

import logging
from typing import Dict, List, Callable, Awaitable, Any, Optional

from mcp.server import Server
from mcp.types import CallToolResult, TextContent, Tool

from ...services.base import ServiceResult
from ...utils.request_context import (
    generate_request_id,
    set_request_id,
)
from ..utils.serialization import safe_json_dumps

logger = logging.getLogger(__name__)

CLIENT_NOT_INITIALIZED = (
    "Client not initialized. Please set environment variables: UPTIME_KUMA_URL and either "
    "(UPTIME_KUMA_USERNAME + UPTIME_KUMA_PASSWORD) or UPTIME_KUMA_API_KEY"
)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class ToolExecutionError(Exception):
    """A tool handler produced a failed ServiceResult."""


class ToolRegistry:
    """
    Manages tool registration, discovery and dispatch for the MCP server.

    Dispatch is the protocol boundary: whatever a handler raises or reports
    is turned into a single text content item, with ``isError`` set and an
    ``Error: `` prefix on failure.
    """

    def __init__(self):
        self._tools: Dict[str, Tool] = {}
        self._tool_handlers: Dict[str, ToolHandler] = {}
        self._tool_metadata: Dict[str, Dict[str, Any]] = {}

    def register_tool(self, name: str, tool: Tool, handler: ToolHandler, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Register a tool with its handler and optional metadata.

        Args:
            name: Tool name/identifier
            tool: MCP Tool definition
            handler: Async function receiving the call's argument mapping
            metadata: Optional metadata for the tool (category, source, ...)
        """
        if name in self._tools:
            logger.warning(f"Tool '{name}' is already registered, overwriting")

        self._tools[name] = tool
        self._tool_handlers[name] = handler
        self._tool_metadata[name] = metadata or {}

        logger.debug(f"Registered tool: {name}")

    def unregister_tool(self, name: str) -> bool:
        if name not in self._tools:
            return False

        del self._tools[name]
        del self._tool_handlers[name]
        del self._tool_metadata[name]

        logger.debug(f"Unregistered tool: {name}")
        return True

    def get_tool_handler(self, name: str) -> Optional[ToolHandler]:
        return self._tool_handlers.get(name)

    def get_tool_definition(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def get_tool_metadata(self, name: str) -> Dict[str, Any]:
        return self._tool_metadata.get(name, {})

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def list_tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def get_tool_count(self) -> int:
        return len(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    async def dispatch(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]],
        services_check_func: Callable[[], bool] = lambda: True,
    ) -> CallToolResult:
        """Run one tool call and wrap its outcome in a tool-call result.

        Args:
            name: Tool name requested by the client
            arguments: Raw call arguments (may be None)
            services_check_func: Reports whether the Uptime Kuma client exists

        Returns:
            CallToolResult: Text content; never raises
        """
        request_id = generate_request_id()
        set_request_id(request_id)

        logger.info(f"[{request_id}] MCP tool call: {name}")
        logger.debug(f"[{request_id}] Arguments: {arguments}")

        try:
            if not services_check_func():
                raise RuntimeError(CLIENT_NOT_INITIALIZED)

            handler = self.get_tool_handler(name)
            if not handler:
                raise ValueError(f"Unknown tool: {name}")

            result = await handler(arguments or {})
            text = self._render_result(result)

            logger.info(f"[{request_id}] MCP tool '{name}' completed successfully")
            return CallToolResult(
                content=[TextContent(type="text", text=text)],
                isError=False,
            )
        except Exception as e:
            if isinstance(e, ToolExecutionError):
                logger.warning(f"[{request_id}] Tool {name} failed: {e}")
            else:
                logger.exception(f"[{request_id}] Error calling tool {name}")

            return CallToolResult(
                content=[TextContent(type="text", text=f"Error: {e}")],
                isError=True,
            )

    @staticmethod
    def _render_result(result: Any) -> str:
        if isinstance(result, ServiceResult):
            if not result.success:
                raise ToolExecutionError(result.error or "Unknown error")
            result = result.data

        if isinstance(result, str):
            return result
        return safe_json_dumps(result)

    def register_mcp_handlers(self, server: Server, services_check_func: Callable[[], bool]) -> None:
        """
        Register MCP protocol handlers with the server.

        Args:
            server: MCP server instance
            services_check_func: Function to check if the client is initialized
        """

        @server.list_tools()
        async def list_tools() -> List[Tool]:
            """List all available MCP tools."""
            return self.list_tools()

        # Arguments are validated by the tools' own pydantic models so that
        # type-specific rules report through the same error envelope
        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict):
            return await self.dispatch(name, arguments, services_check_func)

    def clear_registry(self) -> None:
        """Clear all registered tools (useful for testing)."""
        self._tools.clear()
        self._tool_handlers.clear()
        self._tool_metadata.clear()
        logger.debug("Cleared tool registry")
