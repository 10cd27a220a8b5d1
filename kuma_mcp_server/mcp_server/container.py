"""Dependency injection container for MCP server.

Owns the Uptime Kuma client and the services built on top of it.
"""

import logging
from typing import Dict, Any, Optional, TypeVar, Type

from ..config import AppConfig
from ..api_client import KumaAPIError, KumaClient
from ..services.monitor_service import MonitorService

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceContainer:
    """
    Dependency injection container for managing service instances.

    The container is initialised only when an Uptime Kuma URL is
    configured. A failed first connect or login does not prevent
    initialisation; the client retries lazily on the next operation.
    """

    def __init__(self, config: AppConfig, client: Optional[KumaClient] = None):
        """Initialize the service container.

        Args:
            config: Application configuration
            client: Pre-built client (tests inject one backed by a fake socket)
        """
        self.config = config
        self._client = client
        self._services: Dict[str, Any] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """Build the client and services, then try to log in."""
        if self._initialized:
            return

        if not self.config.kuma.url:
            logger.warning(
                "UPTIME_KUMA_URL is not set; tool calls will fail until the server is configured"
            )
            return

        client = self._client or KumaClient(self.config.kuma)
        self._services['kuma_client'] = client
        self._services['monitor_service'] = MonitorService(client, self.config)
        self._initialized = True
        logger.info(f"Service container initialized with {len(self._services)} services")

        if not self.config.kuma.has_credentials():
            logger.warning("No Uptime Kuma credentials configured; skipping login at startup")
            return

        try:
            await client.connect()
            await client.authenticate()
            logger.info(f"Connected to Uptime Kuma at {self.config.kuma.url}")
        except KumaAPIError as e:
            logger.warning(f"Failed to initialize Uptime Kuma client: {e}")

    def get_service(self, service_name: str, service_type: Optional[Type[T]] = None) -> T:
        """Get a service instance by name.

        Raises:
            KeyError: If service is not found
            RuntimeError: If container is not initialized
        """
        if not self._initialized:
            raise RuntimeError("Service container not initialized. Call initialize() first.")

        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found in container")

        return self._services[service_name]

    def is_initialized(self) -> bool:
        return self._initialized

    async def shutdown(self) -> None:
        """Disconnect the client and drop all services."""
        client = self._services.get('kuma_client')
        try:
            if client is not None:
                await client.disconnect()
        finally:
            self._services.clear()
            self._initialized = False
            logger.info("Service container shutdown completed")
