"""Uptime Kuma Socket.IO client.

Uptime Kuma has no REST API for monitor management; its web UI drives
everything through Socket.IO events acknowledged with ``{"ok": ..., "msg":
...}``. ``KumaClient`` turns each of those exchanges into one awaitable call
with a uniform failure contract.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import socketio

from .config import KumaConfig
from .services.models.monitors import Monitor

MONITOR_LIST_EVENT = "monitorList"


class KumaAPIError(Exception):
    """Base exception for failures talking to Uptime Kuma."""

    error_type = "remote_error"

    def __init__(self, message: str, operation: Optional[str] = None, response_data: Optional[Any] = None):
        super().__init__(message)
        self.operation = operation
        self.response_data = response_data


class KumaConnectionError(KumaAPIError):
    """The Socket.IO transport could not be established or was lost."""

    error_type = "connection_error"


class KumaAuthenticationError(KumaAPIError):
    """Login was rejected or no credentials are configured."""

    error_type = "authentication_error"


class KumaOperationError(KumaAPIError):
    """An acknowledgment reported failure or lacked an expected field."""

    error_type = "remote_error"


class KumaTimeoutError(KumaOperationError):
    """No answer arrived before the local deadline."""

    error_type = "timeout_error"


def _is_ok(response: Any) -> bool:
    return isinstance(response, dict) and bool(response.get("ok"))


def _remote_message(response: Any) -> str:
    if isinstance(response, dict) and response.get("msg"):
        return str(response["msg"])
    return "Unknown error"


class KumaClient:
    """One persistent Socket.IO session with lazy (re-)authentication.

    Callers are expected to issue operations sequentially; the
    ``authenticated`` flag is not guarded against overlapping calls.
    """

    def __init__(self, config: KumaConfig, sio: Optional[Any] = None):
        self.config = config
        self.sio = sio if sio is not None else socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=config.reconnection_attempts,
            reconnection_delay=config.reconnection_delay,
        )
        self.authenticated = False
        self.logger = logging.getLogger(__name__)

        self.sio.on("disconnect", self._on_disconnect)

    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    def _on_disconnect(self, *args) -> None:
        if self.authenticated:
            self.logger.warning("Disconnected from Uptime Kuma; session must re-authenticate")
        self.authenticated = False

    async def connect(self) -> None:
        """Open the Socket.IO connection unless it is already up."""
        if self.connected:
            return

        if not self.config.url:
            raise KumaConnectionError("Connection failed: no Uptime Kuma URL configured", operation="connect")

        self.logger.debug(f"Connecting to Uptime Kuma at {self.config.url}")
        try:
            await self.sio.connect(self.config.url, wait_timeout=self.config.connect_timeout)
        except socketio.exceptions.ConnectionError as e:
            raise KumaConnectionError(f"Connection failed: {e}", operation="connect") from e

        self.logger.info(f"Connected to Uptime Kuma at {self.config.url}")

    async def authenticate(self) -> None:
        """Log in with the API token, or the username/password pair."""
        if not self.connected:
            await self.connect()

        if self.authenticated:
            return

        if self.config.api_key:
            event, data = "loginByToken", self.config.api_key
        elif self.config.username and self.config.password:
            event, data = "login", {
                "username": self.config.username,
                "password": self.config.password,
            }
        else:
            raise KumaAuthenticationError("No authentication credentials provided", operation="login")

        response = await self._emit_with_ack(event, data, operation="login")
        if not _is_ok(response):
            raise KumaAuthenticationError(
                f"Authentication failed: {_remote_message(response)}",
                operation="login",
                response_data=response,
            )

        self.authenticated = True
        self.logger.info(f"Authenticated with Uptime Kuma via {event}")

    async def ensure_authenticated(self) -> None:
        if not self.authenticated or not self.connected:
            await self.authenticate()

    async def _emit_with_ack(self, event: str, data: Any = None, operation: str = "") -> Any:
        """Emit ``event`` and wait for its single acknowledgment."""
        try:
            return await self.sio.call(event, data, timeout=self.config.request_timeout)
        except socketio.exceptions.TimeoutError as e:
            raise KumaTimeoutError(
                f"Timeout waiting for {operation or event} response", operation=operation
            ) from e
        except socketio.exceptions.SocketIOError as e:
            raise KumaConnectionError(f"Socket not connected: {e}", operation=operation) from e

    async def _call(self, event: str, data: Any = None, operation: str = "") -> Dict[str, Any]:
        """Authenticated request whose not-ok acknowledgment becomes an error."""
        await self.ensure_authenticated()

        self.logger.debug(f"Emitting {event} ({operation})")
        response = await self._emit_with_ack(event, data, operation=operation)
        if not _is_ok(response):
            raise KumaOperationError(
                f"Failed to {operation}: {_remote_message(response)}",
                operation=operation,
                response_data=response,
            )
        return response

    async def add_monitor(self, payload: Dict[str, Any]) -> int:
        """Create a monitor and return the ID Uptime Kuma assigned to it."""
        response = await self._call("add", payload, operation="add monitor")
        monitor_id = response.get("monitorID")
        if not monitor_id:
            raise KumaOperationError(
                f"Failed to add monitor: {_remote_message(response)}",
                operation="add monitor",
                response_data=response,
            )
        return int(monitor_id)

    async def get_monitor(self, monitor_id: int) -> Monitor:
        response = await self._call("getMonitor", monitor_id, operation="get monitor")
        monitor = response.get("monitor")
        if not monitor:
            raise KumaOperationError(
                f"Failed to get monitor: {_remote_message(response)}",
                operation="get monitor",
                response_data=response,
            )
        return Monitor.model_validate(monitor)

    async def edit_monitor(self, payload: Dict[str, Any]) -> None:
        await self._call("editMonitor", payload, operation="update monitor")

    async def delete_monitor(self, monitor_id: int) -> None:
        await self._call("deleteMonitor", monitor_id, operation="remove monitor")

    async def pause_monitor(self, monitor_id: int) -> None:
        await self._call("pauseMonitor", monitor_id, operation="pause monitor")

    async def resume_monitor(self, monitor_id: int) -> None:
        await self._call("resumeMonitor", monitor_id, operation="resume monitor")

    def _add_listener(self, event: str, handler: Callable[..., Any]) -> None:
        self.sio.on(event, handler)

    def _remove_listener(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self.sio.handlers.get("/", {})
        if handlers.get(event) is handler:
            del handlers[event]

    async def list_monitors(self) -> List[Monitor]:
        """Fetch every monitor.

        ``getMonitorList`` is acknowledged with a bare ``ok``; the monitors
        themselves arrive afterwards as a ``monitorList`` push carrying an
        ``{id: monitor}`` mapping. The call resolves on the first push, fails
        on a not-ok acknowledgment, or times out after ``list_timeout``.
        """
        await self.ensure_authenticated()

        loop = asyncio.get_running_loop()
        received: "asyncio.Future[Dict[str, Any]]" = loop.create_future()

        def on_monitor_list(data):
            if not received.done():
                received.set_result(data or {})

        def on_ack(*args):
            response = args[0] if args else None
            if not _is_ok(response) and not received.done():
                received.set_exception(KumaOperationError(
                    f"Failed to request monitors: {_remote_message(response)}",
                    operation="list monitors",
                    response_data=response,
                ))

        self._add_listener(MONITOR_LIST_EVENT, on_monitor_list)
        try:
            await self.sio.emit("getMonitorList", callback=on_ack)
            data = await asyncio.wait_for(received, timeout=self.config.list_timeout)
        except asyncio.TimeoutError as e:
            raise KumaTimeoutError("Timeout waiting for monitor list", operation="list monitors") from e
        except socketio.exceptions.SocketIOError as e:
            raise KumaConnectionError(f"Socket not connected: {e}", operation="list monitors") from e
        finally:
            self._remove_listener(MONITOR_LIST_EVENT, on_monitor_list)

        self.logger.debug(f"Received {len(data)} monitors")
        return [Monitor.model_validate(record) for record in data.values()]

    async def need_setup(self) -> bool:
        """Whether the instance still has no admin account."""
        if not self.connected:
            await self.connect()
        return bool(await self._emit_with_ack("needSetup", operation="check setup"))

    async def setup(self, username: str, password: str) -> None:
        """Create the first admin account on a fresh instance."""
        if not self.connected:
            await self.connect()
        response = await self._emit_with_ack("setup", (username, password), operation="set up")
        if not _is_ok(response):
            raise KumaOperationError(
                f"Setup failed: {_remote_message(response)}", operation="set up", response_data=response
            )

    async def disconnect(self) -> None:
        if self.connected:
            await self.sio.disconnect()
        self.authenticated = False
