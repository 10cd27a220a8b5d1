"""Pytest configuration and shared fixtures."""

import os
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
import socketio

from kuma_mcp_server.api_client import KumaClient
from kuma_mcp_server.config import AppConfig, KumaConfig
from kuma_mcp_server.services.monitor_service import MonitorService

# Disable logging during tests to reduce noise
logging.disable(logging.CRITICAL)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret1"
API_TOKEN = "token-123"


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    env_vars_to_clean = [
        "UPTIME_KUMA_URL",
        "UPTIME_KUMA_PORT",
        "UPTIME_KUMA_USERNAME",
        "UPTIME_KUMA_PASSWORD",
        "UPTIME_KUMA_API_KEY",
        "UPTIME_KUMA_REQUEST_TIMEOUT",
        "LOG_LEVEL",
    ]

    # Store original values
    original_values = {}
    for var in env_vars_to_clean:
        original_values[var] = os.environ.get(var)
        if var in os.environ:
            del os.environ[var]

    yield

    # Restore original values
    for var, value in original_values.items():
        if value is not None:
            os.environ[var] = value
        elif var in os.environ:
            del os.environ[var]


class FakeSocket:
    """In-memory stand-in for ``socketio.AsyncClient``.

    ``responders`` maps an event name to either a fixed acknowledgment or a
    callable computing one from the emitted data. An event without a
    responder never acknowledges, which surfaces as a Socket.IO timeout.
    ``getMonitorList`` is acknowledged with ``list_ack`` and followed by a
    ``monitorList`` push of ``monitor_list`` unless that is ``None``.
    """

    def __init__(self):
        self.connected = False
        self.handlers: Dict[str, Dict[str, Callable[..., Any]]] = {"/": {}}
        self.responders: Dict[str, Any] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.connect_urls: List[str] = []
        self.connect_error: Optional[Exception] = None
        self.list_ack: Any = {"ok": True}
        self.monitor_list: Any = None

    def on(self, event, handler=None):
        self.handlers["/"][event] = handler

    async def connect(self, url, wait_timeout=None, **kwargs):
        self.connect_urls.append(url)
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True
        self.push("connect")

    async def call(self, event, data=None, timeout=None, **kwargs):
        if not self.connected:
            raise socketio.exceptions.BadNamespaceError("/ is not a connected namespace.")
        self.calls.append((event, data))

        responder = self.responders.get(event)
        if responder is None:
            raise socketio.exceptions.TimeoutError()
        return responder(data) if callable(responder) else responder

    async def emit(self, event, data=None, callback=None, **kwargs):
        if not self.connected:
            raise socketio.exceptions.BadNamespaceError("/ is not a connected namespace.")
        self.calls.append((event, data))

        if event == "getMonitorList":
            if callback is not None:
                callback(self.list_ack)
            payload = self.monitor_list() if callable(self.monitor_list) else self.monitor_list
            if payload is not None:
                self.push("monitorList", payload)

    async def disconnect(self):
        self.connected = False
        self.push("disconnect")

    def push(self, event, *args):
        """Deliver a server-initiated event to the registered handler."""
        handler = self.handlers["/"].get(event)
        if handler is not None:
            handler(*args)

    def events(self) -> List[str]:
        return [event for event, _ in self.calls]


class FakeKumaBackend:
    """Minimal monitor store answering the Uptime Kuma events over a FakeSocket."""

    def __init__(self, sio: FakeSocket):
        self.sio = sio
        self.monitors: Dict[int, Dict[str, Any]] = {}
        self.next_id = 1
        self.needs_setup = False

        sio.responders.update({
            "login": self.login,
            "loginByToken": self.login_by_token,
            "add": self.add,
            "getMonitor": self.get_monitor,
            "editMonitor": self.edit_monitor,
            "deleteMonitor": self.delete_monitor,
            "pauseMonitor": lambda monitor_id: self._set_active(monitor_id, False, "Paused Successfully."),
            "resumeMonitor": lambda monitor_id: self._set_active(monitor_id, True, "Resumed Successfully."),
            "needSetup": lambda data: self.needs_setup,
            "setup": self.setup,
        })
        sio.monitor_list = lambda: {str(k): dict(v) for k, v in self.monitors.items()}

    def login(self, data):
        if data == {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}:
            return {"ok": True, "token": "jwt"}
        return {"ok": False, "msg": "Incorrect username or password."}

    def login_by_token(self, token):
        if token == API_TOKEN:
            return {"ok": True}
        return {"ok": False, "msg": "Invalid token"}

    def add(self, payload):
        monitor_id = self.next_id
        self.next_id += 1
        self.monitors[monitor_id] = {"active": True, **payload, "id": monitor_id}
        return {"ok": True, "msg": "Added Successfully.", "monitorID": monitor_id}

    def get_monitor(self, monitor_id):
        if monitor_id not in self.monitors:
            return {"ok": False, "msg": "Monitor not found"}
        return {"ok": True, "monitor": dict(self.monitors[monitor_id])}

    def edit_monitor(self, payload):
        monitor_id = payload.get("id")
        if monitor_id not in self.monitors:
            return {"ok": False, "msg": "Monitor not found"}
        self.monitors[monitor_id] = dict(payload)
        return {"ok": True, "msg": "Saved.", "monitorID": monitor_id}

    def delete_monitor(self, monitor_id):
        if self.monitors.pop(monitor_id, None) is None:
            return {"ok": False, "msg": "Monitor not found"}
        return {"ok": True, "msg": "Deleted Successfully."}

    def _set_active(self, monitor_id, active, msg):
        if monitor_id not in self.monitors:
            return {"ok": False, "msg": "Monitor not found"}
        self.monitors[monitor_id]["active"] = active
        return {"ok": True, "msg": msg}

    def setup(self, data):
        username, password = data
        self.needs_setup = False
        return {"ok": True, "msg": "Added Successfully."}

    def seed(self, **fields) -> int:
        """Store a monitor directly, bypassing the client."""
        monitor_id = self.next_id
        self.next_id += 1
        self.monitors[monitor_id] = {"type": "http", "active": True, **fields, "id": monitor_id}
        return monitor_id


@pytest.fixture
def kuma_config():
    """Password-authenticated configuration with a short list timeout."""
    return KumaConfig(
        url="http://kuma.test:3001",
        username=ADMIN_USERNAME,
        password=ADMIN_PASSWORD,
        list_timeout=0.2,
    )


@pytest.fixture
def app_config(kuma_config):
    return AppConfig(kuma=kuma_config)


@pytest.fixture
def fake_socket():
    return FakeSocket()


@pytest.fixture
def backend(fake_socket):
    return FakeKumaBackend(fake_socket)


@pytest.fixture
def kuma_client(kuma_config, fake_socket, backend):
    return KumaClient(kuma_config, sio=fake_socket)


@pytest.fixture
def monitor_service(kuma_client, app_config):
    return MonitorService(kuma_client, app_config)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
