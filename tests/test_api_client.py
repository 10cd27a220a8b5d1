"""Tests for the Uptime Kuma Socket.IO client."""

import pytest
import socketio

from kuma_mcp_server.api_client import (
    KumaAuthenticationError,
    KumaClient,
    KumaConnectionError,
    KumaOperationError,
    KumaTimeoutError,
)
from kuma_mcp_server.config import KumaConfig


class TestConnection:

    @pytest.mark.asyncio
    async def test_connect_uses_configured_url(self, kuma_client, fake_socket):
        await kuma_client.connect()

        assert kuma_client.connected
        assert fake_socket.connect_urls == ["http://kuma.test:3001"]

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, kuma_client, fake_socket):
        await kuma_client.connect()
        await kuma_client.connect()

        assert len(fake_socket.connect_urls) == 1

    @pytest.mark.asyncio
    async def test_connect_without_url(self, fake_socket):
        client = KumaClient(KumaConfig(username="admin", password="secret1"), sio=fake_socket)

        with pytest.raises(KumaConnectionError, match="no Uptime Kuma URL configured"):
            await client.connect()

    @pytest.mark.asyncio
    async def test_connect_failure_is_wrapped(self, kuma_client, fake_socket):
        fake_socket.connect_error = socketio.exceptions.ConnectionError("Connection refused by the server")

        with pytest.raises(KumaConnectionError) as exc_info:
            await kuma_client.connect()

        assert str(exc_info.value).startswith("Connection failed:")
        assert exc_info.value.error_type == "connection_error"

    @pytest.mark.asyncio
    async def test_emit_on_closed_socket(self, kuma_client):
        with pytest.raises(KumaConnectionError, match="Socket not connected"):
            await kuma_client._emit_with_ack("getMonitor", 1, operation="get monitor")


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_password_login(self, kuma_client, fake_socket):
        await kuma_client.authenticate()

        assert kuma_client.authenticated
        assert fake_socket.calls == [("login", {"username": "admin", "password": "secret1"})]

    @pytest.mark.asyncio
    async def test_token_preferred_over_password(self, fake_socket, backend):
        config = KumaConfig(
            url="http://kuma.test:3001", username="admin", password="secret1", api_key="token-123"
        )
        client = KumaClient(config, sio=fake_socket)

        await client.authenticate()

        assert fake_socket.calls == [("loginByToken", "token-123")]
        assert client.authenticated

    @pytest.mark.asyncio
    async def test_no_credentials(self, fake_socket, backend):
        client = KumaClient(KumaConfig(url="http://kuma.test:3001"), sio=fake_socket)

        with pytest.raises(KumaAuthenticationError, match="No authentication credentials provided"):
            await client.authenticate()

        assert client.connected
        assert not client.authenticated

    @pytest.mark.asyncio
    async def test_username_without_password_is_not_enough(self, fake_socket, backend):
        client = KumaClient(KumaConfig(url="http://kuma.test:3001", username="admin"), sio=fake_socket)

        with pytest.raises(KumaAuthenticationError):
            await client.authenticate()

        assert fake_socket.calls == []

    @pytest.mark.asyncio
    async def test_rejected_login(self, fake_socket, backend):
        config = KumaConfig(url="http://kuma.test:3001", username="admin", password="wrong")
        client = KumaClient(config, sio=fake_socket)

        with pytest.raises(KumaAuthenticationError) as exc_info:
            await client.authenticate()

        assert str(exc_info.value) == "Authentication failed: Incorrect username or password."
        assert not client.authenticated

    @pytest.mark.asyncio
    async def test_rejected_login_without_message(self, kuma_client, fake_socket):
        fake_socket.responders["login"] = {"ok": False}

        with pytest.raises(KumaAuthenticationError, match="Authentication failed: Unknown error"):
            await kuma_client.authenticate()

    @pytest.mark.asyncio
    async def test_authenticate_once(self, kuma_client, fake_socket):
        await kuma_client.authenticate()
        await kuma_client.authenticate()

        assert fake_socket.events() == ["login"]

    @pytest.mark.asyncio
    async def test_operations_authenticate_lazily(self, kuma_client, fake_socket, backend):
        monitor_id = backend.seed(name="Site", url="https://example.com")

        monitor = await kuma_client.get_monitor(monitor_id)

        assert monitor.name == "Site"
        assert fake_socket.events() == ["login", "getMonitor"]

    @pytest.mark.asyncio
    async def test_disconnect_clears_authentication(self, kuma_client, fake_socket, backend):
        monitor_id = backend.seed(name="Site")
        await kuma_client.authenticate()

        await fake_socket.disconnect()
        assert not kuma_client.authenticated

        await kuma_client.get_monitor(monitor_id)

        assert fake_socket.events() == ["login", "login", "getMonitor"]
        assert len(fake_socket.connect_urls) == 2

    @pytest.mark.asyncio
    async def test_client_disconnect(self, kuma_client):
        await kuma_client.authenticate()

        await kuma_client.disconnect()

        assert not kuma_client.connected
        assert not kuma_client.authenticated


class TestMonitorOperations:

    @pytest.mark.asyncio
    async def test_add_monitor_returns_assigned_id(self, kuma_client, backend):
        monitor_id = await kuma_client.add_monitor({"name": "Site", "type": "http", "url": "https://x"})

        assert monitor_id == 1
        assert backend.monitors[1]["url"] == "https://x"

    @pytest.mark.asyncio
    async def test_add_monitor_rejected(self, kuma_client, fake_socket):
        fake_socket.responders["add"] = {"ok": False, "msg": "Invalid URL"}

        with pytest.raises(KumaOperationError) as exc_info:
            await kuma_client.add_monitor({"name": "Site", "type": "http"})

        assert str(exc_info.value) == "Failed to add monitor: Invalid URL"
        assert exc_info.value.error_type == "remote_error"
        assert exc_info.value.response_data == {"ok": False, "msg": "Invalid URL"}

    @pytest.mark.asyncio
    async def test_add_monitor_without_id_in_ack(self, kuma_client, fake_socket):
        fake_socket.responders["add"] = {"ok": True}

        with pytest.raises(KumaOperationError, match="Failed to add monitor"):
            await kuma_client.add_monitor({"name": "Site", "type": "push"})

    @pytest.mark.asyncio
    async def test_get_missing_monitor(self, kuma_client):
        with pytest.raises(KumaOperationError) as exc_info:
            await kuma_client.get_monitor(99)

        assert str(exc_info.value) == "Failed to get monitor: Monitor not found"

    @pytest.mark.asyncio
    async def test_edit_monitor(self, kuma_client, backend):
        monitor_id = backend.seed(name="Site")

        await kuma_client.edit_monitor({"id": monitor_id, "name": "Renamed", "type": "http"})

        assert backend.monitors[monitor_id]["name"] == "Renamed"

    @pytest.mark.asyncio
    async def test_edit_failure_message(self, kuma_client, fake_socket):
        fake_socket.responders["editMonitor"] = {"ok": False, "msg": "Permission denied"}

        with pytest.raises(KumaOperationError, match="Failed to update monitor: Permission denied"):
            await kuma_client.edit_monitor({"id": 1})

    @pytest.mark.asyncio
    async def test_delete_pause_resume(self, kuma_client, fake_socket, backend):
        monitor_id = backend.seed(name="Site")

        await kuma_client.pause_monitor(monitor_id)
        assert backend.monitors[monitor_id]["active"] is False

        await kuma_client.resume_monitor(monitor_id)
        assert backend.monitors[monitor_id]["active"] is True

        await kuma_client.delete_monitor(monitor_id)
        assert monitor_id not in backend.monitors

        assert fake_socket.calls[1:] == [
            ("pauseMonitor", monitor_id),
            ("resumeMonitor", monitor_id),
            ("deleteMonitor", monitor_id),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,operation",
        [
            ("delete_monitor", "remove monitor"),
            ("pause_monitor", "pause monitor"),
            ("resume_monitor", "resume monitor"),
        ],
    )
    async def test_failure_names_operation(self, kuma_client, method, operation):
        with pytest.raises(KumaOperationError) as exc_info:
            await getattr(kuma_client, method)(42)

        assert str(exc_info.value) == f"Failed to {operation}: Monitor not found"
        assert exc_info.value.operation == operation

    @pytest.mark.asyncio
    async def test_unacknowledged_request_times_out(self, kuma_client, fake_socket):
        del fake_socket.responders["getMonitor"]

        with pytest.raises(KumaTimeoutError) as exc_info:
            await kuma_client.get_monitor(1)

        assert str(exc_info.value) == "Timeout waiting for get monitor response"
        assert exc_info.value.error_type == "timeout_error"


class TestFirstRunSetup:

    @pytest.mark.asyncio
    async def test_need_setup(self, kuma_client, backend):
        backend.needs_setup = True

        assert await kuma_client.need_setup() is True

    @pytest.mark.asyncio
    async def test_setup_sends_credentials(self, kuma_client, fake_socket, backend):
        backend.needs_setup = True

        await kuma_client.setup("admin", "secret1")

        assert fake_socket.calls == [("setup", ("admin", "secret1"))]
        assert backend.needs_setup is False

    @pytest.mark.asyncio
    async def test_setup_rejected(self, kuma_client, fake_socket):
        fake_socket.responders["setup"] = {"ok": False, "msg": "Uptime Kuma has been initialized."}

        with pytest.raises(KumaOperationError, match="Setup failed: Uptime Kuma has been initialized."):
            await kuma_client.setup("admin", "secret1")
