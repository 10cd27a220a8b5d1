"""Tests for the Uptime Kuma HTTP readiness probe."""

import pytest
import requests

from kuma_mcp_server.api_client import KumaConnectionError
from kuma_mcp_server.utils.readiness import wait_for_kuma

URL = "http://localhost:3001"


def test_ready_immediately(requests_mock):
    requests_mock.get(URL, status_code=200)

    assert wait_for_kuma(URL, timeout=1, interval=0) == 200
    assert requests_mock.call_count == 1


def test_redirect_or_not_found_counts_as_ready(requests_mock):
    requests_mock.get(URL, status_code=302, headers={"Location": "/setup"})

    assert wait_for_kuma(URL, timeout=1, interval=0) == 302


def test_retries_until_ready(requests_mock):
    requests_mock.get(URL, [{"status_code": 503}, {"exc": requests.exceptions.ConnectionError}, {"status_code": 404}])

    assert wait_for_kuma(URL, timeout=5, interval=0) == 404
    assert requests_mock.call_count == 3


def test_gives_up_after_timeout(requests_mock):
    requests_mock.get(URL, exc=requests.exceptions.ConnectionError)

    with pytest.raises(KumaConnectionError) as exc_info:
        wait_for_kuma(URL, timeout=0.05, interval=0.01)

    assert str(exc_info.value) == "Timed out waiting for Uptime Kuma after 0.05 seconds"


def test_server_errors_are_not_ready(requests_mock):
    requests_mock.get(URL, status_code=500)

    with pytest.raises(KumaConnectionError):
        wait_for_kuma(URL, timeout=0.05, interval=0.01)
