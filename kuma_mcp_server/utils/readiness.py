"""HTTP readiness probe for a freshly started Uptime Kuma instance."""

import logging
import time
from typing import Optional

import requests

from ..api_client import KumaConnectionError

logger = logging.getLogger(__name__)


def wait_for_kuma(
    url: str,
    timeout: float = 10.0,
    interval: float = 0.5,
    session: Optional[requests.Session] = None,
) -> int:
    """
    Poll the Uptime Kuma web endpoint until it answers.

    Any response below 500 counts as ready, including 404 or the redirect
    to the setup page served before the first account exists.

    Args:
        url: Base URL of the Uptime Kuma instance
        timeout: Seconds to keep polling
        interval: Seconds between attempts
        session: Optional requests session (tests pass a mocked one)

    Returns:
        HTTP status code of the first ready response

    Raises:
        KumaConnectionError: If the endpoint did not become ready in time
    """
    http = session or requests.Session()
    deadline = time.monotonic() + timeout
    attempt = 0

    while True:
        attempt += 1
        try:
            response = http.get(url, timeout=max(interval, 1.0), allow_redirects=False)
            if response.status_code < 500:
                logger.debug(f"Uptime Kuma ready after {attempt} attempt(s): HTTP {response.status_code}")
                return response.status_code
            logger.debug(f"Uptime Kuma not ready yet: HTTP {response.status_code}")
        except requests.exceptions.RequestException as e:
            logger.debug(f"Uptime Kuma not reachable yet: {e}")

        if time.monotonic() >= deadline:
            raise KumaConnectionError(
                f"Timed out waiting for Uptime Kuma after {timeout:g} seconds",
                operation="wait for server",
            )
        time.sleep(interval)
