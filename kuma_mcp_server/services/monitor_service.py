"""Monitor service - create, edit, inspect and search Uptime Kuma monitors."""

import re
from typing import Any, Dict, List

from ..api_client import KumaAPIError
from .base import BaseService, PatternError, ServiceResult
from .models.monitors import (
    Monitor,
    MonitorConfig,
    MonitorSummary,
    UpdateMonitorInput,
)
from .monitor_fields import transform_monitor_payload


class MonitorService(BaseService):
    """Monitor operations on top of the Socket.IO client."""

    async def add_monitor(self, monitor: MonitorConfig) -> ServiceResult[Monitor]:
        """Create a monitor.

        The result echoes the validated configuration (defaults included)
        with the ID Uptime Kuma assigned.
        """

        async def _operation():
            config = monitor.to_payload()
            monitor_id = await self.kuma.add_monitor(transform_monitor_payload(config))
            self.logger.info(f"Created monitor {monitor_id} ({config['name']})")
            return Monitor.model_validate({**config, "id": monitor_id})

        return await self._execute_with_error_handling(_operation, "add_monitor")

    async def update_monitor(self, update: UpdateMonitorInput) -> ServiceResult[Monitor]:
        """Apply a partial update and return the monitor as stored afterwards.

        The stored record is fetched, the projected update is merged over it
        and submitted, and the monitor is fetched again. A failure at any
        step fails the whole update.
        """

        async def _operation():
            existing = await self.kuma.get_monitor(update.id)
            payload = {
                **existing.model_dump(),
                **transform_monitor_payload(update.to_payload()),
            }
            await self.kuma.edit_monitor(payload)

            try:
                return await self.kuma.get_monitor(update.id)
            except KumaAPIError as e:
                raise type(e)(
                    f"Failed to fetch updated monitor after edit: {e}",
                    operation="update monitor",
                    response_data=e.response_data,
                ) from e

        return await self._execute_with_error_handling(_operation, "update_monitor")

    async def remove_monitor(self, monitor_id: int) -> ServiceResult[str]:
        async def _operation():
            await self.kuma.delete_monitor(monitor_id)
            return f"Monitor {monitor_id} removed successfully"

        return await self._execute_with_error_handling(_operation, "remove_monitor")

    async def pause_monitor(self, monitor_id: int) -> ServiceResult[str]:
        async def _operation():
            await self.kuma.pause_monitor(monitor_id)
            return f"Monitor {monitor_id} paused successfully"

        return await self._execute_with_error_handling(_operation, "pause_monitor")

    async def resume_monitor(self, monitor_id: int) -> ServiceResult[str]:
        async def _operation():
            await self.kuma.resume_monitor(monitor_id)
            return f"Monitor {monitor_id} resumed successfully"

        return await self._execute_with_error_handling(_operation, "resume_monitor")

    async def get_monitor(self, monitor_id: int) -> ServiceResult[Monitor]:
        return await self._execute_with_error_handling(
            lambda: self.kuma.get_monitor(monitor_id), "get_monitor"
        )

    async def list_monitors(self) -> ServiceResult[List[Monitor]]:
        return await self._execute_with_error_handling(self.kuma.list_monitors, "list_monitors")

    async def find_monitors_by_name(
        self, search_term: str, use_regex: bool = False
    ) -> ServiceResult[List[MonitorSummary]]:
        """Search monitor names client-side.

        Plain terms match as case-insensitive substrings; with ``use_regex``
        the term is a case-insensitive pattern searched anywhere in the name.
        A pattern that does not compile fails before anything is fetched.
        """

        async def _operation():
            matches = build_name_matcher(search_term, use_regex)
            monitors = await self.kuma.list_monitors()
            return [
                MonitorSummary.from_monitor(monitor)
                for monitor in monitors
                if matches(monitor.name)
            ]

        return await self._execute_with_error_handling(_operation, "find_monitors_by_name")

    async def remove_all_monitors(self) -> ServiceResult[Dict[str, Any]]:
        """Delete every monitor, carrying on past individual failures."""

        async def _operation():
            monitors = await self.kuma.list_monitors()
            removed = 0
            failed: List[int] = []
            for monitor in monitors:
                try:
                    await self.kuma.delete_monitor(monitor.id)
                    removed += 1
                except KumaAPIError as e:
                    self.logger.warning(f"Failed to delete monitor {monitor.id}: {e}")
                    failed.append(monitor.id)
            self.logger.info(f"Cleaned up {removed} monitor(s)")
            return {"total": len(monitors), "removed": removed, "failed": failed}

        return await self._execute_with_error_handling(_operation, "remove_all_monitors")


def build_name_matcher(search_term: str, use_regex: bool = False):
    """Return a predicate over monitor names for the given search."""
    if use_regex:
        try:
            pattern = re.compile(search_term, re.IGNORECASE)
        except re.error as e:
            raise PatternError(f"Invalid regular expression pattern: {e}") from e
        return lambda name: bool(pattern.search(name or ""))

    needle = search_term.lower()
    return lambda name: needle in (name or "").lower()
