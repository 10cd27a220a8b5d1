"""Pydantic models for monitor configuration and results."""

from .monitors import (
    MONITOR_TYPE_REQUIRED_FIELDS,
    FindMonitorsByNameInput,
    ListMonitorsInput,
    Monitor,
    MonitorConfig,
    MonitorIdInput,
    MonitorSummary,
    MonitorType,
    UpdateMonitorInput,
    missing_required_fields,
)

__all__ = [
    "MONITOR_TYPE_REQUIRED_FIELDS",
    "FindMonitorsByNameInput",
    "ListMonitorsInput",
    "Monitor",
    "MonitorConfig",
    "MonitorIdInput",
    "MonitorSummary",
    "MonitorType",
    "UpdateMonitorInput",
    "missing_required_fields",
]
