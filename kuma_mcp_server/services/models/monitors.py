"""Monitor configuration models and per-type validation rules."""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MonitorType(str, Enum):
    """Monitor kinds understood by Uptime Kuma."""

    HTTP = "http"
    PORT = "port"
    PING = "ping"
    KEYWORD = "keyword"
    GRPC_KEYWORD = "grpc-keyword"
    JSON_QUERY = "json-query"
    DNS = "dns"
    DOCKER = "docker"
    PUSH = "push"
    STEAM = "steam"
    MQTT = "mqtt"
    KAFKA_PRODUCER = "kafka-producer"
    SQLSERVER = "sqlserver"
    POSTGRES = "postgres"
    MYSQL = "mysql"
    MONGODB = "mongodb"
    RADIUS = "radius"
    REDIS = "redis"
    GROUP = "group"
    GAMEDIG = "gamedig"
    TAILSCALE_PING = "tailscale-ping"


_URL = frozenset({"url"})
_HOST = frozenset({"hostname"})
_HOST_PORT = frozenset({"hostname", "port"})

MONITOR_TYPE_REQUIRED_FIELDS: Mapping[MonitorType, FrozenSet[str]] = MappingProxyType({
    MonitorType.HTTP: _URL,
    MonitorType.JSON_QUERY: frozenset({"url", "jsonPath", "jsonPathOperator", "expectedValue"}),
    MonitorType.KEYWORD: frozenset({"url", "keyword"}),
    MonitorType.GRPC_KEYWORD: frozenset({"url", "keyword"}),
    MonitorType.PORT: _HOST_PORT,
    MonitorType.PING: _HOST,
    MonitorType.DNS: _HOST,
    MonitorType.DOCKER: _HOST,
    MonitorType.PUSH: frozenset(),
    MonitorType.STEAM: _HOST_PORT,
    MonitorType.MQTT: _HOST_PORT,
    MonitorType.KAFKA_PRODUCER: _HOST_PORT,
    MonitorType.SQLSERVER: _HOST_PORT,
    MonitorType.POSTGRES: _HOST_PORT,
    MonitorType.MYSQL: _HOST_PORT,
    MonitorType.MONGODB: _HOST_PORT,
    MonitorType.RADIUS: _HOST_PORT,
    MonitorType.REDIS: _HOST_PORT,
    MonitorType.GROUP: frozenset(),
    MonitorType.GAMEDIG: _HOST_PORT,
    MonitorType.TAILSCALE_PING: _HOST,
})


def missing_required_fields(monitor_type: MonitorType, values: Mapping[str, Any]) -> List[str]:
    """Return one message per required attribute that is unset for the type.

    Only ``None``/absent counts as unset; ``0``, ``""`` and ``False`` are
    values the caller chose.
    """
    monitor_type = MonitorType(monitor_type)
    return [
        f"{field} is required for {monitor_type.value} monitor type"
        for field in sorted(MONITOR_TYPE_REQUIRED_FIELDS[monitor_type])
        if values.get(field) is None
    ]


JsonPathOperator = Literal["==", "!=", ">", ">=", "<", "<=", "contains"]


class MonitorConfig(BaseModel):
    """Full monitor configuration as accepted by ``add_monitor``."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    name: str = Field(..., description="Name of the monitor")
    type: MonitorType = Field(..., description="Type of monitor")
    url: Optional[str] = Field(None, description="URL to monitor (for HTTP monitors)")
    hostname: Optional[str] = Field(None, description="Hostname to monitor")
    port: Optional[int] = Field(None, description="Port number to monitor")
    interval: int = Field(60, description="Heartbeat interval in seconds (default: 60)")
    retryInterval: int = Field(60, description="Heartbeat retry interval in seconds (default: 60)")
    maxretries: int = Field(
        0, description="Maximum retries before the service is marked as down and a notification is sent"
    )
    resendInterval: int = Field(
        0, description="Resend Notification if Down X times consecutively (default: 0 - no resend)"
    )
    notificationIDList: Dict[str, Any] = Field(
        default_factory=dict, description="Object mapping notification IDs to their settings"
    )
    active: bool = Field(True, description="Whether the monitor is active (default: true)")
    requestTimeout: float = Field(48, description="Request timeout in seconds (default: 48)")
    method: Optional[str] = Field(None, description="HTTP method (GET, POST, etc.)")
    headers: Optional[str] = Field(None, description="HTTP headers as JSON string")
    body: Optional[str] = Field(None, description="HTTP request body")
    keyword: Optional[str] = Field(None, description="Keyword to search for in response")
    invertKeyword: Optional[bool] = Field(None, description="Invert keyword match")
    jsonPath: Optional[str] = Field(
        None, description="JSON path expression to query (for json-query type)"
    )
    jsonPathOperator: Optional[JsonPathOperator] = Field(
        None, description="Comparison operator for JSON query (for json-query type)"
    )
    expectedValue: Optional[str] = Field(
        None, description="Expected value for JSON query comparison (for json-query type)"
    )
    upsideDown: bool = Field(
        False, description="Flip the status upside down. If the service is reachable, it is DOWN"
    )
    expiryNotification: bool = Field(
        False, description="Certificate Expiry Notification - Send notification when TLS certificate expires"
    )
    ignoreTls: bool = Field(False, description="Ignore TLS/SSL errors for HTTPS websites")
    uptimeKumaCachebuster: bool = Field(
        False,
        description="Add the uptime_kuma_cachebuster parameter - Randomly generated parameter to skip caches",
    )
    maxredirects: int = Field(
        10, description="Maximum number of redirects to follow. Set to 0 to disable redirects"
    )
    accepted_statuscodes: List[str] = Field(
        default_factory=lambda: ["200-299"],
        description=(
            "Accepted Status Codes - Select status codes which are considered as a successful "
            'response. Can be ranges (e.g., "200-299") or individual codes (e.g., "200"). '
            'Default: ["200-299"]'
        ),
    )
    ipFamily: Optional[Literal["ipv4", "ipv6"]] = Field(
        None,
        description=(
            "IP Family - Uses the Happy Eyeballs algorithm for determining the IP family. "
            'Omit for auto-select (default), "ipv4" for IPv4 only, "ipv6" for IPv6 only'
        ),
    )
    proxyId: Optional[int] = Field(None, description="Proxy ID to use for this monitor")
    dns_resolve_server: Optional[str] = Field(None, description="DNS server to use for resolution")
    dns_resolve_type: Optional[str] = Field(None, description="DNS record type to query")
    description: Optional[str] = Field(None, description="Monitor description")
    parent: Optional[int] = Field(None, description="Parent monitor ID (for grouping)")
    pathName: Optional[str] = Field(None, description="Path name for the monitor")
    packetSize: int = Field(56, description="Packet Size - Number of data bytes to be sent (default: 56)")
    maxPackets: int = Field(
        1, description="Max Packets - Number of packets to send before stopping (default: 1)"
    )
    numericOutput: bool = Field(
        False,
        description="Numeric Output - If checked, IP addresses will be output instead of symbolic hostnames",
    )
    perPingTimeout: int = Field(
        2,
        description=(
            "Per-Ping Timeout - This is the maximum waiting time (in seconds) before "
            "considering a single ping packet lost"
        ),
    )

    @model_validator(mode="after")
    def check_type_required_fields(self) -> "MonitorConfig":
        problems = missing_required_fields(self.type, self.__dict__)
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def to_payload(self) -> Dict[str, Any]:
        """Dump the configuration, defaults included, for projection."""
        return self.model_dump(mode="json")


class UpdateMonitorInput(BaseModel):
    """Partial monitor configuration for ``update_monitor_by_id``.

    Every attribute except ``id`` is optional and carries no default, so
    only what the caller supplied is merged over the stored monitor.
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    id: int = Field(..., description="ID of the monitor to update")
    name: Optional[str] = Field(None, description="Name of the monitor")
    type: Optional[MonitorType] = Field(None, description="Type of monitor")
    url: Optional[str] = Field(None, description="URL to monitor (for HTTP monitors)")
    hostname: Optional[str] = Field(None, description="Hostname to monitor")
    port: Optional[int] = Field(None, description="Port number to monitor")
    interval: Optional[int] = Field(None, description="Heartbeat interval in seconds")
    retryInterval: Optional[int] = Field(None, description="Heartbeat retry interval in seconds")
    maxretries: Optional[int] = Field(None, description="Maximum retries before the service is marked as down")
    resendInterval: Optional[int] = Field(None, description="Resend Notification if Down X times consecutively")
    notificationIDList: Optional[Dict[str, Any]] = Field(
        None, description="Object mapping notification IDs to their settings"
    )
    active: Optional[bool] = Field(None, description="Whether the monitor is active")
    requestTimeout: Optional[float] = Field(None, description="Request timeout in seconds")
    method: Optional[str] = Field(None, description="HTTP method (GET, POST, etc.)")
    headers: Optional[str] = Field(None, description="HTTP headers as JSON string")
    body: Optional[str] = Field(None, description="HTTP request body")
    keyword: Optional[str] = Field(None, description="Keyword to search for in response")
    invertKeyword: Optional[bool] = Field(None, description="Invert keyword match")
    jsonPath: Optional[str] = Field(None, description="JSON path expression to query")
    jsonPathOperator: Optional[JsonPathOperator] = Field(None, description="Comparison operator for JSON query")
    expectedValue: Optional[str] = Field(None, description="Expected value for JSON query comparison")
    upsideDown: Optional[bool] = Field(None, description="Flip the status upside down")
    expiryNotification: Optional[bool] = Field(None, description="Certificate Expiry Notification")
    ignoreTls: Optional[bool] = Field(None, description="Ignore TLS/SSL errors for HTTPS websites")
    uptimeKumaCachebuster: Optional[bool] = Field(None, description="Add the uptime_kuma_cachebuster parameter")
    maxredirects: Optional[int] = Field(None, description="Maximum number of redirects to follow")
    accepted_statuscodes: Optional[List[str]] = Field(None, description="Accepted Status Codes")
    ipFamily: Optional[Literal["ipv4", "ipv6"]] = Field(None, description="IP Family")
    proxyId: Optional[int] = Field(None, description="Proxy ID to use for this monitor")
    dns_resolve_server: Optional[str] = Field(None, description="DNS server to use for resolution")
    dns_resolve_type: Optional[str] = Field(None, description="DNS record type to query")
    description: Optional[str] = Field(None, description="Monitor description")
    parent: Optional[int] = Field(None, description="Parent monitor ID (for grouping)")
    pathName: Optional[str] = Field(None, description="Path name for the monitor")
    packetSize: Optional[int] = Field(None, description="Packet Size - Number of data bytes to be sent")
    maxPackets: Optional[int] = Field(None, description="Max Packets - Number of packets to send")
    numericOutput: Optional[bool] = Field(None, description="Output IP addresses instead of hostnames")
    perPingTimeout: Optional[int] = Field(None, description="Per-Ping Timeout in seconds")

    @model_validator(mode="after")
    def check_type_required_fields(self) -> "UpdateMonitorInput":
        # A partial update without a type cannot be judged against any type
        if self.type is None:
            return self
        problems = missing_required_fields(self.type, self.__dict__)
        if problems:
            raise ValueError("; ".join(problems))
        return self

    def to_payload(self) -> Dict[str, Any]:
        """Dump only the attributes the caller supplied."""
        return self.model_dump(mode="json", exclude_unset=True)


class MonitorIdInput(BaseModel):
    id: int = Field(..., description="ID of the monitor")


class FindMonitorsByNameInput(BaseModel):
    searchTerm: str = Field(
        ...,
        description=(
            "Name or partial name to search for. Can be a plain string (case-insensitive partial "
            'match) or a regular expression pattern (e.g., "^prod-.*" to match monitors starting '
            'with "prod-", or "api|web" to match monitors containing "api" or "web")'
        ),
    )
    useRegex: bool = Field(
        False,
        description=(
            "If true, searchTerm will be treated as a regular expression pattern. "
            "Default is false (plain string search)"
        ),
    )


class ListMonitorsInput(BaseModel):
    pass


class Monitor(BaseModel):
    """A monitor as stored by Uptime Kuma.

    Remote records carry many more attributes than the configuration
    schema; they are kept as extra fields so nothing the server returned
    is lost when the record is serialised back to the caller.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    type: str


class MonitorSummary(BaseModel):
    """Reduced view of a monitor returned by name search."""

    id: int
    name: str
    url: Optional[str] = None
    description: Optional[str] = None
    type: str
    pathName: Optional[str] = None
    hostname: Optional[str] = None
    port: Optional[int] = None
    active: Optional[bool] = None

    @classmethod
    def from_monitor(cls, monitor: Monitor) -> "MonitorSummary":
        data = monitor.model_dump()
        return cls(**{name: data.get(name) for name in cls.model_fields})
