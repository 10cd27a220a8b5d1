"""Per-type attribute allow-lists and payload projection.

Uptime Kuma rejects or misinterprets attributes that do not belong to a
monitor's type, so every typed create/update payload is narrowed to the
attributes listed here before it is emitted.
"""

import copy
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping

from .models.monitors import MonitorType

COMMON_FIELDS = frozenset({
    "name",
    "type",
    "interval",
    "retryInterval",
    "maxretries",
    "notificationIDList",
    "active",
    "description",
    "parent",
    "pathName",
})

URL_BASED_FIELDS = frozenset({
    "url",
    "requestTimeout",
    "method",
    "headers",
    "body",
    "upsideDown",
    "expiryNotification",
    "ignoreTls",
    "maxredirects",
    "accepted_statuscodes",
    "ipFamily",
    "proxyId",
})

HOSTNAME_PORT_FIELDS = frozenset({"hostname", "port", "upsideDown"})


def _merge(*groups: Iterable[str]) -> FrozenSet[str]:
    merged = set()
    for group in groups:
        merged.update(group)
    return frozenset(merged)


_HOSTNAME_PORT_TYPE = _merge(COMMON_FIELDS, HOSTNAME_PORT_FIELDS)

MONITOR_TYPE_FIELDS: Mapping[MonitorType, FrozenSet[str]] = MappingProxyType({
    MonitorType.HTTP: _merge(
        COMMON_FIELDS, URL_BASED_FIELDS, ["keyword", "invertKeyword", "uptimeKumaCachebuster"]
    ),
    MonitorType.JSON_QUERY: _merge(
        COMMON_FIELDS, URL_BASED_FIELDS, ["jsonPath", "jsonPathOperator", "expectedValue"]
    ),
    MonitorType.KEYWORD: _merge(COMMON_FIELDS, URL_BASED_FIELDS, ["keyword", "invertKeyword"]),
    MonitorType.GRPC_KEYWORD: _merge(
        COMMON_FIELDS, ["url", "requestTimeout", "keyword", "invertKeyword", "upsideDown"]
    ),
    MonitorType.PORT: _HOSTNAME_PORT_TYPE,
    MonitorType.PING: _merge(
        COMMON_FIELDS,
        ["hostname", "upsideDown", "packetSize", "maxPackets", "numericOutput", "perPingTimeout"],
    ),
    MonitorType.DNS: _merge(
        COMMON_FIELDS, ["hostname", "upsideDown", "dns_resolve_server", "dns_resolve_type"]
    ),
    MonitorType.DOCKER: _merge(COMMON_FIELDS, ["hostname", "upsideDown"]),
    MonitorType.PUSH: _merge(COMMON_FIELDS, ["upsideDown"]),
    MonitorType.STEAM: _HOSTNAME_PORT_TYPE,
    MonitorType.MQTT: _HOSTNAME_PORT_TYPE,
    MonitorType.KAFKA_PRODUCER: _HOSTNAME_PORT_TYPE,
    MonitorType.SQLSERVER: _HOSTNAME_PORT_TYPE,
    MonitorType.POSTGRES: _HOSTNAME_PORT_TYPE,
    MonitorType.MYSQL: _HOSTNAME_PORT_TYPE,
    MonitorType.MONGODB: _HOSTNAME_PORT_TYPE,
    MonitorType.RADIUS: _HOSTNAME_PORT_TYPE,
    MonitorType.REDIS: _HOSTNAME_PORT_TYPE,
    MonitorType.GROUP: _merge(COMMON_FIELDS, ["upsideDown"]),
    MonitorType.GAMEDIG: _HOSTNAME_PORT_TYPE,
    MonitorType.TAILSCALE_PING: _merge(COMMON_FIELDS, ["hostname", "upsideDown"]),
})

# Attributes Uptime Kuma expects on every new monitor
CREATE_DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "notificationIDList": {},
    "accepted_statuscodes": ["200-299"],
    "conditions": [],
})


def allowed_fields(monitor_type: str) -> FrozenSet[str]:
    """Attributes that may be sent for ``monitor_type``."""
    return MONITOR_TYPE_FIELDS[MonitorType(monitor_type)]


def transform_monitor_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Narrow a create/update payload to what Uptime Kuma accepts for its type.

    ``None`` marks an unset attribute and is always dropped. With a ``type``
    only that type's allowed attributes survive (``id`` is always kept);
    without one every defined attribute passes through untouched. A typed
    payload without ``id`` is a create and receives ``CREATE_DEFAULTS`` for
    whatever it lacks.
    """
    monitor_type = data.get("type")

    if monitor_type is not None:
        allowed = allowed_fields(monitor_type)
        payload = {
            key: value
            for key, value in data.items()
            if value is not None and (key == "id" or key in allowed)
        }
    else:
        payload = {key: value for key, value in data.items() if value is not None}

    if monitor_type is not None and "id" not in data:
        for key, default in CREATE_DEFAULTS.items():
            if key not in payload:
                payload[key] = copy.deepcopy(default)

    return payload
