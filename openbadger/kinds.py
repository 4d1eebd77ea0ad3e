"""Node kinds, capabilities and stored node records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

KIND_COLLECTOR = "collector"
KIND_SENSOR = "sensor"

_KINDS = frozenset({KIND_COLLECTOR, KIND_SENSOR})

_DEFAULT_CAPABILITIES = {
    KIND_COLLECTOR: ("icmp", "snmp", "ssh", "winrm"),
    KIND_SENSOR: ("flow", "pcap"),
}


class NodeNotFoundError(LookupError):
    """Raised when a node does not exist."""

    def __init__(self, message: str = "node not found") -> None:
        super().__init__(message)


class NodeConflictError(Exception):
    """Raised when a node conflicts with an existing one."""

    def __init__(self, message: str = "node conflict") -> None:
        super().__init__(message)


@dataclass
class Record:
    """A node as stored by the server."""

    id: str = ""
    site_id: str = ""
    kind: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""
    last_heartbeat_at: datetime | None = None
    auth_token_hash: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CreateParams:
    """Values needed to create a node record."""

    site_id: str = ""
    kind: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""
    last_heartbeat_at: datetime | None = None
    auth_token_hash: str = ""


@dataclass
class HeartbeatParams:
    """Values recorded when a node sends a heartbeat."""

    node_id: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""
    last_heartbeat_at: datetime | None = None


def normalize_kind(value: str) -> str:
    """Return the kind trimmed and lower-cased."""
    return value.strip().lower()


def validate_kind(kind: str) -> bool:
    """Tell whether the kind names a known node kind."""
    return normalize_kind(kind) in _KINDS


def normalize_capabilities(capabilities: list[str] | None) -> list[str]:
    """Trim, lower-case, de-duplicate and sort capabilities, dropping blanks."""
    if not capabilities:
        return []
    return sorted({capability.strip().lower() for capability in capabilities} - {""})


def default_capabilities(kind: str) -> list[str]:
    """Return the capabilities a node of this kind offers by default."""
    return list(_DEFAULT_CAPABILITIES.get(normalize_kind(kind), ()))