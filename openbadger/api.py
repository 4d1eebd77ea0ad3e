"""Request and response bodies of the node enrollment and heartbeat API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .observations import _decode, _encode


@dataclass
class EnrollRequest:
    """Sent by a node to enroll with a bootstrap token."""

    site_id: str = ""
    kind: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("version", "capabilities"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrollRequest:
        return _decode(cls, data)


@dataclass
class EnrollResponse:
    """The identity and token the server hands an enrolled node."""

    node_id: str = ""
    site_id: str = ""
    kind: str = ""
    name: str = ""
    auth_token: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrollResponse:
        return _decode(cls, data)


@dataclass
class HeartbeatRequest:
    """Sent periodically by an enrolled node."""

    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("version", "capabilities", "health_status"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeartbeatRequest:
        return _decode(cls, data)


@dataclass
class HeartbeatResponse:
    """The node as the server recorded it after a heartbeat."""

    node_id: str = ""
    site_id: str = ""
    kind: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""
    last_heartbeat_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeartbeatResponse:
        return _decode(cls, data)


@dataclass
class DebugRecord:
    """A node as shown by the debug listing, with its staleness."""

    node_id: str = ""
    site_id: str = ""
    kind: str = ""
    name: str = ""
    version: str = ""
    capabilities: list[str] = field(default_factory=list)
    health_status: str = ""
    stale: bool = False
    last_heartbeat_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("last_heartbeat_at",))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DebugRecord:
        return _decode(cls, data)