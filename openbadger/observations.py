"""Observation records that nodes upload in batches."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any

SCHEMA_VERSION = "0.1"

_VALID_SCOPES = frozenset({"asset", "sighting", "relationship"})
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


class ValidationError(ValueError):
    """Raised when an observation or batch is not valid."""


def _format_time(moment: datetime | None) -> str:
    """Format as RFC 3339; None gives the zero time."""
    if moment is None:
        return "0001-01-01T00:00:00Z"
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.isoformat()[-6:]
    return text + ("Z" if offset == "+00:00" else offset)


def _parse_time(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp; None and the zero time give None."""
    if value is None:
        return None
    match = _TIME_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid timestamp: {value!r}")
    base, fraction, zone = match.groups()
    zone = "+00:00" if zone in ("Z", "z") else zone
    moment = datetime.fromisoformat(f"{base}.{(fraction or '').ljust(6, '0')[:6]}{zone}")
    return None if moment == _ZERO_TIME else moment


def _decode(cls, data: dict[str, Any]):
    """Build a dataclass from decoded JSON, filling missing values with zero values."""
    values: dict[str, Any] = {}
    for f in fields(cls):
        raw = data.get(f.name)
        if f.type == "str":
            raw = raw or ""
        elif f.type in ("int", "float", "bool"):
            raw = {"int": int, "float": float, "bool": bool}[f.type](raw or 0)
        elif f.type.startswith("list"):
            raw = list(raw or [])
        elif "datetime" in f.type:
            raw = _parse_time(raw)
        elif f.type.startswith("dict") and not f.type.endswith("| None"):
            raw = dict(raw or {})
        values[f.name] = raw
    return cls(**values)


def _encode(instance: Any, omit: tuple[str, ...] | None = None) -> dict[str, Any]:
    """Map a dataclass to JSON; fields named in omit (all when None) are left out when empty."""
    result: dict[str, Any] = {}
    for f in fields(instance):
        value = getattr(instance, f.name)
        empty = value is None if f.type.endswith("| None") else not value
        if empty and (omit is None or f.name in omit):
            continue
        if "datetime" in f.type:
            value = _format_time(value)
        elif isinstance(value, list):
            value = list(value)
        elif hasattr(value, "to_dict"):
            value = value.to_dict()
        result[f.name] = value
    return result


@dataclass
class Emitter:
    """The node that produced an observation."""

    kind: str = ""
    id: str = ""
    name: str = ""
    version: str = ""
    capability: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Emitter:
        return _decode(cls, data)


@dataclass
class Target:
    """What the emitter was probing."""

    input: str = ""
    ip: str = ""
    hostname: str = ""
    protocol: str = ""
    port: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        return _decode(cls, data)


@dataclass
class Identifiers:
    """Stable identifiers of an observed asset."""

    hostnames: list[str] = field(default_factory=list)
    fqdn: str = ""
    mac_addresses: list[str] = field(default_factory=list)
    serial_number: str = ""
    system_uuid: str = ""
    bios_uuid: str = ""
    snmp_engine_id: str = ""
    ssh_host_key_fingerprints: list[str] = field(default_factory=list)
    machine_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Identifiers:
        return _decode(cls, data)


@dataclass
class Addresses:
    """Network addresses seen for an asset."""

    ip_addresses: list[str] = field(default_factory=list)
    vlan_ids: list[int] = field(default_factory=list)
    subnet_cidrs: list[str] = field(default_factory=list)
    interface_name: str = ""
    interface_index: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Addresses:
        return _decode(cls, data)


@dataclass
class Evidence:
    """How and how confidently an observation was made."""

    confidence: float = 0.0
    source_protocol: str = ""
    credential_profile: str = ""
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    packet_count: int = 0
    byte_count: int = 0
    flow_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _encode(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Evidence:
        return _decode(cls, data)


_NESTED = {"emitter": Emitter, "target": Target, "identifiers": Identifiers,
           "addresses": Addresses, "evidence": Evidence}


@dataclass
class Observation:
    """A single fact reported by a collector or sensor."""

    schema_version: str = ""
    observation_id: str = ""
    type: str = ""
    scope: str = ""
    site_id: str = ""
    job_id: str = ""
    emitter: Emitter | None = None
    observed_at: datetime | None = None
    target: Target | None = None
    identifiers: Identifiers | None = None
    addresses: Addresses | None = None
    facts: dict[str, Any] | None = None
    relations: list[dict[str, Any]] = field(default_factory=list)
    evidence: Evidence | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise ValidationError naming the first problem found."""
        checks = [
            (self.schema_version.strip() == SCHEMA_VERSION, "schema_version is invalid"),
            (self.observation_id.strip(), "observation_id is required"),
            (self.type.strip(), "type is required"),
            (self.scope.strip().lower() in _VALID_SCOPES, "scope is invalid"),
            (self.site_id.strip(), "site_id is required"),
            (self.emitter is not None, "emitter is required"),
            (self.observed_at is not None, "observed_at is required"),
            (self.facts is not None, "facts is required"),
            (self.evidence is not None, "evidence is required"),
        ]
        for ok, message in checks:
            if not ok:
                raise ValidationError(f"observation {message}")

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("job_id", "target", "identifiers", "addresses", "relations", "raw"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Observation:
        nested = {key: kind.from_dict(data[key])
                  for key, kind in _NESTED.items() if data.get(key) is not None}
        return replace(_decode(cls, data), **nested)


@dataclass
class BatchRequest:
    """A batch of observations uploaded by one node."""

    observations: list[Observation] = field(default_factory=list)

    def validate(self) -> None:
        """Raise ValidationError if the batch is empty or holds an invalid observation."""
        if not self.observations:
            raise ValidationError("observations are required")
        for index, observation in enumerate(self.observations):
            try:
                observation.validate()
            except ValidationError as err:
                raise ValidationError(f"observations[{index}]: {err}") from err

    def to_dict(self) -> dict[str, Any]:
        return {"observations": [observation.to_dict() for observation in self.observations]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchRequest:
        return cls([Observation.from_dict(item) for item in data.get("observations") or []])


@dataclass
class BatchResponse:
    """How many observations the server accepted."""

    accepted: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchResponse:
        return _decode(cls, data)