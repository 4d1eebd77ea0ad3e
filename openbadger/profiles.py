"""Scan profiles describing how a capability probes a site."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .observations import _decode, _encode


@dataclass
class ScanProfile:
    """Timeouts, retries and limits for one capability at one site."""

    id: str = ""
    site_id: str = ""
    name: str = ""
    capability: str = ""
    timeout_ms: int = 0
    retry_count: int = 0
    concurrency: int = 0
    rate_limit_per_minute: int = 0
    credential_profile_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("rate_limit_per_minute", "credential_profile_id"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScanProfile:
        return _decode(cls, data)


@dataclass
class CreateScanProfileRequest:
    """The body of a request to create a scan profile."""

    site_id: str = ""
    name: str = ""
    capability: str = ""
    timeout_ms: int = 0
    retry_count: int = 0
    concurrency: int = 0
    rate_limit_per_minute: int = 0
    credential_profile_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _encode(self, omit=("timeout_ms", "retry_count", "concurrency",
                                   "rate_limit_per_minute", "credential_profile_id"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CreateScanProfileRequest:
        return _decode(cls, data)


@dataclass
class DebugCreateScanProfileResponse:
    """The response returned after a scan profile is created."""

    scan_profile: ScanProfile

    def to_dict(self) -> dict[str, Any]:
        return {"scan_profile": self.scan_profile.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DebugCreateScanProfileResponse:
        return cls(scan_profile=ScanProfile.from_dict(data.get("scan_profile") or {}))