"""Heartbeat staleness checks for nodes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

DEFAULT_EXPECTED_HEARTBEAT_INTERVAL = timedelta(seconds=30)
DEFAULT_STALE_AFTER_MISSES = 3


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def heartbeat_expired(
    last_heartbeat_at: datetime | None,
    now: datetime | None = None,
    expected_interval: timedelta | None = None,
    missed_heartbeats: int | None = None,
) -> bool:
    """Tell whether enough heartbeats were missed for the node to count as stale.

    Naive datetimes are taken as UTC. Missing or non-positive interval and
    miss count fall back to 30 seconds and 3 misses.
    """
    if last_heartbeat_at is None:
        return True

    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    interval = expected_interval
    if interval is None or interval <= timedelta(0):
        interval = DEFAULT_EXPECTED_HEARTBEAT_INTERVAL

    misses = missed_heartbeats
    if misses is None or misses <= 0:
        misses = DEFAULT_STALE_AFTER_MISSES

    deadline = _as_utc(last_heartbeat_at) + interval * misses
    return deadline <= current


def effective_health_status(
    current: str,
    last_heartbeat_at: datetime | None,
    now: datetime | None = None,
    expected_interval: timedelta | None = None,
    missed_heartbeats: int | None = None,
) -> str:
    """Return "stale" for expired nodes, else the reported status or "healthy"."""
    if heartbeat_expired(last_heartbeat_at, now, expected_interval, missed_heartbeats):
        return "stale"
    return current.strip() or "healthy"