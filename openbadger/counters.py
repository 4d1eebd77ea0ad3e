"""Process-wide operational counters."""

from __future__ import annotations

import threading

_registry: dict[str, Counter] = {}
_lock = threading.Lock()


class Counter:
    """A named integer counter, registered process-wide on creation."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.value = 0
        with _lock:
            if name in _registry:
                raise ValueError(f"reuse of exported var name: {name}")
            _registry[name] = self

    def add(self, delta: int) -> None:
        """Add delta to the counter."""
        with _lock:
            self.value += delta


def snapshot() -> dict[str, int]:
    """Return the current value of every registered counter, by name."""
    with _lock:
        return {name: counter.value for name, counter in sorted(_registry.items())}


CREDENTIAL_PROFILES_CREATED_TOTAL = Counter("openbadger_credential_profiles_created_total")
NODE_HEARTBEATS_TOTAL = Counter("openbadger_node_heartbeats_total")
OBSERVATION_BATCHES_TOTAL = Counter("openbadger_observation_batches_total")
OBSERVATIONS_ACCEPTED_TOTAL = Counter("openbadger_observations_accepted_total")
SCHEDULED_JOBS_CREATED_TOTAL = Counter("openbadger_scheduled_jobs_created_total")
OBSERVATION_RETENTION_RUNS_TOTAL = Counter("openbadger_observation_retention_runs_total")
OBSERVATIONS_DELETED_TOTAL = Counter("openbadger_observations_deleted_total")