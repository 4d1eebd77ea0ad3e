"""Node side of a network asset inventory: kinds, state, heartbeats, observations and the server client."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "client",
    "counters",
    "heartbeat",
    "kinds",
    "observations",
    "profiles",
    "runtime",
    "state",
]