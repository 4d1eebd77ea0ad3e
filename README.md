# openbadger

Node-side building blocks for a network asset inventory. A node is either a
**collector**, whose default capabilities are ICMP, SNMP, SSH and WinRM, or a
**sensor**, whose default capabilities are flow and packet capture. A node
enrolls with the inventory server once, keeps its identity in a small state
file, sends heartbeats on a fixed interval and can upload batches of
observations.

## Installing

```
pip install .
pip install ".[test]"   # with pytest, to run the tests
```

The only runtime dependency is `httpx`.

## What is in the package

| Module | Purpose |
| --- | --- |
| `openbadger.kinds` | Node kinds, capability normalisation, node record types |
| `openbadger.heartbeat` | Deciding whether a node has gone stale |
| `openbadger.state` | The node state file: `State`, `load_state`, `save_state` |
| `openbadger.observations` | The observation schema and batch validation |
| `openbadger.profiles` | Scan profile records |
| `openbadger.counters` | Process-wide operational counters |
| `openbadger.api` | Enrollment and heartbeat request and response bodies |
| `openbadger.client` | `NodeClient`, the HTTP client for the server API |
| `openbadger.runtime` | `AgentConfig` and `run_agent`, the node main loop |

## Node kinds and capabilities

```python
from openbadger.kinds import (
    default_capabilities,
    normalize_capabilities,
    normalize_kind,
    validate_kind,
)

kind = normalize_kind("  Collector ")               # "collector"
validate_kind(kind)                                 # True
default_capabilities(kind)                          # ["icmp", "snmp", "ssh", "winrm"]
normalize_capabilities(["SSH", "icmp", "ssh", ""])  # ["icmp", "ssh"]
```

Capabilities are lower-cased, trimmed, de-duplicated and sorted, and blanks are
dropped. An unknown kind has no default capabilities.

`Record`, `CreateParams` and `HeartbeatParams` are plain dataclasses describing
a node as a server would store it; `NodeNotFoundError` and `NodeConflictError`
are the matching exceptions.

## Node state

The state file records the identity a node received when it enrolled. It is
written as indented JSON, atomically through a temporary file in the same
directory, with owner-only (`0600`) permissions. The state is trimmed,
its kind normalised, and validated both when saved and when loaded.

```python
from openbadger.state import State, load_state, save_state

state = State(
    node_id="node-123",
    site_id="site-123",
    kind="collector",
    name="collector-a",
    auth_token="token",
)
save_state("state/collector-state.json", state)
assert load_state("state/collector-state.json") == state
```

A missing file raises `FileNotFoundError`. A file that is not valid JSON raises
`ValueError` beginning with `decode node state:`; a missing or invalid field
raises `ValueError` naming that field, for example
`node state auth_token is required`.

## Staleness

A node counts as stale once it has missed a number of expected heartbeats. The
defaults are a 30 second interval and three misses; `None`, zero or negative
values fall back to those defaults. A node that never sent a heartbeat is
always stale, and naive datetimes are taken as UTC.

```python
from datetime import datetime, timedelta, timezone
from openbadger.heartbeat import effective_health_status, heartbeat_expired

now = datetime(2026, 4, 4, 12, 0, tzinfo=timezone.utc)

heartbeat_expired(now - timedelta(seconds=70), now, timedelta(seconds=30), 3)   # False
effective_health_status("healthy", now - timedelta(minutes=2), now,
                        timedelta(seconds=30), 3)                               # "stale"
```

`effective_health_status` returns `"stale"` for an expired node, otherwise the
reported status, or `"healthy"` when the reported status is blank.

## Observations

Everything a node learns is reported as an `Observation` with schema version
`0.1` (`SCHEMA_VERSION`). Its scope is one of `asset`, `sighting` or
`relationship`, and it must carry an emitter, an observation time, facts and
evidence. `Observation.validate()` raises `ValidationError` naming the first
problem, such as `observation scope is invalid`. `BatchRequest.validate()`
rejects an empty batch with `observations are required` and prefixes the error
of an invalid observation with its index, as in `observations[2]: ...`.

Every record type here, in `openbadger.api` and in `openbadger.profiles`
converts to and from its JSON form with `to_dict()` and `from_dict()`.
Timestamps are written in RFC 3339 form; optional fields are left out when
empty.

## Counters

`openbadger.counters` holds process-wide integer counters, such as
`NODE_HEARTBEATS_TOTAL` and `OBSERVATIONS_ACCEPTED_TOTAL`. `Counter.add(delta)`
increments one, and `snapshot()` returns every counter's value by name.
Creating a second counter with a name already in use raises `ValueError`.

## Talking to the server

```python
from openbadger.api import HeartbeatRequest
from openbadger.client import NodeClient

with NodeClient("http://localhost:8080") as client:
    client.heartbeat("token", HeartbeatRequest(name="collector-a", health_status="healthy"))
```

`NodeClient` posts JSON with a bearer token to the server's node API:
`enroll`, `heartbeat` and `upload_observation_batch`. An `httpx.Client` may be
passed in; otherwise the client creates and closes its own. A transport error,
a non-2xx status or an undecodable response raises `ClientError`, which carries
the HTTP status in `status_code` when there is one.

## Running a node

`run_agent(config, stop_event, logger)` takes an `AgentConfig` describing the
node: kind, name, server URL, site id, enrollment token, state path, version,
heartbeat interval (30 seconds by default), an optional `httpx.Client` and an
optional `after_heartbeat(client, state)` hook.

When no state file exists it enrolls with the server using the site id and
enrollment token and saves the resulting state. It then sends a heartbeat,
runs the hook, and repeats on every interval until the `threading.Event`
`stop_event` is set. Configuration errors raise `ValueError`; failures of
enrollment or of the first heartbeat are raised. Later heartbeat failures and
every hook failure are logged as warnings and do not stop the node.

## What the package does not do

It is the node side only. There is no inventory server, no database or other
storage for node records or observations, and no command-line program: a node
is started by calling `run_agent` from your own code. The client has no
endpoint for fetching or reporting scan jobs, and the package performs no
probing or packet capture itself; the `after_heartbeat` hook is where such work
would be attached.