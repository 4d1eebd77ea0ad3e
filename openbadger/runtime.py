"""The enroll-then-heartbeat loop every node runs."""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Callable

import httpx

from openbadger.api import EnrollRequest, HeartbeatRequest
from openbadger.client import ClientError, NodeClient
from openbadger.kinds import default_capabilities, normalize_kind, validate_kind
from openbadger.state import State, load_state, save_state

_DEFAULT_HEARTBEAT_INTERVAL = timedelta(seconds=30)


@dataclass
class AgentConfig:
    """Settings for running a collector or sensor node."""

    kind: str = ""
    name: str = ""
    server_url: str = ""
    site_id: str = ""
    enrollment_token: str = ""
    state_path: str | os.PathLike[str] = ""
    version: str = ""
    heartbeat_interval: timedelta | None = None
    http_client: httpx.Client | None = None
    after_heartbeat: Callable[[NodeClient, State], None] | None = None


def _quote(value: str) -> str:
    return json.dumps(value)


def _required(value: str, what: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{what} is required")
    return value


def run_agent(
    config: AgentConfig,
    stop_event: threading.Event | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Enroll if needed, then send heartbeats until stop_event is set."""
    logger = logger or logging.getLogger(__name__)
    stop_event = stop_event or threading.Event()

    kind = normalize_kind(config.kind)
    if not validate_kind(kind):
        raise ValueError(f"node kind {_quote(config.kind)} is invalid")
    name = _required(config.name, "node name")
    server_url = _required(config.server_url, "node server url")
    state_path = _required(os.fspath(config.state_path), "node state path")
    version = _required(config.version, "node version")

    capabilities = default_capabilities(kind)

    with NodeClient(server_url, config.http_client) as client:
        state = _load_or_enroll(config, client, kind, name, version, capabilities, state_path, logger)

        if normalize_kind(state.kind) != kind:
            raise ValueError(
                f"node state kind {_quote(state.kind)} does not match runtime kind {_quote(kind)}"
            )

        def heartbeat() -> None:
            nonlocal state
            try:
                client.heartbeat(
                    state.auth_token,
                    HeartbeatRequest(
                        name=name,
                        version=version,
                        capabilities=capabilities,
                        health_status="healthy",
                    ),
                )
            except ClientError as err:
                raise ClientError(f"send node heartbeat: {err}", err.status_code) from err

            if state.name != name:
                state = replace(state, name=name)
                _persist(state_path, state)

        def run_hook() -> None:
            if config.after_heartbeat is None:
                return
            try:
                config.after_heartbeat(client, state)
            except Exception as err:  # noqa: BLE001 - hook failures must not stop the node
                logger.warning(
                    "node cycle hook failed mode=%s node_id=%s error=%s", kind, state.node_id, err
                )

        heartbeat()
        logger.info(
            "starting mode mode=%s name=%s node_id=%s server_url=%s",
            kind,
            name,
            state.node_id,
            server_url,
        )
        run_hook()

        interval = config.heartbeat_interval
        if interval is None or interval <= timedelta(0):
            interval = _DEFAULT_HEARTBEAT_INTERVAL

        while not stop_event.wait(interval.total_seconds()):
            try:
                heartbeat()
            except Exception as err:  # noqa: BLE001 - keep beating after a failed cycle
                logger.warning(
                    "node heartbeat failed mode=%s node_id=%s error=%s", kind, state.node_id, err
                )
                continue
            run_hook()

        logger.info(
            "stopping mode mode=%s name=%s node_id=%s reason=stopped", kind, name, state.node_id
        )


def _persist(state_path: str, state: State) -> None:
    try:
        save_state(state_path, state)
    except ValueError as err:
        raise ValueError(f"persist node state: {err}") from err


def _load_or_enroll(
    config: AgentConfig,
    client: NodeClient,
    kind: str,
    name: str,
    version: str,
    capabilities: list[str],
    state_path: str,
    logger: logging.Logger,
) -> State:
    try:
        return load_state(state_path)
    except FileNotFoundError:
        pass
    except ValueError as err:
        raise ValueError(f"load node state: {err}") from err

    site_id = config.site_id.strip()
    if not site_id:
        raise ValueError("node site id is required when state file does not exist")
    bootstrap_token = config.enrollment_token.strip()
    if not bootstrap_token:
        raise ValueError("node enrollment token is required when state file does not exist")

    try:
        enrollment = client.enroll(
            bootstrap_token,
            EnrollRequest(
                site_id=site_id,
                kind=kind,
                name=name,
                version=version,
                capabilities=capabilities,
            ),
        )
    except ClientError as err:
        raise ClientError(f"enroll node: {err}", err.status_code) from err

    state = State(
        node_id=enrollment.node_id,
        site_id=enrollment.site_id,
        kind=enrollment.kind,
        name=enrollment.name,
        auth_token=enrollment.auth_token,
    )
    _persist(state_path, state)
    logger.info(
        "node enrolled mode=%s node_id=%s site_id=%s state_path=%s",
        kind,
        state.node_id,
        state.site_id,
        state_path,
    )
    return state