"""Persistent enrollment state of a node."""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from openbadger.kinds import normalize_kind, validate_kind

_FIELDS = ("node_id", "site_id", "kind", "name", "auth_token")


@dataclass(frozen=True)
class State:
    """Identity and credentials a node keeps between runs."""

    node_id: str = ""
    site_id: str = ""
    kind: str = ""
    name: str = ""
    auth_token: str = ""

    def validate(self) -> None:
        """Raise ValueError if a required field is missing or invalid."""
        if not self.node_id.strip():
            raise ValueError("node state node_id is required")
        if not self.site_id.strip():
            raise ValueError("node state site_id is required")
        if not validate_kind(self.kind):
            raise ValueError(f"node state kind {json.dumps(self.kind)} is invalid")
        if not self.name.strip():
            raise ValueError("node state name is required")
        if not self.auth_token.strip():
            raise ValueError("node state auth_token is required")

    def normalized(self) -> State:
        """Return a copy with whitespace trimmed and the kind normalized."""
        return replace(
            self,
            node_id=self.node_id.strip(),
            site_id=self.site_id.strip(),
            kind=normalize_kind(self.kind),
            name=self.name.strip(),
            auth_token=self.auth_token.strip(),
        )

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in _FIELDS}

    @classmethod
    def from_dict(cls, data: Any) -> State:
        if not isinstance(data, dict):
            raise ValueError("decode node state: expected a JSON object")
        values = {}
        for name in _FIELDS:
            value = data.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"decode node state: {name} must be a string")
            values[name] = value
        return cls(**values)


def _clean_path(path: str | os.PathLike[str]) -> str:
    text = os.fspath(path).strip()
    if not text:
        raise ValueError("state path is required")
    return text


def load_state(path: str | os.PathLike[str]) -> State:
    """Read and validate the state file; FileNotFoundError if it is absent."""
    contents = Path(_clean_path(path)).read_text(encoding="utf-8")
    try:
        data = json.loads(contents)
    except json.JSONDecodeError as err:
        raise ValueError(f"decode node state: {err}") from err

    state = State.from_dict(data).normalized()
    state.validate()
    return state


def save_state(path: str | os.PathLike[str], state: State) -> None:
    """Write the state atomically, readable only by its owner."""
    target = Path(_clean_path(path))
    state = state.normalized()
    state.validate()

    target.parent.mkdir(parents=True, exist_ok=True)
    contents = json.dumps(state.to_dict(), indent=2) + "\n"

    fd, temp_path = tempfile.mkstemp(prefix=target.name + ".tmp-", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            os.chmod(temp_path, 0o600)
            handle.write(contents)
        os.replace(temp_path, target)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.remove(temp_path)
        raise