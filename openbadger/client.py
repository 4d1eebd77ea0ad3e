"""HTTP client that nodes use to talk to the server."""

from __future__ import annotations

import json
from typing import Any

import httpx

from openbadger.api import EnrollRequest, EnrollResponse, HeartbeatRequest, HeartbeatResponse
from openbadger.observations import BatchRequest, BatchResponse

_ERROR_BODY_LIMIT = 4096


class ClientError(Exception):
    """Raised when a request to the server fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NodeClient:
    """Sends JSON requests to the server's node API."""

    def __init__(self, base_url: str, http_client: httpx.Client | None = None) -> None:
        self.base_url = base_url.strip().rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> NodeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def enroll(self, bootstrap_token: str, request: EnrollRequest) -> EnrollResponse:
        """Enroll the node using a bootstrap token."""
        data = self._post_json("/api/v1/nodes/enroll", bootstrap_token, request.to_dict())
        return EnrollResponse.from_dict(data)

    def heartbeat(self, auth_token: str, request: HeartbeatRequest) -> HeartbeatResponse:
        """Report that the node is alive."""
        data = self._post_json("/api/v1/nodes/heartbeat", auth_token, request.to_dict())
        return HeartbeatResponse.from_dict(data)

    def upload_observation_batch(self, auth_token: str, request: BatchRequest) -> BatchResponse:
        """Upload a batch of observations."""
        data = self._post_json("/api/v1/observations/batch", auth_token, request.to_dict())
        return BatchResponse.from_dict(data)

    def _post_json(self, path: str, bearer_token: str, body: Any) -> dict[str, Any]:
        if not self.base_url:
            raise ClientError("node client base url is required")

        headers = {"Content-Type": "application/json"}
        token = bearer_token.strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._http.post(
                self.base_url + path, content=json.dumps(body).encode(), headers=headers
            )
        except httpx.HTTPError as err:
            raise ClientError(f"send request: {err}") from err

        status = response.status_code
        if not 200 <= status < 300:
            message = response.content[:_ERROR_BODY_LIMIT].decode("utf-8", "replace").strip()
            raise ClientError(f"request failed with status {status}: {message}", status)

        try:
            data = json.loads(response.content)
        except (ValueError, UnicodeDecodeError) as err:
            raise ClientError(f"decode response: {err}") from err
        if not isinstance(data, dict):
            raise ClientError("decode response: expected a JSON object")
        try:
            return data
        finally:
            response.close()