"""
stackdeploy.api.client — Control plane API client.

Talks to the stack API under <host>/api:

    GET  /stacks                              list (filters=JSON)
    GET  /stacks/{id}/file                    stored definition
    GET  /system/status  (fallback /status)   version
    POST /stacks                              create, version < 2.19.0
    POST /stacks/create/{kind}/string         create, version >= 2.19.0
    PUT  /stacks/{id}                         update

Every request carries the X-API-Key header. HTTP errors are mapped to
NotFoundError (404) or TransportError (everything else).
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from packaging.version import InvalidVersion, Version

from stackdeploy.core.errors import NotFoundError, TransportError
from stackdeploy.core.models import EnvEntry, StackDescriptor, StackKind

log = logging.getLogger(__name__)

# Creation moved to /stacks/create/{kind}/string in this release
NEW_CREATE_API_VERSION = Version("2.19.0")

API_KEY_HEADER = "X-API-Key"


def _compact_json(data: dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"))


class DirectoryClient:
    """Stack directory on a remote control plane.

    Args:
        host: control plane base URL (without /api)
        token: API key
        session: requests.Session-compatible object (injected in tests)
        timeout: per-request timeout in seconds, None = no timeout
        logger: destination for informational messages
    """

    def __init__(
        self,
        host: str,
        token: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self.base_url = f"{host.rstrip('/')}/api"
        self.session = session if session is not None else requests.Session()
        self.session.headers[API_KEY_HEADER] = token
        self.timeout = timeout
        self.log = logger or log

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # STACKS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def list_stacks(
        self,
        endpoint_id: int | None = None,
        swarm_id: str | None = None,
    ) -> list[StackDescriptor]:
        """List stacks, filtered by swarm, else endpoint, else unfiltered.

        Endpoint filters are unreliable for swarm stacks, so a swarm id
        always wins.
        """
        params: dict[str, str] | None = None
        if swarm_id:
            params = {"filters": _compact_json({"SwarmId": swarm_id})}
        elif endpoint_id is not None:
            params = {"filters": _compact_json({"EndpointId": endpoint_id})}

        data = self._request("GET", "/stacks", params=params).json()
        return [StackDescriptor.from_api(s) for s in (data or [])]

    def get_stack_file(self, stack_id: int) -> str:
        """Return the stored definition of an existing stack."""
        data = self._request("GET", f"/stacks/{stack_id}/file").json()
        return data.get("StackFileContent", "")

    def create_stack(
        self,
        kind: StackKind,
        endpoint_id: int,
        name: str,
        definition: str,
        swarm_id: str | None = None,
    ) -> None:
        """Create a stack using the creation API the remote understands."""
        body: dict[str, Any] = {"name": name, "stackFileContent": definition}
        if swarm_id:
            body["swarmID"] = swarm_id

        version = self._parse_version(self.resolve_version())

        if version < NEW_CREATE_API_VERSION:
            params = {
                "type": int(kind),
                "method": "string",
                "endpointId": endpoint_id,
            }
            self._request("POST", "/stacks", params=params, body=body)
        else:
            path = f"/stacks/create/{kind.path_segment}/string"
            self.log.info(f"Using new stack creation endpoint: {path}")
            self._request("POST", path, params={"endpointId": endpoint_id}, body=body)

    def update_stack(
        self,
        stack_id: int,
        endpoint_id: int,
        env: list[EnvEntry],
        definition: str,
    ) -> None:
        """Update a stack. Always prunes and pulls images."""
        body = {
            "env": [e.to_api() for e in env],
            "stackFileContent": definition,
            "prune": True,
            "pullImage": True,
        }
        self._request(
            "PUT", f"/stacks/{stack_id}",
            params={"endpointId": endpoint_id}, body=body,
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # SYSTEM
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def resolve_version(self) -> str:
        """Remote version string.

        Older control planes only serve /status; /system/status answering
        404 is the sole reason to fall back.
        """
        try:
            data = self._request("GET", "/system/status").json()
        except NotFoundError:
            self.log.debug("/system/status not found, falling back to /status")
            data = self._request("GET", "/status").json()
        return data.get("Version", "")

    @staticmethod
    def _parse_version(raw: str) -> Version:
        try:
            return Version(raw)
        except InvalidVersion as e:
            raise TransportError(f"Unrecognised control plane version: '{raw}'") from e

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # HELPERS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: Any = None,
    ) -> requests.Response:
        """Send one request, mapping failures to stackdeploy errors."""
        url = f"{self.base_url}{path}"
        self.log.debug(f"{method} {url} params={params}")

        try:
            response = self.session.request(
                method, url, params=params, json=body, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(
                f"{method} {url} failed: {e}", method=method, url=url,
            ) from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {url}: not found (HTTP 404)")
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP Status {response.status_code} ({method} {url}): {response.text}",
                method=method,
                url=url,
                status=response.status_code,
                body=response.text,
            )
        return response
