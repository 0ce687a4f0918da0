"""
stackdeploy.core.models — Stack records and deployment requests.

Remote stack JSON (as returned by GET /stacks):

    {
      "Id": 3,
      "Name": "web",
      "EndpointId": 1,
      "Type": 2,
      "Env": [{"name": "DEBUG", "value": "0"}]
    }
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class StackKind(enum.IntEnum):
    """Deployment kind. The numeric value is the remote `Type` field."""
    SWARM = 1
    COMPOSE = 2

    @property
    def path_segment(self) -> str:
        """Kind segment of the /stacks/create/<kind>/string endpoint."""
        return "swarm" if self is StackKind.SWARM else "standalone"


@dataclass
class EnvEntry:
    """One stack environment variable."""
    name: str
    value: str

    def to_api(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}


@dataclass
class StackDescriptor:
    """A stack as stored by the remote control plane."""
    id: int
    name: str
    endpoint_id: int
    env: list[EnvEntry] = field(default_factory=list)
    type: StackKind | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> StackDescriptor:
        env = [
            EnvEntry(name=e.get("name", ""), value=e.get("value", ""))
            for e in (data.get("Env") or [])
        ]
        raw_type = data.get("Type")
        kind = StackKind(raw_type) if raw_type in (1, 2) else None
        return cls(
            id=data["Id"],
            name=data["Name"],
            endpoint_id=data.get("EndpointId", 0),
            env=env,
            type=kind,
        )


@dataclass
class DeploymentRequest:
    """One unit of work for the reconciler."""
    host: str
    token: str
    endpoint_id: int
    stack_name: str
    swarm_id: str | None = None
    stack_definition: str | None = None
    template_variables: dict[str, Any] | None = None
    tag_replacements: str | None = None
    dry_run: bool = False

    @property
    def kind(self) -> StackKind:
        return StackKind.SWARM if self.swarm_id else StackKind.COMPOSE


@dataclass
class DeploymentResult:
    """Outcome of a reconcile run."""
    action: str              # created | updated | would-create | would-update
    stack_name: str
    endpoint_id: int
    definition: str
    stack_id: int | None = None
