"""stackdeploy.core — Data model and error taxonomy."""

from stackdeploy.core.errors import (
    StackDeployError,
    ValidationError,
    NotFoundError,
    TransportError,
    DeploymentError,
)
from stackdeploy.core.models import (
    StackKind,
    EnvEntry,
    StackDescriptor,
    DeploymentRequest,
    DeploymentResult,
)

__all__ = [
    "StackDeployError",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "DeploymentError",
    "StackKind",
    "EnvEntry",
    "StackDescriptor",
    "DeploymentRequest",
    "DeploymentResult",
]
