"""
stackdeploy — Create or update named stacks on a container control plane.

Renders a stack definition, rewrites image tags and pushes the
result to the stack API, creating the stack or updating it in place.
"""

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
from stackdeploy.api.client import DirectoryClient
from stackdeploy.stack.engine import Reconciler, deploy_stack
from stackdeploy.stack.renderer import render, render_text
from stackdeploy.stack.tags import TagReplacementSpec, parse_tag_spec, replace_tags

__version__ = "0.1.0"

__all__ = [
    # errors
    "StackDeployError",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "DeploymentError",
    # model
    "StackKind",
    "EnvEntry",
    "StackDescriptor",
    "DeploymentRequest",
    "DeploymentResult",
    # engine
    "DirectoryClient",
    "Reconciler",
    "deploy_stack",
    # transforms
    "render",
    "render_text",
    "TagReplacementSpec",
    "parse_tag_spec",
    "replace_tags",
]
