"""
stackdeploy.core.errors — Error taxonomy.

    StackDeployError
      ├── ValidationError   missing/invalid input combination
      ├── NotFoundError     no definition, or remote 404
      ├── TransportError    network fault or non-404 HTTP failure
      └── DeploymentError   wraps any of the above at the engine boundary
"""

from __future__ import annotations


class StackDeployError(Exception):
    """Base class for all stackdeploy errors."""
    pass


class ValidationError(StackDeployError):
    pass


class NotFoundError(StackDeployError):
    pass


class TransportError(StackDeployError):
    """HTTP exchange failed.

    method/url are always set; status/body only when a response arrived.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
        status: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.url = url
        self.status = status
        self.body = body


class DeploymentError(StackDeployError):
    """A deployment failed. Names the stack and endpoint."""

    def __init__(self, stack_name: str, endpoint_id: int, cause: BaseException):
        self.stack_name = stack_name
        self.endpoint_id = endpoint_id
        self.cause = cause
        super().__init__(
            f"Failed to deploy stack: {stack_name} on endpoint: {endpoint_id}. "
            f"Error: {cause}"
        )
