"""
stackdeploy.stack.engine — Stack reconcile engine.

Looks the stack up by name, obtains its definition, applies
transforms and creates or updates it:

    validate → resolve existing → obtain definition
             → apply tag replacements → create | update
"""

from __future__ import annotations

import logging
from pathlib import Path

from stackdeploy.api.client import DirectoryClient
from stackdeploy.core.errors import (
    DeploymentError,
    NotFoundError,
    ValidationError,
)
from stackdeploy.core.models import (
    DeploymentRequest,
    DeploymentResult,
    StackDescriptor,
)
from stackdeploy.stack.renderer import render
from stackdeploy.stack.tags import replace_tags

log = logging.getLogger(__name__)


class Reconciler:
    """Brings one named stack to the requested definition.

    Args:
        client: DirectoryClient for the target control plane
        workspace: root that definition paths are relative to
        logger: destination for progress messages
    """

    def __init__(
        self,
        client: DirectoryClient,
        workspace: str | Path,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.workspace = Path(workspace)
        self.log = logger or log

    def deploy(self, request: DeploymentRequest) -> DeploymentResult:
        """Create or update the requested stack.

        Raises:
            DeploymentError: wraps whatever went wrong
        """
        try:
            return self._deploy(request)
        except Exception as e:
            raise DeploymentError(request.stack_name, request.endpoint_id, e) from e

    def _deploy(self, request: DeploymentRequest) -> DeploymentResult:
        # 1. Validate
        if not request.stack_definition and not request.tag_replacements:
            raise ValidationError(
                "Either stack definition file or tag replacements must be provided"
            )

        # 2. Resolve existing
        existing = self.find_stack(request)

        # 3. Obtain definition
        definition = self._obtain_definition(request, existing)

        # 4. Transforms
        if request.tag_replacements:
            self.log.info(f"Using image tag replacements: {request.tag_replacements}")
            definition = replace_tags(definition, request.tag_replacements)

        # 5. Dispatch
        if existing is not None:
            return self._update(request, existing, definition)
        return self._create(request, definition)

    def find_stack(self, request: DeploymentRequest) -> StackDescriptor | None:
        """The stack named in the request, or None."""
        stacks = self.client.list_stacks(request.endpoint_id, request.swarm_id)
        for stack in stacks:
            if stack.name == request.stack_name:
                return stack
        return None

    def _obtain_definition(
        self,
        request: DeploymentRequest,
        existing: StackDescriptor | None,
    ) -> str:
        if request.stack_definition:
            self.log.info(f"Using stack definition file: {request.stack_definition}")
            return render(
                request.stack_definition,
                self.workspace,
                request.template_variables,
                logger=self.log,
            )

        if existing is None:
            raise NotFoundError(
                "No stack definition file provided and no existing stack "
                f"found with name: {request.stack_name}"
            )

        self.log.info("No stack definition file provided. Will use existing stack definition.")
        return self.client.get_stack_file(existing.id)

    def _update(
        self,
        request: DeploymentRequest,
        existing: StackDescriptor,
        definition: str,
    ) -> DeploymentResult:
        self.log.info(
            f"Found existing stack with name: {request.stack_name} "
            f"in endpoint: {existing.endpoint_id}"
        )
        if request.dry_run:
            self.log.info("Dry run: skipping stack update")
            action = "would-update"
        else:
            self.log.info("Updating existing stack...")
            # Stack's own endpoint and env, not the request's
            self.client.update_stack(
                existing.id, existing.endpoint_id, existing.env, definition,
            )
            self.log.info("Successfully updated existing stack")
            action = "updated"

        return DeploymentResult(
            action=action,
            stack_name=request.stack_name,
            endpoint_id=existing.endpoint_id,
            definition=definition,
            stack_id=existing.id,
        )

    def _create(self, request: DeploymentRequest, definition: str) -> DeploymentResult:
        if request.dry_run:
            self.log.info(f"Dry run: skipping creation of {request.kind.name.lower()} stack")
            action = "would-create"
        else:
            self.log.info("Deploying new stack...")
            self.client.create_stack(
                request.kind,
                request.endpoint_id,
                request.stack_name,
                definition,
                swarm_id=request.swarm_id,
            )
            self.log.info(f"Successfully created new stack with name: {request.stack_name}")
            action = "created"

        return DeploymentResult(
            action=action,
            stack_name=request.stack_name,
            endpoint_id=request.endpoint_id,
            definition=definition,
        )


def deploy_stack(
    request: DeploymentRequest,
    workspace: str | Path = ".",
    timeout: float | None = None,
    logger: logging.Logger | None = None,
) -> DeploymentResult:
    """Build a client for request.host and reconcile the stack."""
    logger = logger or log
    client = DirectoryClient(request.host, request.token, timeout=timeout, logger=logger)
    logger.info(f"Using host: {request.host}")
    return Reconciler(client, workspace, logger=logger).deploy(request)
