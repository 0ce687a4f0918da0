"""
stackdeploy.api.config — Deploy config file.

<workspace>/stackdeploy.yaml (or --config / STACKDEPLOY_CONFIG):

    host: https://portainer.example.com
    endpoint_id: 2
    swarm_id: s4ny2nh7qt8lluhvddeu9ulwl
    timeout: 30
    stack_definition: deploy/stack.yml
    template_variables:
      user: nobody

The token is deliberately not read from here; pass it with --token or
STACKDEPLOY_TOKEN. CLI options and environment variables win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from stackdeploy.core.errors import ValidationError


CONFIG_FILENAME = "stackdeploy.yaml"
CONFIG_ENV_VAR = "STACKDEPLOY_CONFIG"

DEFAULT_ENDPOINT_ID = 1


@dataclass
class DeployConfig:
    """File-level defaults for a deployment."""
    host: str | None = None
    endpoint_id: int = DEFAULT_ENDPOINT_ID
    swarm_id: str | None = None
    timeout: float | None = None
    stack_definition: str | None = None
    template_variables: dict[str, Any] = field(default_factory=dict)
    path: Path | None = None


def config_path(workspace: str | Path, explicit: str | Path | None = None) -> Path:
    """Resolve the config file location.

    Priority:
      1. explicit path (--config)
      2. STACKDEPLOY_CONFIG env var
      3. <workspace>/stackdeploy.yaml
    """
    if explicit:
        return Path(explicit)
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    return Path(workspace) / CONFIG_FILENAME


def load_config(workspace: str | Path, explicit: str | Path | None = None) -> DeployConfig:
    """Read the deploy config. A missing default file yields defaults."""
    cp = config_path(workspace, explicit)
    if not cp.exists():
        if explicit:
            raise ValidationError(f"Config file not found: {cp}")
        return DeployConfig()

    try:
        with open(cp) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {cp}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(
            f"Config file must be a YAML mapping, got {type(data).__name__}: {cp}"
        )

    cfg = DeployConfig(path=cp)
    cfg.host = data.get("host")
    cfg.swarm_id = data.get("swarm_id")
    cfg.stack_definition = data.get("stack_definition")

    try:
        cfg.endpoint_id = int(data.get("endpoint_id", DEFAULT_ENDPOINT_ID))
        timeout = data.get("timeout")
        cfg.timeout = float(timeout) if timeout is not None else None
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid value in {cp}: {e}") from e

    variables = data.get("template_variables", {}) or {}
    if not isinstance(variables, dict):
        raise ValidationError(f"template_variables must be a mapping: {cp}")
    cfg.template_variables = variables

    return cfg
