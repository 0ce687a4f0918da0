"""
stackdeploy.stack.renderer — Stack definition renderer.

Reads a stack definition from the workspace and expands
{{variable}} placeholders:

    services:
      web:
        image: nginx:{{ tag }}
        user: {{user}}

Unknown placeholders are left as they are.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from stackdeploy.core.errors import NotFoundError, ValidationError

log = logging.getLogger(__name__)

# {{name}} or {{ name }}
_VAR_PATTERN = re.compile(r"\{\{\s*([A-Za-z0-9_.-]+)\s*\}\}")


def render(
    source_path: str | Path,
    workspace: str | Path,
    variables: dict[str, Any] | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Load a stack definition and apply template variables.

    Args:
        source_path: definition file, relative to workspace
        workspace: workspace root
        variables: flat name → value mapping (optional)

    Returns:
        Rendered definition text

    Raises:
        NotFoundError: file missing or empty
    """
    logger = logger or log
    path = Path(workspace) / source_path
    logger.info(f"Reading stack definition file from {path}")

    if not path.is_file():
        raise NotFoundError(f"Could not find stack-definition file: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Stack-definition file is not valid UTF-8: {path}") from e
    if not text:
        raise NotFoundError(f"Could not find stack-definition file: {path}")

    if variables:
        logger.info(
            f"Applying template variables for keys: {', '.join(variables)}"
        )
        text = render_text(text, variables)

    return text


def render_text(text: str, variables: dict[str, Any]) -> str:
    """Substitute {{key}} placeholders present in variables."""

    def replacer(match: re.Match) -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return _VAR_PATTERN.sub(replacer, text)


def parse_template_variables(raw: str | None) -> dict[str, Any] | None:
    """Decode the JSON object form of template variables.

    >>> parse_template_variables('{"user": "nobody"}')
    {'user': 'nobody'}
    >>> parse_template_variables("") is None
    True
    """
    if raw is None or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid template variables JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(
            f"Template variables must be a JSON object, got {type(data).__name__}"
        )
    return data


def parse_variable_args(var_args: list[str]) -> dict[str, str]:
    """Convert --var key=value arguments to a dict.

    >>> parse_variable_args(["user=nobody", "tag=1.2"])
    {'user': 'nobody', 'tag': '1.2'}
    """
    result: dict[str, str] = {}
    for arg in var_args:
        if "=" not in arg:
            raise ValidationError(f"Invalid --var format: '{arg}' (expected key=value)")
        key, value = arg.split("=", 1)
        key = key.strip()
        if not key:
            raise ValidationError(f"Invalid --var format: '{arg}' (empty key)")
        result[key] = value
    return result
