"""stackdeploy.utils — CLI plumbing shared by commands."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click


WORKSPACE_ENV_VARS = ("STACKDEPLOY_WORKSPACE", "GITHUB_WORKSPACE")


class ClickEchoHandler(logging.Handler):
    """Send log records to stderr through click.echo."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the stackdeploy logger for CLI use."""
    logger = logging.getLogger("stackdeploy")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, ClickEchoHandler) for h in logger.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def resolve_workspace(workspace: str | None = None) -> Path:
    """Workspace root: explicit value, then env vars, then cwd."""
    if workspace:
        return Path(workspace)
    for var in WORKSPACE_ENV_VARS:
        value = os.environ.get(var, "").strip()
        if value:
            return Path(value)
    return Path.cwd()
