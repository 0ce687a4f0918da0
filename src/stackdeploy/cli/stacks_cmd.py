"""stackdeploy.cli.stacks_cmd — stackdeploy stacks / version commands."""

import sys

import click

from stackdeploy.api.client import DirectoryClient
from stackdeploy.api.config import load_config
from stackdeploy.core.errors import StackDeployError
from stackdeploy.utils import resolve_workspace, setup_logging


def _connection_options(f):
    f = click.option("--host", envvar="STACKDEPLOY_HOST", default=None,
                     help="Control plane URL (without /api)")(f)
    f = click.option("--token", envvar="STACKDEPLOY_TOKEN", default=None,
                     help="API key")(f)
    f = click.option("-C", "--workspace", default=None,
                     help="Workspace directory (default: $GITHUB_WORKSPACE or pwd)")(f)
    f = click.option("--config", "config_file", default=None,
                     help="Config file (default: <workspace>/stackdeploy.yaml)")(f)
    f = click.option("--timeout", type=float, default=None,
                     help="HTTP timeout in seconds")(f)
    return f


def _make_client(host, token, workspace, config_file, timeout):
    cfg = load_config(resolve_workspace(workspace), config_file)
    host = host or cfg.host
    if not host or not token:
        click.echo("Error: --host and --token are required.", err=True)
        sys.exit(1)
    return DirectoryClient(
        host, token,
        timeout=timeout if timeout is not None else cfg.timeout,
        logger=setup_logging(),
    )


@click.command("stacks")
@_connection_options
@click.option("--endpoint-id", envvar="STACKDEPLOY_ENDPOINT_ID", type=int,
              default=None, help="Only stacks on this endpoint")
@click.option("--swarm-id", envvar="STACKDEPLOY_SWARM_ID", default=None,
              help="Only stacks in this swarm")
def stacks_cmd(host, token, workspace, config_file, timeout, endpoint_id, swarm_id):
    """List stacks on the control plane."""
    try:
        client = _make_client(host, token, workspace, config_file, timeout)
        stacks = client.list_stacks(endpoint_id, swarm_id)
    except StackDeployError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not stacks:
        click.echo("No stacks found.")
        return

    click.echo(f"{'ID':<6} {'NAME':<30} {'ENDPOINT':<10} {'TYPE':<8} {'ENV'}")
    click.echo("─" * 62)
    for s in stacks:
        kind = s.type.name.lower() if s.type else "-"
        click.echo(f"{s.id:<6} {s.name:<30} {s.endpoint_id:<10} {kind:<8} {len(s.env)}")


@click.command("version")
@_connection_options
def version_cmd(host, token, workspace, config_file, timeout):
    """Show the control plane version."""
    try:
        client = _make_client(host, token, workspace, config_file, timeout)
        version = client.resolve_version()
    except StackDeployError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(version)
