"""
stackdeploy.cli.deploy_cmd — stackdeploy deploy command.

    stackdeploy deploy --host https://portainer.local --token ... \\
        --stack-name web --stack-definition deploy/stack.yml \\
        --var user=nobody --tag-replacements "alpine:3.20"

Every option can also come from a STACKDEPLOY_* environment variable;
host, endpoint, swarm and definition fall back to stackdeploy.yaml.
"""

from __future__ import annotations

import sys

import click

from stackdeploy.api.config import load_config
from stackdeploy.core.errors import StackDeployError
from stackdeploy.core.models import DeploymentRequest
from stackdeploy.stack.engine import deploy_stack
from stackdeploy.stack.renderer import parse_template_variables, parse_variable_args
from stackdeploy.utils import resolve_workspace, setup_logging


@click.command("deploy")
@click.option("--host", envvar="STACKDEPLOY_HOST", default=None,
              help="Control plane URL (without /api)")
@click.option("--token", envvar="STACKDEPLOY_TOKEN", default=None,
              help="API key")
@click.option("--swarm-id", envvar="STACKDEPLOY_SWARM_ID", default=None,
              help="Swarm id (deploys a swarm stack)")
@click.option("--endpoint-id", envvar="STACKDEPLOY_ENDPOINT_ID", type=int,
              default=None, help="Endpoint id (default: 1)")
@click.option("--stack-name", envvar="STACKDEPLOY_STACK_NAME", default=None,
              help="Name of the stack to create or update")
@click.option("--stack-definition", envvar="STACKDEPLOY_STACK_DEFINITION",
              default=None, help="Definition file, relative to the workspace")
@click.option("--template-variables", envvar="STACKDEPLOY_TEMPLATE_VARIABLES",
              default=None, help="Template variables as a JSON object")
@click.option("--var", "var_args", multiple=True,
              help="Template variable (key=value, multiple allowed)")
@click.option("--tag-replacements", envvar="STACKDEPLOY_TAG_REPLACEMENTS",
              default=None, help="Lines of imageName:newTag")
@click.option("-C", "--workspace", default=None,
              help="Workspace directory (default: $GITHUB_WORKSPACE or pwd)")
@click.option("--config", "config_file", default=None,
              help="Config file (default: <workspace>/stackdeploy.yaml)")
@click.option("--timeout", type=float, default=None,
              help="HTTP timeout in seconds")
@click.option("--dry-run", is_flag=True, default=False,
              help="Resolve and render, but do not create or update")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Debug logging")
def deploy_cmd(host, token, swarm_id, endpoint_id, stack_name, stack_definition,
               template_variables, var_args, tag_replacements, workspace,
               config_file, timeout, dry_run, verbose):
    """Create or update a stack."""
    logger = setup_logging(verbose)
    ws = resolve_workspace(workspace)

    try:
        cfg = load_config(ws, config_file)
        variables = dict(cfg.template_variables)
        variables.update(parse_template_variables(template_variables) or {})
        variables.update(parse_variable_args(list(var_args)))
    except StackDeployError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    host = host or cfg.host
    missing = [
        flag for flag, value in (
            ("--host", host), ("--token", token), ("--stack-name", stack_name),
        ) if not value
    ]
    if missing:
        click.echo(f"Error: Missing required input: {', '.join(missing)}", err=True)
        sys.exit(1)

    request = DeploymentRequest(
        host=host,
        token=token,
        endpoint_id=endpoint_id if endpoint_id is not None else cfg.endpoint_id,
        stack_name=stack_name,
        swarm_id=swarm_id or cfg.swarm_id,
        stack_definition=stack_definition or cfg.stack_definition,
        template_variables=variables or None,
        tag_replacements=tag_replacements or None,
        dry_run=dry_run,
    )

    try:
        result = deploy_stack(
            request,
            workspace=ws,
            timeout=timeout if timeout is not None else cfg.timeout,
            logger=logger,
        )
    except StackDeployError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if dry_run:
        click.echo(result.definition)
        click.echo(f"Dry run: stack {result.stack_name} {result.action}.", err=True)
        return

    click.echo(f"✓ Stack {result.stack_name} {result.action} "
               f"(endpoint {result.endpoint_id}).", err=True)
