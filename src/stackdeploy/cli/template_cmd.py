"""
stackdeploy.cli.template_cmd — stackdeploy template command.

Renders a definition locally, the same way deploy would,
without talking to the control plane:

    stackdeploy template deploy/stack.yml --var user=nobody \\
        --tag-replacements "alpine:3.20" -o rendered.yml
"""

import sys

import click

from stackdeploy.api.config import load_config
from stackdeploy.core.errors import StackDeployError
from stackdeploy.stack.renderer import (
    render, parse_template_variables, parse_variable_args,
)
from stackdeploy.stack.tags import replace_tags
from stackdeploy.utils import resolve_workspace, setup_logging


@click.command("template")
@click.argument("stack_definition", required=False, default=None)
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
@click.option("-o", "--output", default=None,
              help="Output file (default: stdout)")
def template_cmd(stack_definition, template_variables, var_args,
                 tag_replacements, workspace, config_file, output):
    """Render a stack definition without deploying it."""
    logger = setup_logging()
    ws = resolve_workspace(workspace)

    try:
        cfg = load_config(ws, config_file)
        source = stack_definition or cfg.stack_definition
        if not source:
            click.echo("Error: No stack definition given.", err=True)
            sys.exit(1)

        variables = dict(cfg.template_variables)
        variables.update(parse_template_variables(template_variables) or {})
        variables.update(parse_variable_args(list(var_args)))

        text = render(source, ws, variables or None, logger=logger)
        if tag_replacements:
            text = replace_tags(text, tag_replacements)
    except StackDeployError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        with open(output, "w") as f:
            f.write(text)
        click.echo(f"Written to {output}", err=True)
    else:
        click.echo(text)
