"""
stackdeploy.cli — CLI entry point.

Commands:
  stackdeploy deploy [flags]        — Create or update a stack
  stackdeploy template <file>       — Render a definition (without deploying)
  stackdeploy stacks                — List remote stacks
  stackdeploy version               — Show the control plane version
"""

import click

from stackdeploy.cli.deploy_cmd import deploy_cmd
from stackdeploy.cli.template_cmd import template_cmd
from stackdeploy.cli.stacks_cmd import stacks_cmd, version_cmd


@click.group()
@click.version_option(package_name="stackdeploy")
def main():
    """stackdeploy — create or update stacks on a container control plane."""
    pass


main.add_command(deploy_cmd, "deploy")
main.add_command(template_cmd, "template")
main.add_command(stacks_cmd, "stacks")
main.add_command(version_cmd, "version")
