"""stackdeploy.stack — Definition transforms and the reconcile engine."""

from stackdeploy.stack.renderer import (
    render, render_text, parse_template_variables, parse_variable_args,
)
from stackdeploy.stack.tags import TagReplacementSpec, parse_tag_spec, replace_tags
from stackdeploy.stack.engine import Reconciler, deploy_stack

__all__ = [
    "render",
    "render_text",
    "parse_template_variables",
    "parse_variable_args",
    "TagReplacementSpec",
    "parse_tag_spec",
    "replace_tags",
    "Reconciler",
    "deploy_stack",
]
