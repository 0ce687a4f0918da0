"""
tests/test_cli.py — CLI tests.

Tests commands using Click CliRunner against a fake HTTP session.
"""

import pytest
import requests
import yaml
from click.testing import CliRunner

from conftest import HOST, TOKEN
from stackdeploy.api.config import CONFIG_FILENAME
from stackdeploy.cli import main


DEFINITION = "services:\n  web:\n    image: nginx:{{tag}}\n    user: {{user}}\n"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, session):
    for var in (
        "STACKDEPLOY_HOST", "STACKDEPLOY_TOKEN", "STACKDEPLOY_SWARM_ID",
        "STACKDEPLOY_ENDPOINT_ID", "STACKDEPLOY_STACK_NAME",
        "STACKDEPLOY_STACK_DEFINITION", "STACKDEPLOY_TEMPLATE_VARIABLES",
        "STACKDEPLOY_TAG_REPLACEMENTS", "STACKDEPLOY_CONFIG",
        "STACKDEPLOY_WORKSPACE", "GITHUB_WORKSPACE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(requests, "Session", lambda: session)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "stack.yml").write_text(DEFINITION)
    return tmp_path


runner = CliRunner()


def _deploy(workspace, *extra):
    return runner.invoke(main, [
        "deploy", "-C", str(workspace),
        "--host", HOST, "--token", TOKEN,
        "--stack-name", "web", *extra,
    ])


class TestDeploy:
    def test_create(self, workspace, session):
        session.add("GET", "/stacks", [])
        session.add("GET", "/system/status", {"Version": "2.20.0"})
        session.add("POST", "/stacks/create/standalone/string", {"Id": 1})

        result = _deploy(
            workspace, "--stack-definition", "stack.yml",
            "--template-variables", '{"tag": "1.27", "user": "root"}',
            "--var", "user=nobody",
        )

        assert result.exit_code == 0, result.output
        assert "✓ Stack web created" in result.output
        body = session.last("POST", "/stacks/create/standalone/string").body
        assert body["stackFileContent"] == \
            "services:\n  web:\n    image: nginx:1.27\n    user: nobody\n"

    def test_default_endpoint_is_one(self, workspace, session):
        session.add("GET", "/stacks", [])
        session.add("GET", "/system/status", {"Version": "2.20.0"})
        session.add("POST", "/stacks/create/standalone/string", {"Id": 1})

        result = _deploy(workspace, "--stack-definition", "stack.yml")

        assert result.exit_code == 0, result.output
        assert session.last("POST", "/stacks/create/standalone/string").params == {
            "endpointId": 1
        }

    def test_update_from_env_vars(self, workspace, session, monkeypatch):
        monkeypatch.setenv("STACKDEPLOY_TAG_REPLACEMENTS", "nginx:1.27\n")
        monkeypatch.setenv("STACKDEPLOY_ENDPOINT_ID", "4")
        session.add("GET", "/stacks", [{"Id": 9, "Name": "web", "EndpointId": 4}])
        session.add("GET", "/stacks/9/file", {"StackFileContent": "  image: nginx:1.25\n"})
        session.add("PUT", "/stacks/9")

        result = _deploy(workspace)

        assert result.exit_code == 0, result.output
        assert "✓ Stack web updated (endpoint 4)" in result.output
        assert session.last("PUT", "/stacks/9").body["stackFileContent"] == "  image: nginx:1.27\n"

    def test_config_file_defaults(self, workspace, session):
        (workspace / CONFIG_FILENAME).write_text(yaml.dump({
            "host": HOST,
            "endpoint_id": 3,
            "stack_definition": "stack.yml",
            "template_variables": {"tag": "1.27", "user": "app"},
        }))
        session.add("GET", "/stacks", [])
        session.add("GET", "/system/status", {"Version": "2.20.0"})
        session.add("POST", "/stacks/create/standalone/string", {"Id": 1})

        result = runner.invoke(main, [
            "deploy", "-C", str(workspace), "--token", TOKEN, "--stack-name", "web",
        ])

        assert result.exit_code == 0, result.output
        call = session.last("POST", "/stacks/create/standalone/string")
        assert call.params == {"endpointId": 3}
        assert "user: app" in call.body["stackFileContent"]

    def test_dry_run(self, workspace, session):
        session.add("GET", "/stacks", [])

        result = _deploy(workspace, "--stack-definition", "stack.yml",
                         "--var", "tag=1.27", "--var", "user=nobody", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "image: nginx:1.27" in result.output
        assert "would-create" in result.output
        assert session.paths() == [("GET", "/stacks")]

    def test_missing_inputs(self, workspace):
        result = runner.invoke(main, ["deploy", "-C", str(workspace), "--stack-definition", "stack.yml"])
        assert result.exit_code == 1
        assert "--host" in result.output
        assert "--token" in result.output
        assert "--stack-name" in result.output

    def test_nothing_to_deploy(self, workspace, session):
        result = _deploy(workspace)
        assert result.exit_code == 1
        assert "Failed to deploy stack: web on endpoint: 1" in result.output
        assert session.calls == []

    def test_invalid_variables(self, workspace):
        result = _deploy(workspace, "--stack-definition", "stack.yml",
                         "--template-variables", "{not json")
        assert result.exit_code == 1
        assert "Invalid template variables JSON" in result.output

    def test_malformed_config(self, workspace, session):
        (workspace / CONFIG_FILENAME).write_text("host: [unclosed\n")
        result = _deploy(workspace, "--stack-definition", "stack.yml")
        assert result.exit_code == 1
        assert "Error: Invalid YAML" in result.output
        assert session.calls == []

    def test_http_failure(self, workspace, session):
        session.add("GET", "/stacks", {"message": "Invalid API key"}, status=401)
        result = _deploy(workspace, "--stack-definition", "stack.yml")
        assert result.exit_code == 1
        assert "HTTP Status 401" in result.output
        assert "Invalid API key" in result.output


class TestTemplate:
    def test_render_to_stdout(self, workspace):
        result = runner.invoke(main, [
            "template", "stack.yml", "-C", str(workspace),
            "--var", "tag=1.25", "--var", "user=nobody",
            "--tag-replacements", "nginx:1.27",
        ])
        assert result.exit_code == 0, result.output
        assert "image: nginx:1.27" in result.output
        assert "user: nobody" in result.output

    def test_render_to_file(self, workspace, tmp_path):
        out = tmp_path / "rendered.yml"
        result = runner.invoke(main, [
            "template", "stack.yml", "-C", str(workspace), "-o", str(out),
        ])
        assert result.exit_code == 0, result.output
        assert out.read_text() == DEFINITION

    def test_missing_file(self, workspace):
        result = runner.invoke(main, ["template", "nope.yml", "-C", str(workspace)])
        assert result.exit_code == 1
        assert "Could not find stack-definition file" in result.output

    def test_not_utf8(self, workspace):
        (workspace / "bad.yml").write_bytes(b"image: \xff\xfe\n")
        result = runner.invoke(main, ["template", "bad.yml", "-C", str(workspace)])
        assert result.exit_code == 1
        assert "Error: " in result.output
        assert "not valid UTF-8" in result.output

    def test_no_definition(self, workspace):
        result = runner.invoke(main, ["template", "-C", str(workspace)])
        assert result.exit_code == 1
        assert "No stack definition" in result.output


class TestStacks:
    def test_list(self, workspace, session):
        session.add("GET", "/stacks", [
            {"Id": 2, "Name": "web", "EndpointId": 1, "Type": 2,
             "Env": [{"name": "A", "value": "1"}]},
            {"Id": 3, "Name": "workers", "EndpointId": 1, "Type": 1},
        ])
        result = runner.invoke(main, [
            "stacks", "-C", str(workspace), "--host", HOST, "--token", TOKEN,
            "--swarm-id", "swarm-1",
        ])
        assert result.exit_code == 0, result.output
        assert "web" in result.output
        assert "compose" in result.output
        assert "swarm" in result.output
        assert session.last("GET", "/stacks").params == {"filters": '{"SwarmId":"swarm-1"}'}

    def test_empty(self, workspace, session):
        session.add("GET", "/stacks", [])
        result = runner.invoke(main, [
            "stacks", "-C", str(workspace), "--host", HOST, "--token", TOKEN,
        ])
        assert result.exit_code == 0
        assert "No stacks found." in result.output

    def test_requires_credentials(self, workspace):
        result = runner.invoke(main, ["stacks", "-C", str(workspace)])
        assert result.exit_code == 1


class TestVersion:
    def test_version(self, workspace, session):
        session.add("GET", "/system/status", status=404)
        session.add("GET", "/status", {"Version": "2.16.2"})
        result = runner.invoke(main, [
            "version", "-C", str(workspace), "--host", HOST, "--token", TOKEN,
        ])
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith("2.16.2")
