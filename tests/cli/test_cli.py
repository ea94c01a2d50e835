# tests/cli/test_cli.py
"""Tests for the fleetform CLI."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def schema_file(tmp_path: Path, schema_document: dict[str, Any]) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(schema_document))
    return path


class TestVersion:
    def test_version(self) -> None:
        from fleetform import __version__
        from fleetform.cli import app

        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestFieldsCommand:
    def test_lists_fields(self, schema_file: Path) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["fields", str(schema_file)])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0].startswith("* apiKey")
        assert "password" in lines[0]
        assert "(default: 3)" in lines[1]
        assert len(lines) == 6

    def test_non_mapping_schema(self, tmp_path: Path) -> None:
        from fleetform.cli import app

        path = tmp_path / "schema.yaml"
        path.write_text("- just\n- a list\n")

        result = runner.invoke(app, ["fields", str(path)])

        assert result.exit_code == 1
        assert "must be a mapping" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["fields", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestDefaultsCommand:
    def test_prints_defaults(self, schema_file: Path) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["defaults", str(schema_file)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["maxRetries"] == 3


class TestValidateCommand:
    def test_valid_yaml_config(
        self, schema_file: Path, tmp_path: Path, valid_config: dict[str, Any]
    ) -> None:
        from fleetform.cli import app

        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(valid_config))

        result = runner.invoke(app, ["validate", str(schema_file), str(config_file)])

        assert result.exit_code == 0
        assert "Configuration valid" in result.stdout

    def test_invalid_config(self, schema_file: Path, tmp_path: Path) -> None:
        from fleetform.cli import app

        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"maxRetries": 0}))

        result = runner.invoke(app, ["validate", str(schema_file), str(config_file)])

        assert result.exit_code == 1
        assert "API Key is required" in result.output
        assert "Max Retries must be at least 1" in result.output

    def test_unparseable_config(self, schema_file: Path, tmp_path: Path) -> None:
        from fleetform.cli import app

        config_file = tmp_path / "config.json"
        config_file.write_text("{oops")

        result = runner.invoke(app, ["validate", str(schema_file), str(config_file)])

        assert result.exit_code == 1
        assert "not valid" in result.output


class TestPluginsCommands:
    """Commands that talk to the server, backed by a mock transport."""

    @pytest.fixture
    def server(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        schema_document: dict[str, Any],
        valid_config: dict[str, Any],
    ) -> dict[str, Any]:
        import fleetform.clients

        state: dict[str, Any] = {"stored": valid_config, "requests": []}

        def handler(request: httpx.Request) -> httpx.Response:
            state["requests"].append((request.method, request.url.path))
            path = request.url.path
            if path.endswith("/export/plugins"):
                data: Any = {
                    "plugins": [
                        {
                            "name": "webhook",
                            "category": "sync",
                            "description": "Push exports to a URL",
                            "status": {"available": True},
                        }
                    ]
                }
            elif path.endswith("/schema"):
                data = schema_document
            elif path.endswith("/config") and request.method == "PUT":
                state["stored"] = json.loads(request.content)["config"]
                data = {"plugin_name": "webhook", "config": state["stored"]}
            elif path.endswith("/config"):
                data = {"plugin_name": "webhook", "config": state["stored"]}
            else:
                data = {"success": True, "duration_ms": 8, "message": "reachable"}
            return httpx.Response(200, json={"success": True, "data": data})

        class MockedClient(fleetform.clients.PluginAPIClient):
            def __init__(self, settings: Any = None, **kwargs: Any) -> None:
                super().__init__(settings, transport=httpx.MockTransport(handler))

        monkeypatch.setattr(fleetform.clients, "PluginAPIClient", MockedClient)
        monkeypatch.setenv("FLEETFORM_PROFILES__PATH", str(tmp_path / "profiles.json"))
        monkeypatch.setenv("FLEETFORM_LOGGING__LEVEL", "ERROR")
        return state

    def test_list(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["plugins", "list"])

        assert result.exit_code == 0
        assert "webhook" in result.stdout
        assert "Not Configured" in result.stdout

    def test_configure_set_and_save(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(
            app,
            ["plugins", "configure", "webhook", "--set", "maxRetries=7", "--save"],
        )

        assert result.exit_code == 0, result.output
        assert server["stored"]["maxRetries"] == 7
        assert "Configuration saved for webhook." in result.stdout

    def test_configure_invalid_value_is_not_saved(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(
            app,
            ["plugins", "configure", "webhook", "--set", "maxRetries=0", "--save"],
        )

        assert result.exit_code == 1
        assert "Max Retries must be at least 1" in result.output
        assert ("PUT", "/api/v1/export/plugins/webhook/config") not in server["requests"]

    def test_configure_test(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["plugins", "configure", "webhook", "--test"])

        assert result.exit_code == 0, result.output
        assert "Test passed in 8 ms: reachable" in result.stdout

    def test_configure_unknown_field(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["plugins", "configure", "webhook", "--set", "ghost=1"])

        assert result.exit_code == 1
        assert "Unknown field: 'ghost'" in result.output

    def test_profile_round_trip(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        saved = runner.invoke(
            app,
            [
                "plugins",
                "configure",
                "webhook",
                "--set",
                "format=xml",
                "--save-profile",
                "Staging",
            ],
        )
        assert saved.exit_code == 0, saved.output
        assert "Profile saved: Staging" in saved.stdout

        loaded = runner.invoke(app, ["plugins", "configure", "webhook", "--profile", "Staging"])
        assert loaded.exit_code == 0, loaded.output
        assert '"format": "xml"' in loaded.stdout

    def test_unknown_profile(self, server: dict[str, Any]) -> None:
        from fleetform.cli import app

        result = runner.invoke(app, ["plugins", "configure", "webhook", "--profile", "ghost"])

        assert result.exit_code == 1
        assert "No profile named 'ghost'" in result.output
