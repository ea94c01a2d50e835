# src/fleetform/cli.py
"""fleetform Command Line Interface.

Entry point for the fleetform CLI tool.
"""

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError

from fleetform import __version__
from fleetform.contracts import (
    MISSING,
    FleetformError,
    PluginAPIError,
    SchemaDocumentError,
)
from fleetform.core.config import FleetformSettings, load_settings
from fleetform.core.logging import configure_logging
from fleetform.schema import (
    Schema,
    generate_defaults,
    parse_schema_strict,
    validate as validate_value,
    widget_for,
)

app = typer.Typer(
    name="fleetform",
    help="fleetform: schema-driven plugin configuration for the fleet manager.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fleetform version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """fleetform: schema-driven plugin configuration for the fleet manager."""
    pass


# === Helpers ===


def _load_document(path: Path, what: str) -> Any:
    """Read a JSON or YAML document, exiting with a message on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        typer.echo(f"Error: {what} file not found: {path}", err=True)
        raise typer.Exit(1) from None
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        typer.echo(f"Error: {what} file is not valid: {e}", err=True)
        raise typer.Exit(1) from None


def _load_schema_file(path: Path) -> Schema:
    try:
        return parse_schema_strict(_load_document(path, "Schema"))
    except SchemaDocumentError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def _load_config_file(path: Path) -> dict[str, Any]:
    document = _load_document(path, "Config")
    if not isinstance(document, dict):
        typer.echo("Error: Config file must contain a mapping.", err=True)
        raise typer.Exit(1)
    return document


def _settings(settings: str | None) -> FleetformSettings:
    try:
        config = load_settings(Path(settings) if settings else None)
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Settings errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None
    configure_logging(config.logging.level, json_output=config.logging.json_output)
    return config


def _parse_assignments(assignments: list[str]) -> list[tuple[str, str]]:
    parsed = []
    for item in assignments:
        name, sep, raw = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{item}'")
        parsed.append((name.strip(), raw))
    return parsed


def _echo_errors(errors: list[str]) -> None:
    typer.echo("Configuration errors:", err=True)
    for message in errors:
        typer.echo(f"  - {message}", err=True)


SCHEMA_ARGUMENT = typer.Argument(..., help="Path to a JSON or YAML schema document.")


# === Offline commands ===


@app.command()
def fields(schema: Path = SCHEMA_ARGUMENT) -> None:
    """List the fields a schema declares, in display order."""
    parsed = _load_schema_file(schema)
    if not parsed.fields:
        typer.echo("Schema declares no fields.")
        return
    for field in parsed:
        hint = widget_for(field)
        marker = "*" if field.required else " "
        default = "" if field.default is MISSING else f" (default: {json.dumps(field.default)})"
        typer.echo(
            f"{marker} {field.name:<24} {field.kind.value:<8} {hint.control.value:<9} "
            f"{field.label}{default}"
        )


@app.command()
def defaults(schema: Path = SCHEMA_ARGUMENT) -> None:
    """Print the default configuration synthesized from a schema."""
    parsed = _load_schema_file(schema)
    typer.echo(json.dumps(generate_defaults(parsed), indent=2))


@app.command()
def validate(
    schema: Path = SCHEMA_ARGUMENT,
    config: Path = typer.Argument(..., help="Path to a JSON or YAML configuration."),
) -> None:
    """Validate a configuration file against a schema."""
    parsed = _load_schema_file(schema)
    errors = validate_value(parsed, _load_config_file(config))
    if errors:
        _echo_errors(errors)
        raise typer.Exit(1)
    typer.echo(f"Configuration valid: {config.name}")


# === Plugin commands ===

plugins_app = typer.Typer(help="Plugin configuration commands against a live server.")
app.add_typer(plugins_app, name="plugins")


SETTINGS_OPTION = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML file (FLEETFORM_* env vars also apply).",
)


@plugins_app.command("list")
def plugins_list(
    category: str | None = typer.Option(
        None,
        "--category",
        "-c",
        help="Only list plugins of this category.",
    ),
    settings: str | None = SETTINGS_OPTION,
) -> None:
    """List plugins known to the server."""
    from fleetform.clients import PluginAPIClient

    config = _settings(settings)
    try:
        with PluginAPIClient(config.api) as client:
            listing = client.list_plugins(category)
    except PluginAPIError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if not listing.plugins:
        typer.echo("No plugins found.")
        return
    for plugin in listing.plugins:
        typer.echo(
            f"  {plugin.name:<20} {plugin.category:<13} {plugin.status.display:<15} "
            f"{plugin.description}"
        )


@plugins_app.command("configure")
def plugins_configure(
    name: str = typer.Argument(..., help="Plugin name."),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="Configuration to apply (JSON or YAML). Defaults to the stored one.",
    ),
    assignments: list[str] = typer.Option(
        [],
        "--set",
        help="Set one field, NAME=VALUE. Repeatable.",
    ),
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="Start from a saved profile.",
    ),
    save_profile: str | None = typer.Option(
        None,
        "--save-profile",
        help="Save the resulting configuration as a named profile.",
    ),
    test: bool = typer.Option(
        False,
        "--test",
        "-t",
        help="Test the configuration against the plugin.",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Store the configuration on the server.",
    ),
    settings: str | None = SETTINGS_OPTION,
) -> None:
    """Edit, test and store a plugin's configuration."""
    from fleetform.clients import PluginAPIClient, RemotePluginBackend
    from fleetform.forms import FormController, FormHooks, JSONFileStore, ProfileManager

    config = _settings(settings)
    profiles = ProfileManager(JSONFileStore(config.profiles.resolved_path()), name)

    with PluginAPIClient(config.api) as client:
        hooks = FormHooks()
        hooks.register(RemotePluginBackend(client))
        controller = FormController(name, hooks=hooks)

        try:
            controller.load()
            if profile:
                controller.apply_template(profiles.load_profile(profile))
            if config_file is not None:
                controller.apply_template(_load_config_file(config_file))
            for field_name, raw in _parse_assignments(assignments):
                controller.set_field(field_name, raw)
        except FleetformError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None

        typer.echo(controller.preview())

        if not controller.is_valid():
            _echo_errors(controller.errors)
            raise typer.Exit(1)

        if save_profile:
            profiles.save_profile(save_profile, controller.value)
            typer.echo(f"Profile saved: {save_profile}")

        try:
            if test:
                result = controller.test()
                status = "passed" if result.success else "failed"
                timing = f" in {result.duration_ms:.0f} ms" if result.duration_ms is not None else ""
                typer.echo(f"Test {status}{timing}: {result.message or ''}".rstrip(": "))
                for warning in result.warnings:
                    typer.echo(f"  warning: {warning}")
                for error in result.errors:
                    typer.echo(f"  error: {error}", err=True)
                if not result.success:
                    raise typer.Exit(1)
            if save:
                controller.save()
                typer.echo(f"Configuration saved for {name}.")
        except PluginAPIError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None


if __name__ == "__main__":
    app()
