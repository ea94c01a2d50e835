# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from fleetform.forms.hookspecs import hookimpl
from fleetform.schema import Schema, parse_schema

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Schemas
# =============================================================================

PLUGIN_SCHEMA_DOCUMENT: dict[str, Any] = {
    "title": "Webhook Export",
    "version": "1.2.0",
    "properties": {
        "apiKey": {
            "type": "string",
            "title": "API Key",
            "description": "Key used to authenticate against the receiver",
            "format": "password",
        },
        "maxRetries": {
            "type": "integer",
            "title": "Max Retries",
            "minimum": 1,
            "maximum": 10,
            "default": 3,
        },
        "enableLogging": {
            "type": "boolean",
            "title": "Enable Logging",
            "default": False,
        },
        "categories": {
            "type": "array",
            "title": "Categories",
            "items": {"type": "string", "enum": ["devices", "metrics", "events"]},
        },
        "format": {
            "type": "string",
            "title": "Output Format",
            "enum": ["json", "yaml", "xml"],
            "default": "json",
        },
        "advancedConfig": {
            "type": "object",
            "title": "Advanced Configuration",
        },
    },
    "required": ["apiKey", "maxRetries"],
    "examples": [
        {
            "apiKey": "demo-key",
            "maxRetries": 5,
            "enableLogging": True,
            "categories": ["devices"],
            "format": "yaml",
            "advancedConfig": {"batch": 50},
        }
    ],
}


@pytest.fixture
def valid_config() -> dict[str, Any]:
    """A configuration that satisfies the shared schema."""
    return {
        "apiKey": "secret",
        "maxRetries": 3,
        "enableLogging": False,
        "categories": ["devices", "events"],
        "format": "json",
        "advancedConfig": {"timeout": 30},
    }


@pytest.fixture
def schema_document() -> dict[str, Any]:
    """Fresh copy of the shared raw schema document."""
    import copy

    return copy.deepcopy(PLUGIN_SCHEMA_DOCUMENT)


@pytest.fixture
def plugin_schema() -> Schema:
    return parse_schema(PLUGIN_SCHEMA_DOCUMENT)


# =============================================================================
# Collaborators
# =============================================================================


class RecordingBackend:
    """In-memory collaborator implementing every form hook.

    Usage:
        backend = RecordingBackend(schema=PLUGIN_SCHEMA_DOCUMENT)
        hooks.register(backend)
    """

    def __init__(
        self,
        schema: dict[str, Any] | None = None,
        stored: dict[str, Any] | None = None,
        *,
        fail_with: Exception | None = None,
    ) -> None:
        self.schema = schema
        self.stored = stored
        self.fail_with = fail_with
        self.saved: list[tuple[str, dict[str, Any]]] = []
        self.tested: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def fleetform_load_schema(self, plugin_name: str) -> dict[str, Any] | None:
        if self.fail_with is not None:
            raise self.fail_with
        return self.schema

    @hookimpl
    def fleetform_load_configuration(self, plugin_name: str) -> dict[str, Any] | None:
        return self.stored

    @hookimpl
    def fleetform_save_configuration(self, plugin_name: str, config: dict[str, Any]) -> str:
        self.saved.append((plugin_name, config))
        return "saved"

    @hookimpl
    def fleetform_test_configuration(self, plugin_name: str, config: dict[str, Any]) -> str:
        self.tested.append((plugin_name, config))
        return "tested"


@pytest.fixture
def make_backend() -> Any:
    """Factory for RecordingBackend collaborators."""
    return RecordingBackend
