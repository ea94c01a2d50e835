# src/fleetform/forms/hookspecs.py
"""pluggy hook specifications for form collaborators.

The engine never performs I/O itself. Schema retrieval, configuration
persistence and "test configuration" calls are owned by collaborators that
implement these hooks.

Usage (implementing a collaborator):
    from fleetform.forms.hookspecs import hookimpl

    class MyBackend:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def fleetform_load_schema(self, plugin_name):
            return fetch_schema(plugin_name)

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks collaborator implementations of those hooks.
"""

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from fleetform.clients.models import PluginTestResult

# Project name for pluggy
PROJECT_NAME = "fleetform"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FleetformLoadSpec:
    """Hook specifications for loading a plugin's form inputs."""

    @hookspec(firstresult=True)
    def fleetform_load_schema(self, plugin_name: str) -> dict[str, Any] | None:  # type: ignore[empty-body]
        """Return the raw configuration schema document of a plugin."""

    @hookspec(firstresult=True)
    def fleetform_load_configuration(self, plugin_name: str) -> dict[str, Any] | None:  # type: ignore[empty-body]
        """Return the stored configuration, or None if never configured."""


class FleetformSubmitSpec:
    """Hook specifications for submissions.

    Implementations perform the external call and either return or raise;
    the controller treats either outcome as settlement.
    """

    @hookspec(firstresult=True)
    def fleetform_save_configuration(  # type: ignore[empty-body]
        self, plugin_name: str, config: dict[str, Any]
    ) -> Any:
        """Persist a validated configuration (the 'configured' event)."""

    @hookspec(firstresult=True)
    def fleetform_test_configuration(  # type: ignore[empty-body]
        self, plugin_name: str, config: dict[str, Any]
    ) -> "PluginTestResult | None":
        """Exercise a validated configuration against the plugin."""
