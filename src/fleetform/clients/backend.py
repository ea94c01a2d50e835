"""Hook implementation backed by the plugin REST API."""

from typing import Any

from fleetform.clients.models import PluginTestResult
from fleetform.clients.plugin_api import PluginAPIClient
from fleetform.contracts import PluginAPIError
from fleetform.forms.hookspecs import hookimpl


class RemotePluginBackend:
    """Loads schemas/configurations and performs save/test over HTTP.

    Register with FormHooks to give a FormController its collaborators.
    """

    def __init__(self, client: PluginAPIClient, *, enable_on_save: bool = True) -> None:
        self._client = client
        self._enable_on_save = enable_on_save

    @hookimpl
    def fleetform_load_schema(self, plugin_name: str) -> dict[str, Any]:
        return self._client.get_schema(plugin_name)

    @hookimpl
    def fleetform_load_configuration(self, plugin_name: str) -> dict[str, Any] | None:
        try:
            record = self._client.get_config(plugin_name)
        except PluginAPIError as e:
            # Never-configured plugins have no stored configuration
            if e.status_code == 404:
                return None
            raise
        return record.config or None

    @hookimpl
    def fleetform_save_configuration(self, plugin_name: str, config: dict[str, Any]) -> Any:
        return self._client.update_config(plugin_name, config, enabled=self._enable_on_save)

    @hookimpl
    def fleetform_test_configuration(
        self, plugin_name: str, config: dict[str, Any]
    ) -> PluginTestResult:
        return self._client.test_plugin(plugin_name, config)
