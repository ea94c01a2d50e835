"""Hook manager connecting form controllers to their collaborators.

Uses pluggy for hook-based registration.
"""

from typing import Any

import pluggy

from fleetform.contracts import MissingCollaboratorError
from fleetform.forms.hookspecs import PROJECT_NAME, FleetformLoadSpec, FleetformSubmitSpec


class FormHooks:
    """Registry of collaborators implementing the fleetform hooks.

    Usage:
        hooks = FormHooks()
        hooks.register(RemotePluginBackend(client))

        controller = FormController("gitops", hooks=hooks)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FleetformLoadSpec)
        self._pm.add_hookspecs(FleetformSubmitSpec)

    def register(self, collaborator: Any, name: str | None = None) -> None:
        """Register an object implementing one or more hooks."""
        self._pm.register(collaborator, name=name)

    def unregister(self, collaborator: Any) -> None:
        self._pm.unregister(collaborator)

    def implements(self, hook_name: str) -> bool:
        """Whether any registered collaborator implements the hook."""
        caller = getattr(self._pm.hook, hook_name)
        return bool(caller.get_hookimpls())

    def _require(self, hook_name: str) -> Any:
        if not self.implements(hook_name):
            raise MissingCollaboratorError(f"No collaborator registered for {hook_name}")
        return getattr(self._pm.hook, hook_name)

    def load_schema(self, plugin_name: str) -> Any:
        return self._require("fleetform_load_schema")(plugin_name=plugin_name)

    def load_configuration(self, plugin_name: str) -> dict[str, Any] | None:
        """Stored configuration, or None when no loader is registered."""
        if not self.implements("fleetform_load_configuration"):
            return None
        return self._pm.hook.fleetform_load_configuration(plugin_name=plugin_name)

    def save_configuration(self, plugin_name: str, config: dict[str, Any]) -> Any:
        return self._require("fleetform_save_configuration")(
            plugin_name=plugin_name, config=config
        )

    def test_configuration(self, plugin_name: str, config: dict[str, Any]) -> Any:
        return self._require("fleetform_test_configuration")(
            plugin_name=plugin_name, config=config
        )
