"""Clients for the fleet manager's plugin API.

Example:
    from fleetform.clients import PluginAPIClient, RemotePluginBackend
    from fleetform.forms import FormController, FormHooks

    hooks = FormHooks()
    hooks.register(RemotePluginBackend(PluginAPIClient(settings.api)))
    controller = FormController("gitops", hooks=hooks)
    controller.load()
"""

from fleetform.clients.backend import RemotePluginBackend
from fleetform.clients.models import (
    PluginCategory,
    PluginConfigRecord,
    PluginHealth,
    PluginListing,
    PluginStatus,
    PluginSummary,
    PluginTestResult,
)
from fleetform.clients.plugin_api import PluginAPIClient

__all__ = [
    "PluginAPIClient",
    "PluginCategory",
    "PluginConfigRecord",
    "PluginHealth",
    "PluginListing",
    "PluginStatus",
    "PluginSummary",
    "PluginTestResult",
    "RemotePluginBackend",
]
