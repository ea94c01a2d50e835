"""Exception types raised across subsystem boundaries.

Validation problems are never raised: they are returned as message lists.
Only caller misuse and externally-owned I/O failures become exceptions.
"""


class FleetformError(Exception):
    """Base class for fleetform errors."""


class SchemaLoadError(FleetformError):
    """Raised when a plugin schema could not be retrieved.

    The controller that attempted the load is left in LOAD_ERROR.
    """

    def __init__(self, plugin_name: str, message: str) -> None:
        super().__init__(f"Failed to load schema for '{plugin_name}': {message}")
        self.plugin_name = plugin_name
        self.message = message


class SchemaDocumentError(FleetformError):
    """Raised by strict document loading when a schema is not a mapping."""


class FormStateError(FleetformError):
    """Raised when an operation is not allowed in the controller's state."""


class UnknownFieldError(FleetformError, KeyError):
    """Raised when an operation names a field the schema does not declare."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown field: '{self.name}'"


class ProfileError(FleetformError):
    """Raised when a named configuration profile does not exist."""


class PluginAPIError(FleetformError):
    """Raised by the plugin API client on transport or server failure.

    Carries the HTTP status code (None for transport failures) and the
    server-provided message when one was present in the response envelope.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingCollaboratorError(FleetformError):
    """Raised when no registered collaborator implements a required hook."""
