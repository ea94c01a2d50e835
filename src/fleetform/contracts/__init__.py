"""Shared contracts for cross-boundary data types.

Import pattern:
    from fleetform.contracts import FieldKind, FormState, FieldIssue
"""

from fleetform.contracts.enums import (
    FieldKind,
    FormState,
    SubmissionKind,
    WidgetControl,
)
from fleetform.contracts.errors import (
    FleetformError,
    FormStateError,
    MissingCollaboratorError,
    PluginAPIError,
    ProfileError,
    SchemaDocumentError,
    SchemaLoadError,
    UnknownFieldError,
)
from fleetform.contracts.forms import (
    FieldIssue,
    FieldState,
    SelectOption,
    SubmissionTicket,
    WidgetHint,
)
from fleetform.contracts.sentinels import MISSING

__all__ = [
    "MISSING",
    "FieldIssue",
    "FieldKind",
    "FieldState",
    "FleetformError",
    "FormState",
    "FormStateError",
    "MissingCollaboratorError",
    "PluginAPIError",
    "ProfileError",
    "SchemaDocumentError",
    "SchemaLoadError",
    "SelectOption",
    "SubmissionKind",
    "SubmissionTicket",
    "UnknownFieldError",
    "WidgetControl",
    "WidgetHint",
]
