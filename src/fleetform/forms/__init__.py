"""Form controller, pure mutations, collaborator hooks and profiles."""

from fleetform.forms.controller import FormController
from fleetform.forms.events import FormHooks
from fleetform.forms.hookspecs import PROJECT_NAME, hookimpl
from fleetform.forms.mutations import (
    AddArrayItem,
    FormSnapshot,
    Mutation,
    RemoveArrayItem,
    ReplaceValue,
    SetArrayItem,
    SetField,
    apply_mutation,
)
from fleetform.forms.profiles import JSONFileStore, KeyValueStore, MemoryStore, ProfileManager

__all__ = [
    "PROJECT_NAME",
    "AddArrayItem",
    "FormController",
    "FormHooks",
    "FormSnapshot",
    "JSONFileStore",
    "KeyValueStore",
    "MemoryStore",
    "Mutation",
    "ProfileManager",
    "RemoveArrayItem",
    "ReplaceValue",
    "SetArrayItem",
    "SetField",
    "apply_mutation",
    "hookimpl",
]
