"""Kinds and states used across subsystem boundaries."""

from enum import Enum


class FieldKind(str, Enum):
    """Kind tag of a schema field variant.

    Uses (str, Enum) because the value appears in widget hints and CLI output.
    """

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"


class FormState(str, Enum):
    """Lifecycle state of a FormController.

    LOADING: schema not yet available
    READY: schema available, value populated
    SUBMITTING: a save or test is in flight
    LOAD_ERROR: schema retrieval failed; terminal until initialize()
    """

    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    LOAD_ERROR = "load_error"


class SubmissionKind(str, Enum):
    """Kind of external submission handed to a collaborator."""

    SAVE = "save"
    TEST = "test"


class WidgetControl(str, Enum):
    """Editable control a renderer should use for a field."""

    TEXT = "text"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    URL = "url"
    NUMBER = "number"
    TOGGLE = "toggle"
    SELECT = "select"
    LIST = "list"
    JSON = "json"
