"""Form-level records: issues, per-field edit state, widget hints, tickets.

These types answer: "What does a renderer or caller see of a form?"
"""

from dataclasses import dataclass, field
from typing import Any

from fleetform.contracts.enums import SubmissionKind, WidgetControl


@dataclass(frozen=True)
class FieldIssue:
    """A validation problem attached to one field.

    Externally only ``message`` is surfaced; ``field`` lets renderers place
    the message next to its control.
    """

    field: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class FieldState:
    """Transient edit state of one field.

    edited_text holds the raw buffer while it differs from the canonical
    value's rendering (unparseable JSON, non-numeric text).
    """

    edited_text: str | None = None
    is_dirty: bool = False


@dataclass(frozen=True)
class SelectOption:
    """One option of a select control. value None is the empty sentinel."""

    value: Any
    label: str


@dataclass(frozen=True)
class WidgetHint:
    """How a field should be presented and edited."""

    control: WidgetControl
    masked: bool = False
    multiline: bool = False
    step: int | str | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    options: tuple[SelectOption, ...] = ()
    item: "WidgetHint | None" = None


@dataclass(frozen=True)
class SubmissionTicket:
    """Handle for one in-flight save or test.

    config is the deep copy that was handed to the collaborator.
    """

    kind: SubmissionKind
    plugin_name: str
    config: dict[str, Any] = field(repr=False)
