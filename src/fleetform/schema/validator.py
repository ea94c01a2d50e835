# src/fleetform/schema/validator.py
"""Validation of a configuration value against its schema.

validate() is a pure function of (schema, value, field states) that returns
human-readable messages. It never raises on malformed values: whatever the
user has typed so far, the form stays editable and the messages explain
what blocks saving.

Ordering contract:
- fields are checked in declaration order
- within one field, a required violation comes first and suppresses the
  remaining checks for that field (an empty value has nothing to range-check)
- a retained edit buffer is judged before the committed value it shadows
- structured object fields are checked property by property, each message
  prefixed with the object label ("MQTT Port must be at least 1")

Message wording is relied on by callers and tests:
    "<Title> is required"
    "<Title> must be at least <minimum>"
    "<Title> must be at most <maximum>"
    "<Title> must be valid JSON"
    "<Title> must be a valid URL"
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from fleetform.contracts import FieldIssue, FieldState
from fleetform.core.canonical import format_number, is_finite_number, parse_json
from fleetform.schema.model import (
    ArrayField,
    BooleanField,
    EnumField,
    FieldSpec,
    FieldVisitor,
    IntegerField,
    NumberField,
    NumericField,
    ObjectField,
    Schema,
    StringField,
)

_ABSENT = object()


def is_empty(value: Any) -> bool:
    """Empty for required-checks: absent, None or "". An empty list is NOT empty."""
    return value is _ABSENT or value is None or value == ""


def is_valid_url(text: str) -> bool:
    """True for an absolute URL with a scheme and a host."""
    if any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc) and parts.scheme.isascii()


def _enum_text(options: tuple[Any, ...]) -> str:
    return ", ".join(str(option) for option in options)


class _ValueChecker(FieldVisitor[list[str]]):
    """Checks one present, non-empty value. Messages are prefixed by the caller."""

    def __init__(self, value: Any, state: FieldState) -> None:
        self.value = value
        self.state = state

    def visit_string(self, field: StringField) -> list[str]:
        value = self.value
        if not isinstance(value, str):
            return ["must be text"]
        problems: list[str] = []
        if field.min_length is not None and len(value) < field.min_length:
            problems.append(f"must be at least {field.min_length} characters")
        if field.max_length is not None and len(value) > field.max_length:
            problems.append(f"must be at most {field.max_length} characters")
        if field.pattern is not None and not _matches(field.pattern, value):
            problems.append("format is invalid")
        if field.format == "url" and not is_valid_url(value):
            problems.append("must be a valid URL")
        return problems

    def visit_integer(self, field: IntegerField) -> list[str]:
        return _check_numeric(field, self.value)

    def visit_number(self, field: NumberField) -> list[str]:
        return _check_numeric(field, self.value)

    def visit_boolean(self, field: BooleanField) -> list[str]:
        if not isinstance(self.value, bool):
            return ["must be true or false"]
        return []

    def visit_enum(self, field: EnumField) -> list[str]:
        if self.value not in field.options:
            return [f"must be one of: {_enum_text(field.options)}"]
        return []

    def visit_array(self, field: ArrayField) -> list[str]:
        if not isinstance(self.value, list):
            return ["must be a list"]
        problems: list[str] = []
        for index, item in enumerate(self.value, start=1):
            if is_empty(item):
                continue
            checker = _ValueChecker(item, FieldState())
            problems.extend(
                f"item {index} {problem}" for problem in field.items.accept(checker)
            )
        return problems

    def visit_object(self, field: ObjectField) -> list[str]:
        buffered = self.state.edited_text
        if buffered is None and isinstance(self.value, str):
            # Raw text assigned straight into the value is judged like a buffer
            buffered = self.value
        value = self.value
        if buffered is not None:
            parsed = parse_json(buffered)
            if not parsed.ok:
                return ["must be valid JSON"]
            value = parsed.value
        if not isinstance(value, Mapping):
            return ["must be a JSON object"]
        if field.properties is None:
            return []
        # Nested messages already start with the nested label
        return [issue.message for issue in collect_issues(field.properties, value)]


def _check_numeric(field: NumericField, value: Any) -> list[str]:
    if not is_finite_number(value):
        return ["must be a number"]
    problems: list[str] = []
    if field.integral and isinstance(value, float) and not value.is_integer():
        problems.append("must be a whole number")
    if field.minimum is not None and value < field.minimum:
        problems.append(f"must be at least {format_number(field.minimum)}")
    if field.maximum is not None and value > field.maximum:
        problems.append(f"must be at most {format_number(field.maximum)}")
    return problems


def _matches(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error:
        # An unusable pattern in the schema is not the user's mistake
        return True


def _buffer_problems(field: FieldSpec, text: str) -> list[str]:
    """Problems with raw text the codec could not commit."""
    if isinstance(field, ArrayField):
        parsed = parse_json(text)
        if not parsed.ok:
            return ["must be valid JSON"]
        if not isinstance(parsed.value, list):
            return ["must be a JSON list"]
        return []
    if isinstance(field, NumericField):
        return ["must be a number"]
    if isinstance(field, BooleanField):
        return ["must be true or false"]
    return []


def check_field(
    field: FieldSpec,
    value: Any = _ABSENT,
    state: FieldState | None = None,
) -> list[FieldIssue]:
    """Validate one field's value. Omit value to check an absent key."""
    state = state or FieldState()
    label = field.label

    # Edits in progress are judged by their buffer, not the stale value
    if state.edited_text is not None:
        if isinstance(field, ObjectField):
            if field.required and state.edited_text.strip() == "":
                return [FieldIssue(field.name, f"{label} is required")]
            problems = field.accept(_ValueChecker(value, state))
            return [FieldIssue(field.name, f"{label} {problem}") for problem in problems]
        problems = _buffer_problems(field, state.edited_text)
        if problems:
            return [FieldIssue(field.name, f"{label} {problem}") for problem in problems]

    if is_empty(value):
        if field.required:
            return [FieldIssue(field.name, f"{label} is required")]
        return []

    problems = field.accept(_ValueChecker(value, state))
    return [FieldIssue(field.name, f"{label} {problem}") for problem in problems]


def collect_issues(
    schema: Schema,
    value: Mapping[str, Any],
    field_states: Mapping[str, FieldState] | None = None,
) -> list[FieldIssue]:
    """Validate a whole configuration value, in declaration order."""
    field_states = field_states or {}
    issues: list[FieldIssue] = []
    for field in schema:
        issues.extend(
            check_field(
                field,
                value.get(field.name, _ABSENT),
                field_states.get(field.name),
            )
        )
    return issues


def validate(
    schema: Schema,
    value: Mapping[str, Any],
    field_states: Mapping[str, FieldState] | None = None,
) -> list[str]:
    """Validate a configuration value.

    Args:
        schema: Parsed schema
        value: Configuration value being edited
        field_states: Per-field edit buffers (text the codec kept uncommitted)

    Returns:
        Ordered list of messages; empty when the value is valid
    """
    return [issue.message for issue in collect_issues(schema, value, field_states)]
