# src/fleetform/schema/defaults.py
"""Baseline configuration values synthesized from a schema.

Per-field precedence:
1. The declared default (deep-copied so callers never share it)
2. The type's zero value: "" / 0 (or minimum when minimum > 0) / False /
   [] / {} (nested defaults when the object declares properties)

Enum fields without a default take their first option when required and
the empty selection (None) otherwise.
"""

import copy
from collections.abc import Mapping
from typing import Any

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


class _DefaultVisitor(FieldVisitor[Any]):
    def visit_string(self, field: StringField) -> Any:
        return ""

    def visit_integer(self, field: IntegerField) -> Any:
        return _numeric_zero(field)

    def visit_number(self, field: NumberField) -> Any:
        return _numeric_zero(field)

    def visit_boolean(self, field: BooleanField) -> Any:
        return False

    def visit_enum(self, field: EnumField) -> Any:
        if field.required and field.options:
            return copy.deepcopy(field.options[0])
        return None

    def visit_array(self, field: ArrayField) -> Any:
        return []

    def visit_object(self, field: ObjectField) -> Any:
        if field.properties is None:
            return {}
        return generate_defaults(field.properties)


def _numeric_zero(field: NumericField) -> int | float:
    if field.minimum is not None and field.minimum > 0:
        return int(field.minimum) if field.integral else field.minimum
    return 0


_VISITOR = _DefaultVisitor()


def default_value(field: FieldSpec) -> Any:
    """Baseline value for one field."""
    if field.has_default:
        return copy.deepcopy(field.default)
    return field.accept(_VISITOR)


def default_item(field: ArrayField) -> Any:
    """Value appended by 'add item' on an array field."""
    return default_value(field.items)


def generate_defaults(schema: Schema) -> dict[str, Any]:
    """Synthesize a whole configuration value, in field order."""
    return {field.name: default_value(field) for field in schema}


def seed_declared_defaults(schema: Schema, stored: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of a stored configuration with declared defaults filled in.

    Only keys the stored value lacks are added; stored values always win,
    including explicit None.
    """
    seeded = copy.deepcopy(dict(stored))
    for field in schema:
        if field.has_default and field.name not in seeded:
            seeded[field.name] = copy.deepcopy(field.default)
    return seeded
