"""Schema-driven configuration engine: model, defaults, validation, codec."""

from fleetform.schema.codec import Decoded, decode, decode_item, encode, widget_for
from fleetform.schema.defaults import (
    default_item,
    default_value,
    generate_defaults,
    seed_declared_defaults,
)
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
    humanize,
    parse_field,
    parse_schema,
    parse_schema_strict,
)
from fleetform.schema.validator import check_field, collect_issues, is_empty, validate

__all__ = [
    "ArrayField",
    "BooleanField",
    "Decoded",
    "EnumField",
    "FieldSpec",
    "FieldVisitor",
    "IntegerField",
    "NumberField",
    "NumericField",
    "ObjectField",
    "Schema",
    "StringField",
    "check_field",
    "collect_issues",
    "decode",
    "decode_item",
    "default_item",
    "default_value",
    "encode",
    "generate_defaults",
    "humanize",
    "is_empty",
    "parse_field",
    "parse_schema",
    "parse_schema_strict",
    "seed_declared_defaults",
    "validate",
    "widget_for",
]
