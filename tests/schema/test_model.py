# tests/schema/test_model.py
"""Tests for schema parsing into field variants."""

import pytest

from fleetform.contracts import MISSING, FieldKind, SchemaDocumentError, UnknownFieldError
from fleetform.schema import (
    ArrayField,
    BooleanField,
    EnumField,
    IntegerField,
    NumberField,
    ObjectField,
    Schema,
    StringField,
    humanize,
    parse_field,
    parse_schema,
    parse_schema_strict,
)


class TestHumanize:
    """Labels derived from property names."""

    @pytest.mark.parametrize(
        ("name", "label"),
        [
            ("maxRetries", "Max Retries"),
            ("api_key", "API Key"),
            ("webhookURL", "Webhook URL"),
            ("retry-count", "Retry Count"),
            ("timeout", "Timeout"),
            ("port2", "Port 2"),
        ],
    )
    def test_labels(self, name: str, label: str) -> None:
        assert humanize(name) == label

    def test_unsplittable_name_is_kept(self) -> None:
        assert humanize("__") == "__"


class TestParseSchema:
    """Whole-document parsing."""

    def test_fields_keep_document_order(self, plugin_schema: Schema) -> None:
        assert plugin_schema.names == (
            "apiKey",
            "maxRetries",
            "enableLogging",
            "categories",
            "format",
            "advancedConfig",
        )

    def test_variants(self, plugin_schema: Schema) -> None:
        assert isinstance(plugin_schema.field("apiKey"), StringField)
        assert isinstance(plugin_schema.field("maxRetries"), IntegerField)
        assert isinstance(plugin_schema.field("enableLogging"), BooleanField)
        assert isinstance(plugin_schema.field("categories"), ArrayField)
        assert isinstance(plugin_schema.field("format"), EnumField)
        assert isinstance(plugin_schema.field("advancedConfig"), ObjectField)

    def test_required_names(self, plugin_schema: Schema) -> None:
        assert plugin_schema.required == frozenset({"apiKey", "maxRetries"})
        assert plugin_schema.field("apiKey").required is True
        assert plugin_schema.field("enableLogging").required is False

    def test_document_metadata(self, plugin_schema: Schema) -> None:
        assert plugin_schema.title == "Webhook Export"
        assert plugin_schema.version == "1.2.0"
        assert len(plugin_schema.examples) == 1

    def test_required_names_not_declared_are_dropped(self) -> None:
        schema = parse_schema({"properties": {"a": {}}, "required": ["a", "ghost"]})
        assert schema.required == frozenset({"a"})

    @pytest.mark.parametrize("document", [None, [], "schema", 42])
    def test_non_mapping_yields_empty_schema(self, document: object) -> None:
        schema = parse_schema(document)
        assert len(schema) == 0
        assert schema.required == frozenset()

    def test_schema_passes_through(self, plugin_schema: Schema) -> None:
        assert parse_schema(plugin_schema) is plugin_schema

    def test_malformed_top_level_attributes_are_dropped(self) -> None:
        schema = parse_schema(
            {"properties": "nope", "required": "apiKey", "examples": [1, {"a": 1}], "version": 2}
        )
        assert len(schema) == 0
        assert schema.examples == ({"a": 1},)
        assert schema.version == "2"

    def test_contains_and_iteration(self, plugin_schema: Schema) -> None:
        assert "apiKey" in plugin_schema
        assert "ghost" not in plugin_schema
        assert [f.name for f in plugin_schema] == list(plugin_schema.names)

    def test_unknown_field_lookup_raises(self, plugin_schema: Schema) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            plugin_schema.field("ghost")
        assert str(exc_info.value) == "Unknown field: 'ghost'"
        # Also usable where a KeyError is expected
        assert isinstance(exc_info.value, KeyError)


class TestParseSchemaStrict:
    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(SchemaDocumentError, match="must be a mapping, got list"):
            parse_schema_strict([])

    def test_accepts_mapping(self) -> None:
        assert parse_schema_strict({"properties": {"a": {"type": "string"}}}).names == ("a",)


class TestParseField:
    """Single property normalisation."""

    def test_unknown_type_becomes_string(self) -> None:
        field = parse_field("x", {"type": "datetime"})
        assert isinstance(field, StringField)
        assert field.kind is FieldKind.STRING

    def test_missing_type_becomes_string(self) -> None:
        assert isinstance(parse_field("x", {}), StringField)

    def test_non_mapping_entry_becomes_string(self) -> None:
        field = parse_field("x", "garbage")
        assert isinstance(field, StringField)
        assert field.label == "X"

    def test_enum_wins_over_declared_type(self) -> None:
        field = parse_field("level", {"type": "integer", "enum": [1, 2, 3]})
        assert isinstance(field, EnumField)
        assert field.options == (1, 2, 3)
        assert field.value_type is FieldKind.INTEGER

    def test_absent_default_is_missing(self) -> None:
        field = parse_field("x", {"type": "string"})
        assert field.default is MISSING
        assert field.has_default is False

    def test_declared_null_default_is_kept(self) -> None:
        field = parse_field("x", {"type": "string", "default": None})
        assert field.default is None
        assert field.has_default is True

    def test_sensitive_becomes_password(self) -> None:
        field = parse_field("token", {"type": "string", "sensitive": True})
        assert isinstance(field, StringField)
        assert field.is_password

    def test_string_constraints(self) -> None:
        field = parse_field(
            "host", {"type": "string", "minLength": 3, "maxLength": 9, "pattern": "^[a-z]+$"}
        )
        assert isinstance(field, StringField)
        assert (field.min_length, field.max_length, field.pattern) == (3, 9, "^[a-z]+$")

    def test_malformed_constraints_are_dropped(self) -> None:
        field = parse_field("n", {"type": "number", "minimum": "low", "maximum": True})
        assert isinstance(field, NumberField)
        assert field.minimum is None
        assert field.maximum is None

    def test_array_items_default_to_string(self) -> None:
        field = parse_field("tags", {"type": "array"})
        assert isinstance(field, ArrayField)
        assert isinstance(field.items, StringField)
        assert field.items.required is True

    def test_object_with_properties_has_nested_schema(self) -> None:
        field = parse_field(
            "mqtt",
            {
                "type": "object",
                "properties": {"host": {"type": "string"}, "port": {"type": "integer"}},
                "required": ["host"],
            },
        )
        assert isinstance(field, ObjectField)
        assert field.properties is not None
        assert field.properties.names == ("host", "port")
        assert field.properties.required == frozenset({"host"})

    def test_free_form_object(self) -> None:
        field = parse_field("extra", {"type": "object"})
        assert isinstance(field, ObjectField)
        assert field.properties is None

    def test_label_prefers_title(self) -> None:
        assert parse_field("maxRetries", {"title": "Retries"}).label == "Retries"
        assert parse_field("maxRetries", {}).label == "Max Retries"
