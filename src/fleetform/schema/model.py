# src/fleetform/schema/model.py
"""Schema model: raw plugin schema documents -> ordered field variants.

The fleet manager serves plugin configuration schemas as JSON documents:

    {
      "properties": {
        "apiKey": {"type": "string", "title": "API Key", "format": "password"},
        "maxRetries": {"type": "integer", "minimum": 1, "maximum": 10, "default": 3}
      },
      "required": ["apiKey", "maxRetries"],
      "examples": [{"apiKey": "demo", "maxRetries": 5}]
    }

Parsing is total. Documents are read through lenient Pydantic models that
drop malformed attributes instead of failing, then normalised into frozen
field variants (one class per FieldKind). Consumers dispatch on the variant
through FieldVisitor rather than branching on type strings.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetform.contracts import MISSING, FieldKind, SchemaDocumentError, UnknownFieldError
from fleetform.core.canonical import is_finite_number

T = TypeVar("T")

KNOWN_FORMATS: frozenset[str] = frozenset({"password", "url", "textarea", "email"})

# Words rendered upper-case when a label is derived from a property name
ACRONYMS: frozenset[str] = frozenset(
    {
        "api",
        "dns",
        "http",
        "https",
        "id",
        "ip",
        "json",
        "mqtt",
        "ssh",
        "ssl",
        "tls",
        "uri",
        "url",
        "yaml",
    }
)

_WORD_BOUNDARY = re.compile(r"[A-Z]+(?=[A-Z][a-z]|\d|\b|_)|[A-Z]?[a-z]+|[A-Z]+|\d+")


def humanize(name: str) -> str:
    """Derive a display label from a property name.

    Splits camelCase, snake_case and kebab-case; known acronyms are
    upper-cased, other words capitalised.

    Examples:
        humanize("maxRetries") -> "Max Retries"
        humanize("api_key") -> "API Key"
        humanize("webhookURL") -> "Webhook URL"
    """
    words = _WORD_BOUNDARY.findall(name.replace("-", "_"))
    if not words:
        return name
    rendered = []
    for word in words:
        if word.lower() in ACRONYMS:
            rendered.append(word.upper())
        else:
            rendered.append(word[:1].upper() + word[1:])
    return " ".join(rendered)


# =============================================================================
# Raw document models
# =============================================================================


def _optional_str(v: Any) -> str | None:
    return v if isinstance(v, str) and v else None


def _optional_number(v: Any) -> int | float | None:
    return v if is_finite_number(v) else None


def _optional_count(v: Any) -> int | None:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        return None
    return v


class RawProperty(BaseModel):
    """One property entry of a raw schema document.

    Malformed attributes are dropped to None so a broken entry still
    renders as a plain text field.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str | None = None
    title: str | None = None
    description: str | None = None
    format: str | None = None
    pattern: str | None = None
    default: Any = None
    enum: list[Any] | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    items: dict[str, Any] | None = None
    properties: dict[str, Any] | None = None
    required: list[str] | None = None
    examples: list[Any] | None = None
    sensitive: bool = False

    @field_validator("type", "title", "description", "format", "pattern", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> str | None:
        return _optional_str(v)

    @field_validator("minimum", "maximum", mode="before")
    @classmethod
    def drop_non_number(cls, v: Any) -> int | float | None:
        return _optional_number(v)

    @field_validator("min_length", "max_length", mode="before")
    @classmethod
    def drop_non_count(cls, v: Any) -> int | None:
        return _optional_count(v)

    @field_validator("enum", "examples", mode="before")
    @classmethod
    def drop_non_list(cls, v: Any) -> list[Any] | None:
        return list(v) if isinstance(v, (list, tuple)) else None

    @field_validator("items", "properties", mode="before")
    @classmethod
    def drop_non_mapping(cls, v: Any) -> dict[str, Any] | None:
        return dict(v) if isinstance(v, Mapping) else None

    @field_validator("required", mode="before")
    @classmethod
    def keep_string_names(cls, v: Any) -> list[str] | None:
        if not isinstance(v, (list, tuple)):
            return None
        return [name for name in v if isinstance(name, str)]

    @field_validator("sensitive", mode="before")
    @classmethod
    def strict_bool(cls, v: Any) -> bool:
        return v is True

    @property
    def declares_default(self) -> bool:
        """Whether the document carried a 'default' key at all."""
        return "default" in self.model_fields_set


class RawSchemaDocument(BaseModel):
    """Top level of a raw schema document."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    version: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    examples: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("title", "description", "version", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> str | None:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return _optional_str(v)

    @field_validator("properties", mode="before")
    @classmethod
    def drop_non_mapping(cls, v: Any) -> dict[str, Any]:
        return dict(v) if isinstance(v, Mapping) else {}

    @field_validator("required", mode="before")
    @classmethod
    def keep_string_names(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [name for name in v if isinstance(name, str)]

    @field_validator("examples", mode="before")
    @classmethod
    def keep_mapping_examples(cls, v: Any) -> list[dict[str, Any]]:
        if not isinstance(v, (list, tuple)):
            return []
        return [dict(example) for example in v if isinstance(example, Mapping)]


# =============================================================================
# Field variants
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class FieldSpec(ABC):
    """Attributes shared by every field variant.

    default is MISSING when the schema declares none; a declared default of
    None is kept as None.
    """

    kind: ClassVar[FieldKind]

    name: str
    title: str | None = None
    description: str | None = None
    format: str | None = None
    default: Any = MISSING
    required: bool = False
    examples: tuple[Any, ...] = ()

    @property
    def label(self) -> str:
        """Title if declared, else the humanized property name."""
        return self.title or humanize(self.name)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @abstractmethod
    def accept(self, visitor: "FieldVisitor[T]") -> T:
        """Dispatch to the visitor method for this variant."""


@dataclass(frozen=True, kw_only=True)
class StringField(FieldSpec):
    kind: ClassVar[FieldKind] = FieldKind.STRING

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    @property
    def is_password(self) -> bool:
        return self.format == "password"

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_string(self)


@dataclass(frozen=True, kw_only=True)
class NumericField(FieldSpec):
    """Shared payload of integer and number fields."""

    integral: ClassVar[bool] = False

    minimum: int | float | None = None
    maximum: int | float | None = None


@dataclass(frozen=True, kw_only=True)
class IntegerField(NumericField):
    kind: ClassVar[FieldKind] = FieldKind.INTEGER
    integral: ClassVar[bool] = True

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_integer(self)


@dataclass(frozen=True, kw_only=True)
class NumberField(NumericField):
    kind: ClassVar[FieldKind] = FieldKind.NUMBER

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_number(self)


@dataclass(frozen=True, kw_only=True)
class BooleanField(FieldSpec):
    kind: ClassVar[FieldKind] = FieldKind.BOOLEAN

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_boolean(self)


@dataclass(frozen=True, kw_only=True)
class EnumField(FieldSpec):
    """Closed set of literals. value_type is the declared JSON type."""

    kind: ClassVar[FieldKind] = FieldKind.ENUM

    options: tuple[Any, ...] = ()
    value_type: FieldKind = FieldKind.STRING

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_enum(self)


@dataclass(frozen=True, kw_only=True)
class ArrayField(FieldSpec):
    kind: ClassVar[FieldKind] = FieldKind.ARRAY

    items: FieldSpec

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_array(self)


@dataclass(frozen=True, kw_only=True)
class ObjectField(FieldSpec):
    """Free-form or structured object. properties is None when free-form."""

    kind: ClassVar[FieldKind] = FieldKind.OBJECT

    properties: "Schema | None" = None

    def accept(self, visitor: "FieldVisitor[T]") -> T:
        return visitor.visit_object(self)


class FieldVisitor(ABC, Generic[T]):
    """Pure dispatch over field variants."""

    @abstractmethod
    def visit_string(self, field: StringField) -> T: ...

    @abstractmethod
    def visit_integer(self, field: IntegerField) -> T: ...

    @abstractmethod
    def visit_number(self, field: NumberField) -> T: ...

    @abstractmethod
    def visit_boolean(self, field: BooleanField) -> T: ...

    @abstractmethod
    def visit_enum(self, field: EnumField) -> T: ...

    @abstractmethod
    def visit_array(self, field: ArrayField) -> T: ...

    @abstractmethod
    def visit_object(self, field: ObjectField) -> T: ...


@dataclass(frozen=True)
class Schema:
    """Ordered fields plus the required-name set.

    Field order is display order. Immutable for the lifetime of a form.
    """

    fields: tuple[FieldSpec, ...]
    required: frozenset[str] = frozenset()
    title: str | None = None
    description: str | None = None
    version: str | None = None
    examples: tuple[dict[str, Any], ...] = ()

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> FieldSpec:
        """Look up a field by property name.

        Raises:
            UnknownFieldError: If the schema does not declare the property
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise UnknownFieldError(name)


# =============================================================================
# Parsing
# =============================================================================

_SCALAR_KINDS = {
    "string": FieldKind.STRING,
    "integer": FieldKind.INTEGER,
    "number": FieldKind.NUMBER,
    "boolean": FieldKind.BOOLEAN,
    "array": FieldKind.ARRAY,
    "object": FieldKind.OBJECT,
}


def _read_property(raw: Any) -> RawProperty:
    if isinstance(raw, RawProperty):
        return raw
    if not isinstance(raw, Mapping):
        return RawProperty()
    return RawProperty.model_validate(dict(raw))


def parse_field(name: str, raw: Any, *, required: bool = False) -> FieldSpec:
    """Normalise one raw property entry into its field variant.

    A missing or unrecognised type becomes a string field; a property with
    an enum becomes an EnumField regardless of its declared type.
    """
    prop = _read_property(raw)
    declared = _SCALAR_KINDS.get(prop.type or "string", FieldKind.STRING)
    fmt = "password" if prop.sensitive and prop.format is None else prop.format

    common: dict[str, Any] = {
        "name": name,
        "title": prop.title,
        "description": prop.description,
        "format": fmt,
        "default": prop.default if prop.declares_default else MISSING,
        "required": required,
        "examples": tuple(prop.examples or ()),
    }

    if prop.enum is not None:
        return EnumField(options=tuple(prop.enum), value_type=declared, **common)

    if declared is FieldKind.INTEGER:
        return IntegerField(minimum=prop.minimum, maximum=prop.maximum, **common)
    if declared is FieldKind.NUMBER:
        return NumberField(minimum=prop.minimum, maximum=prop.maximum, **common)
    if declared is FieldKind.BOOLEAN:
        return BooleanField(**common)
    if declared is FieldKind.ARRAY:
        # List entries always hold a value, so items behave as required
        items = parse_field(name, prop.items or {"type": "string"}, required=True)
        return ArrayField(items=items, **common)
    if declared is FieldKind.OBJECT:
        nested = None
        if prop.properties is not None:
            nested = _build_schema(prop.properties, prop.required or [])
        return ObjectField(properties=nested, **common)
    return StringField(
        min_length=prop.min_length,
        max_length=prop.max_length,
        pattern=prop.pattern,
        **common,
    )


def _build_schema(
    properties: Mapping[str, Any],
    required: list[str],
    **attrs: Any,
) -> Schema:
    required_names = frozenset(name for name in required if name in properties)
    fields = tuple(
        parse_field(str(name), raw, required=name in required_names)
        for name, raw in properties.items()
    )
    return Schema(fields=fields, required=required_names, **attrs)


def parse_schema(document: Any) -> Schema:
    """Parse a raw schema document into a Schema.

    Total: anything that is not a mapping yields an empty schema, and
    malformed property entries degrade to plain string fields.

    Args:
        document: Raw JSON-shaped schema document (or an existing Schema)

    Returns:
        Schema with fields in document order
    """
    if isinstance(document, Schema):
        return document
    if not isinstance(document, Mapping):
        return Schema(fields=())
    raw = RawSchemaDocument.model_validate(dict(document))
    return _build_schema(
        raw.properties,
        raw.required,
        title=raw.title,
        description=raw.description,
        version=raw.version,
        examples=tuple(raw.examples),
    )


def parse_schema_strict(document: Any) -> Schema:
    """Parse a schema document loaded from a file.

    Raises:
        SchemaDocumentError: If the document is not a mapping
    """
    if not isinstance(document, Mapping):
        raise SchemaDocumentError(
            f"Schema document must be a mapping, got {type(document).__name__}"
        )
    return parse_schema(document)
