# src/fleetform/schema/codec.py
"""Field codec: canonical values <-> editable representations.

One strategy per field variant:
- string (plain/password/textarea/url): identity; presentation differs only
- integer/number: text -> number; empty text -> None; unparseable text keeps
  the last valid value and retains the raw text as the edit buffer
- boolean: toggle
- enum: select over the closed option set
- array: every item coded by the items variant
- object: edited as pretty-printed JSON text; commits only on a successful
  parse to a JSON object, otherwise the buffer is retained

Decoding never raises. A raw edit that cannot become a canonical value is
reported through Decoded.edited_text so the form can keep displaying it
while the validator explains the problem.
"""

import copy
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from fleetform.contracts import MISSING, SelectOption, WidgetControl, WidgetHint
from fleetform.core.canonical import format_number, is_finite_number, parse_json, pretty_json
from fleetform.schema.defaults import default_item
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
    StringField,
)

TRUE_WORDS = frozenset({"true", "1", "on", "yes"})
FALSE_WORDS = frozenset({"false", "0", "off", "no"})


@dataclass(frozen=True)
class Decoded:
    """Result of decoding one raw edit.

    value is the new canonical value. edited_text is the raw buffer to keep
    displaying when it did not commit, or None when value reflects the edit.
    """

    value: Any
    edited_text: str | None = None


# =============================================================================
# Decoding
# =============================================================================


class _Decoder(FieldVisitor[Decoded]):
    def __init__(self, raw: Any, previous: Any) -> None:
        self.raw = raw
        self.previous = None if previous is MISSING else previous

    def _rejected(self) -> Decoded:
        return Decoded(self.previous, edited_text=str(self.raw))

    def visit_string(self, field: StringField) -> Decoded:
        if self.raw is None or isinstance(self.raw, str):
            return Decoded(self.raw)
        return Decoded(str(self.raw))

    def visit_integer(self, field: IntegerField) -> Decoded:
        return self._decode_number(field)

    def visit_number(self, field: NumberField) -> Decoded:
        return self._decode_number(field)

    def _decode_number(self, field: NumericField) -> Decoded:
        raw = self.raw
        if raw is None:
            return Decoded(None)
        if isinstance(raw, str):
            text = raw.strip()
            if text == "":
                return Decoded(None)
            number = parse_number(text)
            if number is None:
                return self._rejected()
        elif is_finite_number(raw):
            number = raw
        else:
            return self._rejected()
        if field.integral and isinstance(number, float) and number.is_integer():
            number = int(number)
        return Decoded(number)

    def visit_boolean(self, field: BooleanField) -> Decoded:
        raw = self.raw
        if isinstance(raw, bool):
            return Decoded(raw)
        if isinstance(raw, int) and raw in (0, 1):
            return Decoded(bool(raw))
        if isinstance(raw, str):
            word = raw.strip().lower()
            if word in TRUE_WORDS:
                return Decoded(True)
            if word in FALSE_WORDS:
                return Decoded(False)
        return self._rejected()

    def visit_enum(self, field: EnumField) -> Decoded:
        raw = self.raw
        if raw is None or raw == "":
            return Decoded(None)
        for option in field.options:
            if raw == option and type(raw) is type(option):
                return Decoded(option)
        for option in field.options:
            if str(option) == str(raw):
                return Decoded(option)
        # Kept as-is so the validator reports it instead of silently dropping it
        return Decoded(raw)

    def visit_array(self, field: ArrayField) -> Decoded:
        raw = self.raw
        if raw is None:
            return Decoded([])
        if isinstance(raw, str):
            parsed = parse_json(raw) if raw.strip() else None
            if parsed is None:
                return Decoded([])
            if not parsed.ok or not isinstance(parsed.value, list):
                return self._rejected()
            raw = parsed.value
        if not isinstance(raw, (list, tuple)):
            return self._rejected()
        return Decoded([decode_item(field, item) for item in raw])

    def visit_object(self, field: ObjectField) -> Decoded:
        raw = self.raw
        if raw is None:
            return Decoded(None)
        if isinstance(raw, Mapping):
            return Decoded(copy.deepcopy(dict(raw)))
        if isinstance(raw, str):
            if raw.strip() == "":
                return Decoded(None)
            parsed = parse_json(raw)
            if parsed.ok and isinstance(parsed.value, dict):
                return Decoded(parsed.value)
        return self._rejected()


def parse_number(text: str) -> int | float | None:
    """Parse numeric text; None for anything that is not a finite number."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def decode(field: FieldSpec, raw: Any, previous: Any = MISSING) -> Decoded:
    """Turn a raw edit into a canonical value for the field.

    Args:
        field: Field being edited
        raw: Value coming from the editing surface
        previous: Current canonical value, kept when raw cannot commit

    Returns:
        Decoded value plus the edit buffer to retain, if any
    """
    return field.accept(_Decoder(raw, previous))


def decode_item(field: ArrayField, raw: Any, previous: Any = MISSING) -> Any:
    """Decode one array item. Items are never left empty-handed.

    An item that cannot be decoded (or decodes to None) falls back to the
    previous item, else to the default item.
    """
    result = field.items.accept(_Decoder(raw, previous))
    if result.value is None:
        return copy.deepcopy(previous) if previous is not MISSING else default_item(field)
    return result.value


# =============================================================================
# Encoding
# =============================================================================


class _Encoder(FieldVisitor[Any]):
    def __init__(self, value: Any) -> None:
        self.value = value

    def visit_string(self, field: StringField) -> Any:
        return "" if self.value is None else str(self.value)

    def visit_integer(self, field: IntegerField) -> Any:
        return self._encode_number()

    def visit_number(self, field: NumberField) -> Any:
        return self._encode_number()

    def _encode_number(self) -> str:
        if is_finite_number(self.value):
            return format_number(self.value)
        return ""

    def visit_boolean(self, field: BooleanField) -> Any:
        return self.value is True

    def visit_enum(self, field: EnumField) -> Any:
        return self.value

    def visit_array(self, field: ArrayField) -> Any:
        if not isinstance(self.value, list):
            return []
        return [field.items.accept(_Encoder(item)) for item in self.value]

    def visit_object(self, field: ObjectField) -> Any:
        if self.value is None:
            return ""
        try:
            return pretty_json(self.value)
        except (TypeError, ValueError):
            return str(self.value)


def encode(field: FieldSpec, value: Any) -> Any:
    """Editable representation of a canonical value.

    Object fields become pretty JSON text, numbers become text, strings stay
    strings (None -> ""), booleans stay booleans.
    """
    return field.accept(_Encoder(value))


# =============================================================================
# Widget hints
# =============================================================================

_STRING_CONTROLS = {
    "password": WidgetControl.PASSWORD,
    "textarea": WidgetControl.TEXTAREA,
    "url": WidgetControl.URL,
}


def _is_integral(number: Any) -> bool:
    if not is_finite_number(number):
        return False
    return isinstance(number, int) or float(number).is_integer()


class _WidgetBuilder(FieldVisitor[WidgetHint]):
    def __init__(self, value: Any) -> None:
        self.value = value

    def visit_string(self, field: StringField) -> WidgetHint:
        # Unrecognised formats fall back to a plain text control
        control = _STRING_CONTROLS.get(field.format or "", WidgetControl.TEXT)
        return WidgetHint(
            control=control,
            masked=control is WidgetControl.PASSWORD,
            multiline=control is WidgetControl.TEXTAREA,
        )

    def visit_integer(self, field: IntegerField) -> WidgetHint:
        return WidgetHint(
            control=WidgetControl.NUMBER,
            step=1,
            minimum=field.minimum,
            maximum=field.maximum,
        )

    def visit_number(self, field: NumberField) -> WidgetHint:
        reference = field.minimum if field.minimum is not None else self.value
        return WidgetHint(
            control=WidgetControl.NUMBER,
            step=1 if _is_integral(reference) else "any",
            minimum=field.minimum,
            maximum=field.maximum,
        )

    def visit_boolean(self, field: BooleanField) -> WidgetHint:
        return WidgetHint(control=WidgetControl.TOGGLE)

    def visit_enum(self, field: EnumField) -> WidgetHint:
        options = tuple(SelectOption(value=option, label=str(option)) for option in field.options)
        if not field.required:
            options = (SelectOption(value=None, label=""), *options)
        return WidgetHint(control=WidgetControl.SELECT, options=options)

    def visit_array(self, field: ArrayField) -> WidgetHint:
        return WidgetHint(control=WidgetControl.LIST, item=field.items.accept(_WidgetBuilder(None)))

    def visit_object(self, field: ObjectField) -> WidgetHint:
        return WidgetHint(control=WidgetControl.JSON, multiline=True)


def widget_for(field: FieldSpec, value: Any = None) -> WidgetHint:
    """Presentation hint for a field, given its current value."""
    return field.accept(_WidgetBuilder(value))
