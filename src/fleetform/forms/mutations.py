# src/fleetform/forms/mutations.py
"""Pure state transitions of a form.

apply_mutation(schema, snapshot, mutation) returns a NEW snapshot; the input
snapshot is never modified. Observers therefore only ever see whole values,
never a half-applied edit.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from fleetform.contracts import MISSING, FieldState
from fleetform.schema.codec import decode, decode_item
from fleetform.schema.defaults import default_item
from fleetform.schema.model import ArrayField, Schema


@dataclass(frozen=True)
class FormSnapshot:
    """Configuration value plus per-field edit state at one instant."""

    value: dict[str, Any] = field(default_factory=dict)
    field_states: Mapping[str, FieldState] = field(default_factory=dict)

    def state_of(self, name: str) -> FieldState:
        return self.field_states.get(name, FieldState())


@dataclass(frozen=True)
class SetField:
    name: str
    raw: Any


@dataclass(frozen=True)
class AddArrayItem:
    name: str


@dataclass(frozen=True)
class RemoveArrayItem:
    name: str
    index: int


@dataclass(frozen=True)
class SetArrayItem:
    name: str
    index: int
    raw: Any


@dataclass(frozen=True)
class ReplaceValue:
    """Wholesale replacement (template, defaults, reset, profile).

    Edit buffers are dropped. With mark_dirty, fields whose value changed
    are flagged dirty; otherwise every field starts clean.
    """

    value: Mapping[str, Any]
    mark_dirty: bool = True


Mutation = SetField | AddArrayItem | RemoveArrayItem | SetArrayItem | ReplaceValue


def _array_field(schema: Schema, name: str) -> ArrayField:
    spec = schema.field(name)
    if not isinstance(spec, ArrayField):
        raise TypeError(f"Field '{name}' is not an array field")
    return spec


def _current_list(snapshot: FormSnapshot, name: str) -> list[Any]:
    current = snapshot.value.get(name)
    return list(current) if isinstance(current, list) else []


def _check_index(items: list[Any], name: str, index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"Index {index} out of range for '{name}' ({len(items)} items)")


def _with(
    snapshot: FormSnapshot,
    name: str,
    new_value: Any,
    edited_text: str | None = None,
) -> FormSnapshot:
    value = copy.deepcopy(snapshot.value)
    value[name] = new_value
    states = dict(snapshot.field_states)
    states[name] = FieldState(edited_text=edited_text, is_dirty=True)
    return FormSnapshot(value=value, field_states=states)


def apply_mutation(schema: Schema, snapshot: FormSnapshot, mutation: Mutation) -> FormSnapshot:
    """Apply one mutation and return the resulting snapshot.

    Raises:
        UnknownFieldError: If the mutation names an undeclared field
        TypeError: If an array mutation targets a non-array field
        IndexError: If an array index is out of range
    """
    match mutation:
        case SetField(name=name, raw=raw):
            spec = schema.field(name)
            decoded = decode(spec, raw, snapshot.value.get(name, MISSING))
            return _with(snapshot, name, decoded.value, decoded.edited_text)

        case AddArrayItem(name=name):
            spec = _array_field(schema, name)
            items = _current_list(snapshot, name)
            items.append(default_item(spec))
            return _with(snapshot, name, items)

        case RemoveArrayItem(name=name, index=index):
            _array_field(schema, name)
            items = _current_list(snapshot, name)
            _check_index(items, name, index)
            del items[index]
            return _with(snapshot, name, items)

        case SetArrayItem(name=name, index=index, raw=raw):
            spec = _array_field(schema, name)
            items = _current_list(snapshot, name)
            _check_index(items, name, index)
            items[index] = decode_item(spec, raw, items[index])
            return _with(snapshot, name, items)

        case ReplaceValue(value=new_value, mark_dirty=mark_dirty):
            value = copy.deepcopy(dict(new_value))
            states: dict[str, FieldState] = {}
            if mark_dirty:
                for name in schema.names:
                    if value.get(name, MISSING) != snapshot.value.get(name, MISSING):
                        states[name] = FieldState(is_dirty=True)
            return FormSnapshot(value=value, field_states=states)

    raise TypeError(f"Unsupported mutation: {mutation!r}")
