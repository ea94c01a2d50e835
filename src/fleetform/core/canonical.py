"""
JSON text helpers for object-field editing and configuration previews.

Two directions:
1. pretty_json: canonical value -> editable text (indent 2, key order kept)
2. parse_json: editable text -> value, reporting failure instead of raising

IMPORTANT: NaN and Infinity are REJECTED in both directions. The platform
API speaks strict JSON, and a value the server would refuse must not look
valid in the editor.
"""

import json
import math
from dataclasses import dataclass
from typing import Any

PRETTY_INDENT = 2


@dataclass(frozen=True)
class ParsedJSON:
    """Outcome of parsing editable JSON text."""

    ok: bool
    value: Any = None
    error: str | None = None


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-finite number '{token}' is not valid JSON")


def pretty_json(value: Any) -> str:
    """Render a value as pretty-printed JSON text.

    Raises:
        ValueError: If the value contains NaN or Infinity
    """
    return json.dumps(value, indent=PRETTY_INDENT, ensure_ascii=False, allow_nan=False)


def parse_json(text: str) -> ParsedJSON:
    """Parse editable JSON text without raising.

    Args:
        text: Raw text from the editor buffer

    Returns:
        ParsedJSON with ok=False and an error description on failure
    """
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        return ParsedJSON(ok=False, error=str(e))
    except RecursionError:
        return ParsedJSON(ok=False, error="JSON is nested too deeply")
    return ParsedJSON(ok=True, value=value)


def is_finite_number(value: Any) -> bool:
    """True for int/float values that are not bool, NaN or Infinity."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and (math.isnan(value) or math.isinf(value)))


def format_number(value: int | float) -> str:
    """Render a number for messages: integral floats lose their '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
