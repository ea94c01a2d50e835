"""Core infrastructure: settings, logging, JSON text helpers."""

from fleetform.core.canonical import (
    ParsedJSON,
    format_number,
    is_finite_number,
    parse_json,
    pretty_json,
)
from fleetform.core.config import (
    ApiSettings,
    FleetformSettings,
    LoggingSettings,
    ProfileSettings,
    load_settings,
)
from fleetform.core.logging import configure_logging, get_logger

__all__ = [
    "ApiSettings",
    "FleetformSettings",
    "LoggingSettings",
    "ParsedJSON",
    "ProfileSettings",
    "configure_logging",
    "format_number",
    "get_logger",
    "is_finite_number",
    "load_settings",
    "parse_json",
    "pretty_json",
]
