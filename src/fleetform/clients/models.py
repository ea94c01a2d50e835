# src/fleetform/clients/models.py
"""Pydantic models for plugin API payloads.

The server wraps every payload in an envelope:

    {"success": true, "data": {...}, "error": null, "meta": {...}}

Unknown keys are ignored so newer servers remain readable.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    message: str | None = None


class APIEnvelope(BaseModel, Generic[T]):
    """Response envelope shared by all endpoints."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: T | None = None
    error: APIErrorBody | None = None
    meta: dict[str, Any] | None = None


class PluginStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    available: bool = False
    configured: bool = False
    enabled: bool = False
    error: str | None = None
    last_used: str | None = None

    @property
    def display(self) -> str:
        """Single status word, most severe condition first."""
        if not self.available:
            return "Unavailable"
        if self.error:
            return "Error"
        if not self.configured:
            return "Not Configured"
        if not self.enabled:
            return "Disabled"
        return "Ready"


class PluginHealth(BaseModel):
    model_config = ConfigDict(extra="ignore")

    healthy: bool = False
    last_check: str | None = None
    check_duration_ms: float | None = None
    issues: list[str] = Field(default_factory=list)


class PluginSummary(BaseModel):
    """A plugin as listed by the server."""

    model_config = ConfigDict(extra="ignore")

    name: str
    display_name: str = ""
    description: str = ""
    version: str = ""
    category: str = "custom"
    capabilities: list[str] = Field(default_factory=list)
    status: PluginStatus = Field(default_factory=PluginStatus)
    health: PluginHealth | None = None
    config_schema: dict[str, Any] | None = None
    example_config: dict[str, Any] | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


class PluginCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    display_name: str = ""
    description: str = ""
    plugin_count: int = 0


class PluginListing(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plugins: list[PluginSummary] = Field(default_factory=list)
    categories: list[PluginCategory] = Field(default_factory=list)


class PluginConfigRecord(BaseModel):
    """Stored configuration of a plugin."""

    model_config = ConfigDict(extra="ignore")

    plugin_name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    metadata: dict[str, Any] | None = None


class PluginTestResult(BaseModel):
    """Outcome of testing a configuration against a plugin."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    duration_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] | None = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
