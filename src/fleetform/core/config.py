"""
Settings schema and loading for fleetform.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class ApiSettings(BaseModel):
    """Connection to the fleet manager's REST API.

    Example YAML:
        api:
          base_url: http://shelly-manager.local:8080
          timeout_seconds: 15
    """

    model_config = {"frozen": True}

    base_url: str = Field(
        default="http://localhost:8080",
        description="Root URL of the fleet manager server",
    )
    api_prefix: str = Field(
        default="/api/v1",
        description="Path prefix of the versioned REST API",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout for plugin API calls",
    )
    token: str | None = Field(
        default=None,
        description="Bearer token sent with every request",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Base URL must be absolute http(s)."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Prefix is normalised to a leading slash and no trailing slash."""
        return "/" + v.strip("/") if v.strip("/") else ""


class LoggingSettings(BaseModel):
    """Log output configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console rendering",
    )


class ProfileSettings(BaseModel):
    """Where named configuration profiles are persisted."""

    model_config = {"frozen": True}

    path: str = Field(
        default="~/.config/fleetform/profiles.json",
        description="JSON file backing the profile key-value store",
    )

    def resolved_path(self) -> Path:
        """Expand the user directory in the configured path."""
        return Path(self.path).expanduser()


class FleetformSettings(BaseModel):
    """Top-level fleetform settings."""

    model_config = {"frozen": True}

    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    profiles: ProfileSettings = Field(default_factory=ProfileSettings)


def load_settings(config_path: Path | None = None) -> FleetformSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FLEETFORM_*) - highest priority
    2. Config file (settings.yaml), when given
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: FLEETFORM_API__BASE_URL for nested keys.

    Args:
        config_path: Path to YAML configuration file, or None for env only

    Returns:
        Validated FleetformSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    settings_files: list[str] = []
    if config_path is not None:
        # Dynaconf silently accepts missing files
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        settings_files.append(str(config_path))

    dynaconf_settings = Dynaconf(
        envvar_prefix="FLEETFORM",
        settings_files=settings_files,
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config: dict[str, Any] = {
        k.lower(): _lower_keys(v)
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return FleetformSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
