# src/fleetform/clients/plugin_api.py
"""HTTP client for the fleet manager's plugin endpoints.

Endpoints (relative to the API prefix):
    GET  /export/plugins[?category=]     list plugins and categories
    GET  /export/plugins/{name}          plugin details
    GET  /export/plugins/{name}/schema   configuration schema document
    GET  /export/plugins/{name}/config   stored configuration
    PUT  /export/plugins/{name}/config   store configuration {config, enabled}
    POST /export/plugins/{name}/test     test configuration {config}

Transport failures, non-2xx statuses and envelopes with success=false all
raise PluginAPIError. The client does not retry.
"""

from types import TracebackType
from typing import Any, Self, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fleetform.clients.models import (
    APIEnvelope,
    PluginConfigRecord,
    PluginListing,
    PluginSummary,
    PluginTestResult,
)
from fleetform.contracts import PluginAPIError
from fleetform.core.config import ApiSettings
from fleetform.core.logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class PluginAPIClient:
    """Synchronous client for plugin management endpoints.

    Example:
        with PluginAPIClient(settings.api) as client:
            schema = client.get_schema("gitops")
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or ApiSettings()
        headers = {"Accept": "application/json"}
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"
        self._http = httpx.Client(
            base_url=f"{self.settings.base_url}{self.settings.api_prefix}",
            timeout=self.settings.timeout_seconds,
            headers=headers,
            transport=transport,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # === Requests ===

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Perform a request and unwrap the response envelope's data.

        Raises:
            PluginAPIError: On transport failure, HTTP error, or success=false
        """
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Plugin API request failed", method=method, path=path, error=str(e))
            raise PluginAPIError(f"{method} {path} failed: {e}") from e

        try:
            envelope = APIEnvelope[Any].model_validate(response.json())
        except (ValueError, ValidationError):
            envelope = None

        server_message = None
        if envelope is not None and envelope.error is not None:
            server_message = envelope.error.message

        if response.is_error or envelope is None or not envelope.success:
            message = server_message or f"{method} {path} returned HTTP {response.status_code}"
            logger.warning(
                "Plugin API error",
                method=method,
                path=path,
                status=response.status_code,
                message=message,
            )
            raise PluginAPIError(message, status_code=response.status_code)

        logger.debug("Plugin API request", method=method, path=path, status=response.status_code)
        return envelope.data

    def _model(self, model: type[M], data: Any, what: str) -> M:
        if data is None:
            raise PluginAPIError(f"Server returned no {what}")
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise PluginAPIError(f"Malformed {what} in response: {e}") from e

    # === Endpoints ===

    def list_plugins(self, category: str | None = None) -> PluginListing:
        params = {"category": category} if category else None
        data = self._request("GET", "/export/plugins", params=params)
        return self._model(PluginListing, data, "plugin listing")

    def get_plugin(self, name: str) -> PluginSummary:
        data = self._request("GET", f"/export/plugins/{name}")
        return self._model(PluginSummary, data, "plugin details")

    def get_schema(self, name: str) -> dict[str, Any]:
        """Raw schema document, to be parsed by fleetform.schema.parse_schema."""
        data = self._request("GET", f"/export/plugins/{name}/schema")
        if not isinstance(data, dict):
            raise PluginAPIError(f"Server returned no schema for '{name}'")
        return data

    def get_config(self, name: str) -> PluginConfigRecord:
        data = self._request("GET", f"/export/plugins/{name}/config")
        return self._model(PluginConfigRecord, data, "plugin configuration")

    def update_config(
        self,
        name: str,
        config: dict[str, Any],
        *,
        enabled: bool = True,
    ) -> PluginConfigRecord:
        data = self._request(
            "PUT",
            f"/export/plugins/{name}/config",
            json={"config": config, "enabled": enabled},
        )
        return self._model(PluginConfigRecord, data, "plugin configuration")

    def test_plugin(self, name: str, config: dict[str, Any] | None = None) -> PluginTestResult:
        data = self._request(
            "POST",
            f"/export/plugins/{name}/test",
            json={"config": config or {}},
        )
        return self._model(PluginTestResult, data, "test result")
