# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the external adaptive ML connector.

The connector receives the adaptive context as JSON and answers with a
difficulty and a list of weighted activities:

    POST <endpoint>
    Authorization: Bearer <api key>     (only when a key is configured)
    {childId, currentDifficulty, targetCategory, recentPerformance,
     personalization, sensoryPreferences}

    200 {nextDifficulty, recommendations: [...], explanation?: [...]}

Any failure is raised as an MLConnectorError subclass so the engine can
fall back to its heuristic.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.core.config.settings import AdaptiveSettings
from src.domains.adaptive.models import AdaptiveContext, MlAdaptiveResponse

logger = logging.getLogger(__name__)


class MLConnectorError(Exception):
    """Base exception for ML connector errors.

    Attributes:
        message: Error description.
        details: Additional error details.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MLConnectorUnavailableError(MLConnectorError):
    """Raised when the connector cannot be reached or times out."""

    pass


class MLConnectorResponseError(MLConnectorError):
    """Raised when the connector answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class MLConnectorPayloadError(MLConnectorError):
    """Raised when a 2xx body is not valid JSON or does not match the schema."""

    pass


class MLConnectorClient:
    """Async client for the adaptive ML connector.

    Attributes:
        endpoint: URL the context is POSTed to.

    Example:
        client = MLConnectorClient(settings.adaptive)
        response = await client.fetch_recommendation(context)
        await client.close()
    """

    def __init__(
        self,
        settings: AdaptiveSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the connector client.

        Args:
            settings: Adaptive settings holding the endpoint, key and timeout.
            client: Optional preconfigured HTTP client (used in tests).
        """
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    @property
    def endpoint(self) -> str | None:
        """Get the configured connector endpoint."""
        return self._settings.ml_endpoint

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.ml_timeout)
        return self._client

    def _build_headers(self) -> dict[str, str]:
        """Build request headers, adding the bearer token when configured."""
        headers = {"Content-Type": "application/json"}
        if self._settings.ml_api_key is not None:
            api_key = self._settings.ml_api_key.get_secret_value()
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def _handle_response(self, response: httpx.Response) -> MlAdaptiveResponse:
        """Validate an HTTP response and parse the connector payload."""
        if not response.is_success:
            raise MLConnectorResponseError(
                message=f"ML connector request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MLConnectorPayloadError(
                message="ML connector returned a non-JSON body",
                details={"body": response.text[:200]},
            ) from e

        try:
            return MlAdaptiveResponse.model_validate(data)
        except ValidationError as e:
            raise MLConnectorPayloadError(
                message="ML connector payload does not match the expected schema",
                details={"errors": e.errors(include_url=False)},
            ) from e

    async def fetch_recommendation(self, context: AdaptiveContext) -> MlAdaptiveResponse:
        """POST a context to the connector and return its parsed answer.

        Args:
            context: Adaptive context to send.

        Returns:
            Validated connector response.

        Raises:
            MLConnectorUnavailableError: On transport errors and timeouts.
            MLConnectorResponseError: On non-2xx responses.
            MLConnectorPayloadError: On invalid or unexpected bodies.
        """
        if not self.endpoint:
            raise MLConnectorUnavailableError("ML connector endpoint is not configured")

        try:
            response = await self._get_client().post(
                self.endpoint,
                json=context.to_connector_payload(),
                headers=self._build_headers(),
            )
        except httpx.RequestError as e:
            logger.error("Connection error to ML connector: %s", e)
            raise MLConnectorUnavailableError(
                message=f"ML connector not available: {e}",
            ) from e

        result = self._handle_response(response)
        logger.debug(
            "ML connector answered for child %s (confidence=%s)",
            context.child_id,
            result.confidence,
        )
        return result

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
