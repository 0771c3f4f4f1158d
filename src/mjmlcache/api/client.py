"""Synchronous client for the MJML rendering API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from mjmlcache.api.normalize import normalize_source
from mjmlcache.api.response_parser import parse_response
from mjmlcache.config.defaults import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from mjmlcache.errors.retry import (
    MAX_ATTEMPTS,
    UNREACHABLE_STATUS,
    classify_http_error,
    classify_status,
    is_transient,
    log_retry,
)
from mjmlcache.types import ConversionResult

logger = logging.getLogger(__name__)


class ConversionClient:
    """Sends MJML to the rendering API and returns a ConversionResult.

    ``convert`` never raises: unreachable endpoints and API errors come back
    as a result with ``http_status`` and ``error_message`` set.
    """

    def __init__(
        self,
        app_id: str = "",
        secret_key: str = "",
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._client = httpx.Client(
            auth=httpx.BasicAuth(app_id, secret_key),
            timeout=timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def convert(self, raw_markup: str) -> ConversionResult:
        """Normalize the source, send it, and parse whatever comes back."""
        normalized = normalize_source(raw_markup)

        try:
            response = self._post({"mjml": normalized})
        except httpx.HTTPError as exc:
            error = classify_http_error(exc)
            logger.warning("Rendering API request failed: %s", error.message)
            return ConversionResult(
                http_status=getattr(error, "http_status", None) or UNREACHABLE_STATUS,
                error_message=error.message,
                source_markup=normalized,
            )

        result = parse_response(response, normalized)
        if not result.ok:
            error = classify_status(result.http_status, result.error_message or "")
            logger.warning(
                "Rendering API returned %d (%s): %s",
                result.http_status,
                error.error_type,
                result.error_message,
            )
        elif result.warnings:
            logger.info("Rendering API reported %d line errors", len(result.warnings))
        return result

    @retry(
        retry=retry_if_exception(is_transient),
        wait=wait_fixed(0.5),
        stop=stop_after_attempt(MAX_ATTEMPTS),
        before_sleep=log_retry,
        reraise=True,
    )
    def _post(self, body: dict[str, Any]) -> httpx.Response:
        return self._client.post(self._endpoint, json=body)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ConversionClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
