"""Parse rendering API responses into ConversionResult."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from mjmlcache.types import ApiMessage, ConversionResult

logger = logging.getLogger(__name__)

_NO_HTML_MESSAGE = "Rendering API returned no HTML"


def parse_response(response: httpx.Response, source_markup: str) -> ConversionResult:
    """Build a ConversionResult from an API response of any status."""
    payload = _json_body(response)

    html = payload.get("html")
    message = payload.get("message")
    if response.status_code != 200 and not message:
        message = response.reason_phrase or f"HTTP {response.status_code}"
    elif response.status_code == 200 and not (isinstance(html, str) and html.strip()):
        # A 200 from a proxy or a truncated body is still a failed conversion
        message = message or _NO_HTML_MESSAGE

    return ConversionResult(
        http_status=response.status_code,
        html=html if isinstance(html, str) else None,
        error_message=str(message) if message is not None else None,
        warnings=parse_errors(payload.get("errors")),
        source_markup=source_markup,
    )


def parse_errors(raw: Any) -> list[ApiMessage]:
    """Extract per-line errors, skipping anything malformed."""
    if not isinstance(raw, list):
        return []

    errors: list[ApiMessage] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            line = int(item.get("line", 0))
        except (TypeError, ValueError):
            continue
        message = item.get("message") or item.get("formattedMessage") or ""
        errors.append(
            ApiMessage(
                line=line,
                message=str(message),
                tag_name=item.get("tagName"),
            )
        )
    return errors


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except (json.JSONDecodeError, ValueError):
        logger.debug("Non-JSON response body (status %d)", response.status_code)
        return {}
    return data if isinstance(data, dict) else {}
