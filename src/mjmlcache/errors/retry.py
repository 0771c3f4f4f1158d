"""Transport error classification and the retry policy for API calls."""

from __future__ import annotations

import logging

import httpx
from tenacity import RetryCallState

from mjmlcache.errors.exceptions import (
    AuthenticationError,
    MjmlCacheError,
    TransportError,
)

logger = logging.getLogger(__name__)

# Status reported for requests that never got an answer
UNREACHABLE_STATUS = 503

MAX_ATTEMPTS = 2  # one retry


def classify_http_error(exc: Exception) -> MjmlCacheError:
    """Convert an httpx exception to our exception hierarchy."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(
            str(exc) or "Request to rendering API timed out",
            error_type="timeout",
            http_status=UNREACHABLE_STATUS,
            original=exc,
        )
    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return TransportError(
            str(exc) or "Rendering API unreachable",
            error_type="connection",
            http_status=UNREACHABLE_STATUS,
            original=exc,
        )
    if isinstance(exc, httpx.HTTPError):
        return TransportError(
            str(exc),
            error_type="unknown",
            http_status=UNREACHABLE_STATUS,
            original=exc,
        )
    return TransportError(str(exc), error_type="unknown", original=exc)


def classify_status(
    status: int,
    message: str = "",
    original: Exception | None = None,
) -> TransportError:
    """Map a non-200 API status onto the exception hierarchy."""
    if status in (401, 403):
        return AuthenticationError(message, http_status=status, original=original)
    if status == 400:
        return TransportError(
            message, error_type="validation", http_status=400, original=original
        )
    return TransportError(
        message, error_type="server_error", http_status=status, original=original
    )


def is_transient(exc: BaseException) -> bool:
    """Only timeouts and connection failures are worth a second attempt."""
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError))


def log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Rendering API call failed (attempt %d/%d): %s. Retrying",
        retry_state.attempt_number,
        MAX_ATTEMPTS,
        exc,
    )
