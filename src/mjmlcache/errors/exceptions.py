"""Custom exception hierarchy for mjmlcache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mjmlcache.types import Diagnostic


class MjmlCacheError(Exception):
    """Base exception for all mjmlcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class TransportError(MjmlCacheError):
    """The rendering endpoint was unreachable or answered with a non-200 status.

    Examples: connection refused, timeout, 400 validation error, 500 server error.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "server_error",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.http_status = http_status
        self.original = original

    @property
    def transient(self) -> bool:
        return self.error_type in ("timeout", "connection")


class AuthenticationError(TransportError):
    """Credentials are missing or were rejected (401/403)."""

    def __init__(
        self,
        message: str = "",
        http_status: int | None = 401,
        original: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            error_type="auth_failure",
            http_status=http_status,
            original=original,
        )


class MarkupStructureError(MjmlCacheError):
    """Local structural validation of the source markup failed."""

    def __init__(self, message: str = "", diagnostics: list[Diagnostic] | None = None) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics or []


class ConfigurationMismatch(MjmlCacheError):
    """The content type is not enabled for conversion."""

    def __init__(self, message: str = "", content_type: str = "") -> None:
        super().__init__(message)
        self.content_type = content_type
