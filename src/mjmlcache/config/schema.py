"""Pydantic model for render configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from mjmlcache.config.defaults import (
    DEFAULT_CONTENT_TYPES,
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
)
from mjmlcache.errors.exceptions import AuthenticationError, ConfigurationMismatch
from mjmlcache.types import AssemblyOptions


class RenderConfig(BaseModel):
    """Everything the render pipeline is configured with.

    ``cache_variant_pattern`` is ``None`` (variant caching off), ``"*"``
    (any query parameter) or a comma separated list of parameter names.
    """

    allowed_content_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_TYPES)
    )
    bypass_for_privileged: bool = False
    bypass_roles: set[str] = Field(default_factory=set)
    cache_variant_pattern: str | None = None
    strip_appended_content: bool = False
    strip_prepended_content: bool = False

    app_id: str = ""
    secret_key: str = Field(default="", repr=False)
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("allowed_content_types", "bypass_roles", mode="before")
    @classmethod
    def _split_csv(cls, value: object) -> object:
        # Env vars and flat YAML may give "a, b"
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("cache_variant_pattern", mode="before")
    @classmethod
    def _blank_pattern_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_credentials(self) -> bool:
        return bool(self.app_id and self.secret_key)

    def require_credentials(self) -> None:
        if not self.has_credentials:
            raise AuthenticationError("MJML API credentials are not configured", http_status=None)

    def require_content_type(self, content_type: str) -> None:
        if content_type not in self.allowed_content_types:
            raise ConfigurationMismatch(
                f"Content type '{content_type}' is not enabled for MJML rendering",
                content_type=content_type,
            )

    def assembly_options(self) -> AssemblyOptions:
        return AssemblyOptions(
            strip_prepended=self.strip_prepended_content,
            strip_appended=self.strip_appended_content,
        )
