"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Rendering API
DEFAULT_ENDPOINT = "https://api.mjml.io/v1/render"
DEFAULT_TIMEOUT = 10.0  # seconds

# Which content types are rendered
DEFAULT_CONTENT_TYPES = ["page"]

# Cache bypass
DEFAULT_BYPASS_FOR_PRIVILEGED = False
DEFAULT_CACHE_VARIANT_PATTERN = None

# Source assembly
DEFAULT_STRIP_APPENDED = False
DEFAULT_STRIP_PREPENDED = False

# Cache storage
DEFAULT_CACHE_MEMORY_MB = 100.0
DEFAULT_CACHE_DISABLED = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "endpoint": DEFAULT_ENDPOINT,
        "timeout": DEFAULT_TIMEOUT,
        "app_id": "",
        "secret_key": "",
        "allowed_content_types": list(DEFAULT_CONTENT_TYPES),
        "bypass_for_privileged": DEFAULT_BYPASS_FOR_PRIVILEGED,
        "bypass_roles": [],
        "cache_variant_pattern": DEFAULT_CACHE_VARIANT_PATTERN,
        "strip_appended_content": DEFAULT_STRIP_APPENDED,
        "strip_prepended_content": DEFAULT_STRIP_PREPENDED,
        "cache_memory_mb": DEFAULT_CACHE_MEMORY_MB,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "log_level": DEFAULT_LOG_LEVEL,
    }
