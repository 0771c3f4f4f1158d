"""Layered configuration: each layer overrides the ones before it.

  1. Package defaults
  2. User config        ~/.mjmlcache/config.yaml
  3. Project config     mjmlcache.yaml, searched from cwd upward
  4. Environment        MJML_APP_ID, MJML_SECRET_KEY, MJMLCACHE_*
  5. Runtime keyword arguments (None means "not given")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from mjmlcache.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".mjmlcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "mjmlcache.yaml"

_ENV_MAP: dict[str, str] = {
    "MJML_APP_ID": "app_id",
    "MJML_SECRET_KEY": "secret_key",
    "MJMLCACHE_ENDPOINT": "endpoint",
    "MJMLCACHE_TIMEOUT": "timeout",
    "MJMLCACHE_CONTENT_TYPES": "allowed_content_types",
    "MJMLCACHE_BYPASS_PRIVILEGED": "bypass_for_privileged",
    "MJMLCACHE_BYPASS_ROLES": "bypass_roles",
    "MJMLCACHE_VARIANT_PATTERN": "cache_variant_pattern",
    "MJMLCACHE_STRIP_APPENDED": "strip_appended_content",
    "MJMLCACHE_STRIP_PREPENDED": "strip_prepended_content",
    "MJMLCACHE_CACHE_DISABLED": "cache_disabled",
    "MJMLCACHE_CACHE_DB_PATH": "cache_db_path",
    "MJMLCACHE_CACHE_MEMORY_MB": "cache_memory_mb",
    "MJMLCACHE_LOG_LEVEL": "log_level",
}

_NUMERIC_KEYS = {"timeout", "cache_memory_mb"}

_BOOL_KEYS = {
    "bypass_for_privileged",
    "cache_disabled",
    "strip_appended_content",
    "strip_prepended_content",
}

_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Merge every configuration layer into one flat dict."""
    merged = get_defaults()
    for layer in _file_layers():
        merged.update(layer)
    merged.update(_load_env_vars())
    merged.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return merged


def _file_layers() -> Iterator[dict[str, Any]]:
    candidates = [_GLOBAL_CONFIG_PATH, _find_project_config()]
    for path in candidates:
        if path is None:
            continue
        data = _load_yaml_config(path)
        if data:
            logger.debug("Loaded config layer %s", path)
            yield data


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Read a YAML mapping, flat or nested under ``mjml``; None if unusable."""
    if not path.is_file():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring", path)
        return None
    nested = data.get("mjml")
    return nested if isinstance(nested, dict) else data


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / _PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    return {
        key: _coerce_env_value(key, os.environ[name])
        for name, key in _ENV_MAP.items()
        if name in os.environ
    }


def _coerce_env_value(key: str, value: str) -> Any:
    """Environment values are strings; turn flags and numbers into real types."""
    if key in _BOOL_KEYS:
        return value.strip().lower() in _TRUTHY
    if key in _NUMERIC_KEYS:
        try:
            return float(value)
        except ValueError:
            logger.warning("Keeping non-numeric value for '%s': %s", key, value)
    return value
