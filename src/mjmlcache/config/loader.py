"""Read RenderConfig from YAML files or merged hierarchy dicts."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from mjmlcache.config.schema import RenderConfig


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Parse a YAML file that must contain a mapping."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Expected YAML mapping, got {type(raw).__name__} in {path}")
    return raw


def load_render_config(path: str | Path) -> RenderConfig:
    """Validate the ``mjml`` section of a YAML file."""
    section = load_yaml(path).get("mjml")
    if not isinstance(section, dict):
        raise ValueError(f"Invalid config YAML: missing top-level 'mjml' mapping in {path}")
    return RenderConfig.model_validate(section)


def build_render_config(merged: dict[str, Any]) -> RenderConfig:
    # The hierarchy also carries CLI-only keys (log_level, cache_db_path, ...)
    known = RenderConfig.model_fields.keys()
    return RenderConfig.model_validate(
        {k: v for k, v in merged.items() if k in known and v is not None}
    )
