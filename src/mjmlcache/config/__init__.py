"""Configuration — defaults, YAML/env hierarchy, and the RenderConfig model."""

from mjmlcache.config.hierarchy import load_config_hierarchy
from mjmlcache.config.loader import build_render_config, load_render_config
from mjmlcache.config.schema import RenderConfig

__all__ = [
    "RenderConfig",
    "build_render_config",
    "load_config_hierarchy",
    "load_render_config",
]
