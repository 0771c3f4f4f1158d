"""Rendering API client and the text rules applied around it."""

from mjmlcache.api.client import ConversionClient
from mjmlcache.api.normalize import minify_html, normalize_source

__all__ = ["ConversionClient", "minify_html", "normalize_source"]
