"""Cache key derivation — deterministic, scoped by content identity."""

from __future__ import annotations

import re
from collections.abc import Mapping

from mjmlcache.types import ContentIdentity

KEY_PREFIX = "mjml"

# Content negotiation flag, never a cache dimension
RAW_PARAM = "raw"

WILDCARD = "*"


def build_cache_key(identity: ContentIdentity) -> str:
    """Build the cache key for a content identity.

    Format: ``mjml-<page>[-<language>][-<variant>]``.
    """
    parts = [KEY_PREFIX, str(identity.page_id)]
    if identity.language:
        parts.append(identity.language)
    if identity.query_variant:
        parts.append(identity.query_variant)
    return "-".join(parts)


def derive_query_variant(
    query: Mapping[str, str] | None,
    pattern: str | None,
) -> str | None:
    """Derive the query variant from the first non-``raw`` query parameter.

    ``pattern`` is either ``"*"`` (any parameter) or an allow-list of names
    separated by commas or whitespace. No pattern disables variant caching.
    """
    if not pattern or not query:
        return None

    params = [(name, value) for name, value in query.items() if name != RAW_PARAM]
    if not params:
        return None

    name, value = params[0]
    if not _matches(name, pattern):
        return None
    return f"{name}={value}" if value else name


def invalidation_patterns(page_id: int) -> list[str]:
    """Glob patterns that cover every cached variant of a page."""
    base = f"{KEY_PREFIX}-{page_id}"
    return [base, f"{base}-{WILDCARD}"]


def parse_variant_pattern(pattern: str | None) -> set[str]:
    """Split an allow-list pattern into parameter names."""
    if not pattern:
        return set()
    return {name for name in re.split(r"[,\s]+", pattern.strip()) if name}


def _matches(name: str, pattern: str) -> bool:
    if pattern.strip() == WILDCARD:
        return True
    return name in parse_variant_pattern(pattern)


def escape_glob(key: str) -> str:
    """Escape a literal key for use as a glob pattern."""
    return re.sub(r"([*?\[])", r"[\1]", key)
