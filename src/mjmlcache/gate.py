"""Render gate — decides between serving the cache and reconverting.

The gate exposes three entry points for the hosting integration:

  check_cache       serve a fresh cache entry, or return None
  convert_and_cache call the API, cache clean output, build views on failure
  invalidate        drop every cached variant of a page
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from mjmlcache.api.normalize import minify_html
from mjmlcache.cache.keys import build_cache_key, escape_glob, invalidation_patterns
from mjmlcache.cache.stats import CacheEntry
from mjmlcache.diagnostics.renderer import DiagnosticRenderer
from mjmlcache.diagnostics.templates import APOLOGY, BARE_TITLE, render_template
from mjmlcache.types import (
    AssemblyOptions,
    CallerContext,
    ContentIdentity,
    GateDecision,
    RenderOutcome,
    RenderResponse,
    SourceDocument,
)

if TYPE_CHECKING:
    from mjmlcache.api.client import ConversionClient
    from mjmlcache.cache.store import CacheStore
    from mjmlcache.config.schema import RenderConfig

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html"
TEXT_CONTENT_TYPE = "text/plain"


def assemble_source(
    body: str,
    prepended: str = "",
    appended: str = "",
    options: AssemblyOptions | None = None,
) -> str:
    """Join page decorations around the body, honouring strip options."""
    options = options or AssemblyOptions()
    parts = []
    if prepended and not options.strip_prepended:
        parts.append(prepended)
    parts.append(body)
    if appended and not options.strip_appended:
        parts.append(appended)
    return "\n".join(parts)


class RenderGate:
    """Cache-or-convert state machine for one render request at a time.

    There is no locking around miss-then-populate: two concurrent requests
    for the same stale key both convert, and the last write wins.
    """

    def __init__(
        self,
        store: CacheStore,
        client: ConversionClient,
        config: RenderConfig,
        renderer: DiagnosticRenderer | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._client = client
        self._config = config
        self._renderer = renderer or DiagnosticRenderer()
        self._clock = clock

    def should_bypass(self, caller: CallerContext) -> bool:
        if caller.is_privileged and self._config.bypass_for_privileged:
            return True
        return bool(caller.roles & self._config.bypass_roles)

    def decide(
        self,
        identity: ContentIdentity,
        last_modified: int,
        caller: CallerContext,
    ) -> tuple[GateDecision, CacheEntry | None]:
        entry = self._store.get(build_cache_key(identity))
        if entry is None or not entry.is_fresh(last_modified):
            return GateDecision.RECONVERT, entry
        if self.should_bypass(caller):
            return GateDecision.RECONVERT, entry
        return GateDecision.SERVE_CACHED, entry

    def check_cache(
        self,
        identity: ContentIdentity,
        last_modified: int,
        caller: CallerContext,
        raw: bool = False,
    ) -> RenderResponse | None:
        """Return the cached markup verbatim if fresh, else None."""
        decision, entry = self.decide(identity, last_modified, caller)
        key = build_cache_key(identity)
        if decision == GateDecision.RECONVERT or entry is None:
            logger.debug("Cache miss for %s", key)
            return None

        logger.debug("Cache hit for %s", key)
        return RenderResponse(
            body=entry.markup,
            content_type=TEXT_CONTENT_TYPE if raw else HTML_CONTENT_TYPE,
            outcome=RenderOutcome.CACHED,
        )

    def assembly_options(self) -> AssemblyOptions:
        return self._config.assembly_options()

    def convert_and_cache(
        self,
        identity: ContentIdentity,
        source: SourceDocument,
        caller: CallerContext,
        title: str = "",
        raw: bool = False,
    ) -> RenderResponse:
        """Convert the source; cache clean output, otherwise build a view."""
        key = build_cache_key(identity)
        result = self._client.convert(source.raw_markup)
        view = self._renderer.render(result)

        if view is None and result.ok:
            markup = minify_html(result.html or "")
            self._store.set(key, CacheEntry(markup=markup, timestamp=int(self._clock())))
            logger.info("Converted and cached %s (%d bytes)", key, len(markup))
            return RenderResponse(
                body=markup,
                content_type=TEXT_CONTENT_TYPE if raw else HTML_CONTENT_TYPE,
                outcome=RenderOutcome.CONVERTED,
                http_status=result.http_status,
            )

        removed = self.invalidate_identity(identity)
        logger.warning(
            "Conversion of %s failed (status %d); %d cache entries dropped",
            key,
            result.http_status,
            removed,
        )

        if caller.is_privileged:
            return RenderResponse(
                body=view or "",
                outcome=RenderOutcome.DIAGNOSTIC,
                http_status=result.http_status,
            )
        if caller.can_edit:
            body = render_template(APOLOGY, title=title)
        else:
            body = render_template(BARE_TITLE, title=title)
        return RenderResponse(
            body=body,
            outcome=RenderOutcome.FALLBACK,
            http_status=result.http_status,
        )

    def invalidate_identity(self, identity: ContentIdentity) -> int:
        return self._store.delete_matching(escape_glob(build_cache_key(identity)))

    def invalidate(self, page_id: int) -> int:
        """Drop every language and query variant cached for a page."""
        count = sum(self._store.delete_matching(p) for p in invalidation_patterns(page_id))
        logger.info("Invalidated %d cache entries for page %d", count, page_id)
        return count
