"""Top-level entry points: MjmlRenderer and render_file()."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from mjmlcache.api.client import ConversionClient
from mjmlcache.api.normalize import minify_html
from mjmlcache.cache.keys import RAW_PARAM, derive_query_variant
from mjmlcache.cache.manager import CacheManager
from mjmlcache.cache.store import CacheStore
from mjmlcache.config.schema import RenderConfig
from mjmlcache.diagnostics.renderer import DiagnosticRenderer
from mjmlcache.errors.exceptions import AuthenticationError, ConfigurationMismatch
from mjmlcache.gate import RenderGate, assemble_source
from mjmlcache.types import (
    CallerContext,
    ContentIdentity,
    ConversionResult,
    Page,
    RenderOutcome,
    RenderResponse,
    SourceDocument,
)

logger = logging.getLogger(__name__)


class MjmlRenderer:
    """Wires config, cache, client and gate together for a hosting app."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        store: CacheStore | None = None,
        client: ConversionClient | None = None,
        cache_db_path: Path | None = None,
        cache_memory_mb: float = 100,
        no_cache: bool = False,
    ) -> None:
        self._config = config or RenderConfig()
        self._owns_store = store is None
        self._store = store or CacheManager(
            memory_max_mb=cache_memory_mb,
            disk_path=cache_db_path,
            enabled=not no_cache,
        )
        self._owns_client = client is None
        self._client = client or ConversionClient(
            app_id=self._config.app_id,
            secret_key=self._config.secret_key,
            endpoint=self._config.endpoint,
            timeout=self._config.timeout,
        )
        self._gate = RenderGate(self._store, self._client, self._config)
        self._disabled_reason: str | None = None

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def gate(self) -> RenderGate:
        return self._gate

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def disabled(self) -> bool:
        return self._disabled_reason is not None

    def render(
        self,
        page: Page,
        caller: CallerContext | None = None,
        language: str | None = None,
        query: Mapping[str, str] | None = None,
    ) -> RenderResponse:
        """Render a page: cached copy, fresh conversion, or a fallback view.

        Never raises; content that cannot go through the pipeline is passed
        through unmodified.
        """
        caller = caller or CallerContext()
        query = query or {}

        try:
            self._config.require_content_type(page.content_type)
            self._ensure_enabled()
        except (ConfigurationMismatch, AuthenticationError) as e:
            logger.debug("Passing page %d through: %s", page.page_id, e.message)
            return RenderResponse(body=page.body, outcome=RenderOutcome.PASSTHROUGH)

        identity = ContentIdentity(
            page_id=page.page_id,
            language=language,
            query_variant=derive_query_variant(query, self._config.cache_variant_pattern),
        )
        raw = RAW_PARAM in query

        cached = self._gate.check_cache(identity, page.last_modified, caller, raw=raw)
        if cached is not None:
            return cached

        markup = assemble_source(
            page.body,
            prepended=page.prepended,
            appended=page.appended,
            options=self._gate.assembly_options(),
        )
        response = self._gate.convert_and_cache(
            identity,
            SourceDocument(raw_markup=markup, last_modified=page.last_modified),
            caller,
            title=page.title,
            raw=raw,
        )
        if response.http_status == 401:
            self.disable(f"credentials rejected while rendering page {page.page_id}")
        return response

    def on_source_saved(self, page_id: int) -> int:
        """Drop cached output after the page source changed."""
        return self._gate.invalidate(page_id)

    def _ensure_enabled(self) -> None:
        if self._disabled_reason:
            raise AuthenticationError(self._disabled_reason)
        self._config.require_credentials()

    def disable(self, reason: str) -> None:
        """Stop converting until credentials are fixed (e.g. after a 401)."""
        logger.error("MJML rendering disabled: %s", reason)
        self._disabled_reason = reason

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
        if self._owns_store and isinstance(self._store, CacheManager):
            self._store.close()


# ── Module-level convenience functions ──


def render_file(
    path: str | Path,
    config: RenderConfig,
    client: ConversionClient | None = None,
) -> tuple[ConversionResult, str]:
    """Convert one MJML file without caching.

    Returns the raw result and either the minified HTML or the diagnostic view.
    """
    source = Path(path).read_text(encoding="utf-8")
    owns_client = client is None
    client = client or ConversionClient(
        app_id=config.app_id,
        secret_key=config.secret_key,
        endpoint=config.endpoint,
        timeout=config.timeout,
    )
    try:
        result = client.convert(source)
    finally:
        if owns_client:
            client.close()

    view = DiagnosticRenderer().render(result)
    if view is None:
        return result, minify_html(result.html or "")
    return result, view

