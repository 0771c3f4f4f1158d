"""Shared Pydantic models for mjmlcache."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class GateDecision(StrEnum):
    SERVE_CACHED = "serve_cached"
    RECONVERT = "reconvert"


class RenderOutcome(StrEnum):
    CACHED = "cached"
    CONVERTED = "converted"
    DIAGNOSTIC = "diagnostic"
    FALLBACK = "fallback"
    PASSTHROUGH = "passthrough"


# ── Request models ──


class ContentIdentity(BaseModel):
    """What a cache entry is scoped to: page, language and query variant."""

    model_config = ConfigDict(frozen=True)

    page_id: int
    language: str | None = None
    query_variant: str | None = None


class SourceDocument(BaseModel):
    raw_markup: str
    last_modified: int = 0


class CallerContext(BaseModel):
    """Resolved by the host: who is asking for the page."""

    model_config = ConfigDict(frozen=True)

    is_privileged: bool = False
    can_edit: bool = False
    roles: frozenset[str] = Field(default_factory=frozenset)


class Page(BaseModel):
    """A renderable page as handed over by the host."""

    page_id: int
    content_type: str = "page"
    title: str = ""
    body: str = ""
    prepended: str = ""
    appended: str = ""
    last_modified: int = 0


# ── Conversion models ──


class ApiMessage(BaseModel):
    """A per-line error reported by the rendering API."""

    line: int
    message: str
    tag_name: str | None = None


class ConversionResult(BaseModel):
    http_status: int
    html: str | None = None
    error_message: str | None = None
    warnings: list[ApiMessage] = Field(default_factory=list)
    source_markup: str = ""

    @property
    def ok(self) -> bool:
        return self.http_status == 200


class Diagnostic(BaseModel):
    line: int
    message: str
    severity: Severity = Severity.ERROR
    linked_line: int | None = None


class AssemblyOptions(BaseModel):
    strip_prepended: bool = False
    strip_appended: bool = False


class RenderResponse(BaseModel):
    body: str
    content_type: str = "text/html"
    outcome: RenderOutcome = RenderOutcome.CONVERTED
    http_status: int | None = None

    @property
    def cached(self) -> bool:
        return self.outcome == RenderOutcome.CACHED
