"""mjmlcache — render MJML through the MJML API, with identity-scoped caching."""

from mjmlcache.core import MjmlRenderer, render_file
from mjmlcache.gate import RenderGate
from mjmlcache.types import (
    CallerContext,
    ContentIdentity,
    ConversionResult,
    Diagnostic,
    Page,
    RenderResponse,
    SourceDocument,
)

__version__ = "0.1.0"

__all__ = [
    "CallerContext",
    "ContentIdentity",
    "ConversionResult",
    "Diagnostic",
    "MjmlRenderer",
    "Page",
    "RenderGate",
    "RenderResponse",
    "SourceDocument",
    "render_file",
]
