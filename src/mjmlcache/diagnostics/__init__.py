"""Structural checks and annotated views for MJML that failed to render."""

from mjmlcache.diagnostics.renderer import (
    DiagnosticRenderer,
    indentation_levels,
    status_message,
)
from mjmlcache.diagnostics.validator import check_structure

__all__ = [
    "DiagnosticRenderer",
    "check_structure",
    "indentation_levels",
    "status_message",
]
