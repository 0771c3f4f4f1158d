"""Annotated line-by-line view of MJML source for failed conversions."""

from __future__ import annotations

import logging
import re
from collections import defaultdict

from mjmlcache.diagnostics.templates import ERROR_PANEL, LINE_VIEW, render_template
from mjmlcache.diagnostics.validator import check_structure
from mjmlcache.types import ConversionResult, Diagnostic, Severity

logger = logging.getLogger(__name__)

# Opening tags: not </x>, not <!-- -->/<?xml ?>, not self-closing <x/>
_OPEN_TAG_RE = re.compile(r"<(?![/!?])[^<>]*(?<!/)>")
_CLOSE_TAG_RE = re.compile(r"</[^<>]+>")
_BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)

_STATUS_MESSAGES: dict[int, str] = {
    400: "The MJML API rejected the template, check your error message.",
    401: "The MJML API could not authenticate this site, check credentials.",
    403: "The MJML API credentials don't allow this request.",
}
_GENERIC_FAILURE = "The MJML API request failed. Please try again later."


def status_message(status: int) -> str:
    """Human readable explanation of an API status code."""
    return _STATUS_MESSAGES.get(status, _GENERIC_FAILURE)


def indentation_levels(lines: list[str]) -> list[int]:
    """Best-effort nesting depth per line, from tag counts on each line.

    Only opening vs. closing counts on a single line are compared, so tags
    split across lines or several levels closed at once are approximate.
    """
    depth = 0
    levels: list[int] = []
    for line in lines:
        opens = len(_OPEN_TAG_RE.findall(line))
        closes = len(_CLOSE_TAG_RE.findall(line))
        if closes > opens:
            depth = max(depth - 1, 0)
        levels.append(depth)
        if opens > closes:
            depth += 1
    return levels


class DiagnosticRenderer:
    """Turns a ConversionResult into a diagnostic view, or None when clean."""

    def __init__(self, validate: bool = True) -> None:
        self._validate = validate

    def collect(self, result: ConversionResult) -> list[Diagnostic]:
        """Local structural issues (errors) plus API per-line errors (warnings)."""
        diagnostics: list[Diagnostic] = []
        if self._validate:
            diagnostics.extend(check_structure(result.source_markup))
        diagnostics.extend(
            Diagnostic(line=w.line, message=w.message, severity=Severity.WARNING)
            for w in result.warnings
        )
        return diagnostics

    def render(self, result: ConversionResult) -> str | None:
        """Return the annotated view, or None when the result can be cached."""
        diagnostics = self.collect(result)
        if not diagnostics and not result.error_message and result.ok:
            return None

        logger.info(
            "Building diagnostic view: status=%d, %d diagnostics",
            result.http_status,
            len(diagnostics),
        )
        line_count = len(result.source_markup.split("\n"))
        # Messages without a source line to attach to are listed above the lines
        notes = [d.message for d in diagnostics if not 1 <= d.line <= line_count]
        if result.ok and result.error_message:
            notes.insert(0, result.error_message)
        line_view = self.build_line_view(result.source_markup, diagnostics, notes)

        if result.ok:
            return _insert_into_body(result.html or "", line_view)

        api_message = result.error_message if result.http_status == 400 else None
        return render_template(
            ERROR_PANEL,
            status=result.http_status,
            message=status_message(result.http_status),
            api_message=api_message,
            line_view=line_view,
        )

    def build_line_view(
        self,
        source: str,
        diagnostics: list[Diagnostic],
        notes: list[str] | None = None,
    ) -> str:
        lines = source.split("\n")
        levels = indentation_levels(lines)

        by_line: dict[int, list[Diagnostic]] = defaultdict(list)
        for diagnostic in diagnostics:
            by_line[diagnostic.line].append(diagnostic)

        rows = []
        for number, (text, level) in enumerate(zip(lines, levels, strict=True), start=1):
            found = by_line.get(number, [])
            rows.append({
                "number": number,
                "indent": "\t" * level,
                "text": text,
                "severity": _line_severity(found),
                "messages": "; ".join(d.message for d in found),
            })
        return render_template(LINE_VIEW, rows=rows, notes=notes or [])


def _line_severity(diagnostics: list[Diagnostic]) -> str | None:
    if not diagnostics:
        return None
    if any(d.severity == Severity.ERROR for d in diagnostics):
        return Severity.ERROR.value
    return Severity.WARNING.value


def _insert_into_body(html: str, view: str) -> str:
    """Insert the view as the first child of <body>, or prepend it."""
    match = _BODY_OPEN_RE.search(html)
    if match is None:
        return view + html
    return html[: match.end()] + view + html[match.end():]
