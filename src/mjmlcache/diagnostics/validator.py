"""Local structural check of MJML source.

MJML is XML-shaped, so a recovering XML parse reports unclosed and
mismatched tags with line numbers long before the rendering API answers.
"""

from __future__ import annotations

import logging
import re

from lxml import etree

from mjmlcache.errors.exceptions import MarkupStructureError
from mjmlcache.types import Diagnostic, Severity

logger = logging.getLogger(__name__)

# "Opening and ending tag mismatch: mj-text line 5 and mj-column"
_LINE_REF_RE = re.compile(r"\bline\s*(\d+)")

# Entity problems are not structural: HTML named entities (&nbsp;) are
# undeclared in XML, and bare "&" in URLs is accepted by the rendering API
_IGNORED_TYPES = {
    "ERR_UNDECLARED_ENTITY",
    "WAR_UNDECLARED_ENTITY",
    "ERR_ENTITYREF_SEMICOL_MISSING",
}

# libxml2 reports a lone "&" as ERR_NAME_REQUIRED from its entity parser
_ENTITY_REF_MARKER = "EntityRef"


def check_structure(markup: str, strict: bool = False) -> list[Diagnostic]:
    """Parse ``markup`` and return one diagnostic per reported issue.

    An issue whose message names a second line also yields a diagnostic on
    that line, linked back to the line the parser reported.
    Raises MarkupStructureError instead of returning issues when ``strict``.
    """
    if not markup.strip():
        return []

    parser = etree.XMLParser(
        recover=True,
        resolve_entities=False,
        no_network=True,
        remove_comments=False,
    )
    try:
        etree.fromstring(markup.encode("utf-8"), parser)
        error_log = parser.error_log
    except etree.XMLSyntaxError as exc:
        error_log = exc.error_log

    diagnostics: list[Diagnostic] = []
    seen: set[tuple[int, str, int | None]] = set()

    def add(diagnostic: Diagnostic) -> None:
        marker = (diagnostic.line, diagnostic.message, diagnostic.linked_line)
        if marker not in seen:
            seen.add(marker)
            diagnostics.append(diagnostic)

    for entry in error_log:
        if _is_entity_issue(entry):
            continue
        message = entry.message.strip()
        line = max(entry.line, 1)
        severity = Severity.WARNING if entry.level_name == "WARNING" else Severity.ERROR
        secondary = _referenced_line(message, line)

        add(Diagnostic(line=line, message=message, severity=severity, linked_line=secondary))
        if secondary is not None:
            add(Diagnostic(line=secondary, message=message, severity=severity, linked_line=line))

    if diagnostics:
        logger.debug("Structural check found %d issues", len(diagnostics))
        if strict:
            raise MarkupStructureError(
                f"{len(diagnostics)} structural issues in MJML source",
                diagnostics=diagnostics,
            )
    return diagnostics


def _is_entity_issue(entry: etree._LogEntry) -> bool:
    if entry.type_name in _IGNORED_TYPES:
        return True
    return entry.type_name == "ERR_NAME_REQUIRED" and _ENTITY_REF_MARKER in entry.message


def _referenced_line(message: str, line: int) -> int | None:
    match = _LINE_REF_RE.search(message)
    if not match:
        return None
    secondary = int(match.group(1))
    if secondary < 1 or secondary == line:
        return None
    return secondary
