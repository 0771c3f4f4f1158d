"""Text rules applied around the rendering API call.

``normalize_source`` runs on MJML before it is sent; ``minify_html`` runs on
the HTML that comes back, and is what gets cached. Both are idempotent.
"""

from __future__ import annotations

import re

_CONTROL_WS_RE = re.compile(r"[\r\t\f\v]")
_MULTI_SPACE_RE = re.compile(r" {2,}")
_MULTI_NEWLINE_RE = re.compile(r"\n{2,}")

_AFTER_OPEN_RE = re.compile(r"<\s+")
_BEFORE_CLOSE_RE = re.compile(r"\s+>")
_BRACE_RE = re.compile(r"\s*([{}])\s*")
_NEWLINES_RE = re.compile(r"\n+")
_SPACES_RE = re.compile(r" {2,}")
# Upstream renderer leaves empty style attributes behind: <td style>
_EMPTY_STYLE_RE = re.compile(r"(?:\s+style)+>")


def normalize_source(mjml: str) -> str:
    """Strip incidental whitespace from MJML source.

    - Removes carriage returns, tabs, form feeds and vertical tabs
    - Removes runs of two or more spaces
    - Collapses runs of blank lines into a single newline
    """
    text = _CONTROL_WS_RE.sub("", mjml)
    text = _MULTI_SPACE_RE.sub("", text)
    return _MULTI_NEWLINE_RE.sub("\n", text)


def minify_html(html: str) -> str:
    """Remove redundant whitespace around tag boundaries and braces."""
    text = _AFTER_OPEN_RE.sub("<", html)
    text = _BEFORE_CLOSE_RE.sub(">", text)
    text = _BRACE_RE.sub(r"\1", text)
    text = _NEWLINES_RE.sub(" ", text)
    text = _SPACES_RE.sub(" ", text)
    return _EMPTY_STYLE_RE.sub(">", text)
