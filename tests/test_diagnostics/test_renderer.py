"""Tests for the diagnostic view renderer."""

import re

from mjmlcache.diagnostics.renderer import (
    DiagnosticRenderer,
    indentation_levels,
    status_message,
)
from mjmlcache.types import ApiMessage, ConversionResult, Diagnostic, Severity


def _result(source: str, status: int = 200, **kwargs) -> ConversionResult:
    kwargs.setdefault("html", "<html><body><p>x</p></body></html>")
    return ConversionResult(http_status=status, source_markup=source, **kwargs)


class TestIndentationLevels:
    def test_nested_document(self, valid_mjml):
        levels = indentation_levels(valid_mjml.split("\n"))
        assert levels == [0, 1, 2, 3, 4, 3, 2, 1, 0]

    def test_self_closing_and_comments_ignored(self):
        assert indentation_levels(["<a>", "<br/>", "<!-- c -->", "</a>"]) == [0, 1, 1, 0]

    def test_never_negative(self):
        assert indentation_levels(["</a>", "</b>", "<c>"]) == [0, 0, 0]

    def test_one_step_per_line(self):
        assert indentation_levels(["<a><b>", "<c>", "</c></b></a>"]) == [0, 1, 1]


class TestStatusMessage:
    def test_known_statuses(self):
        assert "check your error message" in status_message(400)
        assert "check credentials" in status_message(401)
        assert "credentials don't allow" in status_message(403)

    def test_other_statuses_generic(self):
        assert status_message(500) == status_message(503)
        assert "failed" in status_message(502)


class TestRender:
    def test_clean_result_returns_none(self, valid_mjml):
        assert DiagnosticRenderer().render(_result(valid_mjml)) is None

    def test_unclosed_tag_marks_line_five(self, unclosed_mjml):
        renderer = DiagnosticRenderer()
        result = _result(unclosed_mjml)
        assert 5 in {d.line for d in renderer.collect(result)}

        view = renderer.render(result)
        assert view is not None
        assert re.search(r'<mark class="mjml-diagnostic error"[^>]*>5: \t+&lt;mj-text&gt;Hello', view)

    def test_view_inserted_as_first_body_child(self, valid_mjml):
        result = _result(valid_mjml, warnings=[ApiMessage(line=5, message="bad attribute")])
        view = DiagnosticRenderer().render(result)
        assert view.startswith('<html><body><div class="mjml-debug">')
        assert view.endswith("<p>x</p></body></html>")
        assert 'class="mjml-diagnostic warning"' in view
        assert "bad attribute" in view

    def test_view_without_body_is_prepended(self, valid_mjml):
        result = _result(valid_mjml, html="<p>x</p>", warnings=[ApiMessage(line=1, message="m")])
        view = DiagnosticRenderer().render(result)
        assert view.startswith('<div class="mjml-debug">')
        assert view.endswith("<p>x</p>")

    def test_source_is_escaped_and_numbered(self, valid_mjml):
        result = _result(valid_mjml, warnings=[ApiMessage(line=2, message="m")])
        view = DiagnosticRenderer().render(result)
        assert "<mjml>" not in view.split("<body>", 1)[1]
        assert "1: &lt;mjml&gt;" in view
        assert "9: &lt;/mjml&gt;" in view
        assert "5: \t\t\t\t&lt;mj-text&gt;Hello&lt;/mj-text&gt;" in view

    def test_validation_error_panel_includes_api_message(self, valid_mjml):
        result = _result(valid_mjml, status=400, html=None, error_message="Unexpected token")
        view = DiagnosticRenderer().render(result)
        assert "Unexpected token" in view
        assert "check your error message" in view
        assert "MJML rendering failed (400)" in view

    def test_auth_panel(self, valid_mjml):
        result = _result(valid_mjml, status=401, html=None, error_message="Unauthorized")
        view = DiagnosticRenderer().render(result)
        assert "check credentials" in view
        assert "Unauthorized" not in view

    def test_forbidden_panel(self, valid_mjml):
        view = DiagnosticRenderer().render(_result(valid_mjml, status=403, html=None))
        assert "MJML rendering failed (403)" in view
        assert "credentials don" in view

    def test_generic_failure_panel(self, valid_mjml):
        result = _result(valid_mjml, status=503, html=None, error_message="refused")
        view = DiagnosticRenderer().render(result)
        assert "MJML rendering failed (503)" in view
        assert "refused" not in view

    def test_api_message_is_escaped(self, valid_mjml):
        result = _result(valid_mjml, status=400, html=None, error_message="<script>x</script>")
        view = DiagnosticRenderer().render(result)
        assert "<script>" not in view
        assert "&lt;script&gt;" in view

    def test_validation_can_be_disabled(self, unclosed_mjml):
        assert DiagnosticRenderer(validate=False).render(_result(unclosed_mjml)) is None


class TestBuildLineView:
    def test_error_wins_over_warning(self):
        diagnostics = [
            Diagnostic(line=1, message="warn", severity=Severity.WARNING),
            Diagnostic(line=1, message="err", severity=Severity.ERROR),
        ]
        view = DiagnosticRenderer().build_line_view("<a>", diagnostics)
        assert 'class="mjml-diagnostic error"' in view
        assert "warn; err" in view

    def test_unmarked_lines(self):
        view = DiagnosticRenderer().build_line_view("<a>\n</a>", [])
        assert "mjml-diagnostic" not in view
        assert view.count('class="mjml-line"') == 2


class TestUnplacedMessages:
    def test_error_message_on_success_is_shown(self, valid_mjml):
        result = _result(valid_mjml, html=None, error_message="Rendering API returned no HTML")
        view = DiagnosticRenderer().render(result)
        assert view is not None
        assert '<ul class="mjml-debug__notes">' in view
        assert "Rendering API returned no HTML" in view

    def test_out_of_range_api_errors_are_listed(self, valid_mjml):
        result = _result(valid_mjml, warnings=[
            ApiMessage(line=0, message="unknown position"),
            ApiMessage(line=40, message="past the end"),
        ])
        view = DiagnosticRenderer().render(result)
        notes = view.split('<pre class="mjml-debug__source">', 1)[0]
        assert "unknown position" in notes
        assert "past the end" in notes

    def test_placed_messages_not_repeated_as_notes(self, valid_mjml):
        result = _result(valid_mjml, warnings=[ApiMessage(line=5, message="bad attribute")])
        view = DiagnosticRenderer().render(result)
        assert "mjml-debug__notes" not in view

    def test_panel_lists_out_of_range_errors(self, valid_mjml):
        result = _result(
            valid_mjml,
            status=500,
            html=None,
            error_message="boom",
            warnings=[ApiMessage(line=0, message="template engine crashed")],
        )
        view = DiagnosticRenderer().render(result)
        assert "template engine crashed" in view
        assert "boom" not in view
