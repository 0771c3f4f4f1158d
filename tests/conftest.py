import json

import httpx
import pytest

from mjmlcache.types import ConversionResult

VALID_MJML = """<mjml>
<mj-body>
<mj-section>
<mj-column>
<mj-text>Hello</mj-text>
</mj-column>
</mj-section>
</mj-body>
</mjml>"""

# <mj-text> on line 5 is never closed
UNCLOSED_MJML = """<mjml>
<mj-body>
<mj-section>
<mj-column>
<mj-text>Hello
</mj-column>
</mj-section>
</mj-body>
</mjml>"""

RENDERED_HTML = """<!doctype html>
<html>
  <head>
    <style type="text/css">
      body { margin: 0 }
    </style>
  </head>
  <body style>
    <div >
      <p>Hello</p>
    </div>
  </body>
</html>"""


class FakeConversionClient:
    """Test double for ConversionClient that counts calls."""

    def __init__(self, result: ConversionResult | None = None) -> None:
        self.result = result
        self.calls: list[str] = []

    def convert(self, raw_markup: str) -> ConversionResult:
        self.calls.append(raw_markup)
        if self.result is not None:
            return self.result.model_copy(update={"source_markup": raw_markup})
        return ConversionResult(http_status=200, html=RENDERED_HTML, source_markup=raw_markup)

    def close(self) -> None:
        pass


def json_transport(status: int, payload: dict, seen: list | None = None) -> httpx.MockTransport:
    """MockTransport answering every request with a JSON payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=json.dumps(payload).encode())

    return httpx.MockTransport(handler)


@pytest.fixture
def valid_mjml():
    return VALID_MJML


@pytest.fixture
def unclosed_mjml():
    return UNCLOSED_MJML


@pytest.fixture
def rendered_html():
    return RENDERED_HTML


@pytest.fixture
def fake_client():
    return FakeConversionClient()


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Write a minimal config YAML and return its path."""
    content = """
mjml:
  app_id: test-app
  secret_key: test-secret
  allowed_content_types: [page, newsletter]
  bypass_for_privileged: true
  bypass_roles: [editor]
  cache_variant_pattern: "utm_campaign, page"
"""
    path = tmp_path / "mjmlcache.yaml"
    path.write_text(content)
    return path
