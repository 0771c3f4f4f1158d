"""Jinja2 templates for diagnostic and fallback views."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

_jinja_env = Environment(
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)

LINE_VIEW = """\
<div class="mjml-debug">
{% if notes %}
<ul class="mjml-debug__notes">
{% for note in notes %}
<li class="mjml-diagnostic__message">{{ note }}</li>
{% endfor %}
</ul>
{% endif %}
<pre class="mjml-debug__source">
{% for row in rows %}
{% if row.severity %}
<mark class="mjml-diagnostic {{ row.severity }}" title="{{ row.messages }}">{{ row.number }}: {{ row.indent }}{{ row.text }}</mark> <span class="mjml-diagnostic__message">{{ row.messages }}</span>
{% else %}
<span class="mjml-line">{{ row.number }}: {{ row.indent }}{{ row.text }}</span>
{% endif %}
{% endfor %}
</pre>
</div>
"""

ERROR_PANEL = """\
<div class="mjml-error" role="alert">
<h2 class="mjml-error__title">MJML rendering failed ({{ status }})</h2>
<p class="mjml-error__message">{{ message }}</p>
{% if api_message %}
<pre class="mjml-error__api">{{ api_message }}</pre>
{% endif %}
{{ line_view | safe }}
</div>
"""

APOLOGY = """\
<h1>{{ title }}</h1>
<p class="mjml-apology">Sorry, this page could not be displayed right now. \
Please try again later.</p>
"""

BARE_TITLE = "<h1>{{ title }}</h1>\n"


def render_template(template_str: str, **context: Any) -> str:
    template = _jinja_env.from_string(template_str)
    return template.render(**context)
