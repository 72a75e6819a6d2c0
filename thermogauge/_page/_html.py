"""HTML template for the gauge page.

This module loads the HTML template from gauge.html and provides a function
to build the complete page by substituting CSS, JavaScript and settings.

The template is automatically reloaded when the file changes (hot-reload).
"""

import html
import json
from pathlib import Path
from string import Template

from ..models import PLACEHOLDER_STATE, StatusCategory

_TEMPLATE_PATH = Path(__file__).parent / "gauge.html"

# Cache for template and its mtime
_template_cache: Template | None = None
_template_mtime: float = 0.0


def _get_template() -> Template:
    """Get the HTML template, reloading if the file changed.

    Returns:
        The current Template instance.
    """
    global _template_cache, _template_mtime

    current_mtime = _TEMPLATE_PATH.stat().st_mtime

    if _template_cache is None or current_mtime != _template_mtime:
        _template_cache = Template(_TEMPLATE_PATH.read_text(encoding="utf-8"))
        _template_mtime = current_mtime

    return _template_cache


def _script_json(value: object) -> str:
    """Serialize a value for embedding inside a <script> element."""
    return json.dumps(value).replace("</", "<\\/")


def build_legend() -> str:
    """Build the static legend mapping each status color to its label."""
    items = [
        f'        <div class="key-item"><div class="key-color" '
        f'style="background-color: var({category.css_var});"></div> {category.label}</div>'
        for category in StatusCategory
    ]
    return "\n".join(items)


def build_html(css: str, js: str, title: str, data_path: str, poll_interval_ms: int) -> str:
    """Build the complete gauge page from its components.

    Args:
        css: CSS styles string.
        js: JavaScript poll loop string.
        title: Document title.
        data_path: Path the page polls for readings.
        poll_interval_ms: Milliseconds between polls.

    Returns:
        Complete HTML page string.
    """
    status_colors = {category.value: f"var({category.css_var})" for category in StatusCategory}

    return _get_template().safe_substitute(
        title=html.escape(title),
        css=css,
        js=js,
        legend=build_legend(),
        placeholder_value=html.escape(PLACEHOLDER_STATE.value_text),
        placeholder_status=html.escape(PLACEHOLDER_STATE.status_text),
        data_path=_script_json(data_path),
        poll_interval=int(poll_interval_ms),
        status_colors=_script_json(status_colors),
    )
