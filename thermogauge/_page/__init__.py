"""HTML gauge page served at the root endpoint.

The page is static HTML that polls the data path via JavaScript and renders
the reading as a colored circular gauge with a legend.
"""

from ..config import DEFAULT_POLL_INTERVAL_MS
from ._css import CSS_STYLES
from ._html import build_html, build_legend
from ._js import JS_GAUGE


def build_page(
    title: str = "Smart Thermometer",
    data_path: str = "/data",
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
) -> str:
    """Assemble the complete gauge page."""
    return build_html(CSS_STYLES, JS_GAUGE, title, data_path, poll_interval_ms)


__all__ = [
    "build_page",
    "build_legend",
]
