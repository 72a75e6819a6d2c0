"""HTTP server for the gauge page and the reading relay."""

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional

from .config import PageConfig
from .gauge import Gauge
from .models import Reading
from ._page import build_page

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the page server fails to start."""
    pass


def _reading_to_dict(reading: Reading) -> Dict[str, Any]:
    """Convert a Reading to the JSON shape the sensor serves."""
    return {
        "temperature": reading.temperature,
        "status": reading.status,
    }


class GaugeHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the gauge page endpoints."""

    # Class-level references set by factory
    page_html: str = ""
    data_path: str = "/data"
    gauge: Optional[Gauge] = None

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use Python logging instead of stderr."""
        logger.debug("HTTP %s - %s", self.address_string(), format % args)

    def _send(self, code: int, content_type: str, body: bytes) -> None:
        self.send_response(code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store")
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, code: int, data: Dict[str, Any]) -> None:
        """Send a JSON response with the given status code."""
        self._send(code, "application/json", json.dumps(data).encode("utf-8"))

    def _send_error_json(self, code: int, message: str) -> None:
        """Send a JSON error response."""
        self._send_json(code, {"error": message})

    def do_GET(self) -> None:
        """Handle GET requests."""
        path = self.path.split("?", 1)[0]
        try:
            if path == "/":
                self._send(200, "text/html; charset=utf-8", self.page_html.encode("utf-8"))
            elif path == self.data_path:
                self._handle_data()
            elif path == "/health":
                self._handle_health()
            else:
                self._send_error_json(404, "Not found")
        except Exception as e:
            logger.exception("Error handling request: %s", e)
            self._send_error_json(500, "Internal server error")

    def _handle_data(self) -> None:
        """Relay the reading currently shown on the gauge."""
        reading = self.gauge.reading if self.gauge is not None else None
        if reading is None:
            self._send_error_json(503, "No reading available yet")
            return
        self._send_json(200, _reading_to_dict(reading))

    def _handle_health(self) -> None:
        """Handle GET /health endpoint."""
        phase = self.gauge.phase.value if self.gauge is not None else "loading"
        self._send_json(200, {"status": "ok", "phase": phase})


def _create_handler_class(page_html: str, data_path: str, gauge: Gauge) -> type:
    """Create a handler class with the page and gauge bound."""

    class BoundGaugeHandler(GaugeHandler):
        pass

    BoundGaugeHandler.page_html = page_html
    BoundGaugeHandler.data_path = data_path
    BoundGaugeHandler.gauge = gauge
    return BoundGaugeHandler


class PageServer:
    """Serves the gauge page and relays the gauge's reading on the data path.

    Both endpoints read from the same Gauge, so the browser page and the
    Python widget always agree on the reading being shown.
    """

    def __init__(self, config: PageConfig, gauge: Gauge, poll_interval_ms: int) -> None:
        """Initialize the page server.

        Args:
            config: Page configuration.
            gauge: Gauge whose reading and phase are served.
            poll_interval_ms: Poll cadence baked into the page's JavaScript.
        """
        self.config = config
        self.gauge = gauge
        self.page_html = build_page(config.title, config.data_path, poll_interval_ms)
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start serving in a background thread.

        Raises:
            ApiError: If the port cannot be bound.
        """
        if self.is_running:
            logger.warning("Page server is already running")
            return

        handler_class = _create_handler_class(self.page_html, self.config.data_path, self.gauge)
        try:
            self._server = ThreadingHTTPServer(("", self.config.port), handler_class)
        except OSError as e:
            raise ApiError(f"Cannot listen on port {self.config.port}: {e.strerror or e}")

        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, name="page-server", daemon=True)
        self._thread.start()
        logger.info("Page server started on port %d", self.config.port)

    def stop(self) -> None:
        """Stop the page server and release the port."""
        if self._server is None:
            return

        logger.info("Stopping page server...")
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)

        self._server = None
        self._thread = None
        logger.info("Page server stopped")

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._thread is not None and self._thread.is_alive()
