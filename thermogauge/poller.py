"""Sensor poll loop that feeds the gauge."""

import functools
import json
import logging
import math
import threading
import time
import urllib.error
import urllib.request
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Event, Thread

from . import __version__
from .config import Config
from .gauge import Gauge
from .models import Reading

logger = logging.getLogger(__name__)

USER_AGENT = f"ThermoGauge/{__version__}"

# Readings are a few dozen bytes; anything bigger is not a sensor response.
MAX_BODY_SIZE = 64 * 1024

# Returns the decoded JSON body of one sensor request.
Fetcher = Callable[[], object]


class PollError(Exception):
    """Raised when a poll cannot produce a Reading.

    Covers transport failures, non-2xx responses and malformed bodies.

    Attributes:
        status_code: HTTP status code for non-2xx responses, None otherwise.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def fetch_payload(url: str, timeout: float = 10) -> object:
    """Request the sensor endpoint and decode its JSON body.

    Args:
        url: Sensor data URL.
        timeout: Transport timeout in seconds.

    Returns:
        The decoded JSON value.

    Raises:
        PollError: On transport failure, non-2xx status, or invalid JSON.
    """
    req = urllib.request.Request(
        url,
        headers={"Accept": "application/json", "User-Agent": USER_AGENT},
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = resp.status
            body = resp.read(MAX_BODY_SIZE + 1)
    except urllib.error.HTTPError as e:
        raise PollError(f"HTTP {e.code}: {e.reason}", status_code=e.code)
    except urllib.error.URLError as e:
        raise PollError(f"Request failed: {e.reason}")
    except TimeoutError:
        raise PollError(f"Request timed out after {timeout}s")
    except OSError as e:
        raise PollError(f"Connection failed: {e}")

    if not (200 <= status < 300):
        raise PollError(f"HTTP {status}", status_code=status)

    if len(body) > MAX_BODY_SIZE:
        raise PollError(f"Response body exceeds {MAX_BODY_SIZE} bytes")

    try:
        return json.loads(body)
    except ValueError as e:
        raise PollError(f"Invalid JSON response: {e}")


def _parse_temperature(raw: object) -> float:
    """Parse the temperature field, which may be a number or a numeric string."""
    if isinstance(raw, bool):
        raise PollError(f"Invalid temperature: {raw!r}")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            raise PollError(f"Invalid temperature: {raw!r}")
    else:
        raise PollError(f"Invalid temperature: {raw!r}")

    if not math.isfinite(value):
        raise PollError(f"Temperature is not finite: {raw!r}")
    return value


def parse_reading(payload: object) -> Reading:
    """Validate a decoded response body and build a Reading.

    Raises:
        PollError: If the body is not an object or a field is missing or invalid.
    """
    if not isinstance(payload, dict):
        raise PollError("Response body must be a JSON object")

    if "temperature" not in payload:
        raise PollError("Response is missing 'temperature' field")
    if "status" not in payload:
        raise PollError("Response is missing 'status' field")

    status = payload["status"]
    if not isinstance(status, str):
        raise PollError(f"Invalid status: {status!r}")

    return Reading(temperature=_parse_temperature(payload["temperature"]), status=status)


class Poller:
    """Threaded loop that polls the sensor at a fixed cadence and renders the gauge.

    Each tick hands the poll to a worker pool and returns immediately, so a
    slow sensor can have several requests in flight at once. Whichever
    completes last wins. A tick is skipped when every worker is busy, and
    with ``single_flight`` also while any previous poll is outstanding.

    Example:
        poller = Poller(gauge, fetch)
        poller.start()  # polls now, then every interval
        # ... later ...
        poller.stop()
    """

    def __init__(
        self,
        gauge: Gauge,
        fetch: Fetcher,
        interval: float = 3.0,
        workers: int = 4,
        single_flight: bool = False,
    ) -> None:
        """Initialize the poller.

        Args:
            gauge: Gauge to render readings into.
            fetch: Callable returning the decoded sensor response body.
            interval: Seconds between ticks.
            workers: Maximum number of polls running concurrently.
            single_flight: Skip ticks while a poll is still in flight.
        """
        self._gauge = gauge
        self._fetch = fetch
        self._interval = interval
        self._workers = workers
        self._single_flight = single_flight

        self._stop_event = Event()
        self._thread: Thread | None = None
        self._executor: ThreadPoolExecutor | None = None

        self._lock = threading.Lock()
        self._in_flight = 0

    @classmethod
    def from_config(cls, config: Config, gauge: Gauge) -> "Poller":
        """Build a poller that fetches from the configured sensor URL."""
        fetch = functools.partial(fetch_payload, config.sensor.url, config.sensor.timeout)
        return cls(
            gauge,
            fetch,
            interval=config.poller.interval_seconds,
            workers=config.poller.workers,
            single_flight=config.poller.single_flight,
        )

    @property
    def last_reading(self) -> Reading | None:
        """The Reading currently shown on the gauge, or None before the first."""
        return self._gauge.reading

    @property
    def in_flight(self) -> int:
        """Number of polls submitted but not yet finished."""
        with self._lock:
            return self._in_flight

    def is_running(self) -> bool:
        """Check if the poll loop is currently running."""
        return self._thread is not None and self._thread.is_alive()

    def poll(self) -> bool:
        """Fetch one reading and render it.

        A failed poll is logged and leaves the gauge untouched.

        Returns:
            True if a reading was rendered, False if the poll failed.
        """
        try:
            reading = parse_reading(self._fetch())
        except PollError as e:
            logger.error("Error fetching data: %s", e)
            return False

        self._gauge.render(reading.temperature, reading.status)
        return True

    def tick(self) -> Future | None:
        """Submit one poll to the worker pool without waiting for it.

        Returns:
            The Future of the submitted poll, or None if the tick was skipped.
        """
        with self._lock:
            if self._single_flight and self._in_flight > 0:
                logger.debug("Previous poll still in flight, skipping tick")
                return None
            if self._in_flight >= self._workers:
                logger.debug("All %d poll workers busy, skipping tick", self._workers)
                return None
            self._in_flight += 1

        try:
            return self._ensure_executor().submit(self._poll_in_worker)
        except RuntimeError:
            # Executor already shut down
            with self._lock:
                self._in_flight -= 1
            raise

    def start(self) -> None:
        """Poll immediately, then keep polling every interval in a background thread."""
        if self.is_running():
            logger.warning("Poller already running")
            return

        self._stop_event.clear()
        self._ensure_executor()
        self._thread = Thread(target=self._run_loop, daemon=True, name="poller-loop")
        self._thread.start()
        logger.info("Poller started (interval: %.1fs)", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the poll loop.

        In-flight polls are not cancelled; they finish in the background.

        Args:
            timeout: Maximum seconds to wait for the loop to stop.
        """
        if self._thread is None or not self._thread.is_alive():
            self._shutdown_executor()
            return

        logger.info("Stopping poller...")
        self._stop_event.set()
        self._thread.join(timeout=timeout)

        if self._thread.is_alive():
            logger.warning("Poller thread did not stop within timeout")
        else:
            logger.info("Poller stopped")

        self._shutdown_executor()

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="poll")
        return self._executor

    def _shutdown_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _poll_in_worker(self) -> bool:
        """Run one poll on a worker thread, never letting an exception escape."""
        try:
            return self.poll()
        except Exception as e:
            logger.exception("Unexpected error during poll: %s", e)
            return False
        finally:
            with self._lock:
                self._in_flight -= 1

    def _run_loop(self) -> None:
        """Main poll loop - runs in background thread.

        Ticks are scheduled against a monotonic start time so the cadence
        does not drift with poll latency.
        """
        logger.debug("Poller loop started")

        started = time.monotonic()
        ticks = 0

        while not self._stop_event.is_set():
            try:
                self.tick()
            except RuntimeError as e:
                logger.error("Could not submit poll: %s", e)
                break
            ticks += 1

            next_tick = started + ticks * self._interval
            self._stop_event.wait(timeout=max(0.0, next_tick - time.monotonic()))

        logger.debug("Poller loop exited")
