"""Gauge widget: formats readings and holds the current display state."""

import logging
import math
import threading
from collections.abc import Callable

from .models import PLACEHOLDER_STATE, DisplayState, GaugePhase, Reading, StatusCategory

logger = logging.getLogger(__name__)

UNIT_SUFFIX = "°C"

# Spread of the ring glow in pixels.
GLOW_RADIUS_PX = 25


def format_temperature(temperature: float) -> str:
    """Format a temperature with one fractional digit and the unit suffix.

    Uses Python fixed-point formatting, which rounds the exact binary value
    and breaks exact ties to even (e.g. -3.25 -> "-3.2°C").

    Raises:
        ValueError: If the temperature is not finite.
    """
    if not math.isfinite(temperature):
        raise ValueError(f"Temperature must be finite, got {temperature!r}")
    return f"{temperature:.1f}{UNIT_SUFFIX}"


def resolve_color(status: str) -> str | None:
    """Return the color for a known status string, or None if unrecognized."""
    category = StatusCategory.lookup(status)
    return category.color if category is not None else None


def glow_for(color: str) -> str:
    """Return the box-shadow value used for the ring glow."""
    return f"0 0 {GLOW_RADIUS_PX}px {color}"


def build_display_state(temperature: float, status: str, previous: DisplayState) -> DisplayState:
    """Derive the next display state from a reading.

    An unrecognized status still replaces the status text but keeps the
    colors of ``previous``.
    """
    value_text = format_temperature(temperature)
    color = resolve_color(status)

    if color is None:
        return DisplayState(
            value_text=value_text,
            status_text=status,
            border_color=previous.border_color,
            glow=previous.glow,
            text_color=previous.text_color,
        )

    return DisplayState(
        value_text=value_text,
        status_text=status,
        border_color=color,
        glow=glow_for(color),
        text_color=color,
    )


class Gauge:
    """Thread-safe holder of the rendered gauge state.

    Each render replaces the whole DisplayState at once, so readers never
    observe a partially updated widget.

    Example:
        gauge = Gauge()
        gauge.render(36.6, "NORMAL")
        gauge.state.value_text  # "36.6°C"
    """

    def __init__(self, on_render: Callable[[DisplayState], None] | None = None) -> None:
        """Initialize the gauge in the loading phase.

        Args:
            on_render: Optional callback invoked with each new DisplayState.
        """
        self._on_render = on_render
        self._lock = threading.Lock()
        self._state = PLACEHOLDER_STATE
        self._phase = GaugePhase.LOADING
        self._reading: Reading | None = None

    @property
    def state(self) -> DisplayState:
        """The current display state."""
        with self._lock:
            return self._state

    @property
    def reading(self) -> Reading | None:
        """The reading behind the current state, or None while loading."""
        with self._lock:
            return self._reading

    @property
    def phase(self) -> GaugePhase:
        """LOADING until the first successful render, DISPLAYING afterwards."""
        with self._lock:
            return self._phase

    def render(self, temperature: float, status: str) -> DisplayState:
        """Apply a reading to the gauge.

        Args:
            temperature: Finite temperature in degrees Celsius.
            status: Status string; matched case-sensitively against StatusCategory.

        Returns:
            The new DisplayState.

        Raises:
            ValueError: If the temperature is not finite. The state is left unchanged.
        """
        with self._lock:
            new_state = build_display_state(temperature, status, self._state)
            self._state = new_state
            self._phase = GaugePhase.DISPLAYING
            self._reading = Reading(temperature=float(temperature), status=status)

        if StatusCategory.lookup(status) is None:
            logger.warning("Unknown status %r, keeping previous colors", status)

        logger.debug("Rendered %s %s", new_state.value_text, new_state.status_text)

        if self._on_render is not None:
            self._on_render(new_state)

        return new_state
