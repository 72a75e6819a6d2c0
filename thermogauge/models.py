"""Data models for sensor readings and the rendered gauge."""

from dataclasses import dataclass
from enum import Enum


class StatusCategory(Enum):
    """Health band reported by the sensor, with its display color.

    The enum value is the exact status string sent by the sensor.
    """

    LOW = "LOW"
    NORMAL = "NORMAL"
    ELEVATED = "ELEVATED"
    FEVER = "FEVER"

    @property
    def color(self) -> str:
        """Hex color used for the ring, glow and text."""
        return _CATEGORY_COLORS[self]

    @property
    def css_var(self) -> str:
        """CSS custom property holding the color on the page."""
        return f"--color-{self.value.lower()}"

    @property
    def label(self) -> str:
        """Human label shown in the page legend."""
        return self.value.capitalize()

    @classmethod
    def lookup(cls, status: str) -> "StatusCategory | None":
        """Return the category for an exact (case-sensitive) status string, or None."""
        try:
            return cls(status)
        except ValueError:
            return None


_CATEGORY_COLORS = {
    StatusCategory.LOW: "#00bfff",
    StatusCategory.NORMAL: "#2ecc71",
    StatusCategory.ELEVATED: "#f39c12",
    StatusCategory.FEVER: "#e74c3c",
}


class GaugePhase(Enum):
    """Lifecycle of the gauge widget."""

    LOADING = "loading"
    DISPLAYING = "displaying"


@dataclass(frozen=True)
class Reading:
    """A single sensor observation.

    Attributes:
        temperature: Temperature in degrees Celsius.
        status: Status string as sent by the sensor (normally a StatusCategory value).
    """

    temperature: float
    status: str


@dataclass(frozen=True)
class DisplayState:
    """Observable attributes of the gauge widget.

    Attributes:
        value_text: Numeric text including the unit, e.g. "36.6°C".
        status_text: Status label, e.g. "NORMAL".
        border_color: Ring color, or None before any category has been shown.
        glow: Box-shadow value for the ring glow, or None.
        text_color: Color of both the value and the status text, or None.
    """

    value_text: str
    status_text: str
    border_color: str | None = None
    glow: str | None = None
    text_color: str | None = None


PLACEHOLDER_STATE = DisplayState(value_text="--.-°C", status_text="LOADING...")
