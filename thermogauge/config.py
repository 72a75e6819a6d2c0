"""Configuration loader with type-safe dataclasses."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


# Default poll cadence of the gauge, in milliseconds.
DEFAULT_POLL_INTERVAL_MS = 3000

# Minimum poll cadence in milliseconds.
# Faster polling only adds load on the sensor's single-threaded web server.
MIN_POLL_INTERVAL_MS = 500


@dataclass(frozen=True)
class SensorConfig:
    """Configuration for the sensor endpoint that serves readings."""

    url: str
    timeout: int = 10  # seconds

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigError("Sensor URL cannot be empty")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigError(f"Sensor URL must start with http:// or https://, got '{self.url}'")
        if self.timeout < 1:
            raise ConfigError(f"Sensor timeout must be at least 1 second (got {self.timeout})")


@dataclass(frozen=True)
class PollerConfig:
    """Configuration for the poll loop."""

    interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    single_flight: bool = False  # skip a tick while the previous poll is still running
    workers: int = 4  # max concurrent in-flight polls

    def __post_init__(self) -> None:
        if self.interval_ms < MIN_POLL_INTERVAL_MS:
            raise ConfigError(
                f"Poll interval must be at least {MIN_POLL_INTERVAL_MS} ms (got {self.interval_ms})"
            )
        if self.workers < 1:
            raise ConfigError(f"Poller workers must be at least 1 (got {self.workers})")

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000


# Paths served by the page server itself.
RESERVED_PAGE_PATHS = ("/", "/health")


@dataclass(frozen=True)
class PageConfig:
    """Configuration for the gauge page server."""

    enabled: bool = True
    port: int = 8080
    title: str = "Smart Thermometer"
    data_path: str = "/data"  # path the browser page polls

    def __post_init__(self) -> None:
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Page port must be between 1 and 65535, got {self.port}")
        if not self.title:
            raise ConfigError("Page title cannot be empty")
        if not self.data_path.startswith("/"):
            raise ConfigError(f"Page data_path must start with '/', got '{self.data_path}'")
        if self.data_path in RESERVED_PAGE_PATHS:
            raise ConfigError(f"Page data_path cannot be a reserved path, got '{self.data_path}'")


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    sensor: SensorConfig
    poller: PollerConfig = field(default_factory=PollerConfig)
    page: PageConfig = field(default_factory=PageConfig)


def _parse_sensor_config(data: dict | None) -> SensorConfig:
    """Parse sensor configuration section."""
    if data is None:
        raise ConfigError("Configuration must contain a 'sensor' section")
    if not isinstance(data, dict):
        raise ConfigError("'sensor' section must be a dictionary")

    url = data.get("url")
    if url is None:
        raise ConfigError("'sensor' section is missing 'url' field")

    return SensorConfig(
        url=str(url),
        timeout=int(data.get("timeout", 10)),
    )


def _parse_poller_config(data: dict | None) -> PollerConfig:
    """Parse poller configuration section."""
    if data is None:
        return PollerConfig()
    if not isinstance(data, dict):
        raise ConfigError("'poller' section must be a dictionary")

    return PollerConfig(
        interval_ms=int(data.get("interval_ms", DEFAULT_POLL_INTERVAL_MS)),
        single_flight=bool(data.get("single_flight", False)),
        workers=int(data.get("workers", 4)),
    )


def _parse_page_config(data: dict | None) -> PageConfig:
    """Parse page configuration section."""
    if data is None:
        return PageConfig()
    if not isinstance(data, dict):
        raise ConfigError("'page' section must be a dictionary")

    return PageConfig(
        enabled=bool(data.get("enabled", True)),
        port=int(data.get("port", 8080)),
        title=str(data.get("title", "Smart Thermometer")),
        data_path=str(data.get("data_path", "/data")),
    )


def _apply_env_overrides(config_data: dict) -> dict:
    """Apply environment variable overrides to configuration.

    Supported overrides:
    - THERMOGAUGE_SENSOR_URL: Override sensor.url
    - THERMOGAUGE_POLL_INTERVAL_MS: Override poller.interval_ms
    - THERMOGAUGE_PAGE_PORT: Override page.port
    - THERMOGAUGE_PAGE_ENABLED: Override page.enabled (true/false)
    """
    for section in ("sensor", "poller", "page"):
        if config_data.get(section) is None:
            config_data[section] = {}

    sensor_url = os.environ.get("THERMOGAUGE_SENSOR_URL")
    if sensor_url is not None:
        config_data["sensor"]["url"] = sensor_url

    poll_interval = os.environ.get("THERMOGAUGE_POLL_INTERVAL_MS")
    if poll_interval is not None:
        config_data["poller"]["interval_ms"] = int(poll_interval)

    page_port = os.environ.get("THERMOGAUGE_PAGE_PORT")
    if page_port is not None:
        config_data["page"]["port"] = int(page_port)

    page_enabled = os.environ.get("THERMOGAUGE_PAGE_ENABLED")
    if page_enabled is not None:
        config_data["page"]["enabled"] = page_enabled.lower() in ("true", "1", "yes")

    return config_data


def load_config(config_path: str) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If the file cannot be read or configuration is invalid.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML configuration: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    for section in ("sensor", "poller", "page"):
        if section in data and data[section] is not None and not isinstance(data[section], dict):
            raise ConfigError(f"'{section}' section must be a dictionary")

    had_sensor = data.get("sensor") is not None

    try:
        data = _apply_env_overrides(data)
        if not had_sensor and not data["sensor"]:
            raise ConfigError("Configuration must contain a 'sensor' section")

        return Config(
            sensor=_parse_sensor_config(data.get("sensor")),
            poller=_parse_poller_config(data.get("poller")),
            page=_parse_page_config(data.get("page")),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}")
