"""Tests for the configuration module."""

from pathlib import Path

import pytest

from thermogauge.config import (
    DEFAULT_POLL_INTERVAL_MS,
    MIN_POLL_INTERVAL_MS,
    Config,
    ConfigError,
    PageConfig,
    PollerConfig,
    SensorConfig,
    load_config,
)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for config files."""
    return tmp_path


@pytest.fixture
def valid_config_content() -> str:
    """Return a valid configuration YAML content."""
    return """sensor:
  url: http://thermometer.local/data
  timeout: 5

poller:
  interval_ms: 2000
  single_flight: true
  workers: 2

page:
  enabled: true
  port: 9090
  title: Nursery
  data_path: /reading
"""


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no override variables leak into tests."""
    for name in (
        "THERMOGAUGE_SENSOR_URL",
        "THERMOGAUGE_POLL_INTERVAL_MS",
        "THERMOGAUGE_PAGE_PORT",
        "THERMOGAUGE_PAGE_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


def _write(config_dir: Path, content: str) -> str:
    config_file = config_dir / "config.yaml"
    config_file.write_text(content)
    return str(config_file)


class TestSensorConfig:
    """Tests for SensorConfig dataclass."""

    def test_creates_valid_sensor_config(self) -> None:
        """Valid sensor configuration can be created."""
        sensor = SensorConfig(url="http://sensor.local/data")

        assert sensor.url == "http://sensor.local/data"
        assert sensor.timeout == 10

    def test_rejects_empty_url(self) -> None:
        """Empty sensor URL raises ConfigError."""
        with pytest.raises(ConfigError, match="cannot be empty"):
            SensorConfig(url="")

    def test_rejects_non_http_url(self) -> None:
        """Sensor URL must be http or https."""
        with pytest.raises(ConfigError, match="http://"):
            SensorConfig(url="ftp://sensor.local/data")

    def test_rejects_zero_timeout(self) -> None:
        """Timeout must be at least 1 second."""
        with pytest.raises(ConfigError, match="timeout"):
            SensorConfig(url="http://sensor.local/data", timeout=0)


class TestPollerConfig:
    """Tests for PollerConfig dataclass."""

    def test_defaults(self) -> None:
        """Default cadence is 3000 ms with overlapping polls allowed."""
        poller = PollerConfig()

        assert poller.interval_ms == DEFAULT_POLL_INTERVAL_MS == 3000
        assert poller.interval_seconds == 3.0
        assert poller.single_flight is False

    def test_rejects_interval_below_minimum(self) -> None:
        """Intervals below the minimum raise ConfigError."""
        with pytest.raises(ConfigError, match="at least"):
            PollerConfig(interval_ms=MIN_POLL_INTERVAL_MS - 1)

    def test_rejects_zero_workers(self) -> None:
        """At least one worker is required."""
        with pytest.raises(ConfigError, match="workers"):
            PollerConfig(workers=0)


class TestPageConfig:
    """Tests for PageConfig dataclass."""

    def test_defaults(self) -> None:
        """Default page settings."""
        page = PageConfig()

        assert page.enabled is True
        assert page.port == 8080
        assert page.title == "Smart Thermometer"
        assert page.data_path == "/data"

    @pytest.mark.parametrize("port", [0, 65536])
    def test_rejects_invalid_port(self, port: int) -> None:
        """Port must be within 1-65535."""
        with pytest.raises(ConfigError, match="port"):
            PageConfig(port=port)

    def test_rejects_relative_data_path(self) -> None:
        """Data path must be absolute."""
        with pytest.raises(ConfigError, match="data_path"):
            PageConfig(data_path="data")

    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_rejects_reserved_data_path(self, path: str) -> None:
        """Data path cannot shadow the page or health endpoints."""
        with pytest.raises(ConfigError, match="reserved"):
            PageConfig(data_path=path)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_valid_config(self, config_dir: Path, valid_config_content: str) -> None:
        """Valid YAML is loaded into a Config."""
        config = load_config(_write(config_dir, valid_config_content))

        assert isinstance(config, Config)
        assert config.sensor.url == "http://thermometer.local/data"
        assert config.sensor.timeout == 5
        assert config.poller.interval_ms == 2000
        assert config.poller.single_flight is True
        assert config.poller.workers == 2
        assert config.page.port == 9090
        assert config.page.title == "Nursery"
        assert config.page.data_path == "/reading"

    def test_minimal_config_uses_defaults(self, config_dir: Path) -> None:
        """Only the sensor URL is required."""
        config = load_config(_write(config_dir, "sensor:\n  url: http://10.0.0.5/data\n"))

        assert config.poller == PollerConfig()
        assert config.page == PageConfig()

    def test_missing_file_raises(self, config_dir: Path) -> None:
        """Missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(config_dir / "missing.yaml"))

    def test_empty_file_raises(self, config_dir: Path) -> None:
        """Empty file raises ConfigError."""
        with pytest.raises(ConfigError, match="empty"):
            load_config(_write(config_dir, ""))

    def test_invalid_yaml_raises(self, config_dir: Path) -> None:
        """Malformed YAML raises ConfigError."""
        with pytest.raises(ConfigError, match="parse YAML"):
            load_config(_write(config_dir, "sensor: [unclosed\n"))

    def test_non_dict_root_raises(self, config_dir: Path) -> None:
        """Root must be a mapping."""
        with pytest.raises(ConfigError, match="dictionary"):
            load_config(_write(config_dir, "- a\n- b\n"))

    def test_missing_sensor_section_raises(self, config_dir: Path) -> None:
        """The sensor section is required."""
        with pytest.raises(ConfigError, match="sensor"):
            load_config(_write(config_dir, "page:\n  port: 8080\n"))

    def test_missing_sensor_url_raises(self, config_dir: Path) -> None:
        """The sensor URL is required."""
        with pytest.raises(ConfigError, match="url"):
            load_config(_write(config_dir, "sensor:\n  timeout: 5\n"))

    def test_non_dict_section_raises(self, config_dir: Path) -> None:
        """Sections must be mappings."""
        content = "sensor:\n  url: http://10.0.0.5/data\npoller: 3000\n"
        with pytest.raises(ConfigError, match="'poller' section"):
            load_config(_write(config_dir, content))

    def test_non_numeric_value_raises(self, config_dir: Path) -> None:
        """Non-numeric values for numeric fields raise ConfigError."""
        content = "sensor:\n  url: http://10.0.0.5/data\npage:\n  port: eighty\n"
        with pytest.raises(ConfigError, match="Invalid configuration value"):
            load_config(_write(config_dir, content))


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_overrides_values(
        self, config_dir: Path, valid_config_content: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment variables override file values."""
        monkeypatch.setenv("THERMOGAUGE_SENSOR_URL", "http://192.168.1.40/data")
        monkeypatch.setenv("THERMOGAUGE_POLL_INTERVAL_MS", "5000")
        monkeypatch.setenv("THERMOGAUGE_PAGE_PORT", "8181")
        monkeypatch.setenv("THERMOGAUGE_PAGE_ENABLED", "false")

        config = load_config(_write(config_dir, valid_config_content))

        assert config.sensor.url == "http://192.168.1.40/data"
        assert config.poller.interval_ms == 5000
        assert config.page.port == 8181
        assert config.page.enabled is False

    def test_sensor_url_from_env_only(self, config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The sensor URL may come entirely from the environment."""
        monkeypatch.setenv("THERMOGAUGE_SENSOR_URL", "http://192.168.1.40/data")

        config = load_config(_write(config_dir, "page:\n  port: 8080\n"))

        assert config.sensor.url == "http://192.168.1.40/data"

    def test_invalid_env_value_raises(
        self, config_dir: Path, valid_config_content: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Invalid override values raise ConfigError."""
        monkeypatch.setenv("THERMOGAUGE_PAGE_PORT", "not-a-port")

        with pytest.raises(ConfigError):
            load_config(_write(config_dir, valid_config_content))
