"""Tests for the command-line entry point."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from thermogauge import main
from thermogauge.poller import PollError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a minimal configuration file."""
    path = tmp_path / "config.yaml"
    path.write_text("sensor:\n  url: http://sensor.local/data\npage:\n  title: Ward 3\n")
    return path


def _run(*argv: str) -> None:
    with patch.object(sys, "argv", ["thermogauge", *argv]):
        main()


class TestPageCommand:
    """Tests for the page subcommand."""

    def test_writes_page_to_stdout(self, capsys: pytest.CaptureFixture) -> None:
        """Without options the default page is printed."""
        _run("page")

        out = capsys.readouterr().out
        assert "<title>Smart Thermometer</title>" in out

    def test_writes_configured_page_to_file(self, config_file: Path, tmp_path: Path) -> None:
        """The page is written to the output file using the configured title."""
        output = tmp_path / "index.html"

        _run("page", "-c", str(config_file), "-o", str(output))

        assert "<title>Ward 3</title>" in output.read_text(encoding="utf-8")


class TestCheckCommand:
    """Tests for the check subcommand."""

    def test_prints_rendered_reading(self, config_file: Path, capsys: pytest.CaptureFixture) -> None:
        """A successful poll prints the formatted value and status."""
        with patch("thermogauge.poller.fetch_payload", return_value={"temperature": 39.02, "status": "FEVER"}):
            _run("check", "-c", str(config_file))

        out = capsys.readouterr().out
        assert "39.0°C" in out
        assert "FEVER" in out

    def test_failed_poll_exits_1(self, config_file: Path) -> None:
        """A failed poll exits with status 1."""
        with patch("thermogauge.poller.fetch_payload", side_effect=PollError("HTTP 500", status_code=500)):
            with pytest.raises(SystemExit) as exc_info:
                _run("check", "-c", str(config_file))

        assert exc_info.value.code == 1

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        """A missing configuration file exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run("check", "-c", str(tmp_path / "nope.yaml"))

        assert exc_info.value.code == 1
