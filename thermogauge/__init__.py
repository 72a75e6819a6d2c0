"""ThermoGauge - Live temperature gauge for an embedded thermometer."""

import argparse
import logging
import signal
import sys
from threading import Event
from typing import Optional

__version__ = "0.1.0"

# Global shutdown event for signal handlers
_shutdown_event: Optional[Event] = None

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _handle_shutdown(signum: int, frame: object) -> None:
    """Signal handler for graceful shutdown."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, initiating shutdown...", sig_name)
    if _shutdown_event is not None:
        _shutdown_event.set()


def _cmd_run(args: argparse.Namespace) -> None:
    """Execute the run command - poll the sensor and serve the gauge page."""
    global _shutdown_event

    _setup_logging(args.verbose)

    logger.info("ThermoGauge %s starting...", __version__)

    # Import here to allow logging setup first
    from .config import load_config, ConfigError
    from .gauge import Gauge
    from .poller import Poller
    from .api import PageServer, ApiError

    # 1. Load configuration
    try:
        config = load_config(args.config)
        logger.info("Configuration loaded from %s", args.config)
        logger.info("Polling %s every %d ms", config.sensor.url, config.poller.interval_ms)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    # 2. Setup shutdown handler
    _shutdown_event = Event()
    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    # 3. Start components
    gauge = Gauge()
    poller = Poller.from_config(config, gauge)
    page_server: Optional[PageServer] = None

    try:
        poller.start()

        if config.page.enabled:
            try:
                page_server = PageServer(config.page, gauge, config.poller.interval_ms)
                page_server.start()
            except ApiError as e:
                logger.error("Failed to start page server: %s", e)
                logger.warning("Continuing without page server")
                page_server = None

        logger.info("All components started, waiting for shutdown signal...")

        # 4. Wait for shutdown signal
        _shutdown_event.wait()

    except KeyboardInterrupt:
        # Backup handler if signal doesn't work
        logger.info("Keyboard interrupt received")
    finally:
        # 5. Cleanup - stop all components
        logger.info("Shutting down components...")

        poller.stop()

        if page_server is not None:
            page_server.stop()

        logger.info("Shutdown complete")


def _cmd_check(args: argparse.Namespace) -> None:
    """Execute the check command - poll the sensor once and print the gauge."""
    _setup_logging(args.verbose)

    from .config import load_config, ConfigError
    from .gauge import Gauge
    from .poller import Poller

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    gauge = Gauge()
    poller = Poller.from_config(config, gauge)

    print(f"Polling {config.sensor.url}...\n")
    if not poller.poll():
        print("✗ FAILED: no reading received")
        sys.exit(1)

    state = gauge.state
    print(f"✓ {state.value_text}  {state.status_text}  (color: {state.text_color or 'unchanged'})")


def _cmd_page(args: argparse.Namespace) -> None:
    """Execute the page command - write the gauge HTML page."""
    from ._page import build_page
    from .config import PageConfig, PollerConfig, load_config, ConfigError

    page = PageConfig()
    poller = PollerConfig()
    if args.config is not None:
        try:
            config = load_config(args.config)
        except ConfigError as e:
            print(f"Error: {e}")
            sys.exit(1)
        page, poller = config.page, config.poller

    html = build_page(page.title, page.data_path, poller.interval_ms)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(html)
        print(f"Gauge page written to {args.output}")
    else:
        sys.stdout.write(html)


def main() -> None:
    """Main entry point for the thermogauge package."""
    parser = argparse.ArgumentParser(
        description="ThermoGauge - Live temperature gauge for an embedded thermometer"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"thermogauge {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # Run subcommand (default behavior)
    run_parser = subparsers.add_parser(
        "run",
        help="Poll the sensor and serve the gauge page (default)",
    )
    run_parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    run_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    run_parser.set_defaults(func=_cmd_run)

    # Check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Poll the sensor once and print the rendered reading",
    )
    check_parser.add_argument(
        "-c", "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    check_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    check_parser.set_defaults(func=_cmd_check)

    # Page subcommand
    page_parser = subparsers.add_parser(
        "page",
        help="Write the gauge HTML page",
    )
    page_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file (default: built-in settings)",
    )
    page_parser.add_argument(
        "-o", "--output",
        help="File to write the page to (default: stdout)",
    )
    page_parser.set_defaults(func=_cmd_page)

    args = parser.parse_args()

    # Default to 'run' if no command specified
    if args.command is None:
        args.config = "config.yaml"
        args.verbose = False
        args.func = _cmd_run

    args.func(args)
