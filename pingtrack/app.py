"""
PingTrack - periodic network latency tracker
Entry point for the interactive tracker and the ping endpoint.
"""

import logging
import signal
import sys
from pathlib import Path

import click

from pingtrack.console.tracker_console import TrackerConsole
from pingtrack.core.config import Config
from pingtrack.core.logger import setup_logging
from pingtrack.notify.sound_notifier import create_notifier
from pingtrack.probe.http_prober import HttpProber, create_prober
from pingtrack.server.ping_api import run_server
from pingtrack.tracking.tracker import PingTracker


def signal_handler(signum, frame):
    """Turn SIGTERM into a normal interrupt so the session gets saved."""
    logging.info(f"Received signal {signum}, shutting down...")
    raise KeyboardInterrupt


@click.command()
@click.option('--role', type=click.Choice(['track', 'serve']),
              default='track', help='Role to run')
@click.option('--config', '-c', default='config.toml',
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(role: str, config: str, verbose: bool):
    """PingTrack - periodic network latency tracker"""

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        cfg = Config.load(Path(config))
        cfg.validate()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    log_level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level.upper(), logging.INFO)
    setup_logging(cfg.logging, log_level, interactive=(role == 'track'))

    logging.info(f"Starting PingTrack in {role} mode")
    if Path(config).exists():
        logging.info(f"Configuration loaded from {config}")
    else:
        logging.info(f"No configuration file at {config}, using defaults")

    try:
        if role == 'track':
            run_tracker(cfg)
        elif role == 'serve':
            run_endpoint(cfg)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if verbose:
            logging.exception("Full traceback:")
        sys.exit(1)


def run_tracker(config: Config):
    """Run the interactive tracker."""
    tracker = PingTracker.from_config(
        config,
        create_prober(config.probe),
        notifier=create_notifier(config.alert)
    )
    TrackerConsole(tracker).run()
    logging.info("Tracker stopped")


def run_endpoint(config: Config):
    """Serve ``GET /ping`` backed by a direct prober."""
    prober = HttpProber(config.probe.target_url, timeout=config.probe.timeout)
    try:
        run_server(prober, config.server.host, config.server.port)
    finally:
        prober.close()


if __name__ == '__main__':
    main()
