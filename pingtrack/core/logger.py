"""
Logging configuration for PingTrack.

The interactive tracker prints samples to stdout itself, so in that mode the
console handler goes to stderr and only shows warnings; the log file, when
configured, always receives the full level.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List

from .config import LoggingConfig

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

QUIET_LOGGERS = ('urllib3', 'requests', 'aiohttp.access')


def _file_handler(config: LoggingConfig) -> logging.Handler:
    log_path = Path(config.file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=config.max_size * 1024 * 1024,  # MB to bytes
        backupCount=config.backup_count
    )


def setup_logging(config: LoggingConfig, level: int = logging.INFO,
                  interactive: bool = False) -> List[logging.Handler]:
    """Install PingTrack's handlers on the root logger and return them."""
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if interactive:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(max(level, logging.WARNING))
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        try:
            file_handler = _file_handler(config)
        except OSError as e:
            root_logger.warning(f"Failed to setup file logging: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    # A sample every few seconds makes per-request library logs pure noise
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger.handlers[:]
