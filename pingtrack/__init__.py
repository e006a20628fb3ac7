"""
PingTrack - periodic network latency tracker

Samples round-trip latency to a fixed endpoint on a schedule, keeps each
tracking session as a timestamped log, sounds an alert when latency crosses
a threshold, and stores finished sessions on disk for later review.
"""

__version__ = "1.0.0"
__author__ = "PingTrack Authors"
__license__ = "MIT"

from .core.config import Config
from .core.logger import setup_logging

__all__ = ["Config", "setup_logging"]
