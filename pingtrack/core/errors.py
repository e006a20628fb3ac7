"""
Exception types raised by PingTrack.
"""


class PingTrackError(Exception):
    """Base class for PingTrack errors."""


class ProbeError(PingTrackError):
    """A single latency probe could not complete."""


class PersistenceError(PingTrackError):
    """A session could not be written to or read from durable storage."""
