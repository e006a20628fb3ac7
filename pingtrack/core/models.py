"""
Samples and sessions for PingTrack.

A session log is persisted as a JSON array of entries shaped like
``{"time": "10:20:30", "latency": 80, "takenAt": "2026-10-19T10:20:30.123456+00:00"}``
under a key derived from the moment the session was closed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

LOG_KEY_PREFIX = "log-"
IDENTITY_FORMAT = "%Y-%m-%dT%H-%M-%S"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def derive_identity(closed_at: datetime) -> str:
    """Derive the storage key for a session closed at ``closed_at``.

    The ISO-8601 UTC time with ``:`` replaced by ``-`` and the sub-second
    fraction dropped, e.g. ``log-2026-10-19T10-20-30``.
    """
    if closed_at.tzinfo is None:
        closed_at = closed_at.replace(tzinfo=timezone.utc)
    return LOG_KEY_PREFIX + closed_at.astimezone(timezone.utc).strftime(IDENTITY_FORMAT)


def identity_time(identity: str) -> Optional[datetime]:
    """Closing time encoded in ``identity``, or None if it is not a log key."""
    if not identity.startswith(LOG_KEY_PREFIX):
        return None
    stamp = identity[len(LOG_KEY_PREFIX):len(LOG_KEY_PREFIX) + 19]
    try:
        return datetime.strptime(stamp, IDENTITY_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


@dataclass(frozen=True)
class Sample:
    """One latency measurement; ``latency_ms`` is None for a failed probe."""
    taken_at: datetime
    latency_ms: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.latency_ms is None

    @property
    def time_label(self) -> str:
        """Local time of day, as shown in the live and stored logs."""
        return self.taken_at.astimezone().strftime("%X")

    def to_entry(self) -> Dict[str, Any]:
        return {
            'time': self.time_label,
            'latency': self.latency_ms,
            'takenAt': self.taken_at.isoformat(),
        }

    @classmethod
    def from_entry(cls, entry: Dict[str, Any], fallback_time: Optional[datetime] = None) -> 'Sample':
        """Rebuild a sample from a stored log entry.

        Entries written without ``takenAt`` only carry a local time label,
        so they take ``fallback_time`` (the session's closing time).
        """
        latency = entry.get('latency')
        if latency is not None:
            latency = int(latency)

        taken_at = entry.get('takenAt')
        if taken_at:
            return cls(taken_at=datetime.fromisoformat(taken_at), latency_ms=latency)

        if fallback_time is None:
            raise ValueError(f"Log entry has no timestamp: {entry!r}")
        return cls(taken_at=fallback_time, latency_ms=latency)

    def describe(self) -> str:
        latency = 'N/A' if self.failed else self.latency_ms
        return f"[{self.time_label}] - {latency} ms"


@dataclass(frozen=True)
class Session:
    """A closed tracking session; samples are oldest first.

    ``identity`` is the storage key. A session closed without samples is never
    stored and has no identity (None).
    """
    identity: Optional[str]
    samples: Tuple[Sample, ...] = ()

    def __len__(self) -> int:
        return len(self.samples)

    def newest_first(self) -> Tuple[Sample, ...]:
        return tuple(reversed(self.samples))

    def to_entries(self) -> list:
        return [sample.to_entry() for sample in self.samples]

    @classmethod
    def from_entries(cls, identity: str, entries: list) -> 'Session':
        if not isinstance(entries, list):
            raise ValueError(f"Stored log {identity} is not a list")
        fallback = identity_time(identity)
        return cls(
            identity=identity,
            samples=tuple(Sample.from_entry(entry, fallback) for entry in entries),
        )
