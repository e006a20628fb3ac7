import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure project root is on sys.path so `import pingtrack` works without installing
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from pingtrack.core.errors import ProbeError  # noqa: E402
from pingtrack.storage.log_store import LogStore  # noqa: E402


class FakeClock:
    """Returns a fixed start time advanced by ``step`` on every call."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.now = start or datetime(2026, 10, 19, 10, 20, 30, 250000, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


class FakeProber:
    """Returns queued latencies; ``None`` entries raise ProbeError."""

    def __init__(self, latencies=()):
        self.latencies = list(latencies)
        self.calls = 0
        self.closed = False

    def probe(self):
        self.calls += 1
        if not self.latencies:
            raise ProbeError("Ping failed")
        latency = self.latencies.pop(0)
        if latency is None:
            raise ProbeError("Ping failed")
        return latency

    def close(self):
        self.closed = True


class FakeNotifier:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def notify(self):
        self.calls += 1
        if self.error is not None:
            raise self.error


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return LogStore(tmp_path / "logs")
