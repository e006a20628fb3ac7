"""
Ping tracker for PingTrack.
Drives the prober on a schedule and feeds samples to the recorder and alerts.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..core.errors import ProbeError
from ..core.models import Sample, Session, utc_now
from ..storage.log_store import LogStore
from .alert import AlertPolicy
from .recorder import SessionRecorder
from .scheduler import Scheduler

STOP_GRACE_SECONDS = 0.2


class PingTracker:
    """Start/stop tracking, current ping, live log and stored logs."""

    def __init__(self, prober, store: LogStore, notifier=None,
                 interval_ms: int = 3000, threshold_ms: int = 150,
                 scheduler: Optional[Scheduler] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.prober = prober
        self.store = store
        self.interval_ms = interval_ms
        self.logger = logging.getLogger(__name__)

        self._clock = clock
        self.scheduler = scheduler or Scheduler()
        self.recorder = SessionRecorder(store, clock=clock)
        self.alerts = AlertPolicy(threshold_ms, notifier)

        self._current_ping: Optional[int] = None
        self._listeners: List[Callable[[Sample, bool], None]] = []

    @classmethod
    def from_config(cls, config, prober, notifier=None) -> 'PingTracker':
        return cls(
            prober,
            LogStore(config.storage.path),
            notifier=notifier,
            interval_ms=config.tracking.interval_ms,
            threshold_ms=config.tracking.threshold_ms
        )

    @property
    def is_running(self) -> bool:
        return self.recorder.is_open

    @property
    def threshold_ms(self) -> int:
        return self.alerts.threshold_ms

    @property
    def current_ping(self) -> Optional[int]:
        """Latency of the latest probe, None after a failed probe."""
        return self._current_ping

    def add_listener(self, listener: Callable[[Sample, bool], None]) -> None:
        """Call ``listener(sample, alerted)`` for every recorded sample."""
        self._listeners.append(listener)

    def start(self) -> bool:
        """Open a session and begin sampling; False if already tracking."""
        if not self.recorder.start_session():
            return False

        serial = self.recorder.serial
        started = self.scheduler.start(
            self.interval_ms,
            self.measure,
            lambda sample: self.accept(sample, serial)
        )
        if not started:
            self.logger.warning("Scheduler was still running, closing new session")
            self.recorder.stop_session()
            return False

        self.logger.info(f"Tracking started, probing every {self.interval_ms} ms")
        return True

    def stop(self) -> Optional[Session]:
        """Stop sampling and close the session; None if not tracking.

        A probe still in flight is not waited for beyond a short grace
        period; its result is discarded when it completes.
        """
        self.scheduler.stop(timeout=STOP_GRACE_SECONDS)
        session = self.recorder.stop_session()
        if session is not None:
            self.logger.info(f"Tracking stopped after {len(session)} samples")
        return session

    def measure(self) -> Sample:
        """Run one probe; a failed probe yields a sample without latency."""
        try:
            latency = self.prober.probe()
        except ProbeError as e:
            self.logger.warning(f"Probe failed: {e}")
            latency = None
        return Sample(taken_at=self._clock(), latency_ms=latency)

    def accept(self, sample: Sample, serial: Optional[int] = None) -> bool:
        """Record ``sample`` into the session ``serial`` and evaluate alerts.

        Samples arriving for a session that is no longer open are dropped
        without alerting.
        """
        if not self.recorder.record_sample(sample, serial):
            return False

        self._current_ping = sample.latency_ms
        alerted = self.alerts.handle(sample)

        for listener in self._listeners:
            try:
                listener(sample, alerted)
            except Exception as e:
                self.logger.error(f"Sample listener failed: {e}")

        return True

    def live_log(self) -> Tuple[Sample, ...]:
        """Samples of the running session, newest first."""
        return self.recorder.live_samples()

    def stored_logs(self) -> List[Session]:
        return self.store.list_all()

    def delete_all_logs(self) -> int:
        return self.store.delete_all()

    def retry_pending(self) -> int:
        return self.recorder.retry_pending()

    def close(self) -> None:
        """Stop tracking (saving the session) and release the prober."""
        if self.is_running:
            self.stop()
        close = getattr(self.prober, 'close', None)
        if close is not None:
            close()
