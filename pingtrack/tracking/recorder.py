"""
Session recording for PingTrack.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..core.errors import PersistenceError
from ..core.models import Sample, Session, utc_now
from ..storage.log_store import LogStore


class SessionRecorder:
    """Owns the single open session and hands closed sessions to the store.

    Samples are kept in arrival order. The open/closed transition and every
    append happen under one lock, so nothing can be appended to a session
    while it is being closed.
    """

    def __init__(self, store: LogStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.logger = logging.getLogger(__name__)
        self._clock = clock
        self._lock = threading.Lock()

        self._open = False
        self._serial = 0
        self._started_at: Optional[datetime] = None
        self._samples: List[Sample] = []

        # Closed sessions whose save failed
        self._pending: List[Session] = []

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def serial(self) -> int:
        """Serial of the open session (or of the last one opened)."""
        return self._serial

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def pending_sessions(self) -> Tuple[Session, ...]:
        with self._lock:
            return tuple(self._pending)

    def start_session(self) -> bool:
        """Open a new empty session; returns False if one is already open."""
        with self._lock:
            if self._open:
                self.logger.warning("Session already running")
                return False

            self._open = True
            self._serial += 1
            self._started_at = self._clock()
            self._samples = []

        self.logger.info(f"Session {self._serial} started")
        return True

    def record_sample(self, sample: Sample, serial: Optional[int] = None) -> bool:
        """Append ``sample`` to the open session.

        Returns False without recording when no session is open, or when
        ``serial`` belongs to a session other than the open one.
        """
        with self._lock:
            if not self._open:
                self.logger.debug("Dropping sample: no open session")
                return False
            if serial is not None and serial != self._serial:
                self.logger.debug(f"Dropping sample from session {serial}")
                return False
            self._samples.append(sample)
            return True

    def live_samples(self) -> Tuple[Sample, ...]:
        """Samples of the open session, newest first."""
        with self._lock:
            return tuple(reversed(self._samples))

    def stop_session(self) -> Optional[Session]:
        """Close the open session and persist it.

        Returns the closed session, or None if no session was open. Empty
        sessions are not persisted.
        """
        with self._lock:
            if not self._open:
                self.logger.warning("No session running")
                return None

            closed_at = self._clock()
            samples = tuple(self._samples)
            identity = None
            if samples:
                reserved = {pending.identity for pending in self._pending}
                identity = self.store.allocate_identity(closed_at, reserved=reserved)
            session = Session(identity=identity, samples=samples)

            self._open = False
            self._started_at = None
            self._samples = []

        if not samples:
            self.logger.info("Session stopped with no samples, nothing to save")
            return session

        self._persist(session)
        return session

    def retry_pending(self) -> int:
        """Retry saving sessions whose earlier save failed; returns how many succeeded."""
        with self._lock:
            pending, self._pending = self._pending, []

        saved = 0
        for session in pending:
            if self._persist(session):
                saved += 1
        return saved

    def _persist(self, session: Session) -> bool:
        try:
            self.store.save(session)
        except PersistenceError as e:
            self.logger.error(f"Failed to save session {session.identity}, keeping it for retry: {e}")
            with self._lock:
                self._pending.append(session)
            return False

        self.logger.info(f"Saved session {session.identity} with {len(session)} samples")
        return True
