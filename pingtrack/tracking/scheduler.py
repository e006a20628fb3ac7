"""
Fixed-delay tick scheduler for PingTrack.
"""

import logging
import threading
import time
from typing import Any, Callable, Optional


class Scheduler:
    """Invokes a callback periodically on a single worker thread.

    The next tick is due ``interval_ms`` after the previous one was issued,
    however long the callback took. Each tick carries the generation that
    was current when it was issued; its result is only delivered while that
    generation is still current, so a tick in flight when ``stop()`` lands
    is discarded.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.logger = logging.getLogger(__name__)
        self._clock = clock
        self._lock = threading.Lock()
        self._generation = 0
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self, interval_ms: int, on_tick: Callable[[], Any],
              on_result: Optional[Callable[[Any], None]] = None) -> bool:
        """Start ticking every ``interval_ms``; returns False if already running."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")

        with self._lock:
            if self._running:
                self.logger.warning("Scheduler already running")
                return False

            self._generation += 1
            self._running = True
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation, self._stop_event, interval_ms / 1000.0, on_tick, on_result),
                name="pingtrack-scheduler",
                daemon=True
            )
            self._thread.start()

        self.logger.debug(f"Scheduler started with {interval_ms} ms interval")
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop ticking. Safe to call when not running."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        # A tick may be stopping itself from inside its own callback
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

        self.logger.debug("Scheduler stopped")

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._running and generation == self._generation

    def _run(self, generation: int, stop_event: threading.Event, interval: float,
             on_tick: Callable[[], Any], on_result: Optional[Callable[[Any], None]]) -> None:
        """Main scheduling loop."""
        next_due = self._clock() + interval

        while not stop_event.wait(max(0.0, next_due - self._clock())):
            issued_at = self._clock()
            next_due = issued_at + interval

            try:
                result = on_tick()
            except Exception as e:
                self.logger.error(f"Error in scheduled tick: {e}")
                continue

            if on_result is None:
                continue

            if not self.is_current(generation):
                self.logger.debug("Discarding result of a tick issued before stop")
                break

            try:
                on_result(result)
            except Exception as e:
                self.logger.error(f"Error delivering tick result: {e}")
