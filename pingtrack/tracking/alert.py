"""
High-latency alerting for PingTrack.
"""

import logging
from typing import Optional

from ..core.models import Sample


def should_alert(sample: Sample, threshold_ms: int) -> bool:
    """True when the sample has a latency strictly above ``threshold_ms``.

    A failed probe has no latency and never alerts.
    """
    return not sample.failed and sample.latency_ms > threshold_ms


class AlertPolicy:
    """Fires the notifier for samples above the latency threshold."""

    def __init__(self, threshold_ms: int, notifier=None):
        self.threshold_ms = threshold_ms
        self.notifier = notifier
        self.logger = logging.getLogger(__name__)

    def evaluate(self, sample: Sample, threshold_ms: Optional[int] = None) -> bool:
        if threshold_ms is None:
            threshold_ms = self.threshold_ms
        return should_alert(sample, threshold_ms)

    def handle(self, sample: Sample) -> bool:
        """Notify if ``sample`` is above the threshold; returns whether it alerted."""
        if not self.evaluate(sample):
            return False

        self.logger.info(f"High latency: {sample.latency_ms} ms > {self.threshold_ms} ms")

        if self.notifier is not None:
            try:
                self.notifier.notify()
            except Exception as e:
                self.logger.warning(f"Failed to play alert: {e}")

        return True
