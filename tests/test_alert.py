from datetime import datetime, timezone

import pytest

from pingtrack.core.models import Sample
from pingtrack.tracking.alert import AlertPolicy, should_alert

from conftest import FakeNotifier

NOW = datetime(2026, 10, 19, 10, 20, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("latency, expected", [(149, False), (150, False), (151, True), (2000, True)])
def test_threshold_is_exclusive(latency, expected):
    assert should_alert(Sample(NOW, latency), 150) is expected


@pytest.mark.parametrize("threshold", [-1, 0, 150, 10_000])
def test_failed_probe_never_alerts(threshold):
    assert not should_alert(Sample(NOW, None), threshold)


def test_evaluate_uses_policy_threshold_unless_given():
    policy = AlertPolicy(150)
    assert policy.evaluate(Sample(NOW, 200))
    assert not policy.evaluate(Sample(NOW, 200), threshold_ms=250)


def test_handle_notifies_only_above_threshold():
    notifier = FakeNotifier()
    policy = AlertPolicy(150, notifier)

    assert not policy.handle(Sample(NOW, 80))
    assert policy.handle(Sample(NOW, 200))
    assert not policy.handle(Sample(NOW, None))
    assert notifier.calls == 1


def test_notifier_failure_is_swallowed():
    policy = AlertPolicy(150, FakeNotifier(error=OSError("device busy")))
    assert policy.handle(Sample(NOW, 300))
