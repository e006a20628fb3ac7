import itertools
import threading
import time

import pytest

from pingtrack.tracking.scheduler import Scheduler


@pytest.fixture
def scheduler():
    scheduler = Scheduler()
    yield scheduler
    scheduler.stop(timeout=2)


def test_ticks_deliver_results_in_order(scheduler):
    counter = itertools.count(1)
    results = []
    done = threading.Event()

    def on_result(value):
        results.append(value)
        if len(results) >= 3:
            done.set()

    assert scheduler.start(10, lambda: next(counter), on_result)
    assert done.wait(2)
    scheduler.stop(timeout=2)

    assert results[:3] == [1, 2, 3]
    assert not scheduler.running


def test_second_start_is_rejected(scheduler):
    ticks = []
    assert scheduler.start(10, lambda: ticks.append("a"))
    assert not scheduler.start(10, lambda: ticks.append("b"))

    time.sleep(0.1)
    scheduler.stop(timeout=2)
    assert ticks
    assert set(ticks) == {"a"}


def test_stop_is_idempotent(scheduler):
    scheduler.stop()
    scheduler.start(10, lambda: None)
    scheduler.stop(timeout=2)
    scheduler.stop(timeout=2)
    assert not scheduler.running


def test_restart_after_stop(scheduler):
    scheduler.start(10, lambda: None)
    scheduler.stop(timeout=2)

    fired = threading.Event()
    assert scheduler.start(10, fired.set)
    assert fired.wait(2)


def test_result_in_flight_at_stop_is_discarded(scheduler):
    entered = threading.Event()
    release = threading.Event()
    results = []

    def slow_tick():
        entered.set()
        release.wait(2)
        return 42

    scheduler.start(10, slow_tick, results.append)
    assert entered.wait(2)
    thread = scheduler._thread

    scheduler.stop(timeout=0)
    release.set()
    thread.join(2)

    assert not thread.is_alive()
    assert results == []


def test_tick_error_does_not_stop_scheduling(scheduler):
    calls = itertools.count()
    done = threading.Event()

    def flaky_tick():
        if next(calls) == 0:
            raise RuntimeError("boom")
        done.set()

    scheduler.start(10, flaky_tick)
    assert done.wait(2)


def test_next_tick_is_spaced_from_previous_issue(scheduler):
    issued = []
    done = threading.Event()

    def tick():
        issued.append(time.monotonic())
        if len(issued) >= 4:
            done.set()

    scheduler.start(50, tick)
    assert done.wait(3)
    scheduler.stop(timeout=2)

    gaps = [b - a for a, b in zip(issued, issued[1:])]
    assert all(gap >= 0.045 for gap in gaps)


def test_interval_must_be_positive(scheduler):
    with pytest.raises(ValueError):
        scheduler.start(0, lambda: None)
