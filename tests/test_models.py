from datetime import datetime, timedelta, timezone

import pytest

from pingtrack.core.models import Sample, Session, derive_identity, identity_time


def test_derive_identity_strips_fraction_and_colons():
    closed_at = datetime(2026, 10, 19, 10, 20, 30, 987000, tzinfo=timezone.utc)
    assert derive_identity(closed_at) == "log-2026-10-19T10-20-30"


def test_derive_identity_uses_utc():
    local = datetime(2026, 10, 19, 12, 20, 30, tzinfo=timezone(timedelta(hours=2)))
    assert derive_identity(local) == "log-2026-10-19T10-20-30"


def test_identity_time_round_trips_and_accepts_suffix():
    expected = datetime(2026, 10, 19, 10, 20, 30, tzinfo=timezone.utc)
    assert identity_time("log-2026-10-19T10-20-30") == expected
    assert identity_time("log-2026-10-19T10-20-30-002") == expected
    assert identity_time("notes") is None
    assert identity_time("log-garbage") is None


def test_sample_entry_carries_time_latency_and_timestamp():
    taken_at = datetime(2026, 10, 19, 10, 20, 30, 123456, tzinfo=timezone.utc)
    entry = Sample(taken_at, 80).to_entry()

    assert entry["latency"] == 80
    assert entry["takenAt"] == "2026-10-19T10:20:30.123456+00:00"
    assert entry["time"] == taken_at.astimezone().strftime("%X")
    assert Sample.from_entry(entry) == Sample(taken_at, 80)


def test_failed_sample_has_no_latency():
    sample = Sample(datetime.now(timezone.utc))
    assert sample.failed
    assert sample.to_entry()["latency"] is None
    assert "N/A ms" in sample.describe()


def test_entry_without_timestamp_uses_session_closing_time():
    session = Session.from_entries("log-2026-10-19T10-20-30", [{"time": "10:20:27", "latency": 95}])
    assert session.samples[0].taken_at == datetime(2026, 10, 19, 10, 20, 30, tzinfo=timezone.utc)
    assert session.samples[0].latency_ms == 95


def test_entry_without_any_time_is_rejected():
    with pytest.raises(ValueError):
        Sample.from_entry({"latency": 1})


def test_session_newest_first():
    now = datetime(2026, 10, 19, 10, 20, 30, tzinfo=timezone.utc)
    samples = tuple(Sample(now + timedelta(seconds=i), i) for i in range(3))
    session = Session("log-2026-10-19T10-20-33", samples)

    assert [s.latency_ms for s in session.newest_first()] == [2, 1, 0]
    assert len(session) == 3
