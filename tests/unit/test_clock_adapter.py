from datetime import UTC, datetime, timedelta

from src.adapters.clock import FrozenClock, SystemClock


def test_system_clock():
    clock = SystemClock()
    now = clock.now_utc()
    assert now.tzinfo is not None
    # Sanity check: is it close to real now?
    diff = abs((datetime.now(UTC) - now).total_seconds())
    assert diff < 1.0


def test_frozen_clock_holds_and_advances():
    start = datetime(2026, 1, 1, tzinfo=UTC)
    clock = FrozenClock(start)
    assert clock.now_utc() == start

    clock.advance(90)
    assert clock.now_utc() == start + timedelta(seconds=90)
