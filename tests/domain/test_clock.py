"""Tests for the injectable clocks."""

from datetime import datetime, timedelta, timezone

from eventflow_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:

    def test_fixed_until_advanced(self):
        clock = DeterministicClock()
        assert clock.now() == clock.now() == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_advance_and_tick(self):
        clock = DeterministicClock()
        start = clock.now()
        clock.advance(30)
        assert clock.tick() == start + timedelta(seconds=31)

    def test_set_time_resets_offset(self):
        clock = DeterministicClock()
        clock.advance(5)
        target = datetime(2025, 3, 1, tzinfo=timezone.utc)
        clock.set_time(target)
        assert clock.now() == target


class TestSystemClock:

    def test_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
