"""
Unit tests for the photo quota and cooldown.
"""

from datetime import datetime, timedelta, timezone

import pytest

from visual_dex.missions import QuotaGuard, QuotaState


@pytest.fixture
def guard():
    return QuotaGuard()


def take(guard: QuotaGuard, state: QuotaState, now: datetime, count: int) -> QuotaState:
    for _ in range(count):
        assert guard.can_capture(state, now)
        state = guard.record_capture(state, now)
    return state


class TestCapture:
    def test_fresh_state_allows_capture(self, guard, now):
        state = QuotaState()

        assert guard.can_capture(state, now)
        assert guard.time_until_reset(state, now) is None
        assert guard.remaining(state, now) == 10

    def test_record_increments_and_stamps_day(self, guard, now):
        state = guard.record_capture(QuotaState(), now)

        assert state.photos_used_today == 1
        assert state.day_identity == "2024-03-15"
        assert state.cooldown_until is None
        assert guard.remaining(state, now) == 9

    def test_tenth_capture_starts_cooldown(self, guard, now):
        state = take(guard, QuotaState(), now, 10)

        assert state.photos_used_today == 10
        assert state.cooldown_until == now + timedelta(hours=12)
        assert not guard.can_capture(state, now)
        assert guard.remaining(state, now) == 0

    def test_ninth_capture_still_allowed(self, guard, now):
        state = take(guard, QuotaState(), now, 9)

        assert guard.can_capture(state, now)
        assert state.cooldown_until is None


class TestCooldown:
    def test_blocked_during_cooldown(self, guard, now):
        state = take(guard, QuotaState(), now, 10)

        assert guard.time_until_reset(state, now + timedelta(hours=2)) == timedelta(hours=10)

    def test_elapsed_cooldown_resets_counter(self, guard, now):
        state = take(guard, QuotaState(), now, 10)
        later = state.cooldown_until

        assert guard.can_capture(state, later)
        normalized = guard.normalize(state, later)
        assert normalized.photos_used_today == 0
        assert normalized.cooldown_until is None

    def test_day_rollover_keeps_active_cooldown(self, guard):
        evening = datetime(2024, 3, 15, 20, 0)
        state = take(guard, QuotaState(), evening, 10)

        after_midnight = datetime(2024, 3, 16, 1, 0)
        normalized = guard.normalize(state, after_midnight)

        assert normalized.photos_used_today == 0
        assert normalized.cooldown_until == evening + timedelta(hours=12)
        assert not guard.can_capture(state, after_midnight)
        assert guard.time_until_reset(state, after_midnight) == timedelta(hours=7)

    def test_capture_allowed_after_cooldown_next_day(self, guard):
        evening = datetime(2024, 3, 15, 20, 0)
        state = take(guard, QuotaState(), evening, 10)

        assert guard.can_capture(state, datetime(2024, 3, 16, 8, 0))

    def test_limit_without_cooldown_waits_for_midnight(self, guard, now):
        legacy = QuotaState(photos_used_today=10, day_identity="2024-03-15")

        assert not guard.can_capture(legacy, now)
        assert guard.time_until_reset(legacy, now) == timedelta(hours=13, minutes=30)


class TestDayRollover:
    def test_counter_resets_on_new_day(self, guard, now):
        state = take(guard, QuotaState(), now, 4)

        tomorrow = now + timedelta(days=1)
        state = guard.record_capture(state, tomorrow)

        assert state.photos_used_today == 1
        assert state.day_identity == "2024-03-16"


class TestSerialization:
    def test_round_trip(self, guard, now):
        state = take(guard, QuotaState(), now, 10)

        assert QuotaState.from_dict(state.to_dict()) == state

    def test_offset_cooldown_loads_as_naive_local_time(self, guard, now):
        state = QuotaState.from_dict(
            {"photosUsedToday": 10, "dayIdentity": "2024-03-15", "cooldownUntil": "2024-03-15T22:00:00+00:00"}
        )

        expected = datetime(2024, 3, 15, 22, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert state.cooldown_until.tzinfo is None
        assert state.cooldown_until == expected
        # Comparable against the naive clock
        guard.can_capture(state, now)

    def test_negative_counter_rejected(self):
        with pytest.raises(ValueError):
            QuotaState.from_dict({"photosUsedToday": -1})


def test_custom_limits(now):
    guard = QuotaGuard(max_captures=2, cooldown=timedelta(hours=1))
    state = take(guard, QuotaState(), now, 2)

    assert state.cooldown_until == now + timedelta(hours=1)
    assert guard.can_capture(state, now + timedelta(hours=1))
