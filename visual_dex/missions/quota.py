"""
Photo quota with a healthy-break cooldown.

Rules:
- At most `max_captures` photos per period
- Hitting the limit starts a cooldown (12h by default); captures stay blocked
  until that instant, even across midnight
- The counter resets when the calendar day changes or the cooldown elapses

The counter follows calendar days; the cooldown follows elapsed time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

from loguru import logger

from .days import day_of, next_midnight, parse_local_timestamp

DEFAULT_MAX_CAPTURES = 10
DEFAULT_COOLDOWN = timedelta(hours=12)


@dataclass(frozen=True)
class QuotaState:
    """Capture counter for the current period."""

    photos_used_today: int = 0
    day_identity: str | None = None
    cooldown_until: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "photosUsedToday": self.photos_used_today,
            "dayIdentity": self.day_identity,
            "cooldownUntil": self.cooldown_until.isoformat() if self.cooldown_until else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuotaState:
        cooldown = data.get("cooldownUntil")
        used = int(data.get("photosUsedToday", 0))
        if used < 0:
            raise ValueError(f"photosUsedToday must be >= 0, got {used}")
        return cls(
            photos_used_today=used,
            day_identity=data.get("dayIdentity"),
            cooldown_until=parse_local_timestamp(cooldown) if cooldown else None,
        )


class QuotaGuard:
    """Pure quota transforms; the caller persists the returned state."""

    def __init__(
        self,
        max_captures: int = DEFAULT_MAX_CAPTURES,
        cooldown: timedelta = DEFAULT_COOLDOWN,
    ):
        self.max_captures = max_captures
        self.cooldown = cooldown

    def normalize(self, state: QuotaState, now: datetime) -> QuotaState:
        """
        Apply pending resets.

        An elapsed cooldown clears both counter and cooldown. A new calendar
        day clears the counter but leaves an active cooldown in place.
        """
        if state.cooldown_until is not None and now >= state.cooldown_until:
            state = replace(state, photos_used_today=0, cooldown_until=None)

        today = day_of(now)
        if state.day_identity != today:
            state = replace(state, photos_used_today=0, day_identity=today)

        return state

    def can_capture(self, state: QuotaState, now: datetime) -> bool:
        """True if another photo may be taken at `now`."""
        current = self.normalize(state, now)
        if current.cooldown_until is not None and now < current.cooldown_until:
            return False
        return current.photos_used_today < self.max_captures

    def record_capture(self, state: QuotaState, now: datetime) -> QuotaState:
        """
        Count one capture.

        Returns:
            Updated QuotaState; starts the cooldown when the limit is reached
        """
        current = self.normalize(state, now)
        used = current.photos_used_today + 1
        cooldown_until = current.cooldown_until

        if used >= self.max_captures and cooldown_until is None:
            cooldown_until = now + self.cooldown
            logger.info(
                f"Photo limit reached ({used}/{self.max_captures}), "
                f"cooldown until {cooldown_until.isoformat()}"
            )

        return replace(current, photos_used_today=used, cooldown_until=cooldown_until)

    def time_until_reset(self, state: QuotaState, now: datetime) -> timedelta | None:
        """None if capturing is allowed, else the wait until it is."""
        if self.can_capture(state, now):
            return None

        current = self.normalize(state, now)
        if current.cooldown_until is not None:
            return current.cooldown_until - now
        # Limit hit without a cooldown on record: wait for the day to roll over
        return next_midnight(now) - now

    def remaining(self, state: QuotaState, now: datetime) -> int:
        """Photos left before the limit (0 while blocked)."""
        if not self.can_capture(state, now):
            return 0
        current = self.normalize(state, now)
        return max(0, self.max_captures - current.photos_used_today)
