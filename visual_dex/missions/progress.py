"""
Points and daily streak.

Points only grow by completed-mission awards, and each mission pays at
most once: the award key "<day>:<mission id>" is remembered for the day.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from .days import previous_day
from .scheduler import Mission


@dataclass(frozen=True)
class ProgressTotals:
    """Lifetime points and consecutive active days."""

    points: int = 0
    streak_days: int = 0
    last_active_day: str | None = None
    awarded_keys: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": self.points,
            "streakDays": self.streak_days,
            "lastActiveDay": self.last_active_day,
            "awardedKeys": list(self.awarded_keys),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressTotals:
        points = int(data.get("points", 0))
        streak = int(data.get("streakDays", 0))
        if points < 0 or streak < 0:
            raise ValueError("points and streakDays must be >= 0")
        return cls(
            points=points,
            streak_days=streak,
            last_active_day=data.get("lastActiveDay"),
            awarded_keys=tuple(data.get("awardedKeys", [])),
        )


def award_key(mission: Mission, day: str) -> str:
    return f"{day}:{mission.id}"


def apply_award(totals: ProgressTotals, mission: Mission, day: str) -> ProgressTotals:
    """
    Credit a completed mission.

    Args:
        totals: Current totals
        mission: The mission that was just completed
        day: Day identity the mission batch belongs to

    Returns:
        Updated totals (unchanged if this mission was already paid)
    """
    key = award_key(mission, day)
    if not mission.completed or key in totals.awarded_keys:
        return totals

    if totals.last_active_day == day:
        streak = totals.streak_days
        # Keys from earlier days can never match again
        keys = totals.awarded_keys + (key,)
    elif totals.last_active_day == previous_day(day):
        streak = totals.streak_days + 1
        keys = (key,)
    else:
        streak = 1
        keys = (key,)

    updated = replace(
        totals,
        points=totals.points + mission.points_award,
        streak_days=streak,
        last_active_day=day,
        awarded_keys=keys,
    )
    logger.debug(f"Awarded {mission.points_award} points for {key} (streak={streak})")
    return updated
