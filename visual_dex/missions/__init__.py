"""Daily missions, photo quota and progress totals."""

from .catalog import (
    ENVIRONMENTS,
    Environment,
    environment_display_name,
    object_display_name,
)
from .days import day_of
from .progress import ProgressTotals, apply_award
from .quota import QuotaGuard, QuotaState
from .scheduler import Mission, MissionScheduler

__all__ = [
    # Catalog
    "ENVIRONMENTS",
    "Environment",
    "environment_display_name",
    "object_display_name",
    # Scheduling
    "Mission",
    "MissionScheduler",
    "day_of",
    # Quota
    "QuotaGuard",
    "QuotaState",
    # Progress
    "ProgressTotals",
    "apply_award",
]
