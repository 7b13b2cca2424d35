"""
Daily Mission Scheduler.

Implements:
- One batch of missions per calendar day, drawn from a single environment
- Idempotent reuse of the stored batch within the same day
- Evaluation of a detected label against the open missions

Selection goes through an injectable random.Random, so a seeded generator
reproduces the same batch. Nothing here touches storage; the caller
persists whatever is returned.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping

from loguru import logger

from .catalog import ENVIRONMENTS, Environment
from .days import day_of, parse_local_timestamp

DEFAULT_MISSIONS_PER_DAY = 3
DEFAULT_MISSION_POINTS = 50


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class Mission:
    """A daily task: photograph a specific object."""

    id: str
    environment_key: str
    object_key: str
    completed: bool = False
    points_award: int = DEFAULT_MISSION_POINTS
    completed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "environment": self.environment_key,
            "objectKey": self.object_key,
            "completed": self.completed,
            "points": self.points_award,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mission:
        """Create from dictionary."""
        completed_at = data.get("completedAt")
        return cls(
            id=str(data["id"]),
            environment_key=str(data["environment"]),
            object_key=str(data["objectKey"]).lower(),
            completed=bool(data.get("completed", False)),
            points_award=int(data.get("points", DEFAULT_MISSION_POINTS)),
            completed_at=parse_local_timestamp(completed_at) if completed_at else None,
        )


# =============================================================================
# Mission Scheduler
# =============================================================================


class MissionScheduler:
    """
    Builds and evaluates the day's missions.

    Key rules:
    1. Exactly one environment per day, chosen uniformly at random
    2. Objects are distinct and drawn without replacement
    3. A mission completes at most once, first match in list order
    """

    def __init__(
        self,
        catalog: Mapping[str, Environment] | None = None,
        rng: random.Random | None = None,
        missions_per_day: int = DEFAULT_MISSIONS_PER_DAY,
        points_award: int = DEFAULT_MISSION_POINTS,
    ):
        """
        Initialize the scheduler.

        Args:
            catalog: Environment catalog (defaults to ENVIRONMENTS)
            rng: Random source for environment/object picks
            missions_per_day: Batch size
            points_award: Points each mission is worth
        """
        self.catalog = dict(catalog if catalog is not None else ENVIRONMENTS)
        self.rng = rng or random.Random()
        self.missions_per_day = missions_per_day
        self.points_award = points_award
        self._validate_catalog(self.catalog)

    def _validate_catalog(self, catalog: Mapping[str, Environment]) -> None:
        if not catalog:
            raise ValueError("Mission catalog must contain at least one environment")
        for key, env in catalog.items():
            if len(set(env.objects)) < self.missions_per_day:
                raise ValueError(
                    f"Environment '{key}' has {len(set(env.objects))} distinct objects, "
                    f"needs at least {self.missions_per_day}"
                )

    def ensure_todays_missions(
        self,
        stored_batch: list[Mission] | None,
        stored_day: str | None,
        now: datetime,
        catalog: Mapping[str, Environment] | None = None,
    ) -> tuple[list[Mission], str]:
        """
        Return today's missions, generating a new batch when needed.

        Args:
            stored_batch: Previously persisted missions (may be empty)
            stored_day: Day identity the stored batch was created for
            now: Current time
            catalog: Override catalog for this call

        Returns:
            Tuple of (missions, day identity)
        """
        today = day_of(now)
        if stored_day == today and stored_batch:
            return list(stored_batch), today

        if catalog is not None:
            self._validate_catalog(catalog)
        envs = dict(catalog) if catalog is not None else self.catalog

        environment_key = self.rng.choice(list(envs))
        objects = list(dict.fromkeys(envs[environment_key].objects))
        self.rng.shuffle(objects)

        missions = [
            Mission(
                id=f"mission_{index}",
                environment_key=environment_key,
                object_key=object_key,
                points_award=self.points_award,
            )
            for index, object_key in enumerate(objects[: self.missions_per_day])
        ]

        logger.info(
            f"Generated missions for {today}: {environment_key} -> "
            f"{', '.join(m.object_key for m in missions)}"
        )
        return missions, today

    def evaluate(
        self,
        missions: list[Mission],
        detected_label: str,
        now: datetime | None = None,
    ) -> tuple[list[Mission], Mission | None]:
        """
        Complete the first open mission matching a detected label.

        Args:
            missions: Current batch (not modified)
            detected_label: Label returned by the vision service
            now: Completion time

        Returns:
            Tuple of (updated missions, awarded mission or None)
        """
        label = detected_label.strip().lower()

        for index, mission in enumerate(missions):
            if not mission.completed and mission.object_key == label:
                awarded = replace(mission, completed=True, completed_at=now or datetime.now())
                updated = list(missions)
                updated[index] = awarded
                logger.info(f"Mission {awarded.id} completed: {label} (+{awarded.points_award})")
                return updated, awarded

        return list(missions), None

    # =========================================================================
    # Batch Queries
    # =========================================================================

    @staticmethod
    def is_fully_completed(missions: list[Mission]) -> bool:
        """True when the batch is non-empty and every mission is done."""
        return bool(missions) and all(m.completed for m in missions)

    @staticmethod
    def progress(missions: list[Mission]) -> tuple[int, int]:
        """(completed, total) for progress display."""
        return sum(1 for m in missions if m.completed), len(missions)

    @staticmethod
    def find(missions: list[Mission], mission_id: str) -> Mission | None:
        return next((m for m in missions if m.id == mission_id), None)
