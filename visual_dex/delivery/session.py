"""
Session Coordinator for Visual DeX.

Orchestrates one user session:
1. Check the photo quota
2. Ask the vision service for a label
3. Mission mode: complete a matching mission and pay out points
   Free mode: generate example sentences and record the exposure
4. Persist every touched blob and return a single CaptureResult

The coordinator is the only component that reads or writes the store.
Each blob is read, changed in memory and written back whole.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from loguru import logger

from visual_dex.integrations import GoogleVisionClient, LoggingSpeaker, SpeechOutput, VisionLabeler
from visual_dex.learning import LearningEntry, LearningProfile, SentenceGenerator, Tier, normalize_label
from visual_dex.missions import (
    Mission,
    MissionScheduler,
    ProgressTotals,
    QuotaGuard,
    QuotaState,
    apply_award,
    object_display_name,
)
from visual_dex.translation import TranslationCascade

from .messages import SUPPORTED_LANGUAGES, format_duration, t, tier_name
from .state_store import StateRepository, build_store

# =============================================================================
# Result Types
# =============================================================================


class CaptureMode(str, Enum):
    FREE = "free"
    MISSION = "mission"


class CaptureStatus(str, Enum):
    """Outcome of a capture event."""

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    WRONG_OBJECT = "wrong_object"
    MISSION_COMPLETED = "mission_completed"
    SENTENCES = "sentences"


@dataclass
class CaptureResult:
    """Everything the caller needs to render the outcome of one capture."""

    status: CaptureStatus
    message: str
    label: str | None = None
    sentences: list[str] = field(default_factory=list)
    entry: LearningEntry | None = None
    tier: Tier | None = None
    mission: Mission | None = None
    points: int = 0
    streak_days: int = 0
    photos_remaining: int = 0
    retry_after: timedelta | None = None
    all_missions_completed: bool = False
    limit_reached: bool = False


@dataclass
class SessionState:
    """Snapshot of all persisted state at session start."""

    language: str
    has_seen_welcome: bool
    profile: LearningProfile
    missions: list[Mission]
    mission_day: str
    quota: QuotaState
    progress: ProgressTotals
    photos_remaining: int
    time_until_reset: timedelta | None

    @property
    def all_missions_completed(self) -> bool:
        return MissionScheduler.is_fully_completed(self.missions)


# =============================================================================
# Coordinator
# =============================================================================


class SessionCoordinator:
    """
    Glue between the pure engines and their collaborators.

    Handles:
    - Quota enforcement before any remote call is made
    - Mission evaluation and idempotent point awards
    - Sentence generation with a generic fallback on internal faults
    - Translation and speech, which never fail the session
    """

    def __init__(
        self,
        repository: StateRepository,
        vision: VisionLabeler,
        cascade: TranslationCascade | None = None,
        speaker: SpeechOutput | None = None,
        generator: SentenceGenerator | None = None,
        scheduler: MissionScheduler | None = None,
        quota_guard: QuotaGuard | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.repository = repository
        self.vision = vision
        self.cascade = cascade or TranslationCascade()
        self.speaker = speaker or LoggingSpeaker()
        self.generator = generator or SentenceGenerator()
        self.scheduler = scheduler or MissionScheduler()
        self.quota_guard = quota_guard or QuotaGuard()
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        store: Any = None,
        vision: VisionLabeler | None = None,
        speaker: SpeechOutput | None = None,
        rng: random.Random | None = None,
    ) -> SessionCoordinator:
        """
        Wire a coordinator from application settings.

        Args:
            settings: Settings instance
            store: KeyValueStore override (defaults to the configured backend)
            vision: Labeler override (defaults to Google Vision)
            speaker: Speech override
            rng: Shared random source for sentences and missions
        """
        rng = rng or random.Random()
        repository = StateRepository(
            store if store is not None else build_store(settings),
            default_language=settings.default_language,
        )
        return cls(
            repository=repository,
            vision=vision or GoogleVisionClient.from_settings(settings),
            cascade=TranslationCascade.from_settings(settings),
            speaker=speaker,
            generator=SentenceGenerator(rng),
            scheduler=MissionScheduler(
                rng=rng,
                missions_per_day=settings.missions_per_day,
                points_award=settings.mission_points,
            ),
            quota_guard=QuotaGuard(
                max_captures=settings.daily_photo_limit,
                cooldown=timedelta(hours=settings.cooldown_hours),
            ),
        )

    async def close(self) -> None:
        await self.cascade.close()
        close = getattr(self.vision, "close", None)
        if close is not None:
            await close()

    # =========================================================================
    # Session State
    # =========================================================================

    def load(self) -> SessionState:
        """Read all persisted state, regenerating today's missions if needed."""
        now = self.clock()
        missions, day = self._ensure_missions(now)
        quota = self.repository.load_quota()

        return SessionState(
            language=self.repository.load_language(),
            has_seen_welcome=self.repository.load_welcome_seen(),
            profile=self.repository.load_learning(),
            missions=missions,
            mission_day=day,
            quota=quota,
            progress=self.repository.load_progress(),
            photos_remaining=self.quota_guard.remaining(quota, now),
            time_until_reset=self.quota_guard.time_until_reset(quota, now),
        )

    def _ensure_missions(self, now: datetime) -> tuple[list[Mission], str]:
        stored, stored_day = self.repository.load_missions()
        missions, day = self.scheduler.ensure_todays_missions(stored, stored_day, now)
        if day != stored_day or not stored:
            self.repository.save_missions(missions, day)
        return missions, day

    # =========================================================================
    # Capture
    # =========================================================================

    async def handle_capture(
        self,
        image_bytes: bytes | None,
        mode: CaptureMode = CaptureMode.FREE,
        target_mission_id: str | None = None,
    ) -> CaptureResult:
        """
        Process one photo.

        Args:
            image_bytes: Encoded image from the camera
            mode: Free play or mission hunt
            target_mission_id: Mission the user is hunting for; implies mission mode

        Returns:
            CaptureResult describing the outcome
        """
        if target_mission_id is not None and mode != CaptureMode.MISSION:
            logger.info(f"Target mission '{target_mission_id}' given, switching to mission mode")
            mode = CaptureMode.MISSION

        now = self.clock()
        language = self.repository.load_language()
        progress = self.repository.load_progress()
        quota = self.repository.load_quota()

        if not self.quota_guard.can_capture(quota, now):
            wait = self.quota_guard.time_until_reset(quota, now)
            logger.info(f"Capture blocked by quota (retry in {wait})")
            return CaptureResult(
                status=CaptureStatus.QUOTA_EXCEEDED,
                message=t(
                    "photo_limit_message",
                    language,
                    limit=self.quota_guard.max_captures,
                    time=format_duration(wait or timedelta(0), language),
                ),
                points=progress.points,
                streak_days=progress.streak_days,
                photos_remaining=0,
                retry_after=wait,
                limit_reached=True,
            )

        base = {
            "points": progress.points,
            "streak_days": progress.streak_days,
            "photos_remaining": self.quota_guard.remaining(quota, now),
        }

        if not image_bytes:
            logger.warning("Capture called without image data")
            return CaptureResult(
                status=CaptureStatus.INVALID_INPUT, message=t("invalid_input", language), **base
            )

        label = await self._detect(image_bytes)
        if not label:
            return CaptureResult(status=CaptureStatus.NOT_FOUND, message=t("not_found", language), **base)

        quota = self.quota_guard.record_capture(quota, now)
        self.repository.save_quota(quota)
        base["photos_remaining"] = self.quota_guard.remaining(quota, now)
        limit_reached = not self.quota_guard.can_capture(quota, now)

        if mode == CaptureMode.MISSION:
            result = self._capture_mission(label, target_mission_id, now, language, progress, base)
        else:
            result = self._capture_free(label, now, language, base)

        result.limit_reached = limit_reached
        if limit_reached:
            result.retry_after = self.quota_guard.time_until_reset(quota, now)
        return result

    async def _detect(self, image_bytes: bytes) -> str | None:
        try:
            label = await self.vision.detect_label(image_bytes)
        except Exception as e:  # Labeler faults count as "nothing found"
            logger.warning(f"Vision labeler failed: {e}")
            return None
        return normalize_label(label) if label else None

    def _capture_mission(
        self,
        label: str,
        target_mission_id: str | None,
        now: datetime,
        language: str,
        progress: ProgressTotals,
        base: dict[str, Any],
    ) -> CaptureResult:
        missions, day = self._ensure_missions(now)

        target = None
        if target_mission_id is not None:
            target = self.scheduler.find(missions, target_mission_id)
            if target is None:
                logger.warning(f"Unknown mission id '{target_mission_id}', checking whole batch")

        found_name = object_display_name(label, language)
        if target is not None and target.object_key != label:
            return CaptureResult(
                status=CaptureStatus.WRONG_OBJECT,
                message=t(
                    "wrong_object",
                    language,
                    found=found_name,
                    target=object_display_name(target.object_key, language),
                ),
                label=label,
                mission=target,
                all_missions_completed=self.scheduler.is_fully_completed(missions),
                **base,
            )

        updated, awarded = self.scheduler.evaluate(missions, label, now)
        if awarded is None:
            return CaptureResult(
                status=CaptureStatus.WRONG_OBJECT,
                message=t("not_on_list", language, found=found_name),
                label=label,
                mission=target,
                all_missions_completed=self.scheduler.is_fully_completed(missions),
                **base,
            )

        # Progress before batch: a mission is never marked done without its points
        progress = apply_award(progress, awarded, day)
        self.repository.save_progress(progress)
        self.repository.save_missions(updated, day)

        all_done = self.scheduler.is_fully_completed(updated)
        message = t("mission_reward", language, points=awarded.points_award)
        if all_done:
            message = f"{message} {t('all_missions_completed', language)}"

        base.update(points=progress.points, streak_days=progress.streak_days)
        return CaptureResult(
            status=CaptureStatus.MISSION_COMPLETED,
            message=message,
            label=label,
            mission=awarded,
            all_missions_completed=all_done,
            **base,
        )

    def _capture_free(
        self,
        label: str,
        now: datetime,
        language: str,
        base: dict[str, Any],
    ) -> CaptureResult:
        profile = self.repository.load_learning()
        try:
            sentences = self.generator.generate(label, profile)
        except Exception as e:  # Any generation fault falls back to the generic set
            logger.error(f"Sentence generation failed for '{label}': {e}")
            sentences = self.generator.generic(label)

        entry = profile.update(label, sentences, now)
        self.repository.save_learning(profile)

        tier = entry.tier
        message = (
            f"{t('object_found', language, object=object_display_name(label, language))} "
            f"({t('level', language, tier=tier_name(tier.value, language))})"
        )
        return CaptureResult(
            status=CaptureStatus.SENTENCES,
            message=message,
            label=label,
            sentences=sentences,
            entry=entry,
            tier=tier,
            **base,
        )

    # =========================================================================
    # Translation, Speech, Preferences
    # =========================================================================

    async def translate_sentences(
        self,
        sentences: list[str],
        target_lang: str | None = None,
    ) -> list[str]:
        """Translate a batch through the cascade; never raises."""
        return await self.cascade.translate_all(sentences, target_lang=target_lang)

    def speak(self, text: str, language: str = "en") -> None:
        try:
            self.speaker.speak(text, language)
        except Exception as e:  # Speech problems must not interrupt the session
            logger.warning(f"Speech output failed: {e}")

    def reset_learning_data(self) -> int:
        """Forget every learned object. Returns how many were removed."""
        profile = self.repository.load_learning()
        removed = profile.clear()
        self.repository.clear_learning()
        logger.info(f"Learning data reset ({removed} objects)")
        return removed

    def set_language(self, language: str) -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language '{language}' (expected one of {SUPPORTED_LANGUAGES})")
        self.repository.save_language(language)

    def mark_welcome_seen(self) -> None:
        self.repository.save_welcome_seen(True)
