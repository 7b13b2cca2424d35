"""
Learning Profile: per-object exposure tracking.

Tracks how often each object label has been detected and keeps a coarse
summary of the sentences shown for it. The frequency drives the sentence
complexity tier:

    frequency 1-5    -> beginner
    frequency 6-10   -> intermediate
    frequency 11+    -> advanced

The profile is an in-memory copy; loading and saving it is the caller's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from loguru import logger

from visual_dex.missions.days import parse_local_timestamp

# =============================================================================
# Enums & Thresholds
# =============================================================================


class Tier(str, Enum):
    """Sentence complexity tier chosen from exposure frequency."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Complexity(str, Enum):
    """Observed complexity of the sentences last shown for an object."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SentenceStructure(str, Enum):
    DESCRIPTIVE = "descriptive"
    PERSONAL = "personal"
    ABILITY = "ability"


BEGINNER_MAX_FREQUENCY = 5
INTERMEDIATE_MAX_FREQUENCY = 10

ADVANCED_MEAN_LENGTH = 40
INTERMEDIATE_MEAN_LENGTH = 25
MIN_COMMON_WORD_LENGTH = 4

_WORD_RE = re.compile(r"[\w']+")
_STRUCTURE_MARKERS: tuple[tuple[SentenceStructure, re.Pattern[str]], ...] = (
    (SentenceStructure.DESCRIPTIVE, re.compile(r"\bis\b", re.IGNORECASE)),
    (SentenceStructure.PERSONAL, re.compile(r"\bI\b")),
    (SentenceStructure.ABILITY, re.compile(r"\bcan\b", re.IGNORECASE)),
)


def normalize_label(label: str) -> str:
    """Canonical object key: trimmed and lower-cased."""
    return label.strip().lower()


def tier_for(frequency: int) -> Tier:
    """Map an exposure count to a sentence tier."""
    if frequency <= BEGINNER_MAX_FREQUENCY:
        return Tier.BEGINNER
    if frequency <= INTERMEDIATE_MAX_FREQUENCY:
        return Tier.INTERMEDIATE
    return Tier.ADVANCED


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class LearningPatterns:
    """Summary derived from the sentences last generated for an object."""

    common_words: list[str] = field(default_factory=list)
    sentence_structures: set[SentenceStructure] = field(default_factory=set)
    complexity: Complexity = Complexity.BASIC

    @classmethod
    def from_sentences(cls, sentences: list[str]) -> LearningPatterns:
        """Recompute the pattern summary for a set of sentences."""
        common_words = [
            word
            for sentence in sentences
            for word in _WORD_RE.findall(sentence)
            if len(word) >= MIN_COMMON_WORD_LENGTH
        ]

        structures = {
            structure
            for structure, marker in _STRUCTURE_MARKERS
            if any(marker.search(sentence) for sentence in sentences)
        }

        mean_length = sum(len(s) for s in sentences) / len(sentences) if sentences else 0.0
        if mean_length > ADVANCED_MEAN_LENGTH:
            complexity = Complexity.ADVANCED
        elif mean_length > INTERMEDIATE_MEAN_LENGTH:
            complexity = Complexity.INTERMEDIATE
        else:
            complexity = Complexity.BASIC

        return cls(
            common_words=common_words,
            sentence_structures=structures,
            complexity=complexity,
        )

    def to_dict(self) -> dict[str, Any]:
        # Enum order keeps the serialized set stable
        return {
            "commonWords": list(self.common_words),
            "sentenceStructures": [
                s.value for s in SentenceStructure if s in self.sentence_structures
            ],
            "complexity": self.complexity.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LearningPatterns:
        if not isinstance(data, dict):
            raise ValueError(f"patterns must be an object, got {type(data).__name__}")
        return cls(
            common_words=list(data.get("commonWords", [])),
            sentence_structures={
                SentenceStructure(s) for s in data.get("sentenceStructures", [])
            },
            complexity=Complexity(data.get("complexity", Complexity.BASIC.value)),
        )


@dataclass
class LearningEntry:
    """Exposure record for one object label."""

    frequency: int
    last_seen: datetime
    patterns: LearningPatterns = field(default_factory=LearningPatterns)

    @property
    def tier(self) -> Tier:
        return tier_for(self.frequency)

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency": self.frequency,
            "lastSeen": self.last_seen.isoformat(),
            "patterns": self.patterns.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LearningEntry:
        frequency = int(data["frequency"])
        if frequency < 1:
            raise ValueError(f"frequency must be >= 1, got {frequency}")
        return cls(
            frequency=frequency,
            last_seen=parse_local_timestamp(data["lastSeen"]),
            patterns=LearningPatterns.from_dict(data.get("patterns") or {}),
        )


# =============================================================================
# Learning Profile
# =============================================================================


class LearningProfile:
    """
    Mapping of normalized object key -> LearningEntry.

    Handles:
    - Creating an entry on the first detection of a label
    - Incrementing frequency on every later detection
    - Recomputing the pattern summary from the generated sentences
    """

    def __init__(self, entries: dict[str, LearningEntry] | None = None):
        self._entries: dict[str, LearningEntry] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and normalize_label(label) in self._entries

    @property
    def entries(self) -> dict[str, LearningEntry]:
        """Read-only view of the entries (a shallow copy)."""
        return dict(self._entries)

    def get(self, label: str) -> LearningEntry | None:
        return self._entries.get(normalize_label(label))

    def frequency_of(self, label: str) -> int | None:
        """Prior exposure count for a label, or None if never seen."""
        entry = self.get(label)
        return entry.frequency if entry else None

    def update(
        self,
        object_key: str,
        generated_sentences: list[str],
        now: datetime | None = None,
    ) -> LearningEntry:
        """
        Record a successful detection of an object.

        Args:
            object_key: Detected label (any case)
            generated_sentences: Sentences shown to the learner for it
            now: Detection time (defaults to datetime.now())

        Returns:
            The created or updated LearningEntry
        """
        key = normalize_label(object_key)
        if not key:
            raise ValueError("object_key must not be empty")

        now = now or datetime.now()
        patterns = LearningPatterns.from_sentences(generated_sentences)

        existing = self._entries.get(key)
        if existing is None:
            entry = LearningEntry(frequency=1, last_seen=now, patterns=patterns)
        else:
            entry = LearningEntry(
                frequency=existing.frequency + 1,
                last_seen=now,
                patterns=patterns,
            )

        self._entries[key] = entry
        logger.debug(
            f"Learning update for '{key}': frequency={entry.frequency}, "
            f"tier={entry.tier.value}, complexity={patterns.complexity.value}"
        )
        return entry

    def clear(self) -> int:
        """Forget every learned object. Returns how many were removed."""
        removed = len(self._entries)
        self._entries.clear()
        return removed

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {key: entry.to_dict() for key, entry in self._entries.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LearningProfile:
        """Build a profile from its JSON shape. Malformed entries are skipped."""
        entries: dict[str, LearningEntry] = {}
        for key, raw in data.items():
            try:
                entries[normalize_label(key)] = LearningEntry.from_dict(raw)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed learning entry '{key}': {e}")
        return cls(entries)
