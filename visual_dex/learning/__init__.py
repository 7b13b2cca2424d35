"""Adaptive learning: exposure tracking and example sentence generation."""

from .profile import (
    Complexity,
    LearningEntry,
    LearningPatterns,
    LearningProfile,
    SentenceStructure,
    Tier,
    normalize_label,
    tier_for,
)
from .sentences import CURATED_SENTENCES, SentenceGenerator

__all__ = [
    # Profile
    "LearningProfile",
    "LearningEntry",
    "LearningPatterns",
    "Complexity",
    "SentenceStructure",
    "Tier",
    "normalize_label",
    "tier_for",
    # Sentences
    "SentenceGenerator",
    "CURATED_SENTENCES",
]
