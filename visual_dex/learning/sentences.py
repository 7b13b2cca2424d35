"""
Example sentence generation.

Three branches, tried in order:
1. Curated sets for a handful of everyday labels (returned verbatim)
2. Tiered templates once the label has been seen before
3. Generic templates for a first sighting

Template selection goes through an injectable random.Random so tests can
pin the choice.
"""

from __future__ import annotations

import random

from loguru import logger

from .profile import LearningProfile, Tier, normalize_label, tier_for

SENTENCES_PER_LABEL = 3

# =============================================================================
# Curated Sets
# =============================================================================

CURATED_SENTENCES: dict[str, tuple[str, str, str]] = {
    "person": (
        "This person is smiling at the camera.",
        "I can see a person in the picture.",
        "Every person has a different story.",
    ),
    "hand": (
        "This is my hand.",
        "I can wave my hand to say hello.",
        "My hand has five fingers.",
    ),
    "bottle": (
        "This is a bottle.",
        "I drink water from my bottle every day.",
        "The bottle can be filled again.",
    ),
    "cup": (
        "This is a cup.",
        "I have a cup of hot chocolate.",
        "The cup is on the table.",
    ),
    "phone": (
        "This is a phone.",
        "I can call my friends with my phone.",
        "The phone is useful for sending messages.",
    ),
    "book": (
        "This is a book.",
        "I read a book before going to sleep.",
        "The book is full of beautiful stories.",
    ),
}

# =============================================================================
# Templates
# =============================================================================
# Placeholders: {label} and {article} ("a" or "an")

GENERIC_TEMPLATES: tuple[tuple[str, str, str], ...] = (
    (
        "This is {article} {label}.",
        "I can see {article} {label}.",
        "The {label} is useful.",
    ),
    (
        "I have {article} {label}.",
        "My {label} is nice.",
        "Look at the {label}.",
    ),
    (
        "There is {article} {label} here.",
        "I like this {label}.",
        "The {label} is important.",
    ),
    (
        "This {label} is beautiful.",
        "I can use the {label}.",
        "Where is my {label}?",
    ),
)

TIER_TEMPLATES: dict[Tier, tuple[tuple[str, str, str], ...]] = {
    Tier.BEGINNER: (
        (
            "This is {article} {label}.",
            "I have {article} {label}.",
            "The {label} is here.",
        ),
        (
            "I can see {article} {label}.",
            "My {label} is nice.",
            "The {label} is useful.",
        ),
    ),
    Tier.INTERMEDIATE: (
        (
            "I use the {label} almost every day.",
            "My {label} is on the table next to me.",
            "Can you pass me the {label}, please?",
        ),
        (
            "The {label} that I have at home is useful.",
            "I can describe the color of this {label}.",
            "Yesterday I saw {article} {label} at school.",
        ),
    ),
    Tier.ADVANCED: (
        (
            "If I did not have {article} {label}, my routine would be different.",
            "I have learned to describe the {label} in many different ways.",
            "The {label} is one of the objects I recognize most easily now.",
        ),
        (
            "Whenever I look at the {label}, I remember the new words I learned.",
            "Could you explain why the {label} is important in your daily life?",
            "I can compare this {label} with the one I photographed before.",
        ),
    ),
}


def indefinite_article(label: str) -> str:
    """Pick "a" or "an" from the first letter of the label."""
    return "an" if label and label[0].lower() in "aeiou" else "a"


def _fill(templates: tuple[str, ...], label: str) -> list[str]:
    article = indefinite_article(label)
    return [t.format(label=label, article=article) for t in templates]


# =============================================================================
# Generator
# =============================================================================


class SentenceGenerator:
    """
    Produces three example sentences for a detected label.

    Generation has no side effects; recording the exposure is done by the
    caller through LearningProfile.update().
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate(self, label: str, profile: LearningProfile | None = None) -> list[str]:
        """
        Generate example sentences for a label.

        Args:
            label: Detected label (any case)
            profile: Learning profile consulted for prior exposure

        Returns:
            Ordered list of 3 sentences, naming the normalized (lower-case) label
        """
        key = normalize_label(label)

        curated = CURATED_SENTENCES.get(key)
        if curated is not None:
            logger.debug(f"Using curated sentences for '{key}'")
            return list(curated)

        frequency = profile.frequency_of(key) if profile is not None else None
        if frequency:
            tier = tier_for(frequency)
            variant = self.rng.choice(TIER_TEMPLATES[tier])
            logger.debug(f"Using {tier.value} templates for '{key}' (seen {frequency}x)")
            return _fill(variant, key)

        return self.generic(key)

    def generic(self, label: str) -> list[str]:
        """First-sighting templates (normalized label); also the fallback when generation fails."""
        key = normalize_label(label)
        return _fill(self.rng.choice(GENERIC_TEMPLATES), key)
