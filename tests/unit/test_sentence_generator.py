"""
Unit tests for example sentence generation.
"""

import random
from datetime import datetime

import pytest

from visual_dex.learning import CURATED_SENTENCES, LearningProfile, SentenceGenerator
from visual_dex.learning.sentences import GENERIC_TEMPLATES, TIER_TEMPLATES, indefinite_article
from visual_dex.learning.profile import Tier

NOW = datetime(2024, 3, 15, 10, 30)


def profile_with(label: str, frequency: int) -> LearningProfile:
    profile = LearningProfile()
    for _ in range(frequency):
        profile.update(label, ["placeholder"], NOW)
    return profile


class TestCurated:
    @pytest.mark.parametrize("label", sorted(CURATED_SENTENCES))
    def test_curated_labels_returned_verbatim(self, label, rng):
        sentences = SentenceGenerator(rng).generate(label)

        assert sentences == list(CURATED_SENTENCES[label])
        assert all(label in s.lower() for s in sentences)

    def test_bottle_first_sentence(self, rng):
        assert SentenceGenerator(rng).generate("bottle")[0] == "This is a bottle."

    def test_curated_wins_over_profile(self, rng):
        profile = profile_with("cup", 12)

        assert SentenceGenerator(rng).generate("cup", profile) == list(CURATED_SENTENCES["cup"])

    def test_curated_match_is_case_insensitive(self, rng):
        assert SentenceGenerator(rng).generate(" Book ") == list(CURATED_SENTENCES["book"])


class TestTiered:
    @pytest.mark.parametrize(
        "frequency,tier",
        [(1, Tier.BEGINNER), (7, Tier.INTERMEDIATE), (11, Tier.ADVANCED)],
    )
    def test_uses_tier_templates(self, frequency, tier):
        profile = profile_with("lamp", frequency)

        sentences = SentenceGenerator(random.Random(0)).generate("lamp", profile)

        expected_sets = [
            [template.format(label="lamp", article="a") for template in variant]
            for variant in TIER_TEMPLATES[tier]
        ]
        assert sentences in expected_sets

    def test_seeded_choice_is_reproducible(self):
        profile = profile_with("sofa", 8)

        first = SentenceGenerator(random.Random(7)).generate("sofa", profile)
        second = SentenceGenerator(random.Random(7)).generate("sofa", profile)

        assert first == second

    def test_generation_has_no_side_effects(self, rng):
        profile = profile_with("lamp", 3)

        SentenceGenerator(rng).generate("lamp", profile)

        assert profile.frequency_of("lamp") == 3


class TestGeneric:
    def test_unseen_label_uses_generic_templates(self, rng):
        sentences = SentenceGenerator(rng).generate("spoon", LearningProfile())

        expected_sets = [
            [template.format(label="spoon", article="a") for template in variant]
            for variant in GENERIC_TEMPLATES
        ]
        assert sentences in expected_sets

    def test_always_three_sentences_containing_label(self, rng):
        generator = SentenceGenerator(rng)
        for label in ("spoon", "umbrella", "clock", "television"):
            sentences = generator.generate(label)
            assert len(sentences) == 3
            assert all(label in s for s in sentences)

    def test_label_appears_normalized(self, rng):
        sentences = SentenceGenerator(rng).generate("  Teapot ")

        assert all("teapot" in s and "Teapot" not in s for s in sentences)

    def test_article_for_vowel_labels(self):
        generator = SentenceGenerator(random.Random(0))
        text = " ".join(s for _ in range(10) for s in generator.generic("apple"))

        assert "a apple" not in text


@pytest.mark.parametrize(
    "label,article",
    [("apple", "an"), ("eraser", "an"), ("umbrella", "an"), ("cup", "a"), ("", "a")],
)
def test_indefinite_article(label, article):
    assert indefinite_article(label) == article
