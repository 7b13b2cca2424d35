"""
Unit tests for localized messages.
"""

from datetime import timedelta

import pytest

from visual_dex.delivery.messages import MESSAGES, format_duration, t, tier_name


def test_every_key_has_both_languages():
    assert set(MESSAGES["en"]) == set(MESSAGES["es"])


def test_parameter_substitution():
    assert t("mission_reward", "en", points=50) == "Mission reward: +50 points"
    assert t("mission_reward", "es", points=50) == "Recompensa de misión: +50 puntos"


def test_unknown_language_falls_back_to_english():
    assert t("well_done", "fr") == "Well Done!"


def test_unknown_key_returns_key():
    assert t("no_such_message", "es") == "no_such_message"


def test_missing_parameter_leaves_template():
    assert "{points}" in t("mission_reward", "en")


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(hours=12), "12h 0m"),
        (timedelta(hours=7, minutes=30), "7h 30m"),
        (timedelta(minutes=4, seconds=1), "0h 5m"),
        (timedelta(seconds=-5), "0h 0m"),
    ],
)
def test_format_duration(delta, expected):
    assert format_duration(delta) == expected


def test_tier_names():
    assert tier_name("advanced", "es") == "Avanzado"
    assert tier_name("beginner", "en") == "Beginner"
    assert tier_name("mystery", "en") == "mystery"
