"""
Unit tests for points and streak accounting.
"""

import pytest

from visual_dex.missions import Mission, ProgressTotals, apply_award


def completed(mission_id: str, points: int = 50) -> Mission:
    return Mission(
        id=mission_id,
        environment_key="kitchen",
        object_key="cup",
        completed=True,
        points_award=points,
    )


class TestApplyAward:
    def test_first_award(self):
        totals = apply_award(ProgressTotals(), completed("mission_0"), "2024-03-15")

        assert totals.points == 50
        assert totals.streak_days == 1
        assert totals.last_active_day == "2024-03-15"

    def test_same_mission_paid_once(self):
        mission = completed("mission_0")
        totals = apply_award(ProgressTotals(), mission, "2024-03-15")

        again = apply_award(totals, mission, "2024-03-15")

        assert again == totals
        assert again.points == 50

    def test_two_missions_same_day_keep_streak(self):
        totals = apply_award(ProgressTotals(), completed("mission_0"), "2024-03-15")
        totals = apply_award(totals, completed("mission_1"), "2024-03-15")

        assert totals.points == 100
        assert totals.streak_days == 1

    def test_streak_increments_on_consecutive_days(self):
        totals = apply_award(ProgressTotals(), completed("mission_0"), "2024-03-15")
        totals = apply_award(totals, completed("mission_0"), "2024-03-16")
        totals = apply_award(totals, completed("mission_0"), "2024-03-17")

        assert totals.streak_days == 3
        assert totals.points == 150

    def test_streak_resets_after_gap(self):
        totals = ProgressTotals(points=200, streak_days=4, last_active_day="2024-03-10")

        totals = apply_award(totals, completed("mission_2"), "2024-03-15")

        assert totals.streak_days == 1
        assert totals.points == 250

    def test_month_boundary_counts_as_consecutive(self):
        totals = ProgressTotals(points=50, streak_days=1, last_active_day="2024-02-29")

        totals = apply_award(totals, completed("mission_0"), "2024-03-01")

        assert totals.streak_days == 2

    def test_incomplete_mission_pays_nothing(self):
        open_mission = Mission(id="mission_0", environment_key="kitchen", object_key="cup")

        assert apply_award(ProgressTotals(), open_mission, "2024-03-15") == ProgressTotals()

    def test_points_never_decrease(self):
        totals = ProgressTotals()
        history = []
        for day in ("2024-03-15", "2024-03-15", "2024-03-16", "2024-03-20"):
            totals = apply_award(totals, completed("mission_0"), day)
            history.append(totals.points)

        assert history == sorted(history)
        assert history[-1] == 150


class TestSerialization:
    def test_round_trip(self):
        totals = apply_award(ProgressTotals(), completed("mission_0"), "2024-03-15")

        assert ProgressTotals.from_dict(totals.to_dict()) == totals

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError):
            ProgressTotals.from_dict({"points": -5})
