"""Tests for profile to goal translation."""

import pytest
from pydantic import ValidationError

from dining_planner.domain.planning import Goals
from dining_planner.domain.profile import ActivityTier, DietGoal, Profile
from dining_planner.services.goals import (
    _round_half_up,
    activity_tier,
    compute_goal_breakdown,
    compute_goals,
    diet_goal,
)


def test_compute_goals_male_moderate_maintain() -> None:
    profile = Profile(
        sex="male",
        age=20,
        height_in=70,
        weight_lb=180,
        activity_level="Moderate (exercise 3-5 days/week)",
        goal="Maintain Weight",
    )

    breakdown = compute_goal_breakdown(profile)

    assert breakdown.height_cm == pytest.approx(177.8)
    assert breakdown.weight_kg == pytest.approx(81.64656)
    assert breakdown.bmr == pytest.approx(1832.7156)
    assert breakdown.tdee == pytest.approx(2840.70918)
    assert breakdown.goals == Goals(calories=2841, protein=46, carbs=101, fat=24)


def test_compute_goals_female_sedentary_lose() -> None:
    profile = Profile(
        sex="female",
        age=20,
        height_in=65,
        weight_lb=140,
        activity_level="sedentary",
        goal="lose weight",
    )

    assert compute_goals(profile) == Goals(calories=1299, protein=33, carbs=24, fat=24)


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("Sedentary (little or no exercise)", ActivityTier.SEDENTARY),
        ("  light activity", ActivityTier.LIGHT),
        ("MODERATE", ActivityTier.MODERATE),
        ("Heavy (daily training)", ActivityTier.HEAVY),
        ("athlete", ActivityTier.HEAVY),
        ("", ActivityTier.HEAVY),
    ],
)
def test_activity_tier(level: str, expected: ActivityTier) -> None:
    assert activity_tier(level) is expected


def test_diet_goal_defaults_to_maintenance() -> None:
    assert diet_goal("Gain Muscle") is DietGoal.GAIN_MUSCLE
    assert diet_goal(" body recomposition ") is DietGoal.BODY_RECOMPOSITION
    assert diet_goal("bulk") is DietGoal.MAINTAIN_WEIGHT
    assert diet_goal(None) is DietGoal.MAINTAIN_WEIGHT


def test_round_half_up() -> None:
    assert _round_half_up(0.5) == 1
    assert _round_half_up(2.5) == 3
    assert _round_half_up(2.49) == 2
    assert _round_half_up(-0.5) == 0


def test_profile_rejects_non_positive_measurements() -> None:
    with pytest.raises(ValidationError):
        Profile(
            sex="male",
            age=20,
            height_in=0,
            weight_lb=180,
            activity_level="light",
        )


def test_profile_rejects_non_finite_measurements() -> None:
    with pytest.raises(ValidationError):
        Profile(
            sex="female",
            age=20,
            height_in=65,
            weight_lb=float("inf"),
            activity_level="light",
        )
