"""Translate a biometric profile into daily calorie and macro goals."""

import math

from dining_planner.domain.planning import Goals
from dining_planner.domain.profile import (
    ActivityTier,
    DietGoal,
    GoalBreakdown,
    Profile,
    Sex,
)

CM_PER_INCH = 2.54
KG_PER_POUND = 0.453592

_BMR_SEX_CONSTANT = {Sex.MALE: 5.0, Sex.FEMALE: -161.0}
_LBM_FACTOR = {Sex.MALE: 0.8, Sex.FEMALE: 0.75}

_ACTIVITY_PREFIXES = (
    ("sedentary", ActivityTier.SEDENTARY),
    ("light", ActivityTier.LIGHT),
    ("moderate", ActivityTier.MODERATE),
)

# Tables are indexed by ActivityTier: sedentary, light, moderate, heavy.
TDEE_MULTIPLIERS = (1.2, 1.375, 1.55, 1.725)

CALORIE_GOAL_MULTIPLIERS: dict[DietGoal, tuple[float, ...]] = {
    DietGoal.LOSE_WEIGHT: (0.77, 0.825, 0.85, 0.875),
    DietGoal.GAIN_MUSCLE: (1.0, 1.075, 1.125, 1.15),
    DietGoal.BODY_RECOMPOSITION: (0.95, 0.95, 0.975, 1.0),
    DietGoal.MAINTAIN_WEIGHT: (1.0, 1.0, 1.0, 1.0),
}

MacroTable = dict[Sex, dict[DietGoal, tuple[float, ...]]]

# Grams per kg of lean body mass proxy.
PROTEIN_MULTIPLIERS: MacroTable = {
    Sex.MALE: {
        DietGoal.LOSE_WEIGHT: (0.8, 0.85, 0.9, 0.975),
        DietGoal.GAIN_MUSCLE: (0.6, 0.75, 0.85, 0.95),
        DietGoal.BODY_RECOMPOSITION: (0.9, 0.95, 1.0, 1.075),
        DietGoal.MAINTAIN_WEIGHT: (0.6, 0.65, 0.7, 0.77),
    },
    Sex.FEMALE: {
        DietGoal.LOSE_WEIGHT: (0.7, 0.75, 0.8, 0.875),
        DietGoal.GAIN_MUSCLE: (0.5, 0.7, 0.8, 0.9),
        DietGoal.BODY_RECOMPOSITION: (0.8, 0.85, 0.9, 0.975),
        DietGoal.MAINTAIN_WEIGHT: (0.5, 0.575, 0.6, 0.675),
    },
}

CARBS_MULTIPLIERS: MacroTable = {
    Sex.MALE: {
        DietGoal.LOSE_WEIGHT: (0.6, 0.85, 1.15, 1.45),
        DietGoal.GAIN_MUSCLE: (1.1, 1.75, 2.25, 2.75),
        DietGoal.BODY_RECOMPOSITION: (0.8, 1.1, 1.35, 1.65),
        DietGoal.MAINTAIN_WEIGHT: (1.1, 1.3, 1.55, 1.75),
    },
    Sex.FEMALE: {
        DietGoal.LOSE_WEIGHT: (0.5, 0.7, 0.95, 1.25),
        DietGoal.GAIN_MUSCLE: (1.0, 1.4, 1.85, 2.35),
        DietGoal.BODY_RECOMPOSITION: (0.7, 0.9, 1.15, 1.45),
        DietGoal.MAINTAIN_WEIGHT: (1.0, 1.1, 1.35, 1.55),
    },
}

FAT_MULTIPLIERS: MacroTable = {
    Sex.MALE: {
        DietGoal.LOSE_WEIGHT: (0.6, 0.85, 1.15, 1.45),
        DietGoal.GAIN_MUSCLE: (1.1, 1.75, 2.25, 2.75),
        DietGoal.BODY_RECOMPOSITION: (0.8, 1.1, 1.35, 1.65),
        DietGoal.MAINTAIN_WEIGHT: (0.425, 0.4, 0.375, 0.35),
    },
    Sex.FEMALE: {
        DietGoal.LOSE_WEIGHT: (0.5, 0.7, 0.95, 1.25),
        DietGoal.GAIN_MUSCLE: (1.0, 1.4, 1.85, 2.35),
        DietGoal.BODY_RECOMPOSITION: (0.7, 0.9, 1.15, 1.45),
        DietGoal.MAINTAIN_WEIGHT: (0.425, 0.4, 0.375, 0.35),
    },
}


def activity_tier(level: str) -> ActivityTier:
    """Map an activity label to its tier by its leading word."""
    cleaned = level.strip().lower()
    for prefix, tier in _ACTIVITY_PREFIXES:
        if cleaned.startswith(prefix):
            return tier
    return ActivityTier.HEAVY


def diet_goal(raw: str | None) -> DietGoal:
    """Match a goal label, defaulting to maintenance."""
    cleaned = (raw or "").strip().lower()
    for goal in DietGoal:
        if goal.value.lower() == cleaned:
            return goal
    return DietGoal.MAINTAIN_WEIGHT


def compute_goal_breakdown(profile: Profile) -> GoalBreakdown:
    """Compute goals along with the intermediate BMR/TDEE values."""
    tier = activity_tier(profile.activity_level)
    goal = diet_goal(profile.goal)
    sex = profile.sex

    height_cm = profile.height_in * CM_PER_INCH
    weight_kg = profile.weight_lb * KG_PER_POUND
    bmr = (
        10 * weight_kg
        + 6.25 * height_cm
        - 5 * profile.age
        + _BMR_SEX_CONSTANT[sex]
    )
    tdee = bmr * TDEE_MULTIPLIERS[tier]
    calorie_goal = tdee * CALORIE_GOAL_MULTIPLIERS[goal][tier]
    lbm_kg = weight_kg * _LBM_FACTOR[sex]

    goals = Goals(
        calories=_round_half_up(calorie_goal),
        protein=_round_half_up(lbm_kg * PROTEIN_MULTIPLIERS[sex][goal][tier]),
        carbs=_round_half_up(lbm_kg * CARBS_MULTIPLIERS[sex][goal][tier]),
        fat=_round_half_up(lbm_kg * FAT_MULTIPLIERS[sex][goal][tier]),
    )
    return GoalBreakdown(
        height_cm=height_cm,
        weight_kg=weight_kg,
        lbm_kg=lbm_kg,
        bmr=bmr,
        tdee=tdee,
        goals=goals,
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_goals(profile: Profile) -> Goals:
    """Return rounded daily goals for a profile."""
    return compute_goal_breakdown(profile).goals
