"""Domain models for user profiles and derived targets."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from dining_planner.domain.planning import Goals


class Sex(str, Enum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class ActivityTier(int, Enum):
    """Activity tiers indexing the multiplier tables."""

    SEDENTARY = 0
    LIGHT = 1
    MODERATE = 2
    HEAVY = 3


class DietGoal(str, Enum):
    """Dietary goal stated by the user."""

    LOSE_WEIGHT = "Lose Weight"
    GAIN_MUSCLE = "Gain Muscle"
    BODY_RECOMPOSITION = "Body Recomposition"
    MAINTAIN_WEIGHT = "Maintain Weight"


class Profile(BaseModel):
    """Biometric profile submitted by a caller."""

    sex: Sex
    age: float = Field(gt=0, allow_inf_nan=False)
    height_in: float = Field(gt=0, allow_inf_nan=False)
    weight_lb: float = Field(gt=0, allow_inf_nan=False)
    activity_level: str
    goal: str | None = None


@dataclass(frozen=True)
class GoalBreakdown:
    """Intermediate values behind a set of goals."""

    height_cm: float
    weight_kg: float
    lbm_kg: float
    bmr: float
    tdee: float
    goals: Goals
