"""Request models for the planner API."""

from typing import Literal

from pydantic import BaseModel, Field

from dining_planner.domain.profile import Profile


class GoalsPlanRequest(BaseModel):
    """Plan request with explicit daily targets."""

    location: Literal["livingston", "atrium", "any"] = "any"
    calories: float = Field(gt=0, allow_inf_nan=False)
    protein: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    fat: float = Field(ge=0, allow_inf_nan=False)


class ProfilePlanRequest(BaseModel):
    """Plan request derived from a biometric profile."""

    profile: Profile
    campuses: list[str] | None = None
