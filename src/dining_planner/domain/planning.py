"""Domain models for meal plan generation."""

from dataclasses import dataclass, field
from typing import Literal

from dining_planner.domain.catalog import Campus

ANY_LOCATION = "any"

Location = Campus | Literal["any"]


@dataclass(frozen=True)
class Nutrition:
    """Macro quadruple used by the optimizer."""

    calories: float
    protein_g: float
    carbs: float
    fat: float

    def __add__(self, other: "Nutrition") -> "Nutrition":
        return Nutrition(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )

    def scaled(
        self, calories: float, protein: float, carbs: float, fat: float
    ) -> "Nutrition":
        """Return a copy with each field multiplied by its own factor."""
        return Nutrition(
            calories=self.calories * calories,
            protein_g=self.protein_g * protein,
            carbs=self.carbs * carbs,
            fat=self.fat * fat,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs": self.carbs,
            "fat": self.fat,
        }


ZERO_NUTRITION = Nutrition(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class PlanItem:
    """A validated catalog item with complete macros."""

    name: str
    nutrition: Nutrition

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "nutrition": self.nutrition.to_dict()}


@dataclass(frozen=True)
class Goals:
    """Full-day nutrient targets."""

    calories: float
    protein: float
    carbs: float
    fat: float

    def as_nutrition(self) -> Nutrition:
        return Nutrition(
            calories=self.calories,
            protein_g=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


@dataclass(frozen=True)
class Combo:
    """Candidate item selection for one meal slot at one campus."""

    items: tuple[PlanItem, ...]
    totals: Nutrition
    score: float
    campus: Campus

    def has_name(self, name: str) -> bool:
        return any(item.name == name for item in self.items)


@dataclass(frozen=True)
class GeneratedPlan:
    """Breakfast, lunch and dinner selections for one day."""

    breakfast: list[PlanItem] = field(default_factory=list)
    lunch: list[PlanItem] = field(default_factory=list)
    dinner: list[PlanItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the plan could not be fulfilled."""
        return not (self.breakfast and self.lunch and self.dinner)

    @property
    def totals(self) -> Nutrition:
        total = ZERO_NUTRITION
        for item in [*self.breakfast, *self.lunch, *self.dinner]:
            total = total + item.nutrition
        return total

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        return {
            "breakfast": [item.to_dict() for item in self.breakfast],
            "lunch": [item.to_dict() for item in self.lunch],
            "dinner": [item.to_dict() for item in self.dinner],
        }


@dataclass(frozen=True)
class PlanSelection:
    """Winning combos of the cross-slot search with their combined score."""

    breakfast: Combo
    lunch: Combo
    dinner: Combo
    score: float

    def to_plan(self) -> GeneratedPlan:
        return GeneratedPlan(
            breakfast=list(self.breakfast.items),
            lunch=list(self.lunch.items),
            dinner=list(self.dinner.items),
        )
