"""Domain models for scraped dining hall menu items."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class CampusInfo:
    """Menu portal location for a dining hall."""

    location_num: str
    location_name: str


class Campus(str, Enum):
    """Dining halls the planner knows about."""

    LIVINGSTON = "livingston"
    ATRIUM = "atrium"

    @property
    def info(self) -> CampusInfo:
        """Return the portal location for this campus."""
        return _CAMPUS_INFO[self]


_CAMPUS_INFO = {
    Campus.LIVINGSTON: CampusInfo("03", "Livingston Dining Commons"),
    Campus.ATRIUM: CampusInfo("13", "The Atrium"),
}


class Meal(str, Enum):
    """Meal slots served by the dining halls."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class NutritionInfo(BaseModel):
    """Nutrition facts parsed from a label page."""

    model_config = ConfigDict(populate_by_name=True)

    serving_size: str | None = Field(default=None, alias="servingSize")
    calories: float | None = None
    total_fat_g: float | None = Field(default=None, alias="totalFat_g")
    sat_fat_g: float | None = Field(default=None, alias="satFat_g")
    cholesterol_mg: float | None = None
    sodium_mg: float | None = None
    total_carb_g: float | None = Field(default=None, alias="totalCarb_g")
    dietary_fiber_g: float | None = Field(default=None, alias="dietaryFiber_g")
    protein_g: float | None = None
    ingredients: str | None = None


class FoodItem(BaseModel):
    """A menu entry as scraped from the portal."""

    model_config = ConfigDict(populate_by_name=True)

    campus: Campus
    meal: Meal
    section: str | None = None
    name: str = Field(alias="foodname")
    link: str
    date: str
    portion_size: str | None = Field(default=None, alias="portionSize")
    nutrition: NutritionInfo | None = None

    @property
    def dedupe_key(self) -> tuple[str, str, str, str, str]:
        """Identity of the item within a catalog."""
        return (self.campus.value, self.date, self.meal.value, self.name, self.link)

    def to_record(self) -> dict[str, object]:
        """Serialize to the catalog JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def dedupe(items: list[FoodItem]) -> list[FoodItem]:
    """Drop repeated items, keeping the first occurrence."""
    seen: set[tuple[str, str, str, str, str]] = set()
    unique: list[FoodItem] = []
    for item in items:
        key = item.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique
