"""Full-day plan assembly across breakfast, lunch and dinner."""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from dining_planner.domain.catalog import Campus, FoodItem, Meal
from dining_planner.domain.planning import (
    ANY_LOCATION,
    Combo,
    GeneratedPlan,
    Goals,
    Location,
    Nutrition,
    PlanSelection,
)
from dining_planner.domain.profile import Profile
from dining_planner.services.combos import (
    CALORIE_WEIGHT,
    CARBS_WEIGHT,
    DEFAULT_BEAM_WIDTH,
    DEFAULT_MAX_ITEMS,
    FAT_WEIGHT,
    PROTEIN_WEIGHT,
    build_meal_combos,
    macro_distance,
)
from dining_planner.services.goals import compute_goals
from dining_planner.services.normalizer import normalize_catalog

_logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 120
CAMPUS_SWITCH_PENALTY = 20.0

# Share of each daily goal assigned to a slot: (calories, protein, carbs, fat).
MEAL_SPLITS: dict[Meal, tuple[float, float, float, float]] = {
    Meal.BREAKFAST: (0.28, 0.25, 0.30, 0.28),
    Meal.LUNCH: (0.38, 0.40, 0.35, 0.36),
    Meal.DINNER: (0.34, 0.35, 0.35, 0.36),
}

# Preferred fraction of daily calories per slot.
CALORIE_BANDS: dict[Meal, tuple[float, float]] = {
    Meal.BREAKFAST: (0.20, 0.35),
    Meal.LUNCH: (0.30, 0.45),
    Meal.DINNER: (0.25, 0.45),
}
BAND_PENALTY_RATE = 800.0

MIN_MEAL_CALORIES: dict[Meal, float] = {
    Meal.BREAKFAST: 250.0,
    Meal.LUNCH: 400.0,
    Meal.DINNER: 400.0,
}
MIN_CALORIE_PENALTY_RATE = 2.0

TOTAL_DRIFT_RATE = 0.15
NO_CALORIES_PENALTY = 1e9


class CatalogSource(Protocol):
    """Read access to the current catalog snapshot."""

    def load(self) -> list[dict[str, object]]:
        """Return all catalog records."""


def parse_location(value: str | Campus) -> Location:
    """Parse an explicit location value; raises ValueError when unknown."""
    if isinstance(value, Campus):
        return value
    cleaned = value.strip().lower()
    if cleaned == ANY_LOCATION:
        return ANY_LOCATION
    return Campus(cleaned)


def resolve_location(campus_selection: Iterable[str | None]) -> Location:
    """Collapse a campus multi-select into a single location constraint.

    Exactly one known campus pins the plan to it; empty, both or unknown
    selections mean any campus.
    """
    selected = {
        (value or "").strip().lower() for value in campus_selection or []
    } - {""}
    matches = [campus for campus in Campus if campus.value in selected]
    if len(matches) == 1:
        return matches[0]
    return ANY_LOCATION


def allowed_campuses(location: Location) -> list[Campus]:
    if location == ANY_LOCATION:
        return list(Campus)
    return [Campus(location)]


def meal_goal(goals: Goals, meal: Meal) -> Nutrition:
    """Per-slot sub-goal derived from the daily goals."""
    return goals.as_nutrition().scaled(*MEAL_SPLITS[meal])


_BREAKFAST_LOW, _BREAKFAST_HIGH = CALORIE_BANDS[Meal.BREAKFAST]
_LUNCH_LOW, _LUNCH_HIGH = CALORIE_BANDS[Meal.LUNCH]
_DINNER_LOW, _DINNER_HIGH = CALORIE_BANDS[Meal.DINNER]


def _outside(value: float, low: float, high: float) -> float:
    if value < low:
        return low - value
    if value > high:
        return value - high
    return 0.0


def imbalance_penalty(
    breakfast: float, lunch: float, dinner: float, calorie_goal: float
) -> float:
    """Penalize lopsided calorie distribution across the three slots.

    Avoids plans like 100/100/1800 kcal that hit the daily totals anyway.
    """
    total = breakfast + lunch + dinner
    if total <= 0:
        return NO_CALORIES_PENALTY

    penalty = BAND_PENALTY_RATE * (
        _outside(breakfast / total, _BREAKFAST_LOW, _BREAKFAST_HIGH)
        + _outside(lunch / total, _LUNCH_LOW, _LUNCH_HIGH)
        + _outside(dinner / total, _DINNER_LOW, _DINNER_HIGH)
    )
    for calories, floor in (
        (breakfast, MIN_MEAL_CALORIES[Meal.BREAKFAST]),
        (lunch, MIN_MEAL_CALORIES[Meal.LUNCH]),
        (dinner, MIN_MEAL_CALORIES[Meal.DINNER]),
    ):
        if calories < floor:
            penalty += (floor - calories) * MIN_CALORIE_PENALTY_RATE
    return penalty + abs(total - calorie_goal) * TOTAL_DRIFT_RATE


def campus_switch_penalty(
    breakfast: Combo, lunch: Combo, dinner: Combo, location: Location
) -> float:
    """Soft preference for eating at one campus all day."""
    if location != ANY_LOCATION:
        return 0.0
    penalty = 0.0
    if breakfast.campus != lunch.campus:
        penalty += CAMPUS_SWITCH_PENALTY
    if lunch.campus != dinner.campus:
        penalty += CAMPUS_SWITCH_PENALTY
    return penalty


def build_candidates(
    records: Iterable[FoodItem | Mapping[str, object]],
    location: Location,
    goals: Goals,
    max_items: int = DEFAULT_MAX_ITEMS,
    beam_width: int = DEFAULT_BEAM_WIDTH,
) -> dict[Meal, list[Combo]]:
    """Build combos per slot for every allowed campus, best first."""
    index = normalize_catalog(records)
    candidates: dict[Meal, list[Combo]] = {meal: [] for meal in Meal}
    for campus in allowed_campuses(location):
        for meal in Meal:
            pool = index.get((campus, meal), [])
            if not pool:
                continue
            candidates[meal].extend(
                build_meal_combos(
                    pool,
                    meal_goal(goals, meal),
                    campus,
                    max_items=max_items,
                    beam_width=beam_width,
                )
            )
    for combos in candidates.values():
        combos.sort(key=lambda combo: combo.score)
    return candidates


def select_plan(
    candidates: Mapping[Meal, list[Combo]],
    goals: Goals,
    location: Location,
    top_k: int = DEFAULT_TOP_K,
) -> PlanSelection | None:
    """Scan every breakfast/lunch/dinner triple of the top-K candidates.

    Candidates must already be sorted best first. Returns None when a slot
    has no candidates. Each triple scores macro distance to the daily goals
    plus the imbalance and campus-switch penalties; the first triple with
    the lowest score wins.
    """
    breakfasts = list(candidates.get(Meal.BREAKFAST, []))[:top_k]
    lunches = list(candidates.get(Meal.LUNCH, []))[:top_k]
    dinners = list(candidates.get(Meal.DINNER, []))[:top_k]
    if not breakfasts or not lunches or not dinners:
        return None

    # O(K^3): keep the inner loop on plain floats.
    dinner_rows = [
        (
            dinner,
            dinner.totals.calories,
            dinner.totals.protein_g,
            dinner.totals.carbs,
            dinner.totals.fat,
        )
        for dinner in dinners
    ]
    best: PlanSelection | None = None
    best_score = math.inf
    for breakfast in breakfasts:
        b_totals = breakfast.totals
        for lunch in lunches:
            l_totals = lunch.totals
            calories = b_totals.calories + l_totals.calories
            protein = b_totals.protein_g + l_totals.protein_g
            carbs = b_totals.carbs + l_totals.carbs
            fat = b_totals.fat + l_totals.fat
            for dinner, d_cal, d_protein, d_carbs, d_fat in dinner_rows:
                score = (
                    CALORIE_WEIGHT * abs(calories + d_cal - goals.calories)
                    + PROTEIN_WEIGHT * abs(protein + d_protein - goals.protein)
                    + CARBS_WEIGHT * abs(carbs + d_carbs - goals.carbs)
                    + FAT_WEIGHT * abs(fat + d_fat - goals.fat)
                    + imbalance_penalty(
                        b_totals.calories, l_totals.calories, d_cal, goals.calories
                    )
                    + campus_switch_penalty(breakfast, lunch, dinner, location)
                )
                if score < best_score:
                    best_score = score
                    best = PlanSelection(
                        breakfast=breakfast, lunch=lunch, dinner=dinner, score=score
                    )
    return best


def score_selection(
    breakfast: Combo, lunch: Combo, dinner: Combo, goals: Goals, location: Location
) -> float:
    """Score one full-day triple the same way the cross-slot scan does."""
    total = breakfast.totals + lunch.totals + dinner.totals
    return (
        macro_distance(total, goals.as_nutrition())
        + imbalance_penalty(
            breakfast.totals.calories,
            lunch.totals.calories,
            dinner.totals.calories,
            goals.calories,
        )
        + campus_switch_penalty(breakfast, lunch, dinner, location)
    )


def generate_plan(  # noqa: PLR0913
    records: Iterable[FoodItem | Mapping[str, object]],
    location: Location | str,
    calories_goal: float,
    protein_goal: float,
    carbs_goal: float,
    fat_goal: float,
    *,
    max_items: int = DEFAULT_MAX_ITEMS,
    beam_width: int = DEFAULT_BEAM_WIDTH,
    top_k: int = DEFAULT_TOP_K,
) -> GeneratedPlan:
    """Pick the lowest-scoring full-day plan from a catalog snapshot.

    Returns an empty plan when any slot has nothing to offer.
    """
    resolved = parse_location(location)
    goals = Goals(
        calories=calories_goal, protein=protein_goal, carbs=carbs_goal, fat=fat_goal
    )
    candidates = build_candidates(
        records, resolved, goals, max_items=max_items, beam_width=beam_width
    )
    selection = select_plan(candidates, goals, resolved, top_k=top_k)
    if selection is None:
        _logger.info(
            "No plan possible for location=%s (candidates: %s)",
            getattr(resolved, "value", resolved),
            {meal.value: len(combos) for meal, combos in candidates.items()},
        )
        return GeneratedPlan()
    return selection.to_plan()


@dataclass
class PlannerService:
    """Generates plans against the current catalog snapshot."""

    catalog: CatalogSource
    max_items: int = DEFAULT_MAX_ITEMS
    beam_width: int = DEFAULT_BEAM_WIDTH
    top_k: int = DEFAULT_TOP_K

    def generate(self, location: Location | str, goals: Goals) -> GeneratedPlan:
        """Generate a plan for explicit goals."""
        return generate_plan(
            self.catalog.load(),
            location,
            goals.calories,
            goals.protein,
            goals.carbs,
            goals.fat,
            max_items=self.max_items,
            beam_width=self.beam_width,
            top_k=self.top_k,
        )

    def generate_from_profile(
        self, profile: Profile, campus_selection: Iterable[str | None]
    ) -> GeneratedPlan:
        """Translate a profile into goals and generate a plan."""
        return self.generate(resolve_location(campus_selection), compute_goals(profile))
