"""Beam search over item combinations for a single meal slot."""

from dining_planner.domain.catalog import Campus
from dining_planner.domain.planning import ZERO_NUTRITION, Combo, Nutrition, PlanItem

CALORIE_WEIGHT = 1.0
PROTEIN_WEIGHT = 4.0
CARBS_WEIGHT = 1.5
FAT_WEIGHT = 1.5

DEFAULT_MAX_ITEMS = 3
DEFAULT_BEAM_WIDTH = 250


def macro_distance(total: Nutrition, goal: Nutrition) -> float:
    """Weighted L1 distance between achieved and target macros."""
    return (
        CALORIE_WEIGHT * abs(total.calories - goal.calories)
        + PROTEIN_WEIGHT * abs(total.protein_g - goal.protein_g)
        + CARBS_WEIGHT * abs(total.carbs - goal.carbs)
        + FAT_WEIGHT * abs(total.fat - goal.fat)
    )


def build_meal_combos(
    items: list[PlanItem],
    goal: Nutrition,
    campus: Campus,
    max_items: int = DEFAULT_MAX_ITEMS,
    beam_width: int = DEFAULT_BEAM_WIDTH,
) -> list[Combo]:
    """Return candidate combos for one (meal, campus) pool, best first.

    All items must come from the same campus so each combo stays single-campus.
    Every step replaces the beam with its expansions, so only combos of exactly
    `max_items` distinct names survive; a pool with fewer names yields nothing.
    Sorting is stable, so equal scores keep expansion order.
    """
    beam = [Combo(items=(), totals=ZERO_NUTRITION, score=0.0, campus=campus)]

    for _ in range(max_items):
        expansions: list[Combo] = []
        for combo in beam:
            for item in items:
                if combo.has_name(item.name):
                    continue
                totals = combo.totals + item.nutrition
                expansions.append(
                    Combo(
                        items=(*combo.items, item),
                        totals=totals,
                        score=macro_distance(totals, goal),
                        campus=campus,
                    )
                )
        expansions.sort(key=lambda combo: combo.score)
        beam = expansions[:beam_width]

    return [combo for combo in beam if combo.items]
