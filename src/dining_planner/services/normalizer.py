"""Validation of raw catalog records into plan items."""

import logging
import math
from collections.abc import Iterable, Mapping

from dining_planner.domain.catalog import Campus, FoodItem, Meal
from dining_planner.domain.planning import Nutrition, PlanItem

_logger = logging.getLogger(__name__)

CatalogIndex = dict[tuple[Campus, Meal], list[PlanItem]]

_CAMPUSES = {campus.value: campus for campus in Campus}
_MEALS = {meal.value.lower(): meal for meal in Meal}


def normalize_campus(raw: object) -> Campus | None:
    """Match a campus tag case- and whitespace-insensitively."""
    if not isinstance(raw, str):
        return None
    return _CAMPUSES.get(raw.strip().lower())


def normalize_meal(raw: object) -> Meal | None:
    """Match a meal tag case- and whitespace-insensitively."""
    if not isinstance(raw, str):
        return None
    return _MEALS.get(raw.strip().lower())


def normalize_food(record: Mapping[str, object]) -> PlanItem | None:
    """Build a plan item, or None when the name or any macro is unusable."""
    name = record.get("foodname")
    if not isinstance(name, str) or not name.strip():
        return None
    nutrition = record.get("nutrition")
    if not isinstance(nutrition, Mapping):
        return None

    calories = _finite(nutrition.get("calories"))
    protein_g = _finite(nutrition.get("protein_g"))
    carbs = _finite(nutrition.get("totalCarb_g"))
    fat = _finite(nutrition.get("totalFat_g"))
    if calories is None or protein_g is None or carbs is None or fat is None:
        return None

    return PlanItem(
        name=name.strip(),
        nutrition=Nutrition(
            calories=calories, protein_g=protein_g, carbs=carbs, fat=fat
        ),
    )


def normalize_catalog(
    records: Iterable[FoodItem | Mapping[str, object]],
) -> CatalogIndex:
    """Group valid records by (campus, meal), preserving input order.

    Invalid records are dropped silently; scraped catalogs are noisy.
    """
    index: CatalogIndex = {}
    dropped = 0
    for raw in records:
        record = raw.to_record() if isinstance(raw, FoodItem) else raw
        if not isinstance(record, Mapping):
            dropped += 1
            continue
        campus = normalize_campus(record.get("campus"))
        meal = normalize_meal(record.get("meal"))
        item = normalize_food(record)
        if campus is None or meal is None or item is None:
            dropped += 1
            continue
        index.setdefault((campus, meal), []).append(item)
    if dropped:
        _logger.debug("Dropped %s incomplete catalog records", dropped)
    return index


def _finite(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number
