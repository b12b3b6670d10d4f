"""Tests for catalog refresh and storage."""

import asyncio
import json
from datetime import date

from dining_planner.adapters.json_catalog_store import JsonCatalogStore
from dining_planner.domain.catalog import Campus, FoodItem, Meal, NutritionInfo
from dining_planner.domain.planning import Goals
from dining_planner.services.catalog import CatalogService, summarize
from dining_planner.services.planner import PlannerService
from dining_planner.services.scraper import ScraperService
from tests.conftest import FakeDiningClient, InMemoryCatalogStore


def _item(name: str, nutrition: NutritionInfo | None = None) -> FoodItem:
    return FoodItem(
        campus=Campus.ATRIUM,
        meal=Meal.BREAKFAST,
        section="Grill",
        name=name,
        link=f"https://menu.test/label.aspx?id={name}",
        date="2026-01-20",
        portion_size="1 EACH",
        nutrition=nutrition,
    )


def test_refresh_scrapes_enriches_and_saves(
    scraper: ScraperService,
    dining_client: FakeDiningClient,
    catalog_store: InMemoryCatalogStore,
) -> None:
    service = CatalogService(scraper=scraper, store=catalog_store, concurrency=4)

    summary = asyncio.run(service.refresh(date(2026, 1, 20)))

    assert summary.total == 12
    assert summary.with_nutrition == 12
    assert summary.with_section == 12
    assert summary.campuses == {"livingston": 6, "atrium": 6}
    assert summary.meals == {"Breakfast": 4, "Lunch": 4, "Dinner": 4}
    assert catalog_store.saves == 1
    assert dining_client.max_in_flight <= 4
    record = catalog_store.records[0]
    assert record["foodname"] == "Scrambled Eggs"
    assert record["nutrition"]["totalFat_g"] == 5  # type: ignore[index]


def test_refreshed_catalog_feeds_the_planner(
    scraper: ScraperService, catalog_store: InMemoryCatalogStore
) -> None:
    asyncio.run(CatalogService(scraper=scraper, store=catalog_store).refresh())
    # Each slot serves two dishes, so combos hold at most two items.
    planner = PlannerService(catalog=catalog_store, max_items=2, top_k=20)

    plan = planner.generate("any", Goals(calories=600, protein=40, carbs=60, fat=20))

    assert not plan.is_empty


def test_summarize_counts_only_labels_with_calories() -> None:
    items = [
        _item("Eggs", NutritionInfo(calories=85)),
        _item("Toast", NutritionInfo(protein_g=4)),
        _item("Juice"),
    ]

    summary = summarize(items)

    assert summary.total == 3
    assert summary.with_nutrition == 1
    assert summary.campuses == {"atrium": 3}


def test_json_store_round_trip(tmp_path) -> None:
    store = JsonCatalogStore(tmp_path / "data" / "food.json")

    store.save([_item("Eggs", NutritionInfo(calories=85, total_fat_g=5))])
    records = store.load()

    assert records == [
        {
            "campus": "atrium",
            "meal": "Breakfast",
            "section": "Grill",
            "foodname": "Eggs",
            "link": "https://menu.test/label.aspx?id=Eggs",
            "date": "2026-01-20",
            "portionSize": "1 EACH",
            "nutrition": {"calories": 85.0, "totalFat_g": 5.0},
        }
    ]


def test_json_store_missing_file_is_empty(tmp_path) -> None:
    assert JsonCatalogStore(tmp_path / "food.json").load() == []


def test_json_store_ignores_malformed_content(tmp_path) -> None:
    path = tmp_path / "food.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")
    assert JsonCatalogStore(path).load() == []

    path.write_text(json.dumps([{"foodname": "Eggs"}, "junk", 3]), encoding="utf-8")
    assert JsonCatalogStore(path).load() == [{"foodname": "Eggs"}]
