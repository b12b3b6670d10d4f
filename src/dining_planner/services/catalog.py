"""Catalog refresh: scrape, enrich and store the day's menus."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from dining_planner.domain.catalog import FoodItem, dedupe
from dining_planner.services.scraper import ScraperService

_logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Persistence interface for the catalog snapshot."""

    def load(self) -> list[dict[str, object]]:
        """Return all catalog records."""

    def save(self, items: list[FoodItem]) -> None:
        """Replace the catalog with the given items."""


@dataclass(frozen=True)
class RefreshSummary:
    """Counts describing a freshly written catalog."""

    total: int
    with_nutrition: int
    with_section: int
    campuses: dict[str, int] = field(default_factory=dict)
    meals: dict[str, int] = field(default_factory=dict)


@dataclass
class CatalogService:
    """Rebuilds the catalog from the menu portal."""

    scraper: ScraperService
    store: CatalogStore
    concurrency: int = 8

    async def refresh(self, day: date | None = None) -> RefreshSummary:
        """Scrape both campuses, enrich with labels and rewrite the store."""
        scraped = await self.scraper.scrape_all(day)
        enriched = await self.scraper.enrich(
            scraped, concurrency=self.concurrency, skip_if_has_nutrition=True
        )
        items = dedupe(enriched)
        self.store.save(items)
        summary = summarize(items)
        _logger.info(
            "Catalog refreshed: total=%s with_nutrition=%s",
            summary.total,
            summary.with_nutrition,
        )
        return summary


def summarize(items: list[FoodItem]) -> RefreshSummary:
    return RefreshSummary(
        total=len(items),
        with_nutrition=sum(
            1
            for item in items
            if item.nutrition is not None and item.nutrition.calories is not None
        ),
        with_section=sum(1 for item in items if item.section),
        campuses=dict(Counter(item.campus.value for item in items)),
        meals=dict(Counter(item.meal.value for item in items)),
    )
