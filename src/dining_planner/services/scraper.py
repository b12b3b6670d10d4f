"""Menu scraping and nutrition label enrichment with disk caching."""

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TypeVar

from pydantic import ValidationError

from dining_planner.adapters.dining_client import DiningClient
from dining_planner.domain.catalog import Campus, FoodItem, Meal, NutritionInfo, dedupe
from dining_planner.services.cache import Cache
from dining_planner.services.parsing import parse_menu, parse_nutrition_label

_logger = logging.getLogger(__name__)

DEFAULT_ENRICH_CONCURRENCY = 6

T = TypeVar("T")
R = TypeVar("R")


class ScraperError(Exception):
    """Base error for portal scraping failures."""


class MenuFetchError(ScraperError):
    """Raised when a menu listing cannot be retrieved."""


class LabelFetchError(ScraperError):
    """Raised when a nutrition label cannot be retrieved."""


async def map_with_concurrency(
    items: Sequence[T],
    concurrency: int,
    func: Callable[[T], Awaitable[R]],
) -> list[R]:
    """Apply func to every item with at most `concurrency` calls in flight.

    Workers pull the next index from a shared cursor; results land at the
    index of their input regardless of completion order.
    """
    results: list[R | None] = [None] * len(items)
    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(items):
            index = cursor
            cursor += 1
            results[index] = await func(items[index])

    workers = min(max(concurrency, 1), len(items))
    await asyncio.gather(*(worker() for _ in range(workers)))
    return results  # type: ignore[return-value]


def menu_cache_key(campus: Campus, meal: Meal, day: date) -> str:
    return f"{campus.value}_{day.isoformat()}_{meal.value}.html"


def label_cache_key(url: str) -> str:
    return hashlib.sha1(url.encode("utf-8")).hexdigest() + ".json"  # noqa: S324


@dataclass
class ScraperService:
    """Scrapes menu listings and nutrition labels from the portal."""

    client: DiningClient
    menu_cache: Cache
    label_cache: Cache
    base_url: str
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def scrape_campus_meal(
        self, campus: Campus, meal: Meal, day: date | None = None
    ) -> list[FoodItem]:
        """Return menu entries for one campus and meal."""
        resolved_day = day or date.today()
        key = menu_cache_key(campus, meal, resolved_day)
        html = self.menu_cache.get(key)
        if html is None:
            try:
                html = await self.client.fetch_menu(campus, meal, resolved_day)
            except Exception as exc:
                raise MenuFetchError(
                    f"Fetch failed for {campus.value} {meal.value}: {exc}"
                ) from exc
            self.menu_cache.set(key, html)
        return parse_menu(
            html, campus, meal, resolved_day.isoformat(), self.base_url
        )

    async def scrape_campus(
        self, campus: Campus, day: date | None = None
    ) -> list[FoodItem]:
        """Return entries for every meal at one campus."""
        resolved_day = day or date.today()
        lists = await asyncio.gather(
            *(self.scrape_campus_meal(campus, meal, resolved_day) for meal in Meal)
        )
        return dedupe([item for items in lists for item in items])

    async def scrape_all(
        self, day: date | None = None, campuses: Sequence[Campus] | None = None
    ) -> list[FoodItem]:
        """Return entries for every meal at every requested campus."""
        resolved_day = day or date.today()
        targets = list(campuses or Campus)
        lists = await asyncio.gather(
            *(self.scrape_campus(campus, resolved_day) for campus in targets)
        )
        return dedupe([item for items in lists for item in items])

    async def fetch_label(self, url: str) -> NutritionInfo:
        """Return nutrition facts for a label URL, using the label cache."""
        key = label_cache_key(url)
        cached = self.label_cache.get(key)
        if cached is not None:
            try:
                return NutritionInfo.model_validate_json(cached)
            except ValidationError:
                _logger.warning("Discarding unreadable cached label %s", key)

        html = await self._call_with_retry(
            lambda: self.client.fetch_label(url), action=f"label:{url}"
        )
        nutrition = parse_nutrition_label(html)
        self.label_cache.set(key, nutrition.model_dump_json(by_alias=True))
        return nutrition

    async def enrich(
        self,
        items: Sequence[FoodItem],
        concurrency: int = DEFAULT_ENRICH_CONCURRENCY,
        skip_if_has_nutrition: bool = True,
    ) -> list[FoodItem]:
        """Attach nutrition facts to items; failed items come back unchanged."""

        async def enrich_one(item: FoodItem) -> FoodItem:
            if skip_if_has_nutrition and item.nutrition is not None:
                return item
            try:
                nutrition = await self.fetch_label(item.link)
            except Exception as exc:
                _logger.warning("Nutrition lookup failed for %s: %s", item.name, exc)
                return item
            return item.model_copy(update={"nutrition": nutrition})

        return await map_with_concurrency(items, concurrency, enrich_one)

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[str]], *, action: str
    ) -> str:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.debug(
                    "Portal %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise LabelFetchError(f"Label fetch failed: {exc}") from exc
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
