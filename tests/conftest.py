"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date

import pytest

from dining_planner.adapters.dining_client import DiningClient
from dining_planner.config import Settings
from dining_planner.containers import AppContainer
from dining_planner.domain.catalog import Campus, FoodItem, Meal
from dining_planner.services.cache import InMemoryCache
from dining_planner.services.catalog import CatalogService, CatalogStore
from dining_planner.services.planner import PlannerService
from dining_planner.services.scraper import ScraperService

BASE_URL = "https://menu.test/foodpronet/"

MENU_HTML = """
<html><body>
  <h3>Grill</h3>
  <fieldset>
    <div class="col-1"><label>Scrambled Eggs</label></div>
    <div class="col-2">4 OZ</div>
    <div class="col-3"><a href="label.aspx?RecNumAndPort=111">Nutrition</a></div>
  </fieldset>
  <fieldset>
    <legend>Bakery</legend>
    <div class="col-1"><label>Blueberry Muffin</label></div>
    <div class="col-3"><a href="/label.aspx?RecNumAndPort=222">Nutrition</a></div>
  </fieldset>
  <fieldset>
    <div class="col-1"><label>Build Your Own Omelet</label></div>
    <div class="col-3"><a href="label.aspx?RecNumAndPort=333">Nutrition</a></div>
  </fieldset>
  <fieldset>
    <div class="col-1"><label>Mystery Item</label></div>
  </fieldset>
</body></html>
"""

LABEL_HTML = """
<html><body>
  <div id="facts">
    <p>Serving Size 1 EACH</p>
    <p class="strong">Calories 85</p>
  </div>
  <div id="specs">
    <table>
      <tr><td>Total Fat 5g</td><td>Tot. Carb. 2g</td></tr>
      <tr><td>Sat. Fat 1.5g</td><td>Dietary Fiber 0g</td></tr>
      <tr><td>Cholesterol 185mg</td><td>Sugars 1g</td></tr>
      <tr><td>Sodium 1,070mg</td><td>Protein 7g</td></tr>
    </table>
  </div>
  <p>INGREDIENTS: Eggs,   Milk, Salt</p>
</body></html>
"""


@dataclass
class FakeDiningClient(DiningClient):
    """Fake portal client serving static pages and recording calls."""

    menu_html: str = MENU_HTML
    label_html: str = LABEL_HTML
    menu_error: Exception | None = None
    failing_urls: set[str] = field(default_factory=set)
    delays: dict[str, float] = field(default_factory=dict)
    menu_calls: list[tuple[Campus, Meal, date]] = field(default_factory=list)
    label_calls: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    async def fetch_menu(self, campus: Campus, meal: Meal, day: date) -> str:
        self.menu_calls.append((campus, meal, day))
        if self.menu_error is not None:
            raise self.menu_error
        return self.menu_html

    async def fetch_label(self, url: str) -> str:
        self.label_calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0.01))
            if url in self.failing_urls:
                raise RuntimeError("connection reset")
            return self.label_html
        finally:
            self.in_flight -= 1


@dataclass
class InMemoryCatalogStore(CatalogStore):
    """Catalog store kept in memory."""

    records: list[dict[str, object]] = field(default_factory=list)
    saves: int = 0

    def load(self) -> list[dict[str, object]]:
        return list(self.records)

    def save(self, items: list[FoodItem]) -> None:
        self.saves += 1
        self.records = [item.to_record() for item in items]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        menu_base_url=BASE_URL,
        cache_dir=str(tmp_path / "cache"),
        catalog_path=str(tmp_path / "food.json"),
        top_k=40,
    )


@pytest.fixture
def dining_client() -> FakeDiningClient:
    return FakeDiningClient()


@pytest.fixture
def scraper(dining_client: FakeDiningClient) -> ScraperService:
    return ScraperService(
        client=dining_client,
        menu_cache=InMemoryCache(ttl_seconds=60 * 60 * 6),
        label_cache=InMemoryCache(ttl_seconds=60 * 60 * 24 * 30),
        base_url=BASE_URL,
        retry_delay_seconds=0,
    )


@pytest.fixture
def catalog_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def container(
    settings: Settings,
    scraper: ScraperService,
    catalog_store: InMemoryCatalogStore,
) -> AppContainer:
    catalog_service = CatalogService(
        scraper=scraper, store=catalog_store, concurrency=4
    )
    planner_service = PlannerService(catalog=catalog_store, top_k=settings.top_k)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        scraper_service=scraper,
        catalog_service=catalog_service,
        planner_service=planner_service,
        close_resources=close_resources,
    )
