"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from dining_planner.adapters.dining_client import HttpxDiningClient
from dining_planner.adapters.json_catalog_store import JsonCatalogStore
from dining_planner.config import Settings
from dining_planner.services.cache import DiskCache
from dining_planner.services.catalog import CatalogService
from dining_planner.services.planner import PlannerService
from dining_planner.services.scraper import ScraperService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    scraper_service: ScraperService
    catalog_service: CatalogService
    planner_service: PlannerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    cache_dir = Path(resolved_settings.cache_dir)
    dining_client = HttpxDiningClient.create(
        base_url=resolved_settings.menu_base_url,
        user_agent=resolved_settings.user_agent,
        timeout=resolved_settings.http_timeout_seconds,
    )
    scraper_service = ScraperService(
        client=dining_client,
        menu_cache=DiskCache(
            cache_dir / "menu_html", resolved_settings.menu_cache_ttl_seconds
        ),
        label_cache=DiskCache(
            cache_dir / "label_json", resolved_settings.label_cache_ttl_seconds
        ),
        base_url=resolved_settings.menu_base_url,
    )
    catalog_store = JsonCatalogStore(Path(resolved_settings.catalog_path))
    catalog_service = CatalogService(
        scraper=scraper_service,
        store=catalog_store,
        concurrency=resolved_settings.enrich_concurrency,
    )
    planner_service = PlannerService(
        catalog=catalog_store,
        beam_width=resolved_settings.beam_width,
        top_k=resolved_settings.top_k,
    )

    async def close_resources() -> None:
        await dining_client.close()

    return AppContainer(
        settings=resolved_settings,
        scraper_service=scraper_service,
        catalog_service=catalog_service,
        planner_service=planner_service,
        close_resources=close_resources,
    )
