"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    menu_base_url: str = "https://menuportal23.dining.rutgers.edu/foodpronet/"
    user_agent: str = "Mozilla/5.0 (compatible; RutgersMenuScraper/1.0)"
    http_timeout_seconds: float = 15
    cache_dir: str = ".cache/rutgers_menu"
    menu_cache_ttl_seconds: int = 60 * 60 * 6
    label_cache_ttl_seconds: int = 60 * 60 * 24 * 30
    enrich_concurrency: int = 8
    catalog_path: str = "food.json"
    beam_width: int = 250
    top_k: int = 120
    default_campuses: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_campus_selection(raw: str | None) -> list[str]:
    """Split a comma-separated campus list; blank or "*" means no selection."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return []
    return [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
