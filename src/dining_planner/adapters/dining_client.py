"""Client for the dining hall menu portal."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from urllib.parse import urlencode

import httpx

from dining_planner.domain.catalog import Campus, Meal

_SITE_NAME = "Rutgers University Dining"


class DiningClient(Protocol):
    """Interface for fetching menu portal pages."""

    async def fetch_menu(self, campus: Campus, meal: Meal, day: date) -> str:
        """Return the menu listing HTML for a campus, meal and day."""

    async def fetch_label(self, url: str) -> str:
        """Return the nutrition label HTML behind a menu link."""


def portal_date(day: date) -> str:
    """Format a date the way the portal expects (M/D/YYYY, no padding)."""
    return f"{day.month}/{day.day}/{day.year}"


def build_menu_url(base_url: str, campus: Campus, meal: Meal, day: date) -> str:
    """Build the listing URL; breakfast is the portal's default view."""
    info = campus.info
    params = {
        "locationNum": info.location_num,
        "locationName": info.location_name,
        "dtdate": portal_date(day),
        "sName": _SITE_NAME,
    }
    if meal is not Meal.BREAKFAST:
        params["activeMeal"] = meal.value
    return f"{base_url.rstrip('/')}/pickmenu.aspx?{urlencode(params)}"


@dataclass
class HttpxDiningClient(DiningClient):
    """HTTPX-backed menu portal client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout: float = 15
    ) -> "HttpxDiningClient":
        """Create a portal client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    async def fetch_menu(self, campus: Campus, meal: Meal, day: date) -> str:
        """Fetch a menu listing page."""
        return await self._get(build_menu_url(self.base_url, campus, meal, day))

    async def fetch_label(self, url: str) -> str:
        """Fetch a nutrition label page."""
        return await self._get(url)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, url: str) -> str:
        response = await self.http_client.get(
            url,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text
