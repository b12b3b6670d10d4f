"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status

from dining_planner.api.models import GoalsPlanRequest, ProfilePlanRequest
from dining_planner.app_logging import configure_logging
from dining_planner.config import parse_campus_selection
from dining_planner.containers import AppContainer
from dining_planner.domain.planning import Goals
from dining_planner.services.goals import compute_goal_breakdown
from dining_planner.services.planner import resolve_location
from dining_planner.services.scraper import MenuFetchError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    default_campuses = parse_campus_selection(container.settings.default_campuses)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/plans")
    def plan_for_goals(
        payload: GoalsPlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate a plan for explicit daily targets."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.planner_service.generate(
            payload.location,
            Goals(
                calories=payload.calories,
                protein=payload.protein,
                carbs=payload.carbs,
                fat=payload.fat,
            ),
        )
        return {"plan": plan.to_dict(), "empty": plan.is_empty}

    @app.post("/plans/profile")
    def plan_for_profile(
        payload: ProfilePlanRequest, request: Request
    ) -> dict[str, object]:
        """Translate a profile into targets and generate a plan."""
        state_container: AppContainer = request.app.state.container
        campuses = (
            payload.campuses if payload.campuses is not None else default_campuses
        )
        breakdown = compute_goal_breakdown(payload.profile)
        location = resolve_location(campuses)
        plan = state_container.planner_service.generate(location, breakdown.goals)
        return {
            "location": getattr(location, "value", location),
            "goals": asdict(breakdown.goals),
            "plan": plan.to_dict(),
            "empty": plan.is_empty,
        }

    @app.post("/catalog/refresh")
    async def refresh_catalog(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        """Scrape today's menus and rewrite the catalog."""
        state_container: AppContainer = request.app.state.container
        try:
            summary = await state_container.catalog_service.refresh(day)
        except MenuFetchError as exc:
            logger.exception("Catalog refresh failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return asdict(summary)

    return app
