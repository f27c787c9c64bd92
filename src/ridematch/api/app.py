"""FastAPI application factory for the ride matching service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ridematch.api.routes import fares, matches, tracking
from ridematch.core.exceptions import NoCandidatesAvailable, RoutingUnavailable, ValidationError
from ridematch.matching.ride_matcher import RideMatcher, create_candidate_search
from ridematch.pricing.fare import FareEstimator
from ridematch.settings import Settings, get_settings
from ridematch.tracking.registry import TrackerRegistry, create_tracker_registry

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    fare_estimator: FareEstimator | None = None,
    ride_matcher: RideMatcher | None = None,
    tracker_registry: TrackerRegistry | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        settings: Loaded settings; read from the environment when omitted
        fare_estimator: Estimator to use instead of one built from settings
        ride_matcher: Matcher to use instead of one built from settings
        tracker_registry: Registry of per-ride trackers (optional)
    """
    if settings is None:
        settings = get_settings()
    if fare_estimator is None:
        fare_estimator = FareEstimator.from_settings(settings.fare, settings.routing)
    if ride_matcher is None:
        ride_matcher = RideMatcher(
            fare_estimator=fare_estimator,
            search=create_candidate_search(settings.matching),
        )
    if tracker_registry is None:
        tracker_registry = create_tracker_registry(settings.tracking)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Ride matching service started")
        yield
        tracker_registry.clear()
        logger.info("Ride matching service stopped")

    app = FastAPI(
        title="Ride Matching API",
        description="Fare estimation, driver matching and simulated driver tracking",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.fare_estimator = fare_estimator
    app.state.ride_matcher = ride_matcher
    app.state.tracker_registry = tracker_registry

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(NoCandidatesAvailable)
    async def no_candidates_handler(request: Request, exc: NoCandidatesAvailable) -> JSONResponse:
        logger.info(f"No candidates for {request.url.path}: {exc.message}")
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(RoutingUnavailable)
    async def routing_unavailable_handler(
        request: Request, exc: RoutingUnavailable
    ) -> JSONResponse:
        logger.warning(f"Routing unavailable for {request.url.path}: {exc.message}")
        return JSONResponse(status_code=503, content={"detail": exc.message})

    app.include_router(fares.router)
    app.include_router(matches.router)
    app.include_router(tracking.router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
