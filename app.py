"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the timetable repository and services, registers routers, and
loads the timetable before the first request.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from attendance_planner.controllers.attendance_controller import router as attendance_router
from attendance_planner.controllers.strategy_controller import router as strategy_router
from attendance_planner.controllers.timetable_controller import router as timetable_router
from attendance_planner.repository.timetable_repository import TimetableRepository
from attendance_planner.services.calculation_service import AttendanceCalculationService
from attendance_planner.services.simulation_service import PlanComparisonService
from attendance_planner.services.strategy_service import StrategyPlannerService
from attendance_planner.utils.config import Settings, get_settings
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every service is created here and exposed through app.state, so each
    dependency is traceable from this function.
    """
    settings = settings or get_settings()

    repository = TimetableRepository(settings)
    calculation_service = AttendanceCalculationService(settings=settings)
    planner_service = StrategyPlannerService(repository=repository, settings=settings)
    comparison_service = PlanComparisonService(planner=planner_service, settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the timetable before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(attendance_router)
    app.include_router(strategy_router)
    app.include_router(timetable_router)

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": settings.app_version}

    app.state.timetable_repository = repository
    app.state.calculation_service = calculation_service
    app.state.planner_service = planner_service
    app.state.comparison_service = comparison_service

    return app


def _startup(app: FastAPI) -> None:
    """Fail fast on a missing or malformed timetable document."""
    repository: TimetableRepository = app.state.timetable_repository

    logger.info("Startup: loading timetable from %s", repository.data_path)
    repository.load()

    logger.info("Startup complete, system ready")


# Module-level app object for uvicorn
app = create_app()
