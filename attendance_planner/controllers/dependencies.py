"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import Request

from attendance_planner.repository.timetable_repository import TimetableRepository
from attendance_planner.services.calculation_service import AttendanceCalculationService
from attendance_planner.services.simulation_service import PlanComparisonService
from attendance_planner.services.strategy_service import StrategyPlannerService
from attendance_planner.utils.config import get_settings


def get_timetable_repository(request: Request) -> TimetableRepository:
    repository = getattr(request.app.state, "timetable_repository", None)
    if repository is None:
        repository = TimetableRepository(settings=get_settings())
        request.app.state.timetable_repository = repository
    return repository


def get_calculation_service(request: Request) -> AttendanceCalculationService:
    service = getattr(request.app.state, "calculation_service", None)
    if service is None:
        service = AttendanceCalculationService(settings=get_settings())
        request.app.state.calculation_service = service
    return service


def get_planner_service(request: Request) -> StrategyPlannerService:
    service = getattr(request.app.state, "planner_service", None)
    if service is None:
        service = StrategyPlannerService(
            repository=get_timetable_repository(request),
            settings=get_settings(),
        )
        request.app.state.planner_service = service
    return service


def get_comparison_service(request: Request) -> PlanComparisonService:
    service = getattr(request.app.state, "comparison_service", None)
    if service is None:
        service = PlanComparisonService(
            planner=get_planner_service(request),
            settings=get_settings(),
        )
        request.app.state.comparison_service = service
    return service
