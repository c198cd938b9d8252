"""HTTP controller layer for recommendations, mode comparison and simulation."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, model_validator

from attendance_planner.controllers.dependencies import (
    get_comparison_service,
    get_planner_service,
)
from attendance_planner.controllers.schemas import (
    CamelModel,
    PlannerRequest,
    RecommendationRequest,
    finite_or_none,
)
from attendance_planner.domain.attendance import AttendanceError
from attendance_planner.domain.models import (
    ModeStats,
    PlannerInputs,
    RecommendedSlot,
    RiskLevel,
    StrategyMode,
)
from attendance_planner.repository.timetable_repository import (
    DivisionNotFoundError,
    TimetableDataError,
)
from attendance_planner.services.simulation_service import PlanComparisonService
from attendance_planner.services.strategy_service import StrategyPlannerService
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["strategy"])


class RecommendedSlotResponse(CamelModel):
    day: str
    time: str
    room: str
    type: str
    faculty: str
    subject_short: str
    index: int = Field(ge=1)


class PlanSummaryResponse(CamelModel):
    required_lectures: Optional[int] = Field(default=None, ge=0)
    scheduled_count: int = Field(ge=0)
    skip_count: int = Field(ge=0)
    days_to_recover: int = Field(ge=0)
    safe_skip_allowance: int = Field(ge=0)
    projected_percentage: float = Field(ge=0.0, le=100.0)
    current_percentage: float = Field(ge=0.0, le=100.0)
    total_available_slots: int = Field(ge=0)
    actual_attend: int = Field(ge=0)


class RecommendationResponse(CamelModel):
    mode: StrategyMode
    summary: PlanSummaryResponse
    recommended_slots: list[RecommendedSlotResponse]


class ModeStatsResponse(CamelModel):
    mode: StrategyMode
    actual_attend: int = Field(ge=0)
    scheduled_count: int = Field(ge=0)
    skip_count: int = Field(ge=0)
    days_to_recover: int = Field(ge=0)
    projected_percentage: float = Field(ge=0.0, le=100.0)


class CompareResponse(CamelModel):
    required_lectures: Optional[int] = Field(default=None, ge=0)
    total_available_slots: int = Field(ge=0)
    target_achieved: bool
    not_enough_slots: bool
    modes: list[ModeStatsResponse]


class SimulateRequest(PlannerRequest):
    attend_more: Optional[int] = Field(default=None, ge=0)
    skip_more: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_scenario(self) -> "SimulateRequest":
        if self.attend_more is None and self.skip_more is None:
            raise ValueError("Provide attendMore, skipMore or both")
        return self


class AttendSimulationResponse(CamelModel):
    lectures: int = Field(ge=0)
    projected_percentage: float
    remaining_required: Optional[int] = Field(default=None, ge=0)
    target_achieved: bool
    risk_level: RiskLevel


class SkipSimulationResponse(CamelModel):
    lectures: int = Field(ge=0)
    current_percentage: float
    new_percentage: float
    percentage_drop: float
    new_required: Optional[int] = Field(default=None, ge=0)
    extra_required: Optional[int] = Field(default=None, ge=0)
    recovery_difficult: bool
    risk_level: RiskLevel


class SimulateResponse(CamelModel):
    attend: Optional[AttendSimulationResponse] = None
    skip: Optional[SkipSimulationResponse] = None


class CurvePointResponse(CamelModel):
    lectures: int = Field(ge=0)
    percentage: float
    risk_level: RiskLevel


class ModeEndpointResponse(CamelModel):
    mode: StrategyMode
    lectures: int = Field(ge=0)
    percentage: float
    risk_level: RiskLevel


class RiskCurveResponse(CamelModel):
    required_lectures: Optional[int] = Field(default=None, ge=0)
    max_lectures: int = Field(ge=0)
    points: list[CurvePointResponse]
    mode_endpoints: list[ModeEndpointResponse]


def _to_inputs(payload: PlannerRequest, mode: StrategyMode = StrategyMode.MEDIUM) -> PlannerInputs:
    return PlannerInputs(
        division=payload.division,
        target=payload.target,
        conducted=payload.conducted,
        attended=payload.attended,
        no_attendance=payload.no_attendance or 0,
        mode=mode,
    )


def _slot_response(slot: RecommendedSlot) -> RecommendedSlotResponse:
    return RecommendedSlotResponse(
        day=slot.day,
        time=slot.time,
        room=slot.room,
        type=slot.type,
        faculty=slot.faculty,
        subject_short=slot.subject_short,
        index=slot.index,
    )


def _mode_stats_response(stats: ModeStats) -> ModeStatsResponse:
    return ModeStatsResponse(
        mode=stats.mode,
        actual_attend=stats.actual_attend,
        scheduled_count=stats.scheduled_count,
        skip_count=stats.skip_count,
        days_to_recover=stats.days_to_recover,
        projected_percentage=stats.projected_percentage,
    )


@router.post(
    "/recommendation",
    response_model=RecommendationResponse,
    status_code=status.HTTP_200_OK,
)
async def recommendation(
    payload: RecommendationRequest,
    service: StrategyPlannerService = Depends(get_planner_service),
) -> RecommendationResponse:
    """Recommend concrete upcoming lectures for the requested mode."""
    try:
        plan = service.generate_global_plan(_to_inputs(payload, payload.mode))
    except (AttendanceError, DivisionNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except TimetableDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected recommendation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate recommendation",
        ) from exc

    summary = plan.summary
    return RecommendationResponse(
        mode=plan.mode,
        summary=PlanSummaryResponse(
            required_lectures=finite_or_none(summary.required_lectures),
            scheduled_count=summary.scheduled_count,
            skip_count=summary.skip_count,
            days_to_recover=summary.days_to_recover,
            safe_skip_allowance=summary.safe_skip_allowance,
            projected_percentage=summary.projected_percentage,
            current_percentage=summary.current_percentage,
            total_available_slots=summary.total_available_slots,
            actual_attend=summary.actual_attend,
        ),
        recommended_slots=[_slot_response(slot) for slot in plan.recommended_slots],
    )


@router.post(
    "/strategy/compare",
    response_model=CompareResponse,
    status_code=status.HTTP_200_OK,
)
async def compare_modes(
    payload: PlannerRequest,
    service: PlanComparisonService = Depends(get_comparison_service),
) -> CompareResponse:
    """Side-by-side statistics for every strategy mode."""
    try:
        comparison = service.compare_modes(_to_inputs(payload))
    except (AttendanceError, DivisionNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except TimetableDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected comparison failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compare modes",
        ) from exc

    return CompareResponse(
        required_lectures=finite_or_none(comparison.required_lectures),
        total_available_slots=comparison.total_available_slots,
        target_achieved=comparison.target_achieved,
        not_enough_slots=comparison.not_enough_slots,
        modes=[_mode_stats_response(stats) for stats in comparison.modes],
    )


@router.post(
    "/strategy/simulate",
    response_model=SimulateResponse,
    status_code=status.HTTP_200_OK,
)
async def simulate(
    payload: SimulateRequest,
    service: PlanComparisonService = Depends(get_comparison_service),
) -> SimulateResponse:
    """What-if projections for attending or skipping more lectures."""
    inputs = _to_inputs(payload)
    response = SimulateResponse()
    try:
        if payload.attend_more is not None:
            attend = service.simulate_attend(inputs, payload.attend_more)
            response.attend = AttendSimulationResponse(
                lectures=attend.lectures,
                projected_percentage=attend.projected_percentage,
                remaining_required=finite_or_none(attend.remaining_required),
                target_achieved=attend.target_achieved,
                risk_level=attend.risk_level,
            )
        if payload.skip_more is not None:
            skip = service.simulate_skip(inputs, payload.skip_more)
            response.skip = SkipSimulationResponse(
                lectures=skip.lectures,
                current_percentage=skip.current_percentage,
                new_percentage=skip.new_percentage,
                percentage_drop=skip.percentage_drop,
                new_required=finite_or_none(skip.new_required),
                extra_required=finite_or_none(skip.extra_required),
                recovery_difficult=skip.recovery_difficult,
                risk_level=skip.risk_level,
            )
    except (AttendanceError, DivisionNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except TimetableDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected simulation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to run simulation",
        ) from exc

    return response


@router.post(
    "/strategy/risk-curve",
    response_model=RiskCurveResponse,
    status_code=status.HTTP_200_OK,
)
async def risk_curve(
    payload: PlannerRequest,
    service: PlanComparisonService = Depends(get_comparison_service),
) -> RiskCurveResponse:
    """Attendance curve over consecutive attended lectures with mode endpoints."""
    try:
        curve = service.risk_curve(_to_inputs(payload))
    except (AttendanceError, DivisionNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except TimetableDataError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected risk curve failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build risk curve",
        ) from exc

    return RiskCurveResponse(
        required_lectures=finite_or_none(curve.required_lectures),
        max_lectures=curve.max_lectures,
        points=[
            CurvePointResponse(
                lectures=point.lectures,
                percentage=point.percentage,
                risk_level=point.risk_level,
            )
            for point in curve.points
        ],
        mode_endpoints=[
            ModeEndpointResponse(
                mode=endpoint.mode,
                lectures=endpoint.lectures,
                percentage=endpoint.percentage,
                risk_level=endpoint.risk_level,
            )
            for endpoint in curve.mode_endpoints
        ],
    )
