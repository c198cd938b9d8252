"""HTTP controller layer for attendance calculation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from attendance_planner.controllers.dependencies import get_calculation_service
from attendance_planner.controllers.schemas import AttendanceCounts, CamelModel, finite_or_none
from attendance_planner.domain.attendance import AttendanceError
from attendance_planner.domain.models import CalculationRecord
from attendance_planner.services.calculation_service import (
    HISTORY_MESSAGE,
    AttendanceCalculationService,
)
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


class CalculateResponse(CamelModel):
    id: str
    current_percentage: float = Field(ge=0.0, le=100.0)
    is_above_target: bool
    target: float
    lectures_needed: Optional[int] = Field(default=None, ge=0)
    lectures_missable: int = Field(ge=0)
    conducted: int = Field(ge=0)
    attended: int = Field(ge=0)
    no_attendance: int = Field(ge=0)
    calculated_at: datetime


class HistoryResponse(CamelModel):
    data: list[CalculateResponse]
    message: str


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    status_code=status.HTTP_200_OK,
)
async def calculate(
    payload: AttendanceCounts,
    service: AttendanceCalculationService = Depends(get_calculation_service),
) -> CalculateResponse:
    """Compute current standing, lectures needed and lectures missable."""
    try:
        record = service.calculate(
            conducted=payload.conducted,
            attended=payload.attended,
            target=payload.target,
            no_attendance=payload.no_attendance or 0,
        )
    except AttendanceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected calculation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate attendance",
        ) from exc

    return _to_response(record)


@router.get(
    "/history",
    response_model=HistoryResponse,
    status_code=status.HTTP_200_OK,
)
async def history(
    service: AttendanceCalculationService = Depends(get_calculation_service),
) -> HistoryResponse:
    """History lives with the client; the server keeps none."""
    return HistoryResponse(
        data=[_to_response(record) for record in service.history()],
        message=HISTORY_MESSAGE,
    )


def _to_response(record: CalculationRecord) -> CalculateResponse:
    result = record.result
    return CalculateResponse(
        id=record.id,
        current_percentage=result.current_percentage,
        is_above_target=result.is_above_target,
        target=result.target,
        lectures_needed=finite_or_none(result.lectures_needed),
        lectures_missable=result.lectures_missable,
        conducted=result.conducted,
        attended=result.attended,
        no_attendance=result.no_attendance,
        calculated_at=record.calculated_at,
    )
