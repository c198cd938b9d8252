"""Attendance calculation service for the calculate endpoint."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from attendance_planner.domain.attendance import full_calculation
from attendance_planner.domain.models import CalculationRecord
from attendance_planner.utils.config import Settings, get_settings
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)

HISTORY_MESSAGE = (
    "History is managed client-side. No calculation results are stored by the server."
)


class AttendanceCalculationService:
    """Stamps fresh calculation results; keeps no reference to past ones."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def calculate(
        self,
        *,
        conducted: int,
        attended: int,
        target: float,
        no_attendance: int = 0,
    ) -> CalculationRecord:
        result = full_calculation(attended, conducted, target, no_attendance)
        record = CalculationRecord(id=str(uuid4()), calculated_at=self._clock(), result=result)
        logger.debug(
            "Calculated attendance id=%s current=%.2f target=%.2f",
            record.id,
            result.current_percentage,
            target,
        )
        return record

    def history(self) -> list[CalculationRecord]:
        return []
