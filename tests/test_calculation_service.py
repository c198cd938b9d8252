from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from attendance_planner.domain.attendance import AttendanceError
from attendance_planner.services.calculation_service import AttendanceCalculationService


FIXED_TIME = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _build_service() -> AttendanceCalculationService:
    return AttendanceCalculationService(clock=lambda: FIXED_TIME)


def test_calculate_stamps_fresh_record() -> None:
    service = _build_service()
    first = service.calculate(conducted=100, attended=80, target=75)
    second = service.calculate(conducted=100, attended=80, target=75)

    assert first.calculated_at == FIXED_TIME
    assert first.id != second.id
    assert first.result == second.result
    assert first.result.current_percentage == 80.0
    assert first.result.lectures_missable == 6


def test_calculate_reports_unreachable_full_target() -> None:
    record = _build_service().calculate(conducted=10, attended=9, target=100)

    assert math.isinf(record.result.lectures_needed)
    assert record.result.is_above_target is False


def test_calculate_propagates_validation_errors() -> None:
    with pytest.raises(AttendanceError, match="No-attendance"):
        _build_service().calculate(conducted=5, attended=0, target=75, no_attendance=6)


def test_history_is_never_stored() -> None:
    service = _build_service()
    service.calculate(conducted=10, attended=5, target=75)

    assert service.history() == []
