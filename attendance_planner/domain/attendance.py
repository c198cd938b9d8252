"""Attendance arithmetic: percentages, lectures needed and lectures missable.

Every public function validates its inputs first and raises
``AttendanceError`` on bad data. Counts flow in three flavours: ``conducted``
lectures held, ``attended`` lectures present for, and ``no_attendance``
lectures held without attendance being taken. The latter are removed from the
denominator, giving the *effective* conducted count.
"""

from __future__ import annotations

import math
from typing import Optional

from attendance_planner.domain.models import CalculationResult


# Absorbs representation error so an exact 15.0 never ceils to 16.
CEIL_EPSILON = 1e-9


class AttendanceError(Exception):
    """Raised when attendance inputs are invalid."""


def _is_finite(value: float) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def _is_whole(value: float) -> bool:
    return float(value).is_integer()


def validate_inputs(
    attended: float,
    conducted: float,
    target: Optional[float] = None,
    no_attendance: float = 0,
) -> None:
    counts = (attended, conducted, no_attendance)
    if not all(_is_finite(value) for value in counts):
        raise AttendanceError("Inputs must be finite numbers.")
    if any(value < 0 for value in counts):
        raise AttendanceError("Lecture counts cannot be negative.")
    if not all(_is_whole(value) for value in counts):
        raise AttendanceError("Lecture counts must be whole numbers.")
    if no_attendance > conducted:
        raise AttendanceError("No-attendance lectures cannot exceed conducted lectures.")
    if attended > conducted - no_attendance:
        raise AttendanceError(
            "Attended lectures cannot exceed effective conducted lectures "
            "(conducted - no attendance)."
        )
    if target is not None:
        if not _is_finite(target):
            raise AttendanceError("Target must be a finite number.")
        if target <= 0 or target > 100:
            raise AttendanceError("Target must be greater than 0% and at most 100%.")


def calculate_attendance(attended: int, conducted: int, no_attendance: int = 0) -> float:
    """Current percentage; 0 when no lecture counts towards the denominator."""
    validate_inputs(attended, conducted, no_attendance=no_attendance)
    effective = conducted - no_attendance
    if effective == 0:
        return 0.0
    return attended / effective * 100


def lectures_needed(
    attended: int,
    conducted: int,
    target: float,
    no_attendance: int = 0,
) -> float:
    """Consecutive lectures to attend before reaching ``target``.

    Solves ``(attended + x) / (effective + x) >= target / 100`` for the
    smallest non-negative integer ``x``. A 100% target cannot be recovered
    once a lecture is missed, so that case returns ``math.inf``.
    """
    validate_inputs(attended, conducted, target, no_attendance)
    effective = conducted - no_attendance
    if effective == 0:
        return 1 if target > 0 else 0

    current = attended / effective * 100
    if current >= target:
        return 0

    if target == 100:
        return 0 if attended == effective else math.inf

    fraction = target / 100
    raw = (fraction * effective - attended) / (1 - fraction)
    return max(0, math.ceil(raw - CEIL_EPSILON))


def lectures_missable(
    attended: int,
    conducted: int,
    target: float,
    no_attendance: int = 0,
) -> int:
    """Consecutive lectures that can be skipped while staying at ``target``."""
    validate_inputs(attended, conducted, target, no_attendance)
    effective = conducted - no_attendance
    if effective == 0:
        return 0

    current = attended / effective * 100
    if current < target:
        return 0

    fraction = target / 100
    raw = (attended - fraction * effective) / fraction
    return max(0, math.floor(raw + CEIL_EPSILON))


def round_half_up(value: float, digits: int) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def full_calculation(
    attended: int,
    conducted: int,
    target: float,
    no_attendance: int = 0,
) -> CalculationResult:
    validate_inputs(attended, conducted, target, no_attendance)
    current = round_half_up(calculate_attendance(attended, conducted, no_attendance), 2)
    return CalculationResult(
        current_percentage=current,
        is_above_target=current >= target,
        target=target,
        lectures_needed=lectures_needed(attended, conducted, target, no_attendance),
        lectures_missable=lectures_missable(attended, conducted, target, no_attendance),
        conducted=int(conducted),
        attended=int(attended),
        no_attendance=int(no_attendance),
    )
