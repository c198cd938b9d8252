"""Tests for attendance arithmetic and its input validation."""

from __future__ import annotations

import math

import pytest

from attendance_planner.domain.attendance import (
    AttendanceError,
    calculate_attendance,
    full_calculation,
    lectures_missable,
    lectures_needed,
    validate_inputs,
)


def _brute_force_needed(attended: int, effective: int, target: int) -> int:
    extra = 0
    while (attended + extra) * 100 < target * (effective + extra):
        extra += 1
    return extra


def _brute_force_missable(attended: int, effective: int, target: int) -> int:
    if attended * 100 < target * effective:
        return 0
    extra = 0
    while attended * 100 >= target * (effective + extra + 1):
        extra += 1
    return extra


# --- calculate_attendance ---

def test_calculate_attendance_simple_ratio() -> None:
    assert calculate_attendance(80, 100) == 80


def test_calculate_attendance_matches_ratio_for_all_counts() -> None:
    for conducted in range(1, 40):
        for attended in range(conducted + 1):
            expected = attended / conducted * 100
            assert calculate_attendance(attended, conducted) == pytest.approx(expected)


def test_calculate_attendance_excludes_no_attendance_lectures() -> None:
    assert calculate_attendance(30, 40, 5) == pytest.approx(30 / 35 * 100)


def test_calculate_attendance_zero_effective_is_zero_percent() -> None:
    assert calculate_attendance(0, 5, 5) == 0
    assert calculate_attendance(0, 0) == 0


# --- lectures_needed ---

def test_lectures_needed_scenarios() -> None:
    assert lectures_needed(60, 100, 75) == 60
    assert lectures_needed(50, 100, 75) == 100
    assert lectures_needed(80, 100, 75) == 0
    assert lectures_needed(75, 100, 75) == 0


def test_lectures_needed_absorbs_float_overshoot() -> None:
    """(6 + 30) / (10 + 30) is exactly 90%, the raw float is 30.000000000000007."""
    assert lectures_needed(6, 10, 90) == 30


def test_lectures_needed_zero_effective_needs_one_lecture() -> None:
    assert lectures_needed(0, 0, 75) == 1
    assert lectures_needed(0, 6, 75, 6) == 1


def test_lectures_needed_full_target() -> None:
    assert lectures_needed(9, 10, 100) == math.inf
    assert lectures_needed(10, 10, 100) == 0
    assert lectures_needed(8, 10, 100, 2) == 0


def test_lectures_needed_matches_brute_force() -> None:
    for target in (50, 60, 65, 70, 75, 80, 85, 90, 95, 99):
        for effective in range(1, 45):
            for attended in range(effective + 1):
                assert lectures_needed(attended, effective, target) == _brute_force_needed(
                    attended, effective, target
                ), (attended, effective, target)


def test_lectures_needed_is_monotonic_in_target() -> None:
    for attended, conducted, no_attendance in ((30, 50, 0), (12, 40, 4), (0, 10, 0), (45, 45, 0)):
        previous = -1.0
        for target in range(1, 101):
            current = lectures_needed(attended, conducted, target, no_attendance)
            assert current >= previous
            previous = current


# --- lectures_missable ---

def test_lectures_missable_scenarios() -> None:
    assert lectures_missable(80, 100, 75) == 6
    assert lectures_missable(30, 40, 75, 5) == 5
    assert lectures_missable(50, 100, 75) == 0


def test_lectures_missable_zero_effective() -> None:
    assert lectures_missable(0, 0, 75) == 0
    assert lectures_missable(0, 3, 75, 3) == 0


def test_lectures_missable_matches_brute_force() -> None:
    for target in (50, 60, 65, 70, 75, 80, 85, 90, 95, 100):
        for effective in range(1, 45):
            for attended in range(effective + 1):
                assert lectures_missable(attended, effective, target) == _brute_force_missable(
                    attended, effective, target
                ), (attended, effective, target)


def test_lectures_missable_is_monotonic_in_target() -> None:
    for attended, conducted, no_attendance in ((45, 50, 0), (36, 40, 4), (10, 10, 0)):
        previous = math.inf
        for target in range(1, 101):
            current = lectures_missable(attended, conducted, target, no_attendance)
            assert current <= previous
            previous = current


def test_arithmetic_is_idempotent() -> None:
    for func in (lectures_needed, lectures_missable):
        assert func(33, 50, 80, 3) == func(33, 50, 80, 3)
    assert full_calculation(33, 50, 80, 3) == full_calculation(33, 50, 80, 3)


# --- full_calculation ---

def test_full_calculation_with_no_attendance() -> None:
    result = full_calculation(30, 40, 80, 5)

    assert result.current_percentage == 85.71
    assert result.is_above_target is True
    assert result.lectures_needed == 0
    assert result.lectures_missable == 2
    assert result.target == 80
    assert result.conducted == 40
    assert result.attended == 30
    assert result.no_attendance == 5


def test_full_calculation_below_target() -> None:
    result = full_calculation(2, 3, 75)

    assert result.current_percentage == 66.67
    assert result.is_above_target is False
    assert result.lectures_needed == 1
    assert result.lectures_missable == 0


# --- validate_inputs ---

def test_valid_inputs_pass() -> None:
    validate_inputs(30, 40, 80, 5)
    validate_inputs(0, 0)
    validate_inputs(10, 10, 100)


def test_negative_counts_raise() -> None:
    with pytest.raises(AttendanceError, match="negative"):
        validate_inputs(-1, 10)
    with pytest.raises(AttendanceError, match="negative"):
        lectures_needed(5, 10, 75, -1)


def test_non_integer_counts_raise() -> None:
    with pytest.raises(AttendanceError, match="whole numbers"):
        calculate_attendance(2.5, 10)


def test_non_finite_inputs_raise() -> None:
    with pytest.raises(AttendanceError, match="finite"):
        calculate_attendance(math.nan, 10)
    with pytest.raises(AttendanceError, match="finite"):
        lectures_missable(5, math.inf, 75)
    with pytest.raises(AttendanceError, match="finite"):
        lectures_needed(5, 10, math.nan)


def test_no_attendance_exceeding_conducted_raises() -> None:
    with pytest.raises(AttendanceError, match="No-attendance"):
        calculate_attendance(0, 5, 6)


def test_attended_exceeding_effective_raises() -> None:
    with pytest.raises(AttendanceError, match="effective conducted"):
        full_calculation(36, 40, 75, 5)
    with pytest.raises(AttendanceError, match="effective conducted"):
        calculate_attendance(11, 10)


def test_target_out_of_range_raises() -> None:
    for target in (0, -5, 100.5, 150):
        with pytest.raises(AttendanceError, match="Target"):
            full_calculation(5, 10, target)


def test_target_exactly_one_hundred_passes() -> None:
    validate_inputs(5, 10, 100)


def test_above_target_uses_reported_percentage() -> None:
    # 29 / 100 * 100 is 28.999999999999996 before rounding.
    result = full_calculation(29, 100, 29)

    assert result.current_percentage == 29.0
    assert result.is_above_target is True
    assert result.lectures_needed == 0


def test_counts_beyond_float_range_raise_attendance_error() -> None:
    with pytest.raises(AttendanceError, match="finite"):
        lectures_needed(10**400, 10**400, 75)
    with pytest.raises(AttendanceError, match="finite"):
        validate_inputs(5, 10, 10**400)
