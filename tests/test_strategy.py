"""Tests for the pure planner policies."""

from __future__ import annotations

import math

from attendance_planner.domain.models import FutureSlot, RiskLevel, ScheduleEntry, StrategyMode
from attendance_planner.domain.strategy import (
    calculate_target_days,
    compute_actual_attend,
    compute_required_lectures,
    compute_skip_allowance,
    daily_lecture_pattern,
    get_risk_level,
    project_after_plan,
    select_slots_by_mode,
)


WEEK_PATTERN = {
    "Monday": 4,
    "Tuesday": 3,
    "Wednesday": 4,
    "Thursday": 3,
    "Friday": 3,
    "Saturday": 2,
}


def _slots(count: int) -> list[FutureSlot]:
    return [
        FutureSlot(
            day="Monday",
            time=f"{9 + position:02d}:00 - {10 + position:02d}:00",
            room="301",
            type="Lecture",
            faculty="RKS",
            subject_short=f"S{position}",
        )
        for position in range(count)
    ]


def _entry(day: str, subject: str) -> ScheduleEntry:
    return ScheduleEntry(
        day=day,
        start_time="09:00",
        end_time="10:00",
        room="301",
        type="Lecture",
        faculty="RKS",
        subject_short=subject,
    )


# --- compute_required_lectures ---

def test_required_lectures_formula() -> None:
    assert compute_required_lectures(50, 100, 75) == 100
    assert compute_required_lectures(5, 10, 75) == 10
    assert compute_required_lectures(6, 10, 90) == 30


def test_required_lectures_zero_when_target_met() -> None:
    assert compute_required_lectures(80, 100, 75) == 0
    assert compute_required_lectures(75, 100, 75) == 0
    assert compute_required_lectures(100, 100, 75) == 0


def test_required_lectures_zero_effective_has_no_obligation() -> None:
    assert compute_required_lectures(0, 0, 75) == 0


def test_required_lectures_full_target() -> None:
    assert compute_required_lectures(9, 10, 100) == math.inf
    assert compute_required_lectures(10, 10, 100) == 0


# --- compute_skip_allowance ---

def test_skip_allowance() -> None:
    assert compute_skip_allowance(80, 100, 75) == 6
    assert compute_skip_allowance(30, 35, 75) == 5
    assert compute_skip_allowance(50, 100, 75) == 0
    assert compute_skip_allowance(0, 0, 75) == 0


# --- compute_actual_attend ---

def test_actual_attend_zero_requirement() -> None:
    for mode in StrategyMode:
        assert compute_actual_attend(0, mode, 19) == 0


def test_actual_attend_per_mode() -> None:
    assert compute_actual_attend(10, StrategyMode.EASY, 19) == 10
    assert compute_actual_attend(10, StrategyMode.MEDIUM, 19) == 11
    assert compute_actual_attend(20, StrategyMode.MEDIUM, 100) == 22
    assert compute_actual_attend(10, StrategyMode.HARD, 19) == 10


def test_actual_attend_capped_by_available_slots() -> None:
    assert compute_actual_attend(10, StrategyMode.MEDIUM, 5) == 5
    assert compute_actual_attend(10, StrategyMode.HARD, 4) == 4


def test_actual_attend_unbounded_requirement_takes_every_slot() -> None:
    for mode in StrategyMode:
        assert compute_actual_attend(math.inf, mode, 19) == 19


def test_actual_attend_accepts_mode_strings() -> None:
    assert compute_actual_attend(10, "medium", 19) == 11


# --- select_slots_by_mode ---

def test_easy_mode_takes_every_third_slot() -> None:
    available = _slots(10)
    selected = select_slots_by_mode(available, 3, StrategyMode.EASY)

    assert [slot.subject_short for slot in selected] == ["S0", "S3", "S6"]
    assert [slot.index for slot in selected] == [1, 2, 3]


def test_medium_mode_takes_every_second_slot() -> None:
    selected = select_slots_by_mode(_slots(10), 10, StrategyMode.MEDIUM)

    assert [slot.subject_short for slot in selected] == ["S0", "S2", "S4", "S6", "S8"]
    assert selected[-1].index == 5


def test_hard_mode_takes_consecutive_slots() -> None:
    selected = select_slots_by_mode(_slots(10), 4, StrategyMode.HARD)

    assert [slot.subject_short for slot in selected] == ["S0", "S1", "S2", "S3"]


def test_selection_keeps_slot_details() -> None:
    available = _slots(2)
    selected = select_slots_by_mode(available, 1, StrategyMode.HARD)[0]

    assert selected.day == available[0].day
    assert selected.time == available[0].time
    assert selected.room == available[0].room
    assert selected.faculty == available[0].faculty


def test_selection_empty_cases() -> None:
    assert select_slots_by_mode(_slots(5), 0, StrategyMode.HARD) == []
    assert select_slots_by_mode([], 5, StrategyMode.EASY) == []


# --- daily_lecture_pattern ---

def test_daily_pattern_skips_placeholders() -> None:
    entries = [
        _entry("Monday", "ML"),
        _entry("Monday", "CN"),
        _entry("Monday", "library"),
        _entry("Tuesday", "Self Study Hour"),
        _entry("Tuesday", "CD"),
        _entry("Wednesday", ""),
    ]

    assert daily_lecture_pattern(entries) == {"Monday": 2, "Tuesday": 1}


# --- calculate_target_days ---

def test_target_days_walks_weekly_capacity() -> None:
    assert calculate_target_days(10, WEEK_PATTERN) == 3
    assert calculate_target_days(11, WEEK_PATTERN) == 3
    assert calculate_target_days(12, WEEK_PATTERN) == 4
    assert calculate_target_days(19, WEEK_PATTERN) == 6
    assert calculate_target_days(20, WEEK_PATTERN) == 7


def test_target_days_zero_requirement() -> None:
    assert calculate_target_days(0, WEEK_PATTERN) == 0
    assert calculate_target_days(-3, WEEK_PATTERN) == 0


def test_target_days_zero_capacity() -> None:
    assert calculate_target_days(10, {}) == 0
    assert calculate_target_days(10, {"Monday": 0, "Sunday": 6}) == 0


def test_target_days_iteration_limit_bounds_unbounded_requirement() -> None:
    assert calculate_target_days(math.inf, WEEK_PATTERN) == 1000
    assert calculate_target_days(math.inf, WEEK_PATTERN, iteration_limit=12) == 12


# --- project_after_plan / get_risk_level ---

def test_project_after_plan() -> None:
    assert project_after_plan(50, 100, 100, 100) == 75
    assert project_after_plan(80, 100, 0, 0) == 80
    assert project_after_plan(0, 0, 0, 0) == 100


def test_risk_levels() -> None:
    assert get_risk_level(80, 75) is RiskLevel.SAFE
    assert get_risk_level(75, 75) is RiskLevel.SAFE
    assert get_risk_level(70, 75) is RiskLevel.WARNING
    assert get_risk_level(65, 75) is RiskLevel.WARNING
    assert get_risk_level(50, 75) is RiskLevel.CRITICAL


def test_risk_level_custom_margin() -> None:
    assert get_risk_level(70, 75, warning_margin=2) is RiskLevel.CRITICAL
