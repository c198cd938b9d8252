"""Pure planner policies shared by the strategy and comparison services.

These functions assume counts were already validated through
``attendance.validate_inputs`` and operate on effective conducted counts.
They never raise for well-formed numbers.

``required_lectures`` is a property of the inputs only. Modes change which
slots are picked and how many extra are scheduled, never the requirement.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Mapping, Sequence

from attendance_planner.domain.models import (
    FutureSlot,
    RecommendedSlot,
    RiskLevel,
    ScheduleEntry,
    StrategyMode,
)


MEDIUM_BUFFER_RATIO = 0.10
TARGET_DAYS_ITERATION_LIMIT = 1000
RISK_WARNING_MARGIN = 10.0
CANONICAL_WEEK = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Every n-th chronological slot a mode keeps.
SLOT_STRIDE: dict[StrategyMode, int] = {
    StrategyMode.EASY: 3,
    StrategyMode.MEDIUM: 2,
    StrategyMode.HARD: 1,
}


def compute_required_lectures(attended: int, effective_conducted: int, target: float) -> float:
    if effective_conducted == 0:
        return 0

    current = attended / effective_conducted * 100
    if current >= target:
        return 0

    if target >= 100:
        return math.inf if attended < effective_conducted else 0

    fraction = target / 100
    raw = (fraction * effective_conducted - attended) / (1 - fraction)
    return max(0, math.ceil(raw - 1e-9))


def compute_skip_allowance(attended: int, effective_conducted: int, target: float) -> int:
    if effective_conducted == 0:
        return 0

    current = attended / effective_conducted * 100
    if current < target:
        return 0

    fraction = target / 100
    raw = (attended - fraction * effective_conducted) / fraction
    return max(0, math.floor(raw + 1e-9))


def _easy_attend(required: float, total_slots: int, buffer_ratio: float) -> int:
    return int(min(required, total_slots))


def _medium_attend(required: float, total_slots: int, buffer_ratio: float) -> int:
    if math.isinf(required):
        return total_slots
    buffer = math.ceil(required * buffer_ratio)
    return int(min(required + buffer, total_slots))


def _hard_attend(required: float, total_slots: int, buffer_ratio: float) -> int:
    return int(min(required, total_slots))


_ATTEND_POLICIES = {
    StrategyMode.EASY: _easy_attend,
    StrategyMode.MEDIUM: _medium_attend,
    StrategyMode.HARD: _hard_attend,
}


def compute_actual_attend(
    required: float,
    mode: StrategyMode,
    total_slots: int,
    buffer_ratio: float = MEDIUM_BUFFER_RATIO,
) -> int:
    """Lectures a mode actually schedules; medium adds a safety buffer."""
    if required <= 0:
        return 0
    return _ATTEND_POLICIES[StrategyMode(mode)](required, total_slots, buffer_ratio)


def select_slots_by_mode(
    available_slots: Sequence[FutureSlot],
    actual_attend: int,
    mode: StrategyMode,
) -> list[RecommendedSlot]:
    """Pick slots by stride: easy spreads out, hard attends consecutively."""
    if actual_attend <= 0 or not available_slots:
        return []

    stride = SLOT_STRIDE[StrategyMode(mode)]
    chosen = list(available_slots[::stride])[:actual_attend]
    return [
        RecommendedSlot(
            day=slot.day,
            time=slot.time,
            room=slot.room,
            type=slot.type,
            faculty=slot.faculty,
            subject_short=slot.subject_short,
            index=position,
        )
        for position, slot in enumerate(chosen, start=1)
    ]


def daily_lecture_pattern(entries: Iterable[ScheduleEntry]) -> dict[str, int]:
    """Weekday histogram of teaching slots."""
    counts = Counter(entry.day for entry in entries if entry.is_teaching)
    return dict(counts)


def calculate_target_days(
    required_lectures: float,
    daily_pattern: Mapping[str, int],
    iteration_limit: int = TARGET_DAYS_ITERATION_LIMIT,
) -> int:
    """Walk a Monday-Saturday cycle until the daily capacity covers the requirement.

    The iteration limit bounds the walk; it can only be reached by
    unbounded requirements since all-zero capacity returns early.
    """
    if required_lectures <= 0:
        return 0
    if not any(daily_pattern.get(day, 0) > 0 for day in CANONICAL_WEEK):
        return 0

    remaining = required_lectures
    days = 0
    while remaining > 0 and days < iteration_limit:
        weekday = CANONICAL_WEEK[days % len(CANONICAL_WEEK)]
        remaining -= daily_pattern.get(weekday, 0)
        days += 1
    return days


def project_after_plan(
    attended: int,
    conducted: int,
    extra_attended: int,
    extra_conducted: int,
) -> float:
    new_attended = attended + extra_attended
    new_conducted = conducted + extra_conducted
    if new_conducted == 0:
        return 100.0
    return new_attended / new_conducted * 100


def get_risk_level(
    percentage: float,
    target: float,
    warning_margin: float = RISK_WARNING_MARGIN,
) -> RiskLevel:
    if percentage >= target:
        return RiskLevel.SAFE
    if percentage >= target - warning_margin:
        return RiskLevel.WARNING
    return RiskLevel.CRITICAL
