"""Strategy planning service: mode-based recommendation of future lectures.

Every call recomputes the plan from the timetable and the caller's counts;
nothing is cached between mode switches.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Sequence

from attendance_planner.domain.attendance import round_half_up, validate_inputs
from attendance_planner.domain.models import (
    FutureSlot,
    GlobalStrategyPlan,
    ModeStats,
    PlannerInputs,
    PlanSummary,
    StrategyMode,
)
from attendance_planner.domain.strategy import (
    calculate_target_days,
    compute_actual_attend,
    compute_required_lectures,
    compute_skip_allowance,
    daily_lecture_pattern,
    project_after_plan,
    select_slots_by_mode,
)
from attendance_planner.repository.timetable_repository import TimetableRepository
from attendance_planner.utils.config import Settings, get_settings
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)


class StrategyPlannerService:
    """Builds global strategy plans against a division's remaining timetable."""

    def __init__(
        self,
        repository: Optional[TimetableRepository] = None,
        settings: Optional[Settings] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or TimetableRepository(self._settings)
        self._today = today_provider or date.today

    @property
    def repository(self) -> TimetableRepository:
        return self._repository

    def today(self) -> date:
        return self._today()

    def get_future_slots(self, division: str) -> list[FutureSlot]:
        """Chronological teaching slots from today up to the teaching end date."""
        entries = self._repository.get_lectures_until_teaching_end(
            division,
            today=self._today(),
            teaching_end=self._settings.teaching_end_date,
        )
        return [
            FutureSlot(
                day=entry.day,
                time=entry.time_range,
                room=entry.room,
                type=entry.type,
                faculty=entry.faculty,
                subject_short=entry.subject_short,
            )
            for entry in entries
            if entry.is_teaching
        ]

    def get_daily_lecture_pattern(self, division: str) -> dict[str, int]:
        return daily_lecture_pattern(self._repository.get_schedule_for_division(division))

    def calculate_mode_stats(
        self,
        mode: StrategyMode,
        required: float,
        available_slots: Sequence[FutureSlot],
        attended: int,
        effective_conducted: int,
        division: str,
    ) -> ModeStats:
        mode = StrategyMode(mode)
        total_slots = len(available_slots)
        actual_attend = compute_actual_attend(
            required,
            mode,
            total_slots,
            buffer_ratio=self._settings.medium_buffer_ratio,
        )
        recommended = select_slots_by_mode(available_slots, actual_attend, mode)
        scheduled_count = len(recommended)

        days_to_recover = calculate_target_days(
            actual_attend,
            self.get_daily_lecture_pattern(division),
            iteration_limit=self._settings.target_days_iteration_limit,
        )
        projected = project_after_plan(attended, effective_conducted, scheduled_count, scheduled_count)

        return ModeStats(
            mode=mode,
            actual_attend=actual_attend,
            scheduled_count=scheduled_count,
            skip_count=total_slots - scheduled_count,
            days_to_recover=days_to_recover,
            projected_percentage=round_half_up(projected, 1),
            recommended_slots=recommended,
        )

    def generate_global_plan(self, inputs: PlannerInputs) -> GlobalStrategyPlan:
        validate_inputs(inputs.attended, inputs.conducted, inputs.target, inputs.no_attendance)
        self._repository.require_division(inputs.division)

        effective = inputs.effective_conducted
        required = compute_required_lectures(inputs.attended, effective, inputs.target)
        safe_skip_allowance = compute_skip_allowance(inputs.attended, effective, inputs.target)
        current = project_after_plan(inputs.attended, effective, 0, 0)

        available_slots = self.get_future_slots(inputs.division)
        stats = self.calculate_mode_stats(
            inputs.mode,
            required,
            available_slots,
            inputs.attended,
            effective,
            inputs.division,
        )
        logger.info(
            "Generated %s plan for division=%s required=%s scheduled=%d of %d slots",
            stats.mode.value,
            inputs.division,
            required,
            stats.scheduled_count,
            len(available_slots),
        )

        return GlobalStrategyPlan(
            mode=stats.mode,
            summary=PlanSummary(
                required_lectures=required,
                scheduled_count=stats.scheduled_count,
                skip_count=stats.skip_count,
                days_to_recover=0 if required == 0 else stats.days_to_recover,
                safe_skip_allowance=safe_skip_allowance,
                projected_percentage=stats.projected_percentage,
                current_percentage=round_half_up(current, 1),
                total_available_slots=len(available_slots),
                actual_attend=stats.actual_attend,
            ),
            recommended_slots=stats.recommended_slots,
        )
