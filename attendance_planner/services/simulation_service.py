"""Side-by-side mode comparison and what-if projections.

Nothing here introduces new planning policy: every figure is a recombination
of the arithmetic and planner primitives with adjusted inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from attendance_planner.domain.attendance import AttendanceError, round_half_up, validate_inputs
from attendance_planner.domain.models import ModeStats, PlannerInputs, RiskLevel, StrategyMode
from attendance_planner.domain.strategy import (
    compute_required_lectures,
    get_risk_level,
    project_after_plan,
)
from attendance_planner.services.strategy_service import StrategyPlannerService
from attendance_planner.utils.config import Settings, get_settings
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)

MIN_CURVE_LECTURES = 30
CURVE_REQUIREMENT_FACTOR = 1.5


@dataclass(frozen=True)
class ModeComparison:
    required_lectures: float
    total_available_slots: int
    target_achieved: bool
    not_enough_slots: bool
    modes: list[ModeStats]


@dataclass(frozen=True)
class AttendSimulation:
    lectures: int
    projected_percentage: float
    remaining_required: float
    target_achieved: bool
    risk_level: RiskLevel


@dataclass(frozen=True)
class SkipSimulation:
    lectures: int
    current_percentage: float
    new_percentage: float
    percentage_drop: float
    new_required: float
    extra_required: float
    recovery_difficult: bool
    risk_level: RiskLevel


@dataclass(frozen=True)
class CurvePoint:
    lectures: int
    percentage: float
    risk_level: RiskLevel


@dataclass(frozen=True)
class ModeEndpoint:
    mode: StrategyMode
    lectures: int
    percentage: float
    risk_level: RiskLevel


@dataclass(frozen=True)
class RiskCurve:
    required_lectures: float
    max_lectures: int
    points: list[CurvePoint]
    mode_endpoints: list[ModeEndpoint]


class PlanComparisonService:
    """Re-runs the planner with adjusted inputs for comparisons and what-ifs."""

    def __init__(
        self,
        planner: Optional[StrategyPlannerService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._planner = planner or StrategyPlannerService(settings=self._settings)

    def _validate(self, inputs: PlannerInputs) -> None:
        validate_inputs(inputs.attended, inputs.conducted, inputs.target, inputs.no_attendance)
        self._planner.repository.require_division(inputs.division)

    def _risk(self, percentage: float, target: float) -> RiskLevel:
        return get_risk_level(percentage, target, self._settings.risk_warning_margin)

    def compare_modes(self, inputs: PlannerInputs) -> ModeComparison:
        self._validate(inputs)
        effective = inputs.effective_conducted
        required = compute_required_lectures(inputs.attended, effective, inputs.target)
        available_slots = self._planner.get_future_slots(inputs.division)

        modes = [
            self._planner.calculate_mode_stats(
                mode,
                required,
                available_slots,
                inputs.attended,
                effective,
                inputs.division,
            )
            for mode in StrategyMode
        ]
        return ModeComparison(
            required_lectures=required,
            total_available_slots=len(available_slots),
            target_achieved=required == 0,
            not_enough_slots=required > 0 and len(available_slots) < required,
            modes=modes,
        )

    def simulate_attend(self, inputs: PlannerInputs, lectures: int) -> AttendSimulation:
        """Project attending ``lectures`` more, each one also newly conducted."""
        self._validate(inputs)
        if lectures < 0:
            raise AttendanceError("Simulated lecture count cannot be negative.")

        effective = inputs.effective_conducted
        projected = project_after_plan(inputs.attended, effective, lectures, lectures)
        remaining = compute_required_lectures(
            inputs.attended + lectures,
            effective + lectures,
            inputs.target,
        )
        return AttendSimulation(
            lectures=lectures,
            projected_percentage=round_half_up(projected, 1),
            remaining_required=max(remaining, 0),
            target_achieved=projected >= inputs.target,
            risk_level=self._risk(projected, inputs.target),
        )

    def simulate_skip(self, inputs: PlannerInputs, lectures: int) -> SkipSimulation:
        """Project skipping ``lectures`` more and the recovery it costs."""
        self._validate(inputs)
        if lectures < 0:
            raise AttendanceError("Simulated lecture count cannot be negative.")

        effective = inputs.effective_conducted
        current = project_after_plan(inputs.attended, effective, 0, 0)
        new_percentage = project_after_plan(inputs.attended, effective, 0, lectures)
        current_required = compute_required_lectures(inputs.attended, effective, inputs.target)
        new_required = compute_required_lectures(inputs.attended, effective + lectures, inputs.target)

        if math.isinf(new_required):
            extra_required = 0 if math.isinf(current_required) else math.inf
        else:
            extra_required = max(0, new_required - current_required)

        return SkipSimulation(
            lectures=lectures,
            current_percentage=round_half_up(current, 1),
            new_percentage=round_half_up(new_percentage, 1),
            percentage_drop=round_half_up(current - new_percentage, 1),
            new_required=new_required,
            extra_required=extra_required,
            recovery_difficult=(
                math.isinf(new_required)
                or new_required > self._settings.recovery_difficulty_threshold
            ),
            risk_level=self._risk(new_percentage, inputs.target),
        )

    def risk_curve(self, inputs: PlannerInputs) -> RiskCurve:
        """Percentage after n consecutive attended lectures, with mode endpoints."""
        self._validate(inputs)
        effective = inputs.effective_conducted
        required = compute_required_lectures(inputs.attended, effective, inputs.target)

        ceiling = self._settings.risk_curve_max_lectures
        if math.isinf(required):
            max_lectures = ceiling
        else:
            max_lectures = int(
                min(max(required * CURVE_REQUIREMENT_FACTOR, MIN_CURVE_LECTURES), ceiling)
            )

        steps = self._settings.risk_curve_steps
        # Short ranges round several grid steps onto the same lecture count.
        lectures = np.unique(np.floor(np.linspace(0, max_lectures, steps + 1) + 0.5).astype(int))
        numerators = inputs.attended + lectures
        denominators = effective + lectures
        percentages = np.where(
            denominators == 0,
            100.0,
            numerators / np.maximum(denominators, 1) * 100,
        )

        points = [
            CurvePoint(
                lectures=int(n),
                percentage=round_half_up(float(pct), 2),
                risk_level=self._risk(float(pct), inputs.target),
            )
            for n, pct in zip(lectures, percentages)
        ]

        endpoints: list[ModeEndpoint] = []
        for mode in StrategyMode:
            plan = self._planner.generate_global_plan(replace(inputs, mode=mode))
            scheduled = len(plan.recommended_slots)
            pct = project_after_plan(inputs.attended, effective, scheduled, scheduled)
            endpoints.append(
                ModeEndpoint(
                    mode=mode,
                    lectures=scheduled,
                    percentage=round_half_up(pct, 2),
                    risk_level=self._risk(pct, inputs.target),
                )
            )

        logger.debug(
            "Built risk curve for division=%s with %d points up to %d lectures",
            inputs.division,
            len(points),
            max_lectures,
        )
        return RiskCurve(
            required_lectures=required,
            max_lectures=max_lectures,
            points=points,
            mode_endpoints=endpoints,
        )
