"""Domain models for attendance arithmetic and strategy planning."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


NON_TEACHING_MARKERS = ("LIBRARY", "SELF STUDY")


class StrategyMode(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RiskLevel(str, Enum):
    SAFE = "Safe"
    WARNING = "Warning"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class ScheduleEntry:
    """One weekly timetable row as stored for a division."""

    day: str
    start_time: str
    end_time: str
    room: str
    type: str
    faculty: str
    subject_short: str

    @property
    def time_range(self) -> str:
        return f"{self.start_time} - {self.end_time}"

    @property
    def is_teaching(self) -> bool:
        """Placeholder rows such as library or self-study hours do not count."""
        if not self.subject_short:
            return False
        label = self.subject_short.upper()
        return not any(marker in label for marker in NON_TEACHING_MARKERS)


@dataclass(frozen=True)
class SubjectInfo:
    id: str
    short: str
    full: str


@dataclass(frozen=True)
class FutureSlot:
    day: str
    time: str
    room: str
    type: str
    faculty: str
    subject_short: str


@dataclass(frozen=True)
class RecommendedSlot:
    day: str
    time: str
    room: str
    type: str
    faculty: str
    subject_short: str
    index: int


@dataclass(frozen=True)
class CalculationResult:
    current_percentage: float
    is_above_target: bool
    target: float
    lectures_needed: float
    lectures_missable: int
    conducted: int
    attended: int
    no_attendance: int


@dataclass(frozen=True)
class CalculationRecord:
    """A calculation result stamped for hand-off to the caller."""

    id: str
    calculated_at: datetime
    result: CalculationResult


@dataclass(frozen=True)
class PlannerInputs:
    """Serializable form state handed to the services by the caller."""

    division: str
    target: float
    conducted: int
    attended: int
    no_attendance: int = 0
    mode: StrategyMode = StrategyMode.MEDIUM

    @property
    def effective_conducted(self) -> int:
        return self.conducted - self.no_attendance


@dataclass(frozen=True)
class ModeStats:
    mode: StrategyMode
    actual_attend: int
    scheduled_count: int
    skip_count: int
    days_to_recover: int
    projected_percentage: float
    recommended_slots: list[RecommendedSlot] = field(default_factory=list)


@dataclass(frozen=True)
class PlanSummary:
    required_lectures: float
    scheduled_count: int
    skip_count: int
    days_to_recover: int
    safe_skip_allowance: int
    projected_percentage: float
    current_percentage: float
    total_available_slots: int
    actual_attend: int


@dataclass(frozen=True)
class GlobalStrategyPlan:
    mode: StrategyMode
    summary: PlanSummary
    recommended_slots: list[RecommendedSlot]
