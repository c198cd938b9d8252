"""Wire-format DTOs shared by the controllers."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from attendance_planner.domain.models import StrategyMode
from attendance_planner.utils.config import get_settings


settings = get_settings()


class CamelModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def finite_or_none(value: float) -> Optional[int]:
    """Unreachable requirements cross the JSON boundary as null."""
    if math.isinf(value):
        return None
    return int(value)


class AttendanceCounts(CamelModel):
    conducted: int = Field(ge=0, le=settings.max_lecture_count)
    attended: int = Field(ge=0, le=settings.max_lecture_count)
    no_attendance: Optional[int] = Field(default=None, ge=0, le=settings.max_lecture_count)
    target: float = Field(ge=1, le=100)

    @model_validator(mode="after")
    def validate_effective_conducted(self) -> "AttendanceCounts":
        if self.attended > self.conducted - (self.no_attendance or 0):
            raise ValueError(
                "Attended cannot exceed effective conducted (conducted - no attendance)"
            )
        return self


class PlannerRequest(AttendanceCounts):
    division: str = Field(min_length=1)


class RecommendationRequest(PlannerRequest):
    mode: StrategyMode = StrategyMode.MEDIUM
