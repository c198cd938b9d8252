"""Read-only timetable endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from attendance_planner.controllers.dependencies import get_timetable_repository
from attendance_planner.controllers.schemas import CamelModel
from attendance_planner.domain.models import ScheduleEntry
from attendance_planner.repository.timetable_repository import (
    TimetableDataError,
    TimetableRepository,
)
from attendance_planner.utils.config import get_settings


settings = get_settings()

router = APIRouter(prefix="/api", tags=["timetable"])


class DivisionsResponse(CamelModel):
    divisions: list[str]
    sections: dict[str, list[str]]
    default_division: str


class ScheduleEntryResponse(CamelModel):
    day: str
    start_time: str
    end_time: str
    room: str
    type: str
    faculty: str
    faculty_name: str
    subject_short: str
    subject_name: str


class SubjectResponse(CamelModel):
    id: str
    short: str
    full: str


class TimetableResponse(CamelModel):
    division: str
    schedule: list[ScheduleEntryResponse]
    subjects: list[SubjectResponse]
    teaching_slots: list[str]
    grid: dict[str, dict[str, Optional[ScheduleEntryResponse]]]


class MismatchResponse(CamelModel):
    division: str
    subject: str
    faculty_short: str
    expected: str
    found: str
    type: str


class WorstDivisionResponse(CamelModel):
    id: str
    count: int = Field(ge=1)


class FacultyValidationResponse(CamelModel):
    total_entries: int = Field(ge=0)
    valid_entries: int = Field(ge=0)
    match_percentage: int = Field(ge=0, le=100)
    mismatches: list[MismatchResponse]
    worst_division: Optional[WorstDivisionResponse] = None


def _entry_response(
    repository: TimetableRepository,
    division: str,
    entry: ScheduleEntry,
) -> ScheduleEntryResponse:
    return ScheduleEntryResponse(
        day=entry.day,
        start_time=entry.start_time,
        end_time=entry.end_time,
        room=entry.room,
        type=entry.type,
        faculty=entry.faculty,
        faculty_name=repository.get_faculty_full_name(entry.faculty),
        subject_short=entry.subject_short,
        subject_name=repository.get_subject_full_name(division, entry.subject_short),
    )


def _unavailable(exc: TimetableDataError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(exc),
    )


@router.get("/divisions", response_model=DivisionsResponse)
async def list_divisions(
    repository: TimetableRepository = Depends(get_timetable_repository),
) -> DivisionsResponse:
    try:
        return DivisionsResponse(
            divisions=repository.list_divisions(),
            sections=repository.get_divisions_by_section(),
            default_division=settings.default_division,
        )
    except TimetableDataError as exc:
        raise _unavailable(exc) from exc


@router.get("/timetable/validation", response_model=FacultyValidationResponse)
async def validate_faculty(
    repository: TimetableRepository = Depends(get_timetable_repository),
) -> FacultyValidationResponse:
    """Audit faculty short codes across every division."""
    try:
        stats = repository.validate_faculty_mapping()
    except TimetableDataError as exc:
        raise _unavailable(exc) from exc

    worst = None
    if stats.worst_division is not None:
        worst = WorstDivisionResponse(id=stats.worst_division[0], count=stats.worst_division[1])
    return FacultyValidationResponse(
        total_entries=stats.total_entries,
        valid_entries=stats.valid_entries,
        match_percentage=stats.match_percentage,
        mismatches=[
            MismatchResponse(
                division=item.division,
                subject=item.subject,
                faculty_short=item.faculty_short,
                expected=item.expected,
                found=item.found,
                type=item.type,
            )
            for item in stats.mismatches
        ],
        worst_division=worst,
    )


@router.get("/timetable/{division}", response_model=TimetableResponse)
async def get_timetable(
    division: str,
    repository: TimetableRepository = Depends(get_timetable_repository),
) -> TimetableResponse:
    try:
        if not repository.is_valid_division(division):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Invalid division: {division}",
            )
        grid = repository.build_timetable_grid(division)
        return TimetableResponse(
            division=division,
            schedule=[
                _entry_response(repository, division, entry)
                for entry in repository.get_schedule_for_division(division)
            ],
            subjects=[
                SubjectResponse(id=subject.id, short=subject.short, full=subject.full)
                for subject in repository.get_subjects_for_division(division)
            ],
            teaching_slots=repository.teaching_slots(),
            grid={
                day: {
                    slot: None if entry is None else _entry_response(repository, division, entry)
                    for slot, entry in row.items()
                }
                for day, row in grid.items()
            },
        )
    except TimetableDataError as exc:
        raise _unavailable(exc) from exc
