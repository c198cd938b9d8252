"""Repository layer for the static weekly timetable.

The timetable is a packaged JSON document loaded once and queried read-only.
Services never see the raw document; they receive ``ScheduleEntry`` and
``SubjectInfo`` projections.
"""

from __future__ import annotations

import json
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from threading import Lock
from typing import Any, Optional

from attendance_planner.domain.models import ScheduleEntry, SubjectInfo
from attendance_planner.utils.config import Settings, get_settings
from attendance_planner.utils.logger import get_logger


logger = get_logger(__name__)

DAY_ORDER = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
}
_DAY_BY_INDEX = {index: day for day, index in DAY_ORDER.items()}
_SECTION_PATTERN = re.compile(r"^\d([A-Z])(\d+)$")


class TimetableDataError(Exception):
    """Raised when the timetable document is missing or malformed."""


class DivisionNotFoundError(Exception):
    """Raised when a division identifier is not part of the timetable."""

    def __init__(self, division: str) -> None:
        super().__init__(f"Invalid division: {division}")
        self.division = division


@dataclass(frozen=True)
class MismatchReport:
    division: str
    subject: str
    faculty_short: str
    expected: str
    found: str
    type: str


@dataclass(frozen=True)
class FacultyValidationStats:
    total_entries: int
    valid_entries: int
    match_percentage: int
    mismatches: list[MismatchReport]
    worst_division: Optional[tuple[str, int]]


@dataclass(frozen=True)
class TimetableDocument:
    divisions: tuple[str, ...]
    teaching_slots: tuple[str, ...]
    faculty: dict[str, str]
    subjects: dict[str, list[SubjectInfo]]
    schedule: dict[str, list[ScheduleEntry]]


def _time_to_minutes(value: str) -> int:
    hours, minutes = (int(part) for part in value.split(":"))
    return hours * 60 + minutes


def _parse_entry(raw: dict[str, Any]) -> ScheduleEntry:
    return ScheduleEntry(
        day=raw["day"],
        start_time=raw["startTime"],
        end_time=raw["endTime"],
        room=raw.get("room", ""),
        type=raw.get("type", "Lecture"),
        faculty=raw.get("faculty", ""),
        subject_short=raw.get("subjectShort", ""),
    )


def _parse_document(payload: dict[str, Any]) -> TimetableDocument:
    try:
        divisions = tuple(payload["divisions"])
        schedule = {
            division: [_parse_entry(item) for item in entries]
            for division, entries in payload.get("schedule", {}).items()
        }
        subjects = {
            division: [
                SubjectInfo(id=item["id"], short=item.get("short", ""), full=item["full"])
                for item in items
            ]
            for division, items in payload.get("subjects", {}).items()
        }
    except (KeyError, TypeError) as exc:
        raise TimetableDataError(f"Timetable document is malformed: {exc}") from exc

    unknown = sorted(set(schedule) - set(divisions))
    if unknown:
        raise TimetableDataError(f"Schedule references unknown divisions: {', '.join(unknown)}")

    return TimetableDocument(
        divisions=divisions,
        teaching_slots=tuple(payload.get("teachingSlots", [])),
        faculty=dict(payload.get("faculty", {})),
        subjects=subjects,
        schedule=schedule,
    )


class TimetableRepository:
    """Read-only access to per-division weekly schedules."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._data_path = Path(self._settings.timetable_data_path)
        self._document: TimetableDocument | None = None
        self._lock = Lock()

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load(self) -> TimetableDocument:
        """Load and cache the timetable document on first access."""
        with self._lock:
            if self._document is None:
                try:
                    payload = json.loads(self._data_path.read_text(encoding="utf-8"))
                except FileNotFoundError as exc:
                    raise TimetableDataError(
                        f"Timetable data not found at {self._data_path}"
                    ) from exc
                except json.JSONDecodeError as exc:
                    raise TimetableDataError(f"Timetable data is not valid JSON: {exc}") from exc
                self._document = _parse_document(payload)
                logger.info(
                    "Loaded timetable for %d divisions from %s",
                    len(self._document.divisions),
                    self._data_path,
                )
            return self._document

    def list_divisions(self) -> list[str]:
        return list(self.load().divisions)

    def is_valid_division(self, division: str) -> bool:
        return division in self.load().divisions

    def require_division(self, division: str) -> None:
        if not self.is_valid_division(division):
            raise DivisionNotFoundError(division)

    def get_divisions_by_section(self) -> dict[str, list[str]]:
        groups: dict[str, list[str]] = defaultdict(list)
        for division in self.load().divisions:
            match = _SECTION_PATTERN.match(division)
            groups[match.group(1) if match else "Other"].append(division)

        def _number(division: str) -> int:
            match = _SECTION_PATTERN.match(division)
            return int(match.group(2)) if match else 0

        return {section: sorted(items, key=_number) for section, items in groups.items()}

    def get_schedule_for_division(self, division: str) -> list[ScheduleEntry]:
        return list(self.load().schedule.get(division, []))

    def get_subjects_for_division(self, division: str) -> list[SubjectInfo]:
        return list(self.load().subjects.get(division, []))

    def get_subject_full_name(self, division: str, short_name: str) -> str:
        for subject in self.get_subjects_for_division(division):
            if subject.short.lower() == short_name.lower():
                return subject.full
        return short_name

    def get_faculty_full_name(self, short_name: str) -> str:
        if not short_name:
            return short_name
        faculty = self.load().faculty
        return faculty.get(short_name.upper(), faculty.get(short_name, short_name))

    def get_unique_subjects(self, division: str) -> list[str]:
        return sorted({entry.subject_short for entry in self.get_schedule_for_division(division)})

    def teaching_slots(self) -> list[str]:
        return list(self.load().teaching_slots)

    def build_timetable_grid(self, division: str) -> dict[str, dict[str, ScheduleEntry | None]]:
        slots = self.teaching_slots()
        grid: dict[str, dict[str, ScheduleEntry | None]] = {
            day: {slot: None for slot in slots} for day in DAY_ORDER
        }

        for entry in self.get_schedule_for_division(division):
            row = grid.get(entry.day)
            if row is None:
                continue
            if entry.time_range in row:
                row[entry.time_range] = entry
                continue

            # Labs spanning several slots land in the first slot they cover.
            entry_start = _time_to_minutes(entry.start_time)
            entry_end = _time_to_minutes(entry.end_time)
            for slot in slots:
                slot_start, slot_end = (_time_to_minutes(part) for part in slot.split(" - "))
                if entry_start <= slot_start and entry_end >= slot_end:
                    row[slot] = entry
                    break

        return grid

    def _entries_for_day(self, division: str, day: str) -> list[ScheduleEntry]:
        entries = [entry for entry in self.get_schedule_for_division(division) if entry.day == day]
        return sorted(entries, key=lambda entry: _time_to_minutes(entry.start_time))

    def get_upcoming_lectures(
        self,
        division: str,
        from_day: str,
        within_days: int = 3,
    ) -> list[ScheduleEntry]:
        start_index = DAY_ORDER.get(from_day, 0)
        upcoming: list[ScheduleEntry] = []
        for offset in range(within_days):
            day = _DAY_BY_INDEX[(start_index + offset) % len(DAY_ORDER)]
            upcoming.extend(self._entries_for_day(division, day))
        return upcoming

    def get_lectures_until_teaching_end(
        self,
        division: str,
        today: date,
        teaching_end: date,
    ) -> list[ScheduleEntry]:
        """Every scheduled occurrence from ``today`` through ``teaching_end``."""
        by_day = {day: self._entries_for_day(division, day) for day in DAY_ORDER}
        occurrences: list[ScheduleEntry] = []
        current = today
        while current <= teaching_end:
            day_name = _DAY_BY_INDEX.get(current.weekday())
            if day_name is not None:
                occurrences.extend(by_day[day_name])
            current += timedelta(days=1)
        return occurrences

    @staticmethod
    def days_until_teaching_end(today: date, teaching_end: date) -> int:
        return max(0, (teaching_end - today).days)

    def validate_faculty_mapping(self) -> FacultyValidationStats:
        """Audit every schedule row against the faculty directory."""
        document = self.load()
        reports: list[MismatchReport] = []
        total_entries = 0
        valid_entries = 0
        errors_by_division: dict[str, int] = {}

        for division, entries in document.schedule.items():
            errors_by_division.setdefault(division, 0)
            for entry in entries:
                total_entries += 1
                short_code = entry.faculty.strip()
                if not short_code:
                    errors_by_division[division] += 1
                    reports.append(
                        MismatchReport(
                            division=division,
                            subject=entry.subject_short,
                            faculty_short="(blank)",
                            expected="(Valid short code)",
                            found="(blank)",
                            type="blank_short_code",
                        )
                    )
                    continue
                if short_code.upper() in document.faculty or short_code in document.faculty:
                    valid_entries += 1
                    continue
                errors_by_division[division] += 1
                reports.append(
                    MismatchReport(
                        division=division,
                        subject=entry.subject_short,
                        faculty_short=short_code,
                        expected="(Must exist in faculty directory)",
                        found="Unmapped",
                        type="unmapped",
                    )
                )

        match_percentage = 100 if total_entries == 0 else round(valid_entries / total_entries * 100)
        worst: Optional[tuple[str, int]] = None
        if errors_by_division:
            division, count = max(errors_by_division.items(), key=lambda item: item[1])
            if count > 0:
                worst = (division, count)

        return FacultyValidationStats(
            total_entries=total_entries,
            valid_entries=valid_entries,
            match_percentage=match_percentage,
            mismatches=reports,
            worst_division=worst,
        )
