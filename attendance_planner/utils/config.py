"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from pathlib import Path


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_TIMETABLE_PATH = PACKAGE_ROOT / "data" / "timetable.json"


@dataclass(frozen=True)
class Settings:
    app_name: str = "Attendance Strategy Planner"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    timetable_data_path: Path = DEFAULT_TIMETABLE_PATH
    teaching_end_date: date = date(2026, 12, 19)
    default_division: str = "6A22"
    default_target: float = 75.0
    max_lecture_count: int = 10000

    medium_buffer_ratio: float = 0.10
    target_days_iteration_limit: int = 1000
    risk_warning_margin: float = 10.0
    recovery_difficulty_threshold: int = 50
    risk_curve_steps: int = 60
    risk_curve_max_lectures: int = 200


def _env_date(name: str, default: date) -> date:
    raw = os.getenv(name)
    if not raw:
        return default
    return date.fromisoformat(raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    defaults = Settings()
    return Settings(
        app_name=os.getenv("APP_NAME", defaults.app_name),
        app_version=os.getenv("APP_VERSION", defaults.app_version),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        timetable_data_path=Path(
            os.getenv("TIMETABLE_DATA_PATH", str(defaults.timetable_data_path))
        ),
        teaching_end_date=_env_date("TEACHING_END_DATE", defaults.teaching_end_date),
        default_division=os.getenv("DEFAULT_DIVISION", defaults.default_division),
        default_target=float(os.getenv("DEFAULT_TARGET", defaults.default_target)),
        max_lecture_count=int(os.getenv("MAX_LECTURE_COUNT", defaults.max_lecture_count)),
    )
