from __future__ import annotations

from datetime import date
from pathlib import Path

from attendance_planner.utils.config import DEFAULT_TIMETABLE_PATH, get_settings


def test_defaults(monkeypatch) -> None:
    for name in ("TEACHING_END_DATE", "DEFAULT_DIVISION", "DEFAULT_TARGET", "TIMETABLE_DATA_PATH"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    settings = get_settings()

    assert settings.teaching_end_date == date(2026, 12, 19)
    assert settings.default_division == "6A22"
    assert settings.default_target == 75.0
    assert settings.timetable_data_path == DEFAULT_TIMETABLE_PATH
    assert settings.medium_buffer_ratio == 0.10
    get_settings.cache_clear()


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TEACHING_END_DATE", "2027-04-30")
    monkeypatch.setenv("DEFAULT_DIVISION", "6B11")
    monkeypatch.setenv("DEFAULT_TARGET", "80")
    monkeypatch.setenv("TIMETABLE_DATA_PATH", str(tmp_path / "custom.json"))
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.teaching_end_date == date(2027, 4, 30)
        assert settings.default_division == "6B11"
        assert settings.default_target == 80.0
        assert settings.timetable_data_path == Path(tmp_path / "custom.json")
    finally:
        get_settings.cache_clear()


def test_settings_are_cached() -> None:
    get_settings.cache_clear()
    assert get_settings() is get_settings()
