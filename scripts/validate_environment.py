#!/usr/bin/env python3
"""Validate local attendance planner environment readiness."""

from __future__ import annotations

import importlib
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from attendance_planner.domain.models import PlannerInputs, StrategyMode
from attendance_planner.repository.timetable_repository import TimetableRepository
from attendance_planner.services.strategy_service import StrategyPlannerService
from attendance_planner.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable with versions
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("numpy", "numpy"),
        ("pandas", "pandas"),
        ("requests", "requests"),
        ("streamlit", "streamlit"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    from importlib.metadata import PackageNotFoundError, version

    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    settings = get_settings()
    repository = TimetableRepository(settings)

    # CHECK 3: Timetable document loads
    try:
        document = repository.load()
        ok, line = _print_result(
            "Timetable data",
            True,
            f": {len(document.divisions)} divisions",
        )
    except Exception as exc:
        ok, line = _print_result("Timetable data", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4: Faculty short codes resolve (reported, never fatal)
    if ok:
        stats = repository.validate_faculty_mapping()
        detail = f": {stats.match_percentage}% of {stats.total_entries} rows mapped"
        if stats.worst_division is not None:
            detail += f" (worst: {stats.worst_division[0]} with {stats.worst_division[1]})"
        results.append(f"[INFO] Faculty mapping{detail}")

    # CHECK 5: Planner produces a plan for the default division
    try:
        planner = StrategyPlannerService(
            repository=repository,
            settings=settings,
            today_provider=lambda: min(date.today(), settings.teaching_end_date),
        )
        plan = planner.generate_global_plan(
            PlannerInputs(
                division=settings.default_division,
                target=settings.default_target,
                conducted=40,
                attended=20,
                mode=StrategyMode.MEDIUM,
            )
        )
        ok, line = _print_result(
            "Strategy planner",
            True,
            f": {plan.summary.scheduled_count} of {plan.summary.total_available_slots} slots",
        )
    except Exception as exc:
        ok, line = _print_result("Strategy planner", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Attendance Planner Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
