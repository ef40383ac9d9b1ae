"""
Attendance report aggregation.

Pure functions over a collection of attendance records (ORM rows or any
object exposing ``employee_name``, ``department``, ``date``,
``total_hours`` and ``status``). Callers re-run them on every snapshot of
the attendance collection; nothing is cached here.
"""

import datetime as dt
import math
from collections.abc import Iterable
from typing import Any

from facility_ops.core.config import settings
from facility_ops.schemas.attendance import (
    AttendanceReport,
    AttendanceSummary,
    DepartmentRatio,
    WeekdayHours,
)
from facility_ops.services.duration import parse_duration

WEEKDAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
NO_DATA_DEPARTMENT = "No data"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _record_date(value: Any) -> dt.date | None:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value:
        try:
            return dt.date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def aggregate(
    records: Iterable[Any],
    standard_shift_minutes: int | None = None,
) -> AttendanceReport:
    """Build summary, weekday and department breakdowns for ``records``."""
    threshold = (
        settings.STANDARD_SHIFT_MINUTES
        if standard_shift_minutes is None
        else standard_shift_minutes
    )

    total_minutes = 0
    overtime_minutes = 0
    late = 0
    leaves = 0
    record_count = 0
    dept_counts: dict[str, int] = {}
    day_minutes: dict[str, int] = {label: 0 for label in WEEKDAY_LABELS}

    for rec in records:
        record_count += 1
        minutes = parse_duration(rec.total_hours)
        total_minutes += minutes

        if rec.status == "Late":
            late += 1
        if rec.status == "Leave":
            leaves += 1
        # Long shifts count as overtime even when nobody flagged them
        if rec.status == "Overtime" or minutes > threshold:
            overtime_minutes += max(0, minutes - threshold)

        if rec.department:
            dept_counts[rec.department] = dept_counts.get(rec.department, 0) + 1

        day = _record_date(rec.date)
        if day is not None:
            day_minutes[WEEKDAY_LABELS[day.weekday()]] += minutes

    summary = AttendanceSummary(
        total_hours=total_minutes // 60,
        late_count=late,
        overtime_hours=overtime_minutes // 60,
        leave_count=leaves,
    )
    weekly = [
        WeekdayHours(day=label, hours=round_half_up(day_minutes[label] / 60))
        for label in WEEKDAY_LABELS
    ]

    total_recs = record_count or 1
    departments = [
        DepartmentRatio(name=name, ratio=round_half_up(count / total_recs * 100))
        for name, count in dept_counts.items()
    ]
    if not departments:
        departments.append(DepartmentRatio(name=NO_DATA_DEPARTMENT, ratio=0))

    return AttendanceReport(summary=summary, weekly=weekly, departments=departments)


def monthly_hours_by_employee(
    records: Iterable[Any], year: int, month: int
) -> dict[str, int]:
    """Worked hours per employee name for one calendar month."""
    minutes_by_name: dict[str, int] = {}
    for rec in records:
        day = _record_date(rec.date)
        if day is None or (day.year, day.month) != (year, month):
            continue
        if not rec.employee_name:
            continue
        minutes_by_name[rec.employee_name] = (
            minutes_by_name.get(rec.employee_name, 0) + parse_duration(rec.total_hours)
        )
    return {name: round_half_up(mins / 60) for name, mins in minutes_by_name.items()}
