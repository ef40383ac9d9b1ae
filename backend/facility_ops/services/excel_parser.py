"""
Excel parser for attendance sheets exported by the time clock.

Expected columns (case-insensitive, any of the aliases):
  Name / employee / employee_name
  Department / dept / team
  Date / work_date
  Check-in / check_in / in
  Check-out / check_out / out
  Total / total_hours / duration / worked
  Status / attendance_status
"""

from __future__ import annotations

import logging
from typing import IO

import pandas as pd
from pydantic import ValidationError

from facility_ops.schemas.attendance import AttendanceRecordIn

logger = logging.getLogger(__name__)

COLUMN_ALIASES: dict[str, list[str]] = {
    "employee_name": ["name", "employee", "employee_name", "employee name", "worker"],
    "department": ["department", "dept", "team"],
    "date": ["date", "work_date", "work date", "day"],
    "check_in": ["check-in", "check_in", "check in", "in", "clock in"],
    "check_out": ["check-out", "check_out", "check out", "out", "clock out"],
    "total_hours": ["total", "total_hours", "total hours", "duration", "worked"],
    "status": ["status", "attendance_status", "attendance status"],
}

_FIELD_BY_ALIAS: dict[str, str] = {
    alias: field for field, aliases in COLUMN_ALIASES.items() for alias in aliases
}

STATUS_MAP: dict[str, str] = {
    "normal": "Normal",
    "ok": "Normal",
    "late": "Late",
    "overtime": "Overtime",
    "ot": "Overtime",
    "leave": "Leave",
    "vacation": "Leave",
    "off": "Leave",
}

_REQUIRED = ("employee_name", "date")


_MIN_HEADER_HITS = 2
_HEADER_SCAN_ROWS = 20


def _header_hits(cells) -> int:
    return sum(
        isinstance(cell, str) and cell.lower().strip() in _FIELD_BY_ALIAS for cell in cells
    )


def _find_header_row(file: IO[bytes]) -> int:
    """
    Time-clock exports sometimes put a title block above the table; pick
    the first row that names at least two known columns.
    """
    try:
        probe = pd.read_excel(
            file, engine="openpyxl", dtype=str, nrows=_HEADER_SCAN_ROWS, header=None
        )
    except Exception:
        return 0
    finally:
        file.seek(0)

    hits = [_header_hits(row) for row in probe.itertuples(index=False)]
    if not hits or max(hits) < _MIN_HEADER_HITS:
        return 0
    return hits.index(max(hits))


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed: dict[str, str] = {}
    taken: set[str] = set()
    for column in df.columns:
        field = _FIELD_BY_ALIAS.get(str(column).lower().strip())
        if field is not None and field not in taken:
            renamed[column] = field
            taken.add(field)
    return df.rename(columns=renamed)


def _clean_cell(value: object) -> str:
    text = str(value or "").strip()
    return "" if text.lower() in ("nan", "none", "nat") else text


def parse_attendance_excel(file: IO[bytes]) -> tuple[list[AttendanceRecordIn], list[str]]:
    """Parse an attendance workbook into (valid_records, error_messages)."""
    header_row = _find_header_row(file)

    try:
        df = pd.read_excel(file, engine="openpyxl", dtype=str, header=header_row)
    except Exception as exc:
        return [], [f"Could not open file: {exc}"]

    df = _normalize_columns(df)

    missing = [c for c in _REQUIRED if c not in df.columns]
    if missing:
        return [], [f"Missing required columns: {', '.join(missing)}"]

    valid: list[AttendanceRecordIn] = []
    errors: list[str] = []
    data_row_offset = header_row + 2
    skipped_empty = 0

    for i, row in enumerate(df.itertuples(index=False), start=data_row_offset):
        name = _clean_cell(getattr(row, "employee_name", ""))
        raw_date = _clean_cell(getattr(row, "date", ""))

        if not name and not raw_date:
            skipped_empty += 1
            continue

        try:
            work_date = pd.to_datetime(raw_date)
            if pd.isna(work_date):
                raise ValueError("empty or unparseable date")
        except Exception:
            msg = f"Row {i}: invalid date '{raw_date}'"
            logger.warning("Skipped - %s (name='%s')", msg, name)
            errors.append(msg)
            continue

        raw_status = _clean_cell(getattr(row, "status", "")).lower()
        status = STATUS_MAP.get(raw_status, "Normal") if raw_status else "Normal"
        if raw_status and raw_status not in STATUS_MAP:
            msg = f"Row {i}: unknown status '{raw_status}'"
            logger.warning("Skipped - %s (name='%s')", msg, name)
            errors.append(msg)
            continue

        try:
            valid.append(
                AttendanceRecordIn(
                    employee_name=name,
                    department=_clean_cell(getattr(row, "department", "")) or None,
                    date=work_date.date(),
                    check_in=_clean_cell(getattr(row, "check_in", "")) or "-",
                    check_out=_clean_cell(getattr(row, "check_out", "")) or "-",
                    total_hours=_clean_cell(getattr(row, "total_hours", "")) or "-",
                    status=status,
                )
            )
        except ValidationError as exc:
            for err in exc.errors():
                msg = f"Row {i}: {err['loc'][0]} - {err['msg']}"
                logger.warning("Skipped - %s (name='%s')", msg, name)
                errors.append(msg)

    logger.info(
        "Attendance sheet parsed: valid=%d, errors=%d, empty=%d",
        len(valid), len(errors), skipped_empty,
    )
    return valid, errors
