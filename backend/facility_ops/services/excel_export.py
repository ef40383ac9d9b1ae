import io
from collections.abc import Iterable

import pandas as pd

from facility_ops.db.models import AttendanceRecord, WorkLog

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_WORKLOG_COLUMNS = [
    "Date", "Time", "Type", "Category", "Details", "Location", "Priority", "Status", "Photo",
]
_ATTENDANCE_COLUMNS = [
    "Name", "Department", "Date", "Check-in", "Check-out", "Total", "Status",
]


def _to_xlsx(df: pd.DataFrame, sheet_name: str) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()


def worklogs_to_xlsx(entries: Iterable[WorkLog]) -> bytes:
    rows = [
        [
            e.date.isoformat(), e.time, e.task_type, e.category, e.details,
            e.location, e.priority, e.status, e.photo_url or "",
        ]
        for e in entries
    ]
    return _to_xlsx(pd.DataFrame(rows, columns=_WORKLOG_COLUMNS), "Work log")


def attendance_to_xlsx(records: Iterable[AttendanceRecord]) -> bytes:
    rows = [
        [
            r.employee_name, r.department or "", r.date.isoformat(),
            r.check_in, r.check_out, r.total_hours, r.status,
        ]
        for r in records
    ]
    return _to_xlsx(pd.DataFrame(rows, columns=_ATTENDANCE_COLUMNS), "Attendance")
