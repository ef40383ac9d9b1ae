"""
Attendance import, listing, report and export.

Tests:
  - TestImport : header aliases, fuzzy name matching, duplicates, bad rows
  - TestReport : report and monthly hours over imported rows
  - TestExport : exported workbook re-imports as duplicates
"""

from __future__ import annotations

import io

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.models import AttendanceRecord, Employee, ImportHistory
from facility_ops.services.live import ATTENDANCE_RECORDS, hub

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
HEADERS = ["Name", "Dept", "Date", "Check-in", "Check-out", "Total", "Status"]


async def _upload(client: AsyncClient, content: bytes, filename: str = "march.xlsx"):
    return await client.post(
        "/api/attendance/import",
        files={"file": (filename, io.BytesIO(content), XLSX)},
    )


class TestImport:
    async def test_import_normalizes_names(
        self, client: AsyncClient, db: AsyncSession, roster: list[Employee], make_workbook
    ) -> None:
        content = make_workbook(
            HEADERS,
            [
                ["Minsu  Jeon", "", "2026-03-02", "07:22", "16:40", "9h 18m", "Normal"],
                ["jeon minsu", "", "2026-03-03", "07:40", "16:40", "9h 0m", "late"],
                ["Jimin Kim", "Facilities", "2026-03-02", "07:30", "17:30", "10h 0m", "OT"],
            ],
        )
        received: list[list] = []
        hub.subscribe(ATTENDANCE_RECORDS, received.append)

        resp = await _upload(client, content)
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert (data["total"], data["inserted_count"], data["status"]) == (3, 3, "success")

        result = await db.execute(
            select(AttendanceRecord).order_by(AttendanceRecord.date, AttendanceRecord.employee_name)
        )
        rows = [(r.employee_name, r.department, r.status) for r in result.scalars().all()]
        assert rows == [
            ("Jimin Kim", "Facilities", "Overtime"),
            ("Minsu Jeon", "Pest Control", "Normal"),
            ("Minsu Jeon", "Pest Control", "Late"),
        ]
        assert len(received) == 1 and len(received[0]) == 3

    async def test_duplicates_skipped(
        self, client: AsyncClient, db: AsyncSession, roster: list[Employee], make_workbook
    ) -> None:
        content = make_workbook(
            HEADERS, [["Minsu Jeon", "", "2026-03-02", "07:22", "16:40", "9h 18m", "Normal"]]
        )
        await _upload(client, content)

        resp = await _upload(client, content)
        data = resp.json()
        assert (data["inserted_count"], data["skipped"], data["status"]) == (0, 1, "failed")

        result = await db.execute(select(ImportHistory.status).order_by(ImportHistory.id))
        assert result.scalars().all() == ["success", "failed"]

    async def test_bad_rows_reported(self, client: AsyncClient, make_workbook) -> None:
        content = make_workbook(
            HEADERS,
            [
                ["Sora Park", "Facilities", "2026-03-02", "08:00", "17:00", "9h 0m", "Normal"],
                ["Sora Park", "Facilities", "not-a-date", "08:00", "17:00", "9h 0m", "Normal"],
                ["Sora Park", "Facilities", "2026-03-04", "08:00", "17:00", "9h 0m", "sick"],
            ],
        )
        data = (await _upload(client, content)).json()
        assert data["status"] == "partial"
        assert data["inserted_count"] == 1
        assert data["error_count"] == 2
        assert any("invalid date" in e for e in data["errors"])
        assert any("unknown status" in e for e in data["errors"])

    async def test_missing_columns(self, client: AsyncClient, make_workbook) -> None:
        content = make_workbook(["Who", "When"], [["Sora Park", "2026-03-02"]])
        data = (await _upload(client, content)).json()
        assert data["inserted_count"] == 0
        assert data["errors"][0].startswith("Missing required columns")

    async def test_wrong_extension(self, client: AsyncClient) -> None:
        resp = await _upload(client, b"name,date\n", filename="march.csv")
        assert resp.status_code == 400


class TestReport:
    async def test_report_and_monthly_hours(
        self, client: AsyncClient, roster: list[Employee], make_workbook
    ) -> None:
        content = make_workbook(
            HEADERS,
            [
                ["Minsu Jeon", "", "2026-03-02", "07:00", "16:00", "9h 0m", "Normal"],
                ["Jimin Kim", "", "2026-03-02", "07:00", "17:00", "10h 0m", "Overtime"],
                ["Jimin Kim", "", "2026-03-03", "-", "-", "5h 0m", "Leave"],
                ["Minsu Jeon", "", "2026-04-01", "07:00", "16:00", "9h 0m", "Normal"],
            ],
        )
        await _upload(client, content)

        report = (await client.get("/api/attendance/report", params={"year": 2026, "month": 3})).json()
        assert report["summary"] == {
            "total_hours": 24,
            "late_count": 0,
            "overtime_hours": 1,
            "leave_count": 1,
        }
        weekly = {w["day"]: w["hours"] for w in report["weekly"]}
        assert (weekly["Mon"], weekly["Tue"]) == (19, 5)
        assert {d["name"]: d["ratio"] for d in report["departments"]} == {
            "Pest Control": 33,
            "Facilities": 67,
        }

        hours = (await client.get("/api/attendance/monthly-hours", params={"year": 2026, "month": 3})).json()
        assert hours == {"Minsu Jeon": 9, "Jimin Kim": 15}

    async def test_empty_report(self, client: AsyncClient) -> None:
        report = (await client.get("/api/attendance/report")).json()
        assert report["departments"] == [{"name": "No data", "ratio": 0}]
        assert len(report["weekly"]) == 7

    async def test_half_month_filter_rejected(self, client: AsyncClient) -> None:
        resp = await client.get("/api/attendance/report", params={"year": 2026})
        assert resp.status_code == 422

    async def test_list_newest_first_with_search(
        self, client: AsyncClient, roster: list[Employee], make_workbook
    ) -> None:
        content = make_workbook(
            HEADERS,
            [
                ["Minsu Jeon", "", "2026-03-02", "07:00", "16:00", "9h 0m", "Normal"],
                ["Minsu Jeon", "", "2026-03-05", "07:00", "16:00", "9h 0m", "Normal"],
                ["Jimin Kim", "", "2026-03-04", "07:00", "16:00", "9h 0m", "Normal"],
            ],
        )
        await _upload(client, content)

        records = (await client.get("/api/attendance/records", params={"search": "minsu"})).json()
        assert [r["date"] for r in records] == ["2026-03-05", "2026-03-02"]


class TestExport:
    async def test_export_roundtrips_through_import(
        self, client: AsyncClient, roster: list[Employee], make_workbook
    ) -> None:
        content = make_workbook(
            HEADERS, [["Minsu Jeon", "", "2026-03-02", "07:22", "16:40", "9h 18m", "Normal"]]
        )
        await _upload(client, content)

        exported = await client.get("/api/attendance/export", params={"year": 2026, "month": 3})
        assert exported.status_code == 200
        assert "attendance_2026_03.xlsx" in exported.headers["content-disposition"]

        data = (await _upload(client, exported.content, filename="export.xlsx")).json()
        assert (data["total"], data["skipped"]) == (1, 1)
