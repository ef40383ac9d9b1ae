"""
Employee roster.

Tests:
  - TestValidation : required fields, phone and email shape -> 422, no write
  - TestRoster     : create/update/delete with activity log entries
  - TestFilter     : team/department/shift label filters and fuzzy search
  - TestAvatar     : avatar upload through photo storage
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.models import ActivityLog, Employee
from facility_ops.services.live import EMPLOYEES, hub
from facility_ops.services.photo_storage import LocalPhotoStorage

VALID = {
    "name": "Sora Park",
    "role": "Facility Technician",
    "team": "B",
    "shift": "B",
    "department": "Facilities",
    "email": "sora.park@company.com",
    "phone": "02-123-4567",
    "join_date": "2024-01-02",
}


class TestValidation:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("phone", "01012345678"),
            ("phone", "010-12-5678"),
            ("phone", ""),
            ("email", "sora.park"),
            ("email", ""),
            ("name", "  "),
            ("role", ""),
        ],
    )
    async def test_invalid_field_rejected(
        self, client: AsyncClient, db: AsyncSession, field: str, value: str
    ) -> None:
        resp = await client.post("/api/employees/", json={**VALID, field: value})
        assert resp.status_code == 422

        count = await db.scalar(select(func.count()).select_from(Employee))
        assert count == 0

    @pytest.mark.parametrize("field", ["email", "phone", "join_date"])
    async def test_missing_required_field(self, client: AsyncClient, field: str) -> None:
        body = {k: v for k, v in VALID.items() if k != field}
        resp = await client.post("/api/employees/", json=body)
        assert resp.status_code == 422

    async def test_update_validates_phone(self, client: AsyncClient, roster: list[Employee]) -> None:
        resp = await client.patch(f"/api/employees/{roster[0].id}", json={"phone": "12345"})
        assert resp.status_code == 422


class TestRoster:
    async def test_create_records_activity(self, client: AsyncClient, db: AsyncSession) -> None:
        received: list[list] = []
        hub.subscribe(EMPLOYEES, received.append)

        resp = await client.post("/api/employees/", json=VALID)
        assert resp.status_code == 201, resp.text
        assert resp.json()["status"] == "Off-Duty"

        result = await db.execute(select(ActivityLog))
        logs = result.scalars().all()
        assert [(log.type, log.action) for log in logs] == [("edit", "Added employee Sora Park")]
        assert len(received) == 1 and received[0][0].name == "Sora Park"

    async def test_update_keeps_unsent_fields(self, client: AsyncClient, roster: list[Employee]) -> None:
        emp = roster[0]
        resp = await client.patch(f"/api/employees/{emp.id}", json={"status": "On-Duty"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "On-Duty"
        assert data["email"] == "minsu.jeon@company.com"

    async def test_delete(self, client: AsyncClient, db: AsyncSession, roster: list[Employee]) -> None:
        emp = roster[1]
        resp = await client.delete(f"/api/employees/{emp.id}")
        assert resp.status_code == 204
        assert (await client.get(f"/api/employees/{emp.id}")).status_code == 404

        result = await db.execute(select(ActivityLog.action))
        assert result.scalars().all() == ["Removed employee Jimin Kim"]

    async def test_unknown_employee(self, client: AsyncClient) -> None:
        resp = await client.patch(
            "/api/employees/00000000-0000-0000-0000-000000000000", json={"role": "x"}
        )
        assert resp.status_code == 404


class TestFilter:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("All", ["Jimin Kim", "Minsu Jeon"]),
            ("A", ["Minsu Jeon"]),
            ("B조", ["Jimin Kim"]),
            ("Facilities", ["Jimin Kim"]),
        ],
    )
    async def test_filter(
        self, client: AsyncClient, roster: list[Employee], value: str, expected: list[str]
    ) -> None:
        resp = await client.get("/api/employees/", params={"filter": value})
        assert [e["name"] for e in resp.json()] == expected

    async def test_search_tolerates_typos(self, client: AsyncClient, roster: list[Employee]) -> None:
        resp = await client.get("/api/employees/", params={"search": "minsu jeon"})
        assert [e["name"] for e in resp.json()][0] == "Minsu Jeon"

    async def test_search_by_department(self, client: AsyncClient, roster: list[Employee]) -> None:
        resp = await client.get("/api/employees/", params={"search": "pest"})
        assert [e["name"] for e in resp.json()] == ["Minsu Jeon"]


class TestAvatar:
    async def test_upload_avatar(
        self, client: AsyncClient, roster: list[Employee], photo_storage: LocalPhotoStorage
    ) -> None:
        emp = roster[0]
        resp = await client.post(
            f"/api/employees/{emp.id}/avatar",
            files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        )
        assert resp.status_code == 200, resp.text
        url = resp.json()["avatar_url"]
        assert url.startswith("/media/avatars/") and url.endswith("_me.png")
        key = url.removeprefix("/media/")
        assert (photo_storage.base_dir / key).exists()
