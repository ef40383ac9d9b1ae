"""
conftest.py - shared fixtures for the backend tests.

Strategy:
- Point DATABASE_URL at a throwaway SQLite file (aiosqlite) before any
  application module is imported, and disable startup migrations/seeding.
- Every test starts from a freshly created schema, an empty snapshot hub
  and an empty handover registry.
- Photo uploads go to a per-test temporary directory.
"""

from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="facility_ops_tests_"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.db'}"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["HANDOVER_SEND_DELAY_SEC"] = "0"
os.environ["HANDOVER_WEBHOOK_URL"] = ""
os.environ["PHOTO_STORAGE_DIR"] = str(_TMP_DIR / "storage")

import openpyxl  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from facility_ops.db.models import Base, Employee  # noqa: E402
from facility_ops.db.session import AsyncSessionLocal, engine  # noqa: E402
from facility_ops.main import app  # noqa: E402
from facility_ops.services.handover import registry  # noqa: E402
from facility_ops.services.live import hub  # noqa: E402
from facility_ops.services.photo_storage import LocalPhotoStorage, get_storage  # noqa: E402


# ---------------------------------------------------------------------------
# Schema and in-process state reset
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(autouse=True)
async def fresh_state():
    """Recreate all tables and clear process-local state for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    hub.reset()
    registry.clear()
    yield
    hub.reset()
    registry.clear()


# ---------------------------------------------------------------------------
# HTTP client and DB session
# ---------------------------------------------------------------------------


@pytest.fixture
def photo_storage(tmp_path: Path) -> LocalPhotoStorage:
    storage = LocalPhotoStorage(tmp_path / "media", "/media")
    app.dependency_overrides[get_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_storage, None)


@pytest_asyncio.fixture
async def client(photo_storage: LocalPhotoStorage) -> AsyncClient:
    """Fresh HTTPX async client per test function."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db() -> AsyncSession:
    """Raw DB session for arranging data and checking results directly."""
    async with AsyncSessionLocal() as session:
        yield session


# ---------------------------------------------------------------------------
# Roster and workbook helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def roster(db: AsyncSession) -> list[Employee]:
    """Two-person roster: one employee per shift."""
    employees = [
        Employee(
            name="Minsu Jeon",
            role="Pest Control Manager",
            team="A",
            shift="A",
            department="Pest Control",
            email="minsu.jeon@company.com",
            phone="010-1234-5678",
        ),
        Employee(
            name="Jimin Kim",
            role="Facility Engineer",
            team="B",
            shift="B",
            department="Facilities",
            email="jimin.kim@company.com",
            phone="010-9876-5432",
        ),
    ]
    db.add_all(employees)
    await db.commit()
    return employees


@pytest.fixture
def make_workbook():
    """Build an in-memory .xlsx from a header row and data rows."""

    def _build(headers: list[str], rows: list[list]) -> bytes:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Attendance"
        ws.append(headers)
        for row in rows:
            ws.append(row)
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    return _build
