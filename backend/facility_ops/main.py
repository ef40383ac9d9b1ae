import logging
import subprocess
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from facility_ops.api.attendance import router as attendance_router
from facility_ops.api.dashboard import router as dashboard_router
from facility_ops.api.employees import router as employees_router
from facility_ops.api.handover import router as handover_router
from facility_ops.api.notifications import router as notifications_router
from facility_ops.api.schedules import router as schedules_router
from facility_ops.api.worklogs import router as worklogs_router
from facility_ops.core.config import settings
from facility_ops.core.logging import setup_logging
from facility_ops.db.seed import seed_initial_data
from facility_ops.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[1]


def run_migrations() -> None:
    logger.info("Running Alembic migrations...")
    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=BACKEND_DIR,
        )
        if result.returncode != 0:
            logger.error("Alembic migration failed:\n%s", result.stderr)
        else:
            logger.info("Migrations applied successfully:\n%s", result.stdout)
    except OSError as exc:
        logger.exception("Failed to run migrations: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply migrations and seed an empty database on startup."""
    setup_logging()
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        run_migrations()
    if settings.SEED_ON_STARTUP:
        async with AsyncSessionLocal() as session:
            await seed_initial_data(session)

    yield

    logger.info("Shutting down facility ops backend.")


app = FastAPI(
    title="Facility Ops API",
    description="Shift handover, daily work log, attendance and schedule dashboard for facility teams.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(worklogs_router, prefix="/api/worklogs", tags=["Work logs"])
app.include_router(handover_router, prefix="/api/handover", tags=["Handover"])
app.include_router(attendance_router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(schedules_router, prefix="/api/schedules", tags=["Schedules"])
app.include_router(employees_router, prefix="/api/employees", tags=["Employees"])
app.include_router(notifications_router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])

app.mount(
    settings.PHOTO_BASE_URL,
    StaticFiles(directory=settings.PHOTO_STORAGE_DIR, check_dir=False),
    name="media",
)


@app.get("/health", tags=["System"])
async def health_check() -> dict:
    return {"status": "ok"}
