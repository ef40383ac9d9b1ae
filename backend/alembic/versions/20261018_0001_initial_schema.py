"""initial: employees, work_logs, attendance_records, work_schedules,
notifications, activity_logs, import_history

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- employees ---
    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(100), nullable=False),
        sa.Column("team", sa.String(50), nullable=False),
        sa.Column("shift", sa.Enum("A", "B", name="shift_team"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("On-Duty", "Off-Duty", name="duty_status"),
            nullable=False,
        ),
        sa.Column("monthly_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_hours", sa.Integer(), nullable=False, server_default="240"),
        sa.Column("time_info", sa.String(50), nullable=False, server_default="-"),
        sa.Column("time_label", sa.String(50), nullable=False, server_default="Standby"),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("join_date", sa.Date(), nullable=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- work_logs ---
    op.create_table(
        "work_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("task_type", sa.Enum("Pest", "Facility", name="task_type_enum"), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("location", sa.String(100), nullable=False),
        sa.Column(
            "priority",
            sa.Enum("Normal", "Important", "Urgent", name="priority_enum"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("Pending", "In Progress", "Completed", name="work_status_enum"),
            nullable=False,
        ),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_work_logs_date_time", "work_logs", ["date", "time"])

    # --- attendance_records ---
    op.create_table(
        "attendance_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_name", sa.String(100), nullable=False),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.String(10), nullable=False, server_default="-"),
        sa.Column("check_out", sa.String(10), nullable=False, server_default="-"),
        sa.Column("total_hours", sa.String(20), nullable=False, server_default="-"),
        sa.Column(
            "status",
            sa.Enum("Normal", "Late", "Overtime", "Leave", name="attendance_status_enum"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_name", "date", name="uq_attendance_employee_date"),
    )
    op.create_index("ix_attendance_records_date", "attendance_records", ["date"])

    # --- work_schedules ---
    op.create_table(
        "work_schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("team", sa.Enum("A", "B", name="schedule_team"), nullable=False),
        sa.Column("worker_name", sa.String(100), nullable=False),
        sa.Column(
            "status",
            sa.Enum("Scheduled", "InProgress", "Completed", name="schedule_status_enum"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date"),
    )

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "type",
            sa.Enum("alert", "info", "success", "warning", name="notification_type_enum"),
            nullable=False,
        ),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- activity_logs ---
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user", sa.String(100), nullable=False),
        sa.Column("action", sa.String(200), nullable=False),
        sa.Column(
            "type",
            sa.Enum("login", "logout", "edit", name="activity_type_enum"),
            nullable=False,
        ),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- import_history ---
    op.create_table(
        "import_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("success", "partial", "failed", name="import_status_enum"),
            nullable=False,
        ),
        sa.Column("logs", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("import_history")
    op.drop_table("activity_logs")
    op.drop_table("notifications")
    op.drop_table("work_schedules")
    op.drop_index("ix_attendance_records_date", table_name="attendance_records")
    op.drop_table("attendance_records")
    op.drop_index("ix_work_logs_date_time", table_name="work_logs")
    op.drop_table("work_logs")
    op.drop_table("employees")

    bind = op.get_bind()
    for enum_name in (
        "import_status_enum",
        "activity_type_enum",
        "notification_type_enum",
        "schedule_status_enum",
        "schedule_team",
        "attendance_status_enum",
        "work_status_enum",
        "priority_enum",
        "task_type_enum",
        "duty_status",
        "shift_team",
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
