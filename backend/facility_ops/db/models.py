import datetime as dt
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    team: Mapped[str] = mapped_column(String(50), nullable=False, default="A")
    shift: Mapped[str] = mapped_column(
        Enum("A", "B", name="shift_team"), nullable=False, default="A"
    )
    status: Mapped[str] = mapped_column(
        Enum("On-Duty", "Off-Duty", name="duty_status"),
        nullable=False,
        default="Off-Duty",
    )
    monthly_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=240)
    time_info: Mapped[str] = mapped_column(String(50), nullable=False, default="-")
    time_label: Mapped[str] = mapped_column(String(50), nullable=False, default="Standby")
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    join_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Employee id={self.id} name={self.name} shift={self.shift}>"


class WorkLog(Base):
    __tablename__ = "work_logs"

    __table_args__ = (
        Index("ix_work_logs_date_time", "date", "time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    task_type: Mapped[str] = mapped_column(
        Enum("Pest", "Facility", name="task_type_enum"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    priority: Mapped[str] = mapped_column(
        Enum("Normal", "Important", "Urgent", name="priority_enum"),
        nullable=False,
        default="Normal",
    )
    status: Mapped[str] = mapped_column(
        Enum("Pending", "In Progress", "Completed", name="work_status_enum"),
        nullable=False,
        default="Pending",
    )
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_url)

    def __repr__(self) -> str:
        return f"<WorkLog id={self.id} date={self.date} time={self.time} status={self.status}>"


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    __table_args__ = (
        UniqueConstraint("employee_name", "date", name="uq_attendance_employee_date"),
        Index("ix_attendance_records_date", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    check_in: Mapped[str] = mapped_column(String(10), nullable=False, default="-")
    check_out: Mapped[str] = mapped_column(String(10), nullable=False, default="-")
    total_hours: Mapped[str] = mapped_column(String(20), nullable=False, default="-")
    status: Mapped[str] = mapped_column(
        Enum("Normal", "Late", "Overtime", "Leave", name="attendance_status_enum"),
        nullable=False,
        default="Normal",
    )

    def __repr__(self) -> str:
        return (
            f"<AttendanceRecord id={self.id} employee_name={self.employee_name} "
            f"date={self.date} status={self.status}>"
        )


class WorkSchedule(Base):
    __tablename__ = "work_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, unique=True, nullable=False)
    team: Mapped[str] = mapped_column(Enum("A", "B", name="schedule_team"), nullable=False)
    worker_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum("Scheduled", "InProgress", "Completed", name="schedule_status_enum"),
        nullable=False,
        default="Scheduled",
    )

    def __repr__(self) -> str:
        return f"<WorkSchedule date={self.date} team={self.team} status={self.status}>"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        Enum("alert", "info", "success", "warning", name="notification_type_enum"),
        nullable=False,
        default="info",
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user: Mapped[str] = mapped_column(String(100), nullable=False)
    action: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(
        Enum("login", "logout", "edit", name="activity_type_enum"), nullable=False
    )
    timestamp: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ImportHistory(Base):
    __tablename__ = "import_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    uploaded_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        Enum("success", "partial", "failed", name="import_status_enum"), nullable=False
    )
    logs: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<ImportHistory id={self.id} filename={self.filename} status={self.status}>"
