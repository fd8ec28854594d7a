"""Attendance, leave and leave balance models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from staffhub_payroll.models.base import Base, TimestampMixin


class AttendanceRecord(Base, TimestampMixin):
    """One employee's attendance outcome for one calendar day."""

    __tablename__ = "attendance"

    attendance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="present")

    __table_args__ = (
        UniqueConstraint("employee_id", "attendance_date", name="attendance_employee_date_unique"),
        CheckConstraint(
            "status IN ('present', 'absent', 'late', 'half-day')",
            name="attendance_status_check",
        ),
    )


class LeaveRecord(Base, TimestampMixin):
    """Leave request spanning [start_date, end_date]."""

    __tablename__ = "leave"

    leave_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_count: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    reason: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="leave_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="leave_dates_check"),
        CheckConstraint("days_count >= 0", name="leave_days_count_check"),
    )


class LeaveBalance(Base, TimestampMixin):
    """Yearly leave entitlement and usage per category."""

    __tablename__ = "leave_balance"

    leave_balance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    annual_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    annual_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sick_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sick_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    casual_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    casual_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("employee_id", "year", name="leave_balance_employee_year_unique"),
    )
