"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


class AttendanceStatus(str, Enum):
    """Daily attendance outcomes."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"


class LeaveType(str, Enum):
    """Leave categories. Anything outside annual/sick/casual is treated as OTHER."""

    ANNUAL = "annual"
    SICK = "sick"
    CASUAL = "casual"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> LeaveType:
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class LeaveStatus(str, Enum):
    """Leave request states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DeductionBreakdown:
    """Attendance and leave deductions for one employee-period."""

    working_days: int
    daily_rate: Decimal
    absent_days: int
    late_days: int
    half_days: int
    unpaid_leave_days: Decimal
    attendance_deduction: Decimal
    leave_deduction: Decimal


@dataclass(frozen=True)
class PayrollComputation:
    """Every figure produced when calculating one employee's pay."""

    employee_id: UUID
    period_month: int
    period_year: int
    working_days: int
    daily_rate: Decimal
    base_salary: Decimal
    total_bonuses: Decimal
    manual_deductions: Decimal
    attendance_deduction: Decimal
    leave_deduction: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    absent_days: int = 0
    late_days: int = 0
    half_days: int = 0
    unpaid_leave_days: Decimal = Decimal("0")

    def to_notes(self) -> str:
        """Audit text persisted in PayrollRecord.notes."""
        return (
            f"Attendance deductions: ${self.attendance_deduction} "
            f"({self.absent_days} absent, {self.late_days} late, {self.half_days} half-day), "
            f"Leave deductions: ${self.leave_deduction} "
            f"({self.unpaid_leave_days} unpaid days), "
            f"Manual deductions: ${self.manual_deductions}, "
            f"Working days: {self.working_days}, "
            f"Daily rate: ${self.daily_rate}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict (amounts as strings)."""
        return {
            "employee_id": str(self.employee_id),
            "period_month": self.period_month,
            "period_year": self.period_year,
            "working_days": self.working_days,
            "daily_rate": str(self.daily_rate),
            "base_salary": str(self.base_salary),
            "total_bonuses": str(self.total_bonuses),
            "manual_deductions": str(self.manual_deductions),
            "attendance_deduction": str(self.attendance_deduction),
            "leave_deduction": str(self.leave_deduction),
            "total_deductions": str(self.total_deductions),
            "gross_salary": str(self.gross_salary),
            "net_salary": str(self.net_salary),
            "absent_days": self.absent_days,
            "late_days": self.late_days,
            "half_days": self.half_days,
            "unpaid_leave_days": str(self.unpaid_leave_days),
        }
