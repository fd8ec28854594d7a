"""ORM models."""

from staffhub_payroll.models.attendance import AttendanceRecord, LeaveBalance, LeaveRecord
from staffhub_payroll.models.base import Base, TimestampMixin
from staffhub_payroll.models.employee import AppUser, Employee
from staffhub_payroll.models.payroll import BonusRecord, DeductionRecord, PayrollRecord

__all__ = [
    "AppUser",
    "AttendanceRecord",
    "Base",
    "BonusRecord",
    "DeductionRecord",
    "Employee",
    "LeaveBalance",
    "LeaveRecord",
    "PayrollRecord",
    "TimestampMixin",
]
