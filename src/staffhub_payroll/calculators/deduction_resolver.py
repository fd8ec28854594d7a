"""Attendance- and leave-based deduction resolution."""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from staffhub_payroll.calculators.money import ZERO, round_internal, round_to_cents, to_decimal
from staffhub_payroll.calculators.period_calendar import (
    date_in_period,
    period_bounds,
    require_working_days,
)
from staffhub_payroll.calculators.policy import BALANCED_LEAVE_TYPES, DeductionPolicy
from staffhub_payroll.calculators.types import (
    AttendanceStatus,
    DeductionBreakdown,
    LeaveStatus,
    LeaveType,
)

if TYPE_CHECKING:
    from datetime import date

    from staffhub_payroll.models import AttendanceRecord, Employee, LeaveBalance, LeaveRecord


def leave_overlaps_period(leave: Any, start: date, end: date) -> bool:
    """Check if a leave starts or ends inside [start, end].

    A leave that begins before and ends after the period does not match; this
    mirrors the store query used to load leaves.
    """
    return date_in_period(leave.start_date, start, end) or date_in_period(
        leave.end_date, start, end
    )


def remaining_balance(leave_type: LeaveType, balance: Any) -> Decimal:
    """Remaining entitlement (total - used) for a balanced leave category."""
    total = to_decimal(getattr(balance, f"{leave_type.value}_total", None))
    used = to_decimal(getattr(balance, f"{leave_type.value}_used", None))
    return total - used


def unpaid_days_for_leave(leave: Any, balance: Any) -> Decimal:
    """Days of a leave not covered by the employee's balance."""
    days = to_decimal(leave.days_count)
    leave_type = LeaveType.parse(leave.leave_type)
    if leave_type.value not in BALANCED_LEAVE_TYPES:
        return days
    return max(ZERO, days - remaining_balance(leave_type, balance))


class DeductionResolver:
    """Computes attendance and leave deductions for one employee-period.

    Pure: every input is passed in, nothing is loaded or written.

    - attendance = absent * daily_rate
                   + late * daily_rate * late_penalty_rate
                   + half-day * daily_rate * half_day_penalty_rate
    - leave = sum(unpaid_days) * daily_rate over approved leaves that start or
      end in the period, with balances taken from the target year's row
    """

    def __init__(self, policy: DeductionPolicy | None = None):
        self.policy = policy or DeductionPolicy()

    @staticmethod
    def daily_rate(base_salary: Decimal, month: int, year: int) -> tuple[Decimal, int]:
        """Return (daily_rate, working_days) for the period."""
        days = require_working_days(month, year)
        return to_decimal(base_salary) / days, days

    def resolve(
        self,
        employee: Employee,
        month: int,
        year: int,
        attendance_records: Iterable[AttendanceRecord],
        leave_records: Sequence[LeaveRecord],
        leave_balance: LeaveBalance | None,
    ) -> DeductionBreakdown:
        """Resolve deductions for an employee in (month, year)."""
        rate, days = self.daily_rate(employee.base_salary, month, year)

        statuses = Counter(record.status for record in attendance_records)
        absent = statuses[AttendanceStatus.ABSENT.value]
        late = statuses[AttendanceStatus.LATE.value]
        half = statuses[AttendanceStatus.HALF_DAY.value]

        attendance_amount = (
            absent * rate
            + late * rate * self.policy.late_penalty_rate
            + half * rate * self.policy.half_day_penalty_rate
        )

        unpaid_days = self._unpaid_leave_days(month, year, leave_records, leave_balance)

        return DeductionBreakdown(
            working_days=days,
            daily_rate=round_internal(rate),
            absent_days=absent,
            late_days=late,
            half_days=half,
            unpaid_leave_days=unpaid_days,
            attendance_deduction=round_to_cents(attendance_amount),
            leave_deduction=round_to_cents(unpaid_days * rate),
        )

    def _unpaid_leave_days(
        self,
        month: int,
        year: int,
        leave_records: Sequence[LeaveRecord],
        leave_balance: LeaveBalance | None,
    ) -> Decimal:
        # Leaves are joined to the target year's balance row; without one
        # there is nothing to join and no leave is charged.
        if leave_balance is None:
            return ZERO

        start, end = period_bounds(month, year)
        total = ZERO
        for leave in leave_records:
            if leave.status != LeaveStatus.APPROVED.value:
                continue
            if not leave_overlaps_period(leave, start, end):
                continue
            total += unpaid_days_for_leave(leave, leave_balance)
        return total
