"""Payroll calculator - composes salary, bonuses and deductions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from staffhub_payroll.calculators.deduction_resolver import DeductionResolver
from staffhub_payroll.calculators.money import round_to_cents, sum_amounts, to_decimal
from staffhub_payroll.calculators.policy import NET_SALARY_FLOOR, DeductionPolicy
from staffhub_payroll.calculators.types import PayrollComputation

if TYPE_CHECKING:
    from staffhub_payroll.models import (
        AttendanceRecord,
        BonusRecord,
        DeductionRecord,
        Employee,
        LeaveBalance,
        LeaveRecord,
    )


class PayrollCalculator:
    """Monthly payroll calculator.

    Calculation pipeline (stable order per employee):
    1) Resolve attendance and leave deductions
    2) Sum bonuses and manual deductions for the period
    3) gross = base salary + bonuses
    4) net = max(0, gross - total deductions)

    Bonus and deduction records must already be filtered to the period.
    """

    def __init__(self, policy: DeductionPolicy | None = None):
        self.resolver = DeductionResolver(policy)

    def calculate(
        self,
        employee: Employee,
        month: int,
        year: int,
        bonus_records: Iterable[BonusRecord],
        deduction_records: Iterable[DeductionRecord],
        attendance_records: Iterable[AttendanceRecord],
        leave_records: Sequence[LeaveRecord],
        leave_balance: LeaveBalance | None,
    ) -> PayrollComputation:
        """Calculate pay for a single employee-period."""
        breakdown = self.resolver.resolve(
            employee, month, year, attendance_records, leave_records, leave_balance
        )

        base_salary = round_to_cents(to_decimal(employee.base_salary))
        total_bonuses = round_to_cents(sum_amounts(bonus_records))
        manual_deductions = round_to_cents(sum_amounts(deduction_records))

        total_deductions = (
            breakdown.attendance_deduction + breakdown.leave_deduction + manual_deductions
        )
        gross_salary = base_salary + total_bonuses
        net_salary = max(NET_SALARY_FLOOR, gross_salary - total_deductions)

        return PayrollComputation(
            employee_id=employee.employee_id,
            period_month=month,
            period_year=year,
            working_days=breakdown.working_days,
            daily_rate=breakdown.daily_rate,
            base_salary=base_salary,
            total_bonuses=total_bonuses,
            manual_deductions=manual_deductions,
            attendance_deduction=breakdown.attendance_deduction,
            leave_deduction=breakdown.leave_deduction,
            total_deductions=total_deductions,
            gross_salary=gross_salary,
            net_salary=net_salary,
            absent_days=breakdown.absent_days,
            late_days=breakdown.late_days,
            half_days=breakdown.half_days,
            unpaid_leave_days=breakdown.unpaid_leave_days,
        )
