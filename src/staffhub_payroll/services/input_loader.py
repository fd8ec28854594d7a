"""Read access to the records a payroll is computed from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.calculators.period_calendar import period_bounds
from staffhub_payroll.calculators.types import LeaveStatus
from staffhub_payroll.models import (
    AttendanceRecord,
    BonusRecord,
    DeductionRecord,
    Employee,
    LeaveBalance,
    LeaveRecord,
)


@dataclass
class EmployeePayrollInputs:
    """Raw records for one employee-period, ready for the calculator."""

    employee: Employee
    attendance: list[AttendanceRecord] = field(default_factory=list)
    leaves: list[LeaveRecord] = field(default_factory=list)
    leave_balance: LeaveBalance | None = None
    bonuses: list[BonusRecord] = field(default_factory=list)
    deductions: list[DeductionRecord] = field(default_factory=list)


class PayrollInputLoader:
    """Loads employees and their period inputs from the record stores."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee(self, employee_id: UUID) -> Employee | None:
        """Load an employee by id regardless of status."""
        return await self.session.get(Employee, employee_id)

    async def get_active_employees(
        self, employee_ids: Sequence[UUID] | None = None
    ) -> list[Employee]:
        """Active employees, optionally restricted to a subset of ids."""
        query = select(Employee).where(Employee.status == "active")
        if employee_ids:
            query = query.where(Employee.employee_id.in_(list(employee_ids)))
        query = query.order_by(Employee.last_name, Employee.first_name)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_attendance(
        self, employee_id: UUID, month: int, year: int
    ) -> list[AttendanceRecord]:
        """Attendance records dated inside the period."""
        start, end = period_bounds(month, year)
        result = await self.session.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.attendance_date >= start,
                AttendanceRecord.attendance_date <= end,
            )
        )
        return list(result.scalars().all())

    async def get_approved_leaves(
        self, employee_id: UUID, month: int, year: int
    ) -> list[LeaveRecord]:
        """Approved leaves that start or end inside the period."""
        start, end = period_bounds(month, year)
        result = await self.session.execute(
            select(LeaveRecord).where(
                LeaveRecord.employee_id == employee_id,
                LeaveRecord.status == LeaveStatus.APPROVED.value,
                or_(
                    and_(LeaveRecord.start_date >= start, LeaveRecord.start_date <= end),
                    and_(LeaveRecord.end_date >= start, LeaveRecord.end_date <= end),
                ),
            )
        )
        return list(result.scalars().all())

    async def get_leave_balance(self, employee_id: UUID, year: int) -> LeaveBalance | None:
        """Leave balance row for the calculation year."""
        result = await self.session.execute(
            select(LeaveBalance).where(
                LeaveBalance.employee_id == employee_id,
                LeaveBalance.year == year,
            )
        )
        return result.scalar_one_or_none()

    async def get_bonuses(self, employee_id: UUID, month: int, year: int) -> list[BonusRecord]:
        """Bonuses recorded for exactly this period."""
        result = await self.session.execute(
            select(BonusRecord).where(
                BonusRecord.employee_id == employee_id,
                BonusRecord.period_month == month,
                BonusRecord.period_year == year,
            )
        )
        return list(result.scalars().all())

    async def get_deductions(
        self, employee_id: UUID, month: int, year: int
    ) -> list[DeductionRecord]:
        """Manual deductions recorded for exactly this period."""
        result = await self.session.execute(
            select(DeductionRecord).where(
                DeductionRecord.employee_id == employee_id,
                DeductionRecord.period_month == month,
                DeductionRecord.period_year == year,
            )
        )
        return list(result.scalars().all())

    async def load_inputs(
        self, employee: Employee, month: int, year: int
    ) -> EmployeePayrollInputs:
        """Load every input the calculator needs for one employee."""
        employee_id = employee.employee_id
        return EmployeePayrollInputs(
            employee=employee,
            attendance=await self.get_attendance(employee_id, month, year),
            leaves=await self.get_approved_leaves(employee_id, month, year),
            leave_balance=await self.get_leave_balance(employee_id, year),
            bonuses=await self.get_bonuses(employee_id, month, year),
            deductions=await self.get_deductions(employee_id, month, year),
        )
