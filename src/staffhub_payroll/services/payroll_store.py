"""Payroll record store with constraint-backed idempotent inserts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.calculators.types import PayrollComputation
from staffhub_payroll.errors import DuplicatePayrollError, PayrollPersistenceError
from staffhub_payroll.models import Employee, PayrollRecord
from staffhub_payroll.services.state_machine import PayrollStateMachine, PayrollStatus


class PayrollStore:
    """Create, read and approve PayrollRecord rows.

    Key invariants:
    1. One payroll per (employee, month, year), enforced by a unique constraint
    2. A rejected insert is rolled back to its SAVEPOINT so the caller's
       session stays usable for the next employee
    3. Approval is a conditional UPDATE on the statuses the state machine
       lets move to approved, so a record is stamped at most once even under
       concurrent approvals
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, payroll_id: UUID) -> PayrollRecord | None:
        """Load a payroll record by id."""
        return await self.session.get(PayrollRecord, payroll_id)

    async def get_by_key(
        self, employee_id: UUID, month: int, year: int
    ) -> PayrollRecord | None:
        """Load the payroll record for an idempotency key, if any."""
        result = await self.session.execute(
            select(PayrollRecord).where(
                PayrollRecord.employee_id == employee_id,
                PayrollRecord.period_month == month,
                PayrollRecord.period_year == year,
            )
        )
        return result.scalar_one_or_none()

    async def get_many(self, payroll_ids: Sequence[UUID]) -> list[PayrollRecord]:
        """Load the payroll records among the given ids."""
        if not payroll_ids:
            return []
        result = await self.session.execute(
            select(PayrollRecord)
            .where(PayrollRecord.payroll_id.in_(list(payroll_ids)))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().unique().all())

    async def list_records(
        self,
        month: int | None = None,
        year: int | None = None,
        employee_id: UUID | None = None,
        status: str | None = None,
    ) -> list[PayrollRecord]:
        """List payroll records, newest period first."""
        query = select(PayrollRecord)
        if month:
            query = query.where(PayrollRecord.period_month == month)
        if year:
            query = query.where(PayrollRecord.period_year == year)
        if employee_id:
            query = query.where(PayrollRecord.employee_id == employee_id)
        if status:
            query = query.where(PayrollRecord.status == status)
        query = query.order_by(
            PayrollRecord.period_year.desc(),
            PayrollRecord.period_month.desc(),
            PayrollRecord.generated_at.desc(),
        )
        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def insert_draft(
        self,
        employee: Employee,
        computation: PayrollComputation,
        generated_by: UUID | None = None,
    ) -> PayrollRecord:
        """Insert a draft payroll for the computation's key.

        Raises:
            DuplicatePayrollError: A record for the key already exists
            PayrollPersistenceError: Any other store failure
        """
        month = computation.period_month
        year = computation.period_year
        record = PayrollRecord(
            employee=employee,
            employee_id=employee.employee_id,
            period_month=month,
            period_year=year,
            base_salary=computation.base_salary,
            attendance_deduction=computation.attendance_deduction,
            leave_deduction=computation.leave_deduction,
            total_bonuses=computation.total_bonuses,
            total_deductions=computation.total_deductions,
            gross_salary=computation.gross_salary,
            net_salary=computation.net_salary,
            notes=computation.to_notes(),
            status=PayrollStateMachine.INITIAL_STATUS.value,
            generated_by_user_id=generated_by,
            generated_at=datetime.now(timezone.utc),
        )

        try:
            async with self.session.begin_nested():
                self.session.add(record)
                await self.session.flush()
        except IntegrityError as e:
            # A concurrent request may have won the race for this key
            if await self.get_by_key(employee.employee_id, month, year) is not None:
                raise DuplicatePayrollError(employee.employee_id, month, year) from e
            raise PayrollPersistenceError(
                f"Payroll insert rejected: {e.orig if e.orig is not None else e}"
            ) from e
        except SQLAlchemyError as e:
            raise PayrollPersistenceError(f"Payroll insert failed: {e}") from e

        return record

    async def approve_drafts(
        self,
        payroll_ids: Sequence[UUID],
        approver_user_id: UUID,
        approved_at: datetime | None = None,
    ) -> list[PayrollRecord]:
        """Move draft records among the ids to approved.

        Ids that are missing or not in an approvable status are skipped.
        Returns the records this call approved.
        """
        stamp = approved_at or datetime.now(timezone.utc)
        approvable_from = PayrollStateMachine.sources_for(PayrollStatus.APPROVED)
        approved_ids: list[UUID] = []

        try:
            for payroll_id in dict.fromkeys(payroll_ids):
                result = await self.session.execute(
                    update(PayrollRecord)
                    .where(
                        PayrollRecord.payroll_id == payroll_id,
                        PayrollRecord.status.in_(approvable_from),
                    )
                    .values(
                        status=PayrollStatus.APPROVED.value,
                        approved_by_user_id=approver_user_id,
                        approved_at=stamp,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    approved_ids.append(payroll_id)

            return await self.get_many(approved_ids)
        except SQLAlchemyError as e:
            raise PayrollPersistenceError(f"Failed to approve payrolls: {e}") from e
