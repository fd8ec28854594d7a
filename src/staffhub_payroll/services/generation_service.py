"""Monthly payroll generation - orchestrates calculation and persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffhub_payroll.calculators.engine import PayrollCalculator
from staffhub_payroll.calculators.types import PayrollComputation
from staffhub_payroll.config import Settings, get_settings
from staffhub_payroll.errors import (
    DuplicatePayrollError,
    EmployeeNotFoundError,
    PayrollError,
    PeriodValidationError,
)
from staffhub_payroll.models import Employee, PayrollRecord
from staffhub_payroll.services.authorization import AuthorizationService
from staffhub_payroll.services.input_loader import PayrollInputLoader
from staffhub_payroll.services.payroll_store import PayrollStore

logger = logging.getLogger(__name__)


@dataclass
class CreatedPayroll:
    """A payroll persisted by a generation run."""

    employee: str
    payroll: PayrollRecord
    calculation: PayrollComputation


@dataclass
class GenerationResult:
    """Outcome of a generation request.

    ``created`` and ``conflicts`` are independent: a batch can contain both.
    """

    month: int
    year: int
    requested: int = 0
    created: list[CreatedPayroll] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.created) > 0

    @property
    def message(self) -> str:
        if self.success:
            return f"Processed {len(self.created)} employees"
        return (
            f"All {self.requested} employees already have payroll records "
            f"for this period"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "created": [
                {
                    "employee": c.employee,
                    "payroll_id": str(c.payroll.payroll_id),
                    "calculation": c.calculation.to_dict(),
                }
                for c in self.created
            ],
            "conflicts": list(self.conflicts),
        }


class PayrollGenerationService:
    """Generates draft payroll records for a (month, year) period.

    Operations:
    - generate: calculate and persist drafts for a set of employees
    - calculate_only: preview one employee's computation without persisting

    Each employee is processed independently; a conflict or failure for one
    employee is recorded and the batch moves on. With ``commit_each`` every
    created draft is committed on its own, so drafts written before a caller
    gives up stay persisted. The session must use ``expire_on_commit=False``.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        commit_each: bool = True,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.commit_each = commit_each
        self.calculator = PayrollCalculator(self.settings.deduction_policy)
        self.loader = PayrollInputLoader(session)
        self.store = PayrollStore(session)
        self.authorization = AuthorizationService(session)

    def validate_period(self, month: int | None, year: int | None) -> None:
        """Reject a missing or out-of-range period."""
        if not month or not year:
            raise PeriodValidationError(month, year, "month and year are required")
        if month < 1 or month > 12:
            raise PeriodValidationError(month, year, f"month must be 1-12, got {month}")
        if year < self.settings.min_payroll_year:
            raise PeriodValidationError(
                month,
                year,
                f"year must be {self.settings.min_payroll_year} or later, got {year}",
            )

    async def generate(
        self,
        month: int,
        year: int,
        employee_ids: Sequence[UUID] | None = None,
        requested_by: UUID | None = None,
    ) -> GenerationResult:
        """Generate draft payrolls for active employees in the period.

        Raises (request-level, before any write):
            AuthenticationError / AuthorizationError: caller is not admin or hr
            PeriodValidationError: invalid month/year
            EmployeeNotFoundError: no active employee matched
        """
        await self.authorization.require_elevated_role(requested_by)
        self.validate_period(month, year)

        employees = await self.loader.get_active_employees(employee_ids)
        if not employees:
            raise EmployeeNotFoundError("No active employees found")

        result = GenerationResult(month=month, year=year, requested=len(employees))

        for employee in employees:
            await self._generate_for_employee(employee, month, year, requested_by, result)

        logger.info(
            "Payroll generation %02d/%d: %d created, %d conflicts (requested by %s)",
            month,
            year,
            len(result.created),
            len(result.conflicts),
            requested_by,
        )
        return result

    async def _generate_for_employee(
        self,
        employee: Employee,
        month: int,
        year: int,
        requested_by: UUID | None,
        result: GenerationResult,
    ) -> None:
        """Calculate and persist one employee, recording any failure on result."""
        name = employee.full_name
        employee_id = employee.employee_id

        # Fast path; the unique constraint is what actually guarantees one row
        existing = await self.store.get_by_key(employee_id, month, year)
        if existing is not None:
            logger.warning("Payroll already exists for %s (%02d/%d)", employee_id, month, year)
            result.conflicts.append(f"Payroll already exists for {name}")
            return

        try:
            # Per-employee SAVEPOINT: a failure here leaves siblings untouched
            async with self.session.begin_nested():
                inputs = await self.loader.load_inputs(employee, month, year)
                computation = self.calculator.calculate(
                    employee,
                    month,
                    year,
                    inputs.bonuses,
                    inputs.deductions,
                    inputs.attendance,
                    inputs.leaves,
                    inputs.leave_balance,
                )
                record = await self.store.insert_draft(employee, computation, requested_by)
        except DuplicatePayrollError:
            logger.warning(
                "Concurrent payroll insert for %s (%02d/%d) lost the race",
                employee_id,
                month,
                year,
            )
            result.conflicts.append(f"Payroll already exists for {name}")
            return
        except PayrollError as e:
            logger.warning("Failed to create payroll for %s: %s", employee_id, e)
            result.conflicts.append(f"Failed to create payroll for {name}: {e}")
            return
        except Exception as e:
            logger.exception("Error processing payroll for %s", employee_id)
            result.conflicts.append(f"Error processing {name}: {e}")
            return

        if self.commit_each:
            await self.session.commit()

        result.created.append(
            CreatedPayroll(employee=name, payroll=record, calculation=computation)
        )

    async def calculate_only(
        self,
        employee_id: UUID,
        month: int,
        year: int,
        requested_by: UUID | None = None,
    ) -> tuple[Employee, PayrollComputation]:
        """Compute one employee's payroll without persisting anything.

        The employee must exist (any status); existing records are ignored.
        """
        await self.authorization.require_elevated_role(requested_by)
        self.validate_period(month, year)

        employee = await self.loader.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")

        inputs = await self.loader.load_inputs(employee, month, year)
        computation = self.calculator.calculate(
            employee,
            month,
            year,
            inputs.bonuses,
            inputs.deductions,
            inputs.attendance,
            inputs.leaves,
            inputs.leave_balance,
        )
        return employee, computation
