"""Bonus, deduction and payroll record models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    event,
    func,
    inspect,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from staffhub_payroll.errors import ImmutableRecordError
from staffhub_payroll.models.base import Base, TimestampMixin
from staffhub_payroll.models.employee import Employee


# ===== Period inputs =====


class BonusRecord(Base, TimestampMixin):
    """Flat bonus granted to an employee for one period."""

    __tablename__ = "bonus"

    bonus_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="general")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="bonus_amount_check"),
        CheckConstraint("period_month BETWEEN 1 AND 12", name="bonus_month_check"),
    )


class DeductionRecord(Base, TimestampMixin):
    """Flat manual deduction entered for an employee for one period."""

    __tablename__ = "deduction"

    deduction_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="general")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="deduction_amount_check"),
        CheckConstraint("period_month BETWEEN 1 AND 12", name="deduction_month_check"),
    )


# ===== Payroll =====


class PayrollRecord(Base, TimestampMixin):
    """Computed monthly payroll for one employee.

    (employee_id, period_month, period_year) is unique: the store rejects a
    second insert for the same key.
    """

    __tablename__ = "payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)

    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    attendance_deduction: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    leave_deduction: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_bonuses: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    total_deductions: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    gross_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    generated_by_user_id: Mapped[UUID | None] = mapped_column(nullable=True)
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    approved_by_user_id: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "period_month",
            "period_year",
            name="payroll_employee_period_unique",
        ),
        CheckConstraint("status IN ('draft', 'approved')", name="payroll_status_check"),
        CheckConstraint("period_month BETWEEN 1 AND 12", name="payroll_month_check"),
        CheckConstraint("net_salary >= 0", name="payroll_net_salary_check"),
        CheckConstraint(
            "(status = 'approved') = (approved_at IS NOT NULL)",
            name="payroll_approval_stamp_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(lazy="joined")

    @property
    def employee_name(self) -> str | None:
        return self.employee.full_name if self.employee is not None else None


def _persisted_status(obj: PayrollRecord) -> Any:
    """Status as last loaded from the store, without triggering a load."""
    history = inspect(obj).attrs.status.history
    if history.deleted:
        return history.deleted[0]
    if history.unchanged:
        return history.unchanged[0]
    return None


@event.listens_for(Session, "before_flush")
def guard_approved_payrolls(session: Session, flush_context: Any, instances: Any) -> None:
    """Refuse to flush changes to, or deletion of, an immutable payroll.

    Status edits on mutable records must follow the state machine.
    """
    # services imports models, so the state machine is resolved at flush time
    from staffhub_payroll.services.state_machine import PayrollStateMachine

    for obj in session.dirty:
        if not isinstance(obj, PayrollRecord):
            continue
        persisted = _persisted_status(obj)
        if persisted is None:
            continue
        if PayrollStateMachine.is_mutable(persisted):
            if obj.status != persisted:
                PayrollStateMachine.validate_transition(persisted, obj.status)
            continue
        changed = [
            attr.key
            for attr in inspect(obj).attrs
            if attr.key != "employee" and attr.history.has_changes()
        ]
        if changed:
            raise ImmutableRecordError(obj.payroll_id, changed)

    for obj in session.deleted:
        if not isinstance(obj, PayrollRecord):
            continue
        persisted = _persisted_status(obj)
        if persisted is not None and not PayrollStateMachine.is_mutable(persisted):
            raise ImmutableRecordError(obj.payroll_id, ["<deleted>"])
