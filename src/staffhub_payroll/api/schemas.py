"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Payroll record schemas
# ============================================================================


class PayrollRecordResponse(BaseModel):
    """Schema for a persisted payroll record."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    employee_name: str | None = None
    period_month: int
    period_year: int
    base_salary: Decimal
    attendance_deduction: Decimal
    leave_deduction: Decimal
    total_bonuses: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    notes: str | None = None
    status: str
    generated_by_user_id: UUID | None = None
    generated_at: datetime
    approved_by_user_id: UUID | None = None
    approved_at: datetime | None = None


class PayrollListResponse(BaseModel):
    """Schema for listing payroll records."""

    items: list[PayrollRecordResponse]
    total: int


# ============================================================================
# Calculation schemas
# ============================================================================


class PayrollCalculationResponse(BaseModel):
    """Every figure of one employee's payroll computation."""

    model_config = ConfigDict(from_attributes=True)

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
    absent_days: int
    late_days: int
    half_days: int
    unpaid_leave_days: Decimal


class CalculateRequest(BaseModel):
    """Schema for a single-employee dry run."""

    employee_id: UUID
    month: int
    year: int


class CalculateResponse(BaseModel):
    """Schema for a dry-run result."""

    success: bool = True
    employee: str
    calculation: PayrollCalculationResponse


# ============================================================================
# Generation schemas
# ============================================================================


class GenerateRequest(BaseModel):
    """Schema for a monthly generation request."""

    month: int
    year: int
    employee_ids: list[UUID] | None = None


class CreatedPayrollResponse(BaseModel):
    """One payroll created by a generation request."""

    employee: str
    payroll: PayrollRecordResponse
    calculation: PayrollCalculationResponse


class GenerateResponse(BaseModel):
    """Schema for a generation result."""

    success: bool
    message: str
    created: list[CreatedPayrollResponse]
    conflicts: list[str]


# ============================================================================
# Approval schemas
# ============================================================================


class ApprovalRequest(BaseModel):
    """Schema for approving payroll records."""

    payroll_ids: list[UUID] = Field(default_factory=list)


class ApprovalResponse(BaseModel):
    """Schema for approval response."""

    success: bool = True
    message: str
    approved: list[PayrollRecordResponse]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str
