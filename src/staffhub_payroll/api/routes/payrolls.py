"""Payroll API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from staffhub_payroll.api.dependencies import AppSettings, CurrentUserId, DbSession
from staffhub_payroll.api.schemas import (
    ApprovalRequest,
    ApprovalResponse,
    CalculateRequest,
    CalculateResponse,
    CreatedPayrollResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    PayrollCalculationResponse,
    PayrollListResponse,
    PayrollRecordResponse,
)
from staffhub_payroll.errors import PayrollNotFoundError
from staffhub_payroll.services.approval_service import PayrollApprovalService
from staffhub_payroll.services.generation_service import PayrollGenerationService
from staffhub_payroll.services.payroll_store import PayrollStore

router = APIRouter(prefix="/payrolls", tags=["payrolls"])

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# Generation
# ============================================================================


@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
)
async def generate_payroll(
    db: DbSession,
    settings: AppSettings,
    user_id: CurrentUserId,
    payload: GenerateRequest,
) -> GenerateResponse:
    """Generate draft payrolls for a month. Existing records are reported, not replaced."""
    service = PayrollGenerationService(db, settings)
    result = await service.generate(
        month=payload.month,
        year=payload.year,
        employee_ids=payload.employee_ids,
        requested_by=user_id,
    )
    await db.commit()

    return GenerateResponse(
        success=result.success,
        message=result.message,
        created=[
            CreatedPayrollResponse(
                employee=created.employee,
                payroll=PayrollRecordResponse.model_validate(created.payroll),
                calculation=PayrollCalculationResponse.model_validate(created.calculation),
            )
            for created in result.created
        ],
        conflicts=result.conflicts,
    )


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    responses=_ERRORS,
)
async def calculate_payroll(
    db: DbSession,
    settings: AppSettings,
    user_id: CurrentUserId,
    payload: CalculateRequest,
) -> CalculateResponse:
    """Preview one employee's payroll without persisting it."""
    service = PayrollGenerationService(db, settings)
    employee, computation = await service.calculate_only(
        payload.employee_id,
        payload.month,
        payload.year,
        requested_by=user_id,
    )
    return CalculateResponse(
        employee=employee.full_name,
        calculation=PayrollCalculationResponse.model_validate(computation),
    )


# ============================================================================
# Approval
# ============================================================================


@router.post(
    "/approve",
    response_model=ApprovalResponse,
    responses=_ERRORS,
)
async def approve_payrolls(
    db: DbSession,
    user_id: CurrentUserId,
    payload: ApprovalRequest,
) -> ApprovalResponse:
    """Approve draft payrolls. Ids that are not drafts are skipped."""
    service = PayrollApprovalService(db)
    result = await service.approve(payload.payroll_ids, user_id)
    await db.commit()

    return ApprovalResponse(
        message=result.message,
        approved=[PayrollRecordResponse.model_validate(r) for r in result.approved],
    )


# ============================================================================
# Queries
# ============================================================================


@router.get(
    "",
    response_model=PayrollListResponse,
)
async def list_payrolls(
    db: DbSession,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    year: int | None = None,
    employee_id: UUID | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> PayrollListResponse:
    """List payroll records, newest period first."""
    records = await PayrollStore(db).list_records(
        month=month,
        year=year,
        employee_id=employee_id,
        status=status_filter,
    )
    return PayrollListResponse(
        items=[PayrollRecordResponse.model_validate(r) for r in records],
        total=len(records),
    )


@router.get(
    "/{payroll_id}",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(
    db: DbSession,
    payroll_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Get a specific payroll record by ID."""
    record = await PayrollStore(db).get(payroll_id)
    if record is None:
        raise PayrollNotFoundError(payroll_id)
    return PayrollRecordResponse.model_validate(record)
