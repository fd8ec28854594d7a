"""Payroll engine services."""

from staffhub_payroll.services.approval_service import ApprovalResult, PayrollApprovalService
from staffhub_payroll.services.authorization import ELEVATED_ROLES, AuthorizationService
from staffhub_payroll.services.generation_service import (
    CreatedPayroll,
    GenerationResult,
    PayrollGenerationService,
)
from staffhub_payroll.services.input_loader import EmployeePayrollInputs, PayrollInputLoader
from staffhub_payroll.services.payroll_store import PayrollStore
from staffhub_payroll.services.state_machine import PayrollStateMachine, PayrollStatus

__all__ = [
    "ApprovalResult",
    "AuthorizationService",
    "CreatedPayroll",
    "ELEVATED_ROLES",
    "EmployeePayrollInputs",
    "GenerationResult",
    "PayrollApprovalService",
    "PayrollGenerationService",
    "PayrollInputLoader",
    "PayrollStateMachine",
    "PayrollStatus",
    "PayrollStore",
]
