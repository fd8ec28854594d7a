"""Error taxonomy for payroll generation and approval.

Request-level errors abort a call before any write. Per-employee errors
(conflicts, calculation failures) are collected by the generation service
and never abort sibling employees.
"""

from __future__ import annotations

from uuid import UUID


class PayrollError(Exception):
    """Base class for all payroll engine errors."""

    code = "PAYROLL_ERROR"
    http_status = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ===== Validation =====


class InvalidRequestError(PayrollError):
    """Raised when a request is missing required fields or ids."""

    code = "VALIDATION_ERROR"
    http_status = 400


class PeriodValidationError(InvalidRequestError):
    """Raised when a (month, year) pair is outside the accepted range."""

    code = "INVALID_PERIOD"

    def __init__(self, month: int | None, year: int | None, reason: str | None = None):
        self.month = month
        self.year = year
        msg = "Invalid month or year"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


# ===== Authorization =====


class AuthorizationError(PayrollError):
    """Raised when the caller may not generate or approve payroll."""

    code = "FORBIDDEN"
    http_status = 403

    def __init__(self, message: str, role: str | None = None):
        self.role = role
        super().__init__(message)


class AuthenticationError(AuthorizationError):
    """Raised when the caller identity is missing or cannot be resolved."""

    code = "UNAUTHORIZED"
    http_status = 401


# ===== Not found =====


class EmployeeNotFoundError(PayrollError):
    """Raised when the requested employee(s) cannot be resolved."""

    code = "EMPLOYEE_NOT_FOUND"
    http_status = 404


class PayrollNotFoundError(PayrollError):
    """Raised when a payroll record id does not exist."""

    code = "PAYROLL_NOT_FOUND"
    http_status = 404

    def __init__(self, payroll_id: UUID):
        self.payroll_id = payroll_id
        super().__init__(f"Payroll {payroll_id} not found")


# ===== Conflicts & persistence =====


class DuplicatePayrollError(PayrollError):
    """Raised when a payroll already exists for (employee, month, year)."""

    code = "PAYROLL_EXISTS"
    http_status = 409

    def __init__(self, employee_id: UUID, month: int, year: int):
        self.employee_id = employee_id
        self.month = month
        self.year = year
        super().__init__(
            f"Payroll already exists for employee {employee_id} in {month:02d}/{year}"
        )


class PayrollPersistenceError(PayrollError):
    """Raised when the payroll store rejects or fails an operation."""

    code = "PERSISTENCE_ERROR"
    http_status = 500


# ===== Lifecycle =====


class InvalidTransitionError(PayrollError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"
    http_status = 409

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ImmutableRecordError(PayrollError):
    """Raised when an approved payroll record is modified."""

    code = "RECORD_IMMUTABLE"
    http_status = 409

    def __init__(self, payroll_id: UUID | None, fields: list[str]):
        self.payroll_id = payroll_id
        self.fields = fields
        super().__init__(
            f"Payroll {payroll_id} is approved and cannot be modified "
            f"(attempted: {', '.join(sorted(fields))})"
        )


# ===== Calculation =====


class CalculationError(PayrollError):
    """Raised when a payroll computation cannot be completed."""

    code = "CALCULATION_ERROR"
    http_status = 500


class ZeroWorkingDaysError(CalculationError):
    """Raised when a period has no working days to divide salary over."""

    def __init__(self, month: int, year: int):
        self.month = month
        self.year = year
        super().__init__(f"No working days in {month:02d}/{year}; daily rate is undefined")
