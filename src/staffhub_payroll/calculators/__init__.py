"""Payroll calculation engine."""

from staffhub_payroll.calculators.deduction_resolver import DeductionResolver
from staffhub_payroll.calculators.engine import PayrollCalculator
from staffhub_payroll.calculators.period_calendar import period_bounds, working_days
from staffhub_payroll.calculators.policy import DeductionPolicy
from staffhub_payroll.calculators.types import DeductionBreakdown, PayrollComputation

__all__ = [
    "DeductionBreakdown",
    "DeductionPolicy",
    "DeductionResolver",
    "PayrollCalculator",
    "PayrollComputation",
    "period_bounds",
    "working_days",
]
