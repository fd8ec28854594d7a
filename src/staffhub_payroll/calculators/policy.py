"""Deduction policy constants."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

# Share of one day's pay withheld per late arrival.
LATE_PENALTY_RATE = Decimal("0.1")

# Share of one day's pay withheld per half-day; zero keeps half-days unpenalized.
HALF_DAY_PENALTY_RATE = Decimal("0")

# Net salary never drops below this amount; excess deductions are absorbed.
NET_SALARY_FLOOR = Decimal("0")

# Leave types backed by a balance category on LeaveBalance.
BALANCED_LEAVE_TYPES = ("annual", "sick", "casual")


@dataclass(frozen=True)
class DeductionPolicy:
    """Attendance penalty rates applied by the deduction resolver."""

    late_penalty_rate: Decimal = LATE_PENALTY_RATE
    half_day_penalty_rate: Decimal = HALF_DAY_PENALTY_RATE

    def __post_init__(self) -> None:
        for name in ("late_penalty_rate", "half_day_penalty_rate"):
            value = getattr(self, name)
            if value < 0 or value > 1:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
