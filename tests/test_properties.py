"""Property-based tests for payroll calculation invariants.

These tests use hypothesis to generate random salaries, period amounts and
attendance mixes, and verify the net-pay identities hold for every input.
"""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

from hypothesis import given, settings, strategies as st

from factories import make_attendance, make_employee
from staffhub_payroll.calculators.engine import PayrollCalculator
from staffhub_payroll.calculators.period_calendar import working_days
from staffhub_payroll.calculators.policy import DeductionPolicy

amounts = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("100000"), places=2
)
rates = st.decimals(min_value=Decimal("0"), max_value=Decimal("1"), places=2)
attendance_mixes = st.lists(
    st.sampled_from(["present", "absent", "late", "half-day"]),
    max_size=23,
)
months = st.integers(min_value=1, max_value=12)
years = st.integers(min_value=2000, max_value=2100)


def amount_records(values: list[Decimal]) -> list[SimpleNamespace]:
    return [SimpleNamespace(amount=v) for v in values]


# =============================================================================
# Net pay
# =============================================================================


class TestNetPayInvariants:
    """net = max(0, gross - total deductions), for all inputs."""

    @given(
        salary=amounts,
        bonuses=st.lists(amounts, max_size=5),
        deductions=st.lists(amounts, max_size=5),
        attendance=attendance_mixes,
        late_rate=rates,
        half_day_rate=rates,
        month=months,
        year=years,
    )
    @settings(max_examples=200)
    def test_net_identity(
        self, salary, bonuses, deductions, attendance, late_rate, half_day_rate, month, year
    ):
        calculator = PayrollCalculator(
            DeductionPolicy(late_penalty_rate=late_rate, half_day_penalty_rate=half_day_rate)
        )

        result = calculator.calculate(
            make_employee(base_salary=salary),
            month,
            year,
            amount_records(bonuses),
            amount_records(deductions),
            make_attendance(*attendance),
            [],
            None,
        )

        assert result.gross_salary == result.base_salary + result.total_bonuses
        assert result.total_deductions == (
            result.attendance_deduction + result.leave_deduction + result.manual_deductions
        )
        assert result.net_salary == max(Decimal("0"), result.gross_salary - result.total_deductions)
        assert result.net_salary >= 0
        assert result.net_salary <= result.gross_salary

    @given(salary=amounts, attendance=attendance_mixes, month=months, year=years)
    @settings(max_examples=100)
    def test_extra_absence_never_raises_net(self, salary, attendance, month, year):
        calculator = PayrollCalculator()
        employee = make_employee(base_salary=salary)

        def net(statuses):
            return calculator.calculate(
                employee, month, year, [], [], make_attendance(*statuses), [], None
            ).net_salary

        assert net(attendance + ["absent"]) <= net(attendance)

    @given(salary=amounts, attendance=attendance_mixes, month=months, year=years)
    @settings(max_examples=100)
    def test_deductions_are_cent_rounded(self, salary, attendance, month, year):
        result = PayrollCalculator().calculate(
            make_employee(base_salary=salary),
            month,
            year,
            [],
            [],
            make_attendance(*attendance),
            [],
            None,
        )

        assert result.attendance_deduction == result.attendance_deduction.quantize(Decimal("0.01"))
        assert result.net_salary == result.net_salary.quantize(Decimal("0.01"))


# =============================================================================
# Working days
# =============================================================================


class TestWorkingDayInvariants:
    @given(month=months, year=years)
    @settings(max_examples=200)
    def test_deterministic_and_bounded(self, month, year):
        days = working_days(month, year)

        assert days == working_days(month, year)
        assert 20 <= days <= 23

    def test_every_month_of_a_century(self):
        for year in range(2000, 2101):
            total = 0
            for month in range(1, 13):
                days = working_days(month, year)
                assert 20 <= days <= 23
                total += days
            # 52 weeks plus one or two spare days
            assert 260 <= total <= 262
