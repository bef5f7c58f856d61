"""Unit tests for the aggregator: totals, net pay guard and sanity warnings."""

from decimal import Decimal

import pytest

from lgupay.sdk.config import load_payroll_rules
from lgupay.sdk.payroll.aggregator import (
    NEGATIVE_NET_PAY,
    aggregate,
    merge_warnings,
    sanity_warnings,
)
from lgupay.sdk.payroll.allowances import AllowanceContext, calculate_allowances
from lgupay.sdk.payroll.basic_pay import calculate_basic_pay
from lgupay.sdk.payroll.deductions import calculate_deductions
from lgupay.sdk.payroll.rates import resolve_rates
from lgupay.sdk.schemas import AdjustmentRequest, AttendanceFacts, EmployeeProfile, PayPeriod


@pytest.fixture(scope="module")
def rules():
    return load_payroll_rules("2023")


@pytest.fixture
def period():
    return PayPeriod(year=2024, month=3, start_date="2024-03-01", end_date="2024-03-31")


def run_stages(rules, period, salary, days_present, loans=()):
    """Run the calculation stages by hand and aggregate them."""
    employee = EmployeeProfile(id=42, name="Pedro Reyes", monthly_salary=salary)
    rates = resolve_rates(employee)
    basic = calculate_basic_pay(
        rates.monthly_rate, rates.daily_rate, 22, AttendanceFacts(days_present=days_present)
    )
    allowances = calculate_allowances(
        AllowanceContext(employee, rates, basic.basic_pay, basic.days_present, rules.allowances)
    )
    deductions = calculate_deductions(
        basic.basic_pay,
        basic.basic_pay + allowances.total,
        allowances.non_taxable_total,
        rules,
        [AdjustmentRequest(name="Loan", amount=amount) for amount in loans],
    )
    return aggregate(employee, period, rules.version, rates, basic, allowances, deductions)


class TestAggregate:

    def test_net_pay(self, rules, period):
        result = run_stages(rules, period, 30000, 22)

        assert result.employee_id == 42
        assert result.employee_name == "Pedro Reyes"
        assert result.rules_version == "2023"
        assert result.gross_pay == Decimal("33250.00")
        assert result.net_pay == Decimal("28417.73")
        assert result.errors == ()

    def test_negative_net_pay_becomes_anomaly(self, rules, period):
        result = run_stages(rules, period, 15000, 5, loans=[10000])

        assert result.net_pay == Decimal("0.00")
        anomaly = result.errors[0]
        assert anomaly.code == NEGATIVE_NET_PAY
        assert anomaly.details == {
            "unclamped_net_pay": Decimal("-4870.20"),
            "shortfall": Decimal("4870.20"),
        }
        assert anomaly.message == (
            "deductions (₱10,563.38) exceed gross pay (₱5,693.18) by ₱4,870.20; net pay set to 0"
        )
        assert result.has_errors

    def test_exact_zero_net_is_not_an_error(self, rules, period):
        """Deductions equal to gross clamp nothing."""
        result = run_stages(rules, period, 30000, 22, loans=["28417.73"])
        assert result.net_pay == Decimal("0.00")
        assert result.errors == ()
        assert "net pay is zero after deductions" in result.warnings

    def test_caller_warnings_come_first(self, rules, period):
        employee = EmployeeProfile(id=1, monthly_salary=30000)
        rates = resolve_rates(employee)
        basic = calculate_basic_pay(rates.monthly_rate, rates.daily_rate, 22, AttendanceFacts(days_present=0))
        allowances = calculate_allowances(
            AllowanceContext(employee, rates, basic.basic_pay, basic.days_present, rules.allowances)
        )
        deductions = calculate_deductions(basic.basic_pay, allowances.total, Decimal("0.00"), rules)

        result = aggregate(
            employee, period, rules.version, rates, basic, allowances, deductions,
            warnings=["first", "zero attendance for period"],
        )
        assert result.warnings == ("first", "zero attendance for period")


class TestMergeWarnings:

    def test_dedupes_in_first_seen_order(self):
        assert merge_warnings(["a", "b"], ["b", "c"], ("a",)) == ("a", "b", "c")

    def test_empty(self):
        assert merge_warnings() == ()


class TestSanityWarnings:

    def test_high_deduction_ratio(self):
        warnings = sanity_warnings(Decimal("1000"), Decimal("600"), Decimal("400"), Decimal("10"))
        assert warnings == ["deductions are 60.00% of gross pay (exceeds 50%)"]

    def test_half_is_not_flagged(self):
        assert sanity_warnings(Decimal("1000"), Decimal("500"), Decimal("500"), Decimal("10")) == []

    def test_deductions_exceed_gross(self):
        warnings = sanity_warnings(Decimal("1000"), Decimal("1200"), Decimal("0"), Decimal("10"))
        assert warnings == ["total deductions exceed gross pay", "net pay is zero after deductions"]

    def test_zero_gross_with_attendance(self):
        assert sanity_warnings(Decimal("0"), Decimal("0"), Decimal("0"), Decimal("5")) == [
            "zero gross pay despite days present"
        ]

    def test_zero_gross_without_attendance(self):
        assert sanity_warnings(Decimal("0"), Decimal("0"), Decimal("0"), Decimal("0")) == []
