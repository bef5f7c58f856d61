"""Unit tests for the deduction calculator.

Uses the packaged 2023 rule table.
"""

from decimal import Decimal

import pytest

from lgupay.sdk.config import load_payroll_rules
from lgupay.sdk.payroll.deductions import calculate_deductions
from lgupay.sdk.schemas import AdjustmentRequest


@pytest.fixture(scope="module")
def rules():
    return load_payroll_rules("2023")


def by_code(items) -> dict:
    return {item.code: item for item in items}


class TestStatutoryDeductions:
    """GSIS, Pag-IBIG, PhilHealth and withholding tax."""

    def test_full_month_30000(self, rules):
        # basic 30,000 + PERA 2,000
        result = calculate_deductions(
            Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules
        )
        items = by_code(result.items)

        assert [i.code for i in result.items] == ["GSIS", "PAGIBIG", "PHILHEALTH", "WTAX"]
        assert items["GSIS"].amount == Decimal("2700.00")
        assert items["PAGIBIG"].amount == Decimal("100.00")
        assert items["PHILHEALTH"].amount == Decimal("880.00")
        assert result.taxable_income == Decimal("28320.00")
        assert items["WTAX"].amount == Decimal("1123.05")
        assert result.total == Decimal("4803.05")

    def test_gsis_is_nine_percent_of_basic(self, rules):
        result = calculate_deductions(
            Decimal("40000.00"), Decimal("42000.00"), Decimal("0.00"), rules
        )
        assert by_code(result.items)["GSIS"].amount == Decimal("3600.00")
        assert by_code(result.items)["GSIS"].basis == "9% of basic pay"

    def test_categories(self, rules):
        result = calculate_deductions(
            Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules
        )
        items = by_code(result.items)
        assert items["GSIS"].category == "mandatory"
        assert items["WTAX"].category == "tax"

    def test_non_taxable_allowances_reduce_taxable_income(self, rules):
        result = calculate_deductions(
            Decimal("45000.00"), Decimal("59500.00"), Decimal("1250.00"), rules
        )
        items = by_code(result.items)

        assert items["PHILHEALTH"].amount == Decimal("1636.25")
        assert result.taxable_income == Decimal("52463.75")
        assert items["WTAX"].amount == Decimal("5701.15")

    def test_philhealth_capped(self, rules):
        result = calculate_deductions(
            Decimal("150000.00"), Decimal("152000.00"), Decimal("0.00"), rules
        )
        philhealth = by_code(result.items)["PHILHEALTH"]
        assert philhealth.amount == Decimal("1800.00")
        assert "capped" in philhealth.basis

    def test_low_income_no_tax(self, rules):
        result = calculate_deductions(
            Decimal("3409.09"), Decimal("5409.09"), Decimal("0.00"), rules
        )
        items = by_code(result.items)
        assert items["GSIS"].amount == Decimal("306.82")
        assert items["PAGIBIG"].amount == Decimal("100.00")
        assert items["PHILHEALTH"].amount == Decimal("148.75")
        assert items["WTAX"].amount == Decimal("0.00")


class TestAdhocDeductions:

    def test_passed_through_in_order(self, rules):
        adhoc = [
            AdjustmentRequest(code="GSIS-MPL", name="GSIS Multi-Purpose Loan", amount=2500),
            AdjustmentRequest(name="Cooperative share", amount="150.50", category="adjustment"),
        ]
        result = calculate_deductions(
            Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules, adhoc
        )

        loan, coop = result.items[4], result.items[5]
        assert loan.code == "GSIS-MPL"
        assert loan.category == "loan"
        assert loan.basis == "loan amortization"
        assert coop.code == "OTHER"
        assert coop.category == "adjustment"
        assert coop.amount == Decimal("150.50")
        assert result.total == Decimal("7453.55")

    def test_adhoc_does_not_affect_tax(self, rules):
        plain = calculate_deductions(Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules)
        with_loan = calculate_deductions(
            Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules,
            [AdjustmentRequest(name="Salary loan", amount=5000)],
        )
        assert with_loan.taxable_income == plain.taxable_income
        assert by_code(with_loan.items)["LOAN"].amount == Decimal("5000.00")


class TestEmployerContributions:
    """Employer shares are reported, never deducted."""

    def test_employer_shares(self, rules):
        result = calculate_deductions(
            Decimal("30000.00"), Decimal("32000.00"), Decimal("0.00"), rules
        )
        employer = by_code(result.employer_contributions)

        assert employer["GSIS"].amount == Decimal("3600.00")
        assert employer["PAGIBIG"].amount == Decimal("100.00")
        assert employer["PHILHEALTH"].amount == Decimal("880.00")
        assert employer["EC"].amount == Decimal("100.00")
        assert result.total_employer_contributions == Decimal("4680.00")
        assert all(i.category == "employer" for i in result.employer_contributions)
        assert "EC" not in by_code(result.items)


class TestNegativeClamp:

    def test_negative_contribution_clamped_with_warning(self, rules):
        result = calculate_deductions(
            Decimal("-100.00"), Decimal("-100.00"), Decimal("0.00"), rules
        )
        items = by_code(result.items)

        assert items["GSIS"].amount == Decimal("0.00")
        assert items["PAGIBIG"].amount == Decimal("0.00")
        assert items["PHILHEALTH"].amount == Decimal("0.00")
        assert items["WTAX"].amount == Decimal("0.00")
        assert "GSIS contribution computed as -9.00; clamped to 0" in result.warnings
        assert all(i.amount >= 0 for i in result.items)
