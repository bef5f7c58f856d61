"""Unit tests for allowance rules and the allowance calculator.

Uses the packaged 2023 rule table for amounts and hazard keywords.
"""

from decimal import Decimal

import pytest

from lgupay.sdk.config import load_payroll_rules
from lgupay.sdk.payroll.allowances import (
    ALLOWANCE_RULES,
    AllowanceContext,
    calculate_allowances,
    hazard_class_for,
    matches_keywords,
)
from lgupay.sdk.payroll.rates import resolve_rates
from lgupay.sdk.schemas import AdjustmentRequest, AllowanceCode, EmployeeProfile


@pytest.fixture(scope="module")
def allowance_rules():
    return load_payroll_rules("2023").allowances


def make_context(allowance_rules, basic_pay="30000.00", days_present=22, **employee) -> AllowanceContext:
    fields = {"id": 1, "monthly_salary": 30000}
    fields.update(employee)
    profile = EmployeeProfile(**fields)
    return AllowanceContext(
        employee=profile,
        rates=resolve_rates(profile),
        basic_pay=Decimal(basic_pay),
        days_present=Decimal(days_present),
        rules=allowance_rules,
    )


def codes(result) -> list:
    return [item.code for item in result.items]


class TestPera:

    def test_unconditional(self, allowance_rules):
        result = calculate_allowances(make_context(allowance_rules, days_present=0))
        pera = result.items[0]
        assert pera.code == "PERA"
        assert pera.amount == Decimal("2000.00")
        assert pera.basis == "fixed allowance"
        assert pera.category == "allowance"
        assert pera.taxable is True


class TestRata:

    def test_only_with_explicit_amount(self, allowance_rules):
        assert "RATA" not in codes(calculate_allowances(make_context(allowance_rules)))
        assert "RATA" not in codes(calculate_allowances(make_context(allowance_rules, rata_amount=0)))

    def test_amount_from_profile(self, allowance_rules):
        result = calculate_allowances(make_context(allowance_rules, rata_amount=7650))
        rata = next(i for i in result.items if i.code == "RATA")
        assert rata.amount == Decimal("7650.00")
        assert rata.basis == "position-based allowance"


class TestHazard:
    """Percentage of basic pay for hazard-eligible classifications."""

    def test_health_unit_gets_25_percent(self, allowance_rules):
        ctx = make_context(allowance_rules, basic_pay="45000.00", department="Rural Health Unit")
        hazard = next(i for i in calculate_allowances(ctx).items if i.code == "HAZARD")
        assert hazard.amount == Decimal("11250.00")
        assert hazard.basis == "25% of basic pay (health worker)"

    def test_social_welfare_gets_20_percent(self, allowance_rules):
        ctx = make_context(allowance_rules, basic_pay="20000.00", department="MSWD")
        hazard = next(i for i in calculate_allowances(ctx).items if i.code == "HAZARD")
        assert hazard.amount == Decimal("4000.00")

    def test_keyword_match_is_case_insensitive_across_fields(self, allowance_rules):
        assert matches_keywords(EmployeeProfile(id=1, position="rhu nurse"), ["RHU"])
        assert matches_keywords(EmployeeProfile(id=1, classification="Health"), ["HEALTH"])
        assert not matches_keywords(EmployeeProfile(id=1, department="Treasury"), ["HEALTH"])
        assert not matches_keywords(EmployeeProfile(id=1), ["HEALTH"])

    def test_first_matching_class_wins(self, allowance_rules):
        employee = EmployeeProfile(id=1, department="Social Welfare", position="Health aide")
        assert hazard_class_for(employee, allowance_rules).name == "health worker"

    def test_not_eligible(self, allowance_rules):
        ctx = make_context(allowance_rules, department="Office of the Mayor")
        assert "HAZARD" not in codes(calculate_allowances(ctx))

    def test_follows_basic_pay(self, allowance_rules):
        ctx = make_context(allowance_rules, basic_pay="0.00", department="RHU")
        hazard = next(i for i in calculate_allowances(ctx).items if i.code == "HAZARD")
        assert hazard.amount == Decimal("0.00")


class TestDailyAllowances:
    """Subsistence and laundry per day present, non-taxable, for every employee."""

    def test_health_worker_full_month(self, allowance_rules):
        ctx = make_context(allowance_rules, department="RHU", days_present=22)
        result = calculate_allowances(ctx)
        items = {i.code: i for i in result.items}

        assert items["SUBSISTENCE"].amount == Decimal("1100.00")
        assert items["LAUNDRY"].amount == Decimal("150.00")  # 6.818 x 22 = 149.996
        assert items["SUBSISTENCE"].taxable is False
        assert items["LAUNDRY"].taxable is False
        assert result.non_taxable_total == Decimal("1250.00")

    def test_partial_month(self, allowance_rules):
        ctx = make_context(allowance_rules, department="RHU", days_present=10)
        items = {i.code: i for i in calculate_allowances(ctx).items}
        assert items["SUBSISTENCE"].amount == Decimal("500.00")
        assert items["LAUNDRY"].amount == Decimal("68.18")
        assert items["LAUNDRY"].basis == "₱6.818 x 10 days present"

    def test_no_days_no_item(self, allowance_rules):
        ctx = make_context(allowance_rules, department="RHU", days_present=0)
        assert "SUBSISTENCE" not in codes(calculate_allowances(ctx))

    def test_granted_outside_health_units(self, allowance_rules):
        ctx = make_context(allowance_rules, department="Treasury", days_present=22)
        result = calculate_allowances(ctx)

        assert codes(result) == ["PERA", "SUBSISTENCE", "LAUNDRY"]
        assert result.non_taxable_total == Decimal("1250.00")

    def test_keywords_restrict_when_configured(self, allowance_rules):
        restricted = allowance_rules.model_copy(update={
            "subsistence": allowance_rules.subsistence.model_copy(update={"keywords": ("RHU",)}),
        })
        treasury = make_context(restricted, department="Treasury")
        rhu = make_context(restricted, department="RHU")

        assert "SUBSISTENCE" not in codes(calculate_allowances(treasury))
        assert "LAUNDRY" in codes(calculate_allowances(treasury))
        assert "SUBSISTENCE" in codes(calculate_allowances(rhu))


class TestCalculator:

    def test_totals(self, allowance_rules):
        ctx = make_context(allowance_rules, basic_pay="45000.00", department="RHU", rata_amount=5000)
        result = calculate_allowances(ctx)
        assert codes(result) == ["PERA", "RATA", "HAZARD", "SUBSISTENCE", "LAUNDRY"]
        assert result.total == Decimal("19500.00")
        assert result.total == sum(i.amount for i in result.items)

    def test_adhoc_allowances_appended(self, allowance_rules):
        adhoc = [
            AdjustmentRequest(code="CLOTHING", name="Clothing Allowance", amount=6000, taxable=False),
            AdjustmentRequest(code="OT", name="Overtime", amount="1234.565"),
        ]
        result = calculate_allowances(make_context(allowance_rules), adhoc)

        assert codes(result) == ["PERA", "SUBSISTENCE", "LAUNDRY", "CLOTHING", "OT"]
        assert result.items[4].amount == Decimal("1234.57")
        assert result.items[3].basis == "ad-hoc allowance"
        assert result.non_taxable_total == Decimal("7250.00")

    def test_empty_rule_set(self, allowance_rules):
        result = calculate_allowances(make_context(allowance_rules), rules=[])
        assert result.items == ()
        assert result.total == Decimal("0.00")

    def test_rules_are_order_independent(self, allowance_rules):
        ctx = make_context(allowance_rules, basic_pay="45000.00", department="RHU", rata_amount=5000)
        forward = calculate_allowances(ctx, rules=list(ALLOWANCE_RULES.values()))
        backward = calculate_allowances(ctx, rules=list(reversed(ALLOWANCE_RULES.values())))

        assert forward.total == backward.total
        assert sorted(forward.items, key=lambda i: i.code) == sorted(backward.items, key=lambda i: i.code)

    def test_registry_covers_builtin_codes(self):
        assert set(ALLOWANCE_RULES) == {
            AllowanceCode.PERA,
            AllowanceCode.RATA,
            AllowanceCode.HAZARD,
            AllowanceCode.SUBSISTENCE,
            AllowanceCode.LAUNDRY,
        }
