"""Unit tests for payslip breakdowns."""

import json
from decimal import Decimal

import pytest

from lgupay.sdk import compute_payroll, generate_breakdown, load_payroll_rules


@pytest.fixture(scope="module")
def rules():
    return load_payroll_rules("2023")


PERIOD = {
    "id": "2024-03-A",
    "year": 2024,
    "month": 3,
    "period_number": 1,
    "start_date": "2024-03-01",
    "end_date": "2024-03-15",
    "pay_date": "2024-03-15",
}


def compute(rules, attendance=None, **employee):
    profile = {"id": 7, "name": "Juan Dela Cruz", "employee_number": "LGU-0007", "monthly_salary": 28000}
    profile.update(employee)
    return compute_payroll(profile, PERIOD, 22, attendance, rules=rules)


class TestSections:

    def test_header(self, rules):
        breakdown = generate_breakdown(compute(rules))

        assert breakdown.employee.name == "Juan Dela Cruz"
        assert breakdown.employee.employee_number == "LGU-0007"
        assert breakdown.period.label == "March 2024 (1st half)"
        assert breakdown.period.start_date == "2024-03-01"
        assert breakdown.period.pay_date == "2024-03-15"
        assert breakdown.period.rules_version == "2023"

    def test_second_half_label(self, rules):
        result = compute_payroll(
            {"id": 1, "monthly_salary": 20000},
            {**PERIOD, "period_number": 2, "start_date": "2024-03-16", "end_date": "2024-03-31", "pay_date": None},
            22, rules=rules,
        )
        breakdown = generate_breakdown(result)
        assert breakdown.period.label == "March 2024 (2nd half)"
        assert breakdown.period.pay_date is None

    def test_full_salary_proration(self, rules):
        salary = generate_breakdown(compute(rules)).salary
        assert salary.proration == "Full salary (22/22 days)"
        assert salary.lwop_detail is None

    def test_prorated_with_lwop(self, rules):
        salary = generate_breakdown(compute(rules, {"days_present": 20, "days_lwop": 2})).salary

        assert salary.proration == "Prorated: ₱28,000.00 x 20/22 days"
        assert salary.prorated_basic_pay == Decimal("25454.55")
        assert salary.lwop_deduction == Decimal("2545.46")
        assert salary.lwop_detail == "2 LWOP days x ₱1,272.73 daily rate"
        assert salary.basic_pay == Decimal("22909.09")

    def test_override(self, rules):
        salary = generate_breakdown(compute(rules, {"basic_pay_override": 15000})).salary
        assert salary.proration == "Override: ₱15,000.00 set by payroll staff"

    def test_half_day_proration(self, rules):
        salary = generate_breakdown(compute(rules, {"days_present": "10.5"})).salary
        assert salary.proration == "Prorated: ₱28,000.00 x 10.5/22 days"


class TestNoRecompute:
    """Every figure in the breakdown is the result's own figure."""

    def test_figures_copied(self, rules):
        result = compute(rules, {"days_present": 17, "days_lwop": 1}, department="RHU")
        breakdown = generate_breakdown(result)

        assert breakdown.allowances.items == result.allowances
        assert breakdown.allowances.subtotal == result.total_allowances
        assert breakdown.deductions.items == result.deductions
        assert breakdown.deductions.subtotal == result.total_deductions
        assert breakdown.employer_contributions.subtotal == result.total_employer_contributions
        assert breakdown.summary.gross_pay == result.gross_pay
        assert breakdown.summary.taxable_income == result.taxable_income
        assert breakdown.summary.net_pay == result.net_pay
        assert breakdown.notes.warnings == result.warnings

    def test_anomalies_carried(self, rules):
        result = compute(rules, {"days_present": 5}, monthly_salary=15000)
        clamped = compute_payroll(
            {"id": 8, "monthly_salary": 15000}, PERIOD, 22, {"days_present": 5},
            adjustments={"deductions": [{"name": "Salary Loan", "amount": 10000}]},
            rules=rules,
        )
        assert generate_breakdown(result).notes.errors == ()
        assert generate_breakdown(clamped).notes.errors == clamped.errors


class TestSerialisation:

    def test_to_dict_is_json_serialisable(self, rules):
        data = generate_breakdown(compute(rules, department="RHU")).to_dict()
        text = json.dumps(data)

        assert json.loads(text) == data
        assert set(data) == {
            "employee", "period", "attendance", "salary", "allowances",
            "deductions", "employer_contributions", "summary", "notes",
        }
        assert Decimal(data["summary"]["net_pay"]) == Decimal("32703.85")
