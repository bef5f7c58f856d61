"""Aggregator: totals, net pay and the non-negative net pay guard.

This is the only place net pay is clamped. A clamp is never silent: it adds
a NEGATIVE_NET_PAY anomaly carrying the unclamped figure and the shortfall.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from ..money import ZERO, format_peso, q2
from ..schemas import EmployeeProfile, PayPeriod, PayrollAnomaly, PayrollResult
from .schemas import AllowanceResult, BasicPayResult, DeductionResult, RateFacts

logger = logging.getLogger(__name__)

NEGATIVE_NET_PAY = "NEGATIVE_NET_PAY"
DEDUCTION_WARNING_RATIO = Decimal("0.50")


def merge_warnings(*groups: Iterable[str]) -> tuple:
    """Concatenate warning lists, dropping duplicates but keeping first-seen order."""
    merged = {}
    for group in groups:
        for warning in group:
            merged.setdefault(warning, None)
    return tuple(merged)


def sanity_warnings(
    gross_pay: Decimal,
    total_deductions: Decimal,
    net_pay: Decimal,
    days_present: Decimal,
) -> List[str]:
    """Warnings for results that are valid but worth a second look."""
    warnings = []
    if gross_pay > 0:
        if total_deductions > gross_pay:
            warnings.append("total deductions exceed gross pay")
        else:
            ratio = total_deductions / gross_pay
            if ratio > DEDUCTION_WARNING_RATIO:
                warnings.append(
                    f"deductions are {q2(ratio * 100)}% of gross pay (exceeds 50%)"
                )
        if net_pay == 0:
            warnings.append("net pay is zero after deductions")
    elif days_present > 0:
        warnings.append("zero gross pay despite days present")
    return warnings


def aggregate(
    employee: EmployeeProfile,
    period: PayPeriod,
    rules_version: str,
    rates: RateFacts,
    basic: BasicPayResult,
    allowances: AllowanceResult,
    deductions: DeductionResult,
    warnings: Optional[Sequence[str]] = None,
) -> PayrollResult:
    """Combine stage outputs into a PayrollResult.

    Args:
        employee: Employee profile (identity fields are copied to the result)
        period: Pay period
        rules_version: Version of the rule table used
        rates: Rate resolver output
        basic: Basic pay calculator output
        allowances: Allowance calculator output
        deductions: Deduction calculator output
        warnings: Warnings raised before the calculators ran (input defaults, clamps)

    Returns:
        PayrollResult with net pay >= 0
    """
    gross_pay = q2(basic.basic_pay + allowances.total)
    total_deductions = deductions.total
    unclamped = gross_pay - total_deductions

    errors = []
    if unclamped < 0:
        shortfall = -unclamped
        errors.append(
            PayrollAnomaly(
                code=NEGATIVE_NET_PAY,
                message=(
                    f"deductions ({format_peso(total_deductions)}) exceed gross pay "
                    f"({format_peso(gross_pay)}) by {format_peso(shortfall)}; net pay set to 0"
                ),
                details={"unclamped_net_pay": unclamped, "shortfall": shortfall},
            )
        )
        logger.warning(
            f"Employee {employee.id}: net pay {unclamped} clamped to 0 (shortfall {shortfall})"
        )
        net_pay = ZERO
    else:
        net_pay = unclamped

    all_warnings = merge_warnings(
        warnings or (),
        basic.warnings,
        deductions.warnings,
        sanity_warnings(gross_pay, total_deductions, net_pay, basic.days_present),
    )

    return PayrollResult(
        employee_id=employee.id,
        employee_name=employee.name,
        employee_number=employee.employee_number,
        period=period,
        rules_version=rules_version,
        working_days=basic.working_days,
        days_present=basic.days_present,
        days_paid_leave=basic.days_paid_leave,
        days_lwop=basic.days_lwop,
        monthly_rate=rates.monthly_rate,
        daily_rate=rates.daily_rate,
        prorated_basic_pay=basic.prorated_basic_pay,
        basic_pay_override_applied=basic.override_applied,
        lwop_deduction=basic.lwop_deduction,
        basic_pay=basic.basic_pay,
        allowances=allowances.items,
        total_allowances=allowances.total,
        deductions=deductions.items,
        total_deductions=total_deductions,
        employer_contributions=deductions.employer_contributions,
        total_employer_contributions=deductions.total_employer_contributions,
        gross_pay=gross_pay,
        taxable_income=deductions.taxable_income,
        net_pay=net_pay,
        warnings=all_warnings,
        errors=tuple(errors),
    )
