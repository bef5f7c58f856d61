"""Mandatory contribution calculations (GSIS, Pag-IBIG, PhilHealth, EC).

Each function returns raw shares without clamping; the deduction stage
floors negative figures at zero and records a warning.
"""

from decimal import Decimal
from typing import Any, Dict

from ..money import format_peso, format_percent, q2
from .schemas import CappedContributionRules, EcFundRules, GsisRules


def calc_gsis(basic_pay: Decimal, rules: GsisRules) -> Dict[str, Any]:
    """GSIS retirement and life insurance, uncapped, on basic pay.

    Returns:
        Dict with employee_share, employer_share, basis, employer_basis
    """
    return {
        "employee_share": q2(basic_pay * rules.personal_share_rate),
        "employer_share": q2(basic_pay * rules.government_share_rate),
        "basis": f"{format_percent(rules.personal_share_rate)} of basic pay",
        "employer_basis": f"{format_percent(rules.government_share_rate)} of basic pay (government share)",
    }


def calc_capped_contribution(gross_pay: Decimal, rules: CappedContributionRules) -> Dict[str, Any]:
    """Rate-of-gross contribution with a per-period cap (Pag-IBIG, PhilHealth).

    Returns:
        Dict with employee_share, employer_share, capped, basis
    """
    raw = q2(gross_pay * rules.rate)
    capped = raw > rules.cap
    employee_share = q2(rules.cap) if capped else raw
    employer_share = employee_share if rules.employer_matches else q2(0)

    basis = f"{format_percent(rules.rate)} of gross pay"
    if capped:
        basis += f", capped at {format_peso(rules.cap)}"

    return {
        "employee_share": employee_share,
        "employer_share": employer_share,
        "capped": capped,
        "basis": basis,
    }


def calc_pagibig(gross_pay: Decimal, rules: CappedContributionRules) -> Dict[str, Any]:
    return calc_capped_contribution(gross_pay, rules)


def calc_philhealth(gross_pay: Decimal, rules: CappedContributionRules) -> Dict[str, Any]:
    return calc_capped_contribution(gross_pay, rules)


def calc_ec_fund(rules: EcFundRules) -> Dict[str, Any]:
    """Employees' Compensation fund: fixed employer-only amount."""
    return {
        "employer_share": q2(rules.amount),
        "basis": "fixed employer contribution",
    }
