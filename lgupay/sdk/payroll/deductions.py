"""Deduction calculator: mandatory contributions, withholding tax, ad-hoc items.

Order of evaluation matters only for taxable income:
1. GSIS personal share on basic pay
2. Pag-IBIG and PhilHealth employee shares on gross pay (capped)
3. taxable income = gross - non-taxable allowances - the three contributions
4. withholding tax on taxable income via the bracket table
5. ad-hoc deductions (loans, billings) passed through unchanged

Employer shares (GSIS government share, Pag-IBIG, PhilHealth, EC fund) are
returned separately for reporting and never reduce pay.
"""

import logging
from decimal import Decimal
from typing import List, Sequence

from ..money import ZERO, q2, total
from ..schemas import AdjustmentRequest, DeductionCode, LineItem
from ..taxes.contributions import calc_ec_fund, calc_gsis, calc_pagibig, calc_philhealth
from ..taxes.schemas import PayrollRules
from ..taxes.withholding import calc_taxable_income, calc_withholding_tax
from .schemas import DeductionResult

logger = logging.getLogger(__name__)


def _non_negative(amount: Decimal, label: str, warnings: List[str]) -> Decimal:
    if amount < 0:
        warnings.append(f"{label} computed as {amount}; clamped to 0")
        logger.warning(f"{label} computed negative ({amount}); clamping to 0")
        return ZERO
    return amount


def adhoc_deduction(request: AdjustmentRequest) -> LineItem:
    """Pass an ad-hoc deduction through as a line item."""
    if request.category == "loan":
        default_code, default_basis = DeductionCode.LOAN, "loan amortization"
    else:
        default_code, default_basis = DeductionCode.OTHER, "ad-hoc deduction"
    return LineItem(
        code=request.code or default_code.value,
        name=request.name,
        amount=q2(request.amount),
        basis=request.basis or default_basis,
        category=request.category,
    )


def calculate_deductions(
    basic_pay: Decimal,
    gross_pay: Decimal,
    non_taxable_allowances: Decimal,
    rules: PayrollRules,
    adhoc: Sequence[AdjustmentRequest] = (),
) -> DeductionResult:
    """Compute all deductions for one employee and period.

    Args:
        basic_pay: Basic pay after proration and LWOP
        gross_pay: Basic pay plus all allowances
        non_taxable_allowances: Portion of allowances exempt from withholding
        rules: Payroll rule table in effect
        adhoc: Ad-hoc deduction requests

    Returns:
        DeductionResult with employee items, taxable income and employer shares
    """
    warnings: List[str] = []

    gsis = calc_gsis(basic_pay, rules.gsis)
    pagibig = calc_pagibig(gross_pay, rules.pagibig)
    philhealth = calc_philhealth(gross_pay, rules.philhealth)

    gsis_ee = _non_negative(gsis["employee_share"], "GSIS contribution", warnings)
    pagibig_ee = _non_negative(pagibig["employee_share"], "Pag-IBIG contribution", warnings)
    philhealth_ee = _non_negative(philhealth["employee_share"], "PhilHealth contribution", warnings)

    taxable_income = calc_taxable_income(
        gross_pay, non_taxable_allowances, [gsis_ee, pagibig_ee, philhealth_ee]
    )
    wtax = calc_withholding_tax(taxable_income, rules.withholding_tax)

    items = [
        LineItem(
            code=DeductionCode.GSIS.value,
            name="GSIS Life and Retirement",
            amount=gsis_ee,
            basis=gsis["basis"],
            category="mandatory",
        ),
        LineItem(
            code=DeductionCode.PAGIBIG.value,
            name="Pag-IBIG Fund",
            amount=pagibig_ee,
            basis=pagibig["basis"],
            category="mandatory",
        ),
        LineItem(
            code=DeductionCode.PHILHEALTH.value,
            name="PhilHealth",
            amount=philhealth_ee,
            basis=philhealth["basis"],
            category="mandatory",
        ),
        LineItem(
            code=DeductionCode.WTAX.value,
            name="Withholding Tax",
            amount=wtax["tax"],
            basis=wtax["basis"],
            category="tax",
        ),
    ]
    items.extend(adhoc_deduction(r) for r in adhoc)

    ec = calc_ec_fund(rules.ec_fund)
    employer_items = [
        LineItem(
            code=DeductionCode.GSIS.value,
            name="GSIS Government Share",
            amount=_non_negative(gsis["employer_share"], "GSIS government share", warnings),
            basis=gsis["employer_basis"],
            category="employer",
        ),
        LineItem(
            code=DeductionCode.PAGIBIG.value,
            name="Pag-IBIG Employer Share",
            amount=_non_negative(pagibig["employer_share"], "Pag-IBIG employer share", warnings),
            basis="equal to employee share" if rules.pagibig.employer_matches else "none",
            category="employer",
        ),
        LineItem(
            code=DeductionCode.PHILHEALTH.value,
            name="PhilHealth Employer Share",
            amount=_non_negative(philhealth["employer_share"], "PhilHealth employer share", warnings),
            basis="equal to employee share" if rules.philhealth.employer_matches else "none",
            category="employer",
        ),
        LineItem(
            code=DeductionCode.EC.value,
            name="Employees' Compensation",
            amount=ec["employer_share"],
            basis=ec["basis"],
            category="employer",
        ),
    ]

    result = DeductionResult(
        items=tuple(items),
        total=total(i.amount for i in items),
        taxable_income=taxable_income,
        employer_contributions=tuple(employer_items),
        total_employer_contributions=total(i.amount for i in employer_items),
        warnings=tuple(warnings),
    )
    logger.debug(
        f"Deductions: GSIS={gsis_ee} PAGIBIG={pagibig_ee} PHILHEALTH={philhealth_ee} "
        f"WTAX={wtax['tax']} taxable={taxable_income} total={result.total}"
    )
    return result
