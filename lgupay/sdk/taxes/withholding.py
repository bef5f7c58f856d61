"""Withholding tax calculations.

Graduated bracket method used by the BIR withholding tables: find the
bracket with the greatest lower bound not above taxable income, then
tax = base_tax + (taxable_income - lower_bound) * rate.
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, Sequence

from ..money import ZERO, format_peso, format_percent, q2
from .schemas import TaxBracket, WithholdingTaxRules

# Periods per year for annualised tables.
PERIODS_PER_YEAR = 12


def select_bracket(brackets: Sequence[TaxBracket], income: Decimal) -> TaxBracket:
    """Return the bracket with the greatest lower bound <= income.

    Brackets are validated to start at 0 and increase strictly, so every
    non-negative income maps to exactly one bracket. Negative income maps
    to the first bracket.
    """
    selected = brackets[0]
    for bracket in brackets:
        if bracket.over <= income:
            selected = bracket
        else:
            break
    return selected


def calc_taxable_income(
    gross_pay: Decimal,
    non_taxable_allowances: Decimal,
    contributions: Iterable[Decimal],
) -> Decimal:
    """Taxable compensation: gross less non-taxable allowances and mandatory contributions.

    Floored at zero.
    """
    taxable = gross_pay - non_taxable_allowances - sum(contributions, ZERO)
    return max(q2(taxable), ZERO)


def calc_withholding_tax(taxable_income: Decimal, table: WithholdingTaxRules) -> Dict[str, Any]:
    """Calculate withholding tax for one monthly period.

    Args:
        taxable_income: Monthly taxable compensation
        table: Withholding table from the payroll rules

    Returns:
        Dict with:
            - tax: Tax withheld for the month (>= 0, rounded to centavos)
            - bracket: The TaxBracket applied (None when nothing is taxable)
            - basis: Human-readable explanation
    """
    if taxable_income <= 0:
        return {"tax": ZERO, "bracket": None, "basis": "no taxable income"}

    if table.period == "annual":
        income = taxable_income * PERIODS_PER_YEAR
    else:
        income = taxable_income

    bracket = select_bracket(table.brackets, income)
    tax = bracket.base_tax + (income - bracket.over) * bracket.rate
    if table.period == "annual":
        tax = tax / PERIODS_PER_YEAR
    tax = max(q2(tax), ZERO)

    if bracket.rate == 0 and bracket.base_tax == 0:
        basis = f"exempt bracket (taxable income {format_peso(taxable_income)})"
    else:
        basis = (
            f"{format_peso(bracket.base_tax)} + {format_percent(bracket.rate)} "
            f"of excess over {format_peso(bracket.over)}"
        )
        if table.period == "annual":
            basis += f" (annualised {format_peso(income)}, divided by {PERIODS_PER_YEAR})"

    return {"tax": tax, "bracket": bracket, "basis": basis}
