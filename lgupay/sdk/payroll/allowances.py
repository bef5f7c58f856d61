"""Allowance rules and calculator.

Each allowance type is a rule function registered with @allowance_rule. A rule
takes an AllowanceContext and returns a LineItem, or None when the employee is
not eligible. Rules are independent of each other, so registration order only
affects display order.

Built-in rules:
- PERA: fixed amount from the rule table, unconditional
- RATA: the profile's rata_amount, only when present
- HAZARD: percentage of basic pay for hazard-eligible classifications
- SUBSISTENCE / LAUNDRY: per day present, for every employee unless the
  rule table restricts them by keyword
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional, Sequence

from ..money import format_days, format_percent, q2, total
from ..schemas import AdjustmentRequest, AllowanceCode, EmployeeProfile, LineItem
from ..taxes.schemas import AllowanceRules, DailyAllowanceRules, HazardClass
from .schemas import AllowanceResult, RateFacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowanceContext:
    """Everything an allowance rule may look at."""

    employee: EmployeeProfile
    rates: RateFacts
    basic_pay: Decimal
    days_present: Decimal
    rules: AllowanceRules


AllowanceRule = Callable[[AllowanceContext], Optional[LineItem]]

ALLOWANCE_RULES: Dict[AllowanceCode, AllowanceRule] = {}


def allowance_rule(code: AllowanceCode) -> Callable[[AllowanceRule], AllowanceRule]:
    """Register a function as the rule for an allowance code."""
    def register(func: AllowanceRule) -> AllowanceRule:
        ALLOWANCE_RULES[code] = func
        return func
    return register


def matches_keywords(employee: EmployeeProfile, keywords: Iterable[str]) -> bool:
    """Case-insensitive keyword match against department, classification and position."""
    fields = [employee.department, employee.classification, employee.position]
    haystack = " | ".join(f.upper() for f in fields if f)
    if not haystack:
        return False
    return any(k.upper() in haystack for k in keywords)


def hazard_class_for(employee: EmployeeProfile, rules: AllowanceRules) -> Optional[HazardClass]:
    """First hazard class whose keywords match the employee, in table order."""
    for hazard_class in rules.hazard.classes:
        if matches_keywords(employee, hazard_class.keywords):
            return hazard_class
    return None


@allowance_rule(AllowanceCode.PERA)
def pera(ctx: AllowanceContext) -> Optional[LineItem]:
    return LineItem(
        code=AllowanceCode.PERA.value,
        name="Personnel Economic Relief Allowance",
        amount=q2(ctx.rules.pera.amount),
        basis="fixed allowance",
        category="allowance",
        taxable=ctx.rules.pera.taxable,
    )


@allowance_rule(AllowanceCode.RATA)
def rata(ctx: AllowanceContext) -> Optional[LineItem]:
    amount = ctx.employee.rata_amount
    if amount is None or amount <= 0:
        return None
    return LineItem(
        code=AllowanceCode.RATA.value,
        name="Representation and Transportation Allowance",
        amount=q2(amount),
        basis="position-based allowance",
        category="allowance",
        taxable=ctx.rules.rata.taxable,
    )


@allowance_rule(AllowanceCode.HAZARD)
def hazard(ctx: AllowanceContext) -> Optional[LineItem]:
    hazard_class = hazard_class_for(ctx.employee, ctx.rules)
    if hazard_class is None:
        return None
    return LineItem(
        code=AllowanceCode.HAZARD.value,
        name="Hazard Pay",
        amount=q2(ctx.basic_pay * hazard_class.rate),
        basis=f"{format_percent(hazard_class.rate)} of basic pay ({hazard_class.name})",
        category="allowance",
        taxable=ctx.rules.hazard.taxable,
    )


def _daily_allowance(
    ctx: AllowanceContext,
    code: AllowanceCode,
    name: str,
    rules: Optional[DailyAllowanceRules],
) -> Optional[LineItem]:
    if rules is None or ctx.days_present <= 0:
        return None
    if rules.keywords and not matches_keywords(ctx.employee, rules.keywords):
        return None
    return LineItem(
        code=code.value,
        name=name,
        amount=q2(rules.daily_rate * ctx.days_present),
        basis=f"₱{rules.daily_rate} x {format_days(ctx.days_present)} days present",
        category="allowance",
        taxable=rules.taxable,
    )


@allowance_rule(AllowanceCode.SUBSISTENCE)
def subsistence(ctx: AllowanceContext) -> Optional[LineItem]:
    return _daily_allowance(
        ctx, AllowanceCode.SUBSISTENCE, "Subsistence Allowance", ctx.rules.subsistence
    )


@allowance_rule(AllowanceCode.LAUNDRY)
def laundry(ctx: AllowanceContext) -> Optional[LineItem]:
    return _daily_allowance(ctx, AllowanceCode.LAUNDRY, "Laundry Allowance", ctx.rules.laundry)


def adhoc_allowance(request: AdjustmentRequest) -> LineItem:
    """Pass an ad-hoc allowance through as a line item."""
    return LineItem(
        code=request.code or AllowanceCode.CUSTOM.value,
        name=request.name,
        amount=q2(request.amount),
        basis=request.basis or "ad-hoc allowance",
        category="allowance",
        taxable=request.taxable,
    )


def calculate_allowances(
    ctx: AllowanceContext,
    adhoc: Sequence[AdjustmentRequest] = (),
    rules: Optional[Iterable[AllowanceRule]] = None,
) -> AllowanceResult:
    """Evaluate every allowance rule, then append ad-hoc allowances.

    Args:
        ctx: Employee, rates, basic pay and allowance rule table
        adhoc: Ad-hoc allowances to pass through
        rules: Rule functions to evaluate (default: all registered rules)

    Returns:
        AllowanceResult with items, total and the non-taxable portion
    """
    rule_funcs = list(ALLOWANCE_RULES.values()) if rules is None else list(rules)

    items = []
    for rule in rule_funcs:
        item = rule(ctx)
        if item is not None:
            items.append(item)
    items.extend(adhoc_allowance(r) for r in adhoc)

    non_taxable = total(i.amount for i in items if not i.taxable)
    result = AllowanceResult(
        items=tuple(items),
        total=total(i.amount for i in items),
        non_taxable_total=non_taxable,
    )
    logger.debug(
        f"Allowances for employee {ctx.employee.id}: "
        f"{', '.join(f'{i.code}={i.amount}' for i in items) or 'none'} (total {result.total})"
    )
    return result

