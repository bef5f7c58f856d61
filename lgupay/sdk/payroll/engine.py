"""Payroll engine: runs the calculation stages for one employee and period.

    resolve_rates -> normalize_attendance -> calculate_basic_pay
        -> calculate_allowances -> calculate_deductions -> aggregate

Every stage is a pure function of its inputs. The only I/O is loading the
rule table when the caller does not pass one in.
"""

import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..config import resolve_payroll_rules
from ..exceptions import PayrollInputError, describe, input_error
from ..schemas import (
    AttendanceFacts,
    EmployeeProfile,
    PayAdjustments,
    PayPeriod,
    PayrollRequest,
    PayrollResult,
)
from ..taxes.schemas import PayrollRules
from .aggregator import aggregate
from .allowances import AllowanceContext, calculate_allowances
from .basic_pay import calculate_basic_pay, normalize_attendance
from .deductions import calculate_deductions
from .rates import resolve_rates

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def coerce_input(model: Type[M], value: Union[M, Mapping[str, Any]], what: str) -> M:
    """Accept a schema instance or a plain dict, validating dicts.

    Raises:
        PayrollInputError: If the dict fails validation or the type is wrong.
    """
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        try:
            return model.model_validate(dict(value))
        except ValidationError as e:
            raise input_error(what, e) from e
    raise PayrollInputError(f"Invalid {what}: expected {model.__name__} or dict, got {describe(value)}")


def resolve_working_days(
    working_days_in_period: Optional[int], period: PayPeriod, rules: PayrollRules
) -> int:
    """Explicit argument, then the period's working days, then the rule table's standard."""
    if working_days_in_period is None:
        return period.working_days or rules.standard_working_days
    if isinstance(working_days_in_period, bool) or not isinstance(working_days_in_period, int):
        raise PayrollInputError(
            f"working_days_in_period must be an int, got {describe(working_days_in_period)}"
        )
    if working_days_in_period <= 0:
        raise PayrollInputError(
            f"working_days_in_period must be > 0, got {working_days_in_period}"
        )
    return working_days_in_period


def compute_payroll(
    employee_profile: Union[EmployeeProfile, Mapping[str, Any]],
    pay_period: Union[PayPeriod, Mapping[str, Any]],
    working_days_in_period: Optional[int] = None,
    attendance_facts: Union[AttendanceFacts, Mapping[str, Any], None] = None,
    *,
    adjustments: Union[PayAdjustments, Mapping[str, Any], None] = None,
    rules: Optional[PayrollRules] = None,
) -> PayrollResult:
    """Compute payroll for one employee and one period.

    Args:
        employee_profile: EmployeeProfile or dict
        pay_period: PayPeriod or dict
        working_days_in_period: Working days; defaults to the period's, then the rule table's
        attendance_facts: AttendanceFacts or dict; None means full attendance
        adjustments: Ad-hoc deductions and allowances
        rules: Rule table to apply; resolved from the period's pay date when omitted

    Returns:
        PayrollResult. Anomalies are reported in its warnings and errors.

    Raises:
        PayrollInputError: If an input violates its invariants.
    """
    employee = coerce_input(EmployeeProfile, employee_profile, "employee profile")
    period = coerce_input(PayPeriod, pay_period, "pay period")
    attendance = None
    if attendance_facts is not None:
        attendance = coerce_input(AttendanceFacts, attendance_facts, "attendance facts")
    if adjustments is None:
        adjustments = PayAdjustments()
    else:
        adjustments = coerce_input(PayAdjustments, adjustments, "adjustments")

    if rules is None:
        rules = resolve_payroll_rules(period.rules_date)

    working_days = resolve_working_days(working_days_in_period, period, rules)
    logger.debug(
        f"Computing payroll for employee {employee.id}, period {period.year}-{period.month:02d} "
        f"#{period.period_number}, {working_days} working days, rules {rules.version}"
    )

    warnings = []
    rates = resolve_rates(employee, rules.standard_working_days)
    for field in rates.defaulted_fields:
        warnings.append(f"{field} missing from profile; treated as 0")

    attendance, attendance_warnings = normalize_attendance(attendance, working_days)
    warnings.extend(attendance_warnings)

    basic = calculate_basic_pay(rates.monthly_rate, rates.daily_rate, working_days, attendance)

    allowances = calculate_allowances(
        AllowanceContext(
            employee=employee,
            rates=rates,
            basic_pay=basic.basic_pay,
            days_present=basic.days_present,
            rules=rules.allowances,
        ),
        adjustments.allowances,
    )

    deductions = calculate_deductions(
        basic_pay=basic.basic_pay,
        gross_pay=basic.basic_pay + allowances.total,
        non_taxable_allowances=allowances.non_taxable_total,
        rules=rules,
        adhoc=adjustments.deductions,
    )

    return aggregate(
        employee=employee,
        period=period,
        rules_version=rules.version,
        rates=rates,
        basic=basic,
        allowances=allowances,
        deductions=deductions,
        warnings=warnings,
    )


def compute_request(request: PayrollRequest, rules: Optional[PayrollRules] = None) -> PayrollResult:
    """Compute payroll for a PayrollRequest (one batch entry)."""
    return compute_payroll(
        request.employee,
        request.period,
        request.working_days,
        request.attendance,
        adjustments=request.adjustments,
        rules=rules,
    )
