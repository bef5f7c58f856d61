"""Payslip breakdown: a presentation structure projected from a PayrollResult.

Only copies and labels figures; nothing is recomputed here.
"""

import calendar

from ..money import format_days, format_peso
from ..schemas import PayrollResult
from .schemas import (
    AttendanceSection,
    EmployeeSection,
    ItemsSection,
    NotesSection,
    PayslipBreakdown,
    PeriodSection,
    SalarySection,
    SummarySection,
)

PERIOD_HALVES = {1: "1st half", 2: "2nd half"}


def period_label(result: PayrollResult) -> str:
    """e.g. 'March 2024 (1st half)'."""
    period = result.period
    return f"{calendar.month_name[period.month]} {period.year} ({PERIOD_HALVES[period.period_number]})"


def proration_detail(result: PayrollResult) -> str:
    days = result.days_present
    if result.basic_pay_override_applied:
        return f"Override: {format_peso(result.prorated_basic_pay)} set by payroll staff"
    if days == result.working_days:
        return f"Full salary ({format_days(days)}/{result.working_days} days)"
    return (
        f"Prorated: {format_peso(result.monthly_rate)} x "
        f"{format_days(days)}/{result.working_days} days"
    )


def generate_breakdown(result: PayrollResult) -> PayslipBreakdown:
    """Project a PayrollResult into a hierarchical payslip structure."""
    period = result.period
    lwop_detail = None
    if result.days_lwop > 0:
        lwop_detail = (
            f"{format_days(result.days_lwop)} LWOP days x {format_peso(result.daily_rate)} daily rate"
        )

    return PayslipBreakdown(
        employee=EmployeeSection(
            id=result.employee_id,
            name=result.employee_name,
            employee_number=result.employee_number,
        ),
        period=PeriodSection(
            label=period_label(result),
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
            pay_date=period.pay_date.isoformat() if period.pay_date else None,
            rules_version=result.rules_version,
        ),
        attendance=AttendanceSection(
            working_days=result.working_days,
            days_present=result.days_present,
            days_paid_leave=result.days_paid_leave,
            days_lwop=result.days_lwop,
        ),
        salary=SalarySection(
            monthly_rate=result.monthly_rate,
            daily_rate=result.daily_rate,
            prorated_basic_pay=result.prorated_basic_pay,
            proration=proration_detail(result),
            lwop_deduction=result.lwop_deduction,
            lwop_detail=lwop_detail,
            basic_pay=result.basic_pay,
        ),
        allowances=ItemsSection(items=result.allowances, subtotal=result.total_allowances),
        deductions=ItemsSection(items=result.deductions, subtotal=result.total_deductions),
        employer_contributions=ItemsSection(
            items=result.employer_contributions,
            subtotal=result.total_employer_contributions,
        ),
        summary=SummarySection(
            basic_pay=result.basic_pay,
            total_allowances=result.total_allowances,
            gross_pay=result.gross_pay,
            taxable_income=result.taxable_income,
            total_deductions=result.total_deductions,
            net_pay=result.net_pay,
        ),
        notes=NotesSection(warnings=result.warnings, errors=result.errors),
    )
