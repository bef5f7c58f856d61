"""Basic pay: proration by days present, then the LWOP penalty.

    prorated = monthly_rate * days_present / working_days
    lwop     = daily_rate * days_lwop
    basic    = max(0, prorated - lwop)

LWOP is a penalty applied in addition to proration, not a substitute for it.
Paid-leave days are carried for the payslip only; callers count paid leave
in days_present when it should be paid.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from ..exceptions import PayrollInputError
from ..money import ZERO, format_days, q2
from ..schemas import AttendanceFacts
from .schemas import BasicPayResult

logger = logging.getLogger(__name__)


def resolve_days_present(attendance: Optional[AttendanceFacts], working_days: int) -> Decimal:
    """Days present, defaulting to full attendance when not supplied."""
    if attendance is None or attendance.days_present is None:
        return Decimal(working_days)
    return attendance.days_present


def normalize_attendance(
    attendance: Optional[AttendanceFacts], working_days: int
) -> Tuple[AttendanceFacts, List[str]]:
    """Resolve the days-present default and clamp attendance that overflows the period.

    A supplied days_present + days_lwop above working days is clamped with a
    warning: LWOP to working days, then days present to what remains. A
    defaulted days_present is full attendance and is not reduced by LWOP.

    Returns:
        Tuple of (attendance with days_present set, warnings)
    """
    if working_days <= 0:
        raise PayrollInputError(f"working_days must be > 0, got {working_days}")

    warnings = []
    facts = attendance or AttendanceFacts()
    supplied = facts.days_present is not None
    days_present = resolve_days_present(attendance, working_days)
    lwop = facts.days_lwop
    available = Decimal(working_days)

    if lwop > available or (supplied and days_present + lwop > available):
        warnings.append(
            f"attendance exceeds working days: {format_days(days_present)} present + "
            f"{format_days(lwop)} LWOP > {working_days} working days; clamped"
        )
        logger.warning(f"Attendance exceeds {working_days} working days; clamping")
        lwop = min(lwop, available)
        if supplied:
            days_present = min(days_present, available - lwop)

    normalized = facts.model_copy(update={"days_present": days_present, "days_lwop": lwop})
    return normalized, warnings


def calculate_basic_pay(
    monthly_rate: Decimal,
    daily_rate: Decimal,
    working_days: int,
    attendance: Optional[AttendanceFacts] = None,
) -> BasicPayResult:
    """Compute basic pay for the period.

    Attendance above working days is not clamped here; callers that need the
    clamp run normalize_attendance first (the engine does).

    Raises:
        PayrollInputError: If working_days <= 0.
    """
    if working_days <= 0:
        raise PayrollInputError(f"working_days must be > 0, got {working_days}")

    warnings = []
    facts = attendance or AttendanceFacts()
    days_present = resolve_days_present(attendance, working_days)

    if facts.basic_pay_override is not None:
        prorated = q2(facts.basic_pay_override)
        warnings.append(f"basic pay override applied: {prorated}")
    else:
        prorated = q2(monthly_rate * days_present / working_days)

    if days_present == 0:
        warnings.append("zero attendance for period")

    lwop_deduction = ZERO
    if facts.days_lwop > 0:
        lwop_deduction = q2(daily_rate * facts.days_lwop)
        if lwop_deduction > prorated:
            warnings.append(
                f"LWOP deduction ({lwop_deduction}) exceeds prorated basic pay ({prorated}); "
                f"basic pay floored at 0"
            )

    basic_pay = max(prorated - lwop_deduction, ZERO)
    logger.debug(
        f"Basic pay: prorated={prorated} ({format_days(days_present)}/{working_days} days) "
        f"lwop={lwop_deduction} basic={basic_pay}"
    )

    return BasicPayResult(
        working_days=working_days,
        days_present=days_present,
        days_paid_leave=facts.days_paid_leave,
        days_lwop=facts.days_lwop,
        prorated_basic_pay=prorated,
        lwop_deduction=lwop_deduction,
        basic_pay=basic_pay,
        override_applied=facts.basic_pay_override is not None,
        warnings=tuple(warnings),
    )
