"""Rate resolution: monthly and daily rates from an employee profile."""

import logging

from ..money import ZERO, q2
from ..schemas import STANDARD_WORKING_DAYS, EmployeeProfile
from .schemas import RateFacts

logger = logging.getLogger(__name__)


def resolve_rates(
    employee: EmployeeProfile, standard_working_days: int = STANDARD_WORKING_DAYS
) -> RateFacts:
    """Derive monthly and daily rates.

    An explicit positive daily rate on the profile wins; otherwise the daily
    rate is monthly salary / standard working days, rounded half-up. Absent
    monthly salary is treated as 0 and reported in defaulted_fields.
    """
    defaulted = []
    if employee.monthly_salary is None:
        monthly_rate = ZERO
        defaulted.append("monthly_salary")
    else:
        monthly_rate = q2(employee.monthly_salary)

    if employee.daily_rate is not None and employee.daily_rate > 0:
        daily_rate = q2(employee.daily_rate)
        source = "profile"
    else:
        daily_rate = q2(monthly_rate / standard_working_days)
        source = "derived"

    logger.debug(
        f"Rates for employee {employee.id}: monthly={monthly_rate} daily={daily_rate} ({source})"
    )
    return RateFacts(
        monthly_rate=monthly_rate,
        daily_rate=daily_rate,
        daily_rate_source=source,
        defaulted_fields=tuple(defaulted),
    )
