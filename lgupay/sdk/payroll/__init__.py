"""payroll - Payroll calculation stages, engine, batch runs and payslip breakdowns.

Scope:
- Rate resolution (rates.py)
- Basic pay with proration and LWOP (basic_pay.py)
- Pluggable allowance rules (allowances.py)
- Mandatory contributions, withholding tax, ad-hoc deductions (deductions.py)
- Totals and the non-negative net pay guard (aggregator.py)
- Stage orchestration (engine.py), batch fan-out (batch.py)
- Payslip presentation structure (breakdown.py)

Constraints:
- Pure computation - rule tables are passed in or resolved once per call
- No clock, no randomness: identical inputs give identical results
- Anomalies are data (warnings, PayrollAnomaly), never exceptions

Usage:
    from lgupay.sdk.payroll import compute_payroll, generate_breakdown

    result = compute_payroll(
        {"id": 7, "name": "Juan Dela Cruz", "monthly_salary": 30000},
        {"year": 2024, "month": 3, "start_date": "2024-03-01", "end_date": "2024-03-31"},
        working_days_in_period=22,
        attendance_facts={"days_present": 20, "days_lwop": 2},
    )
    breakdown = generate_breakdown(result)
"""

from .allowances import (
    ALLOWANCE_RULES,
    AllowanceContext,
    allowance_rule,
    calculate_allowances,
    matches_keywords,
)
from .aggregator import NEGATIVE_NET_PAY, aggregate, merge_warnings
from .basic_pay import calculate_basic_pay, normalize_attendance
from .batch import compute_payroll_batch
from .breakdown import generate_breakdown
from .deductions import calculate_deductions
from .engine import compute_payroll, compute_request
from .rates import resolve_rates
from .schemas import (
    AllowanceResult,
    BasicPayResult,
    BatchFailure,
    BatchResult,
    BatchSummary,
    DeductionResult,
    PayslipBreakdown,
    RateFacts,
)

__all__ = [
    # Engine
    "compute_payroll",
    "compute_request",
    "compute_payroll_batch",
    "generate_breakdown",
    # Stages
    "resolve_rates",
    "normalize_attendance",
    "calculate_basic_pay",
    "calculate_allowances",
    "calculate_deductions",
    "aggregate",
    "merge_warnings",
    # Allowance rules
    "ALLOWANCE_RULES",
    "AllowanceContext",
    "allowance_rule",
    "matches_keywords",
    "NEGATIVE_NET_PAY",
    # Schemas
    "RateFacts",
    "BasicPayResult",
    "AllowanceResult",
    "DeductionResult",
    "BatchFailure",
    "BatchResult",
    "BatchSummary",
    "PayslipBreakdown",
]
