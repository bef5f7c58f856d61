"""LGU Payroll SDK - payroll computation and rule tables."""

from .config import (
    configure_logging,
    get_rules_dir,
    list_rule_versions,
    load_all_payroll_rules,
    load_payroll_rules,
    resolve_payroll_rules,
)

from .exceptions import (
    PayrollError,
    PayrollInputError,
    RulesNotFoundError,
    RulesValidationError,
)

from .schemas import (
    STANDARD_WORKING_DAYS,
    AdjustmentRequest,
    AllowanceCode,
    AttendanceFacts,
    DeductionCode,
    EmployeeProfile,
    LineItem,
    PayAdjustments,
    PayPeriod,
    PayrollAnomaly,
    PayrollRequest,
    PayrollResult,
)

from .taxes import PayrollRules

from .payroll import (
    BatchResult,
    PayslipBreakdown,
    compute_payroll,
    compute_payroll_batch,
    generate_breakdown,
)

__all__ = [
    # Config
    "configure_logging",
    "get_rules_dir",
    "list_rule_versions",
    "load_all_payroll_rules",
    "load_payroll_rules",
    "resolve_payroll_rules",
    "PayrollRules",
    # Exceptions
    "PayrollError",
    "PayrollInputError",
    "RulesNotFoundError",
    "RulesValidationError",
    # Schemas
    "STANDARD_WORKING_DAYS",
    "AdjustmentRequest",
    "AllowanceCode",
    "AttendanceFacts",
    "DeductionCode",
    "EmployeeProfile",
    "LineItem",
    "PayAdjustments",
    "PayPeriod",
    "PayrollAnomaly",
    "PayrollRequest",
    "PayrollResult",
    # Engine
    "compute_payroll",
    "compute_payroll_batch",
    "generate_breakdown",
    "BatchResult",
    "PayslipBreakdown",
]
