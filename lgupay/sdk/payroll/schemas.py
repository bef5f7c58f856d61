"""Schemas for intermediate payroll stage outputs, batches and breakdowns.

Stage outputs are frozen and carry their own warnings; the aggregator merges
them into the final PayrollResult.
"""

from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..money import ZERO, Amount
from ..schemas import LineItem, PayrollAnomaly, PayrollResult


# =============================================================================
# Stage Outputs
# =============================================================================


class RateFacts(BaseModel):
    """Monthly and daily rate derived from an employee profile."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    monthly_rate: Amount
    daily_rate: Amount
    daily_rate_source: Literal["profile", "derived"]
    defaulted_fields: Tuple[str, ...] = Field(
        default=(), description="Profile fields that were absent and defaulted"
    )


class BasicPayResult(BaseModel):
    """Basic pay for the period after proration and the LWOP penalty."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    working_days: int
    days_present: Amount
    days_paid_leave: Amount = Field(..., description="Reported paid leave; not part of proration")
    days_lwop: Amount
    prorated_basic_pay: Amount
    lwop_deduction: Amount
    basic_pay: Amount
    override_applied: bool = False
    warnings: Tuple[str, ...] = ()


class AllowanceResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    items: Tuple[LineItem, ...] = ()
    total: Amount = ZERO
    non_taxable_total: Amount = ZERO


class DeductionResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    items: Tuple[LineItem, ...] = ()
    total: Amount = ZERO
    taxable_income: Amount = ZERO
    employer_contributions: Tuple[LineItem, ...] = ()
    total_employer_contributions: Amount = ZERO
    warnings: Tuple[str, ...] = ()


# =============================================================================
# Batch Schemas
# =============================================================================


class BatchFailure(BaseModel):
    """An employee whose inputs were rejected during a batch run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., description="Position of the request in the batch")
    employee_id: Optional[Union[int, str]] = None
    error: str


class BatchSummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int
    successful: int
    failed: int
    total_gross_pay: Amount = ZERO
    total_deductions: Amount = ZERO
    total_net_pay: Amount = ZERO
    total_employer_contributions: Amount = ZERO
    with_warnings: Tuple[Union[int, str], ...] = ()
    with_errors: Tuple[Union[int, str], ...] = ()


class BatchResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    results: Tuple[PayrollResult, ...] = ()
    failures: Tuple[BatchFailure, ...] = ()
    summary: BatchSummary


# =============================================================================
# Breakdown (payslip presentation structure)
# =============================================================================


class EmployeeSection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Union[int, str]
    name: str
    employee_number: Optional[str] = None


class PeriodSection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    start_date: str
    end_date: str
    pay_date: Optional[str] = None
    rules_version: str


class AttendanceSection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    working_days: int
    days_present: Amount
    days_paid_leave: Amount = Field(..., description="Reported paid leave; not part of proration")
    days_lwop: Amount


class SalarySection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    monthly_rate: Amount
    daily_rate: Amount
    prorated_basic_pay: Amount
    proration: str = Field(..., description="How basic pay was prorated")
    lwop_deduction: Amount
    lwop_detail: Optional[str] = None
    basic_pay: Amount


class ItemsSection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    items: Tuple[LineItem, ...] = ()
    subtotal: Amount = ZERO


class SummarySection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    basic_pay: Amount
    total_allowances: Amount
    gross_pay: Amount
    taxable_income: Amount
    total_deductions: Amount
    net_pay: Amount


class NotesSection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    warnings: Tuple[str, ...] = ()
    errors: Tuple[PayrollAnomaly, ...] = ()


class PayslipBreakdown(BaseModel):
    """Hierarchical payslip view of a PayrollResult. Never recomputes figures."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee: EmployeeSection
    period: PeriodSection
    attendance: AttendanceSection
    salary: SalarySection
    allowances: ItemsSection
    deductions: ItemsSection
    employer_contributions: ItemsSection
    summary: SummarySection
    notes: NotesSection

    def to_dict(self) -> Dict:
        """JSON-ready dict (Decimals as strings, dates as ISO)."""
        return self.model_dump(mode="json")


def result_ids(results: List[PayrollResult], attr: str) -> Tuple[Union[int, str], ...]:
    """Employee ids of results whose `attr` ('warnings' or 'errors') is non-empty."""
    return tuple(r.employee_id for r in results if getattr(r, attr))
