"""Pydantic schemas for payroll inputs and results.

Inputs (EmployeeProfile, PayPeriod, AttendanceFacts, PayAdjustments) arrive
from the employee directory and attendance services as plain dicts and are
validated here. Results (LineItem, PayrollAnomaly, PayrollResult) are frozen
so a computed payroll cannot be edited after the fact.
"""

from datetime import date
from enum import Enum
from typing import Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .money import ZERO, Amount

STANDARD_WORKING_DAYS = 22


class AllowanceCode(str, Enum):
    PERA = "PERA"
    RATA = "RATA"
    HAZARD = "HAZARD"
    SUBSISTENCE = "SUBSISTENCE"
    LAUNDRY = "LAUNDRY"
    CUSTOM = "CUSTOM"


class DeductionCode(str, Enum):
    GSIS = "GSIS"
    PAGIBIG = "PAGIBIG"
    PHILHEALTH = "PHILHEALTH"
    WTAX = "WTAX"
    LOAN = "LOAN"
    OTHER = "OTHER"
    EC = "EC"


LineCategory = Literal["allowance", "mandatory", "tax", "loan", "adjustment", "employer"]


# =============================================================================
# Input Schemas
# =============================================================================


class EmployeeProfile(BaseModel):
    """Compensation profile of one employee, as held by the employee directory."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Union[int, str] = Field(..., description="Employee record identifier")
    name: str = Field(default="", description="Display name")
    employee_number: Optional[str] = None
    monthly_salary: Optional[Amount] = Field(
        default=None, ge=0, description="Monthly salary; absent is treated as 0"
    )
    daily_rate: Optional[Amount] = Field(
        default=None, ge=0, description="Explicit daily rate; derived from salary when absent"
    )
    rata_amount: Optional[Amount] = Field(
        default=None, ge=0, description="Representation and transportation allowance"
    )
    department: Optional[str] = None
    position: Optional[str] = None
    classification: Optional[str] = None


class PayPeriod(BaseModel):
    """A payroll period. Dates are inclusive."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Optional[Union[int, str]] = None
    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)
    period_number: int = Field(default=1, ge=1, le=2, description="1 = first half, 2 = second half")
    start_date: date
    end_date: date
    pay_date: Optional[date] = None
    working_days: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_dates(self) -> "PayPeriod":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date ({self.start_date}) is after end_date ({self.end_date})"
            )
        return self

    @property
    def rules_date(self) -> date:
        """Date used to select the payroll rule table."""
        return self.pay_date or self.end_date


class AttendanceFacts(BaseModel):
    """Attendance and leave facts for one employee and period.

    Omitting the whole object, or just days_present, means full attendance.
    LWOP is charged on top of that at the daily rate.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    days_present: Optional[Amount] = Field(default=None, ge=0)
    days_lwop: Amount = Field(default=ZERO, ge=0, description="Leave-without-pay days")
    days_paid_leave: Amount = Field(
        default=ZERO, ge=0, description="Paid leave, reported only; count it in days_present to pay it"
    )
    basic_pay_override: Optional[Amount] = Field(
        default=None, ge=0, description="Basic pay set by payroll staff; replaces proration"
    )


class AdjustmentRequest(BaseModel):
    """Ad-hoc deduction (loan, billing) or allowance passed through as-is."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: Optional[str] = Field(
        default=None, min_length=1, description="Defaults to CUSTOM, LOAN or OTHER by kind"
    )
    name: str = Field(..., min_length=1)
    amount: Amount = Field(..., ge=0)
    basis: Optional[str] = None
    category: Literal["loan", "adjustment"] = Field(
        default="loan", description="Deductions only"
    )
    taxable: bool = Field(default=True, description="Allowances only")


class PayAdjustments(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    deductions: Tuple[AdjustmentRequest, ...] = ()
    allowances: Tuple[AdjustmentRequest, ...] = ()


class PayrollRequest(BaseModel):
    """One employee's inputs for a batch run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee: EmployeeProfile
    period: PayPeriod
    working_days: Optional[int] = Field(default=None, gt=0)
    attendance: Optional[AttendanceFacts] = None
    adjustments: PayAdjustments = PayAdjustments()


# =============================================================================
# Result Schemas
# =============================================================================


class LineItem(BaseModel):
    """Single allowance, deduction or employer-contribution line."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str
    name: str
    amount: Amount
    basis: str = Field(..., description="Human-readable explanation of the figure")
    category: LineCategory
    taxable: bool = False


class PayrollAnomaly(BaseModel):
    """An error attached to a figure, e.g. net pay clamped at zero."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str
    message: str
    details: Dict[str, Amount] = Field(default_factory=dict)


class PayrollResult(BaseModel):
    """Itemized payroll for one employee and period. Internally coherent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: Union[int, str]
    employee_name: str = ""
    employee_number: Optional[str] = None
    period: PayPeriod
    rules_version: str

    working_days: int
    days_present: Amount
    days_paid_leave: Amount
    days_lwop: Amount

    monthly_rate: Amount
    daily_rate: Amount
    prorated_basic_pay: Amount = Field(..., description="Basic pay before the LWOP deduction")
    basic_pay_override_applied: bool = False
    lwop_deduction: Amount
    basic_pay: Amount

    allowances: Tuple[LineItem, ...] = ()
    total_allowances: Amount
    deductions: Tuple[LineItem, ...] = ()
    total_deductions: Amount
    employer_contributions: Tuple[LineItem, ...] = ()
    total_employer_contributions: Amount = ZERO

    gross_pay: Amount
    taxable_income: Amount
    net_pay: Amount = Field(..., ge=0)

    warnings: Tuple[str, ...] = ()
    errors: Tuple[PayrollAnomaly, ...] = ()

    @model_validator(mode="after")
    def check_coherence(self) -> "PayrollResult":
        """Validate the gross and net identities."""
        errors = []

        if self.gross_pay != self.basic_pay + self.total_allowances:
            errors.append(
                f"gross_pay ({self.gross_pay}) != basic_pay + total_allowances "
                f"({self.basic_pay + self.total_allowances})"
            )

        if sum((i.amount for i in self.allowances), ZERO) != self.total_allowances:
            errors.append("total_allowances != sum of allowance items")

        if sum((i.amount for i in self.deductions), ZERO) != self.total_deductions:
            errors.append("total_deductions != sum of deduction items")

        unclamped = self.gross_pay - self.total_deductions
        if self.net_pay != max(unclamped, ZERO):
            errors.append(
                f"net_pay ({self.net_pay}) != max(0, gross_pay - total_deductions) ({unclamped})"
            )
        if unclamped < 0 and not self.errors:
            errors.append("net pay was clamped but no error explains it")

        if errors:
            raise ValueError("; ".join(errors))

        return self

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def allowance(self, code: str) -> Optional[LineItem]:
        """Find an allowance line by code."""
        return next((i for i in self.allowances if i.code == code), None)

    def deduction(self, code: str) -> Optional[LineItem]:
        """Find a deduction line by code."""
        return next((i for i in self.deductions if i.code == code), None)

    def employer_contribution(self, code: str) -> Optional[LineItem]:
        return next((i for i in self.employer_contributions if i.code == code), None)
