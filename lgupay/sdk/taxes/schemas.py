"""Pydantic schemas for payroll rule tables.

These schemas validate the payroll-rules/*.yaml files and provide typed access
to contribution rates and caps, the withholding tax brackets, and the
allowance amounts and eligibility keywords.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..money import Amount


class TaxBracket(BaseModel):
    """Single withholding tax bracket: base_tax + (income - over) * rate."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    over: Amount = Field(..., ge=0, description="Lower bound; tax applies to the excess over it")
    base_tax: Amount = Field(default=0, ge=0, description="Fixed tax at the lower bound")
    rate: Amount = Field(..., ge=0, le=1, description="Marginal rate as decimal")


class WithholdingTaxRules(BaseModel):
    """Graduated withholding table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    period: Literal["monthly", "annual"] = Field(
        default="monthly", description="Income basis the bracket bounds are expressed in"
    )
    brackets: tuple[TaxBracket, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_brackets(self) -> "WithholdingTaxRules":
        """Brackets must start at 0 and increase strictly, so every income maps to one."""
        errors = []
        if self.brackets[0].over != 0:
            errors.append(f"first bracket must start at 0, got {self.brackets[0].over}")
        for lower, upper in zip(self.brackets, self.brackets[1:]):
            if upper.over <= lower.over:
                errors.append(f"bracket bounds not increasing: {lower.over} then {upper.over}")
            if upper.base_tax < lower.base_tax:
                errors.append(f"base tax decreases at bracket over {upper.over}")
        if errors:
            raise ValueError("; ".join(errors))
        return self


class GsisRules(BaseModel):
    """GSIS retirement and life insurance shares, as fractions of basic pay."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    personal_share_rate: Amount = Field(..., ge=0, le=1, description="Employee share (deducted)")
    government_share_rate: Amount = Field(..., ge=0, le=1, description="Employer share (reported)")


class CappedContributionRules(BaseModel):
    """Contribution computed as a rate of gross pay with a monthly cap."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: Amount = Field(..., ge=0, le=1)
    cap: Amount = Field(..., ge=0, description="Maximum employee share per period")
    employer_matches: bool = Field(
        default=True, description="Employer share equals the employee share"
    )


class EcFundRules(BaseModel):
    """Employees' Compensation fund, employer-only."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: Amount = Field(..., ge=0)


class FixedAllowanceRules(BaseModel):
    """Flat allowance paid to every employee (PERA)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: Amount = Field(..., ge=0)
    taxable: bool = True


class RataRules(BaseModel):
    """Representation and transportation allowance; amount comes from the profile."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable: bool = True


class HazardClass(BaseModel):
    """One hazard-eligible classification and its rate of basic pay."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    rate: Amount = Field(..., ge=0, le=1)
    keywords: tuple[str, ...] = Field(..., min_length=1)


class HazardRules(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable: bool = True
    classes: tuple[HazardClass, ...] = ()


class DailyAllowanceRules(BaseModel):
    """Per-day-present allowance. Empty keywords grant it to every employee."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    daily_rate: Amount = Field(..., ge=0)
    taxable: bool = False
    keywords: tuple[str, ...] = Field(default=(), description="Restrict to matching classifications")


class AllowanceRules(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    pera: FixedAllowanceRules
    rata: RataRules = RataRules()
    hazard: HazardRules = HazardRules()
    subsistence: Optional[DailyAllowanceRules] = None
    laundry: Optional[DailyAllowanceRules] = None


class PayrollRules(BaseModel):
    """Complete rule table for one effective period."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = Field(..., min_length=1)
    effective_date: date
    description: str = ""
    standard_working_days: int = Field(default=22, gt=0)
    gsis: GsisRules
    pagibig: CappedContributionRules
    philhealth: CappedContributionRules
    ec_fund: EcFundRules
    withholding_tax: WithholdingTaxRules
    allowances: AllowanceRules
