"""taxes - Withholding tax, mandatory contributions and their rule schemas.

Scope:
- BIR graduated withholding (monthly or annualised bracket tables)
- GSIS, Pag-IBIG, PhilHealth and EC fund shares
- Pydantic schemas for payroll-rules/*.yaml

Constraints:
- Pure calculation - rule tables are passed in, never loaded here
- Amounts are Decimal, rounded half-up to centavos

Usage:
    from lgupay.sdk.taxes import calc_withholding_tax, calc_gsis

    wtax = calc_withholding_tax(Decimal("36400.00"), rules.withholding_tax)
    gsis = calc_gsis(Decimal("40000.00"), rules.gsis)
"""

from .contributions import (
    calc_capped_contribution,
    calc_ec_fund,
    calc_gsis,
    calc_pagibig,
    calc_philhealth,
)
from .schemas import (
    AllowanceRules,
    CappedContributionRules,
    DailyAllowanceRules,
    EcFundRules,
    GsisRules,
    HazardClass,
    PayrollRules,
    TaxBracket,
    WithholdingTaxRules,
)
from .withholding import calc_taxable_income, calc_withholding_tax, select_bracket

__all__ = [
    # Withholding
    "calc_withholding_tax",
    "calc_taxable_income",
    "select_bracket",
    # Contributions
    "calc_gsis",
    "calc_pagibig",
    "calc_philhealth",
    "calc_capped_contribution",
    "calc_ec_fund",
    # Rules
    "PayrollRules",
    "AllowanceRules",
    "CappedContributionRules",
    "DailyAllowanceRules",
    "EcFundRules",
    "GsisRules",
    "HazardClass",
    "TaxBracket",
    "WithholdingTaxRules",
]
