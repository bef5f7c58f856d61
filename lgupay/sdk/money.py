"""Currency helpers shared by every payroll stage.

All peso amounts are Decimal values rounded ROUND_HALF_UP to centavos.
Rates and day counts are kept unrounded; only money is quantized, once per
line item and once per derived total.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, Iterable

from pydantic import BeforeValidator

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Coerce a number-like value to Decimal without binary float artifacts.

    Floats (as produced by YAML and JSON parsers) go through their shortest
    repr, so 0.0275 becomes Decimal("0.0275") rather than its binary expansion.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            raise ValueError(f"not a valid number: {value!r}")
    raise ValueError(f"expected a number, got {type(value).__name__}")


def _coerce(value: Any) -> Any:
    if value is None:
        return value
    return to_decimal(value)


# Pydantic field type: accepts int/float/str/Decimal, stores Decimal.
Amount = Annotated[Decimal, BeforeValidator(_coerce)]


def q2(value: Any) -> Decimal:
    """Round to centavos, half-up."""
    return to_decimal(value).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts and round the result to centavos."""
    return q2(sum(amounts, ZERO))


def format_peso(amount: Decimal) -> str:
    """Format as ₱1,234.56 (negative as -₱1,234.56)."""
    amount = q2(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}₱{abs(amount):,.2f}"


def format_percent(rate: Decimal) -> str:
    """Format a fraction as a percentage: Decimal('0.25') -> '25%'."""
    return f"{(to_decimal(rate) * 100).normalize():f}%"


def format_days(days: Decimal) -> str:
    """Format a day count without trailing zeros: 15.0 -> '15', 1.5 -> '1.5'."""
    return f"{to_decimal(days).normalize():f}"
