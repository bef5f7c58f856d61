"""Exceptions raised by the payroll SDK.

Business anomalies (zero attendance, clamped net pay) are never raised; they
travel inside PayrollResult as warnings and PayrollAnomaly records. The
exceptions here are reserved for malformed inputs and rule tables.
"""

from typing import Any

from pydantic import ValidationError


class PayrollError(Exception):
    """Base class for payroll SDK errors."""


class PayrollInputError(PayrollError, ValueError):
    """Raised when caller-supplied facts violate an input invariant.

    Examples: negative salary, period start after end, working days <= 0,
    negative day counts.
    """


class RulesNotFoundError(PayrollError):
    """Raised when the rule directory or a requested rule table is missing."""


class RulesValidationError(PayrollError):
    """Raised when a rule table fails schema validation."""


def format_validation_error(e: ValidationError) -> str:
    """Flatten a pydantic ValidationError into 'loc: msg; loc: msg'."""
    errors = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"]) or "<root>"
        errors.append(f"{loc}: {err['msg']}")
    return "; ".join(errors)


def input_error(what: str, e: ValidationError) -> PayrollInputError:
    """Build a PayrollInputError describing why `what` failed validation."""
    return PayrollInputError(f"Invalid {what}: {format_validation_error(e)}")


def describe(value: Any) -> str:
    """Short type description used in input error messages."""
    return type(value).__name__
