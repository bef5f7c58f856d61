"""LGU Payroll - payroll computation for Philippine local-government units."""

__version__ = "0.1.0"
