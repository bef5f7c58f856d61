"""Rich renderers for CLI text output."""

from .payslip_renderer import render_batch, render_payslip, render_rules

__all__ = ["render_batch", "render_payslip", "render_rules"]
