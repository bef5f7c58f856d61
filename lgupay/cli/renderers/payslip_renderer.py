"""Rich renderers for payslips, batch runs and rule tables.

Transforms SDK results into formatted Rich tables. Figures are displayed as
computed; nothing is re-derived here.
"""

from decimal import Decimal
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lgupay.sdk import BatchResult, LineItem, PayrollRules, PayslipBreakdown
from lgupay.sdk.money import format_days, format_percent


def render_payslip(console: Console, breakdown: PayslipBreakdown) -> None:
    """Render a payslip breakdown as Rich tables.

    Args:
        console: Rich Console instance
        breakdown: Output of generate_breakdown()
    """
    for error in breakdown.notes.errors:
        console.print(Panel(
            f"[red]{error.message}[/red]",
            title=f"Error: {error.code}",
            border_style="red"
        ))

    for warning in breakdown.notes.warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    _render_header(console, breakdown)
    _render_payslip_table(console, breakdown)


def _render_header(console: Console, breakdown: PayslipBreakdown) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    employee = breakdown.employee
    label = employee.name or str(employee.id)
    if employee.employee_number:
        label += f" ({employee.employee_number})"
    table.add_row("Employee", label)
    table.add_row("Period", f"{breakdown.period.label}: {breakdown.period.start_date} to {breakdown.period.end_date}")
    if breakdown.period.pay_date:
        table.add_row("Pay Date", breakdown.period.pay_date)
    table.add_row("Rules", breakdown.period.rules_version)

    attendance = breakdown.attendance
    days = f"{format_days(attendance.days_present)} present / {attendance.working_days} working"
    if attendance.days_paid_leave:
        days += f", {format_days(attendance.days_paid_leave)} paid leave"
    if attendance.days_lwop:
        days += f", [yellow]{format_days(attendance.days_lwop)} LWOP[/yellow]"
    table.add_row("Attendance", days)

    console.print(Panel(table, title="Payslip", border_style="dim"))


def _add_items(table: Table, items: Iterable[LineItem]) -> None:
    for item in items:
        table.add_row(f"  {item.name}", f"[dim]{item.basis}[/dim]", _fmt(item.amount))


def _render_payslip_table(console: Console, breakdown: PayslipBreakdown) -> None:
    salary = breakdown.salary
    summary = breakdown.summary

    table = Table(box=box.ROUNDED)
    table.add_column("", style="bold", min_width=28)
    table.add_column("Basis", min_width=30)
    table.add_column("Amount", justify="right", min_width=14)

    table.add_row("[bold]SALARY[/bold]", "", "")
    table.add_row("  Monthly Rate", f"[dim]daily rate {_fmt(salary.daily_rate)}[/dim]", _fmt(salary.monthly_rate))
    table.add_row("  Prorated Basic Pay", f"[dim]{salary.proration}[/dim]", _fmt(salary.prorated_basic_pay))
    if salary.lwop_deduction:
        table.add_row("  LWOP Deduction", f"[dim]{salary.lwop_detail or ''}[/dim]", f"-{_fmt(salary.lwop_deduction)}")
    table.add_row("  Basic Pay", "", _fmt(salary.basic_pay))
    table.add_row("", "", "")

    table.add_row("[bold]ALLOWANCES[/bold]", "", "")
    _add_items(table, breakdown.allowances.items)
    table.add_row("  [dim]Total Allowances[/dim]", "", f"[dim]{_fmt(breakdown.allowances.subtotal)}[/dim]")
    table.add_row("", "", "")

    table.add_row("[bold]GROSS PAY[/bold]", "", f"[bold]{_fmt(summary.gross_pay)}[/bold]")
    table.add_row("Taxable Income", "", _fmt(summary.taxable_income), style="dim")
    table.add_row("", "", "")

    table.add_row("[bold]DEDUCTIONS[/bold]", "", "")
    _add_items(table, breakdown.deductions.items)
    table.add_row("  [dim]Total Deductions[/dim]", "", f"[dim]{_fmt(breakdown.deductions.subtotal)}[/dim]")
    table.add_row("", "", "")

    net_style = "bold red" if breakdown.notes.errors else "bold green"
    table.add_row("[bold]NET PAY[/bold]", "", f"[{net_style}]{_fmt(summary.net_pay)}[/{net_style}]")

    console.print(table)

    if breakdown.employer_contributions.items:
        employer = Table(title="Employer Contributions (not deducted)", box=box.SIMPLE)
        employer.add_column("", min_width=28)
        employer.add_column("Basis", min_width=30)
        employer.add_column("Amount", justify="right", min_width=14)
        _add_items(employer, breakdown.employer_contributions.items)
        employer.add_row("  [dim]Total[/dim]", "", f"[dim]{_fmt(breakdown.employer_contributions.subtotal)}[/dim]")
        console.print(employer)


def render_batch(console: Console, batch: BatchResult) -> None:
    """Render a batch run as a register table plus a summary panel."""
    table = Table(title="Payroll Register", box=box.ROUNDED)
    table.add_column("Employee", min_width=20)
    table.add_column("Basic", justify="right")
    table.add_column("Allowances", justify="right")
    table.add_column("Gross", justify="right")
    table.add_column("Deductions", justify="right")
    table.add_column("Net", justify="right", style="bold")
    table.add_column("Flags")

    for result in batch.results:
        flags = []
        if result.errors:
            flags.append(f"[red]{len(result.errors)} error(s)[/red]")
        if result.warnings:
            flags.append(f"[yellow]{len(result.warnings)} warning(s)[/yellow]")
        table.add_row(
            result.employee_name or str(result.employee_id),
            _fmt(result.basic_pay),
            _fmt(result.total_allowances),
            _fmt(result.gross_pay),
            _fmt(result.total_deductions),
            _fmt(result.net_pay),
            " ".join(flags),
        )

    for failure in batch.failures:
        table.add_row(
            f"[red]#{failure.index} {failure.employee_id or '?'}[/red]",
            "-", "-", "-", "-", "-",
            "[red]failed[/red]",
        )

    console.print(table)

    summary = batch.summary
    lines = [
        f"Computed: {summary.successful}/{summary.total}",
        f"Gross: {_fmt(summary.total_gross_pay)}",
        f"Deductions: {_fmt(summary.total_deductions)}",
        f"Net: {_fmt(summary.total_net_pay)}",
        f"Employer contributions: {_fmt(summary.total_employer_contributions)}",
    ]
    border = "red" if summary.failed else "green"
    console.print(Panel("\n".join(lines), title="Summary", border_style=border))

    for failure in batch.failures:
        console.print(f"[red]#{failure.index}[/red] {failure.error}")


def render_rules(console: Console, rules: PayrollRules) -> None:
    """Render one payroll rule table."""
    header = Table(show_header=False, box=None, padding=(0, 2))
    header.add_column("key", style="dim")
    header.add_column("value")
    header.add_row("Version", rules.version)
    header.add_row("Effective", rules.effective_date.isoformat())
    header.add_row("Working days", str(rules.standard_working_days))
    if rules.description:
        header.add_row("Description", rules.description)
    console.print(Panel(header, title="Payroll Rules", border_style="dim"))

    contributions = Table(title="Contributions", box=box.ROUNDED)
    contributions.add_column("Fund")
    contributions.add_column("Employee", justify="right")
    contributions.add_column("Employer", justify="right")
    contributions.add_column("Cap", justify="right")
    contributions.add_row(
        "GSIS", format_percent(rules.gsis.personal_share_rate),
        format_percent(rules.gsis.government_share_rate), "-",
    )
    for name, section in (("Pag-IBIG", rules.pagibig), ("PhilHealth", rules.philhealth)):
        contributions.add_row(
            name, format_percent(section.rate),
            "matches" if section.employer_matches else "-", _fmt(section.cap),
        )
    contributions.add_row("EC Fund", "-", _fmt(rules.ec_fund.amount), "-")
    console.print(contributions)

    brackets = Table(title=f"Withholding Tax ({rules.withholding_tax.period})", box=box.ROUNDED)
    brackets.add_column("Over", justify="right")
    brackets.add_column("Base Tax", justify="right")
    brackets.add_column("Rate", justify="right")
    for bracket in rules.withholding_tax.brackets:
        brackets.add_row(_fmt(bracket.over), _fmt(bracket.base_tax), format_percent(bracket.rate))
    console.print(brackets)

    allowances = rules.allowances
    table = Table(title="Allowances", box=box.ROUNDED)
    table.add_column("Allowance")
    table.add_column("Amount", justify="right")
    table.add_column("Eligibility")
    table.add_column("Taxable")
    table.add_row("PERA", _fmt(allowances.pera.amount), "all employees", _yes(allowances.pera.taxable))
    table.add_row("RATA", "profile", "profile carries an amount", _yes(allowances.rata.taxable))
    for hazard_class in allowances.hazard.classes:
        table.add_row(
            "Hazard", f"{format_percent(hazard_class.rate)} of basic",
            ", ".join(hazard_class.keywords), _yes(allowances.hazard.taxable),
        )
    for name, daily in (("Subsistence", allowances.subsistence), ("Laundry", allowances.laundry)):
        if daily is not None:
            table.add_row(
                name, f"{_fmt(daily.daily_rate, places=3)}/day",
                ", ".join(daily.keywords) or "all employees", _yes(daily.taxable),
            )
    console.print(table)


def _yes(flag: bool) -> str:
    return "yes" if flag else "no"


def _fmt(amount: Optional[Decimal], places: int = 2) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"₱{amount:,.{places}f}"
