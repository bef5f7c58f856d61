"""LGU Payroll CLI - Command-line interface for payroll computation."""

import json
from pathlib import Path
from typing import Any, Dict, List

import click
import yaml
from rich.console import Console

from lgupay import __version__
from lgupay.sdk import (
    PayrollError,
    compute_payroll,
    compute_payroll_batch,
    configure_logging,
    generate_breakdown,
    load_payroll_rules,
)

from .renderers import render_batch, render_payslip
from .rules_commands import rules as rules_group


def load_input_file(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON input file into a dict."""
    file_path = Path(path)
    try:
        with open(file_path, "r") as f:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {file_path.name}: {e}")
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {file_path.name}: {e}")

    if not isinstance(data, dict):
        raise click.ClickException(f"{file_path.name} must contain a mapping at the top level")
    return data


def build_batch_requests(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Expand a batch file into one request dict per employee.

    The top-level period and working_days apply to every entry that does not
    set its own.
    """
    entries = data.get("employees")
    if not isinstance(entries, list) or not entries:
        raise click.ClickException("Batch input needs a non-empty 'employees' list")

    requests = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise click.ClickException(f"Each 'employees' entry must be a mapping, got {entry!r}")
        request = dict(entry)
        if "period" not in request and "period" in data:
            request["period"] = data["period"]
        if "working_days" not in request and data.get("working_days") is not None:
            request["working_days"] = data["working_days"]
        requests.append(request)
    return requests


@click.group()
@click.version_option(version=__version__, prog_name="lgu-payroll")
@click.option("--verbose", "-v", is_flag=True, help="Log computation stages at DEBUG level.")
def cli(verbose):
    """LGU Payroll - Payroll computation for local-government units.

    Computes basic pay, allowances, GSIS/Pag-IBIG/PhilHealth contributions,
    withholding tax and net pay from employee, period and attendance facts.

    Payroll rules are loaded from (in order):

    \b
    1. LGU_PAYROLL_RULES_PATH environment variable
    2. payroll-rules/ shipped with the package

    Run 'lgu-payroll rules list' to see available rule tables.
    """
    configure_logging("DEBUG" if verbose else None)


cli.add_command(rules_group)


@cli.command("compute")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--rules-version", help="Rule table version to apply (default: by pay date)")
def compute(input_file, output_format, rules_version):
    """Compute one employee's payroll from a YAML or JSON file.

    The file holds 'employee' and 'period' mappings, plus optional
    'attendance', 'working_days' and 'adjustments'.

    \b
    Examples:
      lgu-payroll compute juan-2024-03.yaml
      lgu-payroll compute juan-2024-03.yaml --format json
      lgu-payroll compute juan-2024-03.yaml --rules-version 2018
    """
    data = load_input_file(input_file)
    for key in ("employee", "period"):
        if key not in data:
            raise click.ClickException(f"Input is missing '{key}'")

    try:
        rules = load_payroll_rules(rules_version) if rules_version else None
        result = compute_payroll(
            data["employee"],
            data["period"],
            data.get("working_days"),
            data.get("attendance"),
            adjustments=data.get("adjustments"),
            rules=rules,
        )
    except PayrollError as e:
        raise click.ClickException(str(e))

    breakdown = generate_breakdown(result)
    if output_format == "json":
        click.echo(json.dumps(breakdown.to_dict(), indent=2))
    else:
        render_payslip(Console(width=120), breakdown)


@cli.command("batch")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True,
              help="Compute employees on a thread pool of this size.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--rules-version", help="Rule table version to apply (default: by pay date)")
def batch(input_file, workers, output_format, rules_version):
    """Compute payroll for every employee listed in a file.

    The file holds a shared 'period' (and optional 'working_days') and an
    'employees' list; each entry has 'employee' and optional 'attendance'
    and 'adjustments'.

    Exits with status 1 when any employee failed.
    """
    data = load_input_file(input_file)
    requests = build_batch_requests(data)

    try:
        rules = load_payroll_rules(rules_version) if rules_version else None
        result = compute_payroll_batch(requests, max_workers=workers, rules=rules)
    except PayrollError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        render_batch(Console(width=140), result)

    if result.failures:
        raise SystemExit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
