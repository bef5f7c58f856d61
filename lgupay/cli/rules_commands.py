"""Payroll rule table commands."""

import json

import click
from rich.console import Console

from lgupay.sdk import (
    PayrollError,
    get_rules_dir,
    load_all_payroll_rules,
    load_payroll_rules,
)

from .renderers import render_rules


@click.group()
def rules():
    """Inspect payroll rule tables (rates, caps, tax brackets)."""
    pass


@rules.command("list")
def rules_list():
    """List available rule tables with their effective dates."""
    try:
        tables = load_all_payroll_rules()
    except PayrollError as e:
        raise click.ClickException(str(e))

    click.echo(f"Rules directory: {get_rules_dir()}")
    for table in tables:
        line = f"  {table.version}  effective {table.effective_date}"
        if table.description:
            line += f"  {table.description}"
        click.echo(line)


@rules.command("show")
@click.argument("version", required=False)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def rules_show(version, output_format):
    """Show one rule table (default: the latest version)."""
    try:
        if version is None:
            table = load_all_payroll_rules()[-1]
        else:
            table = load_payroll_rules(version)
    except PayrollError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(table.model_dump(mode="json"), indent=2))
    else:
        render_rules(Console(width=120), table)
